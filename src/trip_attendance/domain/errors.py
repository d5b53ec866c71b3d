"""Domain error taxonomy."""


class TripAttendanceError(Exception):
    """Base exception for session and member operations."""


class ValidationError(TripAttendanceError):
    """Raised when input is missing or malformed."""


class NotFoundError(TripAttendanceError):
    """Raised when a session or member is absent or the session has expired."""


class ConflictError(TripAttendanceError):
    """Raised when a storage uniqueness constraint rejects a write."""


class StorageError(TripAttendanceError):
    """Raised when the backing store fails unexpectedly."""
