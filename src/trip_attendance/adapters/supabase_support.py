"""Shared helpers for Supabase-backed repositories."""

import logging

from supabase import PostgrestAPIError

from trip_attendance.domain.errors import ConflictError, StorageError

UNIQUE_VIOLATION = "23505"
INVALID_TEXT_REPRESENTATION = "22P02"

_logger = logging.getLogger(__name__)


def execute(query, action: str) -> list[dict[str, object]]:  # type: ignore[no-untyped-def]
    """Run a PostgREST query and return its rows, translating API errors.

    Unique violations become ConflictError. Malformed identifiers (for example
    a non-UUID id) match no rows. Anything else is a StorageError.
    """
    try:
        response = query.execute()
    except PostgrestAPIError as exc:
        if exc.code == UNIQUE_VIOLATION:
            raise ConflictError(f"Failed to {action}: duplicate value") from exc
        if exc.code == INVALID_TEXT_REPRESENTATION:
            return []
        _logger.error("Supabase %s failed: code=%s %s", action, exc.code, exc.message)
        raise StorageError(f"Failed to {action}") from exc
    return list(response.data or [])

