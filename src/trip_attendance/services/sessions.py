"""Session lifecycle: creation, expiry-filtered lookup and deletion."""

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta
from typing import Protocol

from trip_attendance.domain.errors import ConflictError, NotFoundError, ValidationError
from trip_attendance.domain.sessions import TripSession
from trip_attendance.services.identifiers import new_session_short_code

DEFAULT_SESSION_DURATION = timedelta(hours=24)
SHORT_CODE_ATTEMPTS = 3

_logger = logging.getLogger(__name__)


def utcnow() -> datetime:
    """Return the current time in UTC."""
    return datetime.now(tz=UTC)


class SessionRepository(Protocol):
    """Persistence interface for trip sessions."""

    def create_session(  # noqa: PLR0913
        self,
        short_id: str,
        name: str,
        leader_name: str | None,
        leader_phone: str | None,
        created_at: datetime,
        expires_at: datetime,
    ) -> TripSession:
        """Insert a session row and return it.

        Raises ConflictError when the short id is already taken.
        """

    def get_session(self, session_id: str) -> TripSession | None:
        """Return a session by id, expired or not."""

    def get_session_by_short_id(self, short_id: str) -> TripSession | None:
        """Return a session by short code, expired or not."""

    def set_leader_member_id(self, session_id: str, member_id: str) -> None:
        """Record the leader's member id on the session, if it still exists."""

    def delete_session(self, session_id: str) -> None:
        """Delete a session row."""


@dataclass
class SessionStore:
    """Lifecycle authority for sessions, applying lazy expiry on every read."""

    repository: SessionRepository
    default_duration: timedelta = DEFAULT_SESSION_DURATION
    clock: Callable[[], datetime] = field(default=utcnow)
    short_code_factory: Callable[[], str] = field(default=new_session_short_code)

    def create(
        self,
        name: str,
        leader_name: str | None = None,
        leader_phone: str | None = None,
        duration: timedelta | None = None,
    ) -> TripSession:
        """Create a session expiring after ``duration`` (24 hours by default)."""
        cleaned_name = name.strip() if name else ""
        if not cleaned_name:
            raise ValidationError("Session name is required")
        lifetime = self.default_duration if duration is None else duration
        if lifetime <= timedelta(0):
            raise ValidationError("Session duration must be positive")

        created_at = self.clock()
        try:
            expires_at = created_at + lifetime
        except OverflowError as exc:
            raise ValidationError("Session duration is too large") from exc
        attempt = 0
        while True:
            attempt += 1
            short_id = self.short_code_factory()
            try:
                return self.repository.create_session(
                    short_id=short_id,
                    name=cleaned_name,
                    leader_name=_clean_optional(leader_name),
                    leader_phone=_clean_optional(leader_phone),
                    created_at=created_at,
                    expires_at=expires_at,
                )
            except ConflictError:
                _logger.warning(
                    "Session short code collision (attempt %s/%s): %s",
                    attempt,
                    SHORT_CODE_ATTEMPTS,
                    short_id,
                )
                if attempt >= SHORT_CODE_ATTEMPTS:
                    raise

    def get_by_id(self, session_id: str) -> TripSession:
        """Return a live session by id."""
        return self._live(self.repository.get_session(session_id))

    def get_by_short_code(self, short_code: str) -> TripSession:
        """Return a live session by short code."""
        code = short_code.strip().upper()
        if not code:
            raise NotFoundError("Session not found")
        return self._live(self.repository.get_session_by_short_id(code))

    def set_leader_member_id(self, session_id: str, member_id: str) -> None:
        """Backfill the leader reference; a missing session is ignored."""
        if self.repository.get_session(session_id) is None:
            _logger.info("Skipping leader link for missing session %s", session_id)
            return
        self.repository.set_leader_member_id(session_id, member_id)

    def delete(self, session_id: str) -> None:
        """Delete a live session."""
        session = self.get_by_id(session_id)
        self.repository.delete_session(session.id)

    def _live(self, session: TripSession | None) -> TripSession:
        if session is None or session.is_expired(self.clock()):
            raise NotFoundError("Session not found")
        return session


def _clean_optional(value: str | None) -> str | None:
    if value is None:
        return None
    cleaned = value.strip()
    return cleaned or None
