"""Trip session orchestration used by the HTTP layer and clients."""

import logging
from dataclasses import dataclass, replace
from datetime import timedelta

from trip_attendance.domain.errors import ValidationError
from trip_attendance.domain.members import Member, MemberStatus
from trip_attendance.domain.sessions import TripSession
from trip_attendance.domain.stats import AttendanceMode, AttendanceStats
from trip_attendance.services.members import MemberRegistry
from trip_attendance.services.sessions import SessionStore
from trip_attendance.services.stats import attendance_stats

_logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CreatedSession:
    """A new session and, when a leader was named, the leader's member record."""

    session: TripSession
    leader_member: Member | None


@dataclass(frozen=True)
class SessionSnapshot:
    """Session with its members in join order."""

    session: TripSession
    members: list[Member]


@dataclass
class TripService:
    """Composition root for session and member operations."""

    session_store: SessionStore
    member_registry: MemberRegistry

    def create_session(
        self,
        name: str,
        leader_name: str | None = None,
        leader_phone: str | None = None,
        duration_ms: int | None = None,
    ) -> CreatedSession:
        """Create a session and, if a leader is named, its leader member."""
        session = self.session_store.create(
            name,
            leader_name=leader_name,
            leader_phone=leader_phone,
            duration=_duration_from_ms(duration_ms),
        )
        _logger.info("Created session %s (%s)", session.id, session.short_id)
        if not leader_name or not leader_name.strip():
            return CreatedSession(session=session, leader_member=None)

        leader = self.member_registry.add_leader(
            session.id, leader_name, phone_number=leader_phone
        )
        self.session_store.set_leader_member_id(session.id, leader.id)
        linked = replace(session, leader_member_id=leader.id)
        return CreatedSession(session=linked, leader_member=leader)

    def resolve_short_code(self, short_code: str) -> TripSession:
        """Resolve a shareable short code to its live session."""
        return self.session_store.get_by_short_code(short_code)

    def get_session(self, session_id: str) -> TripSession:
        """Return a live session by id."""
        return self.session_store.get_by_id(session_id)

    def list_members(self, session_id: str) -> list[Member]:
        """Return the members of a live session in join order."""
        session = self.session_store.get_by_id(session_id)
        return self.member_registry.list(session.id)

    def join_session(
        self, session_id: str, name: str, phone_number: str | None = None
    ) -> Member:
        """Join a live session identified by its id."""
        session = self.session_store.get_by_id(session_id)
        return self.member_registry.add(session.id, name, phone_number)

    def join_by_short_code(
        self, short_code: str, name: str, phone_number: str | None = None
    ) -> Member:
        """Resolve the short code, then join the resolved session."""
        session = self.resolve_short_code(short_code)
        return self.join_session(session.id, name, phone_number)

    def update_member_status(
        self, session_id: str, member_id: str, status: str | MemberStatus
    ) -> Member:
        """Update a member's attendance status in a live session."""
        session = self.session_store.get_by_id(session_id)
        return self.member_registry.update_status(session.id, member_id, status)

    def get_session_with_members(self, short_code: str) -> SessionSnapshot:
        """Return the dashboard view of a session."""
        session = self.resolve_short_code(short_code)
        return SessionSnapshot(
            session=session, members=self.member_registry.list(session.id)
        )

    def delete_session(self, session_id: str) -> None:
        """Delete a live session together with its members."""
        session = self.session_store.get_by_id(session_id)
        self.member_registry.remove_all(session.id)
        self.session_store.delete(session.id)
        _logger.info("Deleted session %s", session.id)

    @staticmethod
    def stats(members: list[Member], mode: AttendanceMode) -> AttendanceStats:
        """Aggregate attendance counts under the given counting mode."""
        return attendance_stats(members, mode)


def _duration_from_ms(duration_ms: int | None) -> timedelta | None:
    if duration_ms is None:
        return None
    if isinstance(duration_ms, bool) or duration_ms <= 0:
        raise ValidationError("durationMs must be a positive number")
    try:
        return timedelta(milliseconds=duration_ms)
    except OverflowError as exc:
        raise ValidationError("durationMs is too large") from exc
