"""Member registry scoped to a single live session."""

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import datetime
from typing import Protocol

from trip_attendance.domain.errors import ConflictError, NotFoundError, ValidationError
from trip_attendance.domain.members import Member, MemberRole, MemberStatus
from trip_attendance.services.sessions import utcnow

_logger = logging.getLogger(__name__)


class MemberRepository(Protocol):
    """Persistence interface for session members."""

    def list_members(self, session_id: str) -> list[Member]:
        """Return members of a session ordered by join time."""

    def find_member_by_name(self, session_id: str, name: str) -> Member | None:
        """Return the member whose name matches case-insensitively, if any."""

    def create_member(  # noqa: PLR0913
        self,
        session_id: str,
        name: str,
        phone_number: str | None,
        role: MemberRole,
        status: MemberStatus,
        joined_at: datetime,
    ) -> Member:
        """Insert a member row and return it.

        Raises ConflictError when the name is already taken in the session.
        """

    def update_member(
        self,
        session_id: str,
        member_id: str,
        status: MemberStatus,
        last_activity: datetime,
        phone_number: str | None = None,
    ) -> Member | None:
        """Update status and activity (and phone when given); None if absent."""

    def delete_members(self, session_id: str) -> None:
        """Delete every member of a session."""


@dataclass
class MemberRegistry:
    """Owns member records, name uniqueness and status transitions."""

    repository: MemberRepository
    clock: Callable[[], datetime] = field(default=utcnow)

    def list(self, session_id: str) -> list[Member]:
        """Return the session's members in join order."""
        members = self.repository.list_members(session_id)
        return sorted(members, key=lambda member: member.joined_at)

    def add(
        self, session_id: str, name: str, phone_number: str | None = None
    ) -> Member:
        """Join a member, treating a case-insensitive name match as a re-join."""
        cleaned_name = _require_name(name)
        phone = _clean_optional(phone_number)

        existing = self.repository.find_member_by_name(session_id, cleaned_name)
        if existing is not None:
            updated = self.repository.update_member(
                session_id,
                existing.id,
                status=MemberStatus.PRESENT,
                last_activity=self.clock(),
                phone_number=phone,
            )
            if updated is None:
                raise NotFoundError("Member not found")
            _logger.info("Member re-joined session %s: %s", session_id, updated.id)
            return updated

        try:
            member = self.repository.create_member(
                session_id=session_id,
                name=cleaned_name,
                phone_number=phone,
                role=MemberRole.MEMBER,
                status=MemberStatus.JOINED,
                joined_at=self.clock(),
            )
        except ConflictError:
            _logger.warning(
                "Concurrent join with duplicate name in session %s", session_id
            )
            raise
        _logger.info("Member joined session %s: %s", session_id, member.id)
        return member

    def add_leader(
        self, session_id: str, name: str, phone_number: str | None = None
    ) -> Member:
        """Create the session leader's member record, already present."""
        return self.repository.create_member(
            session_id=session_id,
            name=_require_name(name),
            phone_number=_clean_optional(phone_number),
            role=MemberRole.LEADER,
            status=MemberStatus.PRESENT,
            joined_at=self.clock(),
        )

    def update_status(
        self, session_id: str, member_id: str, status: str | MemberStatus
    ) -> Member:
        """Set a member's status; any transition between statuses is allowed."""
        new_status = parse_status(status)
        updated = self.repository.update_member(
            session_id,
            member_id,
            status=new_status,
            last_activity=self.clock(),
        )
        if updated is None:
            raise NotFoundError("Member not found")
        return updated

    def remove_all(self, session_id: str) -> None:
        """Delete every member owned by the session."""
        self.repository.delete_members(session_id)


def parse_status(value: str | MemberStatus) -> MemberStatus:
    """Return the status for a raw value or raise ValidationError."""
    if isinstance(value, MemberStatus):
        return value
    try:
        return MemberStatus(str(value).strip().lower())
    except ValueError:
        allowed = ", ".join(status.value for status in MemberStatus)
        raise ValidationError(
            f"Invalid status {value!r} (expected one of {allowed})"
        ) from None


def _require_name(name: str | None) -> str:
    cleaned = name.strip() if name else ""
    if not cleaned:
        raise ValidationError("Member name is required")
    return cleaned


def _clean_optional(value: str | None) -> str | None:
    if value is None:
        return None
    cleaned = value.strip()
    return cleaned or None
