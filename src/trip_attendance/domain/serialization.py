"""Conversions between domain records and persisted row dictionaries.

Rows use the snake_case column names of the ``sessions`` and ``members``
tables. The same shape is returned by the REST API and written to the local
JSON store, so every backend round-trips through these helpers.
"""

from datetime import UTC, datetime

from trip_attendance.domain.members import Member, MemberRole, MemberStatus
from trip_attendance.domain.sessions import TripSession


def parse_timestamp(raw: object) -> datetime:
    """Parse an ISO-8601 timestamp, assuming UTC when no offset is present."""
    if isinstance(raw, datetime):
        value = raw
    else:
        value = datetime.fromisoformat(str(raw).replace("Z", "+00:00"))
    if value.tzinfo is None:
        value = value.replace(tzinfo=UTC)
    return value


def session_from_row(row: dict[str, object]) -> TripSession:
    """Build a session from a persisted row."""
    return TripSession(
        id=str(row["id"]),
        short_id=str(row["short_id"]),
        name=str(row["name"]),
        leader_name=_optional_str(row.get("leader_name")),
        leader_phone=_optional_str(row.get("leader_phone")),
        leader_member_id=_optional_str(row.get("leader_member_id")),
        created_at=parse_timestamp(row["created_at"]),
        expires_at=parse_timestamp(row["expires_at"]),
    )


def session_to_row(session: TripSession) -> dict[str, object]:
    """Serialize a session to its persisted row shape."""
    return {
        "id": session.id,
        "short_id": session.short_id,
        "name": session.name,
        "leader_name": session.leader_name,
        "leader_phone": session.leader_phone,
        "leader_member_id": session.leader_member_id,
        "created_at": session.created_at.isoformat(),
        "expires_at": session.expires_at.isoformat(),
    }


def member_from_row(row: dict[str, object]) -> Member:
    """Build a member from a persisted row."""
    joined_at = parse_timestamp(row["joined_at"])
    last_activity_raw = row.get("last_activity")
    return Member(
        id=str(row["id"]),
        session_id=str(row["session_id"]),
        name=str(row["name"]),
        phone_number=_optional_str(row.get("phone_number")),
        role=MemberRole(row.get("role") or MemberRole.MEMBER.value),
        status=MemberStatus(row.get("status") or MemberStatus.JOINED.value),
        joined_at=joined_at,
        last_activity=(
            parse_timestamp(last_activity_raw) if last_activity_raw else joined_at
        ),
    )


def member_to_row(member: Member) -> dict[str, object]:
    """Serialize a member to its persisted row shape."""
    return {
        "id": member.id,
        "session_id": member.session_id,
        "name": member.name,
        "phone_number": member.phone_number,
        "role": member.role.value,
        "status": member.status.value,
        "joined_at": member.joined_at.isoformat(),
        "last_activity": member.last_activity.isoformat(),
    }


def _optional_str(value: object) -> str | None:
    if value is None:
        return None
    return str(value)
