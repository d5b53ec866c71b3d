"""Supabase-backed member repository."""

from dataclasses import dataclass
from datetime import UTC, datetime

from supabase import Client

from trip_attendance.adapters.supabase_support import execute
from trip_attendance.domain.errors import StorageError
from trip_attendance.domain.members import Member, MemberRole, MemberStatus
from trip_attendance.domain.serialization import member_from_row
from trip_attendance.services.members import MemberRepository

_MEMBER_COLUMNS = (
    "id, session_id, name, phone_number, role, status, joined_at, last_activity"
)


@dataclass
class SupabaseMemberRepository(MemberRepository):
    """Supabase implementation for session members."""

    client: Client

    def list_members(self, session_id: str) -> list[Member]:
        """Return members of a session ordered by join time."""
        rows = execute(
            self.client.table("members")
            .select(_MEMBER_COLUMNS)
            .eq("session_id", session_id)
            .order("joined_at"),
            action="list members",
        )
        return [member_from_row(row) for row in rows]

    def find_member_by_name(self, session_id: str, name: str) -> Member | None:
        """Return the member with a case-insensitively equal name, if any."""
        rows = execute(
            self.client.table("members")
            .select(_MEMBER_COLUMNS)
            .eq("session_id", session_id),
            action="find member",
        )
        wanted = name.casefold()
        for row in rows:
            if str(row.get("name", "")).casefold() == wanted:
                return member_from_row(row)
        return None

    def create_member(  # noqa: PLR0913
        self,
        session_id: str,
        name: str,
        phone_number: str | None,
        role: MemberRole,
        status: MemberStatus,
        joined_at: datetime,
    ) -> Member:
        """Create a member row and return it."""
        rows = execute(
            self.client.table("members").insert(
                {
                    "session_id": session_id,
                    "name": name,
                    "phone_number": phone_number,
                    "role": role.value,
                    "status": status.value,
                    "joined_at": joined_at.isoformat(),
                    "last_activity": joined_at.isoformat(),
                }
            ),
            action="create member",
        )
        if not rows:
            raise StorageError("Failed to create member")
        return member_from_row(rows[0])

    def update_member(
        self,
        session_id: str,
        member_id: str,
        status: MemberStatus,
        last_activity: datetime,
        phone_number: str | None = None,
    ) -> Member | None:
        """Update a member's status and activity timestamp."""
        payload: dict[str, object] = {
            "status": status.value,
            "last_activity": last_activity.isoformat(),
            "updated_at": datetime.now(tz=UTC).isoformat(),
        }
        if phone_number is not None:
            payload["phone_number"] = phone_number
        rows = execute(
            self.client.table("members")
            .update(payload)
            .eq("id", member_id)
            .eq("session_id", session_id),
            action="update member",
        )
        if not rows:
            return None
        return member_from_row(rows[0])

    def delete_members(self, session_id: str) -> None:
        """Delete every member row of a session."""
        execute(
            self.client.table("members").delete().eq("session_id", session_id),
            action="delete members",
        )
