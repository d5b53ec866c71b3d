"""Supabase-backed session repository."""

from dataclasses import dataclass
from datetime import UTC, datetime

from supabase import Client

from trip_attendance.adapters.supabase_support import execute
from trip_attendance.domain.errors import StorageError
from trip_attendance.domain.serialization import session_from_row
from trip_attendance.domain.sessions import TripSession
from trip_attendance.services.sessions import SessionRepository

_SESSION_COLUMNS = (
    "id, short_id, name, leader_name, leader_phone, leader_member_id, "
    "created_at, expires_at"
)


@dataclass
class SupabaseSessionRepository(SessionRepository):
    """Supabase implementation for trip sessions."""

    client: Client

    def create_session(  # noqa: PLR0913
        self,
        short_id: str,
        name: str,
        leader_name: str | None,
        leader_phone: str | None,
        created_at: datetime,
        expires_at: datetime,
    ) -> TripSession:
        """Create a session row and return it."""
        rows = execute(
            self.client.table("sessions").insert(
                {
                    "short_id": short_id,
                    "name": name,
                    "leader_name": leader_name,
                    "leader_phone": leader_phone,
                    "created_at": created_at.isoformat(),
                    "expires_at": expires_at.isoformat(),
                }
            ),
            action="create session",
        )
        if not rows:
            raise StorageError("Failed to create session")
        return session_from_row(rows[0])

    def get_session(self, session_id: str) -> TripSession | None:
        """Return a session by id, if present."""
        rows = execute(
            self.client.table("sessions")
            .select(_SESSION_COLUMNS)
            .eq("id", session_id)
            .limit(1),
            action="fetch session",
        )
        if not rows:
            return None
        return session_from_row(rows[0])

    def get_session_by_short_id(self, short_id: str) -> TripSession | None:
        """Return a session by short code, if present."""
        rows = execute(
            self.client.table("sessions")
            .select(_SESSION_COLUMNS)
            .eq("short_id", short_id)
            .limit(1),
            action="fetch session",
        )
        if not rows:
            return None
        return session_from_row(rows[0])

    def set_leader_member_id(self, session_id: str, member_id: str) -> None:
        """Link the leader's member record to the session."""
        execute(
            self.client.table("sessions")
            .update(
                {
                    "leader_member_id": member_id,
                    "updated_at": datetime.now(tz=UTC).isoformat(),
                }
            )
            .eq("id", session_id),
            action="link session leader",
        )

    def delete_session(self, session_id: str) -> None:
        """Delete a session row; members cascade at the database level."""
        execute(
            self.client.table("sessions").delete().eq("id", session_id),
            action="delete session",
        )
