"""Local JSON-file persistence mirroring the browser local-storage store.

The file holds ``{"sessions": {id: {...session, "members": [...]}},
"current_session_id": id}``. A session's short code doubles as its id, and
members live inside their session so deleting a session drops them too.
Expired sessions are purged from the file whenever it is loaded. There is a
single writer; concurrent processes overwrite each other (last write wins).
"""

import json
import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path

from trip_attendance.domain.errors import ConflictError, StorageError
from trip_attendance.domain.members import Member, MemberRole, MemberStatus
from trip_attendance.domain.serialization import (
    member_from_row,
    member_to_row,
    parse_timestamp,
    session_from_row,
)
from trip_attendance.domain.sessions import TripSession
from trip_attendance.services.identifiers import new_id
from trip_attendance.services.members import MemberRepository
from trip_attendance.services.sessions import SessionRepository, utcnow

_logger = logging.getLogger(__name__)


def _empty_state() -> dict[str, object]:
    return {"sessions": {}, "current_session_id": None}


@dataclass
class LocalSessionFile:
    """Loads and saves the JSON document shared by the local repositories."""

    path: Path
    clock: Callable[[], datetime] = field(default=utcnow)

    def load(self) -> dict[str, object]:
        """Read the store, dropping expired sessions and persisting the purge."""
        if not self.path.exists():
            return _empty_state()
        try:
            state = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError):
            _logger.exception("Unreadable local session store at %s", self.path)
            return _empty_state()
        if not isinstance(state, dict) or not isinstance(state.get("sessions"), dict):
            _logger.warning("Ignoring malformed local session store at %s", self.path)
            return _empty_state()

        now = self.clock()
        sessions: dict[str, dict[str, object]] = state["sessions"]
        expired = [
            session_id
            for session_id, row in sessions.items()
            if now >= parse_timestamp(row["expires_at"])
        ]
        for session_id in expired:
            del sessions[session_id]
            if state.get("current_session_id") == session_id:
                state["current_session_id"] = None
        if expired:
            _logger.info("Purged %s expired local sessions", len(expired))
            self.save(state)
        return state

    def save(self, state: dict[str, object]) -> None:
        """Write the whole store back to disk."""
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.write_text(json.dumps(state, indent=2), encoding="utf-8")
        except OSError as exc:
            raise StorageError("Failed to save local session store") from exc

    def current_session_id(self) -> str | None:
        """Return the id of the most recently written session, if still live."""
        current = self.load().get("current_session_id")
        return str(current) if current else None


@dataclass
class LocalSessionRepository(SessionRepository):
    """Session repository backed by the local JSON file."""

    store: LocalSessionFile

    def create_session(  # noqa: PLR0913
        self,
        short_id: str,
        name: str,
        leader_name: str | None,
        leader_phone: str | None,
        created_at: datetime,
        expires_at: datetime,
    ) -> TripSession:
        """Create a session keyed by its short code."""
        state = self.store.load()
        sessions: dict[str, dict[str, object]] = state["sessions"]
        if short_id in sessions:
            raise ConflictError("Session code already in use")
        row: dict[str, object] = {
            "id": short_id,
            "short_id": short_id,
            "name": name,
            "leader_name": leader_name,
            "leader_phone": leader_phone,
            "leader_member_id": None,
            "created_at": created_at.isoformat(),
            "expires_at": expires_at.isoformat(),
            "members": [],
        }
        sessions[short_id] = row
        state["current_session_id"] = short_id
        self.store.save(state)
        return session_from_row(row)

    def get_session(self, session_id: str) -> TripSession | None:
        """Return a session by id, if present."""
        row = self.store.load()["sessions"].get(session_id)
        return session_from_row(row) if row else None

    def get_session_by_short_id(self, short_id: str) -> TripSession | None:
        """Return a session by short code; identical to the id locally."""
        return self.get_session(short_id)

    def set_leader_member_id(self, session_id: str, member_id: str) -> None:
        """Record the leader member id on the session."""
        state = self.store.load()
        row = state["sessions"].get(session_id)
        if row is None:
            return
        row["leader_member_id"] = member_id
        self.store.save(state)

    def delete_session(self, session_id: str) -> None:
        """Remove a session and the members stored inside it."""
        state = self.store.load()
        if state["sessions"].pop(session_id, None) is None:
            return
        if state.get("current_session_id") == session_id:
            state["current_session_id"] = None
        self.store.save(state)


@dataclass
class LocalMemberRepository(MemberRepository):
    """Member repository backed by the local JSON file."""

    store: LocalSessionFile
    id_factory: Callable[[], str] = field(default=new_id)

    def list_members(self, session_id: str) -> list[Member]:
        """Return members in insertion order."""
        row = self.store.load()["sessions"].get(session_id)
        if row is None:
            return []
        return [member_from_row(member) for member in row["members"]]

    def find_member_by_name(self, session_id: str, name: str) -> Member | None:
        """Return the member with a case-insensitively equal name, if any."""
        wanted = name.casefold()
        for member in self.list_members(session_id):
            if member.name.casefold() == wanted:
                return member
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
        """Append a member, enforcing per-session name uniqueness."""
        state = self.store.load()
        session_row = state["sessions"].get(session_id)
        if session_row is None:
            raise StorageError("Session row missing for member insert")
        members: list[dict[str, object]] = session_row["members"]
        wanted = name.casefold()
        if any(str(row["name"]).casefold() == wanted for row in members):
            raise ConflictError("Member with that name already exists")
        member = Member(
            id=self.id_factory(),
            session_id=session_id,
            name=name,
            phone_number=phone_number,
            role=role,
            status=status,
            joined_at=joined_at,
            last_activity=joined_at,
        )
        members.append(member_to_row(member))
        self.store.save(state)
        return member

    def update_member(
        self,
        session_id: str,
        member_id: str,
        status: MemberStatus,
        last_activity: datetime,
        phone_number: str | None = None,
    ) -> Member | None:
        """Update a member in place and persist the session."""
        state = self.store.load()
        session_row = state["sessions"].get(session_id)
        if session_row is None:
            return None
        for row in session_row["members"]:
            if row["id"] != member_id:
                continue
            row["status"] = status.value
            row["last_activity"] = last_activity.isoformat()
            if phone_number is not None:
                row["phone_number"] = phone_number
            self.store.save(state)
            return member_from_row(row)
        return None

    def delete_members(self, session_id: str) -> None:
        """Clear a session's member list."""
        state = self.store.load()
        session_row = state["sessions"].get(session_id)
        if session_row is None or not session_row["members"]:
            return
        session_row["members"] = []
        self.store.save(state)
