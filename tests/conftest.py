"""Shared test fixtures."""

from dataclasses import dataclass, field, replace
from datetime import UTC, datetime, timedelta
from itertools import count

import pytest

from trip_attendance.config import Settings
from trip_attendance.containers import AppContainer
from trip_attendance.domain.errors import ConflictError
from trip_attendance.domain.members import Member, MemberRole, MemberStatus
from trip_attendance.domain.sessions import TripSession
from trip_attendance.services.members import MemberRegistry, MemberRepository
from trip_attendance.services.sessions import SessionRepository, SessionStore
from trip_attendance.services.trips import TripService


@dataclass
class FakeClock:
    """Controllable clock for expiry and ordering tests."""

    now: datetime = field(
        default_factory=lambda: datetime(2024, 5, 1, 9, 0, tzinfo=UTC)
    )

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs: float) -> None:
        self.now += timedelta(**kwargs)


@dataclass
class InMemorySessionRepository(SessionRepository):
    """In-memory session repository for tests."""

    sessions: dict[str, TripSession] = field(default_factory=dict)
    ids: count = field(default_factory=lambda: count(1))

    def create_session(  # noqa: PLR0913
        self,
        short_id: str,
        name: str,
        leader_name: str | None,
        leader_phone: str | None,
        created_at: datetime,
        expires_at: datetime,
    ) -> TripSession:
        if any(session.short_id == short_id for session in self.sessions.values()):
            raise ConflictError("duplicate short id")
        session = TripSession(
            id=f"session-{next(self.ids)}",
            short_id=short_id,
            name=name,
            leader_name=leader_name,
            leader_phone=leader_phone,
            leader_member_id=None,
            created_at=created_at,
            expires_at=expires_at,
        )
        self.sessions[session.id] = session
        return session

    def get_session(self, session_id: str) -> TripSession | None:
        return self.sessions.get(session_id)

    def get_session_by_short_id(self, short_id: str) -> TripSession | None:
        for session in self.sessions.values():
            if session.short_id == short_id:
                return session
        return None

    def set_leader_member_id(self, session_id: str, member_id: str) -> None:
        session = self.sessions.get(session_id)
        if session is not None:
            self.sessions[session_id] = replace(session, leader_member_id=member_id)

    def delete_session(self, session_id: str) -> None:
        self.sessions.pop(session_id, None)


@dataclass
class InMemoryMemberRepository(MemberRepository):
    """In-memory member repository enforcing case-insensitive unique names."""

    members: dict[str, Member] = field(default_factory=dict)
    ids: count = field(default_factory=lambda: count(1))
    skip_name_lookup: bool = False

    def list_members(self, session_id: str) -> list[Member]:
        return [
            member for member in self.members.values() if member.session_id == session_id
        ]

    def find_member_by_name(self, session_id: str, name: str) -> Member | None:
        if self.skip_name_lookup:
            return None
        for member in self.list_members(session_id):
            if member.name.lower() == name.lower():
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
        for member in self.list_members(session_id):
            if member.name.lower() == name.lower():
                raise ConflictError("duplicate member name")
        member = Member(
            id=f"member-{next(self.ids)}",
            session_id=session_id,
            name=name,
            phone_number=phone_number,
            role=role,
            status=status,
            joined_at=joined_at,
            last_activity=joined_at,
        )
        self.members[member.id] = member
        return member

    def update_member(
        self,
        session_id: str,
        member_id: str,
        status: MemberStatus,
        last_activity: datetime,
        phone_number: str | None = None,
    ) -> Member | None:
        member = self.members.get(member_id)
        if member is None or member.session_id != session_id:
            return None
        updated = replace(
            member,
            status=status,
            last_activity=last_activity,
            phone_number=phone_number if phone_number is not None else member.phone_number,
        )
        self.members[member_id] = updated
        return updated

    def delete_members(self, session_id: str) -> None:
        for member in self.list_members(session_id):
            del self.members[member.id]


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def session_repository() -> InMemorySessionRepository:
    return InMemorySessionRepository()


@pytest.fixture
def member_repository() -> InMemoryMemberRepository:
    return InMemoryMemberRepository()


@pytest.fixture
def trip_service(
    clock: FakeClock,
    session_repository: InMemorySessionRepository,
    member_repository: InMemoryMemberRepository,
) -> TripService:
    return TripService(
        session_store=SessionStore(session_repository, clock=clock),
        member_registry=MemberRegistry(member_repository, clock=clock),
    )


@pytest.fixture
def settings(tmp_path) -> Settings:
    return Settings(
        storage_backend="local",
        local_store_path=str(tmp_path / "sessions.json"),
    )


@pytest.fixture
def container(settings: Settings, trip_service: TripService) -> AppContainer:
    async def close_resources() -> None:
        return None

    return AppContainer(
        settings=settings,
        trip_service=trip_service,
        close_resources=close_resources,
    )
