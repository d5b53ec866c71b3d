"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from pathlib import Path

from supabase import create_client

from trip_attendance.adapters.local_store import (
    LocalMemberRepository,
    LocalSessionFile,
    LocalSessionRepository,
)
from trip_attendance.adapters.supabase_member_repository import (
    SupabaseMemberRepository,
)
from trip_attendance.adapters.supabase_session_repository import (
    SupabaseSessionRepository,
)
from trip_attendance.config import Settings, parse_storage_backend, session_duration
from trip_attendance.services.members import MemberRegistry, MemberRepository
from trip_attendance.services.sessions import SessionRepository, SessionStore
from trip_attendance.services.trips import TripService


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    trip_service: TripService
    close_resources: Callable[[], Awaitable[None]]


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    backend = parse_storage_backend(resolved_settings.storage_backend)
    if backend == "local":
        session_repository, member_repository = _local_repositories(resolved_settings)
    else:
        session_repository, member_repository = _supabase_repositories(
            resolved_settings
        )

    trip_service = TripService(
        session_store=SessionStore(
            session_repository,
            default_duration=session_duration(resolved_settings),
        ),
        member_registry=MemberRegistry(member_repository),
    )

    async def close_resources() -> None:
        return None

    return AppContainer(
        settings=resolved_settings,
        trip_service=trip_service,
        close_resources=close_resources,
    )


def _supabase_repositories(
    settings: Settings,
) -> tuple[SessionRepository, MemberRepository]:
    if not settings.supabase_url or not settings.supabase_service_key:
        raise ValueError(
            "SUPABASE_URL and SUPABASE_SERVICE_KEY are required for the "
            "supabase storage backend"
        )
    supabase_client = create_client(
        settings.supabase_url, settings.supabase_service_key
    )
    return (
        SupabaseSessionRepository(supabase_client),
        SupabaseMemberRepository(supabase_client),
    )


def _local_repositories(
    settings: Settings,
) -> tuple[SessionRepository, MemberRepository]:
    store = LocalSessionFile(Path(settings.local_store_path))
    return LocalSessionRepository(store), LocalMemberRepository(store)
