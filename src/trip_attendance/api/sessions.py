"""Session endpoints."""

from __future__ import annotations

from typing import TYPE_CHECKING

from fastapi import APIRouter, Depends, Request, Response, status

from trip_attendance.api.models import CreateSessionRequest
from trip_attendance.domain.serialization import member_to_row, session_to_row
from trip_attendance.services.stats import inclusive_attendance, strict_attendance
from trip_attendance.services.trips import TripService  # noqa: TC001

if TYPE_CHECKING:
    from trip_attendance.containers import AppContainer
    from trip_attendance.domain.sessions import TripSession
    from trip_attendance.domain.stats import AttendanceStats

router = APIRouter(prefix="/sessions", tags=["sessions"])


def get_trip_service(request: Request) -> TripService:
    """Return the trip service from the app container."""
    container: AppContainer = request.app.state.container
    return container.trip_service


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_session(
    body: CreateSessionRequest,
    service: TripService = Depends(get_trip_service),
) -> dict[str, object]:
    """Create a session, optionally with its leader as the first member."""
    created = service.create_session(
        body.name,
        leader_name=body.leader_name,
        leader_phone=body.leader_phone,
        duration_ms=body.duration_ms,
    )
    return {
        "session": session_to_row(created.session),
        "leaderMember": (
            member_to_row(created.leader_member) if created.leader_member else None
        ),
        "links": _links_payload(created.session),
    }


@router.get("/short/{short_id}")
async def get_session_by_short_id(
    short_id: str, service: TripService = Depends(get_trip_service)
) -> dict[str, object]:
    """Resolve a short code to its session (public info for the join page)."""
    return session_to_row(service.resolve_short_code(short_id))


@router.get("/short/{short_id}/dashboard")
async def get_dashboard(
    short_id: str, service: TripService = Depends(get_trip_service)
) -> dict[str, object]:
    """Return the session, its members and both attendance tallies."""
    snapshot = service.get_session_with_members(short_id)
    return {
        "session": session_to_row(snapshot.session),
        "members": [member_to_row(member) for member in snapshot.members],
        "stats": {
            "inclusive": _stats_payload(inclusive_attendance(snapshot.members)),
            "strict": _stats_payload(strict_attendance(snapshot.members)),
        },
        "links": _links_payload(snapshot.session),
    }


@router.get("/{session_id}")
async def get_session(
    session_id: str, service: TripService = Depends(get_trip_service)
) -> dict[str, object]:
    """Return a session by id."""
    return session_to_row(service.get_session(session_id))


@router.delete("/{session_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_session(
    session_id: str, service: TripService = Depends(get_trip_service)
) -> Response:
    """Delete a session and its members."""
    service.delete_session(session_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


def _links_payload(session: TripSession) -> dict[str, str]:
    return {"checkIn": session.check_in_path, "checkOut": session.check_out_path}


def _stats_payload(stats: AttendanceStats) -> dict[str, int]:
    return {"total": stats.total, "present": stats.present, "missing": stats.missing}
