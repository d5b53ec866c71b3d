"""Member endpoints, scoped to a session id."""

from __future__ import annotations

from fastapi import APIRouter, Depends, status

from trip_attendance.api.models import JoinSessionRequest, UpdateMemberRequest
from trip_attendance.api.sessions import get_trip_service
from trip_attendance.domain.serialization import member_to_row
from trip_attendance.services.trips import TripService  # noqa: TC001

router = APIRouter(tags=["members"])


@router.get("/{session_id}/members")
async def list_members(
    session_id: str, service: TripService = Depends(get_trip_service)
) -> list[dict[str, object]]:
    """Return the session's members ordered by join time."""
    return [member_to_row(member) for member in service.list_members(session_id)]


@router.post("/{session_id}/members", status_code=status.HTTP_201_CREATED)
async def join_session(
    session_id: str,
    body: JoinSessionRequest,
    service: TripService = Depends(get_trip_service),
) -> dict[str, object]:
    """Join a session; re-joining with a known name marks the member present."""
    member = service.join_session(session_id, body.name, body.phone_number)
    return member_to_row(member)


@router.patch("/{session_id}/members/{member_id}")
async def update_member_status(
    session_id: str,
    member_id: str,
    body: UpdateMemberRequest,
    service: TripService = Depends(get_trip_service),
) -> dict[str, object]:
    """Set a member's attendance status."""
    member = service.update_member_status(session_id, member_id, body.status)
    return member_to_row(member)
