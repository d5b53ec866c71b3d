"""Leader dashboard polling loop."""

import asyncio
import logging
from collections.abc import Callable
from dataclasses import dataclass, field

from trip_attendance.adapters.trip_api_client import TripApiClient
from trip_attendance.domain.members import Member
from trip_attendance.domain.serialization import member_from_row, session_from_row
from trip_attendance.domain.sessions import TripSession
from trip_attendance.domain.stats import AttendanceStats
from trip_attendance.services.stats import inclusive_attendance, strict_attendance

DEFAULT_POLL_INTERVAL_SECONDS = 10.0

_logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DashboardSnapshot:
    """One poll result with both attendance tallies."""

    session: TripSession
    members: list[Member]
    summary: AttendanceStats
    roster: AttendanceStats


@dataclass
class DashboardPoller:
    """Re-fetch a session every interval until stopped.

    A failed poll is logged and the loop waits for the next tick.
    """

    client: TripApiClient
    short_id: str
    on_snapshot: Callable[[DashboardSnapshot], None]
    interval_seconds: float = DEFAULT_POLL_INTERVAL_SECONDS
    _task: asyncio.Task | None = field(default=None, init=False, repr=False)

    async def poll_once(self) -> DashboardSnapshot:
        """Fetch the session and its members once."""
        session_row = await self.client.get_session_by_short_id(self.short_id)
        session = session_from_row(session_row)
        member_rows = await self.client.get_session_members(session.id)
        members = [member_from_row(row) for row in member_rows]
        return DashboardSnapshot(
            session=session,
            members=members,
            summary=inclusive_attendance(members),
            roster=strict_attendance(members),
        )

    async def run(self) -> None:
        """Poll forever; cancel the task to stop."""
        while True:
            try:
                self.on_snapshot(await self.poll_once())
            except Exception:
                _logger.exception("Dashboard poll failed for %s", self.short_id)
            await asyncio.sleep(self.interval_seconds)

    def start(self) -> asyncio.Task:
        """Start polling on the running event loop."""
        if self._task is None or self._task.done():
            self._task = asyncio.create_task(self.run())
        return self._task

    async def stop(self) -> None:
        """Cancel polling and wait for the loop to finish."""
        task, self._task = self._task, None
        if task is None:
            return
        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            pass

    @property
    def running(self) -> bool:
        """Return True while the polling task is active."""
        return self._task is not None and not self._task.done()
