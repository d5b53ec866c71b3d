"""Tests for the dashboard polling loop."""

import asyncio
from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta

from trip_attendance.adapters.trip_api_client import TripApiClient
from trip_attendance.services.dashboard import DashboardPoller, DashboardSnapshot

NOW = datetime(2024, 5, 1, 9, 0, tzinfo=UTC)


@dataclass
class FakeTripApiClient(TripApiClient):
    """Fake API client serving a fixed session with configurable failures."""

    failures: int = 0
    calls: int = 0
    members: list[dict[str, object]] = field(
        default_factory=lambda: [
            {
                "id": "m1",
                "session_id": "s1",
                "name": "Ana",
                "role": "leader",
                "status": "present",
                "joined_at": NOW.isoformat(),
                "last_activity": NOW.isoformat(),
            },
            {
                "id": "m2",
                "session_id": "s1",
                "name": "Ben",
                "role": "member",
                "status": "joined",
                "joined_at": NOW.isoformat(),
                "last_activity": NOW.isoformat(),
            },
        ]
    )

    async def get_session_by_short_id(self, short_id: str) -> dict[str, object]:
        self.calls += 1
        if self.failures:
            self.failures -= 1
            raise RuntimeError("network down")
        return {
            "id": "s1",
            "short_id": short_id,
            "name": "Field Trip",
            "created_at": NOW.isoformat(),
            "expires_at": (NOW + timedelta(hours=24)).isoformat(),
        }

    async def get_session_members(self, session_id: str) -> list[dict[str, object]]:
        return self.members


def test_poll_once_computes_both_tallies() -> None:
    poller = DashboardPoller(
        client=FakeTripApiClient(), short_id="ABCD1234", on_snapshot=lambda _: None
    )

    snapshot = asyncio.run(poller.poll_once())

    assert snapshot.session.short_id == "ABCD1234"
    assert [member.name for member in snapshot.members] == ["Ana", "Ben"]
    assert (snapshot.summary.present, snapshot.roster.present) == (2, 1)


def test_poller_survives_failed_poll_and_stops() -> None:
    client = FakeTripApiClient(failures=1)
    snapshots: list[DashboardSnapshot] = []

    async def scenario() -> None:
        poller = DashboardPoller(
            client=client,
            short_id="ABCD1234",
            on_snapshot=snapshots.append,
            interval_seconds=0,
        )
        poller.start()
        while len(snapshots) < 2:
            await asyncio.sleep(0)
        await poller.stop()
        assert not poller.running

    asyncio.run(asyncio.wait_for(scenario(), timeout=5))

    assert client.calls >= 3
    assert all(snapshot.session.id == "s1" for snapshot in snapshots)


def test_stop_without_start_is_noop() -> None:
    poller = DashboardPoller(
        client=FakeTripApiClient(), short_id="ABCD1234", on_snapshot=lambda _: None
    )

    asyncio.run(poller.stop())

    assert not poller.running


def test_poller_keeps_running_after_callback_error() -> None:
    client = FakeTripApiClient()
    snapshots: list[DashboardSnapshot] = []

    def render(snapshot: DashboardSnapshot) -> None:
        if not snapshots:
            snapshots.append(snapshot)
            raise RuntimeError("render failed")
        snapshots.append(snapshot)

    async def scenario() -> None:
        poller = DashboardPoller(
            client=client,
            short_id="ABCD1234",
            on_snapshot=render,
            interval_seconds=0,
        )
        poller.start()
        while len(snapshots) < 3:
            await asyncio.sleep(0)
        assert poller.running
        await poller.stop()

    asyncio.run(asyncio.wait_for(scenario(), timeout=5))

    assert client.calls >= 3
