"""Terminal dashboard that polls a session until interrupted."""

import argparse
import asyncio
import contextlib

from trip_attendance.adapters.trip_api_client import HttpxTripApiClient
from trip_attendance.app_logging import configure_logging
from trip_attendance.config import Settings
from trip_attendance.domain.members import MemberRole
from trip_attendance.services.dashboard import DashboardPoller, DashboardSnapshot


def format_snapshot(snapshot: DashboardSnapshot) -> str:
    """Render one poll result as plain text."""
    lines = [
        f"{snapshot.session.name} ({snapshot.session.short_id})",
        (
            f"Total: {snapshot.summary.total}  "
            f"Present: {snapshot.summary.present}  "
            f"Missing: {snapshot.summary.missing}"
        ),
        f"Members ({snapshot.roster.present}/{snapshot.roster.total})",
    ]
    for member in snapshot.members:
        suffix = " [leader]" if member.role == MemberRole.LEADER else ""
        lines.append(f"- {member.name}: {member.status.value}{suffix}")
    return "\n".join(lines)


async def watch(short_id: str, settings: Settings) -> None:
    """Poll the session until the task is cancelled."""
    client = HttpxTripApiClient.create(settings.api_base_url)
    poller = DashboardPoller(
        client=client,
        short_id=short_id,
        on_snapshot=lambda snapshot: print(format_snapshot(snapshot), flush=True),
        interval_seconds=settings.poll_interval_seconds,
    )
    try:
        await poller.start()
    finally:
        await poller.stop()
        await client.close()


def main(argv: list[str] | None = None) -> None:
    """Run the terminal dashboard."""
    parser = argparse.ArgumentParser(description="Watch a trip session's attendance.")
    parser.add_argument("short_id", help="Session short code")
    args = parser.parse_args(argv)
    configure_logging()
    with contextlib.suppress(KeyboardInterrupt):
        asyncio.run(watch(args.short_id, Settings()))


if __name__ == "__main__":
    main()
