"""Tests for the terminal dashboard."""

from datetime import UTC, datetime, timedelta

from trip_attendance.domain.members import Member, MemberRole, MemberStatus
from trip_attendance.domain.sessions import TripSession
from trip_attendance.main import format_snapshot
from trip_attendance.services.dashboard import DashboardSnapshot
from trip_attendance.services.stats import inclusive_attendance, strict_attendance

NOW = datetime(2024, 5, 1, 9, 0, tzinfo=UTC)


def _member(name: str, role: MemberRole, status: MemberStatus) -> Member:
    return Member(
        id=name.lower(),
        session_id="s1",
        name=name,
        phone_number=None,
        role=role,
        status=status,
        joined_at=NOW,
        last_activity=NOW,
    )


def test_format_snapshot_lists_tallies_and_members() -> None:
    members = [
        _member("Ana", MemberRole.LEADER, MemberStatus.PRESENT),
        _member("Ben", MemberRole.MEMBER, MemberStatus.JOINED),
        _member("Cy", MemberRole.MEMBER, MemberStatus.MISSING),
    ]
    snapshot = DashboardSnapshot(
        session=TripSession(
            id="s1",
            short_id="ABCD1234",
            name="Field Trip",
            leader_name="Ana",
            leader_phone=None,
            leader_member_id="ana",
            created_at=NOW,
            expires_at=NOW + timedelta(hours=24),
        ),
        members=members,
        summary=inclusive_attendance(members),
        roster=strict_attendance(members),
    )

    text = format_snapshot(snapshot)

    assert text.splitlines()[0] == "Field Trip (ABCD1234)"
    assert "Total: 3  Present: 2  Missing: 1" in text
    assert "Members (1/3)" in text
    assert "- Ana: present [leader]" in text
    assert "- Cy: missing" in text
