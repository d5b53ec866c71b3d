"""Attendance aggregation over a member snapshot."""

from collections.abc import Iterable

from trip_attendance.domain.members import Member, MemberStatus
from trip_attendance.domain.stats import AttendanceMode, AttendanceStats

_PRESENT_STATUSES = {
    AttendanceMode.INCLUSIVE: {MemberStatus.PRESENT, MemberStatus.JOINED},
    AttendanceMode.STRICT: {MemberStatus.PRESENT},
}


def attendance_stats(
    members: Iterable[Member], mode: AttendanceMode
) -> AttendanceStats:
    """Count total, present and missing members under the given mode."""
    present_statuses = _PRESENT_STATUSES[mode]
    total = present = missing = 0
    for member in members:
        total += 1
        if member.status in present_statuses:
            present += 1
        elif member.status == MemberStatus.MISSING:
            missing += 1
    return AttendanceStats(total=total, present=present, missing=missing)


def inclusive_attendance(members: Iterable[Member]) -> AttendanceStats:
    """Joined members count as present (dashboard summary tiles)."""
    return attendance_stats(members, AttendanceMode.INCLUSIVE)


def strict_attendance(members: Iterable[Member]) -> AttendanceStats:
    """Only members marked present count as present (member list split)."""
    return attendance_stats(members, AttendanceMode.STRICT)
