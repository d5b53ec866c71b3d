"""Domain models for attendance statistics."""

from dataclasses import dataclass
from enum import Enum


class AttendanceMode(Enum):
    """Counting conventions for the present tally.

    INCLUSIVE counts joined members as present (dashboard summary tiles).
    STRICT counts only members explicitly marked present (member-list split).
    """

    INCLUSIVE = "inclusive"
    STRICT = "strict"


@dataclass(frozen=True)
class AttendanceStats:
    """Aggregate attendance counts for a session."""

    total: int
    present: int
    missing: int
