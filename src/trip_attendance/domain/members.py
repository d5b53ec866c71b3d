"""Domain models for session members."""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum


class MemberRole(str, Enum):
    """Role of a member within a session."""

    LEADER = "leader"
    MEMBER = "member"


class MemberStatus(str, Enum):
    """Current attendance status of a member."""

    JOINED = "joined"
    PRESENT = "present"
    MISSING = "missing"


@dataclass(frozen=True)
class Member:
    """Participant record owned by exactly one session."""

    id: str
    session_id: str
    name: str
    phone_number: str | None
    role: MemberRole
    status: MemberStatus
    joined_at: datetime
    last_activity: datetime
