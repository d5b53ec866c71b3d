"""Domain models for trip sessions."""

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class TripSession:
    """Represents a bounded-lifetime attendance session."""

    id: str
    short_id: str
    name: str
    leader_name: str | None
    leader_phone: str | None
    leader_member_id: str | None
    created_at: datetime
    expires_at: datetime

    def is_expired(self, now: datetime) -> bool:
        """Return True once the session lifetime has elapsed."""
        return now >= self.expires_at

    @property
    def check_in_path(self) -> str:
        """Relative link members open (or scan as a QR code) to join."""
        return f"/join/{self.short_id}"

    @property
    def check_out_path(self) -> str:
        return f"/checkout/{self.short_id}"
