"""HTTP client for the trip attendance REST API."""

from dataclasses import dataclass
from typing import Protocol

import httpx


class TripApiClient(Protocol):
    """Interface for the trip attendance REST API."""

    async def get_session_by_short_id(self, short_id: str) -> dict[str, object]:
        """Fetch a session row by short code."""

    async def get_session_members(self, session_id: str) -> list[dict[str, object]]:
        """Fetch member rows of a session in join order."""


@dataclass
class HttpxTripApiClient(TripApiClient):
    """HTTPX-backed client mirroring the browser API service."""

    base_url: str
    http_client: httpx.AsyncClient
    timeout: float = 10

    @classmethod
    def create(cls, base_url: str) -> "HttpxTripApiClient":
        """Create a client with a managed httpx session."""
        return cls(base_url=base_url.rstrip("/"), http_client=httpx.AsyncClient())

    async def create_session(
        self,
        name: str,
        leader_name: str | None = None,
        leader_phone: str | None = None,
        duration_ms: int | None = None,
    ) -> dict[str, object]:
        """Create a session and return ``{session, leaderMember}``."""
        payload: dict[str, object] = {"name": name}
        if leader_name is not None:
            payload["leaderName"] = leader_name
        if leader_phone is not None:
            payload["leaderPhone"] = leader_phone
        if duration_ms is not None:
            payload["durationMs"] = duration_ms
        return await self._request("POST", "/sessions", json=payload)

    async def get_session_by_short_id(self, short_id: str) -> dict[str, object]:
        """Fetch a session row by short code."""
        return await self._request("GET", f"/sessions/short/{short_id}")

    async def get_session_members(self, session_id: str) -> list[dict[str, object]]:
        """Fetch member rows of a session in join order."""
        return await self._request("GET", f"/{session_id}/members")

    async def add_member(
        self, session_id: str, name: str, phone_number: str | None = None
    ) -> dict[str, object]:
        """Join a session by id."""
        payload: dict[str, object] = {"name": name}
        if phone_number is not None:
            payload["phoneNumber"] = phone_number
        return await self._request("POST", f"/{session_id}/members", json=payload)

    async def update_member_status(
        self, session_id: str, member_id: str, status: str
    ) -> dict[str, object]:
        """Set a member's attendance status."""
        return await self._request(
            "PATCH",
            f"/{session_id}/members/{member_id}",
            json={"status": status},
        )

    async def get_session_with_members(self, short_id: str) -> dict[str, object]:
        """Resolve the short code, then fetch that session's members."""
        session = await self.get_session_by_short_id(short_id)
        members = await self.get_session_members(str(session["id"]))
        return {"session": session, "members": members}

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.http_client.aclose()

    async def _request(self, method: str, path: str, json: object | None = None):  # type: ignore[no-untyped-def]
        response = await self.http_client.request(
            method, f"{self.base_url}{path}", json=json, timeout=self.timeout
        )
        response.raise_for_status()
        return response.json()
