"""Pydantic models for REST request bodies."""

from pydantic import BaseModel, ConfigDict, Field


class CreateSessionRequest(BaseModel):
    """Body of ``POST /sessions``."""

    model_config = ConfigDict(populate_by_name=True)

    name: str
    leader_name: str | None = Field(default=None, alias="leaderName")
    leader_phone: str | None = Field(default=None, alias="leaderPhone")
    duration_ms: int | None = Field(default=None, alias="durationMs")


class JoinSessionRequest(BaseModel):
    """Body of ``POST /{session_id}/members``."""

    model_config = ConfigDict(populate_by_name=True)

    name: str
    phone_number: str | None = Field(default=None, alias="phoneNumber")


class UpdateMemberRequest(BaseModel):
    """Body of ``PATCH /{session_id}/members/{member_id}``."""

    status: str
