"""
Registry Wire Models

Request and response bodies of the discovery HTTP API, plus the frames sent
on the heartbeat WebSocket.

Field names match the JSON keys bots and callers already speak:
- POST /v1/register      RegisterRequest -> RegisterResponse
- GET  /v1/lookup/{id}   LookupResponse
- GET  /v1/agents        AgentListResponse
- GET  /health           HealthResponse
- WS   /v1/ws?agent=id   HeartbeatFrame / ErrorFrame
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Literal

from pydantic import BaseModel, Field

from botcall.registry.agent import AgentRecord


class PresenceStatus(str, Enum):
    """Liveness as reported to callers."""
    ONLINE = "online"
    OFFLINE = "offline"


def format_rfc3339(value: datetime) -> str:
    """Render a timestamp as RFC 3339 UTC with second precision."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")


class RegisterRequest(BaseModel):
    """
    Registration sent by a bot.

    agent_id and endpoint may arrive empty; the service rejects that so the
    error can be reported as a missing field rather than a schema failure.
    mode is any string; the AgentMode values are the ones bots send today.
    """
    agent_id: str = ""
    endpoint: str = ""
    mode: str = ""
    attestation: str = ""


class RegisterResponse(BaseModel):
    """Registration confirmation."""
    confirmed: bool
    url: str | None = None
    status: str


class LookupResponse(BaseModel):
    """
    Result of looking an agent up.

    Unknown agents come back offline with an error; that is a normal
    negative answer, not a failure.
    """
    status: PresenceStatus
    endpoint: str | None = None
    mode: str | None = None
    attestation_valid: bool = False
    last_seen: str | None = None
    error: str | None = None


class AgentListResponse(BaseModel):
    """Agents currently considered online."""
    agents: list[AgentRecord] = Field(default_factory=list)
    count: int = 0


class HealthResponse(BaseModel):
    """Process liveness probe (not agent liveness)."""
    status: str = "ok"
    version: str


class HeartbeatFrame(BaseModel):
    """Server-emitted heartbeat on the agent WebSocket."""
    type: Literal["ping"] = "ping"


class ErrorFrame(BaseModel):
    """Single error frame sent before closing a rejected WebSocket."""
    error: str


def create_lookup_not_found() -> LookupResponse:
    """Lookup answer for an agent that was never registered (or was reclaimed)."""
    return LookupResponse(
        status=PresenceStatus.OFFLINE,
        attestation_valid=False,
        error="Agent not found",
    )


def create_lookup_result(
    record: AgentRecord,
    online: bool,
    attestation_valid: bool,
) -> LookupResponse:
    """Lookup answer for a known agent."""
    return LookupResponse(
        status=PresenceStatus.ONLINE if online else PresenceStatus.OFFLINE,
        endpoint=record.endpoint,
        mode=record.mode or None,
        attestation_valid=attestation_valid,
        last_seen=format_rfc3339(record.last_seen),
    )
