# Protocol
# Wire models for the discovery HTTP API and heartbeat WebSocket

from botcall.protocol.models import (
    PresenceStatus,
    RegisterRequest,
    RegisterResponse,
    LookupResponse,
    AgentListResponse,
    HealthResponse,
    HeartbeatFrame,
    ErrorFrame,
    create_lookup_not_found,
    create_lookup_result,
    format_rfc3339,
)

__all__ = [
    "PresenceStatus",
    "RegisterRequest",
    "RegisterResponse",
    "LookupResponse",
    "AgentListResponse",
    "HealthResponse",
    "HeartbeatFrame",
    "ErrorFrame",
    "create_lookup_not_found",
    "create_lookup_result",
    "format_rfc3339",
]
