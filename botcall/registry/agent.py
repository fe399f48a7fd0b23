"""
Agent Record Model

Represents a registered bot in the discovery registry.
Contains identity, dialing information and presence.
"""

from datetime import datetime, timedelta, timezone
from enum import Enum

from pydantic import BaseModel, Field


def utc_now() -> datetime:
    """Timezone-aware current UTC time (default clock)."""
    return datetime.now(timezone.utc)


class AgentMode(str, Enum):
    """How a caller should dial the registered endpoint.

    Opaque to the registry: no registry behavior differs by mode, and values
    outside this enum are stored as sent.
    """
    DIRECT = "direct"
    RELAY = "relay"
    NAT_PENDING = "nat-pending"


class AgentRecord(BaseModel):
    """
    Represents a registered agent.

    The store owns the live instance; everything handed out is a copy.
    """

    # === Identity ===
    agent_id: str = Field(
        ...,
        min_length=1,
        description="Caller-supplied unique identifier for the agent"
    )

    # === Dialing ===
    endpoint: str = Field(
        ...,
        min_length=1,
        description="Reachable address (host:port or URL), never validated for reachability"
    )
    mode: str = Field(
        default="",
        description="Dialing hint for callers, stored as sent (see AgentMode)"
    )
    attestation: str = Field(
        default="",
        description="Opaque credential presented at registration"
    )

    # === Presence ===
    online: bool = Field(
        default=True,
        description="Set on every registration and touch"
    )
    last_seen: datetime = Field(
        default_factory=utc_now,
        description="Last registration or touch timestamp"
    )

    def is_alive(self, window: timedelta, now: datetime | None = None) -> bool:
        """Online iff flagged online and last_seen is younger than the window."""
        now = now or utc_now()
        return self.online and now - self.last_seen < window

    def touch(self, now: datetime | None = None) -> None:
        """Update last_seen and mark the agent online."""
        self.last_seen = now or utc_now()
        self.online = True
