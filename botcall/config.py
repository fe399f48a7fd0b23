"""
Registry Configuration

Environment-based settings for the discovery registry.

Usage:
    # From environment (a .env file in the working directory is honored)
    settings = settings_from_env()

    # Explicit
    settings = RegistrySettings(liveness_window_seconds=360)
    app = create_app(settings)
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from datetime import timedelta

from dotenv import load_dotenv


@dataclass
class RegistrySettings:
    """
    Configuration for the registry process.

    Attributes:
        host: Interface the HTTP server binds to
        port: Port the HTTP server listens on
        liveness_window_seconds: Max age of last_seen for an agent to be reported online.
            This single value drives every liveness decision (lookup and listing).
        heartbeat_interval_seconds: Period of server-emitted WebSocket pings
        retention_seconds: Age after which stale records are reclaimed (0 disables the sweep)
        sweep_interval_seconds: How often the reclamation sweep runs
        shutdown_grace_seconds: Time in-flight requests get to finish on shutdown
        callback_scheme: URL scheme of the signaling URL returned on registration
        attestation_verifier: Name of the attestation verifier ("accept-all",
            "require-token"), or a comma-separated chain of them
        log_level: Root logging level
    """
    host: str = "0.0.0.0"
    port: int = 8080
    liveness_window_seconds: float = 300.0  # 5 minutes
    heartbeat_interval_seconds: float = 30.0
    retention_seconds: float = 86400.0  # 1 day
    sweep_interval_seconds: float = 600.0
    shutdown_grace_seconds: float = 5.0
    callback_scheme: str = "wss"
    attestation_verifier: str = "accept-all"
    log_level: str = "INFO"

    def __post_init__(self) -> None:
        if self.liveness_window_seconds <= 0:
            raise ValueError("liveness_window_seconds must be positive")
        if self.heartbeat_interval_seconds <= 0:
            raise ValueError("heartbeat_interval_seconds must be positive")
        if self.sweep_interval_seconds <= 0:
            raise ValueError("sweep_interval_seconds must be positive")
        if self.retention_seconds < 0:
            raise ValueError("retention_seconds must not be negative")
        if 0 < self.retention_seconds < self.liveness_window_seconds:
            raise ValueError(
                "retention_seconds must be at least liveness_window_seconds "
                "(or 0 to disable reclamation)"
            )

    @property
    def liveness_window(self) -> timedelta:
        return timedelta(seconds=self.liveness_window_seconds)

    @property
    def retention(self) -> timedelta | None:
        if self.retention_seconds == 0:
            return None
        return timedelta(seconds=self.retention_seconds)


def settings_from_env() -> RegistrySettings:
    """
    Create RegistrySettings from environment variables.

    Environment variables:
        PORT: HTTP port (default 8080)
        BOTCALL_HOST: Bind interface
        BOTCALL_LIVENESS_WINDOW: Liveness window in seconds
        BOTCALL_HEARTBEAT_INTERVAL: WebSocket ping period in seconds
        BOTCALL_RETENTION: Reclamation age in seconds, "0" to disable
        BOTCALL_SWEEP_INTERVAL: Reclamation sweep period in seconds
        BOTCALL_SHUTDOWN_GRACE: Graceful shutdown timeout in seconds
        BOTCALL_CALLBACK_SCHEME: Scheme of the returned signaling URL
        BOTCALL_ATTESTATION_VERIFIER: "accept-all", "require-token" or a comma-separated chain
        BOTCALL_LOG_LEVEL: Logging level name
    """
    load_dotenv()

    return RegistrySettings(
        host=os.getenv("BOTCALL_HOST", "0.0.0.0"),
        port=int(os.getenv("PORT") or "8080"),
        liveness_window_seconds=float(os.getenv("BOTCALL_LIVENESS_WINDOW", "300")),
        heartbeat_interval_seconds=float(os.getenv("BOTCALL_HEARTBEAT_INTERVAL", "30")),
        retention_seconds=float(os.getenv("BOTCALL_RETENTION", "86400")),
        sweep_interval_seconds=float(os.getenv("BOTCALL_SWEEP_INTERVAL", "600")),
        shutdown_grace_seconds=float(os.getenv("BOTCALL_SHUTDOWN_GRACE", "5")),
        callback_scheme=os.getenv("BOTCALL_CALLBACK_SCHEME", "wss"),
        attestation_verifier=os.getenv("BOTCALL_ATTESTATION_VERIFIER", "accept-all"),
        log_level=os.getenv("BOTCALL_LOG_LEVEL", "INFO").upper(),
    )
