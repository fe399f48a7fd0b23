# Transport Layer
# HTTP routes and heartbeat WebSocket sessions for the registry
# Kept separate from the service so the registry logic stays transport-free

from botcall.transport.handler import HeartbeatHandler
from botcall.transport.app import create_app

__all__ = ["HeartbeatHandler", "create_app"]
