# Presence Registry
# Authoritative agent table: registration, lookup, touch, liveness listing

from botcall.registry.agent import AgentRecord, AgentMode, utc_now
from botcall.registry.lock import ReadWriteLock
from botcall.registry.store import PresenceStore

__all__ = ["AgentRecord", "AgentMode", "PresenceStore", "ReadWriteLock", "utc_now"]
