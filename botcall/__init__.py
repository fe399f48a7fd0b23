# BotCall Discovery Registry
# Rendezvous service where bots register an endpoint and callers look them up

__version__ = "0.1.0"

# Re-export commonly used components for convenience
from botcall.registry import AgentRecord, AgentMode, PresenceStore
from botcall.service import RegistryService
from botcall.config import RegistrySettings, settings_from_env

__all__ = [
    "__version__",
    # Presence
    "AgentRecord",
    "AgentMode",
    "PresenceStore",
    # Service
    "RegistryService",
    # Config
    "RegistrySettings",
    "settings_from_env",
]
