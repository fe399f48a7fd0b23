# Registry Service
# Registration, lookup, heartbeat and listing on top of the presence store

from botcall.service.registry_service import RegistryService

__all__ = ["RegistryService"]
