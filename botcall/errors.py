"""
Registry Exceptions

Error taxonomy for the discovery registry:
- Client input errors are raised by the service and rendered as 4xx
- Attestation rejection comes from a configured verifier
- Client SDK errors wrap non-2xx responses and transport failures

An unknown agent is not an error; lookups report it as offline.
"""


class RegistryError(Exception):
    """Base exception for registry errors."""
    pass


class InvalidRequestError(RegistryError):
    """Malformed or incomplete request (missing fields, bad body, bad path)."""
    pass


class AttestationRejectedError(RegistryError):
    """The configured attestation verifier refused the registration."""

    def __init__(self, agent_id: str, reason: str | None = None):
        self.agent_id = agent_id
        self.reason = reason
        super().__init__(reason or f"Attestation rejected for agent {agent_id}")


class RegistryClientError(RegistryError):
    """Raised by RegistryClient when the registry answers with an error."""

    def __init__(self, message: str, status_code: int | None = None):
        self.status_code = status_code
        super().__init__(message)
