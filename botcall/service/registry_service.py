"""
Registry Service

Protocol logic on top of the PresenceStore: validates registration and
lookup requests, applies the liveness policy and renders responses.

Liveness:
    An agent is online iff its record is flagged online and
    now - last_seen < liveness_window. Every read path (lookup and listing)
    goes through is_online()/list_online() with the same configured window.

Heartbeats:
    The per-agent WebSocket session calls heartbeat() after each ping it
    manages to send. Liveness therefore means "the registry could still
    write to the agent's socket", not "the agent answered". A stalled
    client keeps its agent online as long as writes succeed.

Reclamation:
    Records are never removed on the read path. When retention is
    configured, a background sweep drops records whose last_seen is older
    than the retention window (much longer than the liveness window).
"""

import asyncio
import logging
from datetime import datetime

from botcall.attestation import (
    AcceptAllVerifier,
    AttestationContext,
    AttestationVerifier,
)
from botcall.config import RegistrySettings
from botcall.errors import AttestationRejectedError, InvalidRequestError
from botcall.protocol import (
    AgentListResponse,
    LookupResponse,
    RegisterRequest,
    RegisterResponse,
    create_lookup_not_found,
    create_lookup_result,
)
from botcall.registry import AgentRecord, PresenceStore

logger = logging.getLogger(__name__)


class RegistryService:
    """
    Registration, lookup, heartbeat and listing for the discovery registry.

    Holds no agent state of its own; the store passed in is the only table.
    """

    def __init__(
        self,
        store: PresenceStore,
        settings: RegistrySettings | None = None,
        verifier: AttestationVerifier | None = None,
    ):
        """
        Initialize the service.

        Args:
            store: Presence store owning the agent table
            settings: Registry settings (liveness window, retention, ...)
            verifier: Attestation verifier, accept-all when omitted
        """
        self._store = store
        self._settings = settings or RegistrySettings()
        self._verifier = verifier or AcceptAllVerifier()

        # Background task for reclamation
        self._sweep_task: asyncio.Task | None = None

    @property
    def store(self) -> PresenceStore:
        return self._store

    @property
    def settings(self) -> RegistrySettings:
        return self._settings

    # =========================================================================
    # Lifecycle
    # =========================================================================

    async def start(self) -> None:
        """Start the reclamation sweep if retention is configured."""
        if self._settings.retention is None:
            logger.info("Agent reclamation disabled (retention=0)")
            return
        if self._sweep_task is None:
            self._sweep_task = asyncio.create_task(self._sweep_loop())
            logger.info(
                f"Agent reclamation task started "
                f"(retention: {self._settings.retention_seconds}s, "
                f"interval: {self._settings.sweep_interval_seconds}s)"
            )

    async def stop(self) -> None:
        """Stop the reclamation sweep."""
        if self._sweep_task:
            self._sweep_task.cancel()
            try:
                await self._sweep_task
            except asyncio.CancelledError:
                pass
            self._sweep_task = None
            logger.info("Agent reclamation task stopped")

    async def _sweep_loop(self) -> None:
        """Periodically drop agents older than the retention window."""
        while True:
            try:
                await asyncio.sleep(self._settings.sweep_interval_seconds)
                await self.reclaim()
            except asyncio.CancelledError:
                break
            except Exception as e:
                logger.error(f"Error in reclamation loop: {e}")

    async def reclaim(self) -> int:
        """Run one reclamation pass. Returns the number of agents removed."""
        retention = self._settings.retention
        if retention is None:
            return 0
        return await self._store.reclaim(retention)

    # =========================================================================
    # Liveness
    # =========================================================================

    def is_online(self, record: AgentRecord, now: datetime | None = None) -> bool:
        """Apply the configured liveness window to a record."""
        return record.is_alive(self._settings.liveness_window, now or self._store.now())

    # =========================================================================
    # Operations
    # =========================================================================

    async def register(self, request: RegisterRequest, host: str) -> RegisterResponse:
        """
        Register (or fully re-register) an agent.

        Args:
            request: Parsed registration body
            host: Host the request was addressed to, used for the callback URL

        Returns:
            Confirmation with the signaling URL for the agent

        Raises:
            InvalidRequestError: If agent_id or endpoint is empty
            AttestationRejectedError: If the verifier refuses the attestation
        """
        if not request.agent_id or not request.endpoint:
            raise InvalidRequestError("Missing required fields: agent_id and endpoint")

        result = self._verifier.verify(AttestationContext(
            agent_id=request.agent_id,
            token=request.attestation,
            endpoint=request.endpoint,
        ))
        if not result.is_valid:
            raise AttestationRejectedError(request.agent_id, result.reason)

        record = AgentRecord(
            agent_id=request.agent_id,
            endpoint=request.endpoint,
            mode=request.mode,
            attestation=request.attestation,
        )
        await self._store.register(record)

        return RegisterResponse(
            confirmed=True,
            url=f"{self._settings.callback_scheme}://{host}/v1/call/{record.agent_id}",
            status="online",
        )

    async def lookup(self, agent_id: str) -> LookupResponse:
        """
        Look an agent up and report its liveness.

        Raises:
            InvalidRequestError: If agent_id is empty
        """
        if not agent_id:
            raise InvalidRequestError("Missing agent ID")

        record, found = await self._store.lookup(agent_id)
        if not found:
            logger.debug(f"Lookup for unknown agent: {agent_id}")
            return create_lookup_not_found()

        attestation = self._verifier.verify(AttestationContext(
            agent_id=record.agent_id,
            token=record.attestation,
            endpoint=record.endpoint,
        ))
        return create_lookup_result(
            record,
            online=self.is_online(record),
            attestation_valid=attestation.is_valid,
        )

    async def heartbeat(self, agent_id: str) -> bool:
        """
        Refresh an agent after a successful heartbeat emission.

        Returns:
            True if the agent is registered, False otherwise
        """
        touched = await self._store.touch(agent_id)
        if not touched:
            logger.debug(f"Heartbeat for unregistered agent: {agent_id}")
        return touched

    async def list_agents(self) -> AgentListResponse:
        """List all agents within the liveness window."""
        agents = await self._store.list_online(self._settings.liveness_window)
        return AgentListResponse(agents=agents, count=len(agents))
