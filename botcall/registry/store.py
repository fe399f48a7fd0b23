"""
Presence Store

In-memory table of registered agents and their liveness.

The store knows nothing about HTTP or WebSocket: it keeps one record per
agent_id and answers reads with copies. Liveness is never decided here;
callers pass the window they want applied (see RegistryService).

Why in-memory?
- Registrations are refreshed periodically by the agents themselves
- Low latency for lookups
- Losing the table on restart only costs one keepalive period
"""

import logging
from datetime import datetime, timedelta
from typing import Callable

from botcall.registry.agent import AgentRecord, utc_now
from botcall.registry.lock import ReadWriteLock

logger = logging.getLogger(__name__)


class PresenceStore:
    """
    Concurrent agent table.

    Reads (lookup, list_online) share a reader/writer lock; writes
    (register, touch, reclaim) hold it exclusively. Nothing inside the
    critical sections awaits I/O.
    """

    def __init__(self, clock: Callable[[], datetime] = utc_now):
        """
        Initialize the store.

        Args:
            clock: Returns the current timezone-aware time. Injectable for tests.
        """
        self._clock = clock

        # agent_id -> AgentRecord (the only mutable copies in the process)
        self._agents: dict[str, AgentRecord] = {}

        self._lock = ReadWriteLock()

    def now(self) -> datetime:
        """Current time according to the store's clock."""
        return self._clock()

    async def register(self, record: AgentRecord) -> AgentRecord:
        """
        Insert or fully replace the record for record.agent_id.

        Marks the agent online with last_seen set to now. Fields of a
        previous registration are never merged into the new one.

        Args:
            record: Fully populated agent record

        Returns:
            Snapshot of the stored record
        """
        stored = record.model_copy(update={"online": True, "last_seen": self._clock()})

        async with self._lock.write():
            replaced = stored.agent_id in self._agents
            self._agents[stored.agent_id] = stored
            snapshot = stored.model_copy()

        logger.info(
            f"Registered agent: {stored.agent_id} at {stored.endpoint} "
            f"(mode: {stored.mode or '-'}, replaced: {replaced})"
        )
        return snapshot

    async def lookup(self, agent_id: str) -> tuple[AgentRecord | None, bool]:
        """
        Get a snapshot of an agent record.

        Args:
            agent_id: Agent to look up

        Returns:
            Tuple of (record copy or None, found flag)
        """
        async with self._lock.read():
            agent = self._agents.get(agent_id)
            if agent is None:
                return None, False
            return agent.model_copy(), True

    async def touch(self, agent_id: str) -> bool:
        """
        Refresh last_seen and the online flag of an existing agent.

        Endpoint, mode and attestation are left untouched. Unknown ids are
        ignored; no record is created.

        Args:
            agent_id: Agent to refresh

        Returns:
            True if the agent was found and updated, False otherwise
        """
        now = self._clock()
        async with self._lock.write():
            agent = self._agents.get(agent_id)
            if agent is None:
                return False
            agent.touch(now)
            return True

    async def list_online(self, window: timedelta) -> list[AgentRecord]:
        """
        List agents flagged online whose last_seen is younger than the window.

        Args:
            window: Liveness window to apply

        Returns:
            Record copies sorted by agent_id
        """
        now = self._clock()
        async with self._lock.read():
            online = [
                agent.model_copy()
                for agent in self._agents.values()
                if agent.is_alive(window, now)
            ]
        online.sort(key=lambda a: a.agent_id)
        return online

    async def reclaim(self, retention: timedelta) -> int:
        """
        Remove agents not seen for at least the retention period.

        Args:
            retention: Age of last_seen at which a record is dropped

        Returns:
            Number of records removed
        """
        cutoff = self._clock() - retention
        async with self._lock.write():
            stale_ids = [
                agent_id
                for agent_id, agent in self._agents.items()
                if agent.last_seen <= cutoff
            ]
            for agent_id in stale_ids:
                del self._agents[agent_id]

        if stale_ids:
            logger.info(f"Reclaimed {len(stale_ids)} stale agents: {stale_ids}")
        return len(stale_ids)

    @property
    def agent_count(self) -> int:
        """Number of stored agents, online or not."""
        return len(self._agents)
