"""
BotCall Registry Client

Async client bots use to publish themselves and callers use to find them.

Usage:
    async with RegistryClient("http://localhost:8080") as client:
        await client.register("orion", "203.0.113.7:9000", attestation=token)
        client.start_keepalive("orion", "203.0.113.7:9000", attestation=token)

        result = await client.lookup("orion")

        async for frame in client.heartbeats("orion"):
            ...

Staying registered is the bot's job: the registry never retries anything,
so start_keepalive() re-registers on a fixed interval.
"""

import asyncio
import json
import logging
import os
from typing import Any, AsyncIterator

import httpx
import websockets

from botcall.errors import RegistryClientError
from botcall.protocol import (
    AgentListResponse,
    HealthResponse,
    HeartbeatFrame,
    LookupResponse,
    RegisterResponse,
)
from botcall.registry import AgentMode

logger = logging.getLogger(__name__)

DEFAULT_DISCOVERY_URL = "http://localhost:8080"
DEFAULT_TIMEOUT_SECONDS = 10.0
DEFAULT_KEEPALIVE_SECONDS = 30.0


class RegistryClient:
    """
    Client for the discovery registry HTTP and WebSocket API.
    """

    def __init__(
        self,
        base_url: str | None = None,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        """
        Initialize the client.

        Args:
            base_url: Registry URL, falls back to BOTCALL_DISCOVERY_URL
            timeout: Request timeout in seconds
            transport: Optional httpx transport (e.g. ASGITransport in tests)
        """
        self.base_url = (
            base_url or os.getenv("BOTCALL_DISCOVERY_URL") or DEFAULT_DISCOVERY_URL
        ).rstrip("/")
        self.http_client = httpx.AsyncClient(
            base_url=self.base_url,
            timeout=timeout,
            transport=transport,
        )
        self._keepalive_task: asyncio.Task | None = None

    async def __aenter__(self) -> "RegistryClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.close()

    async def close(self) -> None:
        """Stop keepalive and release the HTTP connection pool."""
        await self.stop_keepalive()
        await self.http_client.aclose()

    async def _request(self, method: str, path: str, **kwargs: Any) -> httpx.Response:
        try:
            response = await self.http_client.request(method, path, **kwargs)
        except httpx.TimeoutException as e:
            raise RegistryClientError(f"Request to {e.request.url} timed out") from e
        except httpx.RequestError as e:
            raise RegistryClientError(f"Request failed: {e}") from e
        return response

    @staticmethod
    def _error_detail(response: httpx.Response) -> str:
        try:
            return response.json().get("detail") or response.text
        except (ValueError, AttributeError):
            return response.text

    async def register(
        self,
        agent_id: str,
        endpoint: str,
        mode: str = AgentMode.DIRECT.value,
        attestation: str = "",
    ) -> RegisterResponse:
        """
        Register (or re-register) a bot.

        Raises:
            RegistryClientError: On a non-200 answer or an unconfirmed registration
        """
        payload = {
            "agent_id": agent_id,
            "endpoint": endpoint,
            "mode": mode.value if isinstance(mode, AgentMode) else mode,
            "attestation": attestation,
        }
        response = await self._request("POST", "/v1/register", json=payload)
        if response.status_code != 200:
            raise RegistryClientError(
                f"Registry returned {response.status_code}: {self._error_detail(response)}",
                status_code=response.status_code,
            )

        result = RegisterResponse.model_validate(response.json())
        if not result.confirmed:
            raise RegistryClientError("Registration rejected", status_code=response.status_code)

        logger.info(f"Registered as {agent_id} at {endpoint}")
        return result

    async def lookup(self, agent_id: str) -> LookupResponse:
        """Look a bot up. Unknown bots come back offline, not as an error."""
        response = await self._request("GET", f"/v1/lookup/{agent_id}")
        if response.status_code != 200:
            raise RegistryClientError(
                f"Lookup failed ({response.status_code}): {self._error_detail(response)}",
                status_code=response.status_code,
            )
        return LookupResponse.model_validate(response.json())

    async def list_agents(self) -> AgentListResponse:
        """List bots the registry currently considers online."""
        response = await self._request("GET", "/v1/agents")
        if response.status_code != 200:
            raise RegistryClientError(
                f"Listing failed ({response.status_code})",
                status_code=response.status_code,
            )
        return AgentListResponse.model_validate(response.json())

    async def health(self) -> HealthResponse:
        """Probe the registry process."""
        response = await self._request("GET", "/health")
        if response.status_code != 200:
            raise RegistryClientError(
                f"Health check failed ({response.status_code})",
                status_code=response.status_code,
            )
        return HealthResponse.model_validate(response.json())

    # =========================================================================
    # Keepalive
    # =========================================================================

    def start_keepalive(
        self,
        agent_id: str,
        endpoint: str,
        mode: str = AgentMode.DIRECT.value,
        attestation: str = "",
        interval_seconds: float = DEFAULT_KEEPALIVE_SECONDS,
    ) -> asyncio.Task:
        """
        Re-register periodically so the bot stays within the liveness window.

        Failures are logged and retried on the next tick.
        """
        if self._keepalive_task is not None:
            return self._keepalive_task

        async def _keepalive_loop() -> None:
            while True:
                try:
                    await asyncio.sleep(interval_seconds)
                    await self.register(agent_id, endpoint, mode, attestation)
                except asyncio.CancelledError:
                    break
                except RegistryClientError as e:
                    logger.warning(f"Keepalive failed: {e}")

        self._keepalive_task = asyncio.create_task(_keepalive_loop())
        return self._keepalive_task

    async def stop_keepalive(self) -> None:
        """Cancel the keepalive task if running."""
        if self._keepalive_task:
            self._keepalive_task.cancel()
            try:
                await self._keepalive_task
            except asyncio.CancelledError:
                pass
            self._keepalive_task = None

    # =========================================================================
    # Heartbeat socket
    # =========================================================================

    def websocket_url(self, agent_id: str) -> str:
        """URL of the heartbeat WebSocket for an agent."""
        ws_base = self.base_url.replace("https://", "wss://", 1).replace("http://", "ws://", 1)
        return str(httpx.URL(f"{ws_base}/v1/ws", params={"agent": agent_id}))

    async def heartbeats(self, agent_id: str) -> AsyncIterator[HeartbeatFrame]:
        """
        Hold the heartbeat WebSocket open and yield each server ping.

        The registry refreshes the agent whenever it manages to send a ping,
        so keeping this iterator running keeps the agent online.

        Raises:
            RegistryClientError: If the registry refuses the session
        """
        async with websockets.connect(self.websocket_url(agent_id)) as ws:
            async for message in ws:
                data = json.loads(message)
                if "error" in data:
                    raise RegistryClientError(f"Heartbeat session refused: {data['error']}")
                yield HeartbeatFrame.model_validate(data)
