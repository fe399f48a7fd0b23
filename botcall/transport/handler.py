"""
Heartbeat WebSocket Handler

One long-lived session per agent on /v1/ws?agent={id}.

The server drives the heartbeat: every interval it sends {"type": "ping"}
and, only if that write succeeded, touches the agent in the registry.
Client replies are neither required nor read. When a write fails the
session ends; other sessions are unaffected.
"""

from __future__ import annotations

import asyncio
import logging

from fastapi import WebSocket, WebSocketDisconnect

from botcall.protocol import ErrorFrame, HeartbeatFrame
from botcall.service import RegistryService

logger = logging.getLogger(__name__)


class HeartbeatHandler:
    """
    Runs heartbeat sessions for connected agents.

    Sessions share nothing except the RegistryService they touch.
    """

    def __init__(self, service: RegistryService):
        """
        Initialize the handler.

        Args:
            service: Registry service to report heartbeats to; its settings
                give the ping period
        """
        self._service = service
        self._interval = service.settings.heartbeat_interval_seconds

    async def handle_connection(self, websocket: WebSocket) -> None:
        """
        Handle a WebSocket connection lifecycle.

        The agent is identified by the `agent` query parameter. Without it a
        single error frame is sent and the socket is closed.

        Args:
            websocket: The WebSocket connection
        """
        await websocket.accept()

        agent_id = websocket.query_params.get("agent")
        if not agent_id:
            await self._send_text(
                websocket, ErrorFrame(error="missing agent ID").model_dump_json()
            )
            await websocket.close(code=1008, reason="Missing agent ID")
            return

        logger.info(f"WebSocket connected for agent: {agent_id}")

        try:
            await self._heartbeat_loop(websocket, agent_id)
        except asyncio.CancelledError:
            logger.info(f"Heartbeat session cancelled for agent: {agent_id}")
            raise
        finally:
            logger.info(f"WebSocket session ended for agent: {agent_id}")

    async def _heartbeat_loop(self, websocket: WebSocket, agent_id: str) -> None:
        """Ping on a fixed interval and touch the agent after every sent ping."""
        ping = HeartbeatFrame().model_dump_json()
        while True:
            await asyncio.sleep(self._interval)
            if not await self._send_text(websocket, ping):
                logger.warning(f"Ping failed for agent {agent_id}, closing session")
                return
            await self._service.heartbeat(agent_id)

    async def _send_text(self, websocket: WebSocket, data: str) -> bool:
        """Send a text frame. Returns False if the connection is unusable."""
        try:
            await websocket.send_text(data)
            return True
        except WebSocketDisconnect:
            return False
        except Exception as e:
            logger.error(f"Error sending frame: {e}")
            return False
