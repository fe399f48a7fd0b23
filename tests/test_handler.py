"""Tests for HeartbeatHandler sessions driven through stand-in sockets."""

import asyncio

from starlette.websockets import WebSocketDisconnect

from botcall.transport import HeartbeatHandler


class FakeSocket:
    """Records frames; the send after `healthy_sends` raises `failure`."""

    def __init__(self, agent_id: str | None = "orion", healthy_sends: int = 0, failure=None):
        self.query_params = {"agent": agent_id} if agent_id else {}
        self.healthy_sends = healthy_sends
        self.failure = failure or ConnectionResetError("peer went away")
        self.sent: list[str] = []
        self.accepted = False
        self.close_code = None

    async def accept(self):
        self.accepted = True

    async def send_text(self, data: str):
        if len(self.sent) >= self.healthy_sends:
            raise self.failure
        self.sent.append(data)

    async def close(self, code: int = 1000, reason: str | None = None):
        self.close_code = code


class TestSendFailure:

    async def test_failed_ping_ends_session_without_touching(self, service, make_record, clock):
        await service.store.register(make_record())
        registered_at = (await service.store.lookup("orion"))[0].last_seen
        clock.advance(minutes=1)
        handler = HeartbeatHandler(service)
        socket = FakeSocket()

        await asyncio.wait_for(handler.handle_connection(socket), timeout=1.0)

        agent, found = await service.store.lookup("orion")
        assert found
        assert agent.last_seen == registered_at
        assert socket.accepted
        assert socket.sent == []

    async def test_disconnect_mid_session_keeps_earlier_touches(self, service, make_record, clock):
        await service.store.register(make_record())
        pinged_at = clock.advance(minutes=1)
        handler = HeartbeatHandler(service)
        socket = FakeSocket(healthy_sends=2, failure=WebSocketDisconnect(code=1006))

        await asyncio.wait_for(handler.handle_connection(socket), timeout=1.0)

        assert socket.sent == ['{"type":"ping"}', '{"type":"ping"}']
        agent, _ = await service.store.lookup("orion")
        assert agent.last_seen == pinged_at

    async def test_failed_session_leaves_other_agents_alone(self, service, make_record, clock):
        await service.store.register(make_record("orion"))
        await service.store.register(make_record("vega"))
        handler = HeartbeatHandler(service)
        clock.advance(minutes=10)

        healthy = asyncio.create_task(handler.handle_connection(FakeSocket("vega", healthy_sends=100)))
        await asyncio.wait_for(handler.handle_connection(FakeSocket("orion")), timeout=1.0)
        await asyncio.sleep(0.2)

        assert not healthy.done()
        assert (await service.lookup("vega")).status == "online"
        assert (await service.lookup("orion")).status == "offline"

        healthy.cancel()
        await asyncio.gather(healthy, return_exceptions=True)


async def test_missing_agent_closes_with_policy_violation(service):
    socket = FakeSocket(agent_id=None, healthy_sends=1)

    await asyncio.wait_for(HeartbeatHandler(service).handle_connection(socket), timeout=1.0)

    assert socket.sent == ['{"error":"missing agent ID"}']
    assert socket.close_code == 1008
