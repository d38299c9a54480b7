import contextlib

import pytest
from websockets.asyncio.client import connect
from websockets.asyncio.server import serve
from websockets.protocol import State

from wsbridge.message import WsMessage
from wsbridge.stream import WsStream


async def _echo(ws):
    async for message in ws:
        await ws.send(message)


@contextlib.asynccontextmanager
async def _echo_server():
    async with serve(_echo, "127.0.0.1", 0, compression=None) as server:
        port = server.sockets[0].getsockname()[1]
        yield port


class _FakeConnection:
    def __init__(self):
        self.state = State.OPEN
        self.close_calls = 0

    async def close(self):
        self.close_calls += 1
        self.state = State.CLOSED


@pytest.mark.asyncio
async def test_write_then_read_round_trip():
    async with _echo_server() as port:
        async with connect(f"ws://127.0.0.1:{port}/", compression=None) as conn:
            stream = WsStream(conn)
            msg = WsMessage(222, b"HelloWorld.", seq="abc", status=111)
            parts = msg.encode_parts()
            written = await stream.write(parts.header, parts.payload)
            assert written == len(parts.header) + len(parts.payload)
            data = await stream.read()
            assert data == msg.encode()
            decoded = WsMessage()
            decoded.decode(data)
            assert decoded.payload == b"HelloWorld."
            assert decoded.packet_type == 222
            assert decoded.seq == "abc"


@pytest.mark.asyncio
async def test_write_with_empty_payload():
    async with _echo_server() as port:
        async with connect(f"ws://127.0.0.1:{port}/", compression=None) as conn:
            stream = WsStream(conn)
            header = WsMessage().encode_parts().header
            await stream.write(header, b"")
            data = await stream.read()
            assert len(data) == WsMessage.MESSAGE_MIN_LENGTH


@pytest.mark.asyncio
async def test_endpoints():
    async with _echo_server() as port:
        async with connect(f"ws://127.0.0.1:{port}/") as conn:
            stream = WsStream(conn)
            assert stream.remote_endpoint() == f"127.0.0.1:{port}"
            assert stream.local_endpoint().startswith("127.0.0.1:")
            assert stream.local_endpoint() != stream.remote_endpoint()


def test_endpoints_unknown_are_empty():
    stream = WsStream(object())
    assert stream.local_endpoint() == ""
    assert stream.remote_endpoint() == ""


@pytest.mark.asyncio
async def test_max_read_size_enforced():
    async with _echo_server() as port:
        async with connect(f"ws://127.0.0.1:{port}/") as conn:
            stream = WsStream(conn)
            stream.set_max_read_msg_size(4)
            assert stream.max_read_msg_size == 4
            await stream.write(b"12345", b"678")
            with pytest.raises(ValueError):
                await stream.read()


@pytest.mark.asyncio
async def test_close_is_idempotent():
    fake = _FakeConnection()
    stream = WsStream(fake, "MOD")
    assert stream.is_open() is True
    await stream.close()
    await stream.close()
    assert fake.close_calls == 1
    assert stream.is_open() is False


@pytest.mark.asyncio
async def test_is_open_follows_real_connection():
    async with _echo_server() as port:
        conn = await connect(f"ws://127.0.0.1:{port}/")
        stream = WsStream(conn)
        assert stream.is_open() is True
        await stream.close()
        assert stream.is_open() is False
        assert conn.state is State.CLOSED