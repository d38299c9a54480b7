"""A websocket stream that carries framed binary messages."""

from __future__ import annotations

import logging
from typing import Any

from websockets.protocol import State

logger = logging.getLogger(__name__)


def _format_address(address: Any) -> str:
    host, port = address[0], address[1]
    return f"{host}:{port}"


class WsStream:
    """Wraps an open websocket connection, plain or over TLS.

    Each message is written as two fragments of one binary websocket
    message: the header first, then the payload.
    """

    def __init__(self, connection: Any, module_name: str = "DEFAULT") -> None:
        self._conn = connection
        self._closed = False
        self._max_read_msg_size: int | None = None
        self.module_name = module_name

    @property
    def connection(self) -> Any:
        """The underlying websocket connection."""
        return self._conn

    @property
    def max_read_msg_size(self) -> int | None:
        return self._max_read_msg_size

    def set_max_read_msg_size(self, size: int) -> None:
        """Limit the size of a message that read() accepts."""
        self._max_read_msg_size = size

    def is_open(self) -> bool:
        state = getattr(self._conn, "state", None)
        return not self._closed and state is State.OPEN

    async def close(self) -> None:
        """Close the connection; later calls do nothing."""
        if self._closed:
            return
        self._closed = True
        try:
            await self._conn.close()
        except Exception as exc:  # noqa: BLE001
            logger.warning("[%s][WS][STREAM] close exception: %s", self.module_name, exc)
        else:
            logger.info("[%s][WS][STREAM] the stream has been closed", self.module_name)

    async def write(self, header: bytes, payload: bytes) -> int:
        """Send header and payload as one fragmented binary message.

        Returns the number of message bytes written.
        """
        header = bytes(header)
        payload = bytes(payload)
        await self._conn.send([header, payload])
        return len(header) + len(payload)

    async def read(self) -> bytes:
        """Receive one whole message.

        Raises ValueError when the message is larger than the configured maximum.
        """
        data = await self._conn.recv()
        if isinstance(data, str):
            data = data.encode("utf-8")
        else:
            data = bytes(data)
        limit = self._max_read_msg_size
        if limit is not None and limit >= 0 and len(data) > limit:
            raise ValueError(f"message size {len(data)} exceeds the maximum {limit}")
        return data

    def local_endpoint(self) -> str:
        """The local address as ``host:port``, or an empty string if unknown."""
        try:
            return _format_address(self._conn.local_address)
        except Exception as exc:  # noqa: BLE001
            logger.warning("[%s][WS][STREAM] localEndpoint: %s", self.module_name, exc)
        return ""

    def remote_endpoint(self) -> str:
        """The peer address as ``host:port``, or an empty string if unknown."""
        try:
            return _format_address(self._conn.remote_address)
        except Exception as exc:  # noqa: BLE001
            logger.warning("[%s][WS][STREAM] remoteEndpoint: %s", self.module_name, exc)
        return ""

    def __repr__(self) -> str:
        return f"WsStream(module_name={self.module_name!r}, open={self.is_open()!r})"