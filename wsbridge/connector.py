"""Opens websocket connections to servers."""

from __future__ import annotations

import asyncio
import logging
import socket
import ssl
import threading
from typing import Callable

from websockets.asyncio.client import connect
from websockets.exceptions import InvalidHandshake, InvalidURI

from .stream import WsStream

logger = logging.getLogger(__name__)

HANDSHAKE_TIMEOUT_S = 30.0
KEEP_ALIVE_PING_INTERVAL_S = 10.0


class ConnectError(ConnectionError):
    """A connection attempt to an endpoint failed."""

    def __init__(self, endpoint: str, message: str, ext_error_msg: str = "") -> None:
        super().__init__(f"{message}{ext_error_msg}")
        self.endpoint = endpoint
        self.message = message
        self.ext_error_msg = ext_error_msg


def _uri(host: str, port: int, disable_ssl: bool) -> str:
    scheme = "ws" if disable_ssl else "wss"
    shown = f"[{host}]" if ":" in host else host
    return f"{scheme}://{shown}:{port}/"


class WsConnector:
    """Connects to websocket servers, one attempt per endpoint at a time."""

    def __init__(
        self,
        module_name: str = "DEFAULT",
        ssl_context: ssl.SSLContext | None = None,
        node_id_extractor: Callable[[bytes | None], str] | None = None,
    ) -> None:
        self.module_name = module_name
        self.ssl_context = ssl_context
        self.node_id_extractor = node_id_extractor
        self._pending_lock = threading.Lock()
        self._pending_conns: set[str] = set()

    def insert_pending_conns(self, endpoint: str) -> bool:
        """Mark an endpoint as being connected; False if it already is."""
        with self._pending_lock:
            if endpoint in self._pending_conns:
                return False
            self._pending_conns.add(endpoint)
            return True

    def erase_pending_conns(self, endpoint: str) -> bool:
        """Unmark an endpoint; False if it was not marked."""
        with self._pending_lock:
            if endpoint not in self._pending_conns:
                return False
            self._pending_conns.remove(endpoint)
            return True

    async def connect_to_ws_server(
        self, host: str, port: int, disable_ssl: bool
    ) -> tuple[WsStream, str]:
        """Connect and complete the TLS and websocket handshakes.

        Returns the stream and the peer's node id. Raises ConnectError on failure,
        including when a connection to the same endpoint is already in progress.
        """
        endpoint = f"{host}:{port}"
        if not self.insert_pending_conns(endpoint):
            logger.warning(
                "[%s][WS][CONNECTOR] connectToWsServer: connection pending, endpoint: %s",
                self.module_name,
                endpoint,
            )
            raise ConnectError(endpoint, "operation would block: connection in progress")
        try:
            return await self._connect(host, port, disable_ssl, endpoint)
        finally:
            self.erase_pending_conns(endpoint)

    async def _connect(
        self, host: str, port: int, disable_ssl: bool, endpoint: str
    ) -> tuple[WsStream, str]:
        kwargs: dict = {
            "open_timeout": HANDSHAKE_TIMEOUT_S,
            "ping_interval": KEEP_ALIVE_PING_INTERVAL_S,
            "compression": None,
            "max_size": None,
        }
        if not disable_ssl and self.ssl_context is not None:
            kwargs["ssl"] = self.ssl_context
        try:
            conn = await connect(_uri(host, port, disable_ssl), **kwargs)
        except ssl.SSLError as exc:
            logger.warning(
                "[%s][WS][CONNECTOR] ssl handshake failed, endpoint: %s, error: %s",
                self.module_name,
                endpoint,
                exc,
            )
            raise ConnectError(endpoint, str(exc), " ssl handshake failed") from exc
        except (OSError, asyncio.TimeoutError, InvalidHandshake, InvalidURI) as exc:
            logger.warning(
                "[%s][WS][CONNECTOR] connect failed, endpoint: %s, error: %s",
                self.module_name,
                endpoint,
                exc,
            )
            raise ConnectError(endpoint, str(exc) or type(exc).__name__) from exc

        transport = getattr(conn, "transport", None)
        sock = transport.get_extra_info("socket") if transport is not None else None
        if sock is not None:
            try:
                sock.setsockopt(socket.IPPROTO_TCP, socket.TCP_NODELAY, 1)
            except OSError:
                pass

        peer_cert = None
        if not disable_ssl and transport is not None:
            ssl_object = transport.get_extra_info("ssl_object")
            if ssl_object is not None:
                peer_cert = ssl_object.getpeercert(binary_form=True)
        node_id = self.node_id_extractor(peer_cert) if self.node_id_extractor else ""

        logger.info(
            "[%s][WS][CONNECTOR] websocket handshake successfully, endpoint: %s",
            self.module_name,
            endpoint,
        )
        return WsStream(conn, self.module_name), node_id

    def __repr__(self) -> str:
        return f"WsConnector(module_name={self.module_name!r})"