"""Configuration of a websocket service and the small value types it uses."""

from __future__ import annotations

import ssl
from dataclasses import dataclass
from enum import IntFlag

MIN_HEART_BEAT_PERIOD_MS = 10000
MIN_RECONNECT_PERIOD_MS = 10000
DEFAULT_MESSAGE_TIMEOUT_MS = -1
DEFAULT_MAX_MESSAGE_SIZE = 32 * 1024 * 1024
MIN_THREAD_POOL_SIZE = 1


class WsModel(IntFlag):
    """Whether the service works as a client, a server or both."""

    NONE = 0
    CLIENT = 0x01
    SERVER = 0x10
    MIXED = CLIENT | SERVER


@dataclass(frozen=True, order=True)
class NodeIPEndpoint:
    """A host (ip or domain name) and a port."""

    address: str
    port: int

    def __str__(self) -> str:
        return f"{self.address}:{self.port}"


@dataclass
class Options:
    """Options of an asynchronous send; timeout is in milliseconds."""

    timeout: int = 0


class WsConfig:
    """Settings for a websocket service."""

    def __init__(
        self,
        *,
        model: WsModel = WsModel.NONE,
        listen_ip: str = "",
        listen_port: int = 0,
        sm_ssl: bool = False,
        connect_peers: set[NodeIPEndpoint] | None = None,
        thread_pool_size: int = 4,
        send_msg_timeout: int = DEFAULT_MESSAGE_TIMEOUT_MS,
        reconnect_period: int = MIN_RECONNECT_PERIOD_MS,
        heartbeat_period: int = MIN_HEART_BEAT_PERIOD_MS,
        disable_ssl: bool = False,
        server_ssl_context: ssl.SSLContext | None = None,
        client_ssl_context: ssl.SSLContext | None = None,
        max_msg_size: int = DEFAULT_MAX_MESSAGE_SIZE,
        module_name: str = "DEFAULT",
    ) -> None:
        self.model = model
        self.listen_ip = listen_ip
        self.listen_port = listen_port
        self.sm_ssl = sm_ssl
        self.connect_peers = connect_peers
        self.thread_pool_size = thread_pool_size
        self.send_msg_timeout = send_msg_timeout
        self.reconnect_period = reconnect_period
        self.heartbeat_period = heartbeat_period
        self.disable_ssl = disable_ssl
        self.server_ssl_context = server_ssl_context
        self.client_ssl_context = client_ssl_context
        self.max_msg_size = max_msg_size
        self.module_name = module_name

    def as_client(self) -> bool:
        return bool(self.model & WsModel.CLIENT)

    def as_server(self) -> bool:
        return bool(self.model & WsModel.SERVER)

    @property
    def reconnect_period(self) -> int:
        """Reconnect interval in ms, never below the minimum."""
        return max(self._reconnect_period, MIN_RECONNECT_PERIOD_MS)

    @reconnect_period.setter
    def reconnect_period(self, value: int) -> None:
        self._reconnect_period = value

    @property
    def heartbeat_period(self) -> int:
        """Heartbeat interval in ms, never below the minimum."""
        return max(self._heartbeat_period, MIN_HEART_BEAT_PERIOD_MS)

    @heartbeat_period.setter
    def heartbeat_period(self, value: int) -> None:
        self._heartbeat_period = value

    @property
    def thread_pool_size(self) -> int:
        """Worker count; zero falls back to the minimum."""
        return self._thread_pool_size or MIN_THREAD_POOL_SIZE

    @thread_pool_size.setter
    def thread_pool_size(self, value: int) -> None:
        self._thread_pool_size = value

    def __repr__(self) -> str:
        return (
            f"WsConfig(model={self.model!r}, listen_ip={self.listen_ip!r}, "
            f"listen_port={self.listen_port!r}, disable_ssl={self.disable_ssl!r}, "
            f"module_name={self.module_name!r})"
        )