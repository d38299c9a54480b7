"""Helpers for addresses, ports and sockets."""

from __future__ import annotations

import ipaddress
import logging
import re
import socket

from .config import NodeIPEndpoint

logger = logging.getLogger(__name__)


def valid_ip(ip: str) -> bool:
    """Return True if the text is an IPv4 or IPv6 address."""
    if not isinstance(ip, str):
        return False
    try:
        ipaddress.ip_address(ip)
    except ValueError:
        return False
    return True


def valid_port(port: int) -> bool:
    return port > 0


def _parse_port(text: str, peer: str) -> int:
    try:
        port = int(text)
    except ValueError:
        raise ValueError(f"invalid port in endpoint: {peer!r}") from None
    if not 0 <= port <= 0xFFFF:
        raise ValueError(f"port out of range in endpoint: {peer!r}")
    return port


def string_to_endpoint(peer: str) -> NodeIPEndpoint:
    """Parse ``ip:port`` or ``[ipv6]:port`` into an endpoint.

    Raises ValueError when the text cannot be parsed or the ip or port is invalid.
    """
    parts = re.split(r"\]+", peer)
    ip = ""
    port = 0
    if len(parts) == 2:
        ip = parts[0][1:]
        port = _parse_port(parts[1][1:], peer)
    elif len(parts) == 1:
        fields = re.split(r":+", peer)
        if len(fields) < 2:
            raise ValueError(f"missing port in endpoint: {peer!r}")
        ip = fields[0]
        port = _parse_port(fields[1], peer)

    if not (valid_ip(ip) and valid_port(port)):
        raise ValueError(f"invalid endpoint: {peer!r}")
    return NodeIPEndpoint(ip, port)


def close_socket(sock: socket.socket) -> None:
    """Shut a socket down in both directions and close it, ignoring errors."""
    try:
        try:
            sock.shutdown(socket.SHUT_RDWR)
        except OSError:
            pass
        if sock.fileno() != -1:
            sock.close()
    except Exception as exc:  # noqa: BLE001
        logger.warning("[WS][TOOL] close socket exception: %s", exc)