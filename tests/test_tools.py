import socket

import pytest

from wsbridge.config import NodeIPEndpoint
from wsbridge.tools import close_socket, string_to_endpoint, valid_ip, valid_port


@pytest.mark.parametrize(
    "ip, expected",
    [
        ("0.0.0.0", True),
        ("123", False),
        ("127.0.0.1", True),
        ("2001:0db8:3c4d:0015:0000:0000:1a2f:1a2b", True),
        ("0:0:0:0:0:0:0:1", True),
        ("::1", True),
        ("", False),
        ("example.com", False),
    ],
)
def test_valid_ip(ip, expected):
    assert valid_ip(ip) is expected


def test_valid_ip_rejects_non_string():
    assert valid_ip(123) is False


@pytest.mark.parametrize("port", [1111, 10, 65535])
def test_valid_port(port):
    assert valid_port(port) is True


def test_zero_port_is_invalid():
    assert valid_port(0) is False


def test_string_to_endpoint_ipv4():
    assert string_to_endpoint("127.0.0.1:12345") == NodeIPEndpoint("127.0.0.1", 12345)


def test_string_to_endpoint_ipv6():
    assert string_to_endpoint("[::1]:30300") == NodeIPEndpoint("::1", 30300)


@pytest.mark.parametrize(
    "peer",
    ["example.com:80", "127.0.0.1:0", "127.0.0.1", "127.0.0.1:abc", "[::1]", "[::1]:99999"],
)
def test_string_to_endpoint_invalid(peer):
    with pytest.raises(ValueError):
        string_to_endpoint(peer)


def test_endpoint_text_round_trip():
    endpoint = NodeIPEndpoint("10.0.0.2", 20200)
    assert string_to_endpoint(str(endpoint)) == endpoint


def test_close_socket_closes_and_is_idempotent():
    left, right = socket.socketpair()
    try:
        close_socket(left)
        assert left.fileno() == -1
        close_socket(left)
        assert left.fileno() == -1
        assert right.recv(1) == b""
    finally:
        right.close()