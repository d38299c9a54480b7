"""The websocket message and its binary framing."""

from __future__ import annotations

import struct
import uuid
from dataclasses import dataclass
from enum import IntFlag

_HEAD = struct.Struct(">HHhH")
_EXT = struct.Struct(">H")


class MessageExtFlag(IntFlag):
    """Bits of the ``ext`` field."""

    NONE = 0
    RESPONSE = 0x0001


@dataclass
class EncodedMsg:
    """A message split into its header and its payload."""

    header: bytes = b""
    payload: bytes = b""


def _seq_bytes(seq: str) -> bytes:
    return seq.encode("utf-8", "surrogateescape")


class WsMessage:
    """Message layout: version(2) type(2) status(2) seqLength(2) seq(N) ext(2) payload(M)."""

    MESSAGE_MIN_LENGTH = 10

    def __init__(
        self,
        packet_type: int = 0,
        payload: bytes = b"",
        *,
        seq: str = "",
        ext: int = 0,
        status: int = 0,
    ) -> None:
        self._version = 0
        self.packet_type = packet_type
        self.payload = bytes(payload)
        self.seq = seq
        self.ext = ext
        self.status = status
        self.length = 0

    @property
    def version(self) -> int:
        """Protocol version, set only by decoding."""
        return self._version

    def _header(self) -> bytes:
        seq = _seq_bytes(self.seq)
        return (
            _HEAD.pack(self._version, self.packet_type, self.status, len(seq))
            + seq
            + _EXT.pack(self.ext)
        )

    def encode(self) -> bytes:
        """Return the whole message as bytes."""
        buffer = self._header() + self.payload
        self.length = len(buffer)
        return buffer

    def encode_parts(self) -> EncodedMsg:
        """Return the header and payload separately."""
        header = self._header()
        self.length = len(header) + len(self.payload)
        return EncodedMsg(header=header, payload=self.payload)

    def decode(self, buffer: bytes) -> int:
        """Fill the message from a buffer and return its length.

        Raises ValueError when the buffer is shorter than the minimum and
        IndexError when the fields run past its end.
        """
        data = bytes(buffer)
        length = len(data)
        if length < self.MESSAGE_MIN_LENGTH:
            raise ValueError(
                f"message too short: {length} bytes, minimum {self.MESSAGE_MIN_LENGTH}"
            )
        self.seq = ""
        self.payload = b""

        version, packet_type, status, seq_length = _HEAD.unpack_from(data, 0)
        self._version = version
        self.packet_type = packet_type
        self.status = status
        offset = _HEAD.size

        if offset + seq_length > length:
            raise IndexError(
                f"Out of range error, offset:{offset + seq_length} ,length: {length}"
            )
        self.seq = data[offset : offset + seq_length].decode("utf-8", "surrogateescape")
        offset += seq_length

        if offset + _EXT.size > length:
            raise IndexError(
                f"Out of range error, offset:{offset + _EXT.size} ,length: {length}"
            )
        (self.ext,) = _EXT.unpack_from(data, offset)
        offset += _EXT.size

        self.payload = data[offset:]
        self.length = length
        return length

    def is_resp_packet(self) -> bool:
        return bool(self.ext & MessageExtFlag.RESPONSE)

    def set_resp_packet(self) -> None:
        self.ext |= MessageExtFlag.RESPONSE

    def __repr__(self) -> str:
        return (
            f"WsMessage(packet_type={self.packet_type!r}, seq={self.seq!r}, "
            f"ext={self.ext!r}, status={self.status!r}, payload_size={len(self.payload)})"
        )


class WsMessageFactory:
    """Builds messages and sequence numbers."""

    def new_seq(self) -> str:
        """Return a new random sequence: a UUID as 32 hex digits."""
        return uuid.uuid4().hex

    def build_message(self, packet_type: int = 0, payload: bytes = b"") -> WsMessage:
        return WsMessage(packet_type=packet_type, payload=payload)