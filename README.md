# wsbridge

`wsbridge` carries small binary messages over WebSocket connections. Every
message has a compact header (version, packet type, status, a sequence id and
an extension field) followed by an opaque payload. The package provides:

- the message type and its binary encoding and decoding;
- a configuration object for a websocket endpoint;
- address and port helpers;
- a stream that writes and reads framed messages over an open websocket
  connection;
- a connector that opens client connections, plain or over TLS;
- a registry of message handlers keyed by packet type;
- a command that measures encoding throughput.

## Installing

```
pip install wsbridge
```

To run the test suite:

```
pip install "wsbridge[test]"
pytest
```

## The message format

All header fields are big-endian 16-bit integers (status is signed):

| field      | size        |
|------------|-------------|
| version    | 2 bytes     |
| type       | 2 bytes     |
| status     | 2 bytes     |
| seq length | 2 bytes     |
| seq        | seq length  |
| ext        | 2 bytes     |
| payload    | the rest    |

A message with an empty sequence id and no payload is therefore 10 bytes long
(`WsMessage.MESSAGE_MIN_LENGTH`). The lowest bit of `ext` marks a response
packet: see `WsMessage.is_resp_packet()` and `WsMessage.set_resp_packet()`.

`wsbridge.message.WsMessageFactory` builds messages with
`build_message(packet_type, payload)` and hands out fresh sequence ids with
`new_seq()` (a random UUID as 32 hex digits).

- `WsMessage.encode()` returns the whole message as bytes.
- `WsMessage.encode_parts()` returns an `EncodedMsg` holding the header and
  the payload separately.
- `WsMessage.decode(buffer)` fills the message from a buffer and returns its
  length. A buffer shorter than 10 bytes raises `ValueError`; a sequence id or
  extension field that runs past the end of the buffer raises `IndexError`.

Both encoders record the encoded size in `WsMessage.length`. The `version`
field is read-only and set only by decoding.

```python
from wsbridge.message import WsMessage, WsMessageFactory

factory = WsMessageFactory()
msg = factory.build_message(9999, b"hello")
msg.seq = factory.new_seq()
wire = msg.encode()

copy = WsMessage()
copy.decode(wire)
assert copy.payload == b"hello"
```

## Building blocks

- `wsbridge.config`
  - `WsConfig`, built from keyword arguments: the work model (`WsModel`:
    `NONE`, `CLIENT`, `SERVER` or `MIXED`), listen address and port, peers to
    connect to, thread pool size, maximum message size, send timeout, the
    reconnect and heartbeat periods, whether TLS is disabled, server and
    client `ssl.SSLContext` objects and a module name used in log lines.
    `as_client()` and `as_server()` test the model. The reconnect and
    heartbeat periods never read below 10000 ms, and a thread pool size of 0
    reads as 1.
  - `NodeIPEndpoint(address, port)`, an ordered, hashable endpoint that
    prints as `address:port`.
  - `Options(timeout)`, a per-send timeout in milliseconds.
- `wsbridge.tools`
  - `valid_ip(ip)` is true for IPv4 and IPv6 addresses.
  - `valid_port(port)` is true for ports above 0.
  - `string_to_endpoint(peer)` parses `ip:port` or `[ipv6]:port` into a
    `NodeIPEndpoint` and raises `ValueError` if the text, ip or port is
    invalid.
  - `close_socket(sock)` shuts a socket down both ways and closes it,
    ignoring errors.
- `wsbridge.stream.WsStream` wraps an open connection from the `websockets`
  library.
  - `write(header, payload)` sends the two parts as fragments of one binary
    message.
  - `read()` returns one whole message and raises `ValueError` if it is larger
    than the limit set with `set_max_read_msg_size()`.
  - `is_open()` and `close()` report and end the connection; `close()` does
    nothing after the first call.
  - `local_endpoint()` and `remote_endpoint()` return `host:port`, or an
    empty string if the address is unknown.
- `wsbridge.connector.WsConnector` opens client connections.
  `await connect_to_ws_server(host, port, disable_ssl)` performs the TLS and
  websocket handshakes (30 s timeout, keep-alive pings every 10 s, no
  compression) and returns a `WsStream` with the peer's node id. The node id
  is the result of the optional `node_id_extractor`, called with the peer's
  DER certificate or `None`; without an extractor it is an empty string. Only
  one attempt per `host:port` may be in progress at a time, which
  `insert_pending_conns()` and `erase_pending_conns()` track. Any failure,
  including a second concurrent attempt, raises `ConnectError`, which carries
  the `endpoint`, the `message` and, for a failed TLS handshake,
  `ext_error_msg`.
- `wsbridge.handlers`
  - `MsgHandlerRegistry` maps packet types to handlers with `register()`,
    `get()` and `erase()` and is safe to use from several threads.
    `register()` returns `False` when the type already has a handler or the
    handler is `None`, and raises `TypeError` for a handler that is not
    callable.
  - `gen_connect_error(error, endpoint, end)` formats one endpoint's connect
    failure as `error:/endpoint`, followed by `", "` unless it is the last.

A round trip with a connector and a stream:

```python
import asyncio

from wsbridge.connector import WsConnector
from wsbridge.message import WsMessage, WsMessageFactory


async def echo_once() -> bytes:
    connector = WsConnector()
    stream, _node_id = await connector.connect_to_ws_server("127.0.0.1", 20200, True)
    factory = WsMessageFactory()
    msg = factory.build_message(9999, b"hello")
    msg.seq = factory.new_seq()
    parts = msg.encode_parts()
    await stream.write(parts.header, parts.payload)
    reply = WsMessage()
    reply.decode(await stream.read())
    await stream.close()
    return reply.payload


asyncio.run(echo_once())
```

## Encoding throughput

```
wsbridge-codec-perf 1024
```

Encodes one message with a payload of the given length (read as a 16-bit
number) over and over for ten seconds and logs how many encodes were done in
each one-second interval. Without an argument it prints its usage. From
Python, `wsbridge.codec_perf.run_codec_benchmark(payload_length, duration_ms,
report_interval_ms)` runs the same loop and returns the
`(interval_ms, encode_count)` pairs.

## What the package does not do

`wsbridge` has no server: nothing in it listens for or accepts websocket
connections. It also has no session layer that pairs responses with requests
by sequence id or times them out, no service that keeps connections to peers,
reconnects or dispatches incoming messages to the handler registry by itself,
and no error-code set for such failures. Those parts, and any latency tool
built on them, are left to the application: it reads messages from a
`WsStream`, decodes them and looks up handlers in a `MsgHandlerRegistry`
itself.