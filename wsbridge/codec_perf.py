"""Measures how fast a message of a given payload size is encoded."""

from __future__ import annotations

import logging
import re
import sys
import time

from .message import WsMessageFactory

logger = logging.getLogger(__name__)

_USAGE = "Usage: msg_codec_test payload_length\nExample:\n    ./msg_codec_test 1024\n"

DEFAULT_DURATION_MS = 10000
DEFAULT_REPORT_INTERVAL_MS = 1000


def _atoi(text: str) -> int:
    """Parse a leading integer the lenient way; text without one gives 0."""
    match = re.match(r"\s*([+-]?\d+)", text)
    return int(match.group(1)) if match else 0


def run_codec_benchmark(
    payload_length: int,
    duration_ms: int = DEFAULT_DURATION_MS,
    report_interval_ms: int = DEFAULT_REPORT_INTERVAL_MS,
) -> list[tuple[int, int]]:
    """Encode one message over and over for a while.

    Returns one ``(interval_ms, encode_count)`` pair per elapsed report interval.
    Raises ValueError for a negative payload length or a non-positive interval.
    """
    if payload_length < 0:
        raise ValueError(f"payload length must not be negative: {payload_length}")
    if report_interval_ms <= 0:
        raise ValueError(f"report interval must be positive: {report_interval_ms}")

    logger.info("Msg Codec Test, payload length: %d", payload_length)
    msg = WsMessageFactory().build_message(payload=b"a" * payload_length)

    reports: list[tuple[int, int]] = []
    start = time.monotonic()
    last_report = start
    encode_count = 0
    while True:
        msg.encode()
        encode_count += 1

        now = time.monotonic()
        since_report_ms = int((now - last_report) * 1000)
        total_ms = int((now - start) * 1000)

        if since_report_ms >= report_interval_ms:
            logger.info(
                " [Main] ===>>>> interval(ms): %d, payload: %d, encodeCount: %d",
                since_report_ms,
                payload_length,
                encode_count,
            )
            reports.append((since_report_ms, encode_count))
            encode_count = 0
            last_report = time.monotonic()

        if total_ms >= duration_ms:
            break
    return reports


def main(argv: list[str] | None = None) -> int:
    """Run the benchmark for the payload length given on the command line."""
    args = sys.argv[1:] if argv is None else list(argv)
    if not args:
        sys.stderr.write(_USAGE)
        return 0
    payload_length = _atoi(args[0]) & 0xFFFF
    run_codec_benchmark(payload_length)
    return 0


if __name__ == "__main__":
    sys.exit(main())