"""Bounded reader for the hook input JSON on stdin.

The host writes one JSON object and closes the pipe.  Reads are capped in
both time and size; a host that never closes stdin must not hang the hook.
"""

from __future__ import annotations

import json
import logging
import sys
import threading
from typing import IO, Any

from claude_hooks.core.errors import StdinParseError

logger = logging.getLogger(__name__)

STDIN_TIMEOUT_SECONDS = 5.0
MAX_STDIN_BYTES = 10 * 1024 * 1024
_CHUNK_SIZE = 64 * 1024


def _read_bounded(stream: IO[Any], max_bytes: int, outcome: dict[str, Any]) -> None:
    """Worker body: read until EOF or until *max_bytes* is exceeded."""
    binary = getattr(stream, "buffer", stream)
    chunks: list[bytes] = []
    total = 0
    try:
        while True:
            chunk = binary.read(_CHUNK_SIZE)
            if not chunk:
                break
            if isinstance(chunk, str):
                chunk = chunk.encode("utf-8")
            total += len(chunk)
            if total > max_bytes:
                outcome["oversize"] = True
                return
            chunks.append(chunk)
    except (OSError, ValueError) as e:
        outcome["error"] = e
        return
    outcome["data"] = b"".join(chunks)


def read_stdin_raw(
    stream: IO[Any] | None = None,
    timeout: float = STDIN_TIMEOUT_SECONDS,
    max_bytes: int = MAX_STDIN_BYTES,
) -> dict[str, Any]:
    """Read and parse the hook input object without normalizing it.

    Args:
        stream: Input stream; defaults to ``sys.stdin``.  Binary and text
            streams are both accepted.
        timeout: Seconds to wait for EOF.
        max_bytes: Maximum accepted payload size.

    Returns:
        The parsed JSON object.

    Raises:
        StdinParseError: If stdin is a TTY, empty, oversized, times out, is
            not valid JSON, or is not a JSON object.
    """
    if stream is None:
        stream = sys.stdin

    isatty = getattr(stream, "isatty", None)
    if callable(isatty) and isatty():
        raise StdinParseError("No piped input available (stdin is a TTY)")

    outcome: dict[str, Any] = {}
    worker = threading.Thread(
        target=_read_bounded,
        args=(stream, max_bytes, outcome),
        name="claude-hooks-stdin",
        daemon=True,
    )
    worker.start()
    worker.join(timeout)

    if worker.is_alive():
        raise StdinParseError(f"Stdin read timed out after {timeout:g} seconds")
    if outcome.get("oversize"):
        raise StdinParseError(f"Stdin payload exceeds {max_bytes / (1024 * 1024):g} MB limit")
    if "error" in outcome:
        raise StdinParseError(f"Stdin read error: {outcome['error']}")

    data: bytes = outcome.get("data", b"")
    if not data:
        raise StdinParseError("No input received on stdin")

    try:
        text = data.decode("utf-8").replace("\r\n", "\n").strip()
    except UnicodeDecodeError as e:
        raise StdinParseError(f"Stdin is not valid UTF-8: {e}") from e
    if not text:
        raise StdinParseError("Empty input received on stdin")

    try:
        parsed = json.loads(text)
    except json.JSONDecodeError as e:
        raise StdinParseError(f"Failed to parse stdin as JSON: {e}") from e

    if not isinstance(parsed, dict):
        raise StdinParseError("Stdin input must be a JSON object")

    logger.debug(f"Read {len(data)} bytes of hook input")
    return parsed
