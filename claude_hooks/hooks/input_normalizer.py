"""Cross-host input normalization.

The VS Code host sends camelCase fields (``sessionId``) where Claude Code
sends snake_case (``session_id``).  Inputs are detected, renamed to the
internal snake_case shape, and tagged with their format so the output
adapter can answer in the same dialect.  Extra VS Code fields
(``hookEventName``, ``cwd``, ``timestamp``) are kept as-is.
"""

from __future__ import annotations

import re
from typing import Any

from claude_hooks.hooks.models import HookInput, InputFormat

MAX_SESSION_ID_LENGTH = 128

_UNSAFE_SESSION_CHARS_RE = re.compile(r"[^a-zA-Z0-9_-]")

# Only fields that differ between the two hosts.
CAMEL_TO_SNAKE_MAP: dict[str, str] = {
    "sessionId": "session_id",
}


def sanitize_session_id(session_id: str) -> str:
    """Make a session ID safe as a filename component.

    Every character outside ``[a-zA-Z0-9_-]`` becomes ``_`` and the result
    is capped at 128 characters, so ``../../etc/cron.d/evil`` becomes
    ``______etc_cron_d_evil``.
    """
    return _UNSAFE_SESSION_CHARS_RE.sub("_", session_id)[:MAX_SESSION_ID_LENGTH]


def is_vscode_format(data: dict[str, Any]) -> bool:
    """Whether *data* uses the VS Code camelCase input format."""
    return "sessionId" in data and "session_id" not in data


def decode_hook_input(data: dict[str, Any]) -> HookInput:
    """Detect the input format and normalize *data* to snake_case.

    Args:
        data: Raw parsed stdin object.  Not mutated.

    Returns:
        A :class:`HookInput` tagged with the detected format.
    """
    if is_vscode_format(data):
        input_format = InputFormat.VSCODE
        normalized = {CAMEL_TO_SNAKE_MAP.get(key, key): value for key, value in data.items()}
    else:
        input_format = InputFormat.CLAUDE
        normalized = dict(data)

    session_id = normalized.get("session_id")
    if isinstance(session_id, str):
        normalized["session_id"] = sanitize_session_id(session_id)

    return HookInput(format=input_format, data=normalized)


def normalize_hook_input(data: dict[str, Any]) -> dict[str, Any]:
    """Normalize *data* to snake_case, dropping the format tag."""
    return decode_hook_input(data).data
