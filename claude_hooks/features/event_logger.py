"""Append every hook event to ``<logDir>/<HookType>/<YYYY-MM-DD>.jsonl``.

Tool input is redacted before it is written: secret-looking tokens in
``content``, ``new_string`` and ``old_string`` are replaced and long values
truncated.  Logging is best-effort and never affects the hook outcome.
"""

from __future__ import annotations

import copy
import json
import logging
import re
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from claude_hooks.core.models import ToolkitConfig
from claude_hooks.core.regex_safety import RegexCache
from claude_hooks.features.catalog import get_meta
from claude_hooks.hooks.models import FeatureModule, HandlerResult, HookHandler

logger = logging.getLogger(__name__)

META = get_meta("logger")

SENSITIVE_FIELDS: tuple[str, ...] = ("content", "new_string", "old_string")
MAX_FIELD_LENGTH = 200
TRUNCATED_MARKER = " [TRUNCATED]"
REDACTED_MARKER = "[REDACTED]"

SECRET_PATTERNS: tuple[re.Pattern[str], ...] = (
    re.compile(r"(?:sk|pk)[-_](?:live|test|prod)[-_]\w{20,}", re.I),  # Stripe-style
    re.compile(r"(?:ghp|gho|ghs|ghr|github_pat)_\w{30,}", re.I),  # GitHub
    re.compile(r"(?:AKIA|ABIA|ACCA|ASIA)[A-Z0-9]{16}"),  # AWS access key
    re.compile(r"eyJ[A-Za-z0-9_-]{20,}\.[A-Za-z0-9_-]{20,}"),  # JWT
    re.compile(r"xox[bposa]-[A-Za-z0-9-]{20,}"),  # Slack
    re.compile(
        r"(?:key|token|secret|password|apikey|api_key|access_key)\s*[=:]\s*['\"]?"
        r"[A-Za-z0-9+/=_-]{16,}['\"]?",
        re.I,
    ),
)


def redact_secrets(value: str) -> str:
    for pattern in SECRET_PATTERNS:
        value = pattern.sub(REDACTED_MARKER, value)
    return value


def _redact_fields(obj: dict[str, Any]) -> None:
    for field_name in SENSITIVE_FIELDS:
        value = obj.get(field_name)
        if isinstance(value, str):
            redacted = redact_secrets(value)
            if len(redacted) > MAX_FIELD_LENGTH:
                redacted = redacted[:MAX_FIELD_LENGTH] + TRUNCATED_MARKER
            obj[field_name] = redacted


def redact_sensitive_fields(data: dict[str, Any]) -> dict[str, Any]:
    """Deep copy of *data* with ``tool_input`` text fields redacted."""
    cloned = copy.deepcopy(data)
    tool_input = cloned.get("tool_input")
    if not isinstance(tool_input, dict):
        return cloned

    _redact_fields(tool_input)
    edits = tool_input.get("edits")
    if isinstance(edits, list):
        for edit in edits:
            if isinstance(edit, dict):
                _redact_fields(edit)
    return cloned


def log_hook_event(hook_type: str, data: dict[str, Any], config: ToolkitConfig) -> Path | None:
    """Append one JSONL entry for *hook_type*.

    Returns:
        The log file path, or ``None`` if the write failed.
    """
    now = datetime.now(timezone.utc)
    log_dir = Path(config.log_dir) / hook_type
    log_file = log_dir / f"{now.strftime('%Y-%m-%d')}.jsonl"

    session_id = data.get("session_id")
    entry = {
        "timestamp": now.isoformat(),
        "sessionId": session_id if isinstance(session_id, str) else "unknown",
        "hookType": hook_type,
        "data": redact_sensitive_fields(data),
    }

    try:
        log_dir.mkdir(parents=True, exist_ok=True, mode=0o700)
        with open(log_file, "a", encoding="utf-8") as f:
            f.write(json.dumps(entry, default=str) + "\n")
    except OSError as e:
        logger.debug(f"Event log write failed: {e}")
        return None

    return log_file


def create_handler(hook_type: str, regex_cache: RegexCache) -> HookHandler:
    def handle(hook_input: dict[str, Any], config: ToolkitConfig) -> HandlerResult | None:
        log_hook_event(hook_type, hook_input, config)
        return None

    return handle


FEATURE = FeatureModule(meta=META, create_handler=create_handler)
