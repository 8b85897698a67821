"""Scan content written by Write/Edit/MultiEdit for leaked secrets."""

from __future__ import annotations

import re
from typing import Any, NamedTuple

from claude_hooks.core.models import ToolkitConfig
from claude_hooks.core.regex_safety import RegexCache
from claude_hooks.features.catalog import get_meta
from claude_hooks.features.guard_result import guard_result_to_handler_result
from claude_hooks.hooks.models import (
    FeatureModule,
    GuardAction,
    GuardResult,
    HandlerResult,
    HookHandler,
)

META = get_meta("secret-leak-guard")

WRITE_TOOLS: frozenset[str] = frozenset({"Write", "Edit", "MultiEdit"})


class SecretPattern(NamedTuple):
    name: str
    regex: re.Pattern[str]


BUILT_IN_PATTERNS: tuple[SecretPattern, ...] = (
    SecretPattern("AWS access key", re.compile(r"AKIA[0-9A-Z]{16}")),
    SecretPattern(
        "AWS secret key",
        re.compile(
            r"(?:aws_secret_access_key|secret_key|aws_secret)\s*[:=]\s*['\"]?[0-9a-zA-Z/+]{40}"
        ),
    ),
    SecretPattern("GitHub token", re.compile(r"gh[ps]_[A-Za-z0-9_]{36,}")),
    SecretPattern("OpenAI key", re.compile(r"sk-[A-Za-z0-9]{32,}")),
    SecretPattern(
        "Generic API key",
        re.compile(r"(?:api[_-]?key|apikey|secret[_-]?key)\s*[:=]\s*['\"][A-Za-z0-9]{16,}['\"]"),
    ),
    SecretPattern(
        "Private key block", re.compile(r"-----BEGIN (?:RSA |EC |DSA )?PRIVATE KEY-----")
    ),
    SecretPattern(
        "Connection string with password",
        re.compile(r"(?:postgres|mysql|mongodb)://[^:]+:[^@]+@"),
    ),
)

# Secret patterns are case-sensitive, unlike command patterns
_CASE_SENSITIVE = 0


def collect_write_content(hook_input: dict[str, Any]) -> list[str]:
    """Non-empty text chunks a write tool is about to put on disk."""
    tool_input = hook_input.get("tool_input")
    if not isinstance(tool_input, dict):
        return []

    tool_name = hook_input.get("tool_name")
    if tool_name == "Write":
        candidates = [tool_input.get("content")]
    elif tool_name == "Edit":
        candidates = [tool_input.get("new_string")]
    elif tool_name == "MultiEdit":
        edits = tool_input.get("edits")
        if not isinstance(edits, list):
            return []
        candidates = [edit.get("new_string") for edit in edits if isinstance(edit, dict)]
    else:
        return []

    return [chunk for chunk in candidates if isinstance(chunk, str) and chunk]


def _is_allowed(text: str, allowed_patterns: list[str], cache: RegexCache) -> bool:
    for pattern in allowed_patterns:
        regex = cache.get(pattern, _CASE_SENSITIVE)
        if regex is not None and regex.search(text):
            return True
    return False


def check_secret_leak(
    hook_input: dict[str, Any], config: ToolkitConfig, cache: RegexCache
) -> GuardResult:
    """Block the write if any chunk contains a built-in or custom secret pattern.

    ``allowedPatterns`` suppress false positives: a chunk matching one is
    skipped entirely, and so is a single hit matching one.
    """
    tool_name = hook_input.get("tool_name")
    if tool_name not in WRITE_TOOLS:
        return GuardResult(GuardAction.PROCEED)

    guard = config.guards.secret_leak
    if not guard.enabled:
        return GuardResult(GuardAction.PROCEED)

    chunks = collect_write_content(hook_input)
    if not chunks:
        return GuardResult(GuardAction.PROCEED)

    patterns = list(BUILT_IN_PATTERNS)
    for index, source in enumerate(guard.custom_patterns, start=1):
        regex = cache.get(source, _CASE_SENSITIVE)
        if regex is not None:
            patterns.append(SecretPattern(f"Custom pattern #{index}", regex))

    for chunk in chunks:
        if _is_allowed(chunk, guard.allowed_patterns, cache):
            continue
        for pattern in patterns:
            match = pattern.regex.search(chunk)
            if match is None or _is_allowed(match.group(0), guard.allowed_patterns, cache):
                continue
            return GuardResult(
                GuardAction.BLOCK,
                message=f"Potential secret detected: {pattern.name}",
                details={"patternName": pattern.name, "toolName": tool_name},
            )

    return GuardResult(GuardAction.PROCEED)


def create_handler(hook_type: str, regex_cache: RegexCache) -> HookHandler:
    def handle(hook_input: dict[str, Any], config: ToolkitConfig) -> HandlerResult | None:
        result = check_secret_leak(hook_input, config, regex_cache)
        return guard_result_to_handler_result(result, "Secret leak detected")

    return handle


FEATURE = FeatureModule(meta=META, create_handler=create_handler)
