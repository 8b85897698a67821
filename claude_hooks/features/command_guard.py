"""Block dangerous Bash commands before they run.

Pattern-based blocking cannot stop every bypass (variable expansion,
quoting tricks, encodings).  It catches the common accidents; real
isolation needs OS-level sandboxing.
"""

from __future__ import annotations

from typing import Any

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

META = get_meta("command-guard")

ENV_ACCESS_PATTERNS: tuple[str, ...] = (
    r"cat\s+.*\.env\b",
    r"less\s+.*\.env\b",
    r"more\s+.*\.env\b",
    r"head\s+.*\.env\b",
    r"tail\s+.*\.env\b",
    r"cp\s+.*\.env\b",
    r"mv\s+.*\.env\b",
    r">>?\s*.*\.env\b",
    r"sed\s+.*-i.*\.env\b",
    r"tee\s+.*\.env\b",
)


def _first_match(
    command: str, patterns: list[str] | tuple[str, ...], cache: RegexCache
) -> str | None:
    for pattern in patterns:
        regex = cache.get(pattern)
        if regex is not None and regex.search(command):
            return pattern
    return None


def check_command(
    hook_input: dict[str, Any], config: ToolkitConfig, cache: RegexCache
) -> GuardResult:
    """Check a ``Bash`` tool call against the blocked and allowed patterns.

    An ``allowedPatterns`` match wins over every block rule.
    """
    if hook_input.get("tool_name") != "Bash":
        return GuardResult(GuardAction.PROCEED)

    guard = config.guards.command
    if not guard.enabled:
        return GuardResult(GuardAction.PROCEED)

    tool_input = hook_input.get("tool_input")
    command = tool_input.get("command") if isinstance(tool_input, dict) else None
    if not isinstance(command, str) or not command:
        return GuardResult(GuardAction.PROCEED)

    if guard.allowed_patterns and _first_match(command, guard.allowed_patterns, cache):
        return GuardResult(GuardAction.PROCEED)

    pattern = _first_match(command, guard.blocked_patterns, cache)
    if pattern is not None:
        return GuardResult(
            GuardAction.BLOCK,
            message=f"Blocked dangerous command matching pattern: {pattern}",
            details={"command": command, "pattern": pattern},
        )

    pattern = _first_match(command, ENV_ACCESS_PATTERNS, cache)
    if pattern is not None:
        return GuardResult(
            GuardAction.BLOCK,
            message=f"Blocked .env file access: {command}",
            details={"command": command, "pattern": pattern},
        )

    return GuardResult(GuardAction.PROCEED)


def create_handler(hook_type: str, regex_cache: RegexCache) -> HookHandler:
    def handle(hook_input: dict[str, Any], config: ToolkitConfig) -> HandlerResult | None:
        result = check_command(hook_input, config, regex_cache)
        return guard_result_to_handler_result(result, "Command blocked")

    return handle


FEATURE = FeatureModule(meta=META, create_handler=create_handler)
