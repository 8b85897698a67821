"""Answer PermissionRequest events from the ``permissions`` config.

Precedence is deny > ask > allow.  A tool matching none of the lists is left
to the user (no output).
"""

from __future__ import annotations

import json
from typing import Any, Literal

from claude_hooks.core.models import ToolkitConfig
from claude_hooks.core.regex_safety import RegexCache
from claude_hooks.features.catalog import get_meta
from claude_hooks.hooks.models import EXIT_PROCEED, FeatureModule, HandlerResult, HookHandler

META = get_meta("permission-handler")

PermissionDecision = Literal["allow", "deny", "ask"]

_MESSAGES: dict[str, str] = {
    "deny": "Auto-denied tool: {tool}",
    "ask": "Requires user confirmation: {tool}",
    "allow": "Auto-allowed tool: {tool}",
}


def matches_pattern(tool_name: str, patterns: list[str], cache: RegexCache) -> bool:
    """Exact name match, or a full-match of the pattern as a regex."""
    for pattern in patterns:
        if pattern == tool_name:
            return True
        regex = cache.get(f"^{pattern}$")
        if regex is not None and regex.search(tool_name):
            return True
    return False


def resolve_permission(
    tool_name: str, config: ToolkitConfig, cache: RegexCache
) -> PermissionDecision | None:
    permissions = config.permissions
    if matches_pattern(tool_name, permissions.auto_deny, cache):
        return "deny"
    if matches_pattern(tool_name, permissions.auto_ask, cache):
        return "ask"
    if matches_pattern(tool_name, permissions.auto_allow, cache):
        return "allow"
    return None


def create_handler(hook_type: str, regex_cache: RegexCache) -> HookHandler:
    def handle(hook_input: dict[str, Any], config: ToolkitConfig) -> HandlerResult | None:
        tool_name = hook_input.get("tool_name")
        if not isinstance(tool_name, str) or not tool_name:
            return None

        decision = resolve_permission(tool_name, config, regex_cache)
        if decision is None:
            return None

        output = {
            "decision": decision,
            "message": _MESSAGES[decision].format(tool=tool_name),
        }
        return HandlerResult(EXIT_PROCEED, stdout=json.dumps(output))

    return handle


FEATURE = FeatureModule(meta=META, create_handler=create_handler)
