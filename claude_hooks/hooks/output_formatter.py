"""Host-specific rendering of pipeline results.

Claude Code reads the merged handler stdout as-is (plus stderr and the exit
code).  VS Code expects a single JSON envelope on stdout::

    {"continue": false, "stopReason": "...",
     "hookSpecificOutput": {"hookEventName": "PreToolUse",
                            "permissionDecision": "deny", ...}}

The envelope is built per hook event by the ``_FORMATTERS`` table.
"""

from __future__ import annotations

import json
from collections.abc import Callable
from typing import Any

from claude_hooks.hooks.models import EXIT_BLOCK, EXIT_ERROR, InputFormat, PipelineResult

DEFAULT_BLOCK_MESSAGE = "Operation blocked by hook"

_PERMISSION_DECISIONS = frozenset({"allow", "deny", "ask"})


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def try_parse_json_object(raw: str) -> dict[str, Any] | None:
    """Parse *raw* as a JSON object; ``None`` for empty, invalid, or non-object."""
    if not raw:
        return None
    try:
        parsed = json.loads(raw)
    except ValueError:
        return None
    return parsed if isinstance(parsed, dict) else None


def extract_message(parsed_stdout: dict[str, Any] | None, stderr: str) -> str:
    """Human-readable reason: stdout ``message``, then stderr, then a fallback."""
    if parsed_stdout:
        message = parsed_stdout.get("message")
        if isinstance(message, str) and message:
            return message
    if stderr:
        return stderr
    return DEFAULT_BLOCK_MESSAGE


def extract_stop_reason(parsed_stdout: dict[str, Any] | None, stderr: str) -> str:
    """Like :func:`extract_message` but prefers stdout ``reason``."""
    if parsed_stdout:
        reason = parsed_stdout.get("reason")
        if isinstance(reason, str) and reason:
            return reason
    return extract_message(parsed_stdout, stderr)


def _copy_additional_context(
    hook_specific: dict[str, Any], parsed_stdout: dict[str, Any] | None
) -> None:
    if parsed_stdout and parsed_stdout.get("additionalContext"):
        hook_specific["additionalContext"] = str(parsed_stdout["additionalContext"])


# ---------------------------------------------------------------------------
# Per-event envelopes
# ---------------------------------------------------------------------------


def _format_pre_tool_use(
    hook_specific: dict[str, Any],
    output: dict[str, Any],
    parsed_stdout: dict[str, Any] | None,
    stderr: str,
    blocked: bool,
) -> None:
    if blocked:
        reason = extract_message(parsed_stdout, stderr)
        hook_specific["permissionDecision"] = "deny"
        hook_specific["permissionDecisionReason"] = reason
        output["continue"] = False
        output["stopReason"] = reason
        return

    decision = parsed_stdout.get("decision") if parsed_stdout else None
    if decision == "deny":
        reason = extract_message(parsed_stdout, stderr)
        hook_specific["permissionDecision"] = "deny"
        hook_specific["permissionDecisionReason"] = reason
        output["continue"] = False
        output["stopReason"] = reason
    elif decision == "ask":
        hook_specific["permissionDecision"] = "ask"
        hook_specific["permissionDecisionReason"] = extract_message(parsed_stdout, stderr)
        output["continue"] = True
    elif decision == "allow":
        hook_specific["permissionDecision"] = "allow"
        output["continue"] = True
    else:
        output["continue"] = True

    updated_input = parsed_stdout.get("updatedInput") if parsed_stdout else None
    if updated_input is not None and hook_specific.get("permissionDecision") != "deny":
        hook_specific["updatedInput"] = updated_input

    _copy_additional_context(hook_specific, parsed_stdout)


def _format_post_tool_use(
    hook_specific: dict[str, Any],
    output: dict[str, Any],
    parsed_stdout: dict[str, Any] | None,
    stderr: str,
    blocked: bool,
) -> None:
    if blocked:
        output["decision"] = "block"
        output["reason"] = extract_message(parsed_stdout, stderr)
        output["continue"] = False
    else:
        output["continue"] = True

    _copy_additional_context(hook_specific, parsed_stdout)


def _format_stop(
    hook_specific: dict[str, Any],
    output: dict[str, Any],
    parsed_stdout: dict[str, Any] | None,
    stderr: str,
    blocked: bool,
) -> None:
    stdout_blocked = parsed_stdout is not None and parsed_stdout.get("decision") == "block"
    if blocked or stdout_blocked:
        reason = extract_stop_reason(parsed_stdout, stderr)
        hook_specific["decision"] = "block"
        hook_specific["reason"] = reason
        output["continue"] = False
        output["stopReason"] = reason
    else:
        output["continue"] = True

    _copy_additional_context(hook_specific, parsed_stdout)


def _format_permission_request(
    hook_specific: dict[str, Any],
    output: dict[str, Any],
    parsed_stdout: dict[str, Any] | None,
    stderr: str,
    blocked: bool,
) -> None:
    decision = parsed_stdout.get("decision") if parsed_stdout else None
    if decision in _PERMISSION_DECISIONS:
        hook_specific["permissionDecision"] = decision
        hook_specific["permissionDecisionReason"] = extract_message(parsed_stdout, stderr)

    if decision == "deny" or blocked:
        output["continue"] = False
        output["stopReason"] = extract_message(parsed_stdout, stderr)
    else:
        output["continue"] = True


def _format_default(
    hook_specific: dict[str, Any],
    output: dict[str, Any],
    parsed_stdout: dict[str, Any] | None,
    stderr: str,
    blocked: bool,
) -> None:
    if blocked:
        output["continue"] = False
        output["stopReason"] = extract_message(parsed_stdout, stderr)
    else:
        output["continue"] = True

    _copy_additional_context(hook_specific, parsed_stdout)


_FormatterFn = Callable[
    [dict[str, Any], dict[str, Any], dict[str, Any] | None, str, bool], None
]

_FORMATTERS: dict[str, _FormatterFn] = {
    "PreToolUse": _format_pre_tool_use,
    "PostToolUse": _format_post_tool_use,
    "Stop": _format_stop,
    "PermissionRequest": _format_permission_request,
}


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def build_vscode_envelope(hook_type: str, result: PipelineResult) -> dict[str, Any]:
    """Build the VS Code output envelope for *hook_type*.

    ``hookSpecificOutput.hookEventName`` is always *hook_type*.  A failed run
    (exit 1) always stops the agent, with the handler error as ``stopReason``.
    """
    blocked = result.exit_code == EXIT_BLOCK
    parsed_stdout = try_parse_json_object(result.stdout)

    hook_specific: dict[str, Any] = {"hookEventName": hook_type}
    output: dict[str, Any] = {}

    if result.exit_code == EXIT_ERROR:
        output["continue"] = False
        output["stopReason"] = extract_message(parsed_stdout, result.stderr.strip())
        output["hookSpecificOutput"] = hook_specific
        return output

    formatter = _FORMATTERS.get(hook_type, _format_default)
    formatter(hook_specific, output, parsed_stdout, result.stderr, blocked)

    output["hookSpecificOutput"] = hook_specific
    return output


def _render_claude(hook_type: str, result: PipelineResult) -> str:
    return result.stdout


def _render_vscode(hook_type: str, result: PipelineResult) -> str:
    return json.dumps(build_vscode_envelope(hook_type, result), separators=(",", ":"))


_RENDERERS: dict[InputFormat, Callable[[str, PipelineResult], str]] = {
    InputFormat.CLAUDE: _render_claude,
    InputFormat.VSCODE: _render_vscode,
}


def format_output(hook_type: str, result: PipelineResult, input_format: InputFormat) -> str:
    """Render *result* as the stdout text expected by the originating host.

    Args:
        hook_type: Hook event name, e.g. ``"PreToolUse"``.
        result: Aggregated pipeline result.
        input_format: Format the input arrived in.

    Returns:
        Merged stdout unchanged for Claude Code; a JSON envelope for VS Code.
    """
    return _RENDERERS[input_format](hook_type, result)
