"""Translation of guard decisions into handler results."""

from __future__ import annotations

import json

from claude_hooks.hooks.models import (
    EXIT_BLOCK,
    EXIT_PROCEED,
    GuardAction,
    GuardResult,
    HandlerResult,
)


def guard_result_to_handler_result(
    result: GuardResult, fallback_message: str
) -> HandlerResult | None:
    """Map a :class:`GuardResult` onto the pipeline's result contract.

    - block: exit 2, message on stderr
    - warn: exit 0, message on stderr and as ``additionalContext`` on stdout
    - proceed: ``None``
    """
    message = result.message or fallback_message

    if result.action is GuardAction.BLOCK:
        return HandlerResult(EXIT_BLOCK, stderr=message)
    if result.action is GuardAction.WARN:
        return HandlerResult(
            EXIT_PROCEED,
            stdout=json.dumps({"additionalContext": message}),
            stderr=message,
        )
    return None
