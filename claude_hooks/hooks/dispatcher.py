"""Hook event dispatch.

Resolves an event name given on the command line (PascalCase, camelCase,
kebab-case or snake_case) to its canonical name, builds the handler list for
that event, and runs it through :func:`~claude_hooks.hooks.runner.execute_hook`.

CLI usage::

    echo '{"tool_name":"Bash","tool_input":{"command":"ls"}}' \\
        | python -m claude_hooks hook pre-tool-use
"""

from __future__ import annotations

import logging
import re
import sys
from typing import IO, TYPE_CHECKING, Any

from claude_hooks.core.errors import FeatureLoadError, UnknownHookEventError
from claude_hooks.core.models import ALL_HOOK_EVENT_TYPES
from claude_hooks.hooks.models import EXIT_ERROR, HookHandler
from claude_hooks.hooks.runner import execute_hook
from claude_hooks.services.feature_loader import (
    load_enabled_handlers,
    load_enabled_handlers_lazy,
)

if TYPE_CHECKING:
    from claude_hooks.factory import HookContext

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Event normalization
# ---------------------------------------------------------------------------

_WORD_BOUNDARY_RE = re.compile(r"(?<!^)(?=[A-Z])")


def _event_aliases() -> dict[str, str]:
    aliases: dict[str, str] = {}
    for event in ALL_HOOK_EVENT_TYPES:
        canonical = event.value
        words = _WORD_BOUNDARY_RE.sub(" ", canonical).lower().split()
        aliases[canonical] = canonical
        aliases[canonical[0].lower() + canonical[1:]] = canonical
        aliases["-".join(words)] = canonical
        aliases["_".join(words)] = canonical
    return aliases


_EVENT_ALIASES: dict[str, str] = _event_aliases()


def normalize_event(raw: str) -> str | None:
    """Normalize an event name to canonical PascalCase.

    Returns ``None`` if the event is not recognized.
    """
    return _EVENT_ALIASES.get(raw)


def resolve_event(raw: str) -> str:
    """Like :func:`normalize_event` but raises for unknown names.

    Raises:
        UnknownHookEventError: If *raw* is not a hook event name.
    """
    event = normalize_event(raw)
    if event is None:
        raise UnknownHookEventError(raw)
    return event


# ---------------------------------------------------------------------------
# Dispatch
# ---------------------------------------------------------------------------


def build_handlers(event: str, context: HookContext) -> list[HookHandler]:
    """Handlers for *event*, from the eager registry if present, else lazily."""
    if context.registry is not None:
        return load_enabled_handlers(
            event, context.config, context.registry, regex_cache=context.regex_cache
        )
    return load_enabled_handlers_lazy(
        event, context.config, context.descriptors, regex_cache=context.regex_cache
    )


def run_hook(
    raw_event: str,
    context: HookContext,
    stdin: IO[Any] | None = None,
    stdout: IO[str] | None = None,
    stderr: IO[str] | None = None,
) -> int:
    """Run one hook invocation end to end.

    Args:
        raw_event: Event name in any supported spelling.
        context: Process context from the factory.
        stdin: Input stream (default ``sys.stdin``).
        stdout: Output stream (default ``sys.stdout``).
        stderr: Error stream (default ``sys.stderr``).

    Returns:
        The process exit code.

    Raises:
        UnknownHookEventError: If *raw_event* is not a hook event name.
    """
    event = resolve_event(raw_event)

    try:
        handlers = build_handlers(event, context)
    except FeatureLoadError as e:
        logger.debug("Feature load failed", exc_info=True)
        err = stderr if stderr is not None else sys.stderr
        err.write(f"[{event}] {e}\n")
        err.flush()
        return EXIT_ERROR

    return execute_hook(
        event,
        handlers,
        context.config,
        stdin=stdin,
        stdout=stdout,
        stderr=stderr,
        stdin_timeout=context.settings.stdin_timeout_seconds,
        max_stdin_bytes=context.settings.max_stdin_bytes,
    )
