"""Sequential handler pipeline for one hook invocation.

Each enabled feature contributes one handler.  Handlers run in priority
order against the same normalized input and config snapshot:

- ``None`` means "no effect" and the next handler runs.
- Exit code 0 with JSON stdout may contribute ``additionalContext``; the
  contexts of all handlers are merged into a single stdout object.
- Exit code 1 (error) or 2 (block) stops the pipeline immediately.
- An exception is converted to an exit-1 result and also stops it.

:func:`execute_hook` wraps the pipeline with stdin decoding and host-specific
output rendering and returns the process exit code.
"""

from __future__ import annotations

import json
import logging
import sys
from collections.abc import Sequence
from typing import IO, Any

from claude_hooks.core.errors import StdinParseError
from claude_hooks.core.models import ToolkitConfig
from claude_hooks.hooks.input_normalizer import decode_hook_input
from claude_hooks.hooks.models import (
    EXIT_ERROR,
    EXIT_PROCEED,
    HandlerResult,
    HookHandler,
    InputFormat,
    PipelineResult,
)
from claude_hooks.hooks.output_formatter import format_output, try_parse_json_object
from claude_hooks.hooks.stdin_reader import (
    MAX_STDIN_BYTES,
    STDIN_TIMEOUT_SECONDS,
    read_stdin_raw,
)

logger = logging.getLogger(__name__)

CONTEXT_SEPARATOR = "\n\n---\n\n"


# ---------------------------------------------------------------------------
# Stdout merging
# ---------------------------------------------------------------------------


def merge_stdout(context_parts: list[str], last_raw_stdout: str) -> str:
    """Merge collected ``additionalContext`` values into one stdout string.

    With no context the last raw stdout passes through untouched.  Otherwise
    the last raw stdout object (or ``{}``) is kept, so fields such as
    ``decision`` survive, and its ``additionalContext`` is replaced by the
    joined parts.
    """
    if not context_parts:
        return last_raw_stdout

    merged = context_parts[0] if len(context_parts) == 1 else CONTEXT_SEPARATOR.join(context_parts)
    base = try_parse_json_object(last_raw_stdout) or {}
    return json.dumps({**base, "additionalContext": merged})


# ---------------------------------------------------------------------------
# Pipeline
# ---------------------------------------------------------------------------


def run_pipeline(
    hook_type: str,
    handlers: Sequence[HookHandler],
    hook_input: dict[str, Any],
    config: ToolkitConfig,
) -> PipelineResult:
    """Run *handlers* in order and aggregate their results.

    Args:
        hook_type: Hook event name, used in handler error messages.
        handlers: Handlers sorted by feature priority.
        hook_input: Normalized input shared by every handler.
        config: Resolved config snapshot.

    Returns:
        The aggregated :class:`PipelineResult`.  Never raises for handler
        failures.
    """
    last_result: HandlerResult | None = None
    context_parts: list[str] = []
    collected_stderr = ""
    last_raw_stdout = ""

    for handler in handlers:
        try:
            result = handler(hook_input, config)
        except Exception as e:
            logger.debug(f"Handler raised during {hook_type}", exc_info=True)
            result = HandlerResult(EXIT_ERROR, stderr=f"[{hook_type}] Handler error: {e}\n")

        if result is None:
            continue

        last_result = result
        if result.stdout:
            parsed = try_parse_json_object(result.stdout)
            if parsed and parsed.get("additionalContext"):
                context_parts.append(str(parsed["additionalContext"]))
            last_raw_stdout = result.stdout
        if result.stderr:
            collected_stderr += result.stderr

        if result.exit_code != EXIT_PROCEED:
            break

    return PipelineResult(
        exit_code=last_result.exit_code if last_result is not None else EXIT_PROCEED,
        stdout=merge_stdout(context_parts, last_raw_stdout),
        stderr=collected_stderr,
        last_result=last_result,
    )


# ---------------------------------------------------------------------------
# Process-level entry
# ---------------------------------------------------------------------------


def execute_hook(
    hook_type: str,
    handlers: Sequence[HookHandler],
    config: ToolkitConfig,
    stdin: IO[Any] | None = None,
    stdout: IO[str] | None = None,
    stderr: IO[str] | None = None,
    stdin_timeout: float = STDIN_TIMEOUT_SECONDS,
    max_stdin_bytes: int = MAX_STDIN_BYTES,
) -> int:
    """Read hook input, run the pipeline, and write the host's output.

    Args:
        hook_type: Hook event name.
        handlers: Handlers sorted by feature priority.
        config: Resolved config snapshot.
        stdin: Input stream (default ``sys.stdin``).
        stdout: Output stream (default ``sys.stdout``).
        stderr: Error stream (default ``sys.stderr``).
        stdin_timeout: Seconds to wait for input.
        max_stdin_bytes: Maximum accepted input size.

    Returns:
        The process exit code (0 proceed, 1 error, 2 block).
    """
    out = stdout if stdout is not None else sys.stdout
    err = stderr if stderr is not None else sys.stderr

    try:
        raw_input = read_stdin_raw(stdin, timeout=stdin_timeout, max_bytes=max_stdin_bytes)
    except StdinParseError as e:
        err.write(f"[{hook_type}] {e}\n")
        err.flush()
        return EXIT_ERROR

    decoded = decode_hook_input(raw_input)
    result = run_pipeline(hook_type, handlers, decoded.data, config)

    rendered = format_output(hook_type, result, decoded.format)
    if rendered:
        out.write(rendered)
        out.flush()
    # VS Code reads the envelope; stderr is kept for handler failures only
    show_stderr = decoded.format is InputFormat.CLAUDE or result.exit_code == EXIT_ERROR
    if show_stderr and result.stderr:
        err.write(result.stderr)
        err.flush()

    return result.exit_code
