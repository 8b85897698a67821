"""Inject project context files on SessionStart and UserPromptSubmit."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

from claude_hooks.core.errors import sanitize_path_for_error
from claude_hooks.core.models import ToolkitConfig
from claude_hooks.core.regex_safety import RegexCache
from claude_hooks.features.catalog import get_meta
from claude_hooks.hooks.models import EXIT_PROCEED, FeatureModule, HandlerResult, HookHandler

logger = logging.getLogger(__name__)

META = get_meta("context-injector")


def collect_context(config: ToolkitConfig, base_dir: Path | None = None) -> str | None:
    """Concatenate the non-empty ``contextFiles``.

    Relative paths resolve against *base_dir* (default: the working
    directory).  Missing or unreadable files are skipped.

    Returns:
        The joined content, or ``None`` if there is nothing to inject.
    """
    injector = config.context_injector
    if not injector.enabled or not injector.context_files:
        return None

    root = base_dir if base_dir is not None else Path.cwd()
    chunks: list[str] = []
    for entry in injector.context_files:
        path = Path(entry)
        if not path.is_absolute():
            path = root / path
        if not path.is_file():
            continue
        try:
            content = path.read_text(encoding="utf-8").strip()
        except (OSError, UnicodeDecodeError) as e:
            logger.debug(f"Skipping context file {sanitize_path_for_error(path)}: {e}")
            continue
        if content:
            chunks.append(content)

    return "\n\n".join(chunks) if chunks else None


def create_handler(hook_type: str, regex_cache: RegexCache) -> HookHandler:
    def handle(hook_input: dict[str, Any], config: ToolkitConfig) -> HandlerResult | None:
        cwd = hook_input.get("cwd")
        base_dir = Path(cwd) if isinstance(cwd, str) and cwd else None
        content = collect_context(config, base_dir)
        if not content:
            return None
        return HandlerResult(EXIT_PROCEED, stdout=json.dumps({"additionalContext": content}))

    return handle


FEATURE = FeatureModule(meta=META, create_handler=create_handler)
