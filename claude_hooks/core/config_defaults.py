"""Built-in toolkit configuration defaults.

The field defaults on :class:`~claude_hooks.core.models.ToolkitConfig` are
the single source of truth; this module exposes them in the camelCase JSON
shape that user config files and presets are merged onto.

Arrays in a user config **replace** the default arrays rather than being
appended to them.
"""

from __future__ import annotations

import copy
from typing import Any

from claude_hooks.core.models import ToolkitConfig

CONFIG_FILENAME = "claude-hooks.config.json"

DEFAULT_CONFIG: dict[str, Any] = ToolkitConfig().to_json_dict()
"""Defaults in config-file shape.  Treat as read-only; copy before merging."""


def default_config() -> ToolkitConfig:
    """Return a fresh default configuration snapshot."""
    return ToolkitConfig()


def default_config_dict() -> dict[str, Any]:
    """Return a deep copy of :data:`DEFAULT_CONFIG` safe to mutate."""
    return copy.deepcopy(DEFAULT_CONFIG)
