"""Named partial configurations selectable through ``extends``.

Merge order: defaults <- preset <- user config, so user values always win.
"""

from __future__ import annotations

import copy
from typing import Any

CONFIG_PRESETS: dict[str, dict[str, Any]] = {
    # Essential guards only (command, file, path); secret-leak is turned off.
    "minimal": {
        "guards": {
            "secretLeak": {"enabled": False},
        },
    },
    # Defaults plus branch protection.
    "security": {
        "guards": {
            "branch": {"enabled": True},
        },
    },
    # Security superset plus diff-size guard, validators and error patterns.
    "quality": {
        "guards": {
            "diffSize": {"enabled": True},
            "branch": {"enabled": True},
        },
        "validators": {
            "lint": {"enabled": True},
            "typecheck": {"enabled": True},
            "test": {"enabled": True},
        },
        "errorPatternDetector": {"enabled": True},
    },
    # Everything enabled.
    "full": {
        "guards": {
            "diffSize": {"enabled": True},
            "branch": {"enabled": True},
            "scope": {"enabled": True},
        },
        "validators": {
            "lint": {"enabled": True},
            "typecheck": {"enabled": True},
            "test": {"enabled": True},
        },
        "fileBackup": {"enabled": True},
        "costTracker": {"enabled": True},
        "webhooks": {"enabled": True},
        "changeSummary": {"enabled": True},
        "rateLimiter": {
            "enabled": True,
            "maxToolCallsPerSession": 200,
            "maxFileEditsPerSession": 100,
        },
        "todoTracker": {"enabled": True},
        "errorPatternDetector": {"enabled": True},
        "contextInjector": {"enabled": True},
        "autoCommit": {"enabled": True},
        "projectVisualizer": {"enabled": True},
    },
}

PRESET_NAMES: tuple[str, ...] = tuple(CONFIG_PRESETS)


def is_preset_name(value: object) -> bool:
    """Check whether *value* names a preset."""
    return isinstance(value, str) and value in CONFIG_PRESETS


def get_preset(name: str) -> dict[str, Any]:
    """Return a deep copy of the preset overlay.

    Raises:
        KeyError: If *name* is not a preset.
    """
    return copy.deepcopy(CONFIG_PRESETS[name])
