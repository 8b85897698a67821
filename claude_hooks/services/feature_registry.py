"""Feature registry and enablement checks.

A feature is enabled when its config section says so.  Sections are looked
up through :data:`CONFIG_ACCESSORS`, an explicit table from the dot path a
feature declares (``guards.command``) to an accessor on the typed config.
Anything the table cannot answer fails open: the feature runs.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from typing import Any

from claude_hooks.core.models import ToolkitConfig
from claude_hooks.hooks.models import FeatureMeta, FeatureModule

logger = logging.getLogger(__name__)

ConfigAccessor = Callable[[ToolkitConfig], Any]

CONFIG_ACCESSORS: dict[str, ConfigAccessor] = {
    # guards
    "guards.command": lambda c: c.guards.command,
    "guards.file": lambda c: c.guards.file,
    "guards.path": lambda c: c.guards.path,
    "guards.diffSize": lambda c: c.guards.diff_size,
    "guards.branch": lambda c: c.guards.branch,
    "guards.secretLeak": lambda c: c.guards.secret_leak,
    "guards.scope": lambda c: c.guards.scope,
    # validators
    "validators.lint": lambda c: c.validators.lint,
    "validators.typecheck": lambda c: c.validators.typecheck,
    "validators.test": lambda c: c.validators.test,
    # tracking and integration
    "promptHistory": lambda c: c.prompt_history,
    "fileBackup": lambda c: c.file_backup,
    "costTracker": lambda c: c.cost_tracker,
    "webhooks": lambda c: c.webhooks,
    "changeSummary": lambda c: c.change_summary,
    "rateLimiter": lambda c: c.rate_limiter,
    "todoTracker": lambda c: c.todo_tracker,
    "errorPatternDetector": lambda c: c.error_pattern_detector,
    "contextInjector": lambda c: c.context_injector,
    "autoCommit": lambda c: c.auto_commit,
    "projectVisualizer": lambda c: c.project_visualizer,
}


def is_feature_enabled(meta: FeatureMeta, config: ToolkitConfig) -> bool:
    """Whether the feature described by *meta* is enabled under *config*.

    Features without a ``config_path`` are always on.  Unknown paths, failing
    accessors, and sections without a boolean ``enabled`` all count as on.
    """
    if not meta.config_path:
        return True

    accessor = CONFIG_ACCESSORS.get(meta.config_path)
    if accessor is None:
        logger.debug(f"No config accessor for '{meta.config_path}', treating as enabled")
        return True

    try:
        section = accessor(config)
    except AttributeError:
        return True

    enabled = getattr(section, "enabled", None)
    if isinstance(enabled, bool):
        return enabled
    return True


def _handles(meta: FeatureMeta, hook_type: str) -> bool:
    return hook_type in meta.hook_types


class FeatureRegistry:
    """Ordered collection of loaded feature modules.

    Example:
        registry = FeatureRegistry([command_guard.FEATURE])
        registry.get_enabled("PreToolUse", config)
    """

    def __init__(self, features: Iterable[FeatureModule] | None = None) -> None:
        """Initialize the registry.

        Args:
            features: Initial features.  ``None`` loads every shipped built-in.
        """
        if features is None:
            from claude_hooks.features import load_builtin_features

            features = load_builtin_features()
        self._features: list[FeatureModule] = list(features)

    def get_all(self) -> list[FeatureModule]:
        return list(self._features)

    def get(self, name: str) -> FeatureModule | None:
        for feature in self._features:
            if feature.meta.name == name:
                return feature
        return None

    def get_by_hook_type(self, hook_type: str) -> list[FeatureModule]:
        return [f for f in self._features if _handles(f.meta, hook_type)]

    def get_enabled(self, hook_type: str, config: ToolkitConfig) -> list[FeatureModule]:
        """Features for *hook_type* that are enabled under *config*, in registry order."""
        return [
            f
            for f in self._features
            if _handles(f.meta, hook_type) and is_feature_enabled(f.meta, config)
        ]

    def register(self, feature: FeatureModule) -> None:
        """Add *feature*; a feature with the same name is replaced in place."""
        for index, existing in enumerate(self._features):
            if existing.meta.name == feature.meta.name:
                self._features[index] = feature
                return
        self._features.append(feature)

    def clear(self) -> None:
        self._features.clear()

    def __len__(self) -> int:
        return len(self._features)
