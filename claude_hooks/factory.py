"""Context factory for hook processes.

A hook process builds one :class:`HookContext` at startup: the resolved
project config, the shared compiled-regex cache, and the feature sources
(lazy descriptors, or an eager registry).  Everything downstream receives
the context explicitly.

Usage:
    from claude_hooks.factory import HookContextFactory

    context = HookContextFactory(get_settings()).create()
    exit_code = run_hook("PreToolUse", context)
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass, field
from pathlib import Path

from claude_hooks.config import Settings
from claude_hooks.core.config_loader import resolve_config
from claude_hooks.core.config_validator import ConfigValidationResult
from claude_hooks.core.models import ToolkitConfig
from claude_hooks.core.regex_safety import RegexCache
from claude_hooks.hooks.models import LazyFeatureDescriptor
from claude_hooks.services.feature_registry import FeatureRegistry

logger = logging.getLogger(__name__)


@dataclass
class HookContext:
    """Everything a hook run needs, built once per process.

    Attributes:
        settings: Process settings.
        config: Resolved project configuration snapshot.
        project_dir: Directory the config was resolved from.
        regex_cache: Compiled-pattern cache shared by every handler.
        descriptors: Lazy feature catalog used when ``lazy_features`` is on.
        registry: Eager feature registry, only built when ``lazy_features``
            is off.
        validation: Diagnostics from resolving the config.
    """

    settings: Settings
    config: ToolkitConfig
    project_dir: Path
    regex_cache: RegexCache
    descriptors: tuple[LazyFeatureDescriptor, ...]
    registry: FeatureRegistry | None = None
    validation: ConfigValidationResult = field(default_factory=ConfigValidationResult)


class HookContextFactory:
    """Factory for :class:`HookContext`.

    Example:
        factory = HookContextFactory(settings)
        context = factory.create()
    """

    def __init__(
        self,
        settings: Settings,
        config: ToolkitConfig | None = None,
        descriptors: Sequence[LazyFeatureDescriptor] | None = None,
        registry: FeatureRegistry | None = None,
    ) -> None:
        """Initialize the factory.

        Args:
            settings: Process settings.
            config: Optional config override for testing; skips file loading.
            descriptors: Optional lazy catalog override for testing.
            registry: Optional eager registry override for testing.
        """
        self._settings = settings
        self._injected_config = config
        self._injected_descriptors = descriptors
        self._injected_registry = registry

    def create_config(self, project_dir: Path) -> tuple[ToolkitConfig, ConfigValidationResult]:
        """Resolve the project config (or return the injected one)."""
        if self._injected_config is not None:
            return self._injected_config, ConfigValidationResult()
        resolution = resolve_config(project_dir)
        return resolution.config, resolution.validation

    def create_descriptors(self) -> tuple[LazyFeatureDescriptor, ...]:
        if self._injected_descriptors is not None:
            return tuple(self._injected_descriptors)
        from claude_hooks.features import LAZY_BUILTIN_FEATURES

        return LAZY_BUILTIN_FEATURES

    def create_registry(self) -> FeatureRegistry | None:
        """Build the eager registry, unless lazy loading is enabled."""
        if self._injected_registry is not None:
            return self._injected_registry
        if self._settings.lazy_features:
            return None
        return FeatureRegistry()

    def create(self) -> HookContext:
        """Create the context.

        Returns:
            A fully wired :class:`HookContext`.
        """
        project_dir = self._settings.resolve_project_dir()
        config, validation = self.create_config(project_dir)
        logger.debug(f"Hook context created (lazy_features={self._settings.lazy_features})")

        return HookContext(
            settings=self._settings,
            config=config,
            project_dir=project_dir,
            regex_cache=RegexCache(),
            descriptors=self.create_descriptors(),
            registry=self.create_registry(),
            validation=validation,
        )
