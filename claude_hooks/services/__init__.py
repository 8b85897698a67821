"""Service layer for Claude Hooks Toolkit."""

from claude_hooks.services.feature_loader import (
    load_enabled_handlers,
    load_enabled_handlers_lazy,
)
from claude_hooks.services.feature_registry import (
    CONFIG_ACCESSORS,
    FeatureRegistry,
    is_feature_enabled,
)

__all__ = [
    # Registry
    "CONFIG_ACCESSORS",
    "FeatureRegistry",
    "is_feature_enabled",
    # Loader
    "load_enabled_handlers",
    "load_enabled_handlers_lazy",
]
