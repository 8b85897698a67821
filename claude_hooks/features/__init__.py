"""Built-in hook features.

Each shipped feature is a module exposing ``META``, ``create_handler`` and
``FEATURE``.  Modules are imported lazily through :data:`LAZY_BUILTIN_FEATURES`
so that a hook process only imports what it will run.
"""

from __future__ import annotations

import importlib
from collections.abc import Callable

from claude_hooks.core.errors import FeatureLoadError
from claude_hooks.features.catalog import (
    FEATURE_METAS,
    SHIPPED_FEATURE_MODULES,
    get_meta,
)
from claude_hooks.hooks.models import FeatureModule, LazyFeatureDescriptor

_PACKAGE = __name__


def _make_loader(feature_name: str, module_name: str) -> Callable[[], FeatureModule]:
    def load() -> FeatureModule:
        try:
            module = importlib.import_module(f"{_PACKAGE}.{module_name}")
        except Exception as e:
            raise FeatureLoadError(feature_name, f"{type(e).__name__}: {e}") from e

        feature = getattr(module, "FEATURE", None)
        if not isinstance(feature, FeatureModule):
            raise FeatureLoadError(feature_name, f"module {module_name} defines no FEATURE")
        return feature

    return load


LAZY_BUILTIN_FEATURES: tuple[LazyFeatureDescriptor, ...] = tuple(
    LazyFeatureDescriptor(meta=get_meta(name), load=_make_loader(name, module_name))
    for name, module_name in SHIPPED_FEATURE_MODULES.items()
)


def load_builtin_features() -> list[FeatureModule]:
    """Import every shipped feature module (the eager path)."""
    return [descriptor.load() for descriptor in LAZY_BUILTIN_FEATURES]


__all__ = [
    "FEATURE_METAS",
    "LAZY_BUILTIN_FEATURES",
    "SHIPPED_FEATURE_MODULES",
    "get_meta",
    "load_builtin_features",
]
