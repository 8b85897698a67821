"""Turn enabled features into an ordered handler list for one hook event.

Two paths:

- :func:`load_enabled_handlers` works on an already-populated
  :class:`~claude_hooks.services.feature_registry.FeatureRegistry`.
- :func:`load_enabled_handlers_lazy` filters lightweight descriptors first
  and only imports the feature modules that survive, so a ``Notification``
  hook never pays for the security guards.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence

from claude_hooks.core.models import ToolkitConfig
from claude_hooks.core.regex_safety import RegexCache
from claude_hooks.hooks.models import HookHandler, LazyFeatureDescriptor
from claude_hooks.services.feature_registry import FeatureRegistry, is_feature_enabled

logger = logging.getLogger(__name__)


def load_enabled_handlers(
    hook_type: str,
    config: ToolkitConfig,
    registry: FeatureRegistry,
    regex_cache: RegexCache | None = None,
) -> list[HookHandler]:
    """Build handlers from *registry* for *hook_type*, lowest priority first."""
    cache = regex_cache if regex_cache is not None else RegexCache()
    features = sorted(registry.get_enabled(hook_type, config), key=lambda f: f.meta.priority)
    return [f.create_handler(hook_type, cache) for f in features]


def load_enabled_handlers_lazy(
    hook_type: str,
    config: ToolkitConfig,
    descriptors: Sequence[LazyFeatureDescriptor] | None = None,
    regex_cache: RegexCache | None = None,
) -> list[HookHandler]:
    """Build handlers for *hook_type*, importing only enabled features.

    Args:
        hook_type: Hook event name.
        config: Resolved config snapshot.
        descriptors: Candidate descriptors; defaults to the built-in catalog.
        regex_cache: Shared compiled-pattern cache handed to every handler.

    Returns:
        Handlers ordered by feature priority (stable for equal priorities).

    Raises:
        FeatureLoadError: If a surviving descriptor fails to load.
    """
    if descriptors is None:
        from claude_hooks.features import LAZY_BUILTIN_FEATURES

        descriptors = LAZY_BUILTIN_FEATURES
    cache = regex_cache if regex_cache is not None else RegexCache()

    # Phase 1: metadata only
    matching = [
        d
        for d in descriptors
        if hook_type in d.meta.hook_types and is_feature_enabled(d.meta, config)
    ]
    matching.sort(key=lambda d: d.meta.priority)

    # Phase 2: import survivors
    handlers: list[HookHandler] = []
    for descriptor in matching:
        feature = descriptor.load()
        handlers.append(feature.create_handler(hook_type, cache))

    logger.debug(
        f"{hook_type}: loaded {len(handlers)} handler(s): "
        f"{', '.join(d.meta.name for d in matching) or 'none'}"
    )
    return handlers
