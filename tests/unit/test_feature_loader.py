"""Unit tests for claude_hooks.services.feature_loader.

Tests cover:
1. Lazy loading - priority order, stable ties, filtered descriptors never load
2. Eager loading - registry path sorted by priority
3. Built-in descriptors - shipped handlers per event, load failures
"""

from __future__ import annotations

from unittest.mock import MagicMock, patch

import pytest

from claude_hooks.core.errors import FeatureLoadError
from claude_hooks.core.models import ToolkitConfig
from claude_hooks.core.regex_safety import RegexCache
from claude_hooks.features import LAZY_BUILTIN_FEATURES
from claude_hooks.hooks.models import (
    FeatureCategory,
    FeatureMeta,
    FeatureModule,
    HandlerResult,
    LazyFeatureDescriptor,
)
from claude_hooks.services.feature_loader import (
    load_enabled_handlers,
    load_enabled_handlers_lazy,
)
from claude_hooks.services.feature_registry import FeatureRegistry


def _meta(name: str, priority: int, hook_types=("PreToolUse",), config_path: str = ""):
    return FeatureMeta(
        name=name,
        hook_types=frozenset(hook_types),
        description=name,
        category=FeatureCategory.TRACKING,
        config_path=config_path,
        priority=priority,
    )


def _module(meta: FeatureMeta, seen_caches: list | None = None) -> FeatureModule:
    def create_handler(hook_type, cache):
        if seen_caches is not None:
            seen_caches.append(cache)

        def handle(hook_input, config):
            return HandlerResult(0, stdout=meta.name)

        return handle

    return FeatureModule(meta=meta, create_handler=create_handler)


def _descriptor(name: str, priority: int, **kwargs) -> LazyFeatureDescriptor:
    meta = _meta(name, priority, **kwargs)
    return LazyFeatureDescriptor(meta=meta, load=MagicMock(return_value=_module(meta)))


def _names(handlers, config: ToolkitConfig) -> list[str]:
    return [handler({}, config).stdout for handler in handlers]


# =============================================================================
# Lazy path
# =============================================================================


@pytest.mark.unit
class TestLazyLoading:
    """Test descriptor filtering and ordering."""

    def test_priority_order(self, config: ToolkitConfig) -> None:
        descriptors = [
            _descriptor("c", 200),
            _descriptor("a", 10),
            _descriptor("b", 100),
        ]
        handlers = load_enabled_handlers_lazy("PreToolUse", config, descriptors)
        assert _names(handlers, config) == ["a", "b", "c"]

    def test_equal_priorities_keep_declaration_order(self, config: ToolkitConfig) -> None:
        descriptors = [_descriptor("first", 50), _descriptor("second", 50)]
        handlers = load_enabled_handlers_lazy("PreToolUse", config, descriptors)
        assert _names(handlers, config) == ["first", "second"]

    def test_disabled_feature_never_loaded(self, config: ToolkitConfig) -> None:
        disabled = _descriptor("branch", 8, config_path="guards.branch")
        enabled = _descriptor("command", 10, config_path="guards.command")
        handlers = load_enabled_handlers_lazy("PreToolUse", config, [disabled, enabled])
        disabled.load.assert_not_called()
        enabled.load.assert_called_once()
        assert len(handlers) == 1

    def test_other_event_never_loaded(self, config: ToolkitConfig) -> None:
        stop_only = _descriptor("stop-only", 1, hook_types=("Stop",))
        handlers = load_enabled_handlers_lazy("PreToolUse", config, [stop_only])
        stop_only.load.assert_not_called()
        assert handlers == []

    def test_shared_regex_cache(self, config: ToolkitConfig) -> None:
        seen: list = []
        meta_a, meta_b = _meta("a", 1), _meta("b", 2)
        descriptors = [
            LazyFeatureDescriptor(meta_a, lambda: _module(meta_a, seen)),
            LazyFeatureDescriptor(meta_b, lambda: _module(meta_b, seen)),
        ]
        cache = RegexCache()
        load_enabled_handlers_lazy("PreToolUse", config, descriptors, regex_cache=cache)
        assert seen == [cache, cache]

    def test_load_failure_propagates(self, config: ToolkitConfig) -> None:
        meta = _meta("broken", 1)
        descriptor = LazyFeatureDescriptor(
            meta, MagicMock(side_effect=FeatureLoadError("broken", "no module"))
        )
        with pytest.raises(FeatureLoadError, match="Failed to load feature 'broken'"):
            load_enabled_handlers_lazy("PreToolUse", config, [descriptor])


# =============================================================================
# Eager path
# =============================================================================


@pytest.mark.unit
class TestEagerLoading:
    """Test the registry-backed path."""

    def test_sorted_by_priority(self, config: ToolkitConfig) -> None:
        registry = FeatureRegistry(
            [_module(_meta("late", 300)), _module(_meta("early", 5))]
        )
        handlers = load_enabled_handlers("PreToolUse", config, registry)
        assert _names(handlers, config) == ["early", "late"]

    def test_disabled_skipped(self, config: ToolkitConfig) -> None:
        registry = FeatureRegistry(
            [_module(_meta("branch", 8, config_path="guards.branch"))]
        )
        assert load_enabled_handlers("PreToolUse", config, registry) == []


# =============================================================================
# Built-in descriptors
# =============================================================================


@pytest.mark.unit
class TestBuiltinDescriptors:
    """Test the shipped lazy catalog."""

    def test_pre_tool_use_defaults(self, config: ToolkitConfig) -> None:
        handlers = load_enabled_handlers_lazy("PreToolUse", config)
        # command-guard, secret-leak-guard, logger
        assert len(handlers) == 3

    def test_notification_only_logger(self, config: ToolkitConfig) -> None:
        assert len(load_enabled_handlers_lazy("Notification", config)) == 1

    def test_permission_request(self, config: ToolkitConfig) -> None:
        assert len(load_enabled_handlers_lazy("PermissionRequest", config)) == 2

    def test_context_injector_opt_in(self) -> None:
        config = ToolkitConfig.model_validate({"contextInjector": {"enabled": True}})
        assert len(load_enabled_handlers_lazy("SessionStart", config)) == 2

    @pytest.mark.parametrize(
        "descriptor", LAZY_BUILTIN_FEATURES, ids=lambda d: d.meta.name
    )
    def test_every_builtin_loads(self, descriptor: LazyFeatureDescriptor) -> None:
        feature = descriptor.load()
        assert isinstance(feature, FeatureModule)
        assert feature.meta is descriptor.meta
        for hook_type in sorted(descriptor.meta.hook_types):
            assert callable(feature.create_handler(hook_type, RegexCache()))

    def test_import_time_error_wrapped(self) -> None:
        descriptor = LAZY_BUILTIN_FEATURES[0]
        with patch(
            "claude_hooks.features.importlib.import_module",
            side_effect=NameError("name 'FeatureModule' is not defined"),
        ):
            with pytest.raises(FeatureLoadError, match="NameError") as exc_info:
                descriptor.load()
        assert exc_info.value.feature_name == descriptor.meta.name
        assert isinstance(exc_info.value.__cause__, NameError)
