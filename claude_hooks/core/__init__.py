"""Core components for Claude Hooks Toolkit."""

from claude_hooks.core.config_defaults import DEFAULT_CONFIG, default_config
from claude_hooks.core.config_loader import deep_merge, load_config, resolve_config
from claude_hooks.core.config_presets import PRESET_NAMES, get_preset, is_preset_name
from claude_hooks.core.config_validator import ConfigValidationResult, validate_config
from claude_hooks.core.errors import (
    ClaudeHooksError,
    FeatureLoadError,
    StdinParseError,
    UnknownHookEventError,
)
from claude_hooks.core.models import ALL_HOOK_EVENT_TYPES, HookEventType, ToolkitConfig
from claude_hooks.core.regex_safety import RegexCache, RegexSafetyResult, check_regex_safety

__all__ = [
    # Errors
    "ClaudeHooksError",
    "FeatureLoadError",
    "StdinParseError",
    "UnknownHookEventError",
    # Models
    "ALL_HOOK_EVENT_TYPES",
    "HookEventType",
    "ToolkitConfig",
    # Config
    "ConfigValidationResult",
    "DEFAULT_CONFIG",
    "PRESET_NAMES",
    "deep_merge",
    "default_config",
    "get_preset",
    "is_preset_name",
    "load_config",
    "resolve_config",
    "validate_config",
    # Regex
    "RegexCache",
    "RegexSafetyResult",
    "check_regex_safety",
]
