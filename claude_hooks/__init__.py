"""Claude Hooks Toolkit - configurable hook pipeline for Claude Code and VS Code."""

__version__ = "0.1.0"

# Re-export core components for convenience
from claude_hooks.config import Settings, get_settings
from claude_hooks.core import (
    # Errors
    ClaudeHooksError,
    FeatureLoadError,
    HookEventType,
    RegexCache,
    StdinParseError,
    # Config
    ToolkitConfig,
    UnknownHookEventError,
    check_regex_safety,
    load_config,
    validate_config,
)

__all__ = [
    # Version info
    "__version__",
    # Settings
    "Settings",
    "get_settings",
    # Errors
    "ClaudeHooksError",
    "FeatureLoadError",
    "StdinParseError",
    "UnknownHookEventError",
    # Config
    "HookEventType",
    "ToolkitConfig",
    "load_config",
    "validate_config",
    # Regex
    "RegexCache",
    "check_regex_safety",
]
