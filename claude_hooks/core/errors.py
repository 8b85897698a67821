"""Custom exceptions for the Claude Hooks Toolkit."""

from pathlib import Path


def sanitize_path_for_error(path: str | Path) -> str:
    """Extract only the filename from a path for safe error messages.

    Hook stderr is shown to the host user, so full system paths from
    config or input files are reduced to their final component.

    Args:
        path: Full path or filename.

    Returns:
        Just the filename portion.
    """
    if isinstance(path, Path):
        return path.name
    return Path(path).name


class ClaudeHooksError(Exception):
    """Base exception for all toolkit errors."""

    pass


class StdinParseError(ClaudeHooksError):
    """Raised when hook input on stdin is missing, oversized, or not a JSON object.

    Always fatal to the invocation: no handler runs.
    """

    pass


class FeatureLoadError(ClaudeHooksError):
    """Raised when a lazy feature descriptor cannot materialize its module."""

    def __init__(self, feature_name: str, reason: str) -> None:
        self.feature_name = feature_name
        self.reason = reason
        super().__init__(f"Failed to load feature '{feature_name}': {reason}")


class UnknownHookEventError(ClaudeHooksError):
    """Raised when a hook event name cannot be resolved."""

    def __init__(self, event: str) -> None:
        self.event = event
        super().__init__(f"Unknown hook event: {event}")
