"""Process settings for Claude Hooks Toolkit.

These are runtime knobs read from the environment (``CLAUDE_HOOKS_*``), not
the project's ``claude-hooks.config.json`` (see
:mod:`claude_hooks.core.config_loader` for that).
"""

import os
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Claude Hooks Toolkit runtime settings."""

    # Logging
    log_level: str = Field(
        default="WARNING",
        description="Logging level (DEBUG, INFO, WARNING, ERROR)",
    )
    log_json: bool = Field(
        default=False,
        description="Emit diagnostics as JSON lines",
    )
    log_mask_sensitive: bool = Field(
        default=True,
        description="Mask API keys, passwords and bearer tokens in diagnostics",
    )

    # Project
    project_dir: Path | None = Field(
        default=None,
        description="Directory holding claude-hooks.config.json",
    )

    # Features
    lazy_features: bool = Field(
        default=True,
        description="Import only the feature modules an event needs",
    )

    # Stdin
    stdin_timeout_seconds: float = Field(
        default=5.0,
        gt=0,
        description="Maximum time to wait for hook input on stdin",
    )
    max_stdin_bytes: int = Field(
        default=10 * 1024 * 1024,
        ge=1,
        description="Maximum accepted size of hook input",
    )

    # No env_file: hooks run inside arbitrary user projects whose .env is
    # not ours to read.
    model_config = SettingsConfigDict(
        env_prefix="CLAUDE_HOOKS_",
        extra="ignore",
    )

    def resolve_project_dir(self) -> Path:
        """Effective project directory.

        Falls back to ``CLAUDE_PROJECT_DIR`` (set by the host) and then to
        the current working directory.
        """
        if self.project_dir is not None:
            return self.project_dir
        host_dir = os.environ.get("CLAUDE_PROJECT_DIR")
        if host_dir:
            return Path(host_dir)
        return Path.cwd()


_settings: Settings | None = None


def get_settings() -> Settings:
    """Get the settings instance (lazy-loaded singleton).

    Returns:
        The Settings instance.

    Example:
        from claude_hooks.config import get_settings
        settings = get_settings()
        print(settings.stdin_timeout_seconds)
    """
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


def override_settings(new_settings: Settings) -> None:
    """Override the settings instance (for testing).

    Args:
        new_settings: The new Settings instance to use.
    """
    global _settings
    _settings = new_settings


def reset_settings() -> None:
    """Reset settings to None (forces reload on next get_settings call)."""
    global _settings
    _settings = None
