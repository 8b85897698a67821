"""Pytest fixtures for Claude Hooks Toolkit tests."""

from __future__ import annotations

import io
import json
from collections.abc import Callable, Generator
from pathlib import Path
from typing import Any

import pytest

from claude_hooks.config import Settings, override_settings, reset_settings
from claude_hooks.core.config_defaults import CONFIG_FILENAME
from claude_hooks.core.models import ToolkitConfig
from claude_hooks.core.regex_safety import RegexCache

# ---------------------------------------------------------------------------
# Basic fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def config() -> ToolkitConfig:
    """Provide the built-in default configuration."""
    return ToolkitConfig()


@pytest.fixture
def regex_cache() -> RegexCache:
    """Provide an empty compiled-pattern cache."""
    return RegexCache()


@pytest.fixture
def test_settings(tmp_path: Path) -> Generator[Settings, None, None]:
    """Provide settings pointed at a temporary project directory."""
    settings = Settings(
        project_dir=tmp_path,
        log_level="DEBUG",
        stdin_timeout_seconds=2.0,
    )
    override_settings(settings)
    yield settings
    reset_settings()


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


@pytest.fixture
def write_config(tmp_path: Path) -> Callable[..., Path]:
    """Write a JSON config file into the temporary project directory.

    Usage: ``write_config({"guards": {...}})`` writes
    ``claude-hooks.config.json``; ``write_config(data, name="base.json")``
    writes any other file.
    """

    def _write(data: Any, name: str = CONFIG_FILENAME, raw: str | None = None) -> Path:
        path = tmp_path / name
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(raw if raw is not None else json.dumps(data), encoding="utf-8")
        return path

    return _write


@pytest.fixture
def make_stdin() -> Callable[[Any], io.BytesIO]:
    """Encode a payload as a JSON byte stream (strings are passed through)."""

    def _make(payload: Any) -> io.BytesIO:
        if isinstance(payload, str):
            return io.BytesIO(payload.encode("utf-8"))
        return io.BytesIO(json.dumps(payload).encode("utf-8"))

    return _make
