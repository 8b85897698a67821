"""Layered configuration resolution for hook processes.

Resolution for ``<project_dir>/claude-hooks.config.json``:

1. Parse the file; anything other than a JSON object means "use defaults".
2. Resolve ``extends`` (a preset name or a path relative to the extending
   file), recursively, bounded at :data:`MAX_EXTENDS_DEPTH`, with a shared
   visited-path set so cycles terminate.
3. Validate the own fields of every file; invalid paths are removed so the
   corresponding defaults stay in effect.
4. Merge: defaults <- extends chain (grandparent first) <- cleaned user config.

Arrays always **replace** the lower layer's array; only objects merge.

Usage::

    from claude_hooks.core.config_loader import load_config

    config = load_config("/path/to/project")
    config.guards.command.enabled  # True
"""

from __future__ import annotations

import copy
import json
import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from claude_hooks.core.config_defaults import (
    CONFIG_FILENAME,
    default_config,
    default_config_dict,
)
from claude_hooks.core.config_presets import get_preset, is_preset_name
from claude_hooks.core.config_validator import ConfigValidationResult, validate_config
from claude_hooks.core.errors import sanitize_path_for_error
from claude_hooks.core.models import ToolkitConfig

logger = logging.getLogger(__name__)

MAX_EXTENDS_DEPTH = 10
"""Bound on ``extends`` recursion, independent of cycle detection."""


@dataclass
class ConfigResolution:
    """Resolved config plus the diagnostics gathered while resolving it.

    Attributes:
        config: The frozen configuration snapshot.
        validation: Validation report for the user's own fields.
        config_path: Path of the config file that was looked up.
        used_defaults: ``True`` when the file was missing or unusable.
    """

    config: ToolkitConfig
    validation: ConfigValidationResult = field(default_factory=ConfigValidationResult)
    config_path: Path | None = None
    used_defaults: bool = False


# ---------------------------------------------------------------------------
# Merge helpers
# ---------------------------------------------------------------------------


def deep_merge(target: dict[str, Any], source: dict[str, Any]) -> dict[str, Any]:
    """Merge *source* over *target*, returning a new dict.

    When both sides hold a dict for a key the values merge recursively;
    otherwise the *source* value replaces the *target* value wholesale
    (lists included).  Neither argument is mutated.
    """
    result = dict(target)
    for key, source_value in source.items():
        target_value = target.get(key)
        if isinstance(source_value, dict) and isinstance(target_value, dict):
            result[key] = deep_merge(target_value, source_value)
        else:
            result[key] = source_value
    return result


def _delete_nested_field(obj: dict[str, Any], dot_path: str) -> None:
    """Remove the field at *dot_path* in place; missing hops are a no-op."""
    parts = dot_path.split(".")
    current = obj
    for part in parts[:-1]:
        child = current.get(part)
        if not isinstance(child, dict):
            return
        current = child
    current.pop(parts[-1], None)


def strip_invalid_fields(config: dict[str, Any], invalid_paths: list[str]) -> dict[str, Any]:
    """Return a deep copy of *config* without the fields in *invalid_paths*."""
    cleaned = copy.deepcopy(config)
    for path in invalid_paths:
        _delete_nested_field(cleaned, path)
    return cleaned


# ---------------------------------------------------------------------------
# File helpers
# ---------------------------------------------------------------------------


def _read_json_object(path: str | Path) -> dict[str, Any] | None:
    """Read *path* as a JSON object.

    Returns:
        The parsed dict, or ``None`` if the file is unreadable, not JSON, or
        not an object.  A diagnostic is logged for each failure.
    """
    name = sanitize_path_for_error(path)
    try:
        raw = Path(path).read_text(encoding="utf-8")
        parsed = json.loads(raw)
    except (OSError, ValueError) as e:
        logger.warning(f"Failed to read config file {name}: {e}")
        return None

    if not isinstance(parsed, dict):
        logger.warning(f"Config file {name} is not a JSON object")
        return None
    return parsed


def _without_extends(config: dict[str, Any]) -> dict[str, Any]:
    return {key: value for key, value in config.items() if key != "extends"}


# ---------------------------------------------------------------------------
# Extends resolution
# ---------------------------------------------------------------------------


def resolve_extends(
    config: dict[str, Any],
    config_file_path: str | Path,
    seen: set[str],
    depth: int = 0,
) -> dict[str, Any]:
    """Resolve the ``extends`` field of *config* into a partial config.

    Args:
        config: Raw parsed config that may carry ``extends``.
        config_file_path: Path of the file *config* came from; relative
            ``extends`` paths resolve against its directory.
        seen: Absolute paths already visited.  Shared across the whole
            chain and updated in place.
        depth: Current recursion depth.

    Returns:
        The merged contribution of the chain (grandparent first), or ``{}``.
    """
    extends_value = config.get("extends")
    if not isinstance(extends_value, str):
        return {}

    if depth >= MAX_EXTENDS_DEPTH:
        logger.warning(
            f"Maximum extends depth ({MAX_EXTENDS_DEPTH}) reached, skipping further inheritance"
        )
        return {}

    if is_preset_name(extends_value):
        return get_preset(extends_value)

    config_dir = os.path.dirname(os.path.abspath(config_file_path))
    extended_path = os.path.abspath(os.path.join(config_dir, extends_value))

    if extended_path in seen:
        logger.warning(
            f"Circular extends detected: {sanitize_path_for_error(extended_path)}, skipping"
        )
        return {}
    seen.add(extended_path)

    if not os.path.isfile(extended_path):
        logger.warning(
            f"Extended config file not found: {sanitize_path_for_error(extended_path)}"
        )
        return {}

    extended_config = _read_json_object(extended_path)
    if extended_config is None:
        return {}

    parent = resolve_extends(extended_config, extended_path, seen, depth + 1)
    return deep_merge(parent, _clean_extended_fields(extended_config, extended_path))


def _clean_extended_fields(config: dict[str, Any], path: str) -> dict[str, Any]:
    """Own fields of an extended file, minus those that fail validation.

    Only errors are reported; an inherited file's unknown keys stay quiet.
    """
    own_fields = _without_extends(config)
    validation = validate_config(own_fields)
    if not validation.invalid_paths:
        return own_fields

    name = sanitize_path_for_error(path)
    for error in validation.errors:
        logger.warning(f"Config error in extended file {name}: {error}")
    return strip_invalid_fields(own_fields, validation.invalid_paths)


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def resolve_config(project_dir: str | Path | None = None) -> ConfigResolution:
    """Resolve the toolkit configuration and keep the diagnostics.

    Args:
        project_dir: Directory holding ``claude-hooks.config.json``.
            Defaults to the current working directory.

    Returns:
        A :class:`ConfigResolution`.  Never raises.
    """
    base_dir = Path(project_dir) if project_dir is not None else Path.cwd()
    config_path = base_dir / CONFIG_FILENAME

    if not config_path.is_file():
        logger.debug(f"No {CONFIG_FILENAME} in project directory, using defaults")
        return ConfigResolution(default_config(), config_path=config_path, used_defaults=True)

    user_config = _read_json_object(config_path)
    if user_config is None:
        logger.warning("Config file unusable, using defaults")
        return ConfigResolution(default_config(), config_path=config_path, used_defaults=True)

    seen = {os.path.abspath(config_path)}
    extended_base = resolve_extends(user_config, config_path, seen)

    own_fields = _without_extends(user_config)
    validation = validate_config(own_fields)
    for warning in validation.warnings:
        logger.warning(f"Config warning: {warning}")
    for error in validation.errors:
        logger.warning(f"Config error: {error}")

    merge_source = (
        strip_invalid_fields(own_fields, validation.invalid_paths)
        if validation.invalid_paths
        else own_fields
    )

    merged = deep_merge(deep_merge(default_config_dict(), extended_base), merge_source)

    try:
        config = ToolkitConfig.model_validate(merged)
    except ValidationError as e:
        logger.warning(
            f"Resolved config rejected ({e.error_count()} errors), using defaults: {e}"
        )
        return ConfigResolution(
            default_config(), validation=validation, config_path=config_path, used_defaults=True
        )

    return ConfigResolution(config, validation=validation, config_path=config_path)


def load_config(project_dir: str | Path | None = None) -> ToolkitConfig:
    """Load the toolkit configuration from ``claude-hooks.config.json``.

    Missing or unparseable files yield the built-in defaults.  Arrays in the
    user config replace default arrays: setting ``blockedPatterns`` to one
    entry removes every built-in pattern.

    Args:
        project_dir: Directory containing the config file.  Defaults to the
            current working directory.

    Returns:
        The resolved, frozen :class:`ToolkitConfig`.
    """
    return resolve_config(project_dir).config
