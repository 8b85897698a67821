"""Validation of raw ``claude-hooks.config.json`` objects.

Checks a parsed user config against flat tables of typed fields and regex
fields before it is merged over the defaults.  Never raises: problems are
reported in a :class:`ConfigValidationResult` and the resolver decides what
to do with them (invalid paths are dropped so the default stays in effect).
"""

from __future__ import annotations

import json
import math
import re
from dataclasses import dataclass, field
from typing import Any, Literal

from claude_hooks.core.config_defaults import DEFAULT_CONFIG
from claude_hooks.core.models import ALL_HOOK_EVENT_TYPES
from claude_hooks.core.regex_safety import check_regex_safety

FieldType = Literal["boolean", "number", "integer", "string", "string[]"]


@dataclass
class ConfigValidationResult:
    """Structured outcome of :func:`validate_config`.

    Attributes:
        valid: ``True`` when there are no errors (warnings allowed).
        errors: Type, range, and regex compile failures.
        warnings: Unknown keys and potentially unsafe regexes.
        invalid_paths: Dot-paths of fields that failed validation.
    """

    valid: bool = True
    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)
    invalid_paths: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class FieldRule:
    path: str
    type: FieldType
    min: float | None = None


# ---------------------------------------------------------------------------
# Schema tables
# ---------------------------------------------------------------------------

FIELD_RULES: tuple[FieldRule, ...] = (
    # top-level strings
    FieldRule("logDir", "string"),
    FieldRule("transcriptBackupDir", "string"),
    # guards
    FieldRule("guards.command.enabled", "boolean"),
    FieldRule("guards.command.blockedPatterns", "string[]"),
    FieldRule("guards.command.allowedPatterns", "string[]"),
    FieldRule("guards.file.enabled", "boolean"),
    FieldRule("guards.file.protectedPatterns", "string[]"),
    FieldRule("guards.path.enabled", "boolean"),
    FieldRule("guards.path.allowedRoots", "string[]"),
    FieldRule("guards.diffSize.enabled", "boolean"),
    FieldRule("guards.diffSize.maxLines", "integer", 1),
    FieldRule("guards.branch.enabled", "boolean"),
    FieldRule("guards.branch.protectedBranches", "string[]"),
    FieldRule("guards.secretLeak.enabled", "boolean"),
    FieldRule("guards.secretLeak.customPatterns", "string[]"),
    FieldRule("guards.secretLeak.allowedPatterns", "string[]"),
    FieldRule("guards.scope.enabled", "boolean"),
    FieldRule("guards.scope.allowedPaths", "string[]"),
    # validators
    FieldRule("validators.lint.enabled", "boolean"),
    FieldRule("validators.lint.command", "string"),
    FieldRule("validators.typecheck.enabled", "boolean"),
    FieldRule("validators.typecheck.command", "string"),
    FieldRule("validators.test.enabled", "boolean"),
    FieldRule("validators.test.command", "string"),
    FieldRule("validators.test.timeout", "number", 1),
    # permissions
    FieldRule("permissions.autoAllow", "string[]"),
    FieldRule("permissions.autoDeny", "string[]"),
    FieldRule("permissions.autoAsk", "string[]"),
    # tracking and integration features
    FieldRule("promptHistory.enabled", "boolean"),
    FieldRule("fileBackup.enabled", "boolean"),
    FieldRule("fileBackup.backupDir", "string"),
    FieldRule("costTracker.enabled", "boolean"),
    FieldRule("costTracker.outputPath", "string"),
    FieldRule("webhooks.enabled", "boolean"),
    FieldRule("webhooks.url", "string"),
    FieldRule("webhooks.events", "string[]"),
    FieldRule("webhooks.includeFullInput", "boolean"),
    FieldRule("changeSummary.enabled", "boolean"),
    FieldRule("changeSummary.outputPath", "string"),
    FieldRule("rateLimiter.enabled", "boolean"),
    FieldRule("rateLimiter.maxToolCallsPerSession", "integer", 0),
    FieldRule("rateLimiter.maxFileEditsPerSession", "integer", 0),
    FieldRule("todoTracker.enabled", "boolean"),
    FieldRule("todoTracker.outputPath", "string"),
    FieldRule("todoTracker.patterns", "string[]"),
    FieldRule("errorPatternDetector.enabled", "boolean"),
    FieldRule("errorPatternDetector.maxRepeats", "integer", 1),
    FieldRule("contextInjector.enabled", "boolean"),
    FieldRule("contextInjector.contextFiles", "string[]"),
    FieldRule("autoCommit.enabled", "boolean"),
    FieldRule("autoCommit.messageTemplate", "string"),
    FieldRule("projectVisualizer.enabled", "boolean"),
    FieldRule("projectVisualizer.outputPath", "string"),
    FieldRule("projectVisualizer.maxDepth", "integer", 1),
    # timeout
    FieldRule("defaultTimeout", "number", 1),
)

REGEX_FIELDS: tuple[str, ...] = (
    "guards.command.blockedPatterns",
    "guards.command.allowedPatterns",
    "guards.secretLeak.customPatterns",
    "guards.secretLeak.allowedPatterns",
    "permissions.autoAllow",
    "permissions.autoDeny",
    "permissions.autoAsk",
    "todoTracker.patterns",
)
"""String-array fields whose elements are regex sources that must compile."""

_EXTRA_TOP_LEVEL_KEYS = frozenset({"$schema", "hookTimeouts", "extends"})

_MISSING = object()


def _section_paths(tree: dict[str, Any], prefix: str = "") -> list[str]:
    """Dot-paths of every object-valued node in the defaults tree."""
    paths: list[str] = []
    for key, value in tree.items():
        if isinstance(value, dict) and key != "hookTimeouts":
            path = f"{prefix}{key}"
            paths.append(path)
            paths.extend(_section_paths(value, f"{path}."))
    return paths


SECTION_PATHS: tuple[str, ...] = tuple(_section_paths(DEFAULT_CONFIG))
"""Paths that must hold objects (``guards``, ``guards.command``, ...)."""


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def get_nested_value(obj: dict[str, Any], dot_path: str) -> Any:
    """Walk *dot_path* through nested dicts; ``_MISSING`` if any hop is absent."""
    current: Any = obj
    for part in dot_path.split("."):
        if not isinstance(current, dict) or part not in current:
            return _MISSING
        current = current[part]
    return current


def _json_type(value: Any) -> str:
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, (int, float)):
        return "number"
    if isinstance(value, str):
        return "string"
    if isinstance(value, list):
        return "array"
    return "object"


def _is_number(value: Any) -> bool:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    return math.isfinite(value)


def _check_field(rule: FieldRule, value: Any) -> list[str]:
    """Return error messages for one typed field (empty when valid)."""
    shown = json.dumps(value, default=str)

    if rule.type == "boolean":
        if not isinstance(value, bool):
            return [f'"{rule.path}" must be a boolean, got {_json_type(value)} ({shown})']
        return []

    if rule.type == "string":
        if not isinstance(value, str):
            return [f'"{rule.path}" must be a string, got {_json_type(value)} ({shown})']
        return []

    if rule.type == "string[]":
        if not isinstance(value, list):
            return [f'"{rule.path}" must be an array of strings, got {_json_type(value)}']
        return [
            f'"{rule.path}[{i}]" must be a string, got {_json_type(item)}'
            for i, item in enumerate(value)
            if not isinstance(item, str)
        ]

    # number / integer
    if not _is_number(value):
        return [f'"{rule.path}" must be a number, got {_json_type(value)} ({shown})']
    if rule.type == "integer" and not float(value).is_integer():
        return [f'"{rule.path}" must be a whole number, got {value}']
    if rule.min is not None and value < rule.min:
        min_shown = int(rule.min) if float(rule.min).is_integer() else rule.min
        return [f'"{rule.path}" must be >= {min_shown}, got {value}']
    return []


def _check_hook_timeouts(
    value: Any, errors: list[str], warnings: list[str], invalid_paths: list[str]
) -> None:
    if not isinstance(value, dict):
        errors.append('"hookTimeouts" must be an object mapping hook event types to numbers')
        invalid_paths.append("hookTimeouts")
        return

    valid_hook_types = {event.value for event in ALL_HOOK_EVENT_TYPES}
    for key, timeout in value.items():
        if key not in valid_hook_types:
            warnings.append(f'Unknown hook type "{key}" in hookTimeouts')
        if not _is_number(timeout) or timeout < 1:
            errors.append(
                f'"hookTimeouts.{key}" must be a number >= 1, '
                f"got {json.dumps(timeout, default=str)}"
            )
            invalid_paths.append(f"hookTimeouts.{key}")


def _check_regex_field(
    path: str, value: Any, errors: list[str], warnings: list[str], invalid_paths: list[str]
) -> None:
    if not isinstance(value, list):
        return

    for i, pattern in enumerate(value):
        if not isinstance(pattern, str):
            continue  # already flagged by the type check
        try:
            re.compile(pattern)
        except re.error:
            errors.append(f'Invalid regex in "{path}[{i}]": {json.dumps(pattern)}')
            invalid_paths.append(path)
            continue

        safety = check_regex_safety(pattern)
        if not safety.safe:
            warnings.append(
                f'Potentially unsafe regex in "{path}[{i}]": '
                f"{json.dumps(pattern)} - {safety.reason}"
            )


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def validate_config(raw: dict[str, Any]) -> ConfigValidationResult:
    """Validate a raw parsed config object against the toolkit schema.

    Args:
        raw: The parsed JSON object from the config file (``extends`` may
            still be present; it is a known key).

    Returns:
        A :class:`ConfigValidationResult`.  Does not raise.
    """
    errors: list[str] = []
    warnings: list[str] = []
    invalid_paths: list[str] = []

    known_top_level = set(DEFAULT_CONFIG) | _EXTRA_TOP_LEVEL_KEYS
    for key in raw:
        if key not in known_top_level:
            warnings.append(f'Unknown top-level key "{key}" - possible typo')

    for path in SECTION_PATHS:
        value = get_nested_value(raw, path)
        if value is not _MISSING and not isinstance(value, dict):
            errors.append(f'"{path}" must be an object, got {_json_type(value)}')
            invalid_paths.append(path)

    for rule in FIELD_RULES:
        value = get_nested_value(raw, rule.path)
        if value is _MISSING:
            continue
        problems = _check_field(rule, value)
        if problems:
            errors.extend(problems)
            invalid_paths.append(rule.path)

    if "hookTimeouts" in raw:
        _check_hook_timeouts(raw["hookTimeouts"], errors, warnings, invalid_paths)

    for path in REGEX_FIELDS:
        value = get_nested_value(raw, path)
        if value is not _MISSING:
            _check_regex_field(path, value, errors, warnings, invalid_paths)

    return ConfigValidationResult(
        valid=not errors,
        errors=errors,
        warnings=warnings,
        invalid_paths=list(dict.fromkeys(invalid_paths)),
    )
