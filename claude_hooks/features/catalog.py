"""Static metadata for every known feature.

Metadata is cheap to import and is all the registry needs to decide whether
a feature participates in a hook event.  Only features listed in
:data:`SHIPPED_FEATURE_MODULES` have a handler implementation in this
package; the rest appear in listings and can be supplied by callers through
``FeatureRegistry.register``.
"""

from __future__ import annotations

from claude_hooks.core.models import ALL_HOOK_EVENT_TYPES
from claude_hooks.hooks.models import FeatureCategory, FeatureMeta

_ALL_EVENTS = frozenset(event.value for event in ALL_HOOK_EVENT_TYPES)


def _meta(
    name: str,
    hook_types: tuple[str, ...] | frozenset[str],
    description: str,
    category: FeatureCategory,
    config_path: str,
    priority: int,
) -> FeatureMeta:
    return FeatureMeta(
        name=name,
        hook_types=frozenset(hook_types),
        description=description,
        category=category,
        config_path=config_path,
        priority=priority,
    )


_SECURITY = FeatureCategory.SECURITY
_QUALITY = FeatureCategory.QUALITY
_TRACKING = FeatureCategory.TRACKING
_INTEGRATION = FeatureCategory.INTEGRATION

FEATURE_METAS: tuple[FeatureMeta, ...] = (
    # security
    _meta("rate-limiter", ("PreToolUse",),
          "Limits tool calls per session to prevent runaway automation",
          _SECURITY, "rateLimiter", 3),
    _meta("branch-guard", ("PreToolUse",),
          "Blocks file modifications on protected Git branches",
          _SECURITY, "guards.branch", 8),
    _meta("command-guard", ("PreToolUse",),
          "Blocks dangerous shell commands (rm -rf, chmod 777, .env access, etc.)",
          _SECURITY, "guards.command", 10),
    _meta("permission-handler", ("PermissionRequest",),
          "Auto-allows, auto-denies, or prompts user confirmation for tool permissions "
          "(deny > ask > allow)",
          _SECURITY, "", 10),
    _meta("file-guard", ("PreToolUse",),
          "Blocks writes to protected files (.env, *.pem, *.key, etc.)",
          _SECURITY, "guards.file", 20),
    _meta("secret-leak-guard", ("PreToolUse",),
          "Scans file content for leaked secrets and API keys before writing",
          _SECURITY, "guards.secretLeak", 25),
    _meta("path-guard", ("PreToolUse",),
          "Blocks file operations that resolve outside the project root",
          _SECURITY, "guards.path", 30),
    _meta("scope-guard", ("PreToolUse",),
          "Restricts file modifications to allowed path patterns",
          _SECURITY, "guards.scope", 35),
    _meta("diff-size-guard", ("PreToolUse",),
          "Blocks file write/edit operations when the diff exceeds a configurable line limit",
          _SECURITY, "guards.diffSize", 40),
    # quality
    _meta("lint-validator", ("PostToolUse",),
          "Runs ESLint on modified files after write/edit operations",
          _QUALITY, "validators.lint", 100),
    _meta("typecheck-validator", ("PostToolUse",),
          "Runs TypeScript compiler (tsc --noEmit) to verify type safety",
          _QUALITY, "validators.typecheck", 110),
    _meta("test-runner", ("PostToolUse",),
          "Auto-detects and runs project test suites after write/edit operations",
          _QUALITY, "validators.test", 120),
    _meta("error-pattern-detector", ("PostToolUseFailure",),
          "Detects repeated tool failure patterns and suggests alternative approaches",
          _QUALITY, "errorPatternDetector", 120),
    # tracking
    _meta("file-backup", ("PreToolUse",),
          "Creates a backup of files before they are overwritten by Write/Edit/MultiEdit tools",
          _TRACKING, "fileBackup", 5),
    _meta("transcript-backup", ("PreCompact",),
          "Backs up transcript files before compaction",
          _TRACKING, "", 200),
    _meta("context-injector", ("SessionStart", "UserPromptSubmit"),
          "Injects project context files as additional context on session start and prompts",
          _TRACKING, "contextInjector", 205),
    _meta("git-context", ("SessionStart", "Setup"),
          "Collects git branch, working-tree status, and recent commits as additional context",
          _TRACKING, "", 210),
    _meta("session-tracker", ("SessionStart", "SessionEnd", "Stop"),
          "Tracks session start/end events to sessions.jsonl",
          _TRACKING, "", 220),
    _meta("prompt-history", ("UserPromptSubmit",),
          "Logs user prompts to per-session JSONL files",
          _TRACKING, "promptHistory", 230),
    _meta("change-summary", ("PostToolUse", "Stop"),
          "Records file changes and generates a session change summary on stop",
          _TRACKING, "changeSummary", 250),
    _meta("todo-tracker", ("PostToolUse", "Stop"),
          "Tracks TODO/FIXME/HACK/XXX markers in written code and generates reports",
          _TRACKING, "todoTracker", 260),
    _meta("cost-tracker", ("PostToolUse", "Stop"),
          "Tracks tool usage per session and generates summary reports on session stop",
          _TRACKING, "costTracker", 800),
    _meta("logger", _ALL_EVENTS,
          "Appends JSONL log entries for all hook events",
          _TRACKING, "", 900),
    # integration
    _meta("project-visualizer", ("SessionStart",),
          "Generates Mermaid diagrams of project structure and file type distribution",
          _INTEGRATION, "projectVisualizer", 215),
    _meta("commit-auto", ("Stop",),
          "Automatically stages and commits changes with conventional commit messages "
          "on session stop",
          _INTEGRATION, "autoCommit", 850),
    _meta("notification-webhook", ("Stop", "Notification"),
          "Sends webhook notifications for configured hook events via HTTP POST",
          _INTEGRATION, "webhooks", 950),
)

_METAS_BY_NAME: dict[str, FeatureMeta] = {meta.name: meta for meta in FEATURE_METAS}

SHIPPED_FEATURE_MODULES: dict[str, str] = {
    "command-guard": "command_guard",
    "secret-leak-guard": "secret_leak_guard",
    "permission-handler": "permission_handler",
    "context-injector": "context_injector",
    "logger": "event_logger",
}
"""Feature name -> module under ``claude_hooks.features``."""


def get_meta(name: str) -> FeatureMeta:
    """Metadata for feature *name*.

    Raises:
        KeyError: If *name* is not a known feature.
    """
    return _METAS_BY_NAME[name]
