"""Typed configuration tree for the Claude Hooks Toolkit.

Mirrors ``claude-hooks.config.json``.  JSON keys are camelCase
(``blockedPatterns``); Python attributes are snake_case
(``blocked_patterns``).  Field defaults here are the built-in defaults: the
resolver deep-merges user and preset overlays onto their camelCase dump and
validates the result back into a frozen :class:`ToolkitConfig`.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class HookEventType(str, Enum):
    """Lifecycle points at which the host invokes a hook."""

    PRE_TOOL_USE = "PreToolUse"
    POST_TOOL_USE = "PostToolUse"
    POST_TOOL_USE_FAILURE = "PostToolUseFailure"
    USER_PROMPT_SUBMIT = "UserPromptSubmit"
    NOTIFICATION = "Notification"
    STOP = "Stop"
    SUBAGENT_START = "SubagentStart"
    SUBAGENT_STOP = "SubagentStop"
    PRE_COMPACT = "PreCompact"
    SETUP = "Setup"
    SESSION_START = "SessionStart"
    SESSION_END = "SessionEnd"
    PERMISSION_REQUEST = "PermissionRequest"


ALL_HOOK_EVENT_TYPES: tuple[HookEventType, ...] = tuple(HookEventType)


class ConfigSection(BaseModel):
    """Base for every node of the configuration tree."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
        extra="ignore",
    )


# ---------------------------------------------------------------------------
# Guards
# ---------------------------------------------------------------------------


class CommandGuardConfig(ConfigSection):
    blocked_patterns: list[str] = Field(
        default_factory=lambda: [
            r"rm\s+.*-[a-z]*r[a-z]*f",
            r"rm\s+-rf\s+/",
            r"rm\s+-rf\s+~",
            r"rm\s+-rf\s+\.",
            r"chmod\s+777",
            r"mkfs",
            r"dd\s+if=",
            r">\s*/dev/sda",
            r"shutdown",
            r"reboot",
            r":\(\)\{\s*:\|:\s*&\s*\};:",
            r"eval\s+",
            r"\|\s*(ba)?sh",
            r"\|\s*source",
            r"base64.*\|",
        ],
        description="Regexes; a matching Bash command is blocked",
    )
    allowed_patterns: list[str] = Field(
        default_factory=list,
        description="Regexes; a matching Bash command bypasses the block list",
    )
    enabled: bool = True


class FileGuardConfig(ConfigSection):
    protected_patterns: list[str] = Field(
        default_factory=lambda: [".env", "*.pem", "*.key", "id_rsa*", "*.secret*"],
    )
    enabled: bool = True


class PathGuardConfig(ConfigSection):
    allowed_roots: list[str] = Field(default_factory=list)
    enabled: bool = True


class DiffSizeGuardConfig(ConfigSection):
    max_lines: int = Field(default=500, ge=1)
    enabled: bool = False


class BranchGuardConfig(ConfigSection):
    protected_branches: list[str] = Field(
        default_factory=lambda: ["main", "master", "production", "release/*"],
    )
    enabled: bool = False


class SecretLeakGuardConfig(ConfigSection):
    custom_patterns: list[str] = Field(default_factory=list)
    allowed_patterns: list[str] = Field(default_factory=list)
    enabled: bool = True


class ScopeGuardConfig(ConfigSection):
    allowed_paths: list[str] = Field(default_factory=list)
    enabled: bool = False


class GuardsConfig(ConfigSection):
    command: CommandGuardConfig = Field(default_factory=CommandGuardConfig)
    file: FileGuardConfig = Field(default_factory=FileGuardConfig)
    path: PathGuardConfig = Field(default_factory=PathGuardConfig)
    diff_size: DiffSizeGuardConfig = Field(default_factory=DiffSizeGuardConfig)
    branch: BranchGuardConfig = Field(default_factory=BranchGuardConfig)
    secret_leak: SecretLeakGuardConfig = Field(default_factory=SecretLeakGuardConfig)
    scope: ScopeGuardConfig = Field(default_factory=ScopeGuardConfig)


# ---------------------------------------------------------------------------
# Validators
# ---------------------------------------------------------------------------


class CommandValidatorConfig(ConfigSection):
    command: str = ""
    enabled: bool = False


class RunnerValidatorConfig(ConfigSection):
    command: str = ""
    timeout: float = Field(default=60000, ge=1, description="Milliseconds")
    enabled: bool = False


class ValidatorsConfig(ConfigSection):
    lint: CommandValidatorConfig = Field(
        default_factory=lambda: CommandValidatorConfig(command="npx eslint --no-warn-ignored")
    )
    typecheck: CommandValidatorConfig = Field(
        default_factory=lambda: CommandValidatorConfig(command="npx tsc --noEmit")
    )
    test: RunnerValidatorConfig = Field(default_factory=RunnerValidatorConfig)


# ---------------------------------------------------------------------------
# Permissions and tracking features
# ---------------------------------------------------------------------------


class PermissionsConfig(ConfigSection):
    auto_allow: list[str] = Field(default_factory=lambda: ["Read", "Glob", "Grep"])
    auto_deny: list[str] = Field(default_factory=list)
    auto_ask: list[str] = Field(default_factory=list)


class ToggleConfig(ConfigSection):
    enabled: bool = False


class FileBackupConfig(ConfigSection):
    backup_dir: str = "logs/claude-hooks/file-backups"
    enabled: bool = False


class OutputPathConfig(ConfigSection):
    output_path: str = ""
    enabled: bool = False


class WebhooksConfig(ConfigSection):
    url: str = ""
    events: list[str] = Field(default_factory=lambda: ["Stop", "Notification"])
    enabled: bool = False
    include_full_input: bool = False


class RateLimiterConfig(ConfigSection):
    max_tool_calls_per_session: int = Field(default=0, ge=0)
    max_file_edits_per_session: int = Field(default=0, ge=0)
    enabled: bool = False


class TodoTrackerConfig(ConfigSection):
    output_path: str = "logs/claude-hooks/todo-reports"
    patterns: list[str] = Field(default_factory=lambda: ["TODO", "FIXME", "HACK", "XXX"])
    enabled: bool = False


class ErrorPatternDetectorConfig(ConfigSection):
    max_repeats: int = Field(default=3, ge=1)
    enabled: bool = False


class ContextInjectorConfig(ConfigSection):
    context_files: list[str] = Field(default_factory=lambda: [".claude/context.md"])
    enabled: bool = False


class AutoCommitConfig(ConfigSection):
    message_template: str = ""
    enabled: bool = False


class ProjectVisualizerConfig(ConfigSection):
    output_path: str = "logs/claude-hooks/project-viz"
    max_depth: int = Field(default=2, ge=1)
    enabled: bool = False


# ---------------------------------------------------------------------------
# Root
# ---------------------------------------------------------------------------


class ToolkitConfig(ConfigSection):
    """Resolved toolkit configuration (one frozen snapshot per process)."""

    log_dir: str = "logs/claude-hooks"
    transcript_backup_dir: str = "logs/claude-hooks/transcript-backups"
    guards: GuardsConfig = Field(default_factory=GuardsConfig)
    validators: ValidatorsConfig = Field(default_factory=ValidatorsConfig)
    permissions: PermissionsConfig = Field(default_factory=PermissionsConfig)
    prompt_history: ToggleConfig = Field(default_factory=lambda: ToggleConfig(enabled=True))
    file_backup: FileBackupConfig = Field(default_factory=FileBackupConfig)
    cost_tracker: OutputPathConfig = Field(
        default_factory=lambda: OutputPathConfig(output_path="logs/claude-hooks/cost-reports")
    )
    webhooks: WebhooksConfig = Field(default_factory=WebhooksConfig)
    change_summary: OutputPathConfig = Field(
        default_factory=lambda: OutputPathConfig(output_path="logs/claude-hooks/change-summaries")
    )
    rate_limiter: RateLimiterConfig = Field(default_factory=RateLimiterConfig)
    todo_tracker: TodoTrackerConfig = Field(default_factory=TodoTrackerConfig)
    error_pattern_detector: ErrorPatternDetectorConfig = Field(
        default_factory=ErrorPatternDetectorConfig
    )
    context_injector: ContextInjectorConfig = Field(default_factory=ContextInjectorConfig)
    auto_commit: AutoCommitConfig = Field(default_factory=AutoCommitConfig)
    project_visualizer: ProjectVisualizerConfig = Field(default_factory=ProjectVisualizerConfig)
    default_timeout: float = Field(default=30, ge=1, description="Seconds, all hook commands")
    hook_timeouts: dict[str, float] = Field(
        default_factory=dict,
        description="Per-hook-type timeout overrides in seconds",
    )

    def timeout_for(self, hook_type: str) -> float:
        """Effective timeout in seconds for *hook_type*."""
        return self.hook_timeouts.get(hook_type, self.default_timeout)

    def to_json_dict(self) -> dict[str, object]:
        """Dump with camelCase keys, the shape of the config file."""
        return self.model_dump(by_alias=True, mode="json")
