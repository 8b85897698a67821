"""Domain types for the hook runtime.

Handler results, feature metadata, lazy descriptors, and the tagged input
produced by the input normalizer.  Only ``dataclasses``, ``enum`` and
``typing`` at runtime; config types are imported for annotations only.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Any, Protocol

if TYPE_CHECKING:
    from claude_hooks.core.models import ToolkitConfig
    from claude_hooks.core.regex_safety import RegexCache

# ---------------------------------------------------------------------------
# Exit codes
# ---------------------------------------------------------------------------

EXIT_PROCEED = 0
EXIT_ERROR = 1
EXIT_BLOCK = 2


# ---------------------------------------------------------------------------
# Handler results
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class HandlerResult:
    """What a handler returns when it has something to say.

    ``None`` from a handler means "no effect, continue".
    """

    exit_code: int
    stdout: str = ""
    stderr: str = ""


class GuardAction(str, Enum):
    PROCEED = "proceed"
    BLOCK = "block"
    WARN = "warn"


@dataclass(frozen=True)
class GuardResult:
    """Decision of a security guard, before translation to a HandlerResult."""

    action: GuardAction
    message: str = ""
    details: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class PipelineResult:
    """Aggregated outcome of running every handler for one hook event.

    Attributes:
        exit_code: 0, 1 or 2.
        stdout: Merged stdout (``additionalContext`` parts joined).
        stderr: Concatenated stderr of every handler that ran.
        last_result: The last non-``None`` handler result, if any.
    """

    exit_code: int
    stdout: str = ""
    stderr: str = ""
    last_result: HandlerResult | None = None


class HookHandler(Protocol):
    """Structural type for a feature's per-event handler."""

    def __call__(
        self, hook_input: dict[str, Any], config: ToolkitConfig
    ) -> HandlerResult | None: ...


# ---------------------------------------------------------------------------
# Features
# ---------------------------------------------------------------------------


class FeatureCategory(str, Enum):
    SECURITY = "security"
    QUALITY = "quality"
    TRACKING = "tracking"
    INTEGRATION = "integration"


@dataclass(frozen=True)
class FeatureMeta:
    """Static description of a feature.

    Attributes:
        name: Unique kebab-case name (``command-guard``).
        hook_types: Hook event names the feature participates in.
        description: One-line summary for listings.
        category: Feature category.
        config_path: Dot path of the config section holding ``enabled``;
            empty means always on.
        priority: Lower runs earlier.
    """

    name: str
    hook_types: frozenset[str]
    description: str
    category: FeatureCategory
    config_path: str = ""
    priority: int = 500


@dataclass(frozen=True)
class FeatureModule:
    """A loaded feature: metadata plus a handler factory."""

    meta: FeatureMeta
    create_handler: Callable[[str, RegexCache], HookHandler]


@dataclass(frozen=True)
class LazyFeatureDescriptor:
    """Feature metadata with a deferred loader.

    ``load`` is only called after the feature passes the hook-type and
    enabled filters.
    """

    meta: FeatureMeta
    load: Callable[[], FeatureModule]


# ---------------------------------------------------------------------------
# Input
# ---------------------------------------------------------------------------


class InputFormat(str, Enum):
    """Wire format of the hook input (and therefore of the expected output)."""

    CLAUDE = "claude"
    VSCODE = "vscode"


@dataclass(frozen=True)
class HookInput:
    """Normalized hook input tagged with the host format it arrived in."""

    format: InputFormat
    data: dict[str, Any]
