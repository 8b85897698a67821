"""Entry point for hook execution and CLI commands."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import NoReturn

logger = logging.getLogger(__name__)


def run_hook_command(args: argparse.Namespace) -> int:
    """Run one hook event against stdin.

    Args:
        args: Parsed command line arguments.

    Returns:
        Exit code (0 proceed, 1 error, 2 block).
    """
    from claude_hooks.config import get_settings
    from claude_hooks.core.errors import UnknownHookEventError
    from claude_hooks.core.logging import configure_logging
    from claude_hooks.factory import HookContextFactory
    from claude_hooks.hooks.dispatcher import run_hook
    from claude_hooks.hooks.models import EXIT_ERROR

    settings = get_settings()
    configure_logging(
        level=settings.log_level,
        json_format=settings.log_json,
        mask=settings.log_mask_sensitive,
    )

    try:
        context = HookContextFactory(settings).create()
        return run_hook(args.event, context)
    except UnknownHookEventError as e:
        sys.stderr.write(f"{e}\n")
        return EXIT_ERROR
    except Exception as e:
        logger.debug("Hook run failed", exc_info=True)
        sys.stderr.write(f"[{args.event}] Fatal error: {e}\n")
        return EXIT_ERROR


def run_validate(args: argparse.Namespace) -> int:
    """Validate the project's claude-hooks.config.json.

    Args:
        args: Parsed command line arguments.

    Returns:
        Exit code (0 valid, 1 errors found).
    """
    from claude_hooks.config import get_settings
    from claude_hooks.core.config_loader import resolve_config

    project_dir = Path(args.dir) if args.dir else get_settings().resolve_project_dir()
    resolution = resolve_config(project_dir)
    validation = resolution.validation

    config_path = resolution.config_path
    if config_path is not None and not config_path.is_file():
        print(f"No {config_path.name} found in {project_dir}; defaults in use.")
        return 0
    if resolution.used_defaults and not validation.errors:
        print("error: config could not be parsed or applied; defaults in use (see log)")
        return 1

    for error in validation.errors:
        print(f"error: {error}")
    for warning in validation.warnings:
        print(f"warning: {warning}")

    if validation.errors:
        print(f"\n{len(validation.errors)} error(s), {len(validation.warnings)} warning(s)")
        return 1

    print(f"Config OK ({len(validation.warnings)} warning(s))")
    return 0


def run_features(args: argparse.Namespace) -> int:
    """List the feature catalog with enabled status.

    Args:
        args: Parsed command line arguments.

    Returns:
        Exit code.
    """
    from claude_hooks.config import get_settings
    from claude_hooks.core.config_loader import load_config
    from claude_hooks.features import FEATURE_METAS, SHIPPED_FEATURE_MODULES
    from claude_hooks.hooks.dispatcher import normalize_event
    from claude_hooks.services.feature_registry import is_feature_enabled

    hook_filter = None
    if args.hook:
        hook_filter = normalize_event(args.hook)
        if hook_filter is None:
            print(f"Unknown hook event: {args.hook}", file=sys.stderr)
            return 1

    config = load_config(get_settings().resolve_project_dir())
    metas = sorted(FEATURE_METAS, key=lambda m: (m.priority, m.name))
    for meta in metas:
        if hook_filter and hook_filter not in meta.hook_types:
            continue
        status = "on " if is_feature_enabled(meta, config) else "off"
        shipped = "" if meta.name in SHIPPED_FEATURE_MODULES else "  (no built-in handler)"
        events = ", ".join(sorted(meta.hook_types))
        print(
            f"[{status}] {meta.priority:>4}  {meta.name:<24} {meta.category.value:<12} "
            f"{events}{shipped}"
        )
    return 0


def run_version() -> None:
    """Print version information."""
    from claude_hooks import __version__

    print(f"claude-hooks {__version__}")


def main(argv: list[str] | None = None) -> NoReturn:
    """Main entry point with subcommand support."""
    parser = argparse.ArgumentParser(
        prog="claude-hooks",
        description="Claude Hooks Toolkit: hook runtime and config tools",
    )
    parser.add_argument(
        "--version",
        "-V",
        action="store_true",
        help="Show version and exit",
    )

    subparsers = parser.add_subparsers(
        dest="command",
        title="commands",
        description="Available commands",
    )

    # Hook command
    hook_parser = subparsers.add_parser(
        "hook",
        help="Run a hook event (reads the event JSON from stdin)",
    )
    hook_parser.add_argument(
        "event",
        help="Hook event name (PreToolUse, preToolUse, pre-tool-use, ...)",
    )

    # Validate command
    validate_parser = subparsers.add_parser(
        "validate",
        help="Validate claude-hooks.config.json",
    )
    validate_parser.add_argument(
        "--dir",
        default=None,
        help="Project directory (default: CLAUDE_PROJECT_DIR or current directory)",
    )

    # Features command
    features_parser = subparsers.add_parser(
        "features",
        help="List features and whether they are enabled",
    )
    features_parser.add_argument(
        "--hook",
        default=None,
        help="Only list features for this hook event",
    )

    args = parser.parse_args(argv)

    if args.version:
        run_version()
        sys.exit(0)

    if args.command == "hook":
        sys.exit(run_hook_command(args))
    elif args.command == "validate":
        sys.exit(run_validate(args))
    elif args.command == "features":
        sys.exit(run_features(args))
    else:
        parser.print_help()
        sys.exit(1)


if __name__ == "__main__":
    main()
