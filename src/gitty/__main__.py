"""Entry point for the gitty command line.

Subcommands expose the extraction layer directly, which is useful for
checking a config file after hand-editing it or for piping a model
response through the interpreter:

    gitty check-config ~/.gitty/config.json
    git diff --staged | gitty stats
    gitty interpret response.txt --prepend JIRA-42
"""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path
from typing import Any

import structlog

from gitty._version import __version__

log = structlog.get_logger()


def setup_logging(debug: bool = False, log_format: str = "console") -> None:
    """Configure structured logging with secret sanitization.

    Args:
        debug: Enable debug logging if True
        log_format: Output format ("json" or "console")
    """
    from gitty.utils.logging import LogFormat, LogLevel, configure_logging

    level = LogLevel.DEBUG if debug else LogLevel.WARNING
    configure_logging(level=level, log_format=LogFormat(log_format.lower()))


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command line arguments.

    Returns:
        Parsed argument namespace
    """
    parser = argparse.ArgumentParser(
        prog="gitty",
        description="gitty - AI-drafted git commit messages",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("-d", "--debug", action="store_true", help="Enable debug logging")
    parser.add_argument(
        "--format",
        choices=["json", "console"],
        default="console",
        help="Log output format (default: console)",
    )

    sub = parser.add_subparsers(dest="command", required=True)

    check = sub.add_parser("check-config", help="Validate a gitty config file")
    check.add_argument("path", type=Path, help="Config file to check")
    check.add_argument(
        "--local",
        action="store_true",
        help="Treat the file as a repository config (warn and fall back instead of failing)",
    )

    show = sub.add_parser("show-config", help="Show the resolved configuration")
    show.add_argument("--repo", type=Path, default=Path("."), help="Repository root")
    show.add_argument("--provider", choices=["openai", "gemini"])
    show.add_argument("-P", "--preset", help="Preset from the global config")
    show.add_argument("-p", "--prepend", help="Prefix added to every message")
    show.add_argument(
        "-f",
        "--force-prepend",
        action="store_true",
        help="Replace the configured prefix instead of appending to it",
    )

    stats = sub.add_parser("stats", help="Print diff statistics as JSON")
    stats.add_argument("file", nargs="?", type=Path, help="Diff file (default: stdin)")

    truncate = sub.add_parser("truncate", help="Bound a diff for prompt inclusion")
    truncate.add_argument("file", nargs="?", type=Path, help="Diff file (default: stdin)")
    truncate.add_argument("--max-length", type=int, default=3000)

    interpret = sub.add_parser("interpret", help="Turn a model response into candidates")
    interpret.add_argument("file", nargs="?", type=Path, help="Response file (default: stdin)")
    interpret.add_argument("-p", "--prepend", help="Prefix added to every message")

    prompt = sub.add_parser("prompt", help="Print the prompts for a diff")
    prompt.add_argument("file", nargs="?", type=Path, help="Diff file (default: stdin)")
    prompt.add_argument("--style", choices=["concise", "detailed", "funny"], default="concise")
    prompt.add_argument("--language", default="en")
    prompt.add_argument("-p", "--prepend", help="Prefix that will be added to messages")
    prompt.add_argument("--max-length", type=int, default=3000)

    args = parser.parse_args(argv)
    if getattr(args, "max_length", 1) <= 0:
        parser.error("--max-length must be positive")
    return args


def _read_input(path: Path | None) -> str:
    if path is None:
        return sys.stdin.read()
    return path.read_text(encoding="utf-8")


def _print_json(data: Any) -> None:
    print(json.dumps(data, indent=2))


def check_config(path: Path, local: bool) -> int:
    """Load a config file the way gitty would and report the result."""
    from gitty.config.loader import load_global_config, load_local_config

    if local:
        local_config = load_local_config(path)
        if local_config is None:
            print(f"{path}: not usable, the global configuration would be used")
            return 1
        print(f"{path}: OK")
        return 0

    config = load_global_config(path)
    print(f"{path}: OK (default provider: {config.default_provider})")
    return 0


def show_config(args: argparse.Namespace) -> int:
    """Resolve every configuration layer and print the result."""
    from gitty.config.loader import (
        LOCAL_CONFIG_PATH,
        load_global_config,
        load_local_config,
        resolve_config,
    )
    from gitty.config.schema import ConfigOverrides, Settings
    from gitty.utils.security import mask_api_key

    settings = Settings()
    global_config = load_global_config(settings.global_config_path)
    local_config = load_local_config(args.repo / LOCAL_CONFIG_PATH)
    overrides = ConfigOverrides(
        provider=args.provider,
        preset=args.preset,
        prepend=args.prepend,
        force_prepend=args.force_prepend,
    )
    resolved = resolve_config(global_config, local_config, overrides, settings)

    data = resolved.model_dump()
    data["api_key"] = mask_api_key(resolved.api_key)
    _print_json(data)
    return 0


def run(args: argparse.Namespace) -> int:
    """Dispatch a parsed command.

    Returns:
        Exit code (0 for success, non-zero for error)
    """
    from gitty.core.diff_summarizer import diff_stats, truncate_diff
    from gitty.core.prompt_builder import build_system_prompt, build_user_prompt
    from gitty.core.response_interpreter import interpret
    from gitty.utils.errors import ConfigNotFoundError, GittyError

    try:
        if args.command == "check-config":
            return check_config(args.path, args.local)

        if args.command == "show-config":
            return show_config(args)

        if args.command == "stats":
            stats = diff_stats(_read_input(args.file))
            _print_json({**stats.to_dict(), "total_changes": stats.total_changes})
        elif args.command == "truncate":
            print(truncate_diff(_read_input(args.file), args.max_length))
        elif args.command == "interpret":
            candidates = interpret(_read_input(args.file), args.prepend)
            _print_json([c.to_dict() for c in candidates])
        elif args.command == "prompt":
            diff = _read_input(args.file)
            _print_json(
                {
                    "system": build_system_prompt(args.style, args.language, args.prepend),
                    "user": build_user_prompt(diff, args.max_length),
                }
            )
        return 0

    except ConfigNotFoundError as e:
        log.error("configuration_file_not_found", path=e.path, error=str(e))
        return 1
    except GittyError as e:
        log.error("gitty_error", error=str(e))
        print(f"error: {e}", file=sys.stderr)
        return 1
    except OSError as e:
        log.error("input_unreadable", error=str(e))
        print(f"error: {e}", file=sys.stderr)
        return 1


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    from gitty.utils.logging import bind_context, clear_context

    args = parse_args(argv)
    setup_logging(debug=args.debug, log_format=args.format)
    bind_context(command=args.command)

    try:
        return run(args)
    except KeyboardInterrupt:
        log.info("interrupted")
        return 130
    finally:
        clear_context()


if __name__ == "__main__":
    sys.exit(main())
