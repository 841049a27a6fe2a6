"""Command-line entry point.

    selfdeploy analyze (--repo-url URL | --path DIR) [--keep-clone]
                       [--include-modules] [--debug] [--log-json]

Exit codes:
  0  report written to stdout
  1  missing/invalid path or clone failure
  2  usage error (reported by argparse)
"""

from __future__ import annotations

import argparse
import sys
from collections.abc import Sequence
from pathlib import Path
from typing import Optional

import structlog

from selfdeploy import __version__
from selfdeploy.analyzer import analyze_repository
from selfdeploy.core.config import Settings, get_settings
from selfdeploy.core.logging import configure_structlog
from selfdeploy.report import build_report, render_json
from selfdeploy.sandbox.checkout import CloneError, SandboxError, cloned_repo, redact_repo_url

EXIT_SUCCESS = 0
EXIT_FAILURE = 1

logger = structlog.get_logger(__name__)


def _build_analyze_parser(subparsers: argparse._SubParsersAction) -> None:
    """Build the 'analyze' subcommand parser."""
    analyze_parser = subparsers.add_parser(
        "analyze",
        help="Detect the technology stack of a repository.",
        description=(
            "Partition a repository into modules, classify each module and "
            "print one aggregated JSON description of the stack."
        ),
    )
    source = analyze_parser.add_mutually_exclusive_group(required=True)
    source.add_argument(
        "--repo-url",
        metavar="URL",
        help="Git repository to shallow-clone into a temporary directory.",
    )
    source.add_argument(
        "--path",
        metavar="DIR",
        type=Path,
        help="Local directory to analyze in place.",
    )
    analyze_parser.add_argument(
        "--keep-clone",
        action="store_true",
        help="Do not remove the temporary clone after the analysis.",
    )
    analyze_parser.add_argument(
        "--include-modules",
        action="store_true",
        help="Add per-module records to the report.",
    )
    analyze_parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug logging on stderr.",
    )
    analyze_parser.add_argument(
        "--log-json",
        action="store_true",
        help="Emit log lines as JSON.",
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="selfdeploy",
        description="Guess how to build and run a repository.",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    subparsers = parser.add_subparsers(dest="command", metavar="COMMAND", required=True)
    _build_analyze_parser(subparsers)
    return parser


def _analyze_path(path: Path, include_modules: bool) -> int:
    if not path.is_dir():
        logger.error("invalid_path", path=str(path))
        print(f"Path does not exist or is not a directory: {path}", file=sys.stderr)
        return EXIT_FAILURE
    result = analyze_repository(path)
    print(render_json(build_report(result, include_modules=include_modules)))
    return EXIT_SUCCESS


def run_analyze(args: argparse.Namespace, settings: Settings) -> int:
    if args.path is not None:
        return _analyze_path(args.path, args.include_modules)

    try:
        with cloned_repo(
            args.repo_url,
            keep=args.keep_clone,
            depth=settings.clone_depth,
            git_binary=settings.git_binary,
            timeout=settings.clone_timeout,
            prefix=settings.clone_prefix,
        ) as root:
            return _analyze_path(root, args.include_modules)
    except (CloneError, SandboxError) as exc:
        logger.error("clone_failed", repo_url=redact_repo_url(args.repo_url or ""), error=str(exc))
        print(f"Failed to clone repository: {exc}", file=sys.stderr)
        return EXIT_FAILURE


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    settings = get_settings()

    configure_structlog(
        debug=args.debug or settings.debug,
        json_logs=args.log_json or settings.log_json,
    )

    return run_analyze(args, settings)
