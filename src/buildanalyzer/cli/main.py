"""
Command-line interface for the build analyzer.

This module provides the main CLI entry point: it parses arguments,
configures logging, loads the configuration and dispatches to one of the
analysis modes (single log, directory aggregate, pattern aggregate, or
clean-install capture).
"""

import argparse
import logging
import sys
import tomllib
from pathlib import Path
from typing import List, Optional, Sequence, Tuple

from ..config import get_config, set_config_path
from ..validation import ValidationError, handle_cli_error
from . import commands

LOG_FORMAT = "%(asctime)s [%(levelname)-5.5s] %(name)s:%(filename)s:%(lineno)d\t %(message)s"

logger = logging.getLogger(__name__)


class _ArgumentParser(argparse.ArgumentParser):
    """ArgumentParser that reports usage errors with exit code 1."""

    def error(self, message: str) -> None:
        self.print_usage(sys.stderr)
        self.exit(commands.EXIT_USAGE, f"ERROR: {message}\n")


def split_maven_args(argv: Sequence[str]) -> Tuple[List[str], List[str]]:
    """Split the command line at the first ``--``.

    Returns:
        Tuple of (analyzer arguments, Maven arguments)
    """
    argv = list(argv)
    if "--" in argv:
        index = argv.index("--")
        return argv[:index], argv[index + 1:]
    return argv, []


def build_parser() -> argparse.ArgumentParser:
    parser = _ArgumentParser(
        prog="build-analyzer",
        description="Analyze Maven build logs: module timings, tests, compile workload and health hints.",
        epilog="Arguments after '--' are passed to Maven in --clean-install mode.",
    )
    parser.add_argument("log_file", nargs="?", help="Maven build log to analyze.")

    modes = parser.add_mutually_exclusive_group()
    modes.add_argument("-d", "--dir", metavar="DIR", help="Aggregate every *.log file in DIR.")
    modes.add_argument(
        "-a",
        "--aggregate",
        metavar="PATTERN",
        help="Aggregate log files matching PATTERN, e.g. 'logs/build-*.log'.",
    )
    modes.add_argument(
        "-C",
        "--clean-install",
        nargs="?",
        const=".",
        metavar="PROJECT_DIR",
        help="Run 'clean install' in PROJECT_DIR (default: current directory) and analyze the captured log.",
    )

    parser.add_argument("-j", "--json", action="store_true", help="Print results as JSON.")
    parser.add_argument("-p", "--pretty", action="store_true", help="Pretty-print JSON (requires --json).")
    parser.add_argument(
        "--plugins",
        action="store_true",
        help="Estimate time per plugin goal (heuristic, based on log line counts).",
    )
    parser.add_argument("--export", metavar="DIR", help="Export tables and metadata to DIR.")
    parser.add_argument("--plot", action="store_true", help="Render charts of the export (requires --export).")
    parser.add_argument("--config", metavar="PATH", type=Path, help="Path to a config.toml file.")
    parser.add_argument(
        "-v",
        "--verbose",
        action="count",
        default=0,
        help="Increase log verbosity (-v info, -vv debug).",
    )
    return parser


def parse_arguments(argv: Sequence[str]) -> argparse.Namespace:
    """
    Parse and cross-check command-line arguments.

    Exits with code 1 on usage errors.
    """
    parser = build_parser()
    own_args, maven_args = split_maven_args(argv)
    args = parser.parse_args(own_args)
    args.maven_args = maven_args

    selected = [
        args.log_file is not None,
        args.dir is not None,
        args.aggregate is not None,
        args.clean_install is not None,
    ]
    if sum(selected) == 0:
        parser.error("a log file, --dir, --aggregate or --clean-install is required")
    if sum(selected) > 1:
        parser.error("choose exactly one of: log file, --dir, --aggregate, --clean-install")
    if args.pretty and not args.json:
        parser.error("--pretty requires --json")
    if args.plot and not args.export:
        parser.error("--plot requires --export")
    if maven_args and args.clean_install is None:
        parser.error("arguments after '--' are only allowed with --clean-install")

    return args


def configure_logging(verbosity: int) -> None:
    """Send log records to stderr so stdout carries only the report."""
    if verbosity >= 2:
        level = logging.DEBUG
    elif verbosity == 1:
        level = logging.INFO
    else:
        level = logging.WARNING

    logging.basicConfig(level=level, format=LOG_FORMAT, datefmt="%Y-%m-%d %H:%M:%S", stream=sys.stderr)
    logging.getLogger().setLevel(level)


def main(argv: Optional[Sequence[str]] = None) -> int:
    """
    Run the analyzer and return the exit code.

    Expected failures exit through ``handle_cli_error``; anything else is
    reported as an unexpected error (exit code 99).
    """
    if argv is None:
        argv = sys.argv[1:]

    args = parse_arguments(argv)
    configure_logging(args.verbose)

    if args.config is not None:
        set_config_path(args.config)

    try:
        config = get_config()
    except (FileNotFoundError, ValidationError, tomllib.TOMLDecodeError, TypeError) as e:
        handle_cli_error(
            error=e,
            context="configuration loading",
            exit_code=commands.EXIT_USAGE,
            include_traceback=True,
            logger=logger,
        )

    try:
        if args.clean_install is not None:
            return commands.run_clean_install(args, config)
        if args.dir is not None:
            return commands.run_directory(args, config)
        if args.aggregate is not None:
            return commands.run_pattern(args, config)
        return commands.run_single_log(args, config)
    except KeyboardInterrupt:
        logger.warning("Interrupted by user")
        return 130
    except Exception as e:
        logger.error(f"Unexpected error: {type(e).__name__}: {e}", exc_info=True)
        handle_cli_error(
            error=e,
            context="analysis",
            exit_code=commands.EXIT_UNEXPECTED,
            logger=logger,
        )


def main_cli() -> None:
    """Console-script entry point."""
    sys.exit(main())


if __name__ == "__main__":
    main_cli()
