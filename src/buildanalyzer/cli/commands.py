"""
Command implementations for the CLI modes.

Each ``run_*`` function executes one mode and returns the process exit
code on success. Expected failures (missing files, unparsable logs, failed
builds) end the process through ``handle_cli_error`` with the exit code
documented below.
"""

import logging
import subprocess
import sys
from argparse import Namespace
from pathlib import Path
from typing import List, Optional, Sequence, Tuple

from ..aggregation import aggregate_builds
from ..analysis import analyze_plugin_timings_for_summary, evaluate_health
from ..models.aggregate import AggregatedSummary
from ..models.build import BuildSummary
from ..models.config import AppConfig
from ..output import (
    format_aggregated,
    format_aggregated_json,
    format_single_build,
    format_single_build_json,
)
from ..parsing import detect_parallel_build, parse_build_log
from ..storage import ExportManager
from ..system import (
    build_maven_command,
    ensure_no_parallel_args,
    list_log_files_by_pattern,
    list_log_files_in_directory,
    make_log_path,
    read_log_lines,
    require_maven_project,
    run_and_tee,
    split_log_pattern,
)
from ..validation import (
    ErrorSeverity,
    ParallelBuildRejected,
    ParseError,
    ValidationError,
    handle_cli_error,
    validate_directory,
)

logger = logging.getLogger(__name__)

# --- Exit codes ---
EXIT_OK = 0
EXIT_USAGE = 1
EXIT_NOT_FOUND = 2
EXIT_PARSE_ERROR = 3
EXIT_IO_ERROR = 4
EXIT_NO_LOG_FILES = 7
EXIT_NO_PARSEABLE_BUILDS = 8
EXIT_BUILD_TIMEOUT = 124
EXIT_UNEXPECTED = 99

MODE_DIRECTORY = "DIRECTORY"
MODE_PATTERN = "PATTERN"

PLOTTER_PATH = Path(__file__).parent.parent.parent.parent / "tools" / "plotter.py"


def _fail(error: Exception, context: str, exit_code: int) -> None:
    handle_cli_error(
        error=error,
        context=context,
        exit_code=exit_code,
        severity=ErrorSeverity.INFO,
        logger=logger,
    )


def _emit(text: str) -> None:
    print(text)


# --- Single log ---

def analyze_log_file(log_file: Path, args: Namespace, config: AppConfig) -> int:
    """
    Parse, evaluate and report a single build log.

    Shared by the single-log and clean-install modes.
    """
    try:
        lines = read_log_lines(log_file)
    except OSError as e:
        _fail(e, f"reading log file {log_file}", EXIT_IO_ERROR)

    try:
        summary = parse_build_log(
            lines, test_output_marker=config.parser.test_output_marker, source=str(log_file)
        )
    except ParseError as e:
        _fail(e, f"parsing log file {log_file}", EXIT_PARSE_ERROR)

    parallel = detect_parallel_build(lines, config.parser.parallel_build_marker)
    if parallel:
        logger.warning(f"{log_file} comes from a parallel build; per-module analysis is degraded")

    # Health rules and plugin blocks assume sequential output.
    hints = [] if parallel else evaluate_health(summary, config.health)
    plugin_timings = None
    if args.plugins and not parallel:
        plugin_timings = analyze_plugin_timings_for_summary(lines, summary)

    if args.json:
        _emit(
            format_single_build_json(
                summary,
                hints,
                plugin_timings,
                parallel=parallel,
                pretty=args.pretty,
                indent=config.output.json_indent,
            )
        )
    else:
        _emit(format_single_build(log_file, summary, hints, plugin_timings, parallel=parallel))

    if args.export:
        manager = _export_manager(args.export, config)
        manager.export_single_build(log_file, summary, hints, plugin_timings, parallel=parallel)
        _maybe_plot(args)

    return EXIT_OK


def run_single_log(args: Namespace, config: AppConfig) -> int:
    log_file = Path(args.log_file)
    if not log_file.is_file():
        _fail(FileNotFoundError(f"Log file not found: {log_file.absolute()}"), "single log", EXIT_NOT_FOUND)
    return analyze_log_file(log_file, args, config)


# --- Aggregation ---

def parse_log_files(log_files: Sequence[Path], config: AppConfig) -> Tuple[List[Path], List[BuildSummary]]:
    """
    Parse every log, skipping those that cannot be read or parsed.

    Returns:
        The successfully parsed paths and their summaries, in input order
    """
    parsed_files = []
    summaries = []
    for log_file in log_files:
        try:
            lines = read_log_lines(log_file)
            summary = parse_build_log(
                lines, test_output_marker=config.parser.test_output_marker, source=str(log_file)
            )
        except (ParseError, OSError) as e:
            logger.warning(f"Skipping {log_file}: {e}")
            continue
        if detect_parallel_build(lines, config.parser.parallel_build_marker):
            logger.warning(f"{log_file} comes from a parallel build; module times overlap")
        parsed_files.append(log_file)
        summaries.append(summary)
    return parsed_files, summaries


def _report_aggregate(mode_label: str, log_files: Sequence[Path], args: Namespace, config: AppConfig) -> int:
    parsed_files, summaries = parse_log_files(log_files, config)
    if not summaries:
        _fail(
            ValueError(f"None of the {len(log_files)} log files could be parsed as a Maven build"),
            "aggregation",
            EXIT_NO_PARSEABLE_BUILDS,
        )

    summary: AggregatedSummary = aggregate_builds(summaries)

    if args.json:
        _emit(
            format_aggregated_json(
                mode_label, parsed_files, summary, pretty=args.pretty, indent=config.output.json_indent
            )
        )
    else:
        _emit(format_aggregated(mode_label, parsed_files, summary))

    if args.export:
        _export_manager(args.export, config).export_aggregated(mode_label, parsed_files, summary)
        _maybe_plot(args)

    return EXIT_OK


def run_directory(args: Namespace, config: AppConfig) -> int:
    try:
        directory = validate_directory(args.dir, field_name="Log directory")
    except ValidationError as e:
        _fail(e, "directory mode", EXIT_NOT_FOUND)

    try:
        log_files = list_log_files_in_directory(directory)
    except OSError as e:
        _fail(e, f"listing {directory}", EXIT_IO_ERROR)

    if not log_files:
        _fail(FileNotFoundError(f"No .log files found in directory: {directory.absolute()}"), "directory mode", EXIT_NO_LOG_FILES)

    return _report_aggregate(MODE_DIRECTORY, log_files, args, config)


def run_pattern(args: Namespace, config: AppConfig) -> int:
    directory, file_pattern = split_log_pattern(args.aggregate)
    try:
        validate_directory(directory, field_name="Log directory")
    except ValidationError as e:
        _fail(e, "pattern mode", EXIT_NOT_FOUND)

    try:
        log_files = list_log_files_by_pattern(args.aggregate)
    except OSError as e:
        _fail(e, f"listing {directory}", EXIT_IO_ERROR)

    if not log_files:
        _fail(
            FileNotFoundError(f"No log files match pattern '{file_pattern}' in {directory.absolute()}"),
            "pattern mode",
            EXIT_NO_LOG_FILES,
        )

    return _report_aggregate(MODE_PATTERN, log_files, args, config)


# --- Clean install ---

def run_clean_install(args: Namespace, config: AppConfig) -> int:
    """
    Run ``clean install`` in a project, capture the log and analyze it.

    The build's own non-zero exit code is propagated.
    """
    maven_args = list(args.maven_args)
    try:
        ensure_no_parallel_args(maven_args)
        project_dir = require_maven_project(Path(args.clean_install))
    except ValidationError as e:
        _fail(e, "clean-install validation", EXIT_NOT_FOUND)

    settings = config.clean_install
    log_file = make_log_path(project_dir, settings.log_subdir)
    command = build_maven_command(project_dir, maven_args)

    # Keep stdout clean for JSON consumers.
    console = sys.stderr if args.json else sys.stdout
    console.write(f"Running: {' '.join(command)}\n")
    console.write(f"Working directory: {project_dir.absolute()}\n")
    console.write(f"Log will be captured at: {log_file.absolute()}\n\n")

    try:
        exit_code = run_and_tee(
            command,
            cwd=project_dir,
            log_file=log_file,
            timeout=settings.build_timeout_seconds or None,
            console=console,
        )
    except subprocess.TimeoutExpired as e:
        _fail(e, "clean-install build", EXIT_BUILD_TIMEOUT)
    except OSError as e:
        _fail(e, f"starting {command[0]}", EXIT_IO_ERROR)

    if exit_code != 0:
        _fail(
            RuntimeError(f"Maven build failed with exit code {exit_code}. Log captured at: {log_file.absolute()}"),
            "clean-install build",
            exit_code,
        )

    try:
        lines = read_log_lines(log_file)
    except OSError as e:
        _fail(e, f"reading captured log {log_file}", EXIT_IO_ERROR)

    if detect_parallel_build(lines, config.parser.parallel_build_marker):
        _fail(
            ParallelBuildRejected(
                "Parallel build detected in captured log (MultiThreadedBuilder / -T). "
                "--clean-install requires a single-thread build for reliable analysis. "
                "Remove -T/--threads from your Maven args and check .mvn/maven.config. "
                f"Log: {log_file.absolute()}"
            ),
            "clean-install analysis",
            EXIT_NOT_FOUND,
        )

    console.write(f"\n=== Analyzing captured build log ===\nLog file : {log_file.absolute()}\n\n")
    return analyze_log_file(log_file, args, config)


# --- Export helpers ---

def _export_manager(export_dir: str, config: AppConfig) -> ExportManager:
    try:
        return ExportManager(Path(export_dir), config.storage)
    except OSError as e:
        _fail(e, f"creating export directory {export_dir}", EXIT_IO_ERROR)


def _maybe_plot(args: Namespace) -> Optional[int]:
    """
    Run the plotter tool on the export directory when --plot was given.

    Plotting failures are logged but never change the exit code.
    """
    if not getattr(args, "plot", False):
        return None

    plotter_cmd = [sys.executable, str(PLOTTER_PATH), "--export-dir", str(args.export)]
    logger.info(f"Executing plotter: {' '.join(plotter_cmd)}")
    try:
        result = subprocess.run(plotter_cmd, capture_output=True, text=True, check=False)
    except OSError as e:
        logger.error(f"Failed to execute plotter tool: {type(e).__name__}: {e}")
        return None

    if result.stdout:
        logger.info("Plotter tool output:\n" + result.stdout)
    if result.returncode != 0:
        logger.warning(f"Plotter tool exited with code {result.returncode}:\n{result.stderr}")
    return result.returncode
