"""
Maven command construction and build log capture.

This module builds the ``clean install`` command line for a project,
rejects parallel builds, and runs the build while teeing its merged output
to the console and to a log file.
"""

import logging
import os
import subprocess
import sys
import threading
from datetime import datetime
from pathlib import Path
from typing import List, Optional, Sequence, TextIO

from ..validation import ParallelBuildRejected, ValidationError, validate_directory
from .processes import terminate_process_tree

logger = logging.getLogger(__name__)

LOG_FILE_PREFIX = "clean-install-"


def _is_windows() -> bool:
    return os.name == "nt"


def build_maven_command(
    project_dir: Path, extra_args: Sequence[str] = (), windows: Optional[bool] = None
) -> List[str]:
    """Build the ``clean install`` command for a project.

    The project's Maven wrapper is preferred when present; otherwise ``mvn``
    is taken from the PATH.

    Args:
        project_dir: Maven project directory.
        extra_args: Additional arguments appended after ``clean install``.
        windows: Force Windows (``.cmd``) naming; detected when None.

    Returns:
        The command as an argument list.
    """
    if windows is None:
        windows = _is_windows()

    wrapper = project_dir / ("mvnw.cmd" if windows else "mvnw")
    if wrapper.is_file():
        executable = str(wrapper.absolute())
    else:
        executable = "mvn.cmd" if windows else "mvn"

    return [executable, "clean", "install", *extra_args]


def ensure_no_parallel_args(extra_args: Sequence[str]) -> None:
    """Reject Maven arguments that would start a parallel build.

    Raises:
        ParallelBuildRejected: On ``-T``, ``-T<n>``, ``--threads`` or
            ``--threads=<n>``.
    """
    for arg in extra_args:
        if arg.startswith("-T"):
            raise ParallelBuildRejected(
                "--clean-install does not support parallel Maven builds (-T). "
                "Remove '-T...' and run again. If you need parallel builds, run Maven "
                "yourself and analyze the produced log file with single-log mode.",
                value=arg,
            )
        if arg == "--threads" or arg.startswith("--threads="):
            raise ParallelBuildRejected(
                "--clean-install does not support parallel Maven builds (--threads). "
                "Remove '--threads...' and run again.",
                value=arg,
            )


def require_maven_project(project_dir: Path) -> Path:
    """Check that ``project_dir`` is a directory containing a ``pom.xml``.

    Raises:
        ValidationError: If the directory or its pom.xml is missing.
    """
    directory = validate_directory(project_dir, field_name="Project directory")
    if not (directory / "pom.xml").is_file():
        raise ValidationError(
            f"No pom.xml found in project directory: {directory.absolute()}",
            field_name="project_dir",
            value=str(project_dir),
        )
    return directory


def make_log_path(project_dir: Path, log_subdir: Path, now: Optional[datetime] = None) -> Path:
    """Return ``<project>/<log_subdir>/clean-install-YYYYMMDD-HHMMSS.log``."""
    timestamp = (now or datetime.now()).strftime("%Y%m%d-%H%M%S")
    return project_dir / log_subdir / f"{LOG_FILE_PREFIX}{timestamp}.log"


def run_and_tee(
    command: Sequence[str],
    cwd: Path,
    log_file: Path,
    timeout: Optional[float] = None,
    console: Optional[TextIO] = None,
) -> int:
    """Run a command, copying its merged stdout/stderr to console and file.

    On timeout or keyboard interrupt the whole process tree is terminated.

    Args:
        command: Argument list to execute.
        cwd: Working directory of the process.
        log_file: File receiving the output; parent directories are created.
        timeout: Seconds after which the build is killed; None or 0 for none.
        console: Stream receiving the live output (default: sys.stdout).

    Returns:
        The process exit code.

    Raises:
        subprocess.TimeoutExpired: If the timeout elapsed.
        KeyboardInterrupt: Re-raised after the process tree was terminated.
    """
    console = console or sys.stdout
    log_file.parent.mkdir(parents=True, exist_ok=True)

    logger.info(f"Running {' '.join(command)} in {cwd}, capturing to {log_file}")
    process = subprocess.Popen(
        list(command),
        cwd=cwd,
        stdout=subprocess.PIPE,
        stderr=subprocess.STDOUT,
        text=True,
        encoding="utf-8",
        errors="replace",
    )

    timed_out = threading.Event()

    def _on_timeout() -> None:
        timed_out.set()
        logger.warning(f"Build exceeded {timeout} s, terminating process tree")
        terminate_process_tree(process.pid, "maven build")

    watchdog = None
    if timeout:
        watchdog = threading.Timer(timeout, _on_timeout)
        watchdog.daemon = True
        watchdog.start()

    try:
        with open(log_file, "w", encoding="utf-8") as log:
            for line in process.stdout:
                console.write(line)
                log.write(line)
        exit_code = process.wait()
    except KeyboardInterrupt:
        logger.warning("Interrupted, terminating build process tree")
        terminate_process_tree(process.pid, "maven build")
        process.wait()
        raise
    finally:
        if watchdog is not None:
            watchdog.cancel()
        process.stdout.close()

    if timed_out.is_set():
        raise subprocess.TimeoutExpired(list(command), timeout)

    logger.info(f"Build process finished with exit code: {exit_code}")
    return exit_code
