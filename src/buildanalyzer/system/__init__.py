"""
System interaction utilities for the buildanalyzer package.

This module provides log file discovery, Maven command execution with log
capture, and process tree termination.
"""

from .commands import (
    build_maven_command,
    ensure_no_parallel_args,
    make_log_path,
    require_maven_project,
    run_and_tee,
)
from .files import (
    list_log_files_by_pattern,
    list_log_files_in_directory,
    read_log_lines,
    split_log_pattern,
)
from .processes import terminate_process_tree

__all__ = [
    # Log files
    "read_log_lines",
    "list_log_files_in_directory",
    "list_log_files_by_pattern",
    "split_log_pattern",
    # Commands
    "build_maven_command",
    "ensure_no_parallel_args",
    "make_log_path",
    "require_maven_project",
    "run_and_tee",
    # Processes
    "terminate_process_tree",
]
