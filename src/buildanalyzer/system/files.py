"""
Log file discovery and reading.
"""

import fnmatch
import logging
from pathlib import Path
from typing import List, Tuple, Union

logger = logging.getLogger(__name__)

LOG_SUFFIX = ".log"


def read_log_lines(path: Union[str, Path]) -> List[str]:
    """Read a log file as a list of lines without line terminators.

    Undecodable bytes are replaced rather than rejected, since build logs
    often mix encodings.

    Raises:
        OSError: If the file cannot be read.
    """
    with open(path, "r", encoding="utf-8", errors="replace") as f:
        lines = f.read().splitlines()
    logger.debug(f"Read {len(lines)} lines from {path}")
    return lines


def list_log_files_in_directory(directory: Union[str, Path]) -> List[Path]:
    """List regular ``*.log`` files directly under ``directory``, sorted.

    Raises:
        OSError: If the directory cannot be listed.
    """
    directory = Path(directory)
    return sorted(
        p for p in directory.iterdir() if p.is_file() and p.name.endswith(LOG_SUFFIX)
    )


def split_log_pattern(raw_pattern: str) -> Tuple[Path, str]:
    """Split a pattern such as ``logs/build-*.log`` into directory and glob.

    The split happens at the last ``/`` or ``\\``. A pattern without a
    separator refers to the current directory.

    Examples:
        >>> split_log_pattern("logs/build-*.log")
        (PosixPath('logs'), 'build-*.log')
        >>> split_log_pattern("*.log")
        (PosixPath('.'), '*.log')
    """
    index = max(raw_pattern.rfind("/"), raw_pattern.rfind("\\"))
    if index < 0:
        return Path("."), raw_pattern
    directory = raw_pattern[:index] or "."
    return Path(directory), raw_pattern[index + 1:]


def list_log_files_by_pattern(raw_pattern: str) -> List[Path]:
    """List regular files matching a ``dir/glob`` pattern, sorted.

    Only the last path component may contain wildcards.

    Raises:
        OSError: If the directory part cannot be listed.
    """
    directory, file_pattern = split_log_pattern(raw_pattern)
    logger.debug(f"Resolving pattern '{file_pattern}' in {directory}")
    return sorted(
        p
        for p in directory.iterdir()
        if p.is_file() and fnmatch.fnmatchcase(p.name, file_pattern)
    )
