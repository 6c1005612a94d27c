"""
Regular expressions for the Maven console log lines the analyzer understands.

All patterns are matched with ``search`` so that leading timestamps or
other prefixes added by CI systems do not prevent a match.
"""

import re
from typing import Optional, Tuple

# [INFO] Total time:  8.294 s
TOTAL_TIME_MARKER = "Total time:"
TOTAL_TIME_PATTERN = re.compile(r"Total time:\s*([0-9]+(?:\.[0-9]+)?)\s*([a-zA-Z]+)")

# [INFO] Building core 1.0-SNAPSHOT                                         [2/4]
BUILDING_MODULE_PATTERN = re.compile(r"\[INFO\] Building\s+(\S+)\s+.*\[[0-9]+/[0-9]+\]")

# [INFO] --- compiler:3.13.0:compile (default-compile) @ core ---
# groups: plugin, version, goal, module
PLUGIN_HEADER_PATTERN = re.compile(
    r"\[INFO\] ---\s+([^:\s]+):([^:\s]+):([^\s(]+).*?@\s+(.+?)\s+---"
)

# [INFO] Compiling 3 source files with javac [debug target 17] to target/classes
COMPILE_PATTERN = re.compile(r"\[INFO\] Compiling\s+(\d+)\s+source files?\s+.*to\s+(.+)$")

# [INFO] Tests run: 1, Failures: 0, Errors: 0, Skipped: 0, Time elapsed: 0.064 s -- in ...
# Failing classes are reported at WARNING/ERROR level with the same layout.
TEST_RESULT_PATTERN = re.compile(
    r"\[(?:INFO|WARNING|ERROR)\] Tests run:\s*(\d+),\s*Failures:\s*(\d+),\s*"
    r"Errors:\s*(\d+),\s*Skipped:\s*(\d+),\s*Time elapsed:\s*([0-9]+(?:\.[0-9]+)?)\s*s"
)

REACTOR_SUMMARY_MARKER = "Reactor Summary"

# [INFO] core ............................................... SUCCESS [  4.637 s]
REACTOR_MODULE_PATTERN = re.compile(r"\[INFO\]\s+(.+?)\s+.*\[\s*([0-9]+(?:\.[0-9]+)?)\s*s\]")

# [INFO] ------------------------------------------------------------------------
DIVIDER_PATTERN = re.compile(r"\[INFO\]\s*-{3,}\s*$")

BUILD_TERMINAL_MARKERS = ("BUILD SUCCESS", "BUILD FAILURE")

_SECOND_UNITS = frozenset({"s", "sec", "secs", "second", "seconds"})
_MINUTE_UNITS = frozenset({"min", "mins", "minute", "minutes"})


def to_seconds(value: float, unit: str) -> float:
    """Normalize a duration to seconds.

    Unknown units are returned unconverted.

    Examples:
        >>> to_seconds(2, "min")
        120.0
        >>> to_seconds(1234, "ms")
        1.234
    """
    unit = unit.lower()
    if unit in _SECOND_UNITS:
        return float(value)
    if unit == "ms":
        return value / 1000.0
    if unit in _MINUTE_UNITS:
        return value * 60.0
    return float(value)


def match_plugin_header(line: str) -> Optional[Tuple[str, str]]:
    """Match a plugin block header.

    Returns:
        Tuple of (plugin_key, module) where plugin_key is "<plugin>:<goal>",
        or None if the line is not a header.
    """
    match = PLUGIN_HEADER_PATTERN.search(line)
    if not match:
        return None
    plugin, _version, goal, module = match.groups()
    return f"{plugin}:{goal}", module.strip()


def is_divider(line: str) -> bool:
    return DIVIDER_PATTERN.search(line) is not None


def is_build_terminal(line: str) -> bool:
    return any(marker in line for marker in BUILD_TERMINAL_MARKERS)
