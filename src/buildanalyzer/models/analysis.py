"""
Analysis result models: plugin-time estimates and health hints.
"""

from dataclasses import dataclass
from enum import IntEnum
from typing import Any, Dict

# Scope used by hints that concern the build as a whole rather than a module.
BUILD_SCOPE = "build"


@dataclass(frozen=True)
class PluginTiming:
    """
    Estimated time spent in one plugin goal of one module.

    The estimate is a line-count heuristic: the module's total duration is
    split in proportion to the number of log lines each plugin block
    emitted. It is not a measured duration.
    """

    # "<plugin>:<goal>", e.g. "compiler:compile".
    plugin_key: str
    # Log lines emitted inside the plugin block(s), header excluded.
    line_count: int
    estimated_seconds: float

    def to_dict(self) -> Dict[str, Any]:
        return {
            "plugin_key": self.plugin_key,
            "line_count": self.line_count,
            "estimated_seconds": self.estimated_seconds,
        }


class HealthSeverity(IntEnum):
    """Hint severity, ordered by increasing urgency."""

    INFO = 1
    WARN = 2
    CRITICAL = 3

    @property
    def label(self) -> str:
        return f"[{self.name}]"


@dataclass(frozen=True)
class HealthHint:
    """A single diagnostic produced by a health rule."""

    severity: HealthSeverity
    # Module name, or BUILD_SCOPE for build-wide hints.
    scope: str
    message: str

    @property
    def is_build_wide(self) -> bool:
        return self.scope == BUILD_SCOPE

    def to_dict(self) -> Dict[str, Any]:
        return {
            "severity": self.severity.name,
            "scope": self.scope,
            "message": self.message,
        }
