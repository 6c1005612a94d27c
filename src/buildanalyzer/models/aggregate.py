"""
Cross-build statistics models.

These records are produced by the aggregator from many ``BuildSummary``
objects. A module that is missing from some builds is only sampled in the
builds where it appears, so each ``ModuleStats`` has its own build count.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Tuple


@dataclass(frozen=True)
class ModuleStats:
    """
    Statistics for a single module across the builds that contained it.
    """

    name: str
    # Module duration statistics, in seconds.
    average_seconds: float
    min_seconds: float
    max_seconds: float
    # Number of builds in which this module was present.
    build_count: int
    # Mean over every sampled build; builds without tests contribute 0.
    average_test_seconds: float = 0.0
    # Bounds over builds that ran tests only; 0 if none did.
    min_test_seconds: float = 0.0
    max_test_seconds: float = 0.0
    total_tests_run: int = 0
    total_failures: int = 0
    total_errors: int = 0
    total_skipped: int = 0
    # Per-build averages, divided by this module's own build count.
    average_main_source_files: float = 0.0
    average_test_source_files: float = 0.0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "average_seconds": self.average_seconds,
            "min_seconds": self.min_seconds,
            "max_seconds": self.max_seconds,
            "build_count": self.build_count,
            "average_test_seconds": self.average_test_seconds,
            "min_test_seconds": self.min_test_seconds,
            "max_test_seconds": self.max_test_seconds,
            "total_tests_run": self.total_tests_run,
            "total_failures": self.total_failures,
            "total_errors": self.total_errors,
            "total_skipped": self.total_skipped,
            "average_main_source_files": self.average_main_source_files,
            "average_test_source_files": self.average_test_source_files,
        }


@dataclass(frozen=True)
class AggregatedSummary:
    """
    Aggregated statistics across several builds.

    ``modules`` is ordered by descending average duration.
    """

    build_count: int
    average_total_seconds: float
    min_total_seconds: float
    max_total_seconds: float
    modules: Tuple[ModuleStats, ...] = field(default_factory=tuple)

    def __post_init__(self):
        object.__setattr__(self, "modules", tuple(self.modules))

    def to_dict(self) -> Dict[str, Any]:
        return {
            "build_count": self.build_count,
            "average_total_seconds": self.average_total_seconds,
            "min_total_seconds": self.min_total_seconds,
            "max_total_seconds": self.max_total_seconds,
            "modules": [m.to_dict() for m in self.modules],
        }
