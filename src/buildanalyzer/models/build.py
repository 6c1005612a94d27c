"""
Per-build data models.

This module defines the immutable records produced by the log parser: one
``ModuleRecord`` per module listed in the Reactor Summary, wrapped in a
``BuildSummary`` that also carries the wall-clock total of the build.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Tuple


@dataclass(frozen=True)
class ModuleRecord:
    """
    Metrics extracted for a single module of one build.
    """

    # Module name as printed in the Reactor Summary (unique within a build).
    name: str
    # Module duration from the Reactor Summary, in seconds.
    seconds: float
    # Test totals, summed over every test-class result line of the module.
    tests_run: int = 0
    failures: int = 0
    errors: int = 0
    skipped: int = 0
    test_seconds: float = 0.0
    # Source files compiled, cumulative over all compile invocations.
    main_source_files: int = 0
    test_source_files: int = 0
    # "<plugin>:<goal>" identifiers in execution order.
    pipeline_steps: Tuple[str, ...] = field(default_factory=tuple)

    def __post_init__(self):
        # Accept any iterable of steps but always store a tuple.
        object.__setattr__(self, "pipeline_steps", tuple(self.pipeline_steps))

    @property
    def has_tests(self) -> bool:
        """True if any test activity was recorded for this module."""
        return (
            self.tests_run > 0
            or self.failures > 0
            or self.errors > 0
            or self.skipped > 0
            or self.test_seconds > 0.0
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "seconds": self.seconds,
            "tests_run": self.tests_run,
            "failures": self.failures,
            "errors": self.errors,
            "skipped": self.skipped,
            "test_seconds": self.test_seconds,
            "main_source_files": self.main_source_files,
            "test_source_files": self.test_source_files,
            "pipeline_steps": list(self.pipeline_steps),
        }


@dataclass(frozen=True)
class BuildSummary:
    """
    Structured summary of one build log.

    Modules appear in the order of the Reactor Summary.
    """

    # Wall-clock time from the last "Total time" line, in seconds.
    total_seconds: float
    modules: Tuple[ModuleRecord, ...] = field(default_factory=tuple)

    def __post_init__(self):
        object.__setattr__(self, "modules", tuple(self.modules))

    @property
    def modules_seconds(self) -> float:
        """Sum of all module durations."""
        return sum(m.seconds for m in self.modules)

    @property
    def overhead_seconds(self) -> float:
        """Build time not attributed to any module, never negative."""
        return max(0.0, self.total_seconds - self.modules_seconds)

    def module_seconds_by_name(self) -> Dict[str, float]:
        return {m.name: m.seconds for m in self.modules}

    def to_dict(self) -> Dict[str, Any]:
        return {
            "total_seconds": self.total_seconds,
            "modules": [m.to_dict() for m in self.modules],
        }
