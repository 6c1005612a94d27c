"""
Cross-build aggregation of parsed build summaries.
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Sequence

from ..models.aggregate import AggregatedSummary, ModuleStats
from ..models.build import BuildSummary, ModuleRecord
from ..validation.exceptions import EmptyAggregationInput

logger = logging.getLogger(__name__)


@dataclass
class _ModuleSamples:
    """The records of one module collected from every build that contained it."""

    name: str
    records: List[ModuleRecord] = field(default_factory=list)

    def to_stats(self) -> ModuleStats:
        count = len(self.records)
        seconds = [r.seconds for r in self.records]
        # Bounds only consider builds that actually ran tests for this module.
        tested_seconds = [r.test_seconds for r in self.records if r.has_tests]

        return ModuleStats(
            name=self.name,
            average_seconds=sum(seconds) / count,
            min_seconds=min(seconds),
            max_seconds=max(seconds),
            build_count=count,
            average_test_seconds=sum(r.test_seconds for r in self.records) / count,
            min_test_seconds=min(tested_seconds) if tested_seconds else 0.0,
            max_test_seconds=max(tested_seconds) if tested_seconds else 0.0,
            total_tests_run=sum(r.tests_run for r in self.records),
            total_failures=sum(r.failures for r in self.records),
            total_errors=sum(r.errors for r in self.records),
            total_skipped=sum(r.skipped for r in self.records),
            average_main_source_files=sum(r.main_source_files for r in self.records) / count,
            average_test_source_files=sum(r.test_source_files for r in self.records) / count,
        )


def aggregate_builds(builds: Sequence[BuildSummary]) -> AggregatedSummary:
    """Combine several build summaries into cross-build statistics.

    Modules are grouped by name. A module missing from some builds is only
    sampled in the builds that contain it, so its averages are divided by
    its own build count rather than the overall one.

    Args:
        builds: Parsed build summaries, at least one.

    Returns:
        AggregatedSummary whose modules are ordered by descending average
        duration. The sort is stable: modules with equal averages keep the
        order in which they were first seen.

    Raises:
        EmptyAggregationInput: If ``builds`` is empty.
    """
    if not builds:
        raise EmptyAggregationInput()

    totals = [b.total_seconds for b in builds]

    samples: Dict[str, _ModuleSamples] = {}
    for build in builds:
        for record in build.modules:
            samples.setdefault(record.name, _ModuleSamples(record.name)).records.append(record)

    stats = sorted(
        (s.to_stats() for s in samples.values()),
        key=lambda m: m.average_seconds,
        reverse=True,
    )

    logger.debug(f"Aggregated {len(builds)} builds covering {len(stats)} modules")

    return AggregatedSummary(
        build_count=len(builds),
        average_total_seconds=sum(totals) / len(totals),
        min_total_seconds=min(totals),
        max_total_seconds=max(totals),
        modules=tuple(stats),
    )
