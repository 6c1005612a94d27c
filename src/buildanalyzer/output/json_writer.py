"""
JSON rendering of analysis results.
"""

import json
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Sequence

from ..models.aggregate import AggregatedSummary
from ..models.analysis import HealthHint, PluginTiming
from ..models.build import BuildSummary


def _dumps(payload: Dict[str, Any], pretty: bool, indent: int) -> str:
    if pretty:
        return json.dumps(payload, indent=indent)
    return json.dumps(payload, separators=(",", ":"))


def single_build_payload(
    summary: BuildSummary,
    hints: Sequence[HealthHint] = (),
    plugin_timings: Optional[Mapping[str, Sequence[PluginTiming]]] = None,
    parallel: bool = False,
) -> Dict[str, Any]:
    """Build the JSON document for one build.

    ``plugin_timings`` is only present when estimates were requested.
    """
    payload = summary.to_dict()
    payload["parallel_build"] = parallel
    payload["health_hints"] = [hint.to_dict() for hint in hints]
    if plugin_timings is not None:
        payload["plugin_timings"] = {
            module: [timing.to_dict() for timing in timings]
            for module, timings in plugin_timings.items()
        }
    return payload


def aggregated_payload(
    mode_label: str, log_files: Sequence[Path], summary: AggregatedSummary
) -> Dict[str, Any]:
    return {
        "mode": mode_label,
        "log_files": [str(path) for path in log_files],
        "summary": summary.to_dict(),
    }


def format_single_build_json(
    summary: BuildSummary,
    hints: Sequence[HealthHint] = (),
    plugin_timings: Optional[Mapping[str, Sequence[PluginTiming]]] = None,
    parallel: bool = False,
    pretty: bool = False,
    indent: int = 2,
) -> str:
    payload = single_build_payload(summary, hints, plugin_timings, parallel)
    return _dumps(payload, pretty, indent)


def format_aggregated_json(
    mode_label: str,
    log_files: Sequence[Path],
    summary: AggregatedSummary,
    pretty: bool = False,
    indent: int = 2,
) -> str:
    return _dumps(aggregated_payload(mode_label, log_files, summary), pretty, indent)
