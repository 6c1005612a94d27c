"""
Heuristic plugin-time attribution.

Maven logs record that a plugin goal ran but not how long it took; only the
owning module's duration is known from the Reactor Summary. This module
estimates per-goal time by splitting each module's duration in proportion to
the number of log lines every plugin block emitted. The numbers are a
line-count heuristic and must be presented as estimates, never as measured
durations.
"""

import logging
from typing import Dict, List, Mapping, Optional, Sequence, Tuple

from ..models.analysis import PluginTiming
from ..models.build import BuildSummary
from ..parsing.patterns import match_plugin_header

logger = logging.getLogger(__name__)


def _count_block_lines(lines: Sequence[str]) -> Dict[str, Dict[str, int]]:
    """Return line counts per module and plugin key.

    A block runs from its header (exclusive) to the next header or the end
    of input. Repeated module/plugin pairs accumulate.
    """
    per_module: Dict[str, Dict[str, int]] = {}
    open_block: Optional[Tuple[str, str, int]] = None

    def close(end: int) -> None:
        module, plugin_key, header_index = open_block
        block_lines = end - (header_index + 1)
        plugins = per_module.setdefault(module, {})
        plugins[plugin_key] = plugins.get(plugin_key, 0) + block_lines

    for index, line in enumerate(lines):
        header = match_plugin_header(line)
        if header is None:
            continue
        if open_block is not None:
            close(index)
        plugin_key, module = header
        open_block = (module, plugin_key, index)

    if open_block is not None:
        close(len(lines))

    return per_module


def analyze_plugin_timings(
    lines: Sequence[str], module_seconds: Mapping[str, float]
) -> Dict[str, List[PluginTiming]]:
    """Estimate the time spent in each plugin goal of each module.

    ``estimated_seconds = module_seconds * block_lines / module_total_lines``.
    The estimate is 0 when the module duration is unknown or not positive,
    or when the module or block emitted no lines.

    Args:
        lines: Raw log lines of a single, sequential build.
        module_seconds: Module name to module duration in seconds, usually
            ``BuildSummary.module_seconds_by_name()``.

    Returns:
        Module name to its plugin timings, ordered by descending estimate.
        Modules appear in the order their first plugin block was seen.
    """
    result: Dict[str, List[PluginTiming]] = {}

    for module, plugins in _count_block_lines(lines).items():
        total_lines = sum(plugins.values())
        seconds = module_seconds.get(module, 0.0)

        timings = []
        for plugin_key, block_lines in plugins.items():
            estimate = 0.0
            if seconds > 0.0 and total_lines > 0 and block_lines > 0:
                estimate = seconds * (block_lines / total_lines)
            timings.append(PluginTiming(plugin_key, block_lines, estimate))

        timings.sort(key=lambda t: t.estimated_seconds, reverse=True)
        result[module] = timings

    logger.debug(f"Estimated plugin timings for {len(result)} modules")
    return result


def analyze_plugin_timings_for_summary(
    lines: Sequence[str], summary: BuildSummary
) -> Dict[str, List[PluginTiming]]:
    """Shortcut for ``analyze_plugin_timings`` using a parsed summary's durations."""
    return analyze_plugin_timings(lines, summary.module_seconds_by_name())
