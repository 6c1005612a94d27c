"""
Export manager for analysis results.

This module writes parsed and aggregated build data to an export directory
in the configured storage format, and reads it back for tools such as the
plotter.

Export layout:
- ``modules.<ext>`` + ``build_summary.json`` for a single build
- ``plugin_timings.<ext>`` when plugin estimates were computed
- ``module_stats.<ext>`` + ``aggregated_summary.json`` for aggregated builds
"""

import logging
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Sequence

import polars as pl

from ..models.aggregate import AggregatedSummary
from ..models.analysis import HealthHint, PluginTiming
from ..models.build import BuildSummary
from ..models.config import StorageConfig
from .factory import create_storage

logger = logging.getLogger(__name__)

MODULES_TABLE = "modules"
MODULE_STATS_TABLE = "module_stats"
PLUGIN_TIMINGS_TABLE = "plugin_timings"
BUILD_METADATA_FILE = "build_summary.json"
AGGREGATED_METADATA_FILE = "aggregated_summary.json"

MODULES_SCHEMA = {
    "name": pl.Utf8,
    "seconds": pl.Float64,
    "tests_run": pl.Int64,
    "failures": pl.Int64,
    "errors": pl.Int64,
    "skipped": pl.Int64,
    "test_seconds": pl.Float64,
    "main_source_files": pl.Int64,
    "test_source_files": pl.Int64,
    "pipeline_steps": pl.List(pl.Utf8),
}

MODULE_STATS_SCHEMA = {
    "name": pl.Utf8,
    "average_seconds": pl.Float64,
    "min_seconds": pl.Float64,
    "max_seconds": pl.Float64,
    "build_count": pl.Int64,
    "average_test_seconds": pl.Float64,
    "min_test_seconds": pl.Float64,
    "max_test_seconds": pl.Float64,
    "total_tests_run": pl.Int64,
    "total_failures": pl.Int64,
    "total_errors": pl.Int64,
    "total_skipped": pl.Int64,
    "average_main_source_files": pl.Float64,
    "average_test_source_files": pl.Float64,
}

PLUGIN_TIMINGS_SCHEMA = {
    "module": pl.Utf8,
    "plugin_key": pl.Utf8,
    "line_count": pl.Int64,
    "estimated_seconds": pl.Float64,
}


class ExportManager:
    """
    High-level interface for exporting analysis results.

    The storage format comes from the ``StorageConfig`` given at
    construction, usually ``get_config().storage``.
    """

    def __init__(self, output_dir: Path, storage_config: Optional[StorageConfig] = None):
        """
        Initialize the export manager.

        Args:
            output_dir: Directory where data files will be stored
            storage_config: Storage settings; defaults to Parquet/snappy
        """
        self.output_dir = Path(output_dir)
        self.output_dir.mkdir(parents=True, exist_ok=True)

        storage_config = storage_config or StorageConfig()
        self.storage_format = storage_config.format
        self.storage = create_storage(storage_config.format, storage_config.compression)

        logger.debug(f"Initialized ExportManager in {self.output_dir} with format: {self.storage_format}")

    def table_path(self, table: str) -> Path:
        return self.output_dir / f"{table}{self.storage.table_extension}"

    def export_single_build(
        self,
        log_file: Path,
        summary: BuildSummary,
        hints: Sequence[HealthHint] = (),
        plugin_timings: Optional[Mapping[str, Sequence[PluginTiming]]] = None,
        parallel: bool = False,
    ) -> List[Path]:
        """
        Export the module table, optional plugin timings and build metadata.

        Returns:
            Paths of the files written
        """
        written = []

        modules_df = pl.DataFrame([m.to_dict() for m in summary.modules], schema=MODULES_SCHEMA)
        modules_path = self.table_path(MODULES_TABLE)
        self.storage.save_dataframe(modules_df, str(modules_path))
        written.append(modules_path)

        if plugin_timings is not None:
            timings_path = self.table_path(PLUGIN_TIMINGS_TABLE)
            self.storage.save_dataframe(plugin_timings_to_dataframe(plugin_timings), str(timings_path))
            written.append(timings_path)

        metadata = {
            "log_file": str(log_file),
            "parallel_build": parallel,
            "total_seconds": summary.total_seconds,
            "modules_seconds": summary.modules_seconds,
            "overhead_seconds": summary.overhead_seconds,
            "module_count": len(summary.modules),
            "health_hints": [hint.to_dict() for hint in hints],
            "plugin_timings_estimated": plugin_timings is not None,
            "storage_format": self.storage_format,
        }
        metadata_path = self.output_dir / BUILD_METADATA_FILE
        self.storage.save_dict(metadata, str(metadata_path))
        written.append(metadata_path)

        logger.info(f"Exported build data for {log_file} to: {self.output_dir}")
        return written

    def export_aggregated(
        self, mode_label: str, log_files: Sequence[Path], summary: AggregatedSummary
    ) -> List[Path]:
        """
        Export per-module statistics and aggregate metadata.

        Returns:
            Paths of the files written
        """
        stats_df = pl.DataFrame([m.to_dict() for m in summary.modules], schema=MODULE_STATS_SCHEMA)
        stats_path = self.table_path(MODULE_STATS_TABLE)
        self.storage.save_dataframe(stats_df, str(stats_path))

        metadata = {
            "mode": mode_label,
            "log_files": [str(p) for p in log_files],
            "build_count": summary.build_count,
            "average_total_seconds": summary.average_total_seconds,
            "min_total_seconds": summary.min_total_seconds,
            "max_total_seconds": summary.max_total_seconds,
            "storage_format": self.storage_format,
        }
        metadata_path = self.output_dir / AGGREGATED_METADATA_FILE
        self.storage.save_dict(metadata, str(metadata_path))

        logger.info(f"Exported aggregated data for {summary.build_count} builds to: {self.output_dir}")
        return [stats_path, metadata_path]

    def load_table(self, table: str, columns: Optional[List[str]] = None) -> Optional[pl.DataFrame]:
        """
        Load an exported table, or None if it was not exported.
        """
        path = self.table_path(table)
        if not self.storage.file_exists(str(path)):
            return None
        return self.storage.load_dataframe(str(path), columns=columns)

    def load_metadata(self) -> Dict[str, Any]:
        """
        Load the metadata document of the export.

        Raises:
            FileNotFoundError: If the directory holds no export metadata
        """
        for name in (BUILD_METADATA_FILE, AGGREGATED_METADATA_FILE):
            path = self.output_dir / name
            if self.storage.file_exists(str(path)):
                return self.storage.load_dict(str(path))
        raise FileNotFoundError(f"No export metadata found in {self.output_dir}")


def plugin_timings_to_dataframe(plugin_timings: Mapping[str, Sequence[PluginTiming]]) -> pl.DataFrame:
    """Flatten per-module plugin timings into one row per module and plugin."""
    rows = [
        {"module": module, **timing.to_dict()}
        for module, timings in plugin_timings.items()
        for timing in timings
    ]
    return pl.DataFrame(rows, schema=PLUGIN_TIMINGS_SCHEMA)


def detect_export_format(output_dir: Path) -> Optional[StorageConfig]:
    """Guess the storage format of an existing export directory.

    Returns:
        A StorageConfig for the format found, or None if the directory holds
        no exported table.
    """
    output_dir = Path(output_dir)
    for table in (MODULES_TABLE, MODULE_STATS_TABLE):
        if (output_dir / f"{table}.parquet").exists():
            return StorageConfig(format="parquet")
        if (output_dir / f"{table}.json").exists():
            return StorageConfig(format="json")
    return None
