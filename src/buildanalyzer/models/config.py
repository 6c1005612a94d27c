"""
Configuration data models.

This module contains the configuration structures loaded from
``config.toml``: parser markers, health rule thresholds, output, storage
and clean-install settings. Every field has a default so the analyzer can
run without any configuration file.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Literal


@dataclass(frozen=True)
class ParserConfig:
    """
    Settings for log parsing, loaded from ``[analyzer.parser]``.
    """

    # Compile targets containing this marker count as test sources.
    test_output_marker: str = "test-classes"
    # A log line containing this marker reveals a parallel (-T) build.
    parallel_build_marker: str = "MultiThreadedBuilder"


@dataclass(frozen=True)
class HealthThresholds:
    """
    Thresholds of the build health rules, loaded from ``[analyzer.health]``.

    All comparisons are inclusive (``>=``).
    """

    total_time_warn_seconds: float = 300.0
    total_time_info_seconds: float = 120.0
    overhead_warn_share: float = 0.25
    overhead_info_share: float = 0.15
    hot_module_warn_share: float = 0.40
    hot_module_info_share: float = 0.25
    test_ratio_warn_share: float = 0.50
    test_ratio_info_share: float = 0.30
    untested_warn_main_sources: int = 50
    untested_info_main_sources: int = 10


@dataclass(frozen=True)
class OutputConfig:
    """
    Settings for report rendering, loaded from ``[analyzer.output]``.
    """

    # Indentation used by --pretty JSON output.
    json_indent: int = 2


@dataclass(frozen=True)
class CleanInstallConfig:
    """
    Settings for the clean-install mode, loaded from ``[analyzer.clean_install]``.
    """

    # Directory, relative to the project, receiving captured build logs.
    log_subdir: Path = Path(".build-analyzer") / "logs"
    # Kill the build after this many seconds; 0 disables the timeout.
    build_timeout_seconds: float = 0.0


@dataclass(frozen=True)
class StorageConfig:
    """
    Configuration model for exported analysis data.

    Attributes:
        format: Storage format for tabular exports
            - 'parquet': Columnar format with compression
            - 'json': Human-readable records
        compression: Compression algorithm for Parquet format

    Note:
        Compression setting only applies to Parquet format. Metadata is
        always written as JSON.
    """

    format: Literal["parquet", "json"] = "parquet"
    compression: Literal["snappy", "gzip", "brotli", "lz4", "zstd"] = "snappy"

    @classmethod
    def from_dict(cls, config_dict: Dict[str, Any]) -> "StorageConfig":
        """
        Create a StorageConfig instance from a dictionary.

        Raises:
            ValueError: If invalid configuration values are provided
        """
        format_type = config_dict.get("format", "parquet")
        compression = config_dict.get("compression", "snappy")

        if format_type not in ("parquet", "json"):
            raise ValueError(f"Unsupported storage format: {format_type}")

        if format_type == "parquet" and compression not in (
            "snappy",
            "gzip",
            "brotli",
            "lz4",
            "zstd",
        ):
            raise ValueError(f"Unsupported compression algorithm: {compression}")

        return cls(format=format_type, compression=compression)

    def to_dict(self) -> Dict[str, Any]:
        return {"format": self.format, "compression": self.compression}


@dataclass(frozen=True)
class AppConfig:
    """
    The root configuration object that aggregates all loaded settings.
    """

    parser: ParserConfig = field(default_factory=ParserConfig)
    health: HealthThresholds = field(default_factory=HealthThresholds)
    output: OutputConfig = field(default_factory=OutputConfig)
    clean_install: CleanInstallConfig = field(default_factory=CleanInstallConfig)
    storage: StorageConfig = field(default_factory=StorageConfig)
