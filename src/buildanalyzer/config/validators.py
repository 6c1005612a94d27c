"""
Configuration validation utilities.

This module turns the raw ``[analyzer.*]`` tables into validated, frozen
configuration models. Missing keys fall back to the model defaults.
"""

import logging
from pathlib import Path
from typing import Any, Dict

from ..models.config import (
    AppConfig,
    CleanInstallConfig,
    HealthThresholds,
    OutputConfig,
    ParserConfig,
    StorageConfig,
)
from ..validation import (
    ValidationError,
    validate_enum_choice,
    validate_fraction,
    validate_positive_float,
    validate_positive_integer,
)

logger = logging.getLogger(__name__)

_DEFAULT_HEALTH = HealthThresholds()

# (warn key, info key) pairs; each warn threshold must be >= its info threshold.
_THRESHOLD_PAIRS = (
    ("total_time_warn_seconds", "total_time_info_seconds"),
    ("overhead_warn_share", "overhead_info_share"),
    ("hot_module_warn_share", "hot_module_info_share"),
    ("test_ratio_warn_share", "test_ratio_info_share"),
    ("untested_warn_main_sources", "untested_info_main_sources"),
)


def _validate_marker(value: Any, field_name: str) -> str:
    if not isinstance(value, str) or not value.strip():
        raise ValidationError(
            f"{field_name} must be a non-empty string",
            field_name=field_name,
            value=value
        )
    return value


def validate_parser_config(parser_data: Dict[str, Any]) -> ParserConfig:
    """
    Validate ``[analyzer.parser]``.

    Raises:
        ValidationError: If a marker is empty or not a string
    """
    defaults = ParserConfig()
    return ParserConfig(
        test_output_marker=_validate_marker(
            parser_data.get("test_output_marker", defaults.test_output_marker),
            "analyzer.parser.test_output_marker",
        ),
        parallel_build_marker=_validate_marker(
            parser_data.get("parallel_build_marker", defaults.parallel_build_marker),
            "analyzer.parser.parallel_build_marker",
        ),
    )


def validate_health_config(health_data: Dict[str, Any]) -> HealthThresholds:
    """
    Validate and create HealthThresholds from ``[analyzer.health]``.

    Share thresholds must lie in (0, 1], durations and source counts must be
    positive, and every WARN threshold must be at least its INFO threshold.

    Args:
        health_data: Raw health configuration from TOML

    Returns:
        Validated HealthThresholds instance

    Raises:
        ValidationError: If validation fails
    """
    def get(key: str) -> Any:
        return health_data.get(key, getattr(_DEFAULT_HEALTH, key))

    values: Dict[str, Any] = {}

    for key in ("total_time_warn_seconds", "total_time_info_seconds"):
        values[key] = validate_positive_float(
            get(key), min_value=0.001, field_name=f"analyzer.health.{key}"
        )

    for key in (
        "overhead_warn_share",
        "overhead_info_share",
        "hot_module_warn_share",
        "hot_module_info_share",
        "test_ratio_warn_share",
        "test_ratio_info_share",
    ):
        values[key] = validate_fraction(get(key), field_name=f"analyzer.health.{key}")

    for key in ("untested_warn_main_sources", "untested_info_main_sources"):
        values[key] = validate_positive_integer(
            get(key), min_value=1, field_name=f"analyzer.health.{key}"
        )

    for warn_key, info_key in _THRESHOLD_PAIRS:
        if values[warn_key] < values[info_key]:
            raise ValidationError(
                f"analyzer.health.{warn_key} ({values[warn_key]}) must be >= "
                f"analyzer.health.{info_key} ({values[info_key]})",
                field_name=f"analyzer.health.{warn_key}",
                value=values[warn_key]
            )

    return HealthThresholds(**values)


def validate_output_config(output_data: Dict[str, Any]) -> OutputConfig:
    json_indent = validate_positive_integer(
        output_data.get("json_indent", OutputConfig().json_indent),
        min_value=0,
        max_value=16,
        field_name="analyzer.output.json_indent",
    )
    return OutputConfig(json_indent=json_indent)


def validate_clean_install_config(clean_install_data: Dict[str, Any]) -> CleanInstallConfig:
    """
    Validate ``[analyzer.clean_install]``.

    ``log_subdir`` must be a relative path so captured logs stay inside the
    project directory.
    """
    defaults = CleanInstallConfig()

    log_subdir_raw = clean_install_data.get("log_subdir", str(defaults.log_subdir))
    if not isinstance(log_subdir_raw, str) or not log_subdir_raw.strip():
        raise ValidationError(
            "analyzer.clean_install.log_subdir must be a non-empty string",
            field_name="analyzer.clean_install.log_subdir",
            value=log_subdir_raw
        )
    log_subdir = Path(log_subdir_raw)
    if log_subdir.is_absolute():
        raise ValidationError(
            f"analyzer.clean_install.log_subdir must be relative, got {log_subdir_raw}",
            field_name="analyzer.clean_install.log_subdir",
            value=log_subdir_raw
        )

    timeout = validate_positive_float(
        clean_install_data.get("build_timeout_seconds", defaults.build_timeout_seconds),
        min_value=0.0,
        field_name="analyzer.clean_install.build_timeout_seconds",
    )

    return CleanInstallConfig(log_subdir=log_subdir, build_timeout_seconds=timeout)


def validate_storage_config(storage_data: Dict[str, Any]) -> StorageConfig:
    """
    Validate ``[analyzer.storage]`` and build a StorageConfig.

    Raises:
        ValidationError: If the format or compression is unsupported
    """
    format_type = validate_enum_choice(
        storage_data.get("format", "parquet"),
        choices=["parquet", "json"],
        field_name="analyzer.storage.format",
    )
    compression = validate_enum_choice(
        storage_data.get("compression", "snappy"),
        choices=["snappy", "gzip", "brotli", "lz4", "zstd"],
        field_name="analyzer.storage.compression",
    )
    return StorageConfig.from_dict({"format": format_type, "compression": compression})


def validate_app_config(sections: Dict[str, Dict[str, Any]]) -> AppConfig:
    """
    Validate every ``[analyzer.*]`` section and assemble an AppConfig.

    Args:
        sections: Mapping of section name to raw table, as returned by
            ``loader.get_analyzer_sections``

    Raises:
        ValidationError: If any section fails validation
    """
    app_config = AppConfig(
        parser=validate_parser_config(sections.get("parser", {})),
        health=validate_health_config(sections.get("health", {})),
        output=validate_output_config(sections.get("output", {})),
        clean_install=validate_clean_install_config(sections.get("clean_install", {})),
        storage=validate_storage_config(sections.get("storage", {})),
    )
    logger.debug(f"Validated configuration: {app_config}")
    return app_config
