"""
Configuration file loading utilities.

This module handles the low-level loading and parsing of the TOML
configuration file and the extraction of its ``[analyzer.*]`` sections.
"""

import logging
import tomllib
from pathlib import Path
from typing import Any, Dict

from ..validation import handle_config_error, ErrorSeverity

logger = logging.getLogger(__name__)

# Sub-tables of [analyzer] understood by the validators.
ANALYZER_SECTIONS = ("parser", "health", "output", "clean_install", "storage")


def load_toml_file(file_path: Path, description: str = "configuration file") -> Dict[str, Any]:
    """
    Load and parse a TOML file with error handling.

    Args:
        file_path: Path to the TOML file to load
        description: Human-readable description for error messages

    Returns:
        Parsed TOML data as a dictionary

    Raises:
        FileNotFoundError: If the file doesn't exist
        tomllib.TOMLDecodeError: If the file is malformed
    """
    logger.info(f"Loading {description} from: {file_path}")

    if not file_path.exists():
        logger.error(f"{description} not found: {file_path}")
        raise FileNotFoundError(f"{description} not found: {file_path}")

    try:
        with open(file_path, "rb") as f:
            return tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        handle_config_error(
            error=e,
            context=f"parsing {description}",
            severity=ErrorSeverity.CRITICAL,
            reraise=True,
            logger=logger
        )
        raise


def load_main_config(config_path: Path) -> Dict[str, Any]:
    """
    Load the main configuration file (config.toml).
    """
    return load_toml_file(config_path, "main configuration file")


def get_analyzer_sections(main_config_data: Dict[str, Any]) -> Dict[str, Dict[str, Any]]:
    """
    Return the ``[analyzer.*]`` sub-tables, empty for any that are absent.

    Unknown sub-tables are ignored with a warning.

    Raises:
        TypeError: If ``[analyzer]`` or one of its sections is not a table
    """
    analyzer_data = main_config_data.get("analyzer", {})
    if not isinstance(analyzer_data, dict):
        raise TypeError("[analyzer] must be a table in config.toml")

    for name in analyzer_data:
        if name not in ANALYZER_SECTIONS:
            logger.warning(f"Ignoring unknown configuration section [analyzer.{name}]")

    sections = {}
    for name in ANALYZER_SECTIONS:
        section = analyzer_data.get(name, {})
        if not isinstance(section, dict):
            raise TypeError(f"[analyzer.{name}] must be a table in config.toml")
        sections[name] = section
    return sections
