"""
Configuration management for the buildanalyzer package.

This module provides a clean interface for loading, validating, and accessing
configuration data from TOML files with singleton pattern management.
"""

# Main configuration interface
from .manager import (
    clear_config_cache,
    get_config,
    get_config_info,
    is_config_loaded,
    reset_config_path,
    set_config_path,
)

# For advanced usage - direct access to loaders and validators
from .loader import get_analyzer_sections, load_main_config, load_toml_file
from .validators import (
    validate_app_config,
    validate_clean_install_config,
    validate_health_config,
    validate_output_config,
    validate_parser_config,
    validate_storage_config,
)

__all__ = [
    # Main interface
    "get_config",
    "set_config_path",
    "reset_config_path",
    "clear_config_cache",
    "is_config_loaded",
    "get_config_info",
    # Advanced interface
    "load_toml_file",
    "load_main_config",
    "get_analyzer_sections",
    "validate_app_config",
    "validate_parser_config",
    "validate_health_config",
    "validate_output_config",
    "validate_clean_install_config",
    "validate_storage_config",
]
