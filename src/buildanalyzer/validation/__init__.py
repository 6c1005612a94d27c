"""
Validation and error handling for the buildanalyzer package.

This module provides input validation and the error taxonomy shared by the
parser, the aggregator, the configuration layer and the CLI.
"""

from .exceptions import (
    EmptyAggregationInput,
    ErrorSeverity,
    MissingTotalTime,
    NoReactorSummaryModules,
    ParallelBuildRejected,
    ParseError,
    ValidationError,
    handle_cli_error,
    handle_config_error,
    handle_error,
    handle_file_error,
)

from .validators import (
    validate_directory,
    validate_enum_choice,
    validate_fraction,
    validate_path_exists,
    validate_positive_float,
    validate_positive_integer,
)

__all__ = [
    # Errors
    "EmptyAggregationInput",
    "ErrorSeverity",
    "MissingTotalTime",
    "NoReactorSummaryModules",
    "ParallelBuildRejected",
    "ParseError",
    "ValidationError",
    # Handlers
    "handle_cli_error",
    "handle_config_error",
    "handle_error",
    "handle_file_error",
    # Validators
    "validate_directory",
    "validate_enum_choice",
    "validate_fraction",
    "validate_path_exists",
    "validate_positive_float",
    "validate_positive_integer",
]
