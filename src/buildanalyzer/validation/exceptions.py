"""
Exception types and error handling helpers.

This module holds the error taxonomy of the analyzer (parse failures,
aggregation input errors, configuration validation errors) together with
the small set of helpers used to log and propagate them consistently.
"""

import logging
import sys
from enum import Enum
from typing import Any, Optional, Union

logger = logging.getLogger(__name__)


class ErrorSeverity(Enum):
    """Severity levels for error handling."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class ValidationError(Exception):
    """
    Exception raised when validation fails.

    This is the main exception type for invalid configuration values and
    invalid arguments handed to the analyzer.
    """

    def __init__(self, message: str, field_name: Optional[str] = None,
                 value: Any = None, severity: ErrorSeverity = ErrorSeverity.ERROR):
        super().__init__(message)
        self.field_name = field_name
        self.value = value
        self.severity = severity


class EmptyAggregationInput(ValidationError):
    """Raised when the aggregator receives no builds at all."""

    def __init__(self, message: str = "builds must not be empty"):
        super().__init__(message, field_name="builds", value=[])


class ParallelBuildRejected(ValidationError):
    """
    Raised when clean-install mode would run, or has run, a parallel build.

    Parallel builds interleave module output and cannot be analyzed reliably.
    """

    def __init__(self, message: str, value: Any = None):
        super().__init__(message, field_name="maven_args", value=value)


class ParseError(Exception):
    """
    Base class for failures to extract a build summary from a log.

    A batch caller can skip the offending log and continue; for a
    single-log request the failure is fatal.
    """

    def __init__(self, message: str, source: Optional[str] = None):
        super().__init__(message)
        self.source = source


class MissingTotalTime(ParseError):
    """No 'Total time' line was found anywhere in the log."""

    def __init__(self, source: Optional[str] = None):
        super().__init__(
            "Could not find 'Total time' line in the log. "
            "Is this a Maven build log with INFO-level output?",
            source=source,
        )


class NoReactorSummaryModules(ParseError):
    """The Reactor Summary section is absent or lists no modules."""

    def __init__(self, source: Optional[str] = None):
        super().__init__(
            "Could not find any modules in 'Reactor Summary'. "
            "Multi-module Maven builds usually print it as '[INFO] Reactor Summary ...'. "
            "For single-module builds, the Reactor Summary section may be missing.",
            source=source,
        )


def handle_error(
    error: Exception,
    context: str,
    severity: Union[ErrorSeverity, str] = ErrorSeverity.ERROR,
    reraise: bool = True,
    logger: Optional[logging.Logger] = None
) -> None:
    """
    Handle errors with consistent logging and optional re-raising.

    Args:
        error: The exception that occurred
        context: Context description of where the error occurred
        severity: Severity level for logging
        reraise: Whether to re-raise the exception after logging
        logger: Logger instance to use (defaults to module logger)
    """
    effective_logger = logger or globals()['logger']

    error_msg = f"Error in {context}: {error}"

    if isinstance(severity, str):
        severity_str = severity.lower()
    else:
        severity_str = severity.value

    if severity_str == "debug":
        effective_logger.debug(error_msg, exc_info=True)
    elif severity_str == "info":
        effective_logger.info(error_msg)
    elif severity_str == "warning":
        effective_logger.warning(error_msg)
    elif severity_str == "error":
        effective_logger.error(error_msg)
    elif severity_str == "critical":
        effective_logger.critical(error_msg, exc_info=True)

    if reraise:
        raise error


def handle_config_error(error: Exception, context: str, **kwargs) -> None:
    """Handle configuration-related errors."""
    handle_error(error, f"config {context}", **kwargs)


def handle_file_error(error: Exception, context: str, **kwargs) -> None:
    """Handle file-related errors."""
    handle_error(error, f"file {context}", **kwargs)


def handle_cli_error(error: Exception, context: str, **kwargs) -> None:
    """
    Log a CLI-level error, print it for the user and exit.

    Keyword Args:
        exit_code: Process exit status (default 1)
        include_traceback: Log the traceback at DEBUG level as well
    """
    exit_code = kwargs.pop('exit_code', 1)
    include_traceback = kwargs.pop('include_traceback', False)

    severity = kwargs.pop('severity', ErrorSeverity.ERROR)
    handle_error(error, f"CLI {context}", severity=severity, reraise=False, **kwargs)
    if include_traceback:
        (kwargs.get('logger') or globals()['logger']).debug(
            "Traceback for CLI error", exc_info=error
        )

    print(f"ERROR: {error}", file=sys.stderr)
    sys.exit(exit_code)
