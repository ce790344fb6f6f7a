"""Exit codes and process-level setup for the command-line interface."""

import logging
from enum import IntEnum

from ..exceptions import (
    AuthenticationDeniedError,
    ConfigurationError,
    ExtractionValidationError,
    NavigationTimeoutError,
)


class ExitCode(IntEnum):
    """CLI exit codes for scripts and schedulers wrapping the tool."""
    SUCCESS = 0            # Session extracted (or jar still valid)
    CONFIG_ERROR = 3       # Missing credential or invalid configuration
    RUNTIME_ERROR = 4      # Portal flow broke off or unexpected failure
    TIMEOUT_ERROR = 5      # A portal step timed out
    AUTH_DENIED = 6        # Portal rejected the credentials
    VALIDATION_FAILED = 7  # Scheduler API rejected the extracted cookies


def exit_code_for(error: BaseException) -> ExitCode:
    """Map an extraction failure to the process exit code."""
    if isinstance(error, ConfigurationError):
        return ExitCode.CONFIG_ERROR
    if isinstance(error, AuthenticationDeniedError):
        return ExitCode.AUTH_DENIED
    if isinstance(error, NavigationTimeoutError):
        return ExitCode.TIMEOUT_ERROR
    if isinstance(error, ExtractionValidationError):
        return ExitCode.VALIDATION_FAILED
    return ExitCode.RUNTIME_ERROR


def configure_logging(verbose: bool = False, quiet: bool = False) -> None:
    """Send log records to stderr so stdout only carries the extracted session."""
    if quiet:
        level = logging.WARNING
    elif verbose:
        level = logging.DEBUG
    else:
        level = logging.INFO

    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        force=True,
    )
    # httpx logs every request at INFO
    logging.getLogger("httpx").setLevel(logging.WARNING if not verbose else logging.DEBUG)
