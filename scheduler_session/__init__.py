"""Schedule Planner session extractor.

Logs into the University of Houston portal with a headless browser, follows it
into the Schedule Planner and returns the scheduler's session cookies, either
as a ``Cookie`` header string or as a re-loadable jar document.
"""

__version__ = "1.0.0"

from .exceptions import (
    SessionExtractionError,
    ConfigurationError,
    NavigationError,
    NavigationTimeoutError,
    FrameNotFoundError,
    TargetPageNotFoundError,
    AuthenticationDeniedError,
    ExtractionValidationError,
)
from .models import ExtractionOptions, OutputFormat
from .credentials import Credentials, require_credentials
from .config import PortalConfig, load_configuration
from .service import extract, extract_session, harvest_cookie_jar

__all__ = [
    "__version__",
    "extract",
    "extract_session",
    "harvest_cookie_jar",
    "ExtractionOptions",
    "OutputFormat",
    "Credentials",
    "require_credentials",
    "PortalConfig",
    "load_configuration",
    "SessionExtractionError",
    "ConfigurationError",
    "NavigationError",
    "NavigationTimeoutError",
    "FrameNotFoundError",
    "TargetPageNotFoundError",
    "AuthenticationDeniedError",
    "ExtractionValidationError",
]
