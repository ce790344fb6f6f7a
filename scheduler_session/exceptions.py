"""Exceptions raised by the Schedule Planner session extractor.

Every failure of an extraction attempt surfaces as a subclass of
SessionExtractionError carrying a stable error code and a details dict, so
callers (and the CLI) can map failures to exit codes without string matching.
"""

from typing import List, Optional


class SessionExtractionError(Exception):
    """Base error for a failed extraction attempt."""

    def __init__(
        self,
        message: str = "Session extraction failed",
        error_code: str = "extraction_failed",
        details: Optional[dict] = None
    ):
        self.message = message
        self.error_code = error_code
        self.details = details or {}
        super().__init__(self.message)


class ConfigurationError(SessionExtractionError):
    """Raised when a required credential or setting is missing or invalid."""

    def __init__(
        self,
        message: str = "Invalid configuration",
        missing: Optional[List[str]] = None
    ):
        self.missing = list(missing or [])
        super().__init__(
            message=message,
            error_code="configuration_error",
            details={"missing": self.missing} if self.missing else {}
        )


class NavigationError(SessionExtractionError):
    """Raised when the portal flow cannot reach its next state."""

    def __init__(
        self,
        message: str = "Portal navigation failed",
        state: Optional[str] = None,
        error_code: str = "navigation_failed",
        details: Optional[dict] = None
    ):
        self.state = state
        merged = {"state": state} if state else {}
        merged.update(details or {})
        super().__init__(message=message, error_code=error_code, details=merged)


class NavigationTimeoutError(NavigationError):
    """Raised when a waited-for selector, navigation or tab never appears."""

    def __init__(
        self,
        message: str = "Timed out waiting for the portal",
        state: Optional[str] = None,
        selector: Optional[str] = None
    ):
        self.selector = selector
        super().__init__(
            message=message,
            state=state,
            error_code="navigation_timeout",
            details={"selector": selector} if selector else {}
        )


class FrameNotFoundError(NavigationError):
    """Raised when the embedded PeopleSoft frame cannot be located by name."""

    def __init__(self, frame_name: str, state: Optional[str] = None):
        self.frame_name = frame_name
        super().__init__(
            message=f"Frame '{frame_name}' not found on the current page",
            state=state,
            error_code="frame_not_found",
            details={"frame_name": frame_name}
        )


class TargetPageNotFoundError(NavigationError):
    """Raised when no open tab points at the scheduling application."""

    def __init__(self, url_fragment: str, state: Optional[str] = None):
        self.url_fragment = url_fragment
        super().__init__(
            message=f"No open page with a URL containing '{url_fragment}'",
            state=state,
            error_code="target_page_not_found",
            details={"url_fragment": url_fragment}
        )


class AuthenticationDeniedError(SessionExtractionError):
    """Raised when the portal re-displays its sign-on page instead of logging in."""

    def __init__(self, message: str = "Portal login denied"):
        super().__init__(message=message, error_code="authentication_denied")


class ExtractionValidationError(SessionExtractionError):
    """Raised when the extracted cookies do not grant access to the target API."""

    def __init__(
        self,
        message: str = "Extracted session was rejected by the target API",
        status_code: Optional[int] = None,
        probe_url: Optional[str] = None
    ):
        self.status_code = status_code
        self.probe_url = probe_url
        details = {}
        if status_code is not None:
            details["status_code"] = status_code
        if probe_url:
            details["probe_url"] = probe_url
        super().__init__(
            message=message,
            error_code="extraction_validation_failed",
            details=details
        )
