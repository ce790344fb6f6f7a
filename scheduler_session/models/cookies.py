"""Pydantic models for extracted cookies, jar documents and extraction options.

RawCookie mirrors the cookie dicts Playwright returns from
``BrowserContext.cookies()``. JarCookieEntry and CookieJarDocument describe the
re-loadable JSON document produced by the result formatter.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import List, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator


class OutputFormat(str, Enum):
    """Serializations a cookie jar can be returned in."""
    HEADER_STRING = "header-string"
    JAR_DOCUMENT = "jar-document"


# Older names accepted for compatibility with existing callers
_FORMAT_ALIASES = {
    "set-cookie": OutputFormat.HEADER_STRING,
    "jar": OutputFormat.JAR_DOCUMENT,
}


class RawCookie(BaseModel):
    """One cookie as reported by the browser automation layer."""

    model_config = ConfigDict(populate_by_name=True)

    name: str = Field(description="Cookie name")
    value: str = Field(default="", description="Cookie value")
    domain: str = Field(description="Cookie domain, leading dot for domain cookies")
    path: str = Field(default="/", description="Cookie path")
    secure: bool = Field(default=False, description="Secure flag")
    http_only: bool = Field(
        default=False,
        validation_alias=AliasChoices("httpOnly", "http_only"),
        description="HttpOnly flag"
    )
    same_site: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("sameSite", "same_site"),
        description="SameSite attribute (Strict, Lax, None)"
    )
    expires: Optional[float] = Field(
        default=None,
        validation_alias=AliasChoices("expires", "expiry"),
        description="Expiry as a Unix timestamp, None for session cookies"
    )

    @field_validator('expires')
    @classmethod
    def normalize_session_expiry(cls, v):
        # Playwright reports session cookies with expires == -1
        if v is None or v < 0:
            return None
        return v

    @property
    def is_session(self) -> bool:
        """Whether the cookie lives only for the browser session."""
        return self.expires is None

    @classmethod
    def from_playwright_cookie(cls, cookie: dict) -> "RawCookie":
        """Create RawCookie from a Playwright cookie dict."""
        return cls.model_validate(cookie)


class ExtractionOptions(BaseModel):
    """Per-call options for an extraction."""

    model_config = ConfigDict(frozen=True)

    logging: bool = Field(default=False, description="Report progress at INFO level")
    format: OutputFormat = Field(
        default=OutputFormat.JAR_DOCUMENT,
        description="Serialization of the returned jar"
    )

    @field_validator('format', mode='before')
    @classmethod
    def normalize_format(cls, v):
        if isinstance(v, OutputFormat):
            return v
        if isinstance(v, str):
            normalized = v.strip().lower()
            if normalized in _FORMAT_ALIASES:
                return _FORMAT_ALIASES[normalized]
            if normalized == OutputFormat.HEADER_STRING.value:
                return OutputFormat.HEADER_STRING
        # Anything unrecognised gets the default document format
        return OutputFormat.JAR_DOCUMENT


class JarCookieEntry(BaseModel):
    """A single stored cookie inside a jar document."""

    model_config = ConfigDict(populate_by_name=True)

    key: str = Field(description="Cookie name")
    value: str = Field(default="", description="Cookie value")
    domain: str = Field(description="Cookie domain without a leading dot")
    path: str = Field(default="/", description="Cookie path")
    expires: Optional[datetime] = Field(
        default=None,
        description="Expiry time, omitted for session cookies"
    )
    secure: bool = Field(default=False)
    http_only: bool = Field(default=False, alias="httpOnly")
    host_only: bool = Field(
        default=True,
        alias="hostOnly",
        description="True when the cookie only matches its exact host"
    )
    same_site: Optional[str] = Field(default=None, alias="sameSite")

    @property
    def expires_timestamp(self) -> Optional[int]:
        """Expiry as an integer Unix timestamp."""
        if self.expires is None:
            return None
        expires = self.expires
        if expires.tzinfo is None:
            expires = expires.replace(tzinfo=timezone.utc)
        return int(expires.timestamp())


class CookieJarDocument(BaseModel):
    """Structured, re-loadable serialization of a whole cookie jar."""

    model_config = ConfigDict(populate_by_name=True)

    version: str = Field(description="Producer name and version")
    store_type: str = Field(default="MemoryCookieStore", alias="storeType")
    reject_public_suffixes: bool = Field(default=True, alias="rejectPublicSuffixes")
    cookies: List[JarCookieEntry] = Field(default_factory=list)
