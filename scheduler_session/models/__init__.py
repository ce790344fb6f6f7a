"""Data models package."""

from .cookies import (
    OutputFormat,
    RawCookie,
    ExtractionOptions,
    JarCookieEntry,
    CookieJarDocument,
)

__all__ = [
    'OutputFormat',
    'RawCookie',
    'ExtractionOptions',
    'JarCookieEntry',
    'CookieJarDocument',
]
