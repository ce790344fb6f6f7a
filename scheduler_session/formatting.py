"""Serialization of a cookie jar into the caller-facing formats."""

import httpx

from . import __version__
from .cookies import cookie_header, to_document
from .models.cookies import OutputFormat

DOCUMENT_VERSION = f"scheduler-session@{__version__}"


def serialize_jar_document(jar: httpx.Cookies) -> str:
    """Pretty-printed JSON document describing every cookie in the jar."""
    document = to_document(jar, DOCUMENT_VERSION)
    return document.model_dump_json(by_alias=True, exclude_none=True, indent=1)


def format_jar(jar: httpx.Cookies, fmt: OutputFormat, origin: str) -> str:
    """Render a jar in the requested format.

    Args:
        jar: Validated cookie jar
        fmt: HEADER_STRING for a ``Cookie`` header value, anything else for a jar document
        origin: URL the header string is scoped to

    Returns:
        Serialized jar
    """
    if fmt == OutputFormat.HEADER_STRING:
        return cookie_header(jar, origin)
    return serialize_jar_document(jar)
