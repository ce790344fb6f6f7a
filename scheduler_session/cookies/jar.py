"""Cookie jar assembly, header serialization and jar documents.

The jar type is ``httpx.Cookies``, which wraps a standard-library
``http.cookiejar.CookieJar``. Cookies are always inserted in (domain, path,
name) order, which is also the order the jar iterates in, so a jar rebuilt
from its own document produces byte-identical header strings.
"""

import logging
from datetime import datetime, timezone
from typing import Iterable, List, Tuple, Union

import httpx

from .translator import translate
from ..models.cookies import CookieJarDocument, JarCookieEntry, RawCookie

logger = logging.getLogger(__name__)


def _sort_key(raw: RawCookie) -> Tuple[str, str, str]:
    return (raw.domain, raw.path or '/', raw.name)


def add_cookie(jar: httpx.Cookies, raw: RawCookie) -> str:
    """Insert one browser cookie into the jar.

    Args:
        jar: Jar to insert into
        raw: Cookie reported by the browser

    Returns:
        Storage URL the cookie was filed under
    """
    cookie, url = translate(raw)
    jar.jar.set_cookie(cookie)
    logger.debug(f"Stored cookie '{raw.name}' under {url}")
    return url


def build_jar(cookies: Iterable[Union[RawCookie, dict]]) -> httpx.Cookies:
    """Create a fresh jar from browser cookies.

    Args:
        cookies: RawCookie objects or raw Playwright cookie dicts

    Returns:
        New jar holding every cookie
    """
    raw_cookies: List[RawCookie] = [
        c if isinstance(c, RawCookie) else RawCookie.from_playwright_cookie(c)
        for c in cookies
    ]

    jar = httpx.Cookies()
    for raw in sorted(raw_cookies, key=_sort_key):
        add_cookie(jar, raw)

    return jar


def cookie_header(jar: httpx.Cookies, url: str) -> str:
    """Serialize the cookies that apply to a URL as a ``Cookie`` header value.

    Matching follows the standard cookie rules (domain, path, secure flag and
    expiry) for a request to ``url``.

    Args:
        jar: Jar to read from
        url: URL the header is meant for

    Returns:
        ``name=value`` pairs joined by ``"; "``, or an empty string
    """
    request = httpx.Request("GET", url)
    jar.set_cookie_header(request)
    return request.headers.get("Cookie", "")


def cookie_tuples(jar: httpx.Cookies) -> List[Tuple[str, str, str, str]]:
    """List (domain, path, name, value) for every stored cookie."""
    return sorted(
        (cookie.domain, cookie.path, cookie.name, cookie.value)
        for cookie in jar.jar
    )


def to_document(jar: httpx.Cookies, version: str) -> CookieJarDocument:
    """Capture every stored cookie, with its attributes, in a jar document.

    Args:
        jar: Jar to serialize
        version: Producer string recorded in the document

    Returns:
        CookieJarDocument describing the whole jar
    """
    entries = []
    for cookie in jar.jar:
        expires = None
        if cookie.expires is not None:
            expires = datetime.fromtimestamp(cookie.expires, tz=timezone.utc)

        entries.append(JarCookieEntry(
            key=cookie.name,
            value=cookie.value or "",
            domain=cookie.domain.lstrip('.'),
            path=cookie.path,
            expires=expires,
            secure=cookie.secure,
            http_only=cookie.has_nonstandard_attr('HttpOnly'),
            host_only=not cookie.domain_specified,
            same_site=cookie.get_nonstandard_attr('SameSite'),
        ))

    return CookieJarDocument(version=version, cookies=entries)


def from_document(document: CookieJarDocument) -> httpx.Cookies:
    """Rebuild a jar from a jar document."""
    raw_cookies = []
    for entry in document.cookies:
        raw_cookies.append(RawCookie(
            name=entry.key,
            value=entry.value,
            domain=entry.domain if entry.host_only else f".{entry.domain}",
            path=entry.path,
            secure=entry.secure,
            http_only=entry.http_only,
            same_site=entry.same_site,
            expires=entry.expires_timestamp,
        ))
    return build_jar(raw_cookies)


def load_jar_document(text: str) -> httpx.Cookies:
    """Parse a JSON jar document and rebuild the jar it describes.

    Raises:
        pydantic.ValidationError: If the text is not a valid jar document
    """
    document = CookieJarDocument.model_validate_json(text)
    jar = from_document(document)
    logger.debug(f"Loaded {len(document.cookies)} cookies from jar document ({document.version})")
    return jar
