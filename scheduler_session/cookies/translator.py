"""Translate browser cookies into standard-library jar cookies.

A cookie is filed in the jar together with the URL it would have been set
from (scheme from the secure flag, then domain and path), so the jar's normal
domain/path/secure matching applies when the cookies are read back.
"""

from http.cookiejar import Cookie
from typing import Tuple

from ..models.cookies import RawCookie


def storage_url(raw: RawCookie) -> str:
    """Build the URL a cookie is stored under.

    Args:
        raw: Cookie reported by the browser

    Returns:
        ``https://`` or ``http://`` followed by the bare domain and the path
    """
    scheme = "https://" if raw.secure else "http://"
    return f"{scheme}{raw.domain.lstrip('.')}{raw.path or '/'}"


def to_jar_cookie(raw: RawCookie) -> Cookie:
    """Convert a browser cookie into an ``http.cookiejar.Cookie``.

    Args:
        raw: Cookie reported by the browser

    Returns:
        Netscape-style (version 0) cookie carrying the same attributes
    """
    domain_specified = raw.domain.startswith('.')

    rest = {}
    if raw.http_only:
        rest['HttpOnly'] = None
    if raw.same_site:
        rest['SameSite'] = raw.same_site

    expires = int(raw.expires) if raw.expires is not None else None

    return Cookie(
        version=0,
        name=raw.name,
        value=raw.value,
        port=None,
        port_specified=False,
        domain=raw.domain,
        domain_specified=domain_specified,
        domain_initial_dot=domain_specified,
        path=raw.path or '/',
        path_specified=True,
        secure=raw.secure,
        expires=expires,
        discard=expires is None,
        comment=None,
        comment_url=None,
        rest=rest,
    )


def translate(raw: RawCookie) -> Tuple[Cookie, str]:
    """Translate a browser cookie into a jar cookie and its storage URL."""
    return to_jar_cookie(raw), storage_url(raw)
