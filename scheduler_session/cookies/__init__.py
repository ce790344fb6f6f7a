"""Cookie translation and jar handling.

Main Components:
- Translator: browser cookie -> ``http.cookiejar.Cookie`` plus storage URL
- Jar: assembly into ``httpx.Cookies``, header strings and jar documents
"""

from .translator import storage_url, to_jar_cookie, translate
from .jar import (
    add_cookie,
    build_jar,
    cookie_header,
    cookie_tuples,
    to_document,
    from_document,
    load_jar_document,
)

__all__ = [
    "storage_url",
    "to_jar_cookie",
    "translate",
    "add_cookie",
    "build_jar",
    "cookie_header",
    "cookie_tuples",
    "to_document",
    "from_document",
    "load_jar_document",
]
