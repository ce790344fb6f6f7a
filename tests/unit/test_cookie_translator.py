"""Unit tests for the browser cookie translator."""

from scheduler_session.cookies.translator import storage_url, to_jar_cookie, translate
from scheduler_session.models.cookies import RawCookie


class TestStorageUrl:
    """Tests for storage_url."""

    def test_secure_cookie(self):
        raw = RawCookie(name="sid", value="abc123", domain="uh.collegescheduler.com", path="/", secure=True)

        assert storage_url(raw) == "https://uh.collegescheduler.com/"

    def test_insecure_domain_cookie_drops_leading_dot(self):
        raw = RawCookie(name="lang", value="en", domain=".collegescheduler.com", path="/api", secure=False)

        assert storage_url(raw) == "http://collegescheduler.com/api"


class TestToJarCookie:
    """Tests for to_jar_cookie."""

    def test_host_only_session_cookie(self):
        raw = RawCookie.from_playwright_cookie({
            "name": "sid",
            "value": "abc123",
            "domain": "uh.collegescheduler.com",
            "path": "/",
            "expires": -1,
            "httpOnly": True,
            "secure": True,
            "sameSite": "Lax",
        })

        cookie = to_jar_cookie(raw)

        assert cookie.version == 0
        assert cookie.name == "sid"
        assert cookie.value == "abc123"
        assert cookie.domain == "uh.collegescheduler.com"
        assert cookie.domain_specified is False
        assert cookie.secure is True
        assert cookie.expires is None
        assert cookie.discard is True
        assert cookie.has_nonstandard_attr("HttpOnly")
        assert cookie.get_nonstandard_attr("SameSite") == "Lax"

    def test_domain_cookie_with_expiry(self):
        raw = RawCookie(name="tok", value="v", domain=".collegescheduler.com", expires=4102444800.5)

        cookie = to_jar_cookie(raw)

        assert cookie.domain_specified is True
        assert cookie.domain_initial_dot is True
        assert cookie.expires == 4102444800
        assert cookie.discard is False
        assert not cookie.has_nonstandard_attr("HttpOnly")

    def test_translate_returns_cookie_and_url(self):
        raw = RawCookie(name="sid", value="abc123", domain="uh.collegescheduler.com", secure=True)

        cookie, url = translate(raw)

        assert cookie.name == "sid"
        assert url == "https://uh.collegescheduler.com/"
