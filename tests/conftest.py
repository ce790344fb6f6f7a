"""Shared test fixtures and scripted Playwright doubles for the extractor tests."""

import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional
from unittest.mock import patch

import httpx
import pytest
import pytest_asyncio
from playwright.async_api import TimeoutError as PlaywrightTimeoutError

# Add project root to Python path
sys.path.insert(0, str(Path(__file__).parent.parent))

from scheduler_session.config import PortalConfig


SCHEDULER_URL = "https://uh.collegescheduler.com/entry"


def sample_cookies() -> List[Dict[str, Any]]:
    """Cookies as Playwright reports them for the scheduler origin."""
    return [
        {
            "name": "sid",
            "value": "abc123",
            "domain": "uh.collegescheduler.com",
            "path": "/",
            "expires": -1,
            "httpOnly": True,
            "secure": True,
            "sameSite": "Lax",
        },
        {
            "name": "__RequestVerificationToken",
            "value": "tok-456",
            "domain": ".collegescheduler.com",
            "path": "/",
            "expires": 4102444800,
            "httpOnly": False,
            "secure": True,
            "sameSite": "None",
        },
    ]


@dataclass
class PortalScript:
    """Describes how the scripted portal behaves during one run."""
    denied: bool = False
    navigation_response: bool = True
    timeout_selector: Optional[str] = None
    frame_name: str = "TargetContent"
    popup_url: str = SCHEDULER_URL
    cookies: List[Dict[str, Any]] = field(default_factory=sample_cookies)
    calls: List[tuple] = field(default_factory=list)

    def record(self, *call):
        self.calls.append(call)

    def call_names(self) -> List[str]:
        return [c[0] for c in self.calls]


class FakeResponse:
    def __init__(self, headers: Dict[str, str]):
        self.headers = headers


class FakeEventInfo:
    """Stand-in for Playwright's EventInfo; ``value`` is awaitable."""

    def __init__(self, value_factory: Callable[[], Any]):
        self._value_factory = value_factory

    @property
    def value(self):
        async def resolve():
            return self._value_factory()
        return resolve()


class FakeExpectation:
    def __init__(self, info: FakeEventInfo, on_enter: Optional[Callable[[], None]] = None):
        self._info = info
        self._on_enter = on_enter

    async def __aenter__(self):
        if self._on_enter:
            self._on_enter()
        return self._info

    async def __aexit__(self, exc_type, exc, tb):
        return False


class FakeKeyboard:
    def __init__(self, script: PortalScript, owner: str):
        self._script = script
        self._owner = owner

    async def type(self, text: str):
        self._script.record("type", self._owner, text)


class FakeFrame:
    """Frame with selectors that appear immediately unless scripted to time out."""

    def __init__(self, script: PortalScript, name: str):
        self._script = script
        self.name = name

    async def wait_for_selector(self, selector: str, **kwargs):
        self._script.record("wait_for_selector", self.name, selector)
        if selector == self._script.timeout_selector:
            raise PlaywrightTimeoutError(f"Timeout 30000ms exceeded waiting for {selector}")

    async def click(self, selector: str, **kwargs):
        self._script.record("click", self.name, selector)


class FakePage(FakeFrame):
    def __init__(self, script: PortalScript, context: "FakeContext", url: str = "about:blank", name: str = "page"):
        super().__init__(script, name)
        self.context = context
        self.url = url
        self.keyboard = FakeKeyboard(script, name)
        self.frames = [FakeFrame(script, ""), FakeFrame(script, script.frame_name)]

    async def goto(self, url: str, **kwargs):
        self._script.record("goto", self.name, url)
        self.url = url

    async def focus(self, selector: str, **kwargs):
        self._script.record("focus", self.name, selector)

    def expect_navigation(self, **kwargs):
        def response():
            if not self._script.navigation_response:
                return None
            headers = {"content-type": "text/html"}
            if self._script.denied:
                headers["respondingwithsignonpage"] = "true"
            return FakeResponse(headers)

        return FakeExpectation(FakeEventInfo(response))

    async def wait_for_url(self, url, **kwargs):
        self._script.record("wait_for_url", self.name, self.url)
        matched = url(self.url) if callable(url) else url == self.url
        if not matched:
            raise PlaywrightTimeoutError(f"Timeout 30000ms exceeded waiting for URL, current {self.url}")


class FakeContext:
    def __init__(self, script: PortalScript):
        self._script = script
        self.pages: List[FakePage] = []
        self.default_timeout: Optional[int] = None

    async def new_page(self) -> FakePage:
        page = FakePage(self._script, self, name="portal")
        self.pages.append(page)
        return page

    def set_default_timeout(self, timeout: int):
        self.default_timeout = timeout

    def expect_page(self, **kwargs):
        popup = FakePage(self._script, self, url=self._script.popup_url, name="popup")

        def open_popup():
            self.pages.append(popup)

        return FakeExpectation(FakeEventInfo(lambda: popup), on_enter=open_popup)

    async def cookies(self, urls=None):
        self._script.record("cookies", "context", urls)
        return [dict(c) for c in self._script.cookies]


class FakeBrowser:
    def __init__(self, script: PortalScript):
        self._script = script
        self.contexts: List[FakeContext] = []
        self.close_count = 0
        self.launch_options: Dict[str, Any] = {}

    async def new_context(self, **kwargs) -> FakeContext:
        context = FakeContext(self._script)
        self.contexts.append(context)
        return context

    async def close(self):
        self.close_count += 1


class FakeBrowserType:
    def __init__(self, browser: FakeBrowser):
        self._browser = browser
        self.launch_count = 0

    async def launch(self, **kwargs) -> FakeBrowser:
        self.launch_count += 1
        self._browser.launch_options = kwargs
        return self._browser


class FakePlaywright:
    def __init__(self, script: PortalScript):
        self.browser = FakeBrowser(script)
        self.chromium = FakeBrowserType(self.browser)
        self.firefox = FakeBrowserType(self.browser)
        self.webkit = FakeBrowserType(self.browser)
        self.stop_count = 0
        self.start_count = 0

    async def stop(self):
        self.stop_count += 1


class FakePlaywrightManager:
    """Return value of a patched ``async_playwright()``."""

    def __init__(self, playwright: FakePlaywright):
        self._playwright = playwright

    async def start(self) -> FakePlaywright:
        self._playwright.start_count += 1
        return self._playwright


@dataclass
class FakePortal:
    script: PortalScript
    playwright: FakePlaywright

    @property
    def browser(self) -> FakeBrowser:
        return self.playwright.browser

    @property
    def context(self) -> FakeContext:
        return self.browser.contexts[0]


@pytest.fixture
def portal_script():
    """Script for a portal that logs in successfully."""
    return PortalScript()


@pytest.fixture
def fake_portal(portal_script):
    """Scripted Playwright installed in place of the real driver."""
    playwright = FakePlaywright(portal_script)
    with patch(
        'scheduler_session.capture.browser_factory.async_playwright',
        return_value=FakePlaywrightManager(playwright)
    ):
        yield FakePortal(script=portal_script, playwright=playwright)


@pytest.fixture
def portal_config():
    """Default portal configuration with the sandbox decision pinned."""
    return PortalConfig(browser={"sandbox": True})


class ProbeRecorder:
    """httpx.MockTransport handler answering the API probe with a fixed status."""

    def __init__(self, status_code: int = 200):
        self.status_code = status_code
        self.requests: List[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return httpx.Response(self.status_code, json=[{"id": "2270", "title": "Fall 2026"}])


@pytest.fixture
def probe():
    return ProbeRecorder()


@pytest_asyncio.fixture
async def probe_client(probe):
    """AsyncClient whose requests are answered by the probe recorder."""
    client = httpx.AsyncClient(transport=httpx.MockTransport(probe))
    yield client
    await client.aclose()


def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line(
        "markers", "slow: marks tests as slow (deselect with '-m \"not slow\"')"
    )
    config.addinivalue_line(
        "markers", "integration: marks tests as integration tests"
    )
    config.addinivalue_line(
        "markers", "unit: marks tests as unit tests"
    )
