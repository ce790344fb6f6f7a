"""Navigation state machine for the UH portal -> Schedule Planner login.

The PortalNavigator drives one browser session through a fixed, linear
sequence of states, from the portal home page to the scheduling application
opened in its own tab:

    INIT -> PORTAL_HOME -> SELECT_PORTAL_OPTION -> CREDENTIAL_ENTRY -> SUBMIT
         -> LOGIN_OUTCOME_CHECK -> PORTAL_DASHBOARD -> ENTER_EMBEDDED_FRAME
         -> LAUNCH_SCHEDULER -> AWAIT_NEW_TAB -> TARGET_PAGE_READY -> SUCCESS

LOGIN_OUTCOME_CHECK is the only branch: it moves to DENIED when the portal
answers the sign-in with its sign-on page again. Every wait uses the
automation layer's default timeout and a timeout in any state aborts the
flow. Nothing is retried.
"""

import logging
from enum import Enum
from typing import Any, Callable, Dict, List, Mapping, Optional

from playwright.async_api import Frame, Page, Response, TimeoutError as PlaywrightTimeoutError

from .browser_factory import BrowserSession
from ..config import PortalConfig
from ..credentials import Credentials
from ..exceptions import (
    AuthenticationDeniedError,
    FrameNotFoundError,
    NavigationTimeoutError,
    TargetPageNotFoundError,
)

logger = logging.getLogger(__name__)


class PortalState(str, Enum):
    """States of the portal login flow."""
    INIT = "init"
    PORTAL_HOME = "portal_home"
    SELECT_PORTAL_OPTION = "select_portal_option"
    CREDENTIAL_ENTRY = "credential_entry"
    SUBMIT = "submit"
    LOGIN_OUTCOME_CHECK = "login_outcome_check"
    DENIED = "denied"
    PORTAL_DASHBOARD = "portal_dashboard"
    ENTER_EMBEDDED_FRAME = "enter_embedded_frame"
    LAUNCH_SCHEDULER = "launch_scheduler"
    AWAIT_NEW_TAB = "await_new_tab"
    TARGET_PAGE_READY = "target_page_ready"
    SUCCESS = "success"


_TRANSITIONS: Dict[PortalState, set] = {
    PortalState.INIT: {PortalState.PORTAL_HOME},
    PortalState.PORTAL_HOME: {PortalState.SELECT_PORTAL_OPTION},
    PortalState.SELECT_PORTAL_OPTION: {PortalState.CREDENTIAL_ENTRY},
    PortalState.CREDENTIAL_ENTRY: {PortalState.SUBMIT},
    PortalState.SUBMIT: {PortalState.LOGIN_OUTCOME_CHECK},
    PortalState.LOGIN_OUTCOME_CHECK: {PortalState.DENIED, PortalState.PORTAL_DASHBOARD},
    PortalState.DENIED: set(),
    PortalState.PORTAL_DASHBOARD: {PortalState.ENTER_EMBEDDED_FRAME},
    PortalState.ENTER_EMBEDDED_FRAME: {PortalState.LAUNCH_SCHEDULER},
    PortalState.LAUNCH_SCHEDULER: {PortalState.AWAIT_NEW_TAB},
    PortalState.AWAIT_NEW_TAB: {PortalState.TARGET_PAGE_READY},
    PortalState.TARGET_PAGE_READY: {PortalState.SUCCESS},
    PortalState.SUCCESS: set(),
}


def is_sign_on_denial(headers: Optional[Mapping[str, str]], header_name: str = "respondingwithsignonpage") -> bool:
    """Tell whether a login response is the portal re-displaying its sign-on page.

    This is the single place the denial signal is interpreted.

    Args:
        headers: Response headers of the post-submit navigation
        header_name: Marker header set by the portal on denial

    Returns:
        True if the marker header is present with a non-empty value
    """
    if not headers:
        return False
    wanted = header_name.lower()
    return any(name.lower() == wanted and bool(value) for name, value in headers.items())


class PortalNavigator:
    """Drives a browser session from the portal home page to the scheduler tab."""

    def __init__(self, session: BrowserSession, config: PortalConfig, verbose: bool = False):
        """Initialize portal navigator.

        Args:
            session: Open browser session, owned by the caller
            config: Portal URLs and selectors
            verbose: Report progress at INFO instead of DEBUG level
        """
        self.session = session
        self.config = config
        self.selectors = config.selectors
        self._report: Callable[..., None] = logger.info if verbose else logger.debug

        self.state = PortalState.INIT
        self.history: List[PortalState] = [PortalState.INIT]

        self.page: Optional[Page] = None
        self.frame: Optional[Frame] = None
        self.target_page: Optional[Page] = None
        self._popup: Optional[Page] = None
        self._pending_selector: Optional[str] = None

    def _transition(self, new_state: PortalState) -> None:
        if new_state not in _TRANSITIONS[self.state]:
            raise RuntimeError(f"Illegal portal transition {self.state.value} -> {new_state.value}")
        logger.debug(f"Portal state {self.state.value} -> {new_state.value}")
        self.state = new_state
        self.history.append(new_state)

    async def _step(self, state: PortalState, handler: Callable[..., Any], *args) -> Any:
        """Enter a state and run its handler, turning timeouts into step failures."""
        self._transition(state)
        self._pending_selector = None
        try:
            return await handler(*args)
        except PlaywrightTimeoutError as e:
            logger.error(f"Timed out in portal state {state.value} (selector={self._pending_selector})")
            raise NavigationTimeoutError(
                message=f"Timed out during {state.value}: {e}",
                state=state.value,
                selector=self._pending_selector
            ) from e

    async def _wait_for(self, target, selector: str) -> None:
        self._pending_selector = selector
        await target.wait_for_selector(selector)

    async def _wait_and_click(self, target, selector: str) -> None:
        await self._wait_for(target, selector)
        await target.click(selector)

    async def run(self, credentials: Credentials) -> Page:
        """Run the whole flow.

        Args:
            credentials: Portal credentials

        Returns:
            The scheduler page, fully initialised

        Raises:
            AuthenticationDeniedError: If the portal rejected the credentials
            NavigationTimeoutError: If any waited-for element, navigation or tab never appeared
            FrameNotFoundError: If the embedded PeopleSoft frame is missing
            TargetPageNotFoundError: If no tab points at the scheduler
        """
        self.page = await self.session.new_page()

        await self._step(PortalState.PORTAL_HOME, self._open_portal_home)
        await self._step(PortalState.SELECT_PORTAL_OPTION, self._select_portal_option)
        await self._step(PortalState.CREDENTIAL_ENTRY, self._enter_credentials, credentials)
        response = await self._step(PortalState.SUBMIT, self._submit)
        await self._step(PortalState.LOGIN_OUTCOME_CHECK, self._check_login_outcome, response)

        self._report("Portalling (Student Center -> Schedule Planner) ...")
        await self._step(PortalState.PORTAL_DASHBOARD, self._open_student_center)
        await self._step(PortalState.ENTER_EMBEDDED_FRAME, self._enter_embedded_frame)
        await self._step(PortalState.LAUNCH_SCHEDULER, self._launch_scheduler)
        await self._step(PortalState.AWAIT_NEW_TAB, self._await_new_tab)
        await self._step(PortalState.TARGET_PAGE_READY, self._wait_for_target_ready)

        self._transition(PortalState.SUCCESS)
        return self.target_page

    async def _open_portal_home(self) -> None:
        self._report(f"Login {self.config.home_url} ...")
        await self.page.goto(self.config.home_url)

    async def _select_portal_option(self) -> None:
        # "UH Central"
        await self._wait_and_click(self.page, self.selectors.portal_option)

    async def _enter_credentials(self, credentials: Credentials) -> None:
        await self._wait_for(self.page, self.selectors.identity_field)
        await self.page.focus(self.selectors.identity_field)
        await self.page.keyboard.type(credentials.identity)

        await self._wait_for(self.page, self.selectors.password_field)
        await self.page.focus(self.selectors.password_field)
        await self.page.keyboard.type(credentials.secret.get_secret_value())

        await self._wait_for(self.page, self.selectors.submit_button)

    async def _submit(self) -> Optional[Response]:
        """Click submit and wait for the navigation it triggers."""
        async with self.page.expect_navigation() as navigation:
            await self.page.click(self.selectors.submit_button)
        return await navigation.value

    async def _check_login_outcome(self, response: Optional[Response]) -> None:
        headers = response.headers if response is not None else {}

        if is_sign_on_denial(headers, self.config.denial_header):
            self._report("Denied")
            self._transition(PortalState.DENIED)
            raise AuthenticationDeniedError("Portal login denied: sign-on page was re-displayed")

        if response is None:
            logger.warning("Login submit produced no navigation response; assuming access was granted")
        self._report("Logged in!")

    async def _open_student_center(self) -> None:
        await self._wait_and_click(self.page, self.selectors.dashboard_tile)

    async def _enter_embedded_frame(self) -> None:
        await self._wait_for(self.page, self.selectors.frame_container)

        frame_name = self.config.frame_name
        self.frame = next((f for f in self.page.frames if f.name == frame_name), None)
        if self.frame is None:
            raise FrameNotFoundError(frame_name, state=self.state.value)

    async def _launch_scheduler(self) -> None:
        # "Schedule Planner"
        await self._wait_and_click(self.frame, self.selectors.schedule_planner_button)

        # "Open Schedule Planner" opens the scheduler in a new tab
        await self._wait_for(self.frame, self.selectors.launch_button)
        async with self.session.context.expect_page() as popup:
            await self.frame.click(self.selectors.launch_button)
        self._popup = await popup.value

    async def _await_new_tab(self) -> None:
        fragment = self.config.target_url_fragment
        await self._popup.wait_for_url(lambda url: fragment in url)

        self.target_page = next((p for p in self.session.pages if fragment in p.url), None)
        if self.target_page is None:
            raise TargetPageNotFoundError(fragment, state=self.state.value)

    async def _wait_for_target_ready(self) -> None:
        await self._wait_for(self.target_page, self.selectors.target_ready)
