"""Browser capture layer.

Main Components:
- BrowserFactory: Playwright launch and single teardown of a BrowserSession
- PortalNavigator: portal login state machine ending on the scheduler tab
- SessionExtractor: cookie snapshot plus live API probe
"""

from .browser_factory import BrowserFactory, BrowserSession, running_in_container
from .portal_flow import PortalNavigator, PortalState, is_sign_on_denial
from .session_extractor import SessionExtractor, probe_jar

__all__ = [
    "BrowserFactory",
    "BrowserSession",
    "running_in_container",
    "PortalNavigator",
    "PortalState",
    "is_sign_on_denial",
    "SessionExtractor",
    "probe_jar",
]
