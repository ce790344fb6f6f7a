"""Extraction service: the entry points callers use.

Wires the credential gate, the browser factory, the portal flow, the session
extractor and the formatter together. The browser session is scoped to the
flow and released exactly once, whichever way the attempt ends.
"""

import asyncio
import logging
from typing import Optional

import httpx

from .capture.browser_factory import BrowserFactory
from .capture.portal_flow import PortalNavigator
from .capture.session_extractor import SessionExtractor
from .config import PortalConfig
from .credentials import Credentials, require_credentials
from .formatting import format_jar
from .models.cookies import ExtractionOptions

logger = logging.getLogger(__name__)


async def harvest_cookie_jar(
    credentials: Credentials,
    options: Optional[ExtractionOptions] = None,
    *,
    config: Optional[PortalConfig] = None,
    browser_factory: Optional[BrowserFactory] = None,
    http_client: Optional[httpx.AsyncClient] = None
) -> httpx.Cookies:
    """Log in through the portal and return the validated scheduler cookie jar.

    Args:
        credentials: Portal credentials
        options: Progress reporting options
        config: Portal configuration, defaults when omitted
        browser_factory: Factory for the browser session, built from config when omitted
        http_client: Client used for the API probe

    Returns:
        Cookie jar that was confirmed to grant API access

    Raises:
        SessionExtractionError: Any subclass, after the browser has been closed
    """
    options = options or ExtractionOptions()
    config = config or PortalConfig()
    factory = browser_factory or BrowserFactory(config.browser)

    async with factory.session() as session:
        navigator = PortalNavigator(session, config, verbose=options.logging)
        target_page = await navigator.run(credentials)

        extractor = SessionExtractor(config, http_client=http_client, verbose=options.logging)
        jar = await extractor.extract(target_page)

    return jar


async def extract_session(
    identity: Optional[str],
    secret: Optional[str],
    options: Optional[ExtractionOptions] = None,
    *,
    config: Optional[PortalConfig] = None,
    browser_factory: Optional[BrowserFactory] = None,
    http_client: Optional[httpx.AsyncClient] = None
) -> str:
    """Extract an authenticated scheduler session and serialize it.

    Args:
        identity: PeopleSoft ID
        secret: Portal password
        options: Output format and progress reporting
        config: Portal configuration, defaults when omitted
        browser_factory: Factory for the browser session
        http_client: Client used for the API probe

    Returns:
        Header string or jar document, depending on ``options.format``

    Raises:
        ConfigurationError: If a credential is missing; no browser is started
        AuthenticationDeniedError: If the portal rejected the credentials
        NavigationError: If the portal flow broke off
        ExtractionValidationError: If the API probe did not return 200
    """
    credentials = require_credentials(identity, secret)
    options = options or ExtractionOptions()
    config = config or PortalConfig()

    jar = await harvest_cookie_jar(
        credentials,
        options,
        config=config,
        browser_factory=browser_factory,
        http_client=http_client,
    )
    return format_jar(jar, options.format, config.target_origin)


def extract(
    identity: Optional[str],
    secret: Optional[str],
    options: Optional[ExtractionOptions] = None,
    config: Optional[PortalConfig] = None
) -> str:
    """Blocking wrapper around extract_session."""
    return asyncio.run(extract_session(identity, secret, options, config=config))
