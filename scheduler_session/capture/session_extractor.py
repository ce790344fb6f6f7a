"""Cookie extraction from the scheduler page and live validation of the jar.

The extractor takes one snapshot of the cookies visible to the scheduler
origin, files them in a fresh jar and proves the jar is usable by issuing a
single request to the scheduler API with those cookies. Only a jar that got a
200 back leaves this module.
"""

import logging
from typing import Callable, Optional

import httpx
from playwright.async_api import Page

from ..config import PortalConfig
from ..cookies import build_jar, cookie_header
from ..exceptions import ExtractionValidationError

logger = logging.getLogger(__name__)


def _new_probe_client(config: PortalConfig) -> httpx.AsyncClient:
    return httpx.AsyncClient(
        timeout=httpx.Timeout(timeout=config.probe_timeout_seconds, connect=10.0),
        follow_redirects=False,
    )


async def probe_jar(
    jar: httpx.Cookies,
    config: PortalConfig,
    client: Optional[httpx.AsyncClient] = None
) -> int:
    """Send one API request authenticated by the jar and require a 200.

    The ``Cookie`` header is built from the jar explicitly. Redirects are not
    followed: a session that answers with a redirect is rejected, even where a
    redirect-following client would have reached a 200.

    Args:
        jar: Jar to validate
        config: Supplies the probe URL and timeout
        client: Optional client to send through; one is created and closed otherwise

    Returns:
        The response status code (always 200)

    Raises:
        ExtractionValidationError: On any other status or a transport error
    """
    probe_url = config.probe_url
    headers = {}
    header_value = cookie_header(jar, probe_url)
    if header_value:
        headers["Cookie"] = header_value

    owns_client = client is None
    if owns_client:
        client = _new_probe_client(config)

    try:
        response = await client.get(probe_url, headers=headers, follow_redirects=False)
    except httpx.RequestError as e:
        logger.error(f"API probe to {probe_url} failed: {e}")
        raise ExtractionValidationError(
            message=f"API probe request failed: {e}",
            probe_url=probe_url
        ) from e
    finally:
        if owns_client:
            await client.aclose()

    if response.status_code != 200:
        logger.error(f"API probe to {probe_url} returned {response.status_code}")
        raise ExtractionValidationError(
            message=f"Scheduler API rejected the session (HTTP {response.status_code})",
            status_code=response.status_code,
            probe_url=probe_url
        )

    return response.status_code


class SessionExtractor:
    """Reads the scheduler cookies from a page and validates them."""

    def __init__(
        self,
        config: PortalConfig,
        http_client: Optional[httpx.AsyncClient] = None,
        verbose: bool = False
    ):
        """Initialize session extractor.

        Args:
            config: Target origin and probe settings
            http_client: Client used for the probe; a private one is created when omitted
            verbose: Report progress at INFO instead of DEBUG level
        """
        self.config = config
        self.http_client = http_client
        self._report: Callable[..., None] = logger.info if verbose else logger.debug

    async def read_cookies(self, target_page: Page) -> httpx.Cookies:
        """Snapshot the cookies the browser holds for the target origin."""
        origin = self.config.target_origin
        raw_cookies = await target_page.context.cookies(origin)
        jar = build_jar(raw_cookies)
        self._report(f"Collected {len(raw_cookies)} cookies for {origin}")
        return jar

    async def extract(self, target_page: Page) -> httpx.Cookies:
        """Build the cookie jar and confirm it grants API access.

        Args:
            target_page: Scheduler page reached by the portal flow

        Returns:
            Validated jar

        Raises:
            ExtractionValidationError: If the API probe did not return 200
        """
        jar = await self.read_cookies(target_page)
        await probe_jar(jar, self.config, self.http_client)
        self._report("API access confirmed")
        return jar
