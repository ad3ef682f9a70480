"""Feed fetching for calendar, sheet and bill sources.

The parsers never touch the network; this module owns the timeout and
retry policy for retrieving their input text.
"""

import asyncio
import logging
from typing import Optional

import httpx

from walldash.exceptions import SourceFetchError

logger = logging.getLogger(__name__)

DEFAULT_HEADERS: dict[str, str] = {
    "User-Agent": "walldash/0.3 (+household dashboard)",
    "Accept": "text/calendar, text/csv, text/plain, */*",
}

# Seconds added to the wait before each further attempt
RETRY_BACKOFF_SECONDS = 1.0


def _build_timeout(timeout_seconds: float) -> httpx.Timeout:
    return httpx.Timeout(timeout_seconds, connect=min(10.0, timeout_seconds))


async def fetch_text(
    url: str,
    timeout_seconds: float = 30.0,
    retries: int = 2,
    client: Optional[httpx.AsyncClient] = None,
) -> str:
    """Fetch a feed and return its decoded text.

    Transport errors and 5xx responses are retried with linear backoff;
    4xx responses fail immediately.

    Args:
        url: Feed URL (ICS, published sheet CSV or bill export)
        timeout_seconds: Per-request timeout
        retries: Extra attempts after the first failure
        client: Optional client to use instead of a short-lived one

    Returns:
        Response body decoded as text

    Raises:
        SourceFetchError: If no attempt succeeds
    """
    owns_client = client is None
    if client is None:
        client = httpx.AsyncClient(
            timeout=_build_timeout(timeout_seconds),
            follow_redirects=True,
            headers=DEFAULT_HEADERS,
        )

    last_error = "no attempt made"
    last_status: Optional[int] = None
    try:
        for attempt in range(retries + 1):
            if attempt:
                await asyncio.sleep(RETRY_BACKOFF_SECONDS * attempt)
            try:
                response = await client.get(url)
            except httpx.TransportError as e:
                last_error = f"{type(e).__name__}: {e}"
                logger.warning("Fetch attempt %d for %s failed: %s", attempt + 1, url, last_error)
                continue

            if response.status_code >= 500:
                last_status = response.status_code
                last_error = f"HTTP {response.status_code}"
                logger.warning("Fetch attempt %d for %s returned %s", attempt + 1, url, last_error)
                continue
            if response.status_code >= 400:
                raise SourceFetchError(url, f"HTTP {response.status_code}", response.status_code)

            logger.debug("Fetched %d bytes from %s", len(response.content), url)
            return response.text
    finally:
        if owns_client:
            await client.aclose()

    raise SourceFetchError(url, last_error, last_status)
