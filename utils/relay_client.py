"""
Fetch-with-fallback client.

One logical fetch is tried through an ordered list of relay endpoints
(cross-origin proxies, or a direct ``{url}`` template).  The first
relay that answers with a 2xx status wins; the rest are never touched.
There is no racing, no backoff and no caching.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import List, Optional, Sequence
from urllib.parse import quote

import aiohttp

from config.constants import REQUEST_TIMEOUT
from utils.errors import NetworkError

logger = logging.getLogger(__name__)


@dataclass
class RelayResponse:
    """A successful response and the relay that produced it."""

    url: str
    relay: str
    status: int
    text: str


def build_relay_url(template: str, target: str) -> str:
    """Fill a relay template with the raw and percent-encoded target URL."""
    return template.replace("{encoded}", quote(target, safe="")).replace("{url}", target)


class RelayClient:
    """Sequential fallback over relay endpoints for a shared aiohttp session."""

    def __init__(
        self,
        session: aiohttp.ClientSession,
        relays: Sequence[str],
        timeout: int = REQUEST_TIMEOUT,
    ) -> None:
        if not relays:
            raise ValueError("relays must be a non-empty sequence")
        self._session = session
        self.relays: List[str] = list(relays)
        self.timeout = timeout

    async def fetch(self, url: str) -> RelayResponse:
        """
        Fetch *url* through the relays in order.

        Raises ``NetworkError`` carrying the last observed HTTP status
        (``None`` if no relay ever answered) when every relay fails.
        """
        last_status: Optional[int] = None

        for template in self.relays:
            relay_url = build_relay_url(template, url)
            try:
                async with self._session.get(
                    relay_url,
                    timeout=aiohttp.ClientTimeout(total=self.timeout),
                ) as resp:
                    last_status = resp.status
                    if 200 <= resp.status < 300:
                        text = await resp.text(errors="replace")
                        logger.debug("Fetched %s via %s", url, template)
                        return RelayResponse(url=url, relay=template, status=resp.status, text=text)

                    logger.warning("Relay %s returned status %d for %s", template, resp.status, url)

            except asyncio.TimeoutError:
                logger.warning("Relay %s timed out for %s", template, url)
            except aiohttp.ClientError as exc:
                logger.warning("Relay %s error for %s: %s", template, url, exc)

        logger.error("All %d relays failed for %s", len(self.relays), url)
        raise NetworkError(f"All relays failed for {url}", status_code=last_status)

    async def fetch_text(self, url: str) -> str:
        """Fetch *url* and return only the body text."""
        response = await self.fetch(url)
        return response.text
