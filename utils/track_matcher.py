"""
Cross-platform track matcher.

Turns ``{title, artist}`` descriptors into YouTube video ids.  When a
YouTube Data API key is configured the official search endpoint is
tried first; otherwise, or when that call fails, the search results
page is scraped.  Searches run one at a time with a fixed pause in
between to stay clear of anti-automation defenses.
"""

from __future__ import annotations

import asyncio
import logging
import re
from typing import Any, List, Optional, Sequence
from urllib.parse import quote_plus

import aiohttp

from config.constants import REQUEST_TIMEOUT, SEARCH_DELAY, YOUTUBE_API_SEARCH_URL, YOUTUBE_SEARCH_URL
from utils.errors import NetworkError
from utils.models import TrackDescriptor, dedupe, is_media_id
from utils.relay_client import RelayClient

logger = logging.getLogger(__name__)

# Priority order: inline JSON field, watch-URL query parameter, relative path
SEARCH_RESULT_PATTERNS: List[re.Pattern] = [
    re.compile(r'"videoId":"([a-zA-Z0-9_-]{11})"'),
    re.compile(r"watch\?v=([a-zA-Z0-9_-]{11})"),
    re.compile(r"/watch\?v=([a-zA-Z0-9_-]{11})"),
]


def search_url(track: TrackDescriptor) -> str:
    """Search results page URL for *track*."""
    return YOUTUBE_SEARCH_URL.format(query=quote_plus(track.search_query))


def extract_first_video_id(page: str) -> Optional[str]:
    """Return the first video id found by the highest-priority pattern."""
    for pattern in SEARCH_RESULT_PATTERNS:
        match = pattern.search(page)
        if match and is_media_id(match.group(1)):
            return match.group(1)
    return None


def first_api_video_id(data: Any) -> Optional[str]:
    """Pull ``items[0].id.videoId`` out of a Data API search response."""
    try:
        video_id = data["items"][0]["id"]["videoId"]
    except (KeyError, IndexError, TypeError):
        return None
    return video_id if isinstance(video_id, str) and is_media_id(video_id) else None


class TrackMatcher:
    """Sequential search-based matcher backed by a ``RelayClient``.

    Pass ``session`` and ``api_key`` to enable the YouTube Data API path.
    """

    def __init__(
        self,
        relay_client: RelayClient,
        delay: float = SEARCH_DELAY,
        session: Optional[aiohttp.ClientSession] = None,
        api_key: str = "",
        timeout: int = REQUEST_TIMEOUT,
    ) -> None:
        self._relay = relay_client
        self._session = session
        self.api_key = api_key
        self.delay = delay
        self.timeout = timeout

    @property
    def uses_api(self) -> bool:
        return bool(self._session is not None and self.api_key)

    async def search_api(self, track: TrackDescriptor) -> Optional[str]:
        """Ask the YouTube Data API for the top video; ``None`` on any failure."""
        params = {
            "part": "snippet",
            "q": track.search_query,
            "type": "video",
            "maxResults": 1,
            "key": self.api_key,
        }
        try:
            async with self._session.get(
                YOUTUBE_API_SEARCH_URL,
                params=params,
                timeout=aiohttp.ClientTimeout(total=self.timeout),
            ) as resp:
                if resp.status != 200:
                    logger.warning("YouTube API returned %d for '%s'", resp.status, track.search_query)
                    return None
                data = await resp.json(content_type=None)
        except asyncio.TimeoutError:
            logger.warning("YouTube API timed out for '%s'", track.search_query)
            return None
        except aiohttp.ClientError as exc:
            logger.warning("YouTube API error for '%s': %s", track.search_query, exc)
            return None
        except ValueError:
            logger.warning("YouTube API sent malformed JSON for '%s'", track.search_query)
            return None

        return first_api_video_id(data)

    async def match(self, track: TrackDescriptor) -> Optional[str]:
        """Find a video id for one track, or ``None``."""
        if self.uses_api:
            video_id = await self.search_api(track)
            if video_id:
                logger.info("Found video ID %s for '%s' via API", video_id, track.search_query)
                return video_id
            logger.debug("API search gave nothing for '%s', scraping", track.search_query)

        try:
            page = await self._relay.fetch_text(search_url(track))
        except NetworkError as exc:
            logger.warning("Search failed for '%s': %s", track.search_query, exc)
            return None

        video_id = extract_first_video_id(page)
        if video_id:
            logger.info("Found video ID %s for '%s'", video_id, track.search_query)
        else:
            logger.warning("No video found for '%s'", track.search_query)
        return video_id

    async def match_all(self, tracks: Sequence[TrackDescriptor]) -> List[str]:
        """
        Match every track in order and return the found ids.

        Unmatched tracks are dropped; repeated ids keep their first
        position.  The pause is skipped after the last track.
        """
        found: List[str] = []
        total = len(tracks)
        for i, track in enumerate(tracks):
            logger.debug("Searching %d/%d: %s", i + 1, total, track.search_query)
            video_id = await self.match(track)
            if video_id:
                found.append(video_id)

            if i < total - 1 and self.delay > 0:
                await asyncio.sleep(self.delay)

        matched = dedupe(found)
        logger.info("Matched %d/%d tracks", len(matched), total)
        return matched
