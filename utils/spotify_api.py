"""
Spotify Web API resolver (client-credentials flow).

Every resolution performs a fresh token exchange; tokens are never
cached or reused across playlists.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Dict, List, Tuple
from urllib.parse import quote

import aiohttp

from config.constants import (
    REQUEST_TIMEOUT,
    SPOTIFY_API_BASE,
    SPOTIFY_TOKEN_URL,
    UNKNOWN_ARTIST,
)
from utils.errors import ConfigError, ParseError, SpotifyAPIError
from utils.models import TrackDescriptor

logger = logging.getLogger(__name__)


def _join_artists(track: Dict[str, Any]) -> str:
    names = [
        a.get("name", "")
        for a in track.get("artists") or []
        if isinstance(a, dict)
    ]
    joined = ", ".join(n for n in names if n)
    return joined or UNKNOWN_ARTIST


def tracks_from_items(items: List[Any]) -> List[TrackDescriptor]:
    """Map Web API playlist items to descriptors, skipping null/local tracks."""
    tracks: List[TrackDescriptor] = []
    for item in items:
        track = item.get("track") if isinstance(item, dict) else None
        if not isinstance(track, dict) or not track.get("name"):
            continue
        tracks.append(TrackDescriptor(title=track["name"], artist=_join_artists(track)))
    return tracks


class SpotifyAPI:
    """Async Spotify Web API client for public playlist reads."""

    def __init__(
        self,
        session: aiohttp.ClientSession,
        client_id: str,
        client_secret: str,
        timeout: int = REQUEST_TIMEOUT,
    ) -> None:
        if not client_id or not client_secret:
            raise ConfigError(
                "SPOTIFY_CLIENT_ID and SPOTIFY_CLIENT_SECRET are required for Spotify playlist URLs"
            )
        self._session = session
        self.client_id = client_id
        self.client_secret = client_secret
        self.timeout = timeout

    # ── Low-level request ────────────────────────────────────────────

    async def _request_json(self, method: str, url: str, what: str, **kwargs: Any) -> Dict[str, Any]:
        try:
            async with self._session.request(
                method,
                url,
                timeout=aiohttp.ClientTimeout(total=self.timeout),
                **kwargs,
            ) as resp:
                if resp.status != 200:
                    body = await resp.text(errors="replace")
                    logger.warning("Spotify %s returned %d: %s", what, resp.status, body[:200])
                    raise SpotifyAPIError(f"Spotify {what} failed", status_code=resp.status)

                try:
                    data = await resp.json(content_type=None)
                except ValueError as exc:
                    raise ParseError(f"Malformed Spotify {what} response") from exc

        except asyncio.TimeoutError as exc:
            raise SpotifyAPIError(f"Spotify {what} timed out") from exc
        except aiohttp.ClientError as exc:
            raise SpotifyAPIError(f"Spotify {what} failed: {exc}") from exc

        if not isinstance(data, dict):
            raise ParseError(f"Malformed Spotify {what} response")
        return data

    # ── Token ────────────────────────────────────────────────────────

    async def get_access_token(self) -> str:
        """Exchange the client credentials for a bearer token."""
        data = await self._request_json(
            "POST",
            SPOTIFY_TOKEN_URL,
            "token request",
            data={"grant_type": "client_credentials"},
            headers={"Authorization": aiohttp.BasicAuth(self.client_id, self.client_secret).encode()},
        )
        token = data.get("access_token")
        if not token:
            raise ParseError("Spotify token response missing access_token")
        return token

    # ── Playlist ─────────────────────────────────────────────────────

    async def get_playlist(self, playlist_id: str) -> Tuple[str, List[TrackDescriptor]]:
        """
        Fetch a playlist's name and full track list.

        Follows ``tracks.next`` until every page has been read.
        """
        token = await self.get_access_token()
        headers = {"Authorization": f"Bearer {token}"}

        data = await self._request_json(
            "GET",
            f"{SPOTIFY_API_BASE}/playlists/{quote(playlist_id, safe='')}",
            "playlist request",
            headers=headers,
        )
        name = data.get("name") or ""
        page = data.get("tracks")
        if not isinstance(page, dict):
            raise ParseError(f"Spotify playlist {playlist_id} has no tracks object")

        tracks: List[TrackDescriptor] = []
        while True:
            tracks.extend(tracks_from_items(page.get("items") or []))
            next_url = page.get("next")
            if not next_url:
                break
            page = await self._request_json(
                "GET",
                next_url,
                "tracks page request",
                headers=headers,
            )

        logger.info("Fetched %d tracks from Spotify playlist '%s'", len(tracks), name)
        return name, tracks
