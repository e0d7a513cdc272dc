"""
Conversion pipeline: classify → resolve → match → export.

Each input reference is handled by the strategy for its source kind.
References are processed strictly one after another, in input order,
and a failure in one reference never stops the others.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Callable, Dict, List, Optional

import aiohttp

from config.constants import DEFAULT_PLAYLIST_NAME
from config.settings import Settings
from utils.errors import AggregateError, ConfigError, InputError, NetworkError, ParseError
from utils.models import ExtractedPlaylist, PlaylistReference, SourceKind
from utils.piped_export import PipedExport
from utils.platform_resolver import classify_input
from utils.relay_client import RelayClient
from utils.spotify_api import SpotifyAPI
from utils.spotify_parser import manual_playlist_id, parse_spotify_data
from utils.track_matcher import TrackMatcher
from utils.youtube_extractor import extract_playlist, playlist_page_url

logger = logging.getLogger(__name__)


# ── Strategies ───────────────────────────────────────────────────

class SourceStrategy(ABC):
    """Resolves one kind of playlist reference."""

    @property
    @abstractmethod
    def kind(self) -> SourceKind: ...

    @abstractmethod
    async def resolve(self, ref: PlaylistReference) -> ExtractedPlaylist: ...


class YouTubeScrapeStrategy(SourceStrategy):
    """Scrapes a YouTube playlist page for its name and video ids."""

    def __init__(self, relay_client: RelayClient) -> None:
        self._relay = relay_client

    @property
    def kind(self) -> SourceKind:
        return SourceKind.YOUTUBE

    async def resolve(self, ref: PlaylistReference) -> ExtractedPlaylist:
        page = await self._relay.fetch_text(playlist_page_url(ref.identifier))
        name, video_ids = extract_playlist(page)
        return ExtractedPlaylist(playlist_id=ref.identifier, name=name, media_ids=video_ids)


class SpotifyTextStrategy(SourceStrategy):
    """Parses pasted Spotify data (JSON or ``Artist - Title`` lines)."""

    @property
    def kind(self) -> SourceKind:
        return SourceKind.SPOTIFY_FREEFORM

    async def resolve(self, ref: PlaylistReference) -> ExtractedPlaylist:
        name, tracks = parse_spotify_data(ref.raw)
        return ExtractedPlaylist(playlist_id=manual_playlist_id(name), name=name, tracks=tracks)


class SpotifyAPIStrategy(SourceStrategy):
    """Reads a Spotify playlist through the Web API."""

    def __init__(self, api: SpotifyAPI) -> None:
        self._api = api

    @property
    def kind(self) -> SourceKind:
        return SourceKind.SPOTIFY_URL

    async def resolve(self, ref: PlaylistReference) -> ExtractedPlaylist:
        name, tracks = await self._api.get_playlist(ref.identifier)
        if not tracks:
            raise ParseError(f"Spotify playlist {ref.identifier} has no tracks")
        return ExtractedPlaylist(
            playlist_id=ref.identifier,
            name=name or DEFAULT_PLAYLIST_NAME,
            tracks=tracks,
        )


# ── Pipeline ─────────────────────────────────────────────────────

class PlaylistPipeline:
    """Sequential converter from playlist references to a Piped export."""

    def __init__(
        self,
        relay_client: RelayClient,
        matcher: TrackMatcher,
        spotify_api: Optional[SpotifyAPI] = None,
        clock: Optional[Callable[[], str]] = None,
    ) -> None:
        self.matcher = matcher
        self._clock = clock
        strategies: List[SourceStrategy] = [
            YouTubeScrapeStrategy(relay_client),
            SpotifyTextStrategy(),
        ]
        if spotify_api is not None:
            strategies.append(SpotifyAPIStrategy(spotify_api))
        self.strategies: Dict[SourceKind, SourceStrategy] = {s.kind: s for s in strategies}

    @classmethod
    def from_settings(cls, session: aiohttp.ClientSession, settings: Settings) -> "PlaylistPipeline":
        """Wire the pipeline's collaborators from *settings*."""
        relay = RelayClient(session, settings.relay_endpoints, timeout=settings.request_timeout)
        spotify_api = None
        if settings.has_spotify_credentials:
            spotify_api = SpotifyAPI(
                session,
                settings.spotify_client_id,
                settings.spotify_client_secret,
                timeout=settings.request_timeout,
            )
        matcher = TrackMatcher(
            relay,
            delay=settings.search_delay,
            session=session,
            api_key=settings.youtube_api_key,
            timeout=settings.request_timeout,
        )
        return cls(relay, matcher, spotify_api)

    async def resolve_reference(self, ref: PlaylistReference) -> ExtractedPlaylist:
        """Resolve one reference, matching descriptors to media ids if needed."""
        playlist = await self.strategies[ref.kind].resolve(ref)
        if playlist.needs_matching:
            playlist.media_ids = await self.matcher.match_all(playlist.tracks)
        return playlist

    async def convert(self, text: str, freeform: bool = False) -> PipedExport:
        """
        Convert raw input into a populated ``PipedExport``.

        Raises ``InputError`` for empty input, ``ConfigError`` when a
        Spotify URL is present without credentials (before any request),
        and ``AggregateError`` when no reference produced a song.
        """
        if not text or not text.strip():
            raise InputError("Please enter at least one playlist reference")

        refs = classify_input(text, freeform=freeform)

        missing = sorted({r.kind.value for r in refs if r is not None and r.kind not in self.strategies})
        if missing:
            raise ConfigError(
                "Spotify credentials (SPOTIFY_CLIENT_ID / SPOTIFY_CLIENT_SECRET) "
                f"are required for: {', '.join(missing)}"
            )

        export = PipedExport(clock=self._clock)
        skipped = 0

        for ref in refs:
            if ref is None:
                skipped += 1
                continue

            logger.info("Processing reference #%d (%s)", ref.position, ref.kind.value)
            try:
                playlist = await self.resolve_reference(ref)
            except (NetworkError, ParseError) as exc:
                logger.warning("Skipping reference #%d: %s", ref.position, exc)
                skipped += 1
                continue

            added = export.add_playlist(playlist.playlist_id, playlist.name, ref.position, playlist.media_ids)
            if not added:
                skipped += 1

        logger.info(
            "Converted %d playlist(s), %d song(s); %d reference(s) skipped",
            len(export.playlists),
            export.song_count,
            skipped,
        )
        if not export.song_count:
            raise AggregateError("No songs could be extracted from any playlist")
        return export
