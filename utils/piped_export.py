"""
Piped Music export document builder.

Collects playlists in input order and numbers their songs with one
global counter that is never reset between playlists.
"""

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from typing import Any, Callable, Dict, List, Optional, Sequence

from config.constants import JSON_INDENT
from utils.errors import AggregateError
from utils.models import PlaylistSummary, ResolvedSong, dedupe, is_media_id

logger = logging.getLogger(__name__)


def iso_timestamp(now: Optional[datetime] = None) -> str:
    """UTC ISO-8601 with millisecond precision and a ``Z`` suffix."""
    now = now or datetime.now(timezone.utc)
    return now.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


class PipedExport:
    """Accumulates playlist summaries and song records for one run."""

    def __init__(self, clock: Optional[Callable[[], str]] = None) -> None:
        self._clock = clock or iso_timestamp
        self.playlists: List[PlaylistSummary] = []
        self.songs: List[ResolvedSong] = []

    @property
    def song_count(self) -> int:
        return len(self.songs)

    def add_playlist(
        self,
        playlist_id: str,
        name: str,
        position: int,
        media_ids: Sequence[str],
    ) -> int:
        """
        Add one playlist and its songs.

        *position* is the 1-based input position of the reference.
        Returns the number of songs added; a playlist with no valid
        ids is not recorded at all.
        """
        valid: List[str] = []
        for media_id in dedupe(list(media_ids)):
            if is_media_id(media_id):
                valid.append(media_id)
            else:
                logger.warning("Dropping malformed media id %r from '%s'", media_id, name)

        if not valid:
            logger.warning("Playlist '%s' has no songs, not exporting it", name)
            return 0

        self.playlists.append(PlaylistSummary(id=playlist_id, name=name, n=position))
        for media_id in valid:
            self.songs.append(
                ResolvedSong(
                    id=media_id,
                    timestamp=self._clock(),
                    list=playlist_id,
                    n=len(self.songs) + 1,
                )
            )
        return len(valid)

    def build(self) -> Dict[str, Any]:
        """Materialise the document; ``AggregateError`` if it has no songs."""
        if not self.songs:
            raise AggregateError("No songs could be extracted from any playlist")
        return {
            "playlists": [p.to_dict() for p in self.playlists],
            "songs": [s.to_dict() for s in self.songs],
        }

    def to_json(self, indent: Optional[int] = JSON_INDENT) -> str:
        return json.dumps(self.build(), indent=indent, ensure_ascii=False)

    def write(self, path: str) -> None:
        """Write the serialized document to *path*."""
        payload = self.to_json()
        with open(path, "w", encoding="utf-8") as fh:
            fh.write(payload + "\n")
        logger.info("Wrote %d songs to %s", self.song_count, path)
