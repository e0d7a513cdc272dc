"""
Data model shared by the classifier, extractors and exporter.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List

from config.constants import UNKNOWN_ARTIST

MEDIA_ID_RE = re.compile(r"^[A-Za-z0-9_-]{11}$")


def is_media_id(value: Any) -> bool:
    """Return True if *value* is a well-formed 11-character media id."""
    return isinstance(value, str) and bool(MEDIA_ID_RE.match(value))


def dedupe(ids: List[str]) -> List[str]:
    """Drop repeated ids, keeping first-seen order."""
    return list(dict.fromkeys(ids))


class SourceKind(str, Enum):
    YOUTUBE = "youtube"
    SPOTIFY_URL = "spotify-url"
    SPOTIFY_FREEFORM = "spotify-freeform"


@dataclass(frozen=True)
class PlaylistReference:
    """One classified unit of input."""

    raw: str
    kind: SourceKind
    identifier: str
    position: int  # 1-based input position


@dataclass(frozen=True)
class TrackDescriptor:
    """A title/artist pair used as a search key."""

    title: str
    artist: str = UNKNOWN_ARTIST

    @property
    def search_query(self) -> str:
        return f"{self.artist} {self.title}".strip()


@dataclass
class ExtractedPlaylist:
    """A playlist resolved from one reference.

    Carries native ``media_ids`` for sources that expose them, or
    ``tracks`` that still have to be matched to media ids.
    """

    playlist_id: str
    name: str
    media_ids: List[str] = field(default_factory=list)
    tracks: List[TrackDescriptor] = field(default_factory=list)

    @property
    def needs_matching(self) -> bool:
        return not self.media_ids and bool(self.tracks)


@dataclass(frozen=True)
class PlaylistSummary:
    id: str
    name: str
    n: int

    def to_dict(self) -> Dict[str, Any]:
        return {"id": self.id, "name": self.name, "n": self.n}


@dataclass(frozen=True)
class ResolvedSong:
    id: str
    timestamp: str
    list: str
    n: int

    def to_dict(self) -> Dict[str, Any]:
        return {"id": self.id, "timestamp": self.timestamp, "list": self.list, "n": self.n}
