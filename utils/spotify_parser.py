"""
Parser for manually pasted Spotify playlist data.

Two strategies are tried in order over the same text:

1. **JSON** — an object with ``name`` and a ``tracks`` array, as produced
   by most playlist exporters (or a raw Web API playlist object).
2. **Text** — one track per line as ``Artist - Title`` (hyphen, en dash
   or em dash), with the first line (or a ``Playlist:`` label) naming
   the playlist.

Invalid JSON and JSON of the wrong shape both fall through to the text
strategy.
"""

from __future__ import annotations

import json
import logging
import re
from typing import Any, Dict, List, Optional, Tuple

from config.constants import DEFAULT_PLAYLIST_NAME, UNKNOWN_ARTIST
from utils.errors import ParseError
from utils.models import TrackDescriptor

logger = logging.getLogger(__name__)

PLAYLIST_LABEL_RE = re.compile(r"^playlist:\s*(.*)$", re.IGNORECASE)

# Spaced separators first so "Jay-Z - Song" splits on the spaced dash.
TRACK_LINE_PATTERNS = [
    re.compile(r"^(.+?)\s+[-–—]\s+(.+)$"),
    re.compile(r"^(.+?)\s*[-–—]\s*(.+)$"),
]


# ── JSON strategy ────────────────────────────────────────────────────

def _first_artist(track: Dict[str, Any]) -> str:
    """First listed artist, an explicit ``artist`` field, or the default."""
    artists = track.get("artists")
    if isinstance(artists, list) and artists:
        first = artists[0]
        if isinstance(first, dict) and first.get("name"):
            return str(first["name"]).strip()
        if isinstance(first, str) and first.strip():
            return first.strip()

    artist = track.get("artist")
    if isinstance(artist, str) and artist.strip():
        return artist.strip()

    return UNKNOWN_ARTIST


def _track_from_json(entry: Any) -> Optional[TrackDescriptor]:
    if not isinstance(entry, dict):
        return None
    # Web API playlist items wrap the track object
    if isinstance(entry.get("track"), dict):
        entry = entry["track"]

    title = entry.get("name") or entry.get("title")
    if not isinstance(title, str) or not title.strip():
        return None
    return TrackDescriptor(title=title.strip(), artist=_first_artist(entry))


def parse_json(text: str) -> Optional[Tuple[str, List[TrackDescriptor]]]:
    """Structured strategy; ``None`` when the text is not playlist JSON."""
    try:
        data = json.loads(text)
    except (json.JSONDecodeError, ValueError):
        return None

    if not isinstance(data, dict):
        return None

    tracks = data.get("tracks")
    # Web API playlist objects nest items under tracks.items
    if isinstance(tracks, dict):
        tracks = tracks.get("items")
    if not isinstance(tracks, list):
        logger.debug("JSON input has no tracks array, falling back to text")
        return None

    name = data.get("name")
    if not isinstance(name, str) or not name.strip():
        name = DEFAULT_PLAYLIST_NAME

    parsed = [t for t in (_track_from_json(entry) for entry in tracks) if t is not None]
    return name.strip(), parsed


# ── Text strategy ────────────────────────────────────────────────────

def parse_track_line(line: str) -> TrackDescriptor:
    """Parse ``Artist - Title``; unparseable lines become the title."""
    for pattern in TRACK_LINE_PATTERNS:
        match = pattern.match(line)
        if match:
            return TrackDescriptor(title=match.group(2).strip(), artist=match.group(1).strip())
    return TrackDescriptor(title=line.strip(), artist=UNKNOWN_ARTIST)


def parse_text(text: str) -> Tuple[str, List[TrackDescriptor]]:
    """
    Line-oriented strategy.

    Without a ``Playlist:`` label the first line is the name and every
    other line is a track.  With one, the (first) label names the
    playlist and every unlabeled line is a track.
    """
    lines = [line.strip() for line in text.splitlines()]
    lines = [line for line in lines if line]
    if not lines:
        return DEFAULT_PLAYLIST_NAME, []

    label_name: Optional[str] = None
    track_lines: List[str] = []
    for line in lines:
        match = PLAYLIST_LABEL_RE.match(line)
        if match:
            if label_name is None:
                label_name = match.group(1).strip()
            continue
        track_lines.append(line)

    if label_name is None:
        name, track_lines = track_lines[0], track_lines[1:]
    else:
        name = label_name or DEFAULT_PLAYLIST_NAME

    return name, [parse_track_line(line) for line in track_lines]


# ── Entry point ──────────────────────────────────────────────────────

def parse_spotify_data(text: str) -> Tuple[str, List[TrackDescriptor]]:
    """
    Parse pasted playlist data into ``(name, tracks)``.

    Raises ``ParseError`` when neither strategy yields a track.
    """
    result = parse_json(text)
    if result is None:
        result = parse_text(text)

    name, tracks = result
    if not tracks:
        raise ParseError("No tracks found in pasted playlist data")

    logger.info("Parsed %d tracks from playlist '%s'", len(tracks), name)
    return name, tracks


def manual_playlist_id(name: str) -> str:
    """Stable id for a pasted playlist, derived from its name."""
    slug = re.sub(r"[^a-z0-9]+", "-", name.lower()).strip("-")
    return f"spotify-{slug or 'playlist'}"
