"""
Platform URL classifier for playlist references.

Decides which source a line of input belongs to and pulls out the
platform-specific playlist identifier.

Supported references:
    • YouTube / YouTube Music playlists  (any URL with a ``list=`` parameter)
    • Spotify playlists                  (open.spotify.com/playlist/…, spotify:playlist:…)
    • Spotify freeform text              (a whole pasted block, never per line)
"""

from __future__ import annotations

import logging
import re
from typing import List, Optional, Tuple

from utils.models import PlaylistReference, SourceKind

logger = logging.getLogger(__name__)

# =====================================================================
#  URL regex patterns
# =====================================================================

# ── YouTube ──────────────────────────────────────────────────────────
# youtube.com/playlist?list=XXXX  |  youtube.com/watch?v=…&list=XXXX
YT_PLAYLIST_PATTERN = re.compile(r"[?&]list=([a-zA-Z0-9_-]+)")

# ── Spotify ──────────────────────────────────────────────────────────
SPOTIFY_PLAYLIST_PATTERN = re.compile(
    r"(?:https?://)?open\.spotify\.com/(?:intl-[\w-]+/)?(?:embed/)?playlist/([a-zA-Z0-9]+)"
)
# spotify:playlist:XXXX (desktop "Copy Spotify URI")
SPOTIFY_URI_PATTERN = re.compile(r"spotify:playlist:([a-zA-Z0-9]+)")


# =====================================================================
#  Public helpers
# =====================================================================

def is_playlist_url(text: str) -> bool:
    """Check if the given text contains a recognised playlist reference."""
    text = text.strip()
    return bool(
        YT_PLAYLIST_PATTERN.search(text)
        or SPOTIFY_PLAYLIST_PATTERN.search(text)
        or SPOTIFY_URI_PATTERN.search(text)
    )


def split_references(text: str) -> List[Tuple[int, str]]:
    """Split raw input into ``(position, line)`` pairs.

    Blank lines are dropped before numbering, so ``position`` is the
    1-based index among the non-empty lines.
    """
    lines = [line.strip() for line in text.splitlines()]
    return list(enumerate((line for line in lines if line), start=1))


def classify(line: str, position: int = 1) -> Optional[PlaylistReference]:
    """
    Classify one trimmed input line.

    Rules are checked in order: YouTube ``list=`` parameter, then a
    Spotify playlist path.  Returns ``None`` for anything else.
    """
    line = line.strip()

    # ── YouTube ──────────────────────────────────────────────────
    match = YT_PLAYLIST_PATTERN.search(line)
    if match:
        return PlaylistReference(line, SourceKind.YOUTUBE, match.group(1), position)

    # ── Spotify (URL or URI) ─────────────────────────────────────
    match = SPOTIFY_PLAYLIST_PATTERN.search(line) or SPOTIFY_URI_PATTERN.search(line)
    if match:
        return PlaylistReference(line, SourceKind.SPOTIFY_URL, match.group(1), position)

    return None


def classify_input(text: str, freeform: bool = False) -> List[Optional[PlaylistReference]]:
    """
    Classify a whole input block.

    In freeform mode the entire block is one Spotify-freeform reference,
    unless it is a single line that already classifies as a playlist URL.
    Otherwise each non-empty line is classified on its own; the result
    keeps one slot per line, with ``None`` for unrecognized lines so
    positions stay aligned with the input.
    """
    if freeform:
        block = text.strip()
        if not block:
            return []
        if "\n" not in block:
            ref = classify(block, 1)
            if ref is not None:
                return [ref]
        return [PlaylistReference(block, SourceKind.SPOTIFY_FREEFORM, "", 1)]

    refs: List[Optional[PlaylistReference]] = []
    for position, line in split_references(text):
        ref = classify(line, position)
        if ref is None:
            logger.warning("Skipping unrecognized reference #%d: %s", position, line[:100])
        refs.append(ref)
    return refs
