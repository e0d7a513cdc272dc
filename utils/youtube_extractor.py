"""
YouTube playlist page extraction.

Pulls a display name and the ordered, de-duplicated video ids out of a
playlist page's HTML.  YouTube's markup changes often, so every field
is read through an ordered list of pattern strategies: supporting a
new layout means appending a strategy, not touching callers.
"""

from __future__ import annotations

import html
import json
import logging
import re
from dataclasses import dataclass
from typing import Callable, List, Optional, Tuple

from config.constants import DEFAULT_PLAYLIST_NAME, YOUTUBE_PLAYLIST_URL, YOUTUBE_TITLE_SUFFIX
from utils.errors import ParseError
from utils.models import dedupe

logger = logging.getLogger(__name__)

# A JSON string body, escapes included
_JSON_STR = r'((?:[^"\\]|\\.)*)'


def _decode_json_string(raw: str) -> str:
    """Decode JSON escapes (``\\u0026``, ``\\"``) in a captured string body."""
    try:
        return json.loads(f'"{raw}"')
    except json.JSONDecodeError:
        return raw


@dataclass(frozen=True)
class PatternStrategy:
    """One way of finding a field in page markup."""

    label: str
    pattern: re.Pattern
    decode: Callable[[str], str] = html.unescape

    def search(self, text: str) -> Optional[str]:
        match = self.pattern.search(text)
        if not match:
            return None
        return self.decode(match.group(1))


# ── Name strategies (priority order) ────────────────────────────────
NAME_STRATEGIES: List[PatternStrategy] = [
    PatternStrategy(
        "og:title",
        re.compile(r'<meta\s+(?:property|name)="og:title"\s+content="([^"]*)"', re.IGNORECASE),
    ),
    PatternStrategy(
        "document title",
        re.compile(r"<title[^>]*>([^<]*)</title>", re.IGNORECASE),
    ),
    PatternStrategy(
        "inline title",
        re.compile(r'"title":"' + _JSON_STR + r'","description"'),
        _decode_json_string,
    ),
    PatternStrategy(
        "inline playlistTitle",
        re.compile(r'"playlistTitle":"' + _JSON_STR + r'"'),
        _decode_json_string,
    ),
]

# ── Video id strategy ───────────────────────────────────────────────
VIDEO_ID_PATTERN = re.compile(r'"videoId":"([a-zA-Z0-9_-]{11})"')

_TITLE_SUFFIX_RE = re.compile(r"\s*" + re.escape(YOUTUBE_TITLE_SUFFIX.strip()) + r"$")


def playlist_page_url(list_id: str) -> str:
    """Canonical playlist page URL for a ``list=`` id."""
    return YOUTUBE_PLAYLIST_URL.format(list_id=list_id)


def _clean_name(name: str) -> str:
    return _TITLE_SUFFIX_RE.sub("", name.strip()).strip()


def extract_playlist_name(page: str) -> str:
    """Return the playlist name, or the default when no strategy matches."""
    for strategy in NAME_STRATEGIES:
        found = strategy.search(page)
        if found is None:
            continue
        name = _clean_name(found)
        if name:
            logger.debug("Playlist name found via %s: %s", strategy.label, name)
            return name
    return DEFAULT_PLAYLIST_NAME


def extract_video_ids(page: str) -> List[str]:
    """Every inline ``"videoId"`` in first-seen order, without repeats."""
    return dedupe(VIDEO_ID_PATTERN.findall(page))


def extract_playlist(page: str) -> Tuple[str, List[str]]:
    """
    Extract ``(name, video_ids)`` from a playlist page.

    Raises ``ParseError`` when the page holds no video ids at all.
    """
    video_ids = extract_video_ids(page)
    if not video_ids:
        raise ParseError("No video IDs found in playlist")
    name = extract_playlist_name(page)
    logger.info("Extracted %d video ids from playlist '%s'", len(video_ids), name)
    return name, video_ids
