"""
Converter-wide constants and default values.
"""

# ── Output ───────────────────────────────────────────────────────────
DEFAULT_OUTPUT_FILENAME = "piped-music-playlist.json"
DEFAULT_PLAYLIST_NAME = "Untitled Playlist"
UNKNOWN_ARTIST = "Unknown Artist"
JSON_INDENT = 2

# ── Relays ───────────────────────────────────────────────────────────
# ``{url}`` is replaced with the raw target URL, ``{encoded}`` with the
# percent-encoded target URL.  A bare ``{url}`` template fetches directly.
DEFAULT_RELAY_ENDPOINTS = [
    "https://corsproxy.io/?{encoded}",
    "https://cors-anywhere.herokuapp.com/{url}",
    "https://api.codetabs.com/v1/proxy?quest={encoded}",
]
REQUEST_TIMEOUT = 10  # seconds per relay attempt
USER_AGENT = (
    "Mozilla/5.0 (X11; Linux x86_64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/124.0 Safari/537.36"
)

# ── YouTube ──────────────────────────────────────────────────────────
YOUTUBE_PLAYLIST_URL = "https://www.youtube.com/playlist?list={list_id}"
YOUTUBE_SEARCH_URL = "https://www.youtube.com/results?search_query={query}"
YOUTUBE_API_SEARCH_URL = "https://www.googleapis.com/youtube/v3/search"
YOUTUBE_TITLE_SUFFIX = " - YouTube"
SEARCH_DELAY = 1.0  # seconds between successive track searches

# ── Spotify ──────────────────────────────────────────────────────────
SPOTIFY_TOKEN_URL = "https://accounts.spotify.com/api/token"
SPOTIFY_API_BASE = "https://api.spotify.com/v1"
