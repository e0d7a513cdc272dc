"""
Application settings loaded from environment variables.
All configuration is centralized here for easy management.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import List

from dotenv import load_dotenv

from config.constants import (
    DEFAULT_OUTPUT_FILENAME,
    DEFAULT_RELAY_ENDPOINTS,
    REQUEST_TIMEOUT,
    SEARCH_DELAY,
)

load_dotenv()


def _parse_list(raw: str, sep: str = ",") -> List[str]:
    """Parse a comma-separated env string into a list of stripped strings."""
    return [item.strip() for item in raw.split(sep) if item.strip()]


def _parse_float(raw: str, default: float) -> float:
    raw = raw.strip()
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def _parse_int(raw: str, default: int) -> int:
    raw = raw.strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


@dataclass(frozen=True)
class Settings:
    """Immutable converter settings loaded once at startup."""

    # Spotify Web API (client-credentials flow)
    spotify_client_id: str = field(
        default_factory=lambda: os.getenv("SPOTIFY_CLIENT_ID", "").strip()
    )
    spotify_client_secret: str = field(
        default_factory=lambda: os.getenv("SPOTIFY_CLIENT_SECRET", "").strip()
    )

    # YouTube Data API v3 (optional; search falls back to scraping)
    youtube_api_key: str = field(
        default_factory=lambda: os.getenv("YOUTUBE_API_KEY", "").strip()
    )

    # Fetching
    relay_endpoints: List[str] = field(
        default_factory=lambda: _parse_list(os.getenv("RELAY_ENDPOINTS", ""))
        or list(DEFAULT_RELAY_ENDPOINTS)
    )
    request_timeout: int = field(
        default_factory=lambda: _parse_int(os.getenv("REQUEST_TIMEOUT", ""), REQUEST_TIMEOUT)
    )
    search_delay: float = field(
        default_factory=lambda: _parse_float(os.getenv("SEARCH_DELAY", ""), SEARCH_DELAY)
    )

    # Output / logging
    output_path: str = field(
        default_factory=lambda: os.getenv("OUTPUT_PATH", DEFAULT_OUTPUT_FILENAME)
    )
    log_level: str = field(default_factory=lambda: os.getenv("LOG_LEVEL", "INFO"))

    # ── Helpers ──────────────────────────────────────────────────────
    @property
    def has_spotify_credentials(self) -> bool:
        return bool(self.spotify_client_id and self.spotify_client_secret)

    def validate(self) -> List[str]:
        """Return a list of validation errors (empty = OK)."""
        errors: List[str] = []
        if not self.relay_endpoints:
            errors.append("RELAY_ENDPOINTS must contain at least one endpoint")
        for template in self.relay_endpoints:
            if "{url}" not in template and "{encoded}" not in template:
                errors.append(f"Relay endpoint has no {{url}} or {{encoded}} placeholder: {template}")
        if self.request_timeout <= 0:
            errors.append("REQUEST_TIMEOUT must be positive")
        if self.search_delay < 0:
            errors.append("SEARCH_DELAY must not be negative")
        return errors
