"""
Error taxonomy for the conversion pipeline.

Only ``ConfigError`` and ``AggregateError`` abort a whole run; the
pipeline catches the others per reference and skips it.
"""

from __future__ import annotations

from typing import Optional


class ConverterError(Exception):
    """Base exception for all converter errors."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class InputError(ConverterError):
    """No playlist reference was supplied."""


class NetworkError(ConverterError):
    """Every relay attempt for one fetch failed.

    ``status_code`` is the last HTTP status observed, or ``None`` when no
    attempt ever received a response.
    """

    def __init__(self, message: str, status_code: Optional[int] = None):
        if status_code is None:
            message = f"{message} (no response)"
        else:
            message = f"{message} (last status {status_code})"
        super().__init__(message, status_code=status_code)


class SpotifyAPIError(NetworkError):
    """The Spotify Web API answered with a non-success response."""


class ParseError(ConverterError):
    """Fetched content held no usable name, ids or tracks."""


class ConfigError(ConverterError):
    """Required configuration is missing."""


class AggregateError(ConverterError):
    """No reference produced a single song."""
