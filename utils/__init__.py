from utils.pipeline import PlaylistPipeline
from utils.piped_export import PipedExport
from utils.relay_client import RelayClient
from utils.spotify_api import SpotifyAPI
from utils.track_matcher import TrackMatcher

__all__ = [
    "PlaylistPipeline",
    "PipedExport",
    "RelayClient",
    "SpotifyAPI",
    "TrackMatcher",
]
