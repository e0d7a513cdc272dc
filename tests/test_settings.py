"""
Tests for environment-backed settings.
"""

import os
import unittest
from unittest.mock import patch

from config.constants import DEFAULT_RELAY_ENDPOINTS, REQUEST_TIMEOUT, SEARCH_DELAY
from config.settings import Settings


class TestSettings(unittest.TestCase):
    @patch.dict(os.environ, {}, clear=True)
    def test_defaults(self):
        settings = Settings()
        self.assertEqual(settings.relay_endpoints, DEFAULT_RELAY_ENDPOINTS)
        self.assertEqual(settings.request_timeout, REQUEST_TIMEOUT)
        self.assertEqual(settings.search_delay, SEARCH_DELAY)
        self.assertFalse(settings.has_spotify_credentials)
        self.assertEqual(settings.youtube_api_key, "")
        self.assertEqual(settings.validate(), [])

    @patch.dict(os.environ, {
        "SPOTIFY_CLIENT_ID": " abc ",
        "SPOTIFY_CLIENT_SECRET": "xyz",
        "RELAY_ENDPOINTS": "{url}, https://r.test/?{encoded}",
        "SEARCH_DELAY": "2.5",
        "REQUEST_TIMEOUT": "oops",
        "YOUTUBE_API_KEY": " yt-key ",
    }, clear=True)
    def test_from_environment(self):
        settings = Settings()
        self.assertEqual(settings.spotify_client_id, "abc")
        self.assertTrue(settings.has_spotify_credentials)
        self.assertEqual(settings.relay_endpoints, ["{url}", "https://r.test/?{encoded}"])
        self.assertEqual(settings.search_delay, 2.5)
        self.assertEqual(settings.youtube_api_key, "yt-key")
        self.assertEqual(settings.request_timeout, REQUEST_TIMEOUT)

    def test_validate_bad_template(self):
        settings = Settings(relay_endpoints=["https://no-placeholder.test/"], search_delay=-1)
        errors = settings.validate()
        self.assertEqual(len(errors), 2)

    def test_validate_empty_relays(self):
        self.assertIn(
            "RELAY_ENDPOINTS must contain at least one endpoint",
            Settings(relay_endpoints=[]).validate(),
        )


if __name__ == "__main__":
    unittest.main()
