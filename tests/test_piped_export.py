"""
Tests for the Piped Music export builder.
"""

import json
import os
import tempfile
import unittest
from datetime import datetime, timedelta, timezone

from utils.errors import AggregateError
from utils.piped_export import PipedExport, iso_timestamp

STAMP = "2024-05-01T12:00:00.000Z"


def _export():
    return PipedExport(clock=lambda: STAMP)


class TestIsoTimestamp(unittest.TestCase):
    def test_javascript_style(self):
        now = datetime(2024, 5, 1, 12, 0, 0, 123456, tzinfo=timezone.utc)
        self.assertEqual(iso_timestamp(now), "2024-05-01T12:00:00.123Z")

    def test_converts_to_utc(self):
        now = datetime(2024, 5, 1, 14, 0, 0, tzinfo=timezone(timedelta(hours=2)))
        self.assertEqual(iso_timestamp(now), "2024-05-01T12:00:00.000Z")

    def test_default_is_now(self):
        self.assertTrue(iso_timestamp().endswith("Z"))


class TestPipedExport(unittest.TestCase):
    def test_global_counter_spans_playlists(self):
        export = _export()
        export.add_playlist("PL1", "First", 1, ["aaaaaaaaaaa", "bbbbbbbbbbb"])
        export.add_playlist("PL2", "Second", 3, ["ccccccccccc"])
        doc = export.build()

        self.assertEqual(doc["playlists"], [
            {"id": "PL1", "name": "First", "n": 1},
            {"id": "PL2", "name": "Second", "n": 3},
        ])
        self.assertEqual([s["n"] for s in doc["songs"]], [1, 2, 3])
        self.assertEqual([s["list"] for s in doc["songs"]], ["PL1", "PL1", "PL2"])
        self.assertEqual(doc["songs"][0], {"id": "aaaaaaaaaaa", "timestamp": STAMP, "list": "PL1", "n": 1})

    def test_same_id_allowed_across_playlists(self):
        export = _export()
        export.add_playlist("PL1", "A", 1, ["aaaaaaaaaaa"])
        export.add_playlist("PL2", "B", 2, ["aaaaaaaaaaa"])
        self.assertEqual(export.song_count, 2)

    def test_dedup_within_playlist(self):
        export = _export()
        added = export.add_playlist("PL1", "A", 1, ["aaaaaaaaaaa", "aaaaaaaaaaa", "bbbbbbbbbbb"])
        self.assertEqual(added, 2)

    def test_malformed_ids_consume_no_ordinal(self):
        export = _export()
        export.add_playlist("PL1", "A", 1, ["aaaaaaaaaaa", "bad", "bbbbbbbbbbb"])
        self.assertEqual([s.n for s in export.songs], [1, 2])

    def test_empty_playlist_not_recorded(self):
        export = _export()
        self.assertEqual(export.add_playlist("PL1", "A", 1, []), 0)
        self.assertEqual(export.playlists, [])

    def test_build_without_songs_raises(self):
        with self.assertRaises(AggregateError):
            _export().build()

    def test_to_json_and_write(self):
        export = _export()
        export.add_playlist("PL1", "Café", 1, ["aaaaaaaaaaa"])
        self.assertIn("Café", export.to_json())

        with tempfile.TemporaryDirectory() as tmp:
            path = os.path.join(tmp, "out.json")
            export.write(path)
            with open(path, encoding="utf-8") as fh:
                self.assertEqual(json.load(fh), export.build())


if __name__ == "__main__":
    unittest.main()
