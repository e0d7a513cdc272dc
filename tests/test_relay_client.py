"""
Tests for the fetch-with-fallback relay client.
"""

import asyncio
import unittest

import aiohttp

from fakes import FakeResponse, FakeSession
from utils.errors import NetworkError
from utils.relay_client import RelayClient, build_relay_url

RELAYS = [
    "https://relay-a.test/?{encoded}",
    "https://relay-b.test/{url}",
    "https://relay-c.test/proxy?quest={encoded}",
]
TARGET = "https://www.youtube.com/playlist?list=PL1"


class TestBuildRelayUrl(unittest.TestCase):
    def test_encoded_placeholder(self):
        self.assertEqual(
            build_relay_url("https://r.test/?{encoded}", "https://x.com/a?b=1"),
            "https://r.test/?https%3A%2F%2Fx.com%2Fa%3Fb%3D1",
        )

    def test_raw_placeholder(self):
        self.assertEqual(build_relay_url("https://r.test/{url}", "https://x.com/a"), "https://r.test/https://x.com/a")

    def test_direct_template(self):
        self.assertEqual(build_relay_url("{url}", TARGET), TARGET)


class TestRelayClient(unittest.IsolatedAsyncioTestCase):
    def test_requires_relays(self):
        with self.assertRaises(ValueError):
            RelayClient(FakeSession(), [])

    async def test_first_success_wins(self):
        session = FakeSession([FakeResponse(200, "page")])
        client = RelayClient(session, RELAYS)
        response = await client.fetch(TARGET)
        self.assertEqual(response.text, "page")
        self.assertEqual(response.relay, RELAYS[0])
        self.assertEqual(len(session.calls), 1)

    async def test_third_relay_succeeds_after_two_failures(self):
        session = FakeSession([
            FakeResponse(503),
            aiohttp.ClientConnectionError("refused"),
            FakeResponse(200, "third"),
        ])
        client = RelayClient(session, RELAYS + ["https://relay-d.test/{url}"])
        response = await client.fetch(TARGET)
        self.assertEqual(response.text, "third")
        self.assertEqual(response.relay, RELAYS[2])
        self.assertEqual(len(session.calls), 3)

    async def test_all_fail_carries_last_status(self):
        session = FakeSession([FakeResponse(500), FakeResponse(403), aiohttp.ClientConnectionError("x")])
        client = RelayClient(session, RELAYS)
        with self.assertRaises(NetworkError) as ctx:
            await client.fetch(TARGET)
        self.assertEqual(ctx.exception.status_code, 403)
        self.assertIn("last status 403", str(ctx.exception))

    async def test_all_raise_reports_no_response(self):
        session = FakeSession([
            aiohttp.ClientConnectionError("a"),
            asyncio.TimeoutError(),
            aiohttp.ClientConnectionError("c"),
        ])
        client = RelayClient(session, RELAYS)
        with self.assertRaises(NetworkError) as ctx:
            await client.fetch(TARGET)
        self.assertIsNone(ctx.exception.status_code)
        self.assertIn("no response", str(ctx.exception))

    async def test_relays_tried_in_order(self):
        session = FakeSession([FakeResponse(404), FakeResponse(404), FakeResponse(404)])
        client = RelayClient(session, RELAYS)
        with self.assertRaises(NetworkError):
            await client.fetch(TARGET)
        self.assertTrue(session.urls[0].startswith("https://relay-a.test/"))
        self.assertEqual(session.urls[1], f"https://relay-b.test/{TARGET}")
        self.assertTrue(session.urls[2].startswith("https://relay-c.test/"))

    async def test_fetch_text(self):
        session = FakeSession([FakeResponse(204, "")])
        client = RelayClient(session, RELAYS)
        self.assertEqual(await client.fetch_text(TARGET), "")

    async def test_undecodable_body_is_replaced_not_raised(self):
        session = FakeSession([FakeResponse(200, body=b"\xff\xfe\xfa garbage")])
        client = RelayClient(session, RELAYS)
        text = await client.fetch_text(TARGET)
        self.assertIn("garbage", text)
        self.assertIn("�", text)
        self.assertEqual(len(session.calls), 1)


if __name__ == "__main__":
    unittest.main()
