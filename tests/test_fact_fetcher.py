import unittest
from unittest.mock import patch

import requests

from factvault.ingestion.fact_types import FactSource, SourceKind
from factvault.ingestion.fetcher import build_session, fetch_source
from factvault.ingestion.parsers import parse_fact_list, parse_reddit_listing

from fact_fakes import FakeResponse, FakeSession


URL = "https://facts.example.com/api"


def _fact_list_source(url=URL):
    return FactSource(name="List API", kind=SourceKind.STRUCTURED_API, url=url, category="mixed", parser=parse_fact_list)


class TestFetchSource(unittest.TestCase):
    def test_parses_json_payload(self):
        session = FakeSession({URL: FakeResponse(["Bananas are berries but strawberries are not."])})
        facts = fetch_source(_fact_list_source(), session=session)
        self.assertEqual(len(facts), 1)
        self.assertEqual(session.calls, [URL])

    def test_http_error_is_isolated(self):
        session = FakeSession({URL: FakeResponse({"error": "boom"}, status_code=503)})
        with self.assertLogs("factvault.ingestion.fetcher", level="ERROR") as logs:
            facts = fetch_source(_fact_list_source(), session=session)
        self.assertEqual(facts, [])
        self.assertIn("List API", logs.output[0])

    def test_connection_error_is_isolated(self):
        session = FakeSession({URL: requests.ConnectionError("unreachable")})
        with self.assertLogs("factvault.ingestion.fetcher", level="ERROR"):
            self.assertEqual(fetch_source(_fact_list_source(), session=session), [])

    def test_malformed_payload_is_isolated(self):
        source = FactSource(name="Reddit", kind=SourceKind.STRUCTURED_API, url=URL, category="mixed", parser=parse_reddit_listing)
        session = FakeSession({URL: FakeResponse({"message": "Too Many Requests"})})
        with self.assertLogs("factvault.ingestion.fetcher", level="ERROR"):
            self.assertEqual(fetch_source(source, session=session), [])

    def test_invalid_json_is_isolated(self):
        session = FakeSession({URL: FakeResponse("<html>maintenance</html>")})
        with self.assertLogs("factvault.ingestion.fetcher", level="ERROR"):
            self.assertEqual(fetch_source(_fact_list_source(), session=session), [])

    def test_payload_decoding_follows_kind(self):
        seen = []

        def capture(payload, source, rng):
            seen.append(payload)
            return []

        for kind in (SourceKind.FEED, SourceKind.SCRAPE):
            source = FactSource(name=kind.value, kind=kind, url=URL, category="nature", parser=capture)
            fetch_source(source, session=FakeSession({URL: FakeResponse("<rss/>")}))
        self.assertEqual(seen, [b"<rss/>", "<rss/>"])

    def test_own_session_is_closed(self):
        owned = FakeSession({URL: FakeResponse(["Bananas are berries but strawberries are not."])})
        with patch("factvault.ingestion.fetcher.build_session", return_value=owned):
            facts = fetch_source(_fact_list_source())
        self.assertEqual(len(facts), 1)
        self.assertTrue(owned.closed)

    def test_own_session_is_closed_on_failure(self):
        owned = FakeSession({URL: requests.ConnectionError("unreachable")})
        with patch("factvault.ingestion.fetcher.build_session", return_value=owned):
            with self.assertLogs("factvault.ingestion.fetcher", level="ERROR"):
                self.assertEqual(fetch_source(_fact_list_source()), [])
        self.assertTrue(owned.closed)

    def test_caller_session_is_left_open(self):
        session = FakeSession({URL: FakeResponse([])})
        fetch_source(_fact_list_source(), session=session)
        self.assertFalse(session.closed)

    def test_session_sets_user_agent(self):
        self.assertEqual(build_session("FactVault-test").headers["User-Agent"], "FactVault-test")


if __name__ == "__main__":
    unittest.main()
