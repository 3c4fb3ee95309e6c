"""Tests for feed retrieval, normalization and concurrent fan-out."""

from __future__ import annotations

import threading
import unittest
from datetime import datetime, timezone
from unittest.mock import MagicMock, patch

import requests

from ai_newsletter.fetchers import FeedFetcher, collect_items
from ai_newsletter.models import RawItem

RSS_TEMPLATE = """<?xml version="1.0" encoding="UTF-8"?>
<rss version="2.0" xmlns:content="http://purl.org/rss/1.0/modules/content/">
<channel>
<title>{feed_title}</title>
<link>https://example.com/</link>
{items}
</channel>
</rss>"""

ITEM_TEMPLATE = """<item>
<title>{title}</title>
<link>{link}</link>
<pubDate>Mon, 19 Oct 2026 08:00:00 GMT</pubDate>
<description>{description}</description>
{extra}
</item>"""


def make_feed(feed_title: str = "Feed A", titles=("First",), extra: str = "", description: str = "Plain text") -> bytes:
    items = "\n".join(
        ITEM_TEMPLATE.format(
            title=title,
            link=f"https://example.com/{index}",
            description=description,
            extra=extra,
        )
        for index, title in enumerate(titles)
    )
    return RSS_TEMPLATE.format(feed_title=feed_title, items=items).encode("utf-8")


def fake_response(payload: bytes) -> MagicMock:
    response = MagicMock()
    response.content = payload
    response.raise_for_status.return_value = None
    return response


class TestFeedParsing(unittest.TestCase):
    def test_entries_are_normalized(self):
        items = FeedFetcher().parse("https://feeds.example.com/rss", make_feed(titles=("Hello",)))

        self.assertEqual(len(items), 1)
        item = items[0]
        self.assertEqual(item.title, "Hello")
        self.assertEqual(item.link, "https://example.com/0")
        self.assertEqual(item.source, "Feed A")
        self.assertEqual(item.content, "Plain text")
        self.assertEqual(item.published_at, datetime(2026, 10, 19, 8, 0, tzinfo=timezone.utc))

    def test_guid_falls_back_to_link(self):
        items = FeedFetcher().parse("https://feeds.example.com/rss", make_feed())
        self.assertEqual(items[0].guid, "https://example.com/0")

    def test_declared_guid_is_used(self):
        payload = make_feed(extra='<guid isPermaLink="false">abc-123</guid>')
        items = FeedFetcher().parse("https://feeds.example.com/rss", payload)
        self.assertEqual(items[0].guid, "abc-123")

    def test_source_falls_back_to_host(self):
        payload = make_feed(feed_title="")
        items = FeedFetcher().parse("https://feeds.example.com/rss", payload)
        self.assertEqual(items[0].source, "feeds.example.com")

    def test_description_wins_over_full_content(self):
        payload = make_feed(
            description="Short teaser about chips.",
            extra="<content:encoded><![CDATA[<p>Long body mentioning LLM, GPT and OpenAI.</p>]]></content:encoded>",
        )
        items = FeedFetcher().parse("https://feeds.example.com/rss", payload)
        self.assertEqual(items[0].content, "Short teaser about chips.")

    def test_full_content_used_when_description_missing(self):
        payload = make_feed(extra="<content:encoded><![CDATA[<p>Rich <b>body</b></p>]]></content:encoded>")
        payload = payload.replace(b"<description>Plain text</description>", b"")
        items = FeedFetcher().parse("https://feeds.example.com/rss", payload)
        self.assertEqual(items[0].content, "Rich body")

    def test_description_markup_is_stripped(self):
        payload = make_feed(description="&lt;p&gt;Teaser &lt;b&gt;text&lt;/b&gt;&lt;/p&gt;")
        items = FeedFetcher().parse("https://feeds.example.com/rss", payload)
        self.assertEqual(items[0].content, "Teaser text")

    def test_missing_timestamp_is_none(self):
        payload = make_feed().replace(b"<pubDate>Mon, 19 Oct 2026 08:00:00 GMT</pubDate>", b"")
        items = FeedFetcher().parse("https://feeds.example.com/rss", payload)
        self.assertIsNone(items[0].published_at)

    def test_malformed_payload_yields_nothing(self):
        items = FeedFetcher().parse("https://feeds.example.com/rss", b"this is not a feed <<<")
        self.assertEqual(items, [])


class TestFeedFetcher(unittest.TestCase):
    def test_sends_timeout_and_user_agent(self):
        with patch("ai_newsletter.fetchers.requests.get", return_value=fake_response(make_feed())) as mock_get:
            FeedFetcher(timeout=7, user_agent="Bot/2.0").fetch("https://feeds.example.com/rss")

        _, kwargs = mock_get.call_args
        self.assertEqual(kwargs["timeout"], 7)
        self.assertEqual(kwargs["headers"]["User-Agent"], "Bot/2.0")

    def test_timeout_yields_empty_list(self):
        with patch("ai_newsletter.fetchers.requests.get", side_effect=requests.Timeout("slow")):
            self.assertEqual(FeedFetcher().fetch("https://feeds.example.com/rss"), [])

    def test_http_error_yields_empty_list(self):
        response = fake_response(b"")
        response.raise_for_status.side_effect = requests.HTTPError("503")
        with patch("ai_newsletter.fetchers.requests.get", return_value=response):
            self.assertEqual(FeedFetcher().fetch("https://feeds.example.com/rss"), [])


class TestCollectItems(unittest.TestCase):
    def test_empty_endpoint_set(self):
        self.assertEqual(collect_items([]), [])

    def test_failed_endpoints_do_not_affect_others(self):
        feeds = {
            "https://a.example.com/rss": make_feed("A", ("a1", "a2")),
            "https://c.example.com/rss": make_feed("C", ("c1",)),
        }

        def fake_get(url, **kwargs):
            if url not in feeds:
                raise requests.ConnectionError("unreachable")
            return fake_response(feeds[url])

        urls = [
            "https://a.example.com/rss",
            "https://b.example.com/rss",
            "https://c.example.com/rss",
            "https://d.example.com/rss",
        ]
        with patch("ai_newsletter.fetchers.requests.get", side_effect=fake_get):
            items = collect_items(urls)

        self.assertEqual([item.title for item in items], ["a1", "a2", "c1"])

    def test_unexpected_fetcher_exception_is_contained(self):
        class ExplodingFetcher(FeedFetcher):
            def fetch(self, url):
                if "bad" in url:
                    raise RuntimeError("boom")
                return [RawItem("t", url, None, "", "s", url)]

        items = collect_items(["https://bad.example.com", "https://ok.example.com"], fetcher=ExplodingFetcher())
        self.assertEqual([item.link for item in items], ["https://ok.example.com"])

    def test_endpoints_are_fetched_concurrently(self):
        urls = [f"https://feed{index}.example.com/rss" for index in range(4)]
        barrier = threading.Barrier(len(urls), timeout=5)

        class BarrierFetcher(FeedFetcher):
            def fetch(self, url):
                # Deadlocks (and breaks the barrier) unless all fetches overlap.
                barrier.wait()
                return [RawItem("t", url, None, "", "s", url)]

        items = collect_items(urls, fetcher=BarrierFetcher())
        self.assertEqual([item.link for item in items], urls)


if __name__ == "__main__":
    unittest.main()
