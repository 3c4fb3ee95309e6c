"""Concurrent RSS/Atom feed retrieval and normalization."""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Any, Iterable, List, Optional, Sequence
from urllib.parse import urlparse

import feedparser
import requests

from .config import DEFAULT_USER_AGENT
from .content import html_to_text, parse_timestamp
from .models import RawItem

LOGGER = logging.getLogger(__name__)


class FeedFetcher:
    """Fetch one syndication feed and normalize its entries into ``RawItem``s.

    Any transport or parse failure is logged and yields an empty list, so a
    broken endpoint never affects the others.
    """

    def __init__(
        self,
        timeout: float = 10.0,
        user_agent: str = DEFAULT_USER_AGENT,
        session: Optional[requests.Session] = None,
    ) -> None:
        self.timeout = timeout
        self.user_agent = user_agent
        self.session = session

    def fetch(self, url: str) -> List[RawItem]:
        LOGGER.info("Fetching from: %s", url)
        getter = self.session.get if self.session is not None else requests.get
        try:
            response = getter(url, timeout=self.timeout, headers={"User-Agent": self.user_agent})
            response.raise_for_status()
        except requests.RequestException as exc:
            LOGGER.error("Error fetching %s: %s", url, exc)
            return []

        try:
            items = self.parse(url, response.content)
        except Exception as exc:  # pragma: no cover - guard clause
            LOGGER.error("Error parsing %s: %s", url, exc)
            return []
        LOGGER.info("Fetched %d items from %s", len(items), url)
        return items

    def parse(self, url: str, payload: Any) -> List[RawItem]:
        """Normalize a raw feed document retrieved from ``url``."""

        feed = feedparser.parse(payload)
        if feed.bozo and not feed.entries:
            LOGGER.error("Malformed feed %s: %s", url, feed.get("bozo_exception"))
            return []

        source = feed.feed.get("title") or urlparse(url).hostname or url
        items: List[RawItem] = []
        for entry in feed.entries:
            title = entry.get("title")
            link = entry.get("link")
            if not title or not link:
                LOGGER.debug("Skipping entry without title or link in %s", url)
                continue
            published_at = parse_timestamp(entry.get("published")) or parse_timestamp(entry.get("updated"))
            items.append(
                RawItem(
                    title=title,
                    link=link,
                    published_at=published_at,
                    content=_entry_text(entry),
                    source=source,
                    guid=entry.get("id") or link,
                )
            )
        return items


def _entry_text(entry: Any) -> str:
    excerpt = html_to_text(entry.get("summary") or entry.get("description"))
    if excerpt:
        return excerpt
    for block in entry.get("content") or []:
        text = html_to_text(block.get("value"))
        if text:
            return text
    return ""


def collect_items(
    urls: Iterable[str],
    fetcher: Optional[FeedFetcher] = None,
    max_workers: Optional[int] = None,
) -> List[RawItem]:
    """Fetch every feed concurrently and flatten the results in endpoint order."""

    urls = list(urls)
    if not urls:
        LOGGER.warning("No feed endpoints configured")
        return []
    fetcher = fetcher or FeedFetcher()
    workers = max(1, min(max_workers or len(urls), len(urls)))

    with ThreadPoolExecutor(max_workers=workers) as executor:
        futures = [executor.submit(fetcher.fetch, url) for url in urls]
        results: List[Sequence[RawItem]] = []
        for url, future in zip(urls, futures):
            try:
                results.append(future.result())
            except Exception:
                LOGGER.exception("Fetcher failed unexpectedly for %s", url)
                results.append([])

    aggregated = [item for items in results for item in items]
    LOGGER.info("Total articles fetched: %d", len(aggregated))
    return aggregated


__all__ = ["FeedFetcher", "collect_items"]
