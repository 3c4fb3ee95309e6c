"""High-level orchestration for building and publishing the daily edition."""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import List, Optional

from .config import Config
from .content import as_utc
from .fetchers import FeedFetcher, collect_items
from .models import Article, Edition, NewsHistory
from .ranking import filter_recent, rank_items, select_top
from .state import HistoryStore, upsert_edition
from .summarizer import Simplifier, simplify_articles

LOGGER = logging.getLogger(__name__)


class PublishStatus(str, enum.Enum):
    PUBLISHED = "published"
    NO_CONTENT = "no_content"


@dataclass
class Selection:
    """The day's ranked article set plus pipeline counts."""

    articles: List[Article] = field(default_factory=list)
    fetched: int = 0
    recent: int = 0


@dataclass
class PublishResult:
    status: PublishStatus
    selection: Selection
    edition: Optional[Edition] = None
    history: Optional[NewsHistory] = None

    @property
    def published(self) -> bool:
        return self.status is PublishStatus.PUBLISHED


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def gather_articles(
    config: Config,
    fetcher: Optional[FeedFetcher] = None,
    now: Optional[datetime] = None,
) -> Selection:
    """Fetch, filter, rank and select the day's articles."""

    now = as_utc(now or _utcnow())
    fetcher = fetcher or FeedFetcher(timeout=config.fetch_timeout, user_agent=config.user_agent)
    items = collect_items(config.feeds, fetcher=fetcher, max_workers=config.fetch_workers)

    recent = filter_recent(items, now, timedelta(hours=config.recency_hours))
    LOGGER.info("Recent articles (last %dh): %d", config.recency_hours, len(recent))

    ranked = rank_items(recent, config.keywords)
    articles = select_top(ranked, limit=config.max_articles, summary_chars=config.summary_chars)
    return Selection(articles=articles, fetched=len(items), recent=len(recent))


def publish(
    config: Config,
    store: HistoryStore,
    simplifier: Optional[Simplifier] = None,
    fetcher: Optional[FeedFetcher] = None,
    now: Optional[datetime] = None,
) -> PublishResult:
    """Run the full pipeline and write today's edition into ``store``.

    Returns ``NO_CONTENT`` without touching the store when nothing was
    selected. ``HistoryWriteError`` from the store propagates to the caller.
    """

    now = as_utc(now or _utcnow())
    selection = gather_articles(config, fetcher=fetcher, now=now)
    if not selection.articles:
        LOGGER.warning("No articles found for %s; skipping publish", now.date().isoformat())
        return PublishResult(status=PublishStatus.NO_CONTENT, selection=selection)

    simplified = simplify_articles(
        selection.articles,
        simplifier,
        workers=config.simplify_workers,
        delay=config.simplify_delay,
    )

    date_key = now.date().isoformat()
    history = upsert_edition(store.load(), date_key, simplified, max_editions=config.max_editions)
    store.save(history)

    edition = history.editions[0]
    LOGGER.info("Total editions: %d; latest edition: %s", len(history.editions), edition.date)
    return PublishResult(
        status=PublishStatus.PUBLISHED,
        selection=selection,
        edition=edition,
        history=history,
    )


__all__ = ["PublishResult", "PublishStatus", "Selection", "gather_articles", "publish"]
