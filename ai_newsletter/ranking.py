"""Recency filtering, keyword relevance ranking and top-N selection."""

from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone
from typing import Iterable, List, Sequence

from .content import as_utc, isoformat_utc, truncate_text
from .models import Article, RawItem, ScoredItem

LOGGER = logging.getLogger(__name__)

DEFAULT_WINDOW = timedelta(hours=24)
_EPOCH = datetime.min.replace(tzinfo=timezone.utc)


def filter_recent(
    items: Iterable[RawItem],
    now: datetime,
    window: timedelta = DEFAULT_WINDOW,
) -> List[RawItem]:
    """Keep items published at or after ``now - window``.

    Items without a usable timestamp cannot be shown to be recent and are
    dropped.
    """

    cutoff = as_utc(now) - window
    recent: List[RawItem] = []
    for item in items:
        if item.published_at is None:
            LOGGER.debug("Dropping undated item: %s", item.link)
            continue
        if item.published_at >= cutoff:
            recent.append(item)
    return recent


def _normalize_keywords(keywords: Iterable[str]) -> List[str]:
    return list(dict.fromkeys(keyword.lower() for keyword in keywords if keyword))


def score_item(item: RawItem, keywords: Iterable[str]) -> int:
    """Count the distinct keywords found anywhere in the title and body."""

    text = f"{item.title} {item.content}".lower()
    return sum(1 for keyword in _normalize_keywords(keywords) if keyword in text)


def rank_items(items: Iterable[RawItem], keywords: Sequence[str]) -> List[ScoredItem]:
    """Score items and order them by score, then recency.

    ``sorted`` is stable, so items with equal score and timestamp keep their
    input (fetch) order.
    """

    vocabulary = _normalize_keywords(keywords)
    scored = [ScoredItem(item=item, score=score_item(item, vocabulary)) for item in items]
    return sorted(
        scored,
        key=lambda entry: (entry.score, entry.published_at or _EPOCH),
        reverse=True,
    )


def to_article(entry: ScoredItem, summary_chars: int = 300) -> Article:
    item = entry.item
    return Article(
        title=item.title,
        url=item.link,
        published_at=isoformat_utc(item.published_at) if item.published_at else "",
        source=item.source,
        summary=truncate_text(item.content, summary_chars),
        guid=item.guid,
    )


def select_top(ranked: Sequence[ScoredItem], limit: int = 5, summary_chars: int = 300) -> List[Article]:
    """Project the first ``limit`` ranked items to ``Article``s."""

    top = list(ranked[: max(limit, 0)])
    for index, entry in enumerate(top, start=1):
        LOGGER.info("%d. %s (%s) - Score: %d", index, entry.item.title, entry.item.source, entry.score)
    return [to_article(entry, summary_chars) for entry in top]


__all__ = ["DEFAULT_WINDOW", "filter_recent", "rank_items", "score_item", "select_top", "to_article"]
