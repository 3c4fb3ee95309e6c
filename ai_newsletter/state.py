"""Persisted edition history: upsert, retention and atomic storage."""

from __future__ import annotations

import copy
import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Any, Dict, Iterable, Optional

from .errors import HistoryWriteError
from .models import Article, Edition, NewsHistory

LOGGER = logging.getLogger(__name__)

DEFAULT_MAX_EDITIONS = 90


def upsert_edition(
    history: NewsHistory,
    date_key: str,
    articles: Iterable[Article],
    max_editions: int = DEFAULT_MAX_EDITIONS,
) -> NewsHistory:
    """Return a new history with ``date_key``'s edition written at the front.

    An existing edition for the same date is replaced wholesale and moved to
    position 0. Editions past ``max_editions`` are dropped from the tail.
    """

    edition = Edition(date=date_key, articles=list(articles))
    remaining = [existing for existing in history.editions if existing.date != date_key]
    if len(remaining) != len(history.editions):
        LOGGER.info("Updating existing edition for %s", date_key)
    else:
        LOGGER.info("Adding new edition for %s", date_key)

    editions = [edition] + remaining
    if len(editions) > max_editions:
        editions = editions[:max_editions]
        LOGGER.info("Trimmed to last %d editions", max_editions)
    return NewsHistory(editions=editions)


class HistoryStore:
    """Abstract base class for history persistence backends."""

    def load(self) -> NewsHistory:
        raise NotImplementedError

    def save(self, history: NewsHistory) -> None:
        raise NotImplementedError


class JsonHistoryStore(HistoryStore):
    """JSON document on disk, rewritten atomically on every save."""

    def __init__(self, path: Path) -> None:
        self.path = Path(path)

    def load(self) -> NewsHistory:
        if not self.path.exists():
            LOGGER.info("No existing data found at %s, starting fresh", self.path)
            return NewsHistory()
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
            return NewsHistory.from_dict(data)
        except (OSError, ValueError, KeyError, TypeError) as exc:
            LOGGER.warning("Could not read history file %s, starting fresh: %s", self.path, exc)
            return NewsHistory()

    def save(self, history: NewsHistory) -> None:
        tmp_path: Optional[str] = None
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_path = tempfile.mkstemp(dir=self.path.parent, prefix=f".{self.path.name}.", suffix=".tmp")
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                json.dump(history.to_dict(), fh, indent=2, ensure_ascii=False)
                fh.flush()
                os.fsync(fh.fileno())
            os.replace(tmp_path, self.path)
        except OSError as exc:
            if tmp_path is not None:
                try:
                    os.unlink(tmp_path)
                except OSError:
                    pass
            raise HistoryWriteError(self.path, exc) from exc
        LOGGER.info("Data saved to %s", self.path)


class MemoryHistoryStore(HistoryStore):
    """In-process store holding a serialized copy of the document."""

    def __init__(self, document: Optional[Dict[str, Any]] = None) -> None:
        self.document = copy.deepcopy(document) if document is not None else None
        self.saves = 0

    def load(self) -> NewsHistory:
        if self.document is None:
            return NewsHistory()
        try:
            return NewsHistory.from_dict(copy.deepcopy(self.document))
        except (KeyError, TypeError, ValueError) as exc:
            LOGGER.warning("Stored history is malformed, starting fresh: %s", exc)
            return NewsHistory()

    def save(self, history: NewsHistory) -> None:
        self.document = history.to_dict()
        self.saves += 1


__all__ = ["DEFAULT_MAX_EDITIONS", "HistoryStore", "JsonHistoryStore", "MemoryHistoryStore", "upsert_edition"]
