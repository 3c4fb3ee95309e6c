"""Shared dataclasses and type definitions for the newsletter."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import datetime
from typing import Any, Dict, List, Optional


@dataclass(frozen=True)
class RawItem:
    """One normalized entry as retrieved from a single feed."""

    title: str
    link: str
    published_at: Optional[datetime]
    content: str
    source: str
    guid: str


@dataclass(frozen=True)
class ScoredItem:
    """A feed item paired with its keyword relevance score."""

    item: RawItem
    score: int

    @property
    def published_at(self) -> Optional[datetime]:
        return self.item.published_at


@dataclass
class Article:
    """Public article shape stored in an edition."""

    title: str
    url: str
    published_at: str
    source: str
    summary: str
    guid: str = ""
    simplified_content: Optional[str] = None

    def with_simplified(self, text: str) -> "Article":
        return replace(self, simplified_content=text)

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to the persisted document shape (``guid`` is not stored)."""

        payload: Dict[str, Any] = {
            "title": self.title,
            "summary": self.summary,
            "source": self.source,
            "url": self.url,
            "publishedAt": self.published_at,
        }
        if self.simplified_content is not None:
            payload["simplifiedContent"] = self.simplified_content
        return payload

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Article":
        return cls(
            title=data["title"],
            url=data["url"],
            published_at=data.get("publishedAt", ""),
            source=data.get("source", ""),
            summary=data.get("summary", ""),
            guid=data.get("guid", ""),
            simplified_content=data.get("simplifiedContent"),
        )


@dataclass
class Edition:
    """One calendar day's published set of articles."""

    date: str
    articles: List[Article] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {"date": self.date, "articles": [article.to_dict() for article in self.articles]}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Edition":
        return cls(
            date=data["date"],
            articles=[Article.from_dict(item) for item in data.get("articles", [])],
        )


@dataclass
class NewsHistory:
    """Persisted root document: editions ordered most-recently-written first."""

    editions: List[Edition] = field(default_factory=list)

    @property
    def latest(self) -> Optional[Edition]:
        return self.editions[0] if self.editions else None

    def find(self, date_key: str) -> Optional[Edition]:
        return next((edition for edition in self.editions if edition.date == date_key), None)

    def to_dict(self) -> Dict[str, Any]:
        return {"editions": [edition.to_dict() for edition in self.editions]}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "NewsHistory":
        editions = data["editions"]
        if not isinstance(editions, list):
            raise TypeError("'editions' must be a list")
        return cls(editions=[Edition.from_dict(item) for item in editions])


__all__ = ["Article", "Edition", "NewsHistory", "RawItem", "ScoredItem"]
