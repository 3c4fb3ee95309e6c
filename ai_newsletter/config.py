"""Configuration utilities for the AI newsletter project."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional, Tuple

DEFAULT_FEEDS: Tuple[str, ...] = (
    "https://techcrunch.com/tag/artificial-intelligence/feed/",
    "https://www.technologyreview.com/topic/artificial-intelligence/feed",
    "https://venturebeat.com/category/ai/feed/",
    "https://www.theverge.com/ai-artificial-intelligence/rss/index.xml",
    "https://feeds.arstechnica.com/arstechnica/technology-lab",
    "https://www.artificialintelligence-news.com/feed/",
)

DEFAULT_KEYWORDS: Tuple[str, ...] = (
    "artificial intelligence",
    "ai",
    "machine learning",
    "ml",
    "deep learning",
    "neural network",
    "gpt",
    "llm",
    "large language model",
    "generative ai",
    "chatbot",
    "openai",
    "anthropic",
    "google ai",
    "microsoft ai",
    "computer vision",
    "nlp",
    "natural language",
    "transformer",
    "ai model",
    "ai research",
    "ai ethics",
    "ai regulation",
)

DEFAULT_USER_AGENT = "AI-Newsletter-Bot/1.0"


def _env_int(key: str, default: int) -> int:
    """Read an env var as int, returning *default* on parse failure."""
    try:
        return int(os.getenv(key, str(default)))
    except (ValueError, TypeError):
        return default


def _env_float(key: str, default: float) -> float:
    """Read an env var as float, returning *default* on parse failure."""
    try:
        return float(os.getenv(key, str(default)))
    except (ValueError, TypeError):
        return default


def _env_list(key: str, default: Tuple[str, ...]) -> Tuple[str, ...]:
    raw = os.getenv(key)
    if not raw:
        return default
    values = tuple(part.strip() for part in raw.split(",") if part.strip())
    return values or default


@dataclass(frozen=True)
class Config:
    """Runtime configuration values for a newsletter run."""

    feeds: Tuple[str, ...] = DEFAULT_FEEDS
    keywords: Tuple[str, ...] = DEFAULT_KEYWORDS
    max_articles: int = 5
    summary_chars: int = 300
    recency_hours: int = 24
    max_editions: int = 90
    data_dir: Path = Path("data")
    history_file: Optional[Path] = None
    fetch_timeout: float = 10.0
    user_agent: str = DEFAULT_USER_AGENT
    fetch_workers: Optional[int] = None
    simplify_workers: int = 1
    simplify_delay: float = 0.5
    azure_endpoint: Optional[str] = None
    azure_api_key: Optional[str] = field(default=None, repr=False)
    azure_deployment: Optional[str] = None
    azure_api_version: str = "2024-02-01"

    @property
    def history_path(self) -> Path:
        """Return the location of the persisted edition history."""
        if self.history_file is not None:
            return self.history_file
        return self.data_dir / "news.json"

    @property
    def azure_configured(self) -> bool:
        return bool(self.azure_endpoint and self.azure_api_key and self.azure_deployment)


def load_config() -> Config:
    """Load configuration from environment variables and defaults."""

    history_file = os.getenv("NEWSLETTER_HISTORY_FILE")
    config = Config(
        feeds=_env_list("RSS_FEEDS", DEFAULT_FEEDS),
        keywords=_env_list("NEWSLETTER_KEYWORDS", DEFAULT_KEYWORDS),
        max_articles=_env_int("NEWSLETTER_MAX_ARTICLES", 5),
        summary_chars=_env_int("NEWSLETTER_SUMMARY_CHARS", 300),
        recency_hours=_env_int("NEWSLETTER_RECENCY_HOURS", 24),
        max_editions=_env_int("NEWSLETTER_MAX_EDITIONS", 90),
        data_dir=Path(os.getenv("NEWSLETTER_DATA_DIR", "data")),
        history_file=Path(history_file) if history_file else None,
        fetch_timeout=_env_float("NEWSLETTER_FETCH_TIMEOUT", 10.0),
        fetch_workers=_env_int("NEWSLETTER_FETCH_WORKERS", 0) or None,
        simplify_workers=_env_int("NEWSLETTER_SIMPLIFY_WORKERS", 1),
        simplify_delay=_env_float("NEWSLETTER_SIMPLIFY_DELAY", 0.5),
        azure_endpoint=os.getenv("AZURE_OPENAI_ENDPOINT"),
        azure_api_key=os.getenv("AZURE_OPENAI_API_KEY"),
        azure_deployment=os.getenv("AZURE_OPENAI_DEPLOYMENT_NAME"),
        azure_api_version=os.getenv("AZURE_OPENAI_API_VERSION", "2024-02-01"),
    )
    return config


__all__ = ["Config", "DEFAULT_FEEDS", "DEFAULT_KEYWORDS", "load_config"]
