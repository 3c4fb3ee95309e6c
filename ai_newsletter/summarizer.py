"""Plain-language rewriting of selected articles.

Two backends are available: Azure OpenAI chat completions, and an offline
extractive summary built with sumy. Whichever is used, a failure for one
article falls back to that article's original summary.
"""

from __future__ import annotations

import logging
import time
from concurrent.futures import ThreadPoolExecutor
from typing import Any, List, Optional, Sequence

from openai import AzureOpenAI, OpenAIError
from sumy.nlp.stemmers import Stemmer
from sumy.nlp.tokenizers import Tokenizer
from sumy.parsers.plaintext import PlaintextParser
from sumy.summarizers.lsa import LsaSummarizer
from sumy.utils import get_stop_words

from .config import Config
from .errors import SimplificationError
from .models import Article

LOGGER = logging.getLogger(__name__)
LANGUAGE = "english"

SYSTEM_PROMPT = (
    "You are a helpful assistant that explains complex AI topics in simple, "
    "accessible language for non-technical readers."
)

USER_PROMPT = """You are an expert at explaining complex AI and technology concepts to non-technical readers.

Your task: Rewrite the following AI news article in simple, everyday language that anyone can understand.

Guidelines:
- Use simple words and short sentences
- Avoid technical jargon (or explain it in parentheses if necessary)
- Focus on what this means for everyday people
- Keep it engaging and interesting
- Length: 150-200 words
- Maintain the key facts and importance of the story

Original Article:
Title: {title}
Source: {source}
Content: {summary}

Write a simplified version that a non-technical person would easily understand:"""


class Simplifier:
    """Abstract base class for simplification backends."""

    name: str = "base"

    def simplify(self, article: Article) -> str:
        raise NotImplementedError


class AzureSimplifier(Simplifier):
    name = "azure_openai"

    def __init__(
        self,
        endpoint: str,
        api_key: str,
        deployment: str,
        api_version: str = "2024-02-01",
        client: Optional[Any] = None,
    ) -> None:
        self.deployment = deployment
        self.client = client or AzureOpenAI(
            azure_endpoint=endpoint,
            api_key=api_key,
            api_version=api_version,
        )

    def simplify(self, article: Article) -> str:
        prompt = USER_PROMPT.format(title=article.title, source=article.source, summary=article.summary)
        try:
            response = self.client.chat.completions.create(
                model=self.deployment,
                messages=[
                    {"role": "system", "content": SYSTEM_PROMPT},
                    {"role": "user", "content": prompt},
                ],
                temperature=0.7,
                max_tokens=300,
                top_p=0.9,
            )
        except OpenAIError as exc:
            raise SimplificationError(f"Azure OpenAI request failed: {exc}") from exc

        if not response.choices:
            raise SimplificationError("Azure OpenAI returned no choices")
        content = (response.choices[0].message.content or "").strip()
        if not content:
            raise SimplificationError("Azure OpenAI returned an empty completion")
        return content


class ExtractiveSimplifier(Simplifier):
    """Pick the most representative sentences with sumy's LSA summarizer."""

    name = "extractive"

    def __init__(self, sentence_count: int = 3) -> None:
        self.sentence_count = sentence_count

    def simplify(self, article: Article) -> str:
        text = article.summary or article.title
        try:
            parser = PlaintextParser.from_string(text, Tokenizer(LANGUAGE))
            summarizer = LsaSummarizer(Stemmer(LANGUAGE))
            summarizer.stop_words = get_stop_words(LANGUAGE)
            sentences = summarizer(parser.document, self.sentence_count)
        except LookupError as exc:
            # sumy's tokenizer needs NLTK's punkt data on disk.
            raise SimplificationError(f"Tokenizer data unavailable: {exc}") from exc

        summary = " ".join(str(sentence) for sentence in sentences).strip()
        if not summary:
            raise SimplificationError("Extractive summarizer produced no sentences")
        return summary


def simplify_article(article: Article, simplifier: Optional[Simplifier]) -> Article:
    """Attach simplified text, falling back to the original summary on failure."""

    if simplifier is None:
        return article.with_simplified(article.summary)
    LOGGER.info("Simplifying: %r", article.title[:50])
    try:
        text = simplifier.simplify(article)
    except Exception as exc:
        LOGGER.error("Error simplifying article %r with %s: %s", article.title, simplifier.name, exc)
        return article.with_simplified(article.summary)
    return article.with_simplified(text)


def simplify_articles(
    articles: Sequence[Article],
    simplifier: Optional[Simplifier],
    workers: int = 1,
    delay: float = 0.5,
) -> List[Article]:
    """Simplify articles on a bounded worker pool, preserving input order.

    Each worker pauses ``delay`` seconds after every request, which caps the
    request rate at ``workers / delay`` per second.
    """

    if not articles:
        return []

    def _task(article: Article) -> Article:
        result = simplify_article(article, simplifier)
        if simplifier is not None and delay > 0:
            time.sleep(delay)
        return result

    with ThreadPoolExecutor(max_workers=max(1, workers)) as executor:
        simplified = list(executor.map(_task, articles))
    LOGGER.info("Simplified %d articles", len(simplified))
    return simplified


def build_simplifier(config: Config, enabled: bool = True) -> Optional[Simplifier]:
    """Pick the Azure backend when configured, otherwise the offline one."""

    if not enabled:
        return None
    if config.azure_configured:
        return AzureSimplifier(
            endpoint=config.azure_endpoint or "",
            api_key=config.azure_api_key or "",
            deployment=config.azure_deployment or "",
            api_version=config.azure_api_version,
        )
    LOGGER.warning("Azure OpenAI not configured; using extractive summaries")
    return ExtractiveSimplifier()


__all__ = [
    "AzureSimplifier",
    "ExtractiveSimplifier",
    "Simplifier",
    "build_simplifier",
    "simplify_article",
    "simplify_articles",
]
