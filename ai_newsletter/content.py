"""Text helpers shared by the fetchers and the selector."""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Optional

from bs4 import BeautifulSoup
from dateutil import parser as date_parser

LOGGER = logging.getLogger(__name__)

TRUNCATION_MARKER = "..."


def html_to_text(html: Optional[str]) -> str:
    """Strip markup from a feed body and collapse whitespace."""

    if not html:
        return ""
    if "<" not in html:
        return " ".join(html.split())
    text = BeautifulSoup(html, "html.parser").get_text(" ")
    return " ".join(text.split())


def truncate_text(text: str, max_chars: int) -> str:
    """Cut ``text`` to ``max_chars`` and append a marker, only when it was too long."""

    if len(text) <= max_chars:
        return text
    return text[:max_chars] + TRUNCATION_MARKER


def parse_timestamp(value: Optional[str]) -> Optional[datetime]:
    """Parse a feed timestamp into an aware UTC datetime.

    Naive values are assumed to be UTC. Unparseable input yields ``None``.
    """

    if not value:
        return None
    try:
        parsed = date_parser.parse(value)
    except (ValueError, TypeError, OverflowError):
        LOGGER.debug("Unparseable timestamp: %r", value)
        return None
    return as_utc(parsed)


def as_utc(value: datetime) -> datetime:
    """Return ``value`` as aware UTC, treating naive values as UTC."""

    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def isoformat_utc(value: datetime) -> str:
    """Format as ``YYYY-MM-DDTHH:MM:SS.mmmZ``."""

    stamp = as_utc(value).isoformat(timespec="milliseconds")
    return stamp.replace("+00:00", "Z")


__all__ = ["TRUNCATION_MARKER", "as_utc", "html_to_text", "isoformat_utc", "parse_timestamp", "truncate_text"]
