"""Exception hierarchy for the newsletter pipeline."""

from __future__ import annotations

from pathlib import Path
from typing import Optional


class NewsletterError(Exception):
    """Base error for all newsletter subsystems."""


class HistoryWriteError(NewsletterError):
    """The edition history could not be persisted."""

    def __init__(self, path: Path, cause: Optional[BaseException] = None) -> None:
        self.path = path
        self.cause = cause
        message = f"Could not write history to {path}"
        if cause is not None:
            message = f"{message}: {cause}"
        super().__init__(message)


class SimplificationError(NewsletterError):
    """A simplifier backend failed to rewrite an article."""


__all__ = ["HistoryWriteError", "NewsletterError", "SimplificationError"]
