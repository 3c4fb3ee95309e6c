"""Command-line entry point for the AI news newsletter."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from dataclasses import replace
from pathlib import Path
from typing import List, Optional

from dotenv import load_dotenv

from .config import Config, load_config
from .digest import gather_articles, publish
from .errors import HistoryWriteError
from .state import JsonHistoryStore
from .summarizer import build_simplifier

LOGGER = logging.getLogger("ai_newsletter")

EXIT_OK = 0
EXIT_NO_CONTENT = 1
EXIT_WRITE_FAILED = 2


def setup_logging(verbose: bool = False) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(level=level, format="%(asctime)s %(levelname)s %(name)s: %(message)s")


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Build the daily AI news newsletter")
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")
    parser.add_argument(
        "--history-file",
        type=Path,
        help="Optional override for the history document path",
    )
    subparsers = parser.add_subparsers(dest="command")

    build = subparsers.add_parser("build", help="Fetch, rank, simplify and publish today's edition")
    build.add_argument("--no-simplify", action="store_true", help="Store original summaries only")

    subparsers.add_parser("fetch", help="Print today's selected articles as JSON without saving")
    subparsers.add_parser("history", help="List stored editions, newest first")

    args = parser.parse_args(argv)
    if args.command is None:
        args.command = "build"
        args.no_simplify = False
    return args


def run_build(config: Config, simplify: bool = True) -> int:
    store = JsonHistoryStore(config.history_path)
    try:
        result = publish(config, store, simplifier=build_simplifier(config, enabled=simplify))
    except HistoryWriteError as exc:
        LOGGER.error("Build failed: %s", exc)
        return EXIT_WRITE_FAILED

    if not result.published:
        LOGGER.error("No articles found. Nothing published.")
        return EXIT_NO_CONTENT

    edition, history = result.edition, result.history
    LOGGER.info(
        "Build completed: fetched=%d recent=%d published=%d editions=%d latest=%s",
        result.selection.fetched,
        result.selection.recent,
        len(edition.articles) if edition else 0,
        len(history.editions) if history else 0,
        edition.date if edition else "-",
    )
    return EXIT_OK


def run_fetch(config: Config) -> int:
    selection = gather_articles(config)
    print(json.dumps([article.to_dict() for article in selection.articles], indent=2, ensure_ascii=False))
    return EXIT_OK if selection.articles else EXIT_NO_CONTENT


def run_history(config: Config) -> int:
    history = JsonHistoryStore(config.history_path).load()
    for edition in history.editions:
        count = len(edition.articles)
        print(f"{edition.date}  {count} article{'s' if count != 1 else ''}")
    return EXIT_OK


def main(argv: Optional[List[str]] = None) -> int:
    load_dotenv()
    args = parse_args(argv)
    setup_logging(verbose=args.verbose)

    config = load_config()
    if args.history_file:
        config = replace(config, history_file=args.history_file)

    if args.command == "fetch":
        return run_fetch(config)
    if args.command == "history":
        return run_history(config)
    return run_build(config, simplify=not args.no_simplify)


if __name__ == "__main__":
    sys.exit(main())
