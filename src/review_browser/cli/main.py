# review_browser/cli/main.py

from __future__ import annotations

import argparse
import dataclasses
import logging
import sys
from pathlib import Path

from review_browser.bootstrap import bootstrap
from review_browser.cli.repl import ReviewRepl
from review_browser.config import Settings, get_settings
from review_browser.domain.errors import ReviewAppError
from review_browser.storage.factory import DataStoreType

logger = logging.getLogger(__name__)


def main(argv: list[str] | None = None) -> None:
    """Entry point for the review-browser console."""
    settings = get_settings()
    args = _build_arg_parser(settings).parse_args(argv)

    _configure_logging(verbose=args.verbose, level_name=settings.log_level)
    settings = _apply_overrides(settings, args)

    try:
        review_service, statistics_service = bootstrap(settings)
    except (FileNotFoundError, ReviewAppError) as exc:
        logger.error("Unable to start the application: %s", exc)
        sys.exit(1)

    repl = ReviewRepl(
        review_service,
        statistics_service,
        page_size=settings.page_size,
    )
    try:
        repl.run()
    except KeyboardInterrupt:
        logger.warning("Interrupted by user. Exiting.")
        sys.exit(1)


def _build_arg_parser(settings: Settings) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="review-browser",
        description="Browse, filter and search a JSON/JSONL dump of product reviews.",
    )
    parser.add_argument(
        "--datastore",
        choices=[t.value for t in DataStoreType],
        default=settings.datastore,
        help="Where reviews are kept while browsing (default: %(default)s).",
    )
    parser.add_argument(
        "--db",
        default=str(settings.db_path),
        help="SQLite database file (default: %(default)s).",
    )
    parser.add_argument(
        "--json",
        default=str(settings.json_path),
        help="Review dump to import, JSON array or JSONL (default: %(default)s).",
    )
    parser.add_argument(
        "--page-size",
        type=int,
        default=settings.page_size,
        help="Reviews per page (default: %(default)s).",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable verbose logging.",
    )
    return parser


def _apply_overrides(settings: Settings, args: argparse.Namespace) -> Settings:
    if args.page_size < 1:
        msg = "--page-size must be >= 1."
        raise SystemExit(msg)
    return dataclasses.replace(
        settings,
        datastore=args.datastore,
        db_path=Path(args.db),
        json_path=Path(args.json),
        page_size=args.page_size,
    )


def _configure_logging(*, verbose: bool, level_name: str = "INFO") -> None:
    level = logging.DEBUG if verbose else getattr(logging, level_name, logging.INFO)
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )


if __name__ == "__main__":
    # python -m review_browser.cli.main --datastore memory --json data/reviews.jsonl
    main()
