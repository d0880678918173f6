# review_browser/cli/repl.py

"""Interactive console for browsing the review store."""

from __future__ import annotations

import logging
import os
import sys
from collections.abc import Iterable
from typing import TextIO

from review_browser.cli.parsing import FILTER_HELP, MIN_RATING_KEY, parse_filters
from review_browser.config import DEFAULT_PAGE_SIZE
from review_browser.domain.errors import InvalidInputError, ReviewAppError
from review_browser.domain.models import Review
from review_browser.services.review_service import ReviewService, StatisticsService

logger = logging.getLogger(__name__)

HELP_TEXT = f"""Commands:
  all                 - Show all reviews
  page <n>            - Show one page of reviews
  id <id>             - Show review by ID
  filters             - List available filters
  filter <criteria>   - Filter reviews (e.g., author=John,{MIN_RATING_KEY}=3)
  search <kw1,kw2>    - Search review text and titles by keywords
  stats               - Show review statistics
  distr               - Show rating distribution
  monthly             - Show monthly average ratings
  clear               - Clear the terminal
  exit                - Exit the program"""


def format_review(review: Review) -> str:
    return (
        f"[{review.id}] {review.reviewed_date.isoformat()} "
        f"{'*' * review.rating:<5} {review.title or '(no title)'}\n"
        f"    by {review.author or 'unknown'}"
        f" | {review.product_name or '-'} | {review.source or '-'}\n"
        f"    {review.text or ''}"
    )


class ReviewRepl:
    """Read-eval-print loop over the review services.

    Errors from a single command are reported and the loop keeps running.
    """

    def __init__(
        self,
        review_service: ReviewService,
        statistics_service: StatisticsService,
        *,
        stdin: TextIO | None = None,
        stdout: TextIO | None = None,
        page_size: int = DEFAULT_PAGE_SIZE,
    ) -> None:
        if page_size < 1:
            msg = "page_size must be >= 1."
            raise ValueError(msg)
        self._reviews = review_service
        self._stats = statistics_service
        self._stdin = stdin or sys.stdin
        self._stdout = stdout or sys.stdout
        self._page_size = page_size

    def run(self) -> None:
        self._println("Welcome to the Review System. Type 'help' for commands.")
        while True:
            self._print("> ")
            line = self._stdin.readline()
            if not line:
                self._println("\nEOF received. Exiting.")
                break
            command = line.strip()
            if not command:
                continue
            if command.lower() == "exit":
                break
            self.handle(command)
        self._println("Goodbye!")

    def handle(self, command: str) -> None:
        """Execute one command line."""
        name, _, argument = command.partition(" ")
        name = name.lower()
        argument = argument.strip()

        try:
            if name == "help":
                self._println(HELP_TEXT)
            elif name == "all":
                self._cmd_all()
            elif name == "page":
                self._cmd_page(argument)
            elif name == "id":
                self._cmd_id(argument)
            elif name == "filters":
                self._cmd_filters()
            elif name == "filter":
                self._cmd_filter(argument)
            elif name == "search":
                self._cmd_search(argument)
            elif name == "stats":
                stats = self._stats.get_review_statistics()
                self._println(f" Average rating: {stats.average_rating:.2f}")
                self._println(f" Total reviews: {stats.total_reviews}")
            elif name == "distr":
                stats = self._stats.get_review_statistics()
                for rating, count in stats.rating_distribution.items():
                    self._println(f" {rating}: {count}")
            elif name == "monthly":
                stats = self._stats.get_review_statistics()
                for month, average in stats.monthly_rating_average.items():
                    self._println(f" {month}: {average:.2f}")
            elif name == "clear":
                self._clear_screen()
            else:
                self._println("Unknown command. Type 'help' for available commands.")
        except InvalidInputError as exc:
            self._println(f"Input error: {exc}")
        except ReviewAppError as exc:
            logger.error("Command %r failed: %s", command, exc)
            self._println(f"Error: {exc}")

    # Commands

    def _cmd_all(self) -> None:
        page = 1
        while True:
            reviews = self._reviews.get_reviews_page(page, self._page_size)
            if not reviews:
                break
            self._print_reviews(reviews)
            page += 1

    def _cmd_page(self, argument: str) -> None:
        try:
            page = int(argument) if argument else 1
        except ValueError:
            self._println("Invalid page: Please enter a valid integer.")
            return
        total = self._reviews.get_total_review_count()
        reviews = self._reviews.get_reviews_page(page, self._page_size)
        self._print_reviews(reviews)
        pages = max(1, -(-total // self._page_size))
        self._println(f"Page {page} of {pages} ({total} reviews)")

    def _cmd_id(self, argument: str) -> None:
        try:
            review_id = int(argument)
        except ValueError:
            self._println("Invalid ID: Please enter a valid integer.")
            return
        review = self._reviews.get_review_by_id(review_id)
        self._println(format_review(review) if review is not None else "Not found")

    def _cmd_filters(self) -> None:
        self._println("Available filters (key=value, comma-separated):")
        for key, kind, example in FILTER_HELP:
            self._println(f"  {key:<14}: {kind:<16} e.g., {example}")

    def _cmd_filter(self, argument: str) -> None:
        filters, unknown = parse_filters(argument)
        for key in unknown:
            self._println(f"Ignoring unknown filter key: {key}")

        total = self._reviews.get_filtered_review_count(filters)
        page = 1
        while (page - 1) * self._page_size < total:
            self._print_reviews(
                self._reviews.get_filtered_reviews_page(filters, page, self._page_size)
            )
            page += 1
        self._println(f"{total} matching reviews.")

    def _cmd_search(self, argument: str) -> None:
        keywords = [token.strip() for token in argument.split(",")]
        reviews = self._reviews.get_reviews_by_keywords(keywords)
        self._print_reviews(reviews)
        self._println(f"{len(reviews)} matching reviews.")

    # Output helpers

    def _print_reviews(self, reviews: Iterable[Review]) -> None:
        for review in reviews:
            self._println(format_review(review))

    def _println(self, text: str) -> None:
        self._stdout.write(text + "\n")
        self._stdout.flush()

    def _print(self, text: str) -> None:
        self._stdout.write(text)
        self._stdout.flush()

    def _clear_screen(self) -> None:
        if os.name == "nt":
            self._print("\n" * 50)
        else:
            self._print("\033[H\033[2J")
