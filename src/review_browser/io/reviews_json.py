# review_browser/io/reviews_json.py

from __future__ import annotations

import logging
import uuid
from collections.abc import Iterable
from datetime import date
from pathlib import Path
from typing import Any

from review_browser.domain.errors import InvalidInputError
from review_browser.domain.models import Review
from review_browser.io.jsonl import iter_json_objects, write_jsonl

logger = logging.getLogger(__name__)

# Field names used by the review dumps.
ID = "id"
REVIEW = "review"
AUTHOR = "author"
SOURCE = "review_source"
TITLE = "title"
PRODUCT_NAME = "product_name"
REVIEWED_DATE = "reviewed_date"
RATING = "rating"


def _parse_date(value: Any) -> date | None:
    """Parse the leading YYYY-MM-DD of a date string; a time suffix is ignored."""
    if not isinstance(value, str) or len(value) < 10:
        return None
    try:
        return date.fromisoformat(value[:10])
    except ValueError:
        return None


def _parse_int(value: Any) -> int | None:
    if value is None or isinstance(value, bool):
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def _optional_text(value: Any) -> str | None:
    if value is None:
        return None
    return str(value)


def _generate_id() -> int:
    # Positive 63-bit id so it fits an SQLite INTEGER.
    return uuid.uuid4().int >> 65


def review_from_raw(raw: dict[str, Any]) -> Review:
    """Convert a raw JSON dict into a Review instance.

    Raises InvalidInputError if the rating or the date is missing or invalid.
    """
    review_id = _parse_int(raw.get(ID))
    if review_id is None:
        review_id = _generate_id()

    rating = _parse_int(raw.get(RATING))
    if rating is None:
        msg = f"Invalid rating {raw.get(RATING)!r}; must be between 1 and 5."
        raise InvalidInputError(msg)

    return Review(
        id=review_id,
        reviewed_date=_parse_date(raw.get(REVIEWED_DATE)),
        rating=rating,
        text=_optional_text(raw.get(REVIEW)),
        author=_optional_text(raw.get(AUTHOR)),
        source=_optional_text(raw.get(SOURCE)),
        title=_optional_text(raw.get(TITLE)),
        product_name=_optional_text(raw.get(PRODUCT_NAME)),
    )


def review_to_raw(review: Review) -> dict[str, Any]:
    """Convert a Review instance into a JSON-serialisable dict."""
    return {
        ID: review.id,
        REVIEW: review.text,
        AUTHOR: review.author,
        SOURCE: review.source,
        TITLE: review.title,
        PRODUCT_NAME: review.product_name,
        REVIEWED_DATE: review.reviewed_date.isoformat(),
        RATING: review.rating,
    }


def load_reviews_from_json(path: str | Path) -> list[Review]:
    """Load reviews from a JSON array or JSONL file.

    Records that fail validation are logged and skipped.
    """
    file_path = Path(path)
    reviews: list[Review] = []
    skipped = 0

    for raw in iter_json_objects(file_path):
        try:
            reviews.append(review_from_raw(raw))
        except InvalidInputError as exc:
            skipped += 1
            logger.warning("Skipping review %r: %s", raw.get(ID), exc)

    if skipped:
        logger.info("Skipped %d invalid reviews in %s.", skipped, file_path)
    return reviews


def save_reviews_to_jsonl(reviews: Iterable[Review], path: str | Path) -> None:
    """Write reviews to a JSONL file, one review per line."""
    write_jsonl(Path(path), (review_to_raw(review) for review in reviews))
