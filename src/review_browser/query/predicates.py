# review_browser/query/predicates.py

"""Matching, ordering and paging rules shared by every repository.

The SQLite repository expresses the same rules in SQL; the in-memory
repository calls these functions directly. Keeping them in one place is what
lets both return identical pages for identical data.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from operator import attrgetter
from typing import TypeVar

from review_browser.domain.models import Filters, Review

T = TypeVar("T")

NO_FILTERS = Filters()


def contains_ignore_case(value: str | None, needle: str | None) -> bool:
    """Case-insensitive substring test. A blank or missing needle matches anything."""
    if not needle or not needle.strip():
        return True
    if value is None:
        return False
    return needle.lower() in value.lower()


def matches(review: Review, filters: Filters | None) -> bool:
    """Return True if `review` satisfies every criterion set on `filters`."""
    f = filters or NO_FILTERS

    if f.rating is not None and review.rating != f.rating:
        return False
    if f.min_rating is not None and review.rating < f.min_rating:
        return False
    if f.max_rating is not None and review.rating > f.max_rating:
        return False

    if not contains_ignore_case(review.author, f.author_name):
        return False
    if not contains_ignore_case(review.title, f.review_title):
        return False
    if not contains_ignore_case(review.product_name, f.product_name):
        return False
    if not contains_ignore_case(review.source, f.store_name):
        return False

    if f.review_date is not None and review.reviewed_date != f.review_date:
        return False
    if f.start_date is not None and review.reviewed_date < f.start_date:
        return False
    if f.end_date is not None and review.reviewed_date > f.end_date:
        return False

    # start_time / end_time only constrain stored values with a time of day.
    # Review carries a calendar date only, so they never exclude here.
    return True


def sort_reviews(reviews: Iterable[Review], filters: Filters | None) -> list[Review]:
    """Order reviews by rating and/or date (both descending), ties by id.

    With both flags set the order is rating desc, then date desc. Python's
    sort is stable, so sorting by the secondary key first and the primary
    key last gives the combined ordering.
    """
    f = filters or NO_FILTERS
    ordered = sorted(reviews, key=attrgetter("id"))
    if f.sort_by_date:
        ordered.sort(key=attrgetter("reviewed_date"), reverse=True)
    if f.sort_by_rating:
        ordered.sort(key=attrgetter("rating"), reverse=True)
    return ordered


def page_bounds(page: int, page_size: int) -> tuple[int, int] | None:
    """Return `(offset, limit)` for a 1-based page, or None for an empty window."""
    if page < 1 or page_size < 1:
        return None
    return (page - 1) * page_size, page_size


def paginate(items: Sequence[T], page: int, page_size: int) -> list[T]:
    bounds = page_bounds(page, page_size)
    if bounds is None:
        return []
    offset, limit = bounds
    return list(items[offset : offset + limit])


def normalize_keywords(keywords: Iterable[str | None] | None) -> list[str]:
    """Strip and lowercase keywords, dropping blanks."""
    if not keywords:
        return []
    normalized: list[str] = []
    for keyword in keywords:
        if keyword is None:
            continue
        keyword = keyword.strip().lower()
        if keyword:
            normalized.append(keyword)
    return normalized


def matches_keywords(review: Review, keywords: Sequence[str]) -> bool:
    """True if any (already normalized) keyword occurs in the text or the title."""
    text = (review.text or "").lower()
    title = (review.title or "").lower()
    return any(kw in text or kw in title for kw in keywords)
