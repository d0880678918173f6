# review_browser/storage/memory_repository.py

"""In-process review repository for tests, demos and `--datastore memory`."""

from __future__ import annotations

import logging
from collections import defaultdict
from collections.abc import Iterable, Sequence
from statistics import fmean

from review_browser.domain.models import Filters, Review
from review_browser.domain.ports import ReviewQueryPort, ReviewStatsPort, ReviewWritePort
from review_browser.query.predicates import (
    matches,
    matches_keywords,
    normalize_keywords,
    paginate,
    sort_reviews,
)

logger = logging.getLogger(__name__)


class InMemoryReviewRepository(ReviewQueryPort, ReviewWritePort, ReviewStatsPort):
    """Reviews keyed by id, filtered, sorted and sliced in Python."""

    def __init__(self, reviews: Iterable[Review] | None = None) -> None:
        self._store: dict[int, Review] = {}
        if reviews is not None:
            self.save(reviews)

    # Write port

    def save(self, reviews: Iterable[Review]) -> None:
        """Insert or replace by id; the last review with a given id wins."""
        saved = 0
        for review in reviews:
            if review is None:
                continue
            self._store[review.id] = review
            saved += 1
        logger.debug("Stored %d reviews in memory (%d total).", saved, len(self._store))

    # Query port

    def _filtered(self, filters: Filters | None) -> list[Review]:
        return [review for review in self._store.values() if matches(review, filters)]

    def query(
        self,
        filters: Filters | None,
        page: int,
        page_size: int,
    ) -> list[Review]:
        ordered = sort_reviews(self._filtered(filters), filters)
        return paginate(ordered, page, page_size)

    def count(self, filters: Filters | None) -> int:
        return len(self._filtered(filters))

    def get_by_id(self, review_id: int) -> Review | None:
        if review_id is None:
            return None
        return self._store.get(review_id)

    def get_page(self, page: int, page_size: int) -> list[Review]:
        return paginate(sort_reviews(self._store.values(), None), page, page_size)

    def get_total_count(self) -> int:
        return len(self._store)

    def get_by_keywords(self, keywords: Sequence[str] | None) -> list[Review]:
        normalized = normalize_keywords(keywords)
        if not normalized:
            return []
        hits = [r for r in self._store.values() if matches_keywords(r, normalized)]
        return sort_reviews(hits, None)

    # Stats port

    def get_average_rating(self) -> float:
        if not self._store:
            return 0.0
        return fmean(review.rating for review in self._store.values())

    def get_rating_distribution(self) -> dict[int, int]:
        distribution: dict[int, int] = defaultdict(int)
        for review in self._store.values():
            distribution[review.rating] += 1
        return dict(sorted(distribution.items()))

    def get_monthly_rating_average(self) -> dict[str, float]:
        ratings_by_month: dict[str, list[int]] = defaultdict(list)
        for review in self._store.values():
            ratings_by_month[review.reviewed_date.isoformat()[:7]].append(review.rating)
        return {
            month: fmean(ratings)
            for month, ratings in sorted(ratings_by_month.items())
        }
