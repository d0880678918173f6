# review_browser/services/review_service.py

"""Application services consumed by the console REPL."""

from __future__ import annotations

from collections.abc import Sequence

from review_browser.domain.models import Filters, Review, Statistics
from review_browser.domain.ports import ReviewQueryPort, ReviewStatsPort, ReviewWritePort


class ReviewService:
    """Use cases for reading and storing reviews, independent of the datastore."""

    def __init__(
        self,
        query_port: ReviewQueryPort,
        write_port: ReviewWritePort | None = None,
    ) -> None:
        if query_port is None:
            msg = "query_port must not be None."
            raise ValueError(msg)
        self._query = query_port
        self._write = write_port

    def get_review_by_id(self, review_id: int) -> Review | None:
        return self._query.get_by_id(review_id)

    def get_reviews_by_keywords(self, keywords: Sequence[str]) -> list[Review]:
        return self._query.get_by_keywords(keywords)

    def get_reviews_page(self, page: int, page_size: int) -> list[Review]:
        return self._query.get_page(page, page_size)

    def get_total_review_count(self) -> int:
        return self._query.get_total_count()

    def get_filtered_reviews_page(
        self,
        filters: Filters | None,
        page: int,
        page_size: int,
    ) -> list[Review]:
        return self._query.query(filters, page, page_size)

    def get_filtered_review_count(self, filters: Filters | None) -> int:
        return self._query.count(filters)

    def save_reviews(self, reviews: Sequence[Review]) -> None:
        if self._write is None:
            msg = "Write port not configured for ReviewService."
            raise RuntimeError(msg)
        self._write.save(reviews)


class StatisticsService:
    """Computes the aggregate numbers shown by the `stats`, `distr` and `monthly` commands."""

    def __init__(self, stats_port: ReviewStatsPort) -> None:
        if stats_port is None:
            msg = "stats_port must not be None."
            raise ValueError(msg)
        self._stats = stats_port

    def get_review_statistics(self) -> Statistics:
        return Statistics(
            total_reviews=self._stats.get_total_count(),
            average_rating=self._stats.get_average_rating(),
            rating_distribution=self._stats.get_rating_distribution(),
            monthly_rating_average=self._stats.get_monthly_rating_average(),
        )
