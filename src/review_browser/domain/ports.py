# review_browser/domain/ports.py

"""
Storage interfaces the services depend on.

Both the SQLite and the in-memory repository implement all three ports, so
callers can be wired to either one at start-up without further changes.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Iterable, Sequence

from review_browser.domain.models import Filters, Review


class ReviewQueryPort(ABC):
    """Read access to stored reviews."""

    @abstractmethod
    def query(
        self,
        filters: Filters | None,
        page: int,
        page_size: int,
    ) -> list[Review]:
        """Return one page of reviews matching `filters`, in sort order."""
        ...

    @abstractmethod
    def count(self, filters: Filters | None) -> int:
        """Return how many reviews match `filters` across all pages."""
        ...

    @abstractmethod
    def get_by_id(self, review_id: int) -> Review | None:
        """Return the review with the given id, or None if it does not exist."""
        ...

    @abstractmethod
    def get_page(self, page: int, page_size: int) -> list[Review]:
        """Return one unfiltered page in storage order."""
        ...

    @abstractmethod
    def get_total_count(self) -> int:
        ...

    @abstractmethod
    def get_by_keywords(self, keywords: Sequence[str] | None) -> list[Review]:
        """Return reviews whose text or title contains any of the keywords."""
        ...


class ReviewWritePort(ABC):
    """Write access to stored reviews."""

    @abstractmethod
    def save(self, reviews: Iterable[Review]) -> None:
        """Insert or replace reviews by id."""
        ...


class ReviewStatsPort(ABC):
    """Aggregate queries used by the statistics view."""

    @abstractmethod
    def get_total_count(self) -> int:
        ...

    @abstractmethod
    def get_average_rating(self) -> float:
        ...

    @abstractmethod
    def get_rating_distribution(self) -> dict[int, int]:
        ...

    @abstractmethod
    def get_monthly_rating_average(self) -> dict[str, float]:
        ...
