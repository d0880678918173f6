# review_browser/domain/models.py

"""Core value objects: reviews, query filters and aggregate statistics."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime, time

from review_browser.domain.errors import InvalidInputError

MIN_RATING = 1
MAX_RATING = 5


def _check_rating(field_name: str, value: int | None) -> None:
    if value is None:
        return
    if isinstance(value, bool) or not isinstance(value, int):
        msg = f"{field_name} must be an integer, got {value!r}."
        raise InvalidInputError(msg)
    if not MIN_RATING <= value <= MAX_RATING:
        msg = f"{field_name} must be between {MIN_RATING} and {MAX_RATING}."
        raise InvalidInputError(msg)


@dataclass(frozen=True, slots=True)
class Review:
    """A single product review as loaded from the dump or the database."""

    id: int
    reviewed_date: date
    rating: int
    text: str | None = None
    author: str | None = None
    source: str | None = None  # store the review was posted on
    title: str | None = None
    product_name: str | None = None

    def __post_init__(self) -> None:
        if isinstance(self.id, bool) or not isinstance(self.id, int):
            msg = f"Review id must be an integer, got {self.id!r}."
            raise InvalidInputError(msg)
        if self.reviewed_date is None:
            msg = "Reviewed date must not be None."
            raise InvalidInputError(msg)
        if isinstance(self.reviewed_date, datetime):
            object.__setattr__(self, "reviewed_date", self.reviewed_date.date())
        elif not isinstance(self.reviewed_date, date):
            msg = f"Reviewed date must be a date, got {self.reviewed_date!r}."
            raise InvalidInputError(msg)
        if self.rating is None:
            msg = "Product rating must not be None."
            raise InvalidInputError(msg)
        _check_rating("Product rating", self.rating)


@dataclass(frozen=True, slots=True)
class Filters:
    """Criteria narrowing which reviews are returned and how they are ordered.

    Every criterion is optional; an unset criterion places no constraint on
    the result. Text criteria are case-insensitive substring matches, date
    and time ranges are inclusive.
    """

    # Ratings
    rating: int | None = None
    min_rating: int | None = None
    max_rating: int | None = None

    # Review metadata
    author_name: str | None = None
    review_title: str | None = None
    product_name: str | None = None
    store_name: str | None = None
    review_date: date | None = None

    # Ranges
    start_date: date | None = None
    end_date: date | None = None
    start_time: time | None = None
    end_time: time | None = None

    # Sorting
    sort_by_date: bool = False
    sort_by_rating: bool = False

    def __post_init__(self) -> None:
        _check_rating("Rating", self.rating)
        _check_rating("Min rating", self.min_rating)
        _check_rating("Max rating", self.max_rating)

        if (
            self.min_rating is not None
            and self.max_rating is not None
            and self.min_rating > self.max_rating
        ):
            msg = "Min rating cannot be greater than max rating."
            raise InvalidInputError(msg)

        if (
            self.start_date is not None
            and self.end_date is not None
            and self.start_date > self.end_date
        ):
            msg = "Start date cannot be after end date."
            raise InvalidInputError(msg)

        if (
            self.start_time is not None
            and self.end_time is not None
            and self.start_time > self.end_time
        ):
            msg = "Start time cannot be after end time."
            raise InvalidInputError(msg)


@dataclass(frozen=True, slots=True)
class Statistics:
    """Aggregate numbers over the whole review store."""

    total_reviews: int = 0
    average_rating: float = 0.0
    rating_distribution: dict[int, int] = field(default_factory=dict)
    monthly_rating_average: dict[str, float] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if self.total_reviews < 0:
            msg = "Total reviews cannot be negative."
            raise InvalidInputError(msg)
        for rating, count in self.rating_distribution.items():
            if count < 0:
                msg = f"Rating count cannot be negative for rating {rating}."
                raise InvalidInputError(msg)
        # Stored sorted by key so iteration order is stable for display.
        object.__setattr__(
            self,
            "rating_distribution",
            dict(sorted(self.rating_distribution.items())),
        )
        object.__setattr__(
            self,
            "monthly_rating_average",
            dict(sorted(self.monthly_rating_average.items())),
        )
