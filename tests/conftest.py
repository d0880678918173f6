"""Shared fixtures: a small review corpus and both repository backends."""

from __future__ import annotations

from collections.abc import Iterator
from datetime import date
from pathlib import Path

import pytest

from review_browser.domain.models import Review
from review_browser.storage.memory_repository import InMemoryReviewRepository
from review_browser.storage.sqlite_repository import SqliteReviewRepository


def make_review(
    review_id: int,
    rating: int = 3,
    reviewed_date: date = date(2023, 1, 1),
    **kwargs: object,
) -> Review:
    return Review(id=review_id, reviewed_date=reviewed_date, rating=rating, **kwargs)


@pytest.fixture
def corpus() -> list[Review]:
    return [
        make_review(
            1, 5, date(2023, 1, 1),
            text="Alpha release works great", author="Jane Smith",
            source="Amazon", title="Love it", product_name="Echo Dot",
        ),
        make_review(
            2, 3, date(2023, 2, 1),
            text="Average speaker", author="John",
            source="Best Buy", title="Beta version", product_name="Echo Show",
        ),
        make_review(
            3, 5, date(2023, 3, 1),
            text="Superb sound", author="jane doe",
            source="amazon.com", title="Five stars", product_name="Echo Dot 3rd Gen",
        ),
        make_review(
            4, 1, date(2023, 3, 1),
            text="Broke after a week", author=None,
            source="Amazon", title=None, product_name="Fire TV Stick",
        ),
        make_review(
            5, 4, date(2023, 1, 15),
            text="Good value, 100% recommended", author="Mary_Jones",
            source=None, title="ÉTÉ solide", product_name=None,
        ),
        make_review(
            6, 5, date(2023, 3, 1),
            text=None, author="José Émile",
            source="Walmart", title="Great", product_name="Echo Dot",
        ),
        make_review(
            7, 2, date(2022, 12, 31),
            text="Meh", author="Jane",
            source="Amazon", title="Not for me", product_name="Echo Show",
        ),
    ]


@pytest.fixture
def sqlite_repo(tmp_path: Path) -> SqliteReviewRepository:
    return SqliteReviewRepository(tmp_path / "reviews.db")


@pytest.fixture
def memory_repo() -> InMemoryReviewRepository:
    return InMemoryReviewRepository()


@pytest.fixture(params=["sqlite", "memory"])
def repository(request: pytest.FixtureRequest, tmp_path: Path) -> Iterator[object]:
    """Each test using this fixture runs once per backend."""
    if request.param == "sqlite":
        yield SqliteReviewRepository(tmp_path / "reviews.db")
    else:
        yield InMemoryReviewRepository()


@pytest.fixture
def loaded_pair(
    corpus: list[Review],
    tmp_path: Path,
) -> tuple[SqliteReviewRepository, InMemoryReviewRepository]:
    sql = SqliteReviewRepository(tmp_path / "pair.db")
    mem = InMemoryReviewRepository()
    sql.save(corpus)
    mem.save(corpus)
    return sql, mem
