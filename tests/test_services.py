"""Tests for the application services and the repository factory."""

from __future__ import annotations

from pathlib import Path

import pytest

from conftest import make_review

from review_browser.domain.models import Filters, Review
from review_browser.services.review_service import ReviewService, StatisticsService
from review_browser.storage.factory import DataStoreConfig, DataStoreType, create_repositories
from review_browser.storage.memory_repository import InMemoryReviewRepository
from review_browser.storage.sqlite_repository import SqliteReviewRepository


def test_review_service_delegates(corpus: list[Review]) -> None:
    repo = InMemoryReviewRepository()
    service = ReviewService(repo, repo)
    service.save_reviews(corpus)

    assert service.get_total_review_count() == 7
    assert service.get_review_by_id(3) == corpus[2]
    assert [r.id for r in service.get_reviews_page(1, 2)] == [1, 2]
    assert service.get_filtered_review_count(Filters(rating=5)) == 3
    assert [r.id for r in service.get_filtered_reviews_page(Filters(rating=5), 2, 2)] == [6]
    assert [r.id for r in service.get_reviews_by_keywords(["superb"])] == [3]


def test_review_service_without_write_port() -> None:
    service = ReviewService(InMemoryReviewRepository())
    with pytest.raises(RuntimeError, match="Write port not configured"):
        service.save_reviews([make_review(1)])


def test_services_require_ports() -> None:
    with pytest.raises(ValueError):
        ReviewService(None)  # type: ignore[arg-type]
    with pytest.raises(ValueError):
        StatisticsService(None)  # type: ignore[arg-type]


def test_statistics_service(corpus: list[Review]) -> None:
    stats = StatisticsService(InMemoryReviewRepository(corpus)).get_review_statistics()
    assert stats.total_reviews == 7
    assert stats.average_rating == pytest.approx(25 / 7)
    assert stats.rating_distribution[5] == 3


def test_statistics_service_empty_store() -> None:
    stats = StatisticsService(InMemoryReviewRepository()).get_review_statistics()
    assert stats.total_reviews == 0
    assert stats.average_rating == 0.0
    assert stats.rating_distribution == {}


def test_factory_builds_sqlite_bundle(tmp_path: Path) -> None:
    bundle = create_repositories(DataStoreConfig.sqlite(tmp_path / "r.db"))
    assert isinstance(bundle.query, SqliteReviewRepository)
    assert bundle.query is bundle.write is bundle.stats


def test_factory_builds_memory_bundle() -> None:
    bundle = create_repositories(DataStoreConfig.in_memory())
    assert isinstance(bundle.query, InMemoryReviewRepository)
    assert bundle.query is bundle.write is bundle.stats


def test_factory_requires_db_path_for_sqlite() -> None:
    with pytest.raises(ValueError):
        create_repositories(DataStoreConfig(DataStoreType.SQLITE))
