# review_browser/storage/factory.py

"""Pick a repository implementation from configuration."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import Path

from review_browser.domain.ports import ReviewQueryPort, ReviewStatsPort, ReviewWritePort
from review_browser.storage.memory_repository import InMemoryReviewRepository
from review_browser.storage.sqlite_repository import SqliteReviewRepository


class DataStoreType(str, Enum):
    SQLITE = "sqlite"
    IN_MEMORY = "memory"


@dataclass(frozen=True, slots=True)
class DataStoreConfig:
    type: DataStoreType
    db_path: Path | None = None

    @classmethod
    def sqlite(cls, db_path: str | Path) -> DataStoreConfig:
        return cls(DataStoreType.SQLITE, Path(db_path))

    @classmethod
    def in_memory(cls) -> DataStoreConfig:
        return cls(DataStoreType.IN_MEMORY)


@dataclass(frozen=True, slots=True)
class RepositoryBundle:
    """The three ports, usually all backed by the same repository object."""

    query: ReviewQueryPort
    write: ReviewWritePort
    stats: ReviewStatsPort


def create_repositories(config: DataStoreConfig) -> RepositoryBundle:
    """Build the repository selected by `config` and expose it through every port."""
    if config.type is DataStoreType.SQLITE:
        if config.db_path is None:
            msg = "A SQLite datastore needs a db_path."
            raise ValueError(msg)
        repo: SqliteReviewRepository | InMemoryReviewRepository = SqliteReviewRepository(
            config.db_path
        )
    elif config.type is DataStoreType.IN_MEMORY:
        repo = InMemoryReviewRepository()
    else:
        msg = f"Unsupported datastore: {config.type}"
        raise ValueError(msg)
    return RepositoryBundle(query=repo, write=repo, stats=repo)
