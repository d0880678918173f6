# review_browser/bootstrap.py

"""Wire repositories and services, loading the JSON dump when the store is stale."""

from __future__ import annotations

import logging
from pathlib import Path

from review_browser.config import Settings
from review_browser.io.reviews_json import load_reviews_from_json
from review_browser.services.review_service import ReviewService, StatisticsService
from review_browser.storage.factory import DataStoreConfig, DataStoreType, create_repositories

logger = logging.getLogger(__name__)


def is_parsing_required(db_path: Path, json_path: Path) -> bool:
    """Return True if the database is missing or older than the JSON dump."""
    if not json_path.exists():
        msg = f"JSON file does not exist: {json_path.resolve()}"
        raise FileNotFoundError(msg)
    if not db_path.exists():
        return True
    return json_path.stat().st_mtime > db_path.stat().st_mtime


def datastore_config(settings: Settings) -> DataStoreConfig:
    store_type = DataStoreType(settings.datastore)
    if store_type is DataStoreType.IN_MEMORY:
        return DataStoreConfig.in_memory()
    return DataStoreConfig.sqlite(settings.db_path)


def bootstrap(settings: Settings) -> tuple[ReviewService, StatisticsService]:
    """Create the services for `settings`, importing the dump if needed."""
    config = datastore_config(settings)

    # Checked before the repository is built, because building the SQLite
    # repository creates the database file.
    if config.type is DataStoreType.IN_MEMORY:
        parse_required = True
    elif config.db_path is None:
        msg = "SQLite datastore requires a database path."
        raise ValueError(msg)
    else:
        parse_required = is_parsing_required(config.db_path, settings.json_path)

    bundle = create_repositories(config)
    review_service = ReviewService(bundle.query, bundle.write)
    statistics_service = StatisticsService(bundle.stats)

    if parse_required:
        logger.info("Parsing reviews from %s ...", settings.json_path)
        reviews = load_reviews_from_json(settings.json_path)
        logger.info("Parsed %d reviews. Saving to %s datastore.", len(reviews), config.type.value)
        review_service.save_reviews(reviews)
    else:
        logger.info("Using existing datastore %s.", config.db_path)

    return review_service, statistics_service
