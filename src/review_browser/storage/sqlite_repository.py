# review_browser/storage/sqlite_repository.py

"""
SQLite-backed review repository.

Filters are compiled into a parameterized WHERE clause, one fragment per
criterion that is set, so the database does the filtering, ordering and
paging. Every call opens and closes its own connection; a failing call
leaves nothing behind that could affect the next one.
"""

from __future__ import annotations

import logging
import sqlite3
from collections.abc import Iterable, Iterator, Sequence
from contextlib import contextmanager
from datetime import date
from pathlib import Path

from review_browser.domain.errors import InvalidInputError, PersistenceError
from review_browser.domain.models import MAX_RATING, MIN_RATING, Filters, Review
from review_browser.domain.ports import ReviewQueryPort, ReviewStatsPort, ReviewWritePort
from review_browser.query.predicates import NO_FILTERS, normalize_keywords, page_bounds

logger = logging.getLogger(__name__)

DATABASE_FILE = "reviews.db"

_CREATE_TABLE_SQL = """
    CREATE TABLE IF NOT EXISTS reviews (
        id INTEGER PRIMARY KEY,
        review TEXT,
        author TEXT,
        reviewSource TEXT,
        title TEXT,
        productName TEXT,
        reviewedDate TEXT,
        rating INTEGER
    )
"""

_UPSERT_SQL = (
    "INSERT OR REPLACE INTO reviews "
    "(id, review, author, reviewSource, title, productName, reviewedDate, rating) "
    "VALUES (?, ?, ?, ?, ?, ?, ?, ?)"
)

# Stored dates are ISO strings, optionally followed by a time suffix
# ("2023-01-05" or "2023-01-05T14:30:00"). Only the day part is compared
# for date criteria.
_DAY = "substr(reviewedDate, 1, 10)"
_TIME_OF_DAY = "time(substr(reviewedDate, 12))"
_HAS_NO_TIME = "length(reviewedDate) <= 10"

# Rows that map back to a Review: a real calendar day in canonical form and
# an integer rating in range. Anything else is never counted or paged.
_READABLE_ROW = (
    f"date({_DAY}) = {_DAY} AND {_DAY} >= '0001-01-01' "
    f"AND typeof(rating) = 'integer' AND rating BETWEEN {MIN_RATING} AND {MAX_RATING}"
)

# SQLite's own LOWER() and LIKE fold ASCII letters only.
_LOWER_FUNCTION = "py_lower"

_SQLITE_MAX_INT = 2**63 - 1


def _py_lower(value: str | None) -> str | None:
    return value.lower() if isinstance(value, str) else value


def _escape_like(value: str) -> str:
    return value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def _contains_pattern(value: str) -> str:
    return f"%{_escape_like(value.lower())}%"


def _contains_fragment(column: str) -> str:
    return f"{_LOWER_FUNCTION}({column}) LIKE ? ESCAPE '\\'"


def _sql_window(page: int, page_size: int) -> tuple[int, int] | None:
    """`page_bounds` limited to SQLite's integer range, or None if nothing can be returned."""
    bounds = page_bounds(page, page_size)
    if bounds is None:
        return None
    offset, limit = bounds
    if offset > _SQLITE_MAX_INT:
        return None
    return offset, min(limit, _SQLITE_MAX_INT)


def build_where_clause(filters: Filters | None) -> tuple[str, list[object]]:
    """Compile `filters` into a WHERE clause and its positional parameters.

    The clause always excludes rows that cannot be read back as a Review;
    each criterion that is set adds one fragment after that.
    """
    f = filters or NO_FILTERS
    fragments: list[str] = [_READABLE_ROW]
    params: list[object] = []

    if f.rating is not None:
        fragments.append("rating = ?")
        params.append(f.rating)
    if f.min_rating is not None:
        fragments.append("rating >= ?")
        params.append(f.min_rating)
    if f.max_rating is not None:
        fragments.append("rating <= ?")
        params.append(f.max_rating)

    for column, value in (
        ("author", f.author_name),
        ("title", f.review_title),
        ("productName", f.product_name),
        ("reviewSource", f.store_name),
    ):
        if value and value.strip():
            fragments.append(_contains_fragment(column))
            params.append(_contains_pattern(value))

    if f.review_date is not None:
        # Prefix match so a stored time suffix does not prevent the match.
        fragments.append("reviewedDate LIKE ?")
        params.append(f"{f.review_date.isoformat()}%")
    if f.start_date is not None:
        fragments.append(f"{_DAY} >= ?")
        params.append(f.start_date.isoformat())
    if f.end_date is not None:
        fragments.append(f"{_DAY} <= ?")
        params.append(f.end_date.isoformat())

    if f.start_time is not None:
        fragments.append(f"({_HAS_NO_TIME} OR {_TIME_OF_DAY} >= ?)")
        params.append(f.start_time.strftime("%H:%M:%S"))
    if f.end_time is not None:
        fragments.append(f"({_HAS_NO_TIME} OR {_TIME_OF_DAY} <= ?)")
        params.append(f.end_time.strftime("%H:%M:%S"))

    return " WHERE " + " AND ".join(fragments), params


def build_order_by(filters: Filters | None) -> str:
    f = filters or NO_FILTERS
    keys: list[str] = []
    if f.sort_by_rating:
        keys.append("rating DESC")
    if f.sort_by_date:
        keys.append(f"{_DAY} DESC")
    keys.append("id")
    return " ORDER BY " + ", ".join(keys)


def build_filtered_query(
    filters: Filters | None,
    page: int,
    page_size: int,
) -> tuple[str, list[object]]:
    """Build the full SELECT for one page; raises ValueError if the window is empty."""
    bounds = _sql_window(page, page_size)
    if bounds is None:
        msg = f"Empty page window (page={page}, page_size={page_size})."
        raise ValueError(msg)
    offset, limit = bounds

    where, params = build_where_clause(filters)
    sql = "SELECT * FROM reviews" + where + build_order_by(filters) + " LIMIT ? OFFSET ?"
    return sql, [*params, limit, offset]


def _parse_stored_date(value: str | None) -> date | None:
    if not value or len(value) < 10:
        return None
    try:
        parsed = date.fromisoformat(value[:10])
    except ValueError:
        return None
    # Same rule as the SQL guard: only canonical YYYY-MM-DD is accepted.
    return parsed if parsed.isoformat() == value[:10] else None


class SqliteReviewRepository(ReviewQueryPort, ReviewWritePort, ReviewStatsPort):
    """
    Review repository on a single SQLite file.

    Usage:
        repo = SqliteReviewRepository("reviews.db")
        repo.save(reviews)
        top = repo.query(Filters(min_rating=4, sort_by_rating=True), 1, 20)
    """

    def __init__(self, db_path: str | Path = DATABASE_FILE) -> None:
        if db_path is None:
            msg = "db_path must not be None."
            raise ValueError(msg)
        self.db_path = str(db_path)
        self._create_table()

    @contextmanager
    def _get_connection(self, action: str) -> Iterator[sqlite3.Connection]:
        """Open a connection for one call; commit on success, roll back on error."""
        try:
            conn = sqlite3.connect(self.db_path)
        except sqlite3.Error as exc:
            msg = f"Error {action}: cannot open {self.db_path}: {exc}"
            raise PersistenceError(msg) from exc

        conn.row_factory = sqlite3.Row
        conn.create_function(_LOWER_FUNCTION, 1, _py_lower, deterministic=True)
        try:
            yield conn
            conn.commit()
        except sqlite3.Error as exc:
            conn.rollback()
            msg = f"Error {action}: {exc}"
            raise PersistenceError(msg) from exc
        finally:
            conn.close()

    def _create_table(self) -> None:
        with self._get_connection("creating 'reviews' table") as conn:
            conn.execute(_CREATE_TABLE_SQL)
        logger.debug("Reviews table ready in %s", self.db_path)

    # ── Write port ─────────────────────────────────────────────────

    def save(self, reviews: Iterable[Review]) -> None:
        """Upsert all reviews in one transaction; on failure nothing is written.

        None entries are skipped.
        """
        rows = [self._review_to_row(review) for review in reviews if review is not None]
        if not rows:
            return
        with self._get_connection("saving reviews batch") as conn:
            conn.executemany(_UPSERT_SQL, rows)
        logger.info("Saved %d reviews to %s", len(rows), self.db_path)

    # ── Query port ─────────────────────────────────────────────────

    def query(
        self,
        filters: Filters | None,
        page: int,
        page_size: int,
    ) -> list[Review]:
        if _sql_window(page, page_size) is None:
            return []
        sql, params = build_filtered_query(filters, page, page_size)
        logger.debug("Filtered query: %s %s", sql, params)
        with self._get_connection("loading filtered reviews") as conn:
            rows = conn.execute(sql, params).fetchall()
        return self._rows_to_reviews(rows)

    def count(self, filters: Filters | None) -> int:
        where, params = build_where_clause(filters)
        with self._get_connection("counting filtered reviews") as conn:
            row = conn.execute("SELECT COUNT(*) FROM reviews" + where, params).fetchone()
        return row[0] if row else 0

    def get_by_id(self, review_id: int) -> Review | None:
        if review_id is None:
            return None
        if review_id > _SQLITE_MAX_INT or review_id < -_SQLITE_MAX_INT - 1:
            return None
        with self._get_connection(f"fetching review by id {review_id}") as conn:
            row = conn.execute("SELECT * FROM reviews WHERE id = ?", (review_id,)).fetchone()
        if row is None:
            return None
        reviews = self._rows_to_reviews([row])
        return reviews[0] if reviews else None

    def get_page(self, page: int, page_size: int) -> list[Review]:
        bounds = _sql_window(page, page_size)
        if bounds is None:
            return []
        offset, limit = bounds
        with self._get_connection("loading paged reviews") as conn:
            rows = conn.execute(
                f"SELECT * FROM reviews WHERE {_READABLE_ROW} ORDER BY id LIMIT ? OFFSET ?",
                (limit, offset),
            ).fetchall()
        return self._rows_to_reviews(rows)

    def get_total_count(self) -> int:
        with self._get_connection("counting reviews") as conn:
            row = conn.execute(f"SELECT COUNT(*) FROM reviews WHERE {_READABLE_ROW}").fetchone()
        return row[0] if row else 0

    def get_by_keywords(self, keywords: Sequence[str] | None) -> list[Review]:
        normalized = normalize_keywords(keywords)
        if not normalized:
            return []

        conditions: list[str] = []
        params: list[str] = []
        for keyword in normalized:
            conditions.append(
                f"({_contains_fragment('review')} OR {_contains_fragment('title')})"
            )
            pattern = _contains_pattern(keyword)
            params.extend([pattern, pattern])

        sql = (
            f"SELECT * FROM reviews WHERE {_READABLE_ROW} AND ("
            + " OR ".join(conditions)
            + ") ORDER BY id"
        )
        with self._get_connection("searching reviews by keywords") as conn:
            rows = conn.execute(sql, params).fetchall()
        return self._rows_to_reviews(rows)

    # ── Stats port ─────────────────────────────────────────────────

    def get_average_rating(self) -> float:
        with self._get_connection("calculating average rating") as conn:
            row = conn.execute(
                f"SELECT AVG(rating) FROM reviews WHERE {_READABLE_ROW}"
            ).fetchone()
        return float(row[0]) if row and row[0] is not None else 0.0

    def get_rating_distribution(self) -> dict[int, int]:
        with self._get_connection("getting rating distribution") as conn:
            rows = conn.execute(
                f"SELECT rating, COUNT(*) FROM reviews WHERE {_READABLE_ROW} "
                "GROUP BY rating ORDER BY rating"
            ).fetchall()
        return {row[0]: row[1] for row in rows}

    def get_monthly_rating_average(self) -> dict[str, float]:
        with self._get_connection("getting monthly rating average") as conn:
            rows = conn.execute(
                "SELECT substr(reviewedDate, 1, 7) AS month, AVG(rating) "
                f"FROM reviews WHERE {_READABLE_ROW} GROUP BY month ORDER BY month"
            ).fetchall()
        return {row[0]: float(row[1]) for row in rows if row[0]}

    # ── Row mapping ────────────────────────────────────────────────

    @staticmethod
    def _review_to_row(review: Review) -> tuple[object, ...]:
        return (
            review.id,
            review.text,
            review.author,
            review.source,
            review.title,
            review.product_name,
            review.reviewed_date.isoformat(),
            review.rating,
        )

    def _rows_to_reviews(self, rows: Iterable[sqlite3.Row]) -> list[Review]:
        reviews: list[Review] = []
        for row in rows:
            review = self._row_to_review(row)
            if review is not None:
                reviews.append(review)
        return reviews

    @staticmethod
    def _row_to_review(row: sqlite3.Row) -> Review | None:
        """Convert a database row to a Review; rows that fail validation are skipped."""
        reviewed_date = _parse_stored_date(row["reviewedDate"])
        try:
            return Review(
                id=row["id"],
                reviewed_date=reviewed_date,
                rating=row["rating"],
                text=row["review"],
                author=row["author"],
                source=row["reviewSource"],
                title=row["title"],
                product_name=row["productName"],
            )
        except InvalidInputError as exc:
            logger.warning("Skipping unreadable review row id=%s: %s", row["id"], exc)
            return None
