# review_browser/cli/parsing.py

"""Parsing of user-typed dates, times, ratings and filter criteria."""

from __future__ import annotations

import logging
import re
from datetime import date, time

from review_browser.domain.errors import InvalidInputError
from review_browser.domain.models import MAX_RATING, MIN_RATING, Filters

logger = logging.getLogger(__name__)

_US_DATE = re.compile(r"^(\d{2})[/-](\d{2})[/-](\d{4})$")

# Filter keys accepted by `filter key=value,...`.
RATING = "rating"
MIN_RATING_KEY = "minrating"
MAX_RATING_KEY = "maxrating"
AUTHOR = "author"
TITLE = "title"
PRODUCT = "productname"
STORE = "store"
DATE = "date"
START_DATE = "startdate"
END_DATE = "enddate"
START_TIME = "starttime"
END_TIME = "endtime"
SORT_DATE = "sortbydate"
SORT_RATING = "sortbyrating"

FILTER_HELP: list[tuple[str, str, str]] = [
    (RATING, "Integer [1..5]", f"{RATING}=5"),
    (MIN_RATING_KEY, "Integer [1..5]", f"{MIN_RATING_KEY}=3"),
    (MAX_RATING_KEY, "Integer [1..5]", f"{MAX_RATING_KEY}=5"),
    (AUTHOR, "String", f"{AUTHOR}=John Doe"),
    (TITLE, "String", f"{TITLE}=Great speaker"),
    (PRODUCT, "String", f"{PRODUCT}=Echo Dot"),
    (STORE, "String", f"{STORE}=Amazon"),
    (DATE, "YYYY-MM-DD", f"{DATE}=2018-01-01"),
    (START_DATE, "YYYY-MM-DD", f"{START_DATE}=2018-01-01"),
    (END_DATE, "YYYY-MM-DD", f"{END_DATE}=2018-12-31"),
    (START_TIME, "HH:MM[:SS]", "only applies to stored times"),
    (END_TIME, "HH:MM[:SS]", "only applies to stored times"),
    (SORT_DATE, "Boolean", f"{SORT_DATE}=true"),
    (SORT_RATING, "Boolean", f"{SORT_RATING}=true"),
]


def parse_date(value: str | None) -> date:
    """Parse YYYY-MM-DD, YYYY/MM/DD or MM/DD/YYYY."""
    if value is None or not value.strip():
        msg = "Date must not be empty."
        raise InvalidInputError(msg)
    text = value.strip()

    try:
        return date.fromisoformat(text.replace("/", "-"))
    except ValueError:
        pass

    match = _US_DATE.match(text)
    if match:
        month, day, year = (int(part) for part in match.groups())
        try:
            return date(year, month, day)
        except ValueError:
            pass

    msg = f"Unrecognized date format: {value}"
    raise InvalidInputError(msg)


def parse_time(value: str | None) -> time:
    """Parse HH:MM or HH:MM:SS."""
    if value is None or not value.strip():
        msg = "Time must not be empty."
        raise InvalidInputError(msg)
    text = value.strip()
    colons = text.count(":")
    if colons == 1:
        text += ":00"
    elif colons != 2:
        msg = f"Time must be HH:MM or HH:MM:SS, got {value!r}."
        raise InvalidInputError(msg)
    try:
        return time.fromisoformat(text)
    except ValueError as exc:
        msg = f"Unrecognized time format: {value}"
        raise InvalidInputError(msg) from exc


def parse_rating(value: str | None) -> int:
    if value is None or not value.strip():
        msg = "Rating must not be empty."
        raise InvalidInputError(msg)
    try:
        rating = int(value.strip())
    except ValueError as exc:
        msg = f"Invalid rating format: {value}"
        raise InvalidInputError(msg) from exc
    if not MIN_RATING <= rating <= MAX_RATING:
        msg = f"Rating must be between {MIN_RATING} and {MAX_RATING}."
        raise InvalidInputError(msg)
    return rating


def parse_bool(value: str) -> bool:
    return value.strip().lower() in {"true", "yes", "1", "y"}


def parse_filters(criteria: str) -> tuple[Filters, list[str]]:
    """Parse `key=value,key=value` into Filters.

    Returns the filters and the list of unknown keys, which are ignored.
    Raises InvalidInputError on a bad value or an inconsistent combination.
    """
    kwargs: dict[str, object] = {}
    unknown: list[str] = []

    for part in criteria.split(","):
        part = part.strip()
        if not part or "=" not in part:
            continue
        key, value = (token.strip() for token in part.split("=", 1))
        key = key.lower()

        try:
            if key == RATING:
                kwargs["rating"] = parse_rating(value)
            elif key == MIN_RATING_KEY:
                kwargs["min_rating"] = parse_rating(value)
            elif key == MAX_RATING_KEY:
                kwargs["max_rating"] = parse_rating(value)
            elif key == AUTHOR:
                kwargs["author_name"] = value
            elif key == TITLE:
                kwargs["review_title"] = value
            elif key == PRODUCT:
                kwargs["product_name"] = value
            elif key == STORE:
                kwargs["store_name"] = value
            elif key == DATE:
                kwargs["review_date"] = parse_date(value)
            elif key == START_DATE:
                kwargs["start_date"] = parse_date(value)
            elif key == END_DATE:
                kwargs["end_date"] = parse_date(value)
            elif key == START_TIME:
                kwargs["start_time"] = parse_time(value)
            elif key == END_TIME:
                kwargs["end_time"] = parse_time(value)
            elif key == SORT_DATE:
                kwargs["sort_by_date"] = parse_bool(value)
            elif key == SORT_RATING:
                kwargs["sort_by_rating"] = parse_bool(value)
            else:
                unknown.append(key)
        except InvalidInputError as exc:
            msg = f"Invalid value for '{key}': {exc}"
            raise InvalidInputError(msg) from exc

    if unknown:
        logger.debug("Ignoring unknown filter keys: %s", unknown)
    return Filters(**kwargs), unknown
