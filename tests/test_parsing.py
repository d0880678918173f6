"""Tests for console input parsing."""

from __future__ import annotations

from datetime import date, time

import pytest

from review_browser.cli.parsing import (
    parse_bool,
    parse_date,
    parse_filters,
    parse_rating,
    parse_time,
)
from review_browser.domain.errors import InvalidInputError
from review_browser.domain.models import Filters


@pytest.mark.parametrize(
    "text",
    ["2018-01-05", " 2018-01-05 ", "2018/01/05", "01/05/2018", "01-05-2018"],
)
def test_parse_date_formats(text: str) -> None:
    assert parse_date(text) == date(2018, 1, 5)


@pytest.mark.parametrize("text", ["", "   ", None, "yesterday", "13/45/2018"])
def test_parse_date_rejects(text: str | None) -> None:
    with pytest.raises(InvalidInputError):
        parse_date(text)


def test_parse_time() -> None:
    assert parse_time("09:30") == time(9, 30)
    assert parse_time("09:30:15") == time(9, 30, 15)
    for bad in ["", "9", "25:00", "aa:bb", None]:
        with pytest.raises(InvalidInputError):
            parse_time(bad)


def test_parse_rating() -> None:
    assert parse_rating(" 3 ") == 3
    for bad in ["", "0", "6", "three", None]:
        with pytest.raises(InvalidInputError):
            parse_rating(bad)


def test_parse_bool() -> None:
    assert parse_bool("true")
    assert parse_bool("TRUE")
    assert not parse_bool("false")
    assert not parse_bool("nope")


def test_parse_filters_full() -> None:
    filters, unknown = parse_filters(
        "rating=5, author=Jane Doe, store=Amazon, date=2018-01-01, "
        "startdate=2017-01-01, enddate=2018-12-31, starttime=08:00, endtime=18:00, "
        "sortbydate=true, sortbyrating=TRUE, title=Nice, productname=Echo"
    )
    assert unknown == []
    assert filters == Filters(
        rating=5,
        author_name="Jane Doe",
        store_name="Amazon",
        review_date=date(2018, 1, 1),
        start_date=date(2017, 1, 1),
        end_date=date(2018, 12, 31),
        start_time=time(8, 0),
        end_time=time(18, 0),
        sort_by_date=True,
        sort_by_rating=True,
        review_title="Nice",
        product_name="Echo",
    )


def test_parse_filters_reports_unknown_keys_and_skips_junk() -> None:
    filters, unknown = parse_filters("color=red,,minrating=2,garbage")
    assert unknown == ["color"]
    assert filters == Filters(min_rating=2)


def test_parse_filters_empty() -> None:
    assert parse_filters("") == (Filters(), [])


def test_parse_filters_invalid_value_names_key() -> None:
    with pytest.raises(InvalidInputError, match="'maxrating'"):
        parse_filters("maxrating=9")


def test_parse_filters_inconsistent_combination() -> None:
    with pytest.raises(InvalidInputError, match="Min rating"):
        parse_filters("minrating=5,maxrating=2")
