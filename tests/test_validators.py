# tests/test_validators.py
from __future__ import annotations

from datetime import date, timedelta, timezone

import pytest

from badiclock.core.validators import (
    MAX_BADI_YEAR,
    ValidationError,
    parse_badi_triple,
    parse_badi_year,
    parse_date,
    parse_instant,
    parse_latlon,
    parse_location,
    parse_search_days,
    parse_utc_offset,
)


def _loc(e: ValidationError):
    return [err["loc"] for err in e.errors()]


def test_parse_date() -> None:
    assert parse_date("2024-03-20") == date(2024, 3, 20)
    for bad in (None, 20240320, "2024-13-01", "20/03/2024"):
        with pytest.raises(ValidationError) as ei:
            parse_date(bad)
        assert _loc(ei.value) == [["date"]]

def test_parse_instant_requires_offset() -> None:
    dt = parse_instant("2024-03-20T18:30:00+03:30")
    assert dt.utcoffset() == timedelta(hours=3, minutes=30)
    assert parse_instant("2024-03-20T15:00:00Z").utcoffset() == timedelta(0)
    with pytest.raises(ValidationError):
        parse_instant("2024-03-20T18:30:00")
    with pytest.raises(ValidationError):
        parse_instant("yesterday")

def test_parse_latlon_ranges() -> None:
    assert parse_latlon("51.5", -0.12) == (51.5, -0.12)
    for lat, lon in ((91, 0), (0, -181), (None, 0), (True, 0), ("nan", 0)):
        with pytest.raises(ValidationError):
            parse_latlon(lat, lon)

def test_parse_utc_offset() -> None:
    assert parse_utc_offset(None) is timezone.utc
    assert parse_utc_offset(210) == timezone(timedelta(minutes=210))
    assert parse_utc_offset("-300") == timezone(timedelta(minutes=-300))
    for bad in (900, "abc", 1.5):
        with pytest.raises(ValidationError):
            parse_utc_offset(bad)

def test_parse_location_precedence() -> None:
    loc = parse_location({"latitude": 10, "longitude": 20, "city": "London"})
    assert (loc.latitude, loc.longitude, loc.name) == (10.0, 20.0, None)
    assert parse_location({"city": "tehrán"}).name == "Tehran"
    assert parse_location({}, default_city="Haifa").name == "Haifa"

def test_parse_location_errors() -> None:
    with pytest.raises(ValidationError) as ei:
        parse_location({"city": "Atlantis"})
    assert "/api/cities" in ei.value.errors()[0]["msg"]
    with pytest.raises(ValidationError):
        parse_location({})
    with pytest.raises(ValidationError):
        parse_location({"latitude": 10})

def test_parse_badi_triple() -> None:
    assert parse_badi_triple({"year": 181, "month": "0", "day": 3}) == (181, 0, 3)
    with pytest.raises(ValidationError) as ei:
        parse_badi_triple({"year": "x", "month": 1})
    assert _loc(ei.value) == [["year"], ["day"]]
    with pytest.raises(ValidationError) as ei:
        parse_badi_triple({"year": 181, "month": 20, "day": 0})
    assert _loc(ei.value) == [["month"], ["day"]]

def test_civil_year_bounds() -> None:
    assert parse_date("0002-01-01") == date(2, 1, 1)
    assert parse_date("9998-12-31") == date(9998, 12, 31)
    for bad in ("0001-01-01", "0001-03-19", "9999-01-01"):
        with pytest.raises(ValidationError) as ei:
            parse_date(bad)
        assert _loc(ei.value) == [["date"]]
    assert parse_instant("9998-12-31T23:59:00-12:00").year == 9998
    for bad in ("9999-12-31T23:00:00+00:00", "0001-01-01T00:00:00Z"):
        with pytest.raises(ValidationError) as ei:
            parse_instant(bad)
        assert _loc(ei.value) == [["instant"]]

def test_badi_year_bounds() -> None:
    assert parse_badi_triple({"year": 8155, "month": 19, "day": 19}) == (8155, 19, 19)
    with pytest.raises(ValidationError) as ei:
        parse_badi_triple({"year": 8156, "month": 19, "day": 19})
    assert _loc(ei.value) == [["year"]]
    with pytest.raises(ValidationError) as ei:
        parse_badi_triple({"year": 0, "month": 20, "day": 1})
    assert _loc(ei.value) == [["year"], ["month"]]
    assert parse_badi_year("181") == 181
    assert parse_badi_year(MAX_BADI_YEAR) == 8155
    for bad in (None, "soon", 0, 8156, True):
        with pytest.raises(ValidationError) as ei:
            parse_badi_year(bad)
        assert _loc(ei.value) == [["year"]]

def test_parse_search_days() -> None:
    assert parse_search_days(None, 2) == 2
    assert parse_search_days("30", 2) == 30
    for bad in (0, 367, "many"):
        with pytest.raises(ValidationError):
            parse_search_days(bad, 2)

def test_validation_error_shapes() -> None:
    assert ValidationError("boom").errors() == [{"loc": [], "msg": "boom", "type": "value_error"}]
    assert str(ValidationError({"loc": ["x"], "msg": "bad x", "type": "value_error"})) == "bad x"
