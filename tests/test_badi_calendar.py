# tests/test_badi_calendar.py
from __future__ import annotations

from datetime import date, datetime, timedelta, timezone

import pytest
from hypothesis import given, strategies as st

from badiclock.core.badi_calendar import (
    TABLE_RANGE,
    badi_year_for,
    current_day_in_period,
    holy_day_for,
    holy_days_in_year,
    intercalary_day_count,
    is_tabulated,
    nawruz_date,
    to_badi,
    to_gregorian,
    year_length,
)
from badiclock.core.badi_data import HOLY_DAYS, INTERCALARY, MONTHS, NAW_RUZ_TABLE, WEEKDAYS

FIRST, LAST = TABLE_RANGE
TABLE_YEARS = st.integers(min_value=FIRST, max_value=LAST)


@st.composite
def badi_triples(draw):
    year = draw(TABLE_YEARS)
    month = draw(st.integers(min_value=0, max_value=19))
    top = intercalary_day_count(year) if month == INTERCALARY else 19
    day = draw(st.integers(min_value=1, max_value=top))
    return year, month, day

# ─────────────────────────────────────────────────────────────────────────────
# Known dates
# ─────────────────────────────────────────────────────────────────────────────

def test_nawruz_181() -> None:
    b = to_badi(date(2024, 3, 20))
    assert (b.year, b.month, b.day) == (181, 1, 1)
    assert b.weekday == 4  # Wednesday
    assert b.weekday_name == WEEKDAYS[4]
    assert b.month_name == MONTHS[0]
    assert b.holy_day is not None and b.holy_day.key == (1, 1)
    assert not b.is_intercalary and not b.approximate

def test_last_day_of_180() -> None:
    b = to_badi(date(2024, 3, 19))
    assert (b.year, b.month, b.day) == (180, 19, 19)

def test_ayyam_i_ha_four_day_year() -> None:
    # 180 B.E. has 4 intercalary days: 26–29 Feb 2024
    first = to_badi(date(2024, 2, 26))
    last = to_badi(date(2024, 2, 29))
    assert (first.month, first.day, first.is_intercalary) == (INTERCALARY, 1, True)
    assert (last.month, last.day) == (INTERCALARY, 4)
    assert first.month_name.arabic == "Ayyám-i-Há"
    after = to_badi(date(2024, 3, 1))
    assert (after.month, after.day, after.is_intercalary) == (19, 1, False)
    before = to_badi(date(2024, 2, 25))
    assert (before.month, before.day) == (18, 19)

def test_ayyam_i_ha_five_day_year() -> None:
    assert intercalary_day_count(182) == 5
    assert to_gregorian(182, INTERCALARY, 5) == date(2026, 3, 1)
    b = to_badi(date(2026, 3, 1))
    assert (b.year, b.month, b.day) == (182, INTERCALARY, 5)

def test_day_of_the_covenant_181() -> None:
    b = to_badi(date(2024, 11, 25))
    assert (b.month, b.day) == (14, 4)
    assert b.holy_day.english == "Day of the Covenant"
    assert b.holy_day.work_suspended is False

def test_no_holy_day_on_ordinary_date() -> None:
    assert holy_day_for(5, 5) is None
    assert to_badi(to_gregorian(181, 5, 5)).holy_day is None

def test_datetime_input_uses_its_calendar_date() -> None:
    dt = datetime(2024, 3, 20, 23, 30, tzinfo=timezone(timedelta(hours=-5)))
    assert to_badi(dt) == to_badi(date(2024, 3, 20))

# ─────────────────────────────────────────────────────────────────────────────
# Year-level structure
# ─────────────────────────────────────────────────────────────────────────────

def test_table_bounds() -> None:
    assert TABLE_RANGE == (172, 221)
    assert len(NAW_RUZ_TABLE) == 50
    assert is_tabulated(172) and is_tabulated(221)
    assert not is_tabulated(171) and not is_tabulated(222)

def test_consecutive_nawruz_gap_matches_year_length() -> None:
    for y in range(FIRST, LAST):
        assert (nawruz_date(y + 1) - nawruz_date(y)).days == year_length(y), y

def test_every_tabulated_nawruz_is_first_of_baha() -> None:
    for y in range(FIRST, LAST + 1):
        b = to_badi(nawruz_date(y))
        assert (b.year, b.month, b.day) == (y, 1, 1), y
        assert not b.is_intercalary and not b.approximate, y
        assert to_badi(nawruz_date(y) - timedelta(days=1)).year == y - 1, y

def test_year_length_is_365_or_366() -> None:
    for y in range(FIRST, LAST + 1):
        assert year_length(y) in (365, 366)
        assert intercalary_day_count(y) in (4, 5)

def test_fallback_outside_table() -> None:
    assert nawruz_date(230) == date(2073, 3, 20)
    assert intercalary_day_count(233) == 5      # 2076 is a Gregorian leap year
    assert intercalary_day_count(230) == 4
    b = to_badi(date(2073, 6, 1))
    assert b.year == 230 and b.approximate

@given(st.dates(min_value=date(2015, 3, 21), max_value=date(2065, 3, 19)))
def test_year_is_monotonic_and_gregorian_round_trips(d: date) -> None:
    b = to_badi(d)
    assert FIRST <= b.year <= LAST
    assert to_badi(d + timedelta(days=1)).year in (b.year, b.year + 1)
    assert to_gregorian(b.year, b.month, b.day) == d
    assert badi_year_for(d) == b.year

@given(badi_triples())
def test_badi_round_trips(triple) -> None:
    year, month, day = triple
    b = to_badi(to_gregorian(year, month, day))
    assert (b.year, b.month, b.day) == triple
    assert b.is_intercalary == (month == INTERCALARY)

@given(st.dates(min_value=date(2015, 3, 21), max_value=date(2065, 3, 19)))
def test_weekday_matches_civil_weekday(d: date) -> None:
    # Saturday opens the Badí' week
    assert to_badi(d).weekday == (d.weekday() + 2) % 7

# ─────────────────────────────────────────────────────────────────────────────
# to_gregorian validation
# ─────────────────────────────────────────────────────────────────────────────

@pytest.mark.parametrize("year,month,day", [
    (181, INTERCALARY, 5),   # 4-day Ayyám-i-Há
    (181, 1, 20),
    (181, 20, 1),
    (181, -1, 1),
    (181, 3, 0),
])
def test_to_gregorian_rejects_impossible_dates(year, month, day) -> None:
    with pytest.raises(ValueError):
        to_gregorian(year, month, day)

# ─────────────────────────────────────────────────────────────────────────────
# Period info and holy days
# ─────────────────────────────────────────────────────────────────────────────

def test_period_info_in_month_and_intercalary() -> None:
    p = current_day_in_period(date(2024, 3, 24))
    assert (p.day_in_period, p.total_days_in_period, p.is_intercalary, p.month, p.year) == (5, 19, False, 1, 181)
    q = current_day_in_period(date(2024, 2, 27))
    assert (q.day_in_period, q.total_days_in_period, q.is_intercalary, q.month) == (2, 4, True, INTERCALARY)

def test_holy_days_in_year() -> None:
    rows = holy_days_in_year(181)
    assert len(rows) == len(HOLY_DAYS) == 11
    by_key = {h.key: d for h, d in rows}
    assert by_key[(1, 1)] == date(2024, 3, 20)
    assert by_key[(14, 4)] == date(2024, 11, 25)
    assert sum(1 for h, _ in rows if h.work_suspended) == 9
    for h, d in rows:
        assert to_badi(d).holy_day == h
