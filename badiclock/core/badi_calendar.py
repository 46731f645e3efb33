# badiclock/core/badi_calendar.py
# -*- coding: utf-8 -*-
"""
Gregorian ⇄ Badí' calendar conversion.

Public API:
    nawruz_date(badi_year)            -> date
    intercalary_day_count(badi_year)  -> int (4 or 5)
    is_tabulated(badi_year)           -> bool
    year_length(badi_year)            -> int (365 or 366)
    badi_year_for(gregorian_date)     -> int
    to_badi(gregorian_date)           -> BadiDate
    to_gregorian(year, month, day)    -> date
    current_day_in_period(gregorian)  -> PeriodInfo
    holy_day_for(month, day)          -> HolyDay | None
    holy_days_in_year(badi_year)      -> list[(HolyDay, date)]

Notes
-----
- Conversion works on the civil calendar date only; time-of-day is ignored.
  Callers decide which civil date is "today" (the Badí' day starts at
  sunset, see day_boundary.py).
- Years outside the Naw-Rúz table fall back to March 20 and a Gregorian
  leap-year rule for Ayyám-i-Há. The fallback is an approximation; results
  built on it carry ``approximate=True``.
"""
from __future__ import annotations

from dataclasses import dataclass, asdict
from datetime import date, datetime, timedelta
from types import MappingProxyType
from typing import Any, Dict, List, Mapping, Optional, Tuple, Union

from badiclock.core.badi_data import (
    AYYAM_I_HA,
    DAYS_BEFORE_INTERCALARY,
    ERA_OFFSET,
    FALLBACK_DAY,
    FALLBACK_MONTH,
    HOLY_DAYS,
    INTERCALARY,
    MONTH_LENGTH,
    MONTHS,
    NAW_RUZ_TABLE,
    TABLE_FIRST_YEAR,
    TABLE_LAST_YEAR,
    WEEKDAYS,
    HolyDay,
    NamePair,
)

__all__ = [
    "BadiDate", "PeriodInfo", "TABLE_RANGE",
    "nawruz_date", "intercalary_day_count", "is_tabulated", "year_length",
    "badi_year_for", "to_badi", "to_gregorian", "current_day_in_period",
    "holy_day_for", "holy_days_in_year",
]

DateLike = Union[date, datetime]

TABLE_RANGE: Tuple[int, int] = (TABLE_FIRST_YEAR, TABLE_LAST_YEAR)

_HOLY_BY_KEY: Mapping[Tuple[int, int], HolyDay] = MappingProxyType(
    {h.key: h for h in HOLY_DAYS}
)


# ───────────────────────────── Value objects ─────────────────────────────
@dataclass(frozen=True)
class BadiDate:
    year: int
    month: int               # 1..19, or INTERCALARY (0) for Ayyám-i-Há
    day: int
    weekday: int             # 0 = Saturday
    is_intercalary: bool
    month_name: NamePair
    weekday_name: NamePair
    holy_day: Optional[HolyDay] = None
    approximate: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class PeriodInfo:
    day_in_period: int
    total_days_in_period: int
    is_intercalary: bool
    month: int
    year: int

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


# ───────────────────────────── Helpers ─────────────────────────────
def _civil(d: DateLike) -> date:
    return d.date() if isinstance(d, datetime) else d


def _is_gregorian_leap(year: int) -> bool:
    return (year % 4 == 0 and year % 100 != 0) or year % 400 == 0


def _badi_weekday(d: date) -> int:
    # Python: Monday=0 .. Sunday=6. Badí': Saturday=0 .. Friday=6.
    return (d.weekday() + 2) % 7


# ───────────────────────────── Year-level lookups ─────────────────────────────
def is_tabulated(badi_year: int) -> bool:
    return badi_year in NAW_RUZ_TABLE


def nawruz_date(badi_year: int) -> date:
    """Gregorian date of Naw-Rúz opening ``badi_year``."""
    gregorian_year = badi_year + ERA_OFFSET
    entry = NAW_RUZ_TABLE.get(badi_year)
    if entry is not None:
        return date(gregorian_year, entry.month, entry.day)
    return date(gregorian_year, FALLBACK_MONTH, FALLBACK_DAY)


def intercalary_day_count(badi_year: int) -> int:
    """Length of Ayyám-i-Há in ``badi_year`` (4 or 5)."""
    entry = NAW_RUZ_TABLE.get(badi_year)
    if entry is not None:
        return entry.ayyam_i_ha_days
    return 5 if _is_gregorian_leap(badi_year + ERA_OFFSET) else 4


def year_length(badi_year: int) -> int:
    return DAYS_BEFORE_INTERCALARY + intercalary_day_count(badi_year) + MONTH_LENGTH


def badi_year_for(gregorian_date: DateLike) -> int:
    """Badí' year containing the civil date ``gregorian_date``."""
    d = _civil(gregorian_date)
    badi_year = d.year - ERA_OFFSET
    if d < nawruz_date(badi_year):
        badi_year -= 1
    return badi_year


# ───────────────────────────── Conversion ─────────────────────────────
def holy_day_for(month: int, day: int) -> Optional[HolyDay]:
    """Exact (month, day) lookup; month 0 stands for Ayyám-i-Há."""
    return _HOLY_BY_KEY.get((month, day))


def to_badi(gregorian_date: DateLike) -> BadiDate:
    d = _civil(gregorian_date)
    year = badi_year_for(d)
    day_of_year = (d - nawruz_date(year)).days  # Naw-Rúz = 0
    n = intercalary_day_count(year)

    if day_of_year < DAYS_BEFORE_INTERCALARY:
        month = day_of_year // MONTH_LENGTH + 1
        day = day_of_year % MONTH_LENGTH + 1
        is_intercalary = False
    elif day_of_year < DAYS_BEFORE_INTERCALARY + n:
        month = INTERCALARY
        day = day_of_year - DAYS_BEFORE_INTERCALARY + 1
        is_intercalary = True
    else:
        month = 19
        day = day_of_year - DAYS_BEFORE_INTERCALARY - n + 1
        is_intercalary = False

    weekday = _badi_weekday(d)
    return BadiDate(
        year=year,
        month=month,
        day=day,
        weekday=weekday,
        is_intercalary=is_intercalary,
        month_name=AYYAM_I_HA if is_intercalary else MONTHS[month - 1],
        weekday_name=WEEKDAYS[weekday],
        holy_day=holy_day_for(month, day),
        approximate=not is_tabulated(year),
    )


def to_gregorian(year: int, month: int, day: int) -> date:
    """
    Inverse of to_badi for the civil date.

    ``month`` is 1..19 or INTERCALARY. Raises ValueError when the triple does
    not exist in ``year`` (e.g. Ayyám-i-Há day 5 in a 4-day year).
    """
    n = intercalary_day_count(year)
    if month == INTERCALARY:
        if not 1 <= day <= n:
            raise ValueError(f"Ayyám-i-Há of {year} B.E. has {n} days, got day {day}")
        offset = DAYS_BEFORE_INTERCALARY + day - 1
    elif 1 <= month <= 19:
        if not 1 <= day <= MONTH_LENGTH:
            raise ValueError(f"day must be 1..{MONTH_LENGTH}, got {day}")
        if month == 19:
            offset = DAYS_BEFORE_INTERCALARY + n + day - 1
        else:
            offset = (month - 1) * MONTH_LENGTH + day - 1
    else:
        raise ValueError(f"month must be 1..19 or {INTERCALARY} (Ayyám-i-Há), got {month}")
    return nawruz_date(year) + timedelta(days=offset)


def current_day_in_period(gregorian_date: DateLike) -> PeriodInfo:
    """Position within the current month or Ayyám-i-Há, for progress display."""
    badi = to_badi(gregorian_date)
    total = intercalary_day_count(badi.year) if badi.is_intercalary else MONTH_LENGTH
    return PeriodInfo(
        day_in_period=badi.day,
        total_days_in_period=total,
        is_intercalary=badi.is_intercalary,
        month=badi.month,
        year=badi.year,
    )


def holy_days_in_year(badi_year: int) -> List[Tuple[HolyDay, date]]:
    return [(h, to_gregorian(badi_year, h.month, h.day)) for h in HOLY_DAYS]
