# badiclock/core/formatting.py
"""
Display helpers for solar events and Badí' dates.

Numeric contract:
- times render as zero-padded 24-hour "HH:MM"
- an absent event (polar day/night) renders as ABSENT_TIME ("--:--")
"""
from __future__ import annotations

from dataclasses import dataclass, asdict
from datetime import datetime, tzinfo
from typing import Any, Dict, Optional

from badiclock.core.badi_calendar import BadiDate
from badiclock.core.cities import GeoCoordinate

__all__ = [
    "ABSENT_TIME", "STYLES", "TimeRemaining",
    "format_time", "time_remaining", "format_badi_date", "format_location",
    "localized_names",
]

ABSENT_TIME = "--:--"
STYLES = ("full", "short", "arabic")


@dataclass(frozen=True)
class TimeRemaining:
    hours: int
    minutes: int
    seconds: int
    total_seconds: int

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def format_time(event: Optional[datetime], tz: Optional[tzinfo] = None) -> str:
    """HH:MM in ``tz`` (host local time when omitted)."""
    if event is None:
        return ABSENT_TIME
    local = event.astimezone(tz)
    return f"{local.hour:02d}:{local.minute:02d}"


def time_remaining(target: Optional[datetime], now: datetime) -> TimeRemaining:
    if target is None:
        return TimeRemaining(0, 0, 0, 0)
    total = int((target - now).total_seconds())
    if total <= 0:
        return TimeRemaining(0, 0, 0, 0)
    return TimeRemaining(
        hours=total // 3600,
        minutes=(total % 3600) // 60,
        seconds=total % 60,
        total_seconds=total,
    )


def format_badi_date(badi: BadiDate, style: str = "full") -> str:
    """
    Render a Badí' date.

    full   -> "`Idál (Justice), 1 Bahá (Splendour), 181 B.E."
    short  -> "1 Bahá 181"      (Ayyám-i-Há: "2 Ayyám-i-Há 181")
    arabic -> "`Idál, 1 Bahá 181 B.E."
    """
    if style not in STYLES:
        raise ValueError(f"style must be one of {STYLES}, got {style!r}")
    wd, mn = badi.weekday_name, badi.month_name
    if style == "arabic":
        return f"{wd.arabic}, {badi.day} {mn.arabic} {badi.year} B.E."
    if style == "short":
        return f"{badi.day} {mn.arabic} {badi.year}"
    return f"{wd.arabic} ({wd.english}), {badi.day} {mn.arabic} ({mn.english}), {badi.year} B.E."


def localized_names(badi: BadiDate, language: str = "ar") -> Dict[str, str]:
    """Month/weekday labels in the display language ("ar" transliterated, "en" translated)."""
    pick = "english" if language == "en" else "arabic"
    out = {
        "weekday": getattr(badi.weekday_name, pick),
        "month": getattr(badi.month_name, pick),
    }
    if badi.holy_day is not None:
        out["holy_day"] = getattr(badi.holy_day, pick)
    return out


def format_location(coord: GeoCoordinate) -> str:
    if coord.name:
        return coord.name
    lat_dir = "N" if coord.latitude >= 0 else "S"
    lon_dir = "E" if coord.longitude >= 0 else "W"
    return f"{abs(coord.latitude):.2f}°{lat_dir}, {abs(coord.longitude):.2f}°{lon_dir}"
