# badiclock/core/day_boundary.py
# -*- coding: utf-8 -*-
"""
Sunset-anchored "today": location → sunset → Badí' date → display.

The Badí' day begins at sunset, so from the civil day's sunset onward the
Badí' date is that of the next civil day. This module composes the two leaf
engines (solar.py, badi_calendar.py) in that order.

Public API:
    effective_date(instant, location)      -> (civil, effective, sunset_today, after_sunset)
    snapshot(instant, location, search_days=None) -> DaySnapshot
    BadiClock                              state container with ordered events

BadiClock events fire in this fixed order within one update:
    location_changed → sunset_updated → sunset_passed → badi_day_changed → language_changed
Every handler receives the clock's current DaySnapshot (or None before a
location is known).
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import Any, Callable, Dict, List, Optional, Tuple
import logging

from badiclock.core import solar
from badiclock.core.badi_calendar import BadiDate, PeriodInfo, current_day_in_period, to_badi
from badiclock.core.cities import GeoCoordinate
from badiclock.utils.store import LANGUAGE_KEY, LOCATION_KEY

__all__ = [
    "DaySnapshot", "BadiClock", "EVENTS", "LANGUAGES",
    "effective_date", "snapshot", "coordinate_from_dict",
]

log = logging.getLogger(__name__)

EVENTS: Tuple[str, ...] = (
    "location_changed",
    "sunset_updated",
    "sunset_passed",
    "badi_day_changed",
    "language_changed",
)
LANGUAGES: Tuple[str, ...] = ("en", "ar")


class _W:
    POLAR_SUNSET = "polar_no_sunset"
    NO_NEXT_SUNSET = "next_sunset_not_found"
    TABLE_FALLBACK = "nawruz_table_fallback"


def _iso(dt: Optional[datetime]) -> Optional[str]:
    return None if dt is None else dt.isoformat()


@dataclass(frozen=True)
class DaySnapshot:
    instant: datetime
    location: GeoCoordinate
    civil_date: date
    effective_date: date
    sunset_today: Optional[datetime]
    next_sunset: Optional[datetime]
    after_sunset: bool
    badi: BadiDate
    period: PeriodInfo
    warnings: Tuple[str, ...] = ()

    @property
    def badi_key(self) -> Tuple[int, int, int]:
        return (self.badi.year, self.badi.month, self.badi.day)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "instant": _iso(self.instant),
            "location": self.location.to_dict(),
            "civil_date": self.civil_date.isoformat(),
            "effective_date": self.effective_date.isoformat(),
            "sunset_today": _iso(self.sunset_today),
            "next_sunset": _iso(self.next_sunset),
            "after_sunset": self.after_sunset,
            "badi": self.badi.to_dict(),
            "period": self.period.to_dict(),
            "warnings": list(self.warnings),
        }


def _aware(instant: datetime) -> datetime:
    return instant if instant.tzinfo is not None else instant.astimezone()


def effective_date(
    instant: datetime, location: GeoCoordinate
) -> Tuple[date, date, Optional[datetime], bool]:
    """
    Civil date of ``instant`` and the Gregorian date whose Badí' day is in
    progress. Without a sunset (polar day/night) the civil date stands.
    """
    civil = instant.date()
    sunset_today = solar.sunset(civil, location.latitude, location.longitude)
    after = sunset_today is not None and _aware(instant) >= sunset_today
    effective = civil + timedelta(days=1) if after else civil
    return civil, effective, sunset_today, after


def snapshot(
    instant: datetime,
    location: GeoCoordinate,
    search_days: Optional[int] = None,
) -> DaySnapshot:
    civil, effective, sunset_today, after = effective_date(instant, location)
    nxt = solar.next_sunset(location.latitude, location.longitude, instant, search_days)
    badi = to_badi(effective)

    warnings: List[str] = []
    if sunset_today is None:
        warnings.append(_W.POLAR_SUNSET)
    if nxt is None:
        warnings.append(_W.NO_NEXT_SUNSET)
    if badi.approximate:
        warnings.append(f"{_W.TABLE_FALLBACK}(year={badi.year})")

    return DaySnapshot(
        instant=_aware(instant),
        location=location,
        civil_date=civil,
        effective_date=effective,
        sunset_today=sunset_today,
        next_sunset=nxt,
        after_sunset=after,
        badi=badi,
        period=current_day_in_period(effective),
        warnings=tuple(warnings),
    )


def coordinate_from_dict(data: Any) -> Optional[GeoCoordinate]:
    """Rebuild a stored location ({latitude, longitude, name?}); None if unusable."""
    if not isinstance(data, dict):
        return None
    try:
        lat, lon = float(data["latitude"]), float(data["longitude"])
        solar.validate_coordinates(lat, lon)
    except (KeyError, TypeError, ValueError):
        return None
    name = data.get("name")
    return GeoCoordinate(lat, lon, str(name) if name else None)


Handler = Callable[[Optional[DaySnapshot]], None]


class BadiClock:
    """
    Explicit state for a long-running display: current location, language
    and last snapshot. Time never advances by itself; callers drive it with
    tick(now) on whatever schedule they like.
    """

    def __init__(
        self,
        store: Any = None,
        *,
        default_location: Optional[GeoCoordinate] = None,
        language: str = "en",
        search_days: Optional[int] = None,
    ):
        self.store = store
        self.default_location = default_location
        self.search_days = search_days
        self.location: Optional[GeoCoordinate] = None
        self.language = language
        self.current: Optional[DaySnapshot] = None
        self._handlers: Dict[str, List[Handler]] = {e: [] for e in EVENTS}
        self._running = False

    # ── subscription ─────────────────────────────────────────────
    def subscribe(self, event: str, fn: Handler) -> Callable[[], None]:
        if event not in self._handlers:
            raise ValueError(f"unknown event {event!r}; expected one of {EVENTS}")
        self._handlers[event].append(fn)

        def _unsubscribe() -> None:
            if fn in self._handlers.get(event, []):
                self._handlers[event].remove(fn)
        return _unsubscribe

    def _dispatch(self, pending: set) -> None:
        for event in EVENTS:
            if event in pending:
                for fn in list(self._handlers[event]):
                    fn(self.current)

    # ── lifecycle ────────────────────────────────────────────────
    def init(self, now: Optional[datetime] = None) -> Optional[DaySnapshot]:
        """Restore persisted preferences and publish the initial state."""
        self._running = True
        saved = self.store.get(LOCATION_KEY) if self.store is not None else None
        self.location = coordinate_from_dict(saved) or self.default_location
        lang = self.store.get(LANGUAGE_KEY) if self.store is not None else None
        if lang in LANGUAGES:
            self.language = lang

        if self.location is None:
            log.info("BadiClock started without a location")
            return None
        self.current = snapshot(self._now(now), self.location, self.search_days)
        self._dispatch({"location_changed", "sunset_updated", "badi_day_changed"})
        return self.current

    def teardown(self) -> None:
        self._running = False
        for handlers in self._handlers.values():
            handlers.clear()

    # ── updates ──────────────────────────────────────────────────
    def set_location(self, location: GeoCoordinate, now: Optional[datetime] = None) -> DaySnapshot:
        solar.validate_coordinates(location.latitude, location.longitude)
        self.location = location
        if self.store is not None:
            self.store.set(LOCATION_KEY, location.to_dict())
        prev = self.current
        self.current = snapshot(self._now(now), location, self.search_days)

        pending = {"location_changed"}
        if prev is None or prev.next_sunset != self.current.next_sunset:
            pending.add("sunset_updated")
        if prev is None or prev.badi_key != self.current.badi_key:
            pending.add("badi_day_changed")
        self._dispatch(pending)
        return self.current

    def set_language(self, language: str) -> None:
        if language not in LANGUAGES:
            raise ValueError(f"language must be one of {LANGUAGES}, got {language!r}")
        if self.store is not None:
            self.store.set(LANGUAGE_KEY, language)
        if language != self.language:
            self.language = language
            self._dispatch({"language_changed"})

    def tick(self, now: Optional[datetime] = None) -> Optional[DaySnapshot]:
        """Re-evaluate at ``now``; emits sunset/day events only on change."""
        if not self._running or self.location is None:
            return self.current
        now = self._now(now)
        prev = self.current
        self.current = snapshot(now, self.location, self.search_days)

        pending = set()
        if prev is not None:
            if prev.next_sunset is not None and now >= prev.next_sunset:
                pending.add("sunset_passed")
            if prev.next_sunset != self.current.next_sunset:
                pending.add("sunset_updated")
            if prev.badi_key != self.current.badi_key:
                pending.add("badi_day_changed")
        else:
            pending.update({"sunset_updated", "badi_day_changed"})
        if "badi_day_changed" in pending:
            log.debug("Badí' day changed to %s", self.current.badi_key)
        self._dispatch(pending)
        return self.current

    @staticmethod
    def _now(now: Optional[datetime]) -> datetime:
        if now is None:
            return datetime.now().astimezone()
        return _aware(now)
