# -*- coding: utf-8 -*-
"""
Sunrise / sunset from the NOAA solar-position approximation.

https://gml.noaa.gov/grad/solcalc/calcdetails.html

Public API:
    sunset(date, lat, lon)                       -> datetime | None  (UTC)
    sunrise(date, lat, lon)                      -> datetime | None  (UTC)
    next_sunset(lat, lon, from_instant, search_days=2) -> datetime | None
    solar_noon(date, lon)                        -> datetime         (UTC)
    day_length(date, lat, lon)                   -> timedelta | None
    solar_parameters(date)                       -> SolarParameters

Conventions
-----------
- ``date`` is a civil calendar day. A datetime contributes only its own
  calendar date (naive = host local time, aware = its own offset).
- Results are aware UTC datetimes truncated to the whole minute.
- ``None`` means the sun does not cross the horizon that day (polar day or
  night). It is an ordinary result, not an error.
- Coordinates outside ±90/±180 or non-finite raise InvalidCoordinateError.
"""
from __future__ import annotations

from dataclasses import dataclass, asdict
from datetime import date, datetime, timedelta, timezone
from typing import Any, Dict, Optional, Union
import math
import os

import erfa  # pyERFA

__all__ = [
    "SolarError", "InvalidCoordinateError", "SolarParameters", "CFG",
    "ZENITH_OFFICIAL",
    "sunset", "sunrise", "next_sunset", "solar_noon", "day_length",
    "solar_parameters", "validate_coordinates",
]

DateLike = Union[date, datetime]


# ───────────────────────────── Exceptions ─────────────────────────────
class SolarError(ValueError):
    def __init__(self, code: str, message: str):
        self.code = code
        super().__init__(f"{code}: {message}")


class InvalidCoordinateError(SolarError):
    def __init__(self, message: str):
        super().__init__("invalid_coordinate", message)


# ───────────────────────────── Config ─────────────────────────────
# Upper limb on the horizon: 90° + 34' refraction + 16' solar semi-diameter.
ZENITH_OFFICIAL = 90.833

J2000_JD = 2451545.0
DAYS_PER_CENTURY = 36525.0
MINUTES_PER_DEGREE = 4.0


@dataclass(frozen=True)
class _SolarCfg:
    zenith_deg: float
    search_days: int


CFG = _SolarCfg(
    zenith_deg=float(os.getenv("BADI_SOLAR_ZENITH_DEG", str(ZENITH_OFFICIAL))),
    search_days=max(1, int(os.getenv("BADI_SUNSET_SEARCH_DAYS", "2"))),
)


@dataclass(frozen=True)
class SolarParameters:
    jd: float
    t: float                  # Julian centuries since J2000
    equation_of_time: float   # minutes
    declination: float        # degrees

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


# ───────────────────────────── Input helpers ─────────────────────────────
def _civil(d: DateLike) -> date:
    return d.date() if isinstance(d, datetime) else d


def validate_coordinates(lat: Any, lon: Any) -> None:
    try:
        lat_f, lon_f = float(lat), float(lon)
    except (TypeError, ValueError):
        raise InvalidCoordinateError(f"latitude/longitude must be numbers, got {lat!r}, {lon!r}")
    if not (math.isfinite(lat_f) and math.isfinite(lon_f)):
        raise InvalidCoordinateError("latitude/longitude must be finite")
    if not -90.0 <= lat_f <= 90.0:
        raise InvalidCoordinateError(f"latitude must be within [-90, 90], got {lat_f}")
    if not -180.0 <= lon_f <= 180.0:
        raise InvalidCoordinateError(f"longitude must be within [-180, 180], got {lon_f}")


# ───────────────────────────── Time base ─────────────────────────────
def _julian_day_at_noon(d: date) -> float:
    # cal2jd gives the 0h JD split as (2400000.5, MJD); noon is the integral JDN.
    djm0, djm = erfa.cal2jd(d.year, d.month, d.day)
    return float(djm0) + float(djm) + 0.5


def _julian_century(jd: float) -> float:
    return (jd - J2000_JD) / DAYS_PER_CENTURY


# ───────────────────────────── Solar geometry (degrees unless noted) ─────────
def _geom_mean_lon(t: float) -> float:
    lon = 280.46646 + t * (36000.76983 + 0.0003032 * t)
    while lon > 360:
        lon -= 360
    while lon < 0:
        lon += 360
    return lon


def _geom_mean_anomaly(t: float) -> float:
    return 357.52911 + t * (35999.05029 - 0.0001537 * t)


def _orbit_eccentricity(t: float) -> float:
    return 0.016708634 - t * (0.000042037 + 0.0000001267 * t)


def _equation_of_center(t: float) -> float:
    m_rad = math.radians(_geom_mean_anomaly(t))
    return (
        math.sin(m_rad) * (1.914602 - t * (0.004817 + 0.000014 * t))
        + math.sin(2 * m_rad) * (0.019993 - 0.000101 * t)
        + math.sin(3 * m_rad) * 0.000289
    )


def _true_lon(t: float) -> float:
    return _geom_mean_lon(t) + _equation_of_center(t)


def _omega(t: float) -> float:
    return 125.04 - 1934.136 * t


def _apparent_lon(t: float) -> float:
    return _true_lon(t) - 0.00569 - 0.00478 * math.sin(math.radians(_omega(t)))


def _mean_obliquity(t: float) -> float:
    seconds = 21.448 - t * (46.8150 + t * (0.00059 - t * 0.001813))
    return 23 + (26 + seconds / 60) / 60


def _corrected_obliquity(t: float) -> float:
    return _mean_obliquity(t) + 0.00256 * math.cos(math.radians(_omega(t)))


def _declination(t: float) -> float:
    e = _corrected_obliquity(t)
    lam = _apparent_lon(t)
    return math.degrees(math.asin(math.sin(math.radians(e)) * math.sin(math.radians(lam))))


def _equation_of_time(t: float) -> float:
    """Apparent minus mean solar time, in minutes."""
    epsilon = _corrected_obliquity(t)
    l0 = _geom_mean_lon(t)
    e = _orbit_eccentricity(t)
    m = _geom_mean_anomaly(t)

    y = math.tan(math.radians(epsilon / 2))
    y = y * y

    sin2l0 = math.sin(math.radians(2 * l0))
    sinm = math.sin(math.radians(m))
    cos2l0 = math.cos(math.radians(2 * l0))
    sin4l0 = math.sin(math.radians(4 * l0))
    sin2m = math.sin(math.radians(2 * m))

    eq = (
        y * sin2l0
        - 2 * e * sinm
        + 4 * e * y * sinm * cos2l0
        - 0.5 * y * y * sin4l0
        - 1.25 * e * e * sin2m
    )
    return 4 * math.degrees(eq)


def _hour_angle(lat: float, declination: float, zenith: float) -> Optional[float]:
    lat_rad = math.radians(lat)
    dec_rad = math.radians(declination)
    cos_ha = (
        math.cos(math.radians(zenith)) / (math.cos(lat_rad) * math.cos(dec_rad))
        - math.tan(lat_rad) * math.tan(dec_rad)
    )
    if cos_ha > 1 or cos_ha < -1:
        return None
    return math.degrees(math.acos(cos_ha))


def _solar_noon_minutes(lon: float, eq_time: float) -> float:
    return 720 - MINUTES_PER_DEGREE * lon - eq_time


def _utc_from_minutes(d: date, minutes: float) -> datetime:
    midnight = datetime(d.year, d.month, d.day, tzinfo=timezone.utc)
    return midnight + timedelta(minutes=int(minutes))


# ───────────────────────────── Public API ─────────────────────────────
def solar_parameters(d: DateLike) -> SolarParameters:
    jd = _julian_day_at_noon(_civil(d))
    t = _julian_century(jd)
    return SolarParameters(
        jd=jd,
        t=t,
        equation_of_time=_equation_of_time(t),
        declination=_declination(t),
    )


def _horizon_event(d: DateLike, lat: float, lon: float, sign: int, zenith: Optional[float]) -> Optional[datetime]:
    validate_coordinates(lat, lon)
    day = _civil(d)
    p = solar_parameters(day)
    ha = _hour_angle(float(lat), p.declination, CFG.zenith_deg if zenith is None else zenith)
    if ha is None:
        return None
    minutes = _solar_noon_minutes(float(lon), p.equation_of_time) + sign * ha * MINUTES_PER_DEGREE
    return _utc_from_minutes(day, minutes)


def sunset(d: DateLike, lat: float, lon: float, *, zenith: Optional[float] = None) -> Optional[datetime]:
    """Sunset (UTC) on the civil day of ``d``; None during polar day/night."""
    return _horizon_event(d, lat, lon, +1, zenith)


def sunrise(d: DateLike, lat: float, lon: float, *, zenith: Optional[float] = None) -> Optional[datetime]:
    """Sunrise (UTC) on the civil day of ``d``; None during polar day/night."""
    return _horizon_event(d, lat, lon, -1, zenith)


def solar_noon(d: DateLike, lon: float) -> datetime:
    validate_coordinates(0.0, lon)
    day = _civil(d)
    p = solar_parameters(day)
    return _utc_from_minutes(day, _solar_noon_minutes(float(lon), p.equation_of_time))


def day_length(d: DateLike, lat: float, lon: float) -> Optional[timedelta]:
    rise = sunrise(d, lat, lon)
    sett = sunset(d, lat, lon)
    if rise is None or sett is None:
        return None
    return sett - rise


def _as_aware(instant: datetime) -> datetime:
    # Naive instants are host-local civil time.
    return instant if instant.tzinfo is not None else instant.astimezone()


def next_sunset(
    lat: float,
    lon: float,
    from_instant: Optional[datetime] = None,
    search_days: Optional[int] = None,
) -> Optional[datetime]:
    """
    First sunset strictly after ``from_instant`` (default: now).

    Tries the civil day of ``from_instant`` and the following days, at most
    ``search_days`` days in total (default 2). Returns None when every day in
    the window is polar.
    """
    if from_instant is None:
        from_instant = datetime.now().astimezone()
    days = CFG.search_days if search_days is None else max(1, int(search_days))
    start = from_instant.date()
    ref = _as_aware(from_instant)
    for offset in range(days):
        candidate = sunset(start + timedelta(days=offset), lat, lon)
        if candidate is not None and candidate > ref:
            return candidate
    return None
