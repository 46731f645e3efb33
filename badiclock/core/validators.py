# badiclock/core/validators.py
from __future__ import annotations

import math
from datetime import date, datetime, timedelta, timezone
from typing import Any, Dict, List, Optional, Tuple, Union

from badiclock.core.badi_data import ERA_OFFSET, INTERCALARY
from badiclock.core.cities import GeoCoordinate, find_city

# Civil dates are kept one year clear of datetime's 1..9999 range so that
# the day after (sunset rollover) and the Naw-Rúz of the year before
# always exist.
MIN_GREGORIAN_YEAR = 2
MAX_GREGORIAN_YEAR = 9998
MIN_BADI_YEAR = 1
MAX_BADI_YEAR = MAX_GREGORIAN_YEAR - ERA_OFFSET  # 8155

# ───────────────────────── errors ─────────────────────────

class ValidationError(ValueError):
    """Structured validator error; .errors() returns [{loc, msg, type}, ...]."""
    def __init__(self, details: Union[str, Dict[str, Any], List[Dict[str, Any]]]):
        if isinstance(details, str):
            self._details = [{"loc": [], "msg": details, "type": "value_error"}]
            super().__init__(details)
        elif isinstance(details, dict):
            self._details = [details]
            super().__init__(details.get("msg", "validation_error"))
        else:
            self._details = list(details) or [{"loc": [], "msg": "validation_error", "type": "value_error"}]
            super().__init__(self._details[0]["msg"])

    def errors(self) -> List[Dict[str, Any]]:
        return list(self._details)


# ───────────────────────── helpers ─────────────────────────

def _err(loc: List[str] | str, msg: str, typ: str = "value_error") -> Dict[str, Any]:
    return {"loc": [loc] if isinstance(loc, str) else loc, "msg": msg, "type": typ}

def _as_float(v: Any) -> Optional[float]:
    if isinstance(v, bool) or v is None:
        return None
    try:
        x = float(v)
    except (TypeError, ValueError):
        return None
    return x if math.isfinite(x) else None

def _as_int(v: Any) -> Optional[int]:
    if isinstance(v, bool):
        return None
    if isinstance(v, int):
        return v
    if isinstance(v, str) and v.strip().lstrip("-").isdigit():
        return int(v.strip())
    return None


# ───────────────────────── atomic parsers ─────────────────────────

def _check_gregorian_year(year: int, loc: str) -> None:
    if not MIN_GREGORIAN_YEAR <= year <= MAX_GREGORIAN_YEAR:
        raise ValidationError(_err(loc, f"year must be between {MIN_GREGORIAN_YEAR} and {MAX_GREGORIAN_YEAR}", "value_error.date"))

def parse_date(s: Any, loc: str = "date") -> date:
    if not isinstance(s, str):
        raise ValidationError(_err(loc, "required string 'YYYY-MM-DD'", "type_error.str"))
    try:
        d = datetime.strptime(s.strip(), "%Y-%m-%d").date()
    except ValueError:
        raise ValidationError(_err(loc, "date must be 'YYYY-MM-DD'", "value_error.date"))
    _check_gregorian_year(d.year, loc)
    return d

def parse_instant(s: Any, loc: str = "instant") -> datetime:
    """ISO-8601 date-time; an explicit offset is required ('Z' accepted)."""
    if not isinstance(s, str):
        raise ValidationError(_err(loc, "required ISO-8601 string", "type_error.str"))
    raw = s.strip()
    if raw.endswith(("Z", "z")):
        raw = raw[:-1] + "+00:00"
    try:
        dt = datetime.fromisoformat(raw)
    except ValueError:
        raise ValidationError(_err(loc, "instant must be ISO-8601 like '2024-03-20T18:30:00+03:30'", "value_error.datetime"))
    if dt.tzinfo is None:
        raise ValidationError(_err(loc, "instant must carry a UTC offset", "value_error.datetime"))
    _check_gregorian_year(dt.year, loc)
    return dt

def parse_latlon(lat: Any, lon: Any, lat_key="latitude", lon_key="longitude") -> Tuple[float, float]:
    lat_f = _as_float(lat); lon_f = _as_float(lon)
    if lat_f is None or lon_f is None:
        raise ValidationError(_err([lat_key, lon_key], "latitude/longitude must be finite numbers", "type_error.float"))
    if not (-90.0 <= lat_f <= 90.0):
        raise ValidationError(_err(lat_key, "latitude must be between -90 and 90"))
    if not (-180.0 <= lon_f <= 180.0):
        raise ValidationError(_err(lon_key, "longitude must be between -180 and 180"))
    return lat_f, lon_f

def parse_utc_offset(v: Any, loc: str = "utc_offset_minutes") -> timezone:
    if v is None:
        return timezone.utc
    minutes = _as_int(v)
    if minutes is None or not -14 * 60 <= minutes <= 14 * 60:
        raise ValidationError(_err(loc, "must be an integer number of minutes within ±840"))
    return timezone(timedelta(minutes=minutes))

def parse_location(body: Dict[str, Any], default_city: Optional[str] = None) -> GeoCoordinate:
    """
    Resolve {latitude, longitude[, name]} or {city}. Explicit coordinates win.
    Falls back to ``default_city`` when neither is present.
    """
    has_coords = body.get("latitude") is not None or body.get("longitude") is not None
    if has_coords:
        lat, lon = parse_latlon(body.get("latitude"), body.get("longitude"))
        name = body.get("name")
        return GeoCoordinate(lat, lon, str(name) if name else None)
    city = body.get("city") or default_city
    if city is None:
        raise ValidationError(_err(["latitude", "longitude", "city"], "provide latitude/longitude or a known city"))
    found = find_city(city)
    if found is None:
        raise ValidationError(_err("city", f"unknown city {city!r}; see /api/cities", "value_error.city"))
    return found

def parse_badi_triple(body: Dict[str, Any]) -> Tuple[int, int, int]:
    errs: List[Dict[str, Any]] = []
    out: List[int] = []
    for key in ("year", "month", "day"):
        v = _as_int(body.get(key))
        if v is None:
            errs.append(_err(key, "required integer", "type_error.integer"))
        out.append(v if v is not None else 0)
    if errs:
        raise ValidationError(errs)
    year, month, day = out
    if not MIN_BADI_YEAR <= year <= MAX_BADI_YEAR:
        errs.append(_err("year", f"year must be {MIN_BADI_YEAR}..{MAX_BADI_YEAR} B.E."))
    if not (month == INTERCALARY or 1 <= month <= 19):
        errs.append(_err("month", f"month must be 1..19, or {INTERCALARY} for Ayyám-i-Há"))
    if day < 1:
        errs.append(_err("day", "day must be >= 1"))
    if errs:
        raise ValidationError(errs)
    return year, month, day

def parse_badi_year(v: Any, loc: str = "year") -> int:
    year = _as_int(v)
    if year is None:
        raise ValidationError(_err(loc, "required integer B.E. year", "type_error.integer"))
    if not MIN_BADI_YEAR <= year <= MAX_BADI_YEAR:
        raise ValidationError(_err(loc, f"year must be {MIN_BADI_YEAR}..{MAX_BADI_YEAR} B.E."))
    return year

def parse_search_days(v: Any, default: int) -> int:
    if v is None:
        return default
    n = _as_int(v)
    if n is None or not 1 <= n <= 366:
        raise ValidationError(_err("search_days", "must be an integer between 1 and 366"))
    return n
