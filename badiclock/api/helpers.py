# badiclock/api/helpers.py
from __future__ import annotations
from datetime import date, datetime, timezone, tzinfo
from typing import Any, Dict, List, Optional

from flask import jsonify, request

from badiclock.core import solar
from badiclock.core.badi_calendar import BadiDate, is_tabulated
from badiclock.core.cities import GeoCoordinate
from badiclock.core.day_boundary import DaySnapshot
from badiclock.core.formatting import format_badi_date, format_location, format_time, localized_names, time_remaining
from badiclock.core.validators import ValidationError

# ---- request / response plumbing --------------------------------------------

def json_error(code: str, details: Any = None, http: int = 400):
    out: Dict[str, Any] = {"ok": False, "error": code}
    if details is not None:
        out["details"] = details
    return jsonify(out), http

def body_json() -> Dict[str, Any]:
    data = request.get_json(force=True, silent=True)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValidationError("JSON body must be an object")
    return data

def _iso(dt: Optional[datetime]) -> Optional[str]:
    return None if dt is None else dt.astimezone(timezone.utc).isoformat()

# ---- shapes -----------------------------------------------------------------

def badi_payload(badi: BadiDate, language: str = "ar") -> Dict[str, Any]:
    """BadiDate plus the display strings clients would otherwise rebuild."""
    out = badi.to_dict()
    out["display"] = {
        "full": format_badi_date(badi, "full"),
        "short": format_badi_date(badi, "short"),
        "arabic": format_badi_date(badi, "arabic"),
        "names": localized_names(badi, language),
    }
    return out

def badi_warnings(badi: BadiDate) -> List[str]:
    return [] if not badi.approximate else [f"nawruz_table_fallback(year={badi.year})"]

def sun_payload(day: date, loc: GeoCoordinate, tz: tzinfo) -> Dict[str, Any]:
    rise = solar.sunrise(day, loc.latitude, loc.longitude)
    sett = solar.sunset(day, loc.latitude, loc.longitude)
    noon = solar.solar_noon(day, loc.longitude)
    length = solar.day_length(day, loc.latitude, loc.longitude)
    warnings: List[str] = []
    if rise is None:
        warnings.append("polar_no_sunrise")
    if sett is None:
        warnings.append("polar_no_sunset")
    return {
        "date": day.isoformat(),
        "location": loc.to_dict(),
        "location_label": format_location(loc),
        "sunrise": _iso(rise),
        "sunset": _iso(sett),
        "solar_noon": _iso(noon),
        "day_length_minutes": None if length is None else int(length.total_seconds() // 60),
        "local": {
            "sunrise": format_time(rise, tz),
            "sunset": format_time(sett, tz),
            "solar_noon": format_time(noon, tz),
        },
        "warnings": warnings,
    }

def snapshot_payload(snap: DaySnapshot, language: str = "ar") -> Dict[str, Any]:
    tz = snap.instant.tzinfo
    out = snap.to_dict()
    out["sunset_today"] = _iso(snap.sunset_today)
    out["next_sunset"] = _iso(snap.next_sunset)
    out["badi"] = badi_payload(snap.badi, language)
    out["location_label"] = format_location(snap.location)
    out["local"] = {
        "sunset_today": format_time(snap.sunset_today, tz),
        "next_sunset": format_time(snap.next_sunset, tz),
    }
    out["until_next_sunset"] = time_remaining(snap.next_sunset, snap.instant).to_dict()
    out["tabulated_year"] = is_tabulated(snap.badi.year)
    return out
