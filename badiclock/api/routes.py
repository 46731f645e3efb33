# badiclock/api/routes.py
"""
Badí' Clock: API routes
- Calendar conversion (Gregorian ⇄ Badí'), Naw-Rúz table, holy days
- Sunrise / sunset (NOAA approximation)
- Sunset-anchored "today" snapshot
- Saved display preferences (location, language)
- Ops: /api/health, /api/config, /api/cities

Notes:
- Instants are ISO-8601 with an explicit offset; that offset is the civil
  calendar used for "today" and for HH:MM rendering.
- Domain conditions (polar day/night, years outside the Naw-Rúz table) are
  not errors: they come back as 200 with entries in "warnings".
"""

from __future__ import annotations

import logging
import os
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from flask import Blueprint, current_app, jsonify, request

from badiclock.version import VERSION
from badiclock.api.helpers import (
    badi_payload,
    badi_warnings,
    body_json,
    json_error,
    snapshot_payload,
    sun_payload,
)
from badiclock.core import solar
from badiclock.core.badi_calendar import (
    TABLE_RANGE,
    current_day_in_period,
    holy_days_in_year,
    intercalary_day_count,
    is_tabulated,
    nawruz_date,
    to_badi,
    to_gregorian,
    year_length,
)
from badiclock.core.badi_data import HOLY_DAYS
from badiclock.core.cities import GeoCoordinate, list_cities
from badiclock.core.day_boundary import LANGUAGES, coordinate_from_dict, snapshot
from badiclock.core.validators import (
    ValidationError,
    parse_badi_triple,
    parse_badi_year,
    parse_date,
    parse_instant,
    parse_location,
    parse_search_days,
    parse_utc_offset,
)
from badiclock.utils.config import default_city, sunset_search_days
from badiclock.utils.metrics import MET_CONVERSIONS, count_warnings
from badiclock.utils.ratelimit import rate_limit
from badiclock.utils.store import LANGUAGE_KEY, LOCATION_KEY

log = logging.getLogger(__name__)
api = Blueprint("api", __name__)

DEBUG_VERBOSE = os.getenv("BADI_DEBUG_VERBOSE", "0").lower() in ("1", "true", "yes", "on")


# ── per-endpoint rate-limit caps (calls per minute, env-overridable) ───────────
def _rl_cap(env: str, default: int) -> int:
    return int(os.getenv(env, str(default)))

RL_CONVERT = _rl_cap("BADI_RL_CONVERT_PER_MIN", 120)
RL_SUN     = _rl_cap("BADI_RL_SUN_PER_MIN",      60)
RL_TODAY   = _rl_cap("BADI_RL_TODAY_PER_MIN",    60)
RL_STATIC  = _rl_cap("BADI_RL_STATIC_PER_MIN",  120)
RL_PREFS   = _rl_cap("BADI_RL_PREFS_PER_MIN",    30)


def _cfg() -> Dict[str, Any]:
    return getattr(current_app, "cfg", None) or {}


def _store():
    return getattr(current_app, "store", None)


def _language(body: Dict[str, Any], default: str = "ar") -> str:
    lang = str(body.get("language") or default).strip().lower()
    if lang not in LANGUAGES:
        raise ValidationError([{"loc": ["language"], "msg": f"must be one of {list(LANGUAGES)}", "type": "value_error"}])
    return lang


def _names_location(body: Dict[str, Any]) -> bool:
    return any(body.get(k) is not None for k in ("latitude", "longitude", "city"))


def _saved_location() -> Optional[GeoCoordinate]:
    store = _store()
    return coordinate_from_dict(store.get(LOCATION_KEY)) if store is not None else None


def _saved_language() -> Optional[str]:
    store = _store()
    lang = store.get(LANGUAGE_KEY) if store is not None else None
    return lang if lang in LANGUAGES else None


def _resolve_location(body: Dict[str, Any]) -> GeoCoordinate:
    """Request location, else the saved preference, else the configured city."""
    if not _names_location(body):
        saved = _saved_location()
        if saved is not None:
            return saved
    return parse_location(body, default_city(_cfg()))


# ───────────────────────── health / ops ─────────────────────────
@api.get("/api/health")
def health():
    return jsonify({"ok": True, "status": "up", "version": VERSION}), 200


@api.get("/api/config")
@rate_limit(RL_STATIC)
def config_info():
    cfg = _cfg()
    return jsonify({
        "ok": True,
        "version": VERSION,
        "mode": cfg.get("mode", "production"),
        "nawruz_table": {"first_year": TABLE_RANGE[0], "last_year": TABLE_RANGE[1]},
        "solar": {
            "zenith_deg": solar.CFG.zenith_deg,
            "sunset_search_days": sunset_search_days(cfg),
        },
        "default_city": default_city(cfg),
    }), 200


@api.get("/api/cities")
@rate_limit(RL_STATIC)
def cities():
    rows = list_cities()
    return jsonify({"ok": True, "count": len(rows), "cities": rows}), 200


# ───────────────────────── calendar ─────────────────────────
@api.post("/api/badi/convert")
@rate_limit(RL_CONVERT)
def convert_to_badi():
    try:
        body = body_json()
        day = parse_date(body.get("date"))
        language = _language(body)
    except ValidationError as e:
        return json_error("validation_error", e.errors(), 400)

    badi = to_badi(day)
    MET_CONVERSIONS.labels(direction="to_badi").inc()
    warnings = badi_warnings(badi)
    count_warnings(warnings)
    return jsonify({
        "ok": True,
        "gregorian": day.isoformat(),
        "badi": badi_payload(badi, language),
        "period": current_day_in_period(day).to_dict(),
        "warnings": warnings,
    }), 200


@api.post("/api/badi/gregorian")
@rate_limit(RL_CONVERT)
def convert_to_gregorian():
    try:
        year, month, day = parse_badi_triple(body_json())
        g = to_gregorian(year, month, day)
    except ValidationError as e:
        return json_error("validation_error", e.errors(), 400)
    except ValueError as e:
        return json_error("validation_error", [{"loc": ["day"], "msg": str(e), "type": "value_error"}], 400)

    MET_CONVERSIONS.labels(direction="to_gregorian").inc()
    warnings = [] if is_tabulated(year) else [f"nawruz_table_fallback(year={year})"]
    count_warnings(warnings)
    return jsonify({
        "ok": True,
        "badi": {"year": year, "month": month, "day": day},
        "gregorian": g.isoformat(),
        "warnings": warnings,
    }), 200


@api.get("/api/badi/nawruz/<int:year>")
@rate_limit(RL_STATIC)
def nawruz(year: int):
    try:
        parse_badi_year(year)
    except ValidationError as e:
        return json_error("validation_error", e.errors(), 400)
    d = nawruz_date(year)
    return jsonify({
        "ok": True,
        "year": year,
        "nawruz": d.isoformat(),
        "intercalary_days": intercalary_day_count(year),
        "year_length": year_length(year),
        "tabulated": is_tabulated(year),
    }), 200


@api.get("/api/badi/holy-days")
@rate_limit(RL_STATIC)
def holy_days():
    raw_year = request.args.get("year")
    if raw_year is None:
        return jsonify({"ok": True, "holy_days": [h.to_dict() for h in HOLY_DAYS]}), 200
    try:
        year = parse_badi_year(raw_year)
    except ValidationError as e:
        return json_error("validation_error", e.errors(), 400)
    rows = holy_days_in_year(year)
    return jsonify({
        "ok": True,
        "year": year,
        "tabulated": is_tabulated(year),
        "holy_days": [{**h.to_dict(), "gregorian": d.isoformat()} for h, d in rows],
    }), 200


# ───────────────────────── sun ─────────────────────────
@api.post("/api/sun")
@rate_limit(RL_SUN)
def sun():
    try:
        body = body_json()
        day = parse_date(body.get("date"))
        loc = parse_location(body, default_city(_cfg()))
        tz = parse_utc_offset(body.get("utc_offset_minutes"))
    except ValidationError as e:
        return json_error("validation_error", e.errors(), 400)

    out = sun_payload(day, loc, tz)
    count_warnings(out["warnings"])
    return jsonify({"ok": True, **out}), 200


# ───────────────────────── today ─────────────────────────
@api.post("/api/badi/today")
@rate_limit(RL_TODAY)
def today():
    try:
        body = body_json()
        cfg = _cfg()
        loc = _resolve_location(body)
        if body.get("instant") is not None:
            instant = parse_instant(body.get("instant"))
        else:
            instant = datetime.now(timezone.utc)
        days = parse_search_days(body.get("search_days"), sunset_search_days(cfg))
        language = _language(body, _saved_language() or "ar")
    except ValidationError as e:
        return json_error("validation_error", e.errors(), 400)

    try:
        snap = snapshot(instant, loc, days)
    except (ValueError, OverflowError) as e:
        # search window running past 9999-12-31
        log.warning("today snapshot failed for %s at %s: %s", loc, instant, e)
        msg = str(e) if DEBUG_VERBOSE else "instant and search_days reach past the supported date range"
        return json_error("validation_error", [{"loc": ["instant"], "msg": msg, "type": "value_error"}], 400)

    MET_CONVERSIONS.labels(direction="to_badi").inc()
    count_warnings(snap.warnings)
    return jsonify({"ok": True, **snapshot_payload(snap, language)}), 200


# ───────────────────────── preferences ─────────────────────────
def _preferences() -> Dict[str, Any]:
    loc = _saved_location()
    return {
        "location": loc.to_dict() if loc is not None else None,
        "language": _saved_language(),
    }


@api.get("/api/preferences")
@rate_limit(RL_PREFS)
def get_preferences():
    return jsonify({"ok": True, **_preferences()}), 200


@api.post("/api/preferences")
@rate_limit(RL_PREFS)
def save_preferences():
    """Persist {latitude, longitude[, name]} or {city}, and/or {language}."""
    try:
        body = body_json()
        loc = parse_location(body) if _names_location(body) else None
        language = _language(body) if body.get("language") is not None else None
        if loc is None and language is None:
            raise ValidationError([{"loc": ["latitude", "longitude", "city", "language"],
                                    "msg": "nothing to save", "type": "value_error"}])
    except ValidationError as e:
        return json_error("validation_error", e.errors(), 400)

    store = _store()
    if loc is not None:
        store.set(LOCATION_KEY, loc.to_dict())
    if language is not None:
        store.set(LANGUAGE_KEY, language)
    log.info("preferences saved: location=%s language=%s", loc, language)
    return jsonify({"ok": True, **_preferences()}), 200


@api.delete("/api/preferences")
@rate_limit(RL_PREFS)
def clear_preferences():
    store = _store()
    store.delete(LOCATION_KEY)
    store.delete(LANGUAGE_KEY)
    return jsonify({"ok": True, **_preferences()}), 200
