from __future__ import annotations
from typing import Final, Iterable

from prometheus_client import Counter, Gauge, Histogram

# Registered once per process; create_app() may run many times in tests.
MET_REQUESTS: Final = Counter("badi_api_requests_total", "API requests", ["route"])
MET_WARNINGS: Final = Counter("badi_warning_total", "Non-fatal domain warnings", ["kind"])
MET_CONVERSIONS: Final = Counter("badi_conversions_total", "Calendar conversions", ["direction"])
GAUGE_APP_UP: Final = Gauge("badi_app_up", "1 if app is running")
REQ_LATENCY: Final = Histogram("badi_request_seconds", "API request latency", ["route"])


def warning_kind(token: str) -> str:
    """'nawruz_table_fallback(year=230)' -> 'nawruz_table_fallback' (bounded label cardinality)."""
    return token.split("(", 1)[0]


def count_warnings(tokens: Iterable[str]) -> None:
    for t in tokens:
        MET_WARNINGS.labels(kind=warning_kind(t)).inc()


def seed(routes: Iterable[str]) -> None:
    for route in routes:
        MET_REQUESTS.labels(route=route).inc(0)
        REQ_LATENCY.labels(route=route).observe(0.0)
    for kind in ("polar_no_sunset", "polar_no_sunrise", "next_sunset_not_found", "nawruz_table_fallback"):
        MET_WARNINGS.labels(kind=kind).inc(0)
    for direction in ("to_badi", "to_gregorian"):
        MET_CONVERSIONS.labels(direction=direction).inc(0)
    GAUGE_APP_UP.set(1.0)
