# badiclock/utils/ratelimit.py
"""
In-process token-bucket rate limiter for Flask views.

- One bucket per client IP + endpoint (X-Forwarded-For aware)
- Thread-safe per process
- X-RateLimit-* headers on every response, Retry-After on 429
- Env toggles (read per request):
    BADI_RL_DISABLE    -> skip limiting entirely
    BADI_RL_ALLOWLIST  -> comma-separated client IPs never limited
"""

from __future__ import annotations

import math
import os
import time
from dataclasses import dataclass
from functools import wraps
from threading import RLock
from typing import Callable, Dict, Optional

from flask import jsonify, make_response, request

__all__ = ["rate_limit", "endpoint_key", "reset"]

_buckets: Dict[str, "Bucket"] = {}
_lock = RLock()


@dataclass
class Bucket:
    tokens: float
    capacity: float
    rate: float      # tokens per second
    ts: float        # last refill (monotonic)


def _truthy_env(name: str) -> bool:
    return os.getenv(name, "0").strip().lower() in ("1", "true", "yes", "on")


def _allowlist() -> set:
    return {s.strip() for s in os.getenv("BADI_RL_ALLOWLIST", "").split(",") if s.strip()}


def _client_ip(req) -> str:
    xff = req.headers.get("X-Forwarded-For", "")
    return (xff.split(",")[0].strip() if xff else "") or (req.remote_addr or "anon")


def endpoint_key(req) -> str:
    return f"{_client_ip(req)}:{req.endpoint or req.path or '*'}"


def reset() -> None:
    """Drop all buckets (tests, config reloads)."""
    with _lock:
        _buckets.clear()


def rate_limit(max_per_minute: int, key_fn: Optional[Callable] = None, *, burst: Optional[int] = None):
    """
    Allow ``max_per_minute`` calls steady-state with a burst of ``burst``
    (default: max_per_minute). Over the limit the view is not called and a
    429 {"ok": false, "error": "rate_limited"} is returned.
    """
    if max_per_minute <= 0:
        raise ValueError("max_per_minute must be > 0")
    capacity = float(burst if burst is not None else max_per_minute)
    rate = max_per_minute / 60.0
    policy = f"{max_per_minute};w=60;burst={int(capacity)}"

    def decorator(f):
        @wraps(f)
        def wrapper(*args, **kwargs):
            if _truthy_env("BADI_RL_DISABLE") or request.method in ("HEAD", "OPTIONS"):
                return f(*args, **kwargs)
            key = (key_fn or endpoint_key)(request)
            if key.split(":", 1)[0] in _allowlist():
                return f(*args, **kwargs)

            now = time.monotonic()
            with _lock:
                b = _buckets.get(key)
                if b is None:
                    b = _buckets[key] = Bucket(capacity, capacity, rate, now)
                elif now > b.ts:
                    b.tokens = min(b.capacity, b.tokens + (now - b.ts) * b.rate)
                    b.ts = now

                if b.tokens < 1.0:
                    retry_after = max(1, math.ceil((1.0 - b.tokens) / b.rate))
                    resp = make_response(jsonify({
                        "ok": False,
                        "error": "rate_limited",
                        "details": {"retry_after_seconds": retry_after},
                    }), 429)
                    resp.headers["Retry-After"] = str(retry_after)
                    resp.headers["X-RateLimit-Limit"] = str(max_per_minute)
                    resp.headers["X-RateLimit-Remaining"] = "0"
                    resp.headers["X-RateLimit-Policy"] = policy
                    return resp

                b.tokens -= 1.0
                remaining = int(b.tokens)

            resp = make_response(f(*args, **kwargs))
            resp.headers["X-RateLimit-Limit"] = str(max_per_minute)
            resp.headers["X-RateLimit-Remaining"] = str(remaining)
            resp.headers["X-RateLimit-Policy"] = policy
            return resp

        return wrapper

    return decorator
