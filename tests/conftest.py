# tests/conftest.py
"""
Pytest configuration for the Badí' Clock suite.

- Registers Hypothesis profiles for local dev and CI.
- Freezes the process TZ to UTC so naive datetimes mean UTC.
- Points BADI_CONFIG at the repo defaults before the app is imported.
- Provides a Flask test client with rate limiting switched off.
"""

from __future__ import annotations

import os
import time
from pathlib import Path

import pytest
from hypothesis import settings, HealthCheck

ROOT = Path(__file__).resolve().parents[1]
os.environ.setdefault("BADI_CONFIG", str(ROOT / "config" / "defaults.yaml"))


# ──────────────────────────────────────────────────────────────────────────────
# Hypothesis profiles
# ──────────────────────────────────────────────────────────────────────────────
# solar math is cheap but runs per example; no per-example deadline
_COMMON = dict(deadline=None, suppress_health_check=[HealthCheck.too_slow])
settings.register_profile("dev", max_examples=50, **_COMMON)
settings.register_profile("ci", max_examples=200, derandomize=True, **_COMMON)

_profile = (
    "ci"
    if (os.getenv("CI") or os.getenv("GITHUB_ACTIONS"))
    else os.getenv("HYPOTHESIS_PROFILE", "dev")
)
settings.load_profile(_profile)


def pytest_configure(config: pytest.Config) -> None:
    config.addinivalue_line("markers", "slow: mark test as slow")


def pytest_report_header(config: pytest.Config) -> str:
    return f"Hypothesis profile: '{_profile}'"


# ──────────────────────────────────────────────────────────────────────────────
# Global fixtures
# ──────────────────────────────────────────────────────────────────────────────

@pytest.fixture(scope="session", autouse=True)
def freeze_tz_env():
    """Host local time is UTC for the whole session."""
    prev = os.environ.get("TZ")
    os.environ["TZ"] = "UTC"
    time.tzset()
    try:
        yield
    finally:
        if prev is None:
            os.environ.pop("TZ", None)
        else:
            os.environ["TZ"] = prev
        time.tzset()


@pytest.fixture()
def client(monkeypatch):
    monkeypatch.setenv("BADI_RL_DISABLE", "1")
    from badiclock.main import app
    app.testing = True
    return app.test_client()
