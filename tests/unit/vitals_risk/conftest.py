"""Shared fixtures: realistic telemetry windows for the scoring tests."""

from __future__ import annotations

from collections.abc import Callable, Iterator
from typing import Any

import pytest

from vitals_risk.config import AppConfig, get_config

DayFactory = Callable[..., list[dict[str, Any]]]

STEADY_DAY: dict[str, Any] = {
    "resting_hr": 65,
    "systolic_bp": 120,
    "diastolic_bp": 78,
    "steps": 8000,
    "sleep_hours": 7,
    "water_l": 2.0,
    "diet_score": 3,
    "activity_minutes": 30,
    "weight_kg": 70,
    "stress": 3,
}


@pytest.fixture
def clear_config_cache() -> Iterator[None]:
    """Ensure get_config cache is cleared before and after each test."""
    get_config.cache_clear()
    yield
    get_config.cache_clear()


@pytest.fixture
def app_config() -> AppConfig:
    return AppConfig()


@pytest.fixture
def make_days() -> DayFactory:
    """Build ``n`` copies of the steady day, with per-field overrides."""

    def _make(n: int = 14, **overrides: Any) -> list[dict[str, Any]]:
        day = {**STEADY_DAY, **overrides}
        return [dict(day, date=f"2024-01-{i + 1:02d}") for i in range(n)]

    return _make


@pytest.fixture
def steady_demographics() -> dict[str, Any]:
    return {"age": None, "sex": "m", "smoker": False, "height_cm": 170}


@pytest.fixture
def steady_payload(make_days: DayFactory, steady_demographics: dict[str, Any]) -> dict[str, Any]:
    return {
        "features": make_days(14),
        "demographics": steady_demographics,
        "window_start": "2024-01-01",
        "window_end": "2024-01-14",
    }
