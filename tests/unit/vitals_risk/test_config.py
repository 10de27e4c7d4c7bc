"""
Tests for configuration management in `vitals_risk/config.py`.

Covers:
- Environment parsing and debug defaults
- Logging level coercion to the expected Literal
- Pipeline and anomaly overrides from the environment
- get_config cache behavior
- AppConfig validation (debug only allowed in development)
"""

from __future__ import annotations

import pytest

from vitals_risk.config import (
    AppConfig,
    PipelineConfig,
    get_config,
    load_config_from_env,
    print_config_summary,
)

pytestmark = pytest.mark.usefixtures("clear_config_cache")


def test_load_config_dev_defaults(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("ENVIRONMENT", "dev")
    monkeypatch.delenv("LOG_LEVEL", raising=False)
    monkeypatch.delenv("MIN_WINDOW_DAYS", raising=False)

    config = load_config_from_env()

    assert config.environment == "development"
    assert config.debug is True
    assert config.logging.format == "console"
    assert config.pipeline.min_window_days == 14
    assert config.pipeline.baseline_days == 7
    assert config.pipeline.top_k_contributors == 5


def test_production_uses_json_logging(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("ENVIRONMENT", "something-else")

    config = load_config_from_env()

    assert config.environment == "production"
    assert config.debug is False
    assert config.logging.format == "json"


def test_logging_level_literal_coercion(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("ENVIRONMENT", "staging")

    # Unknown level should coerce to INFO
    monkeypatch.setenv("LOG_LEVEL", "unknown")
    assert load_config_from_env().logging.level == "INFO"

    # Known level should pass through
    monkeypatch.setenv("LOG_LEVEL", "error")
    assert load_config_from_env().logging.level == "ERROR"


def test_pipeline_overrides_from_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("MIN_WINDOW_DAYS", "30")
    monkeypatch.setenv("BASELINE_DAYS", "10")
    monkeypatch.setenv("TOP_K_CONTRIBUTORS", "3")
    monkeypatch.setenv("ANOMALY_PERSISTENCE_THRESHOLD", "0.6")
    monkeypatch.setenv("ANOMALY_SPIKE_THRESHOLD", "0.95")

    config = load_config_from_env()

    assert config.pipeline.min_window_days == 30
    assert config.pipeline.baseline_days == 10
    assert config.pipeline.top_k_contributors == 3
    assert config.anomaly.persistence_threshold == 0.6
    assert config.anomaly.spike_threshold == 0.95


def test_invalid_override_fails_fast(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("BASELINE_DAYS", "0")

    with pytest.raises(ValueError):
        load_config_from_env()


def test_get_config_cache(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("ENVIRONMENT", "development")

    c1 = get_config()
    c2 = get_config()
    assert c1 is c2  # same object due to lru_cache


def test_app_config_debug_only_in_dev_validation() -> None:
    with pytest.raises(ValueError, match="debug mode is only allowed"):
        AppConfig(environment="production", debug=True, pipeline=PipelineConfig())


def test_print_config_summary(capsys: pytest.CaptureFixture[str]) -> None:
    print_config_summary(AppConfig())

    out = capsys.readouterr().out
    assert "Minimum Window: 14 days" in out
    assert "Client Risk Threshold: 55%" in out
