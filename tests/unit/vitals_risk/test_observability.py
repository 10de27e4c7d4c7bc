"""Tests for structured logging setup in `vitals_risk/observability.py`."""

import logging
from collections.abc import Iterator
from typing import Any

import pytest
import structlog

import vitals_risk.services  # noqa: F401  configures structlog on import
from vitals_risk.config import AppConfig, LoggingConfig
from vitals_risk.observability import configure_logging, configure_structlog
from vitals_risk.services.boundary import evaluate_payload


@pytest.fixture
def restore_logging() -> Iterator[None]:
    root = logging.getLogger()
    level = root.level
    yield
    root.setLevel(level)
    configure_structlog()


def test_services_import_routes_events_through_stdlib() -> None:
    assert structlog.is_configured()
    factory = structlog.get_config()["logger_factory"]
    assert isinstance(factory, structlog.stdlib.LoggerFactory)


def test_library_use_keeps_stdout_clean(
    steady_payload: dict[str, Any], app_config: AppConfig, capsys: pytest.CaptureFixture[str]
) -> None:
    result = evaluate_payload(steady_payload, app_config)

    assert result.is_ok()
    assert capsys.readouterr().out == ""


@pytest.mark.usefixtures("restore_logging")
def test_configure_logging_sets_level_and_renderer() -> None:
    configure_logging(LoggingConfig(level="ERROR", format="console"))

    assert logging.getLogger().level == logging.ERROR
    processors = structlog.get_config()["processors"]
    assert isinstance(processors[-1], structlog.dev.ConsoleRenderer)
