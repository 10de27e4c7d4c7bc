"""
Tests for the request boundary in `vitals_risk/services/boundary.py`.

Covers:
- Minimum window rejection before the core runs
- Structurally invalid payloads
- Unexpected internal faults reported as computation errors
- The Result type the boundary hands back
"""

from typing import Any

import pytest

from vitals_risk.config import AppConfig, PipelineConfig
from vitals_risk.domain.errors import (
    InsufficientWindowError,
    InvalidRequestError,
    PipelineComputationError,
)
from vitals_risk.domain.models import PredictionResponse
from vitals_risk.services.boundary import (
    error_body,
    evaluate_payload,
    parse_request,
    service_status,
)
from vitals_risk.services.pipeline import RiskPipeline
from vitals_risk.services.result import Result


class TestResult:
    def test_result_ok_creates_successful_result(self) -> None:
        result: Result[str, Exception] = Result.ok("success")

        assert result.is_ok()
        assert not result.is_err()
        assert result.unwrap() == "success"

    def test_unwrap_raises_on_error_result(self) -> None:
        result: Result[str, ValueError] = Result.err(ValueError("bad window"))

        assert result.unwrap_or("default") == "default"
        with pytest.raises(ValueError, match="bad window"):
            result.unwrap()

    def test_result_requires_exactly_one_side(self) -> None:
        with pytest.raises(ValueError):
            Result()
        with pytest.raises(ValueError):
            Result(value=1, error=ValueError("x"))


def test_valid_payload_is_scored(steady_payload: dict[str, Any], app_config: AppConfig) -> None:
    result = evaluate_payload(steady_payload, app_config)

    assert result.is_ok()
    response = result.unwrap()
    assert isinstance(response, PredictionResponse)
    assert response.decision.reason == "Stable"


def test_short_window_is_rejected(make_days, app_config: AppConfig) -> None:
    result = evaluate_payload({"features": make_days(13)}, app_config)

    assert result.is_err()
    error = result.unwrap_err()
    assert isinstance(error, InsufficientWindowError)
    assert error.days == 13
    assert error.min_days == 14
    assert "at least 14 days" in error.message


def test_missing_features_count_as_empty_window(app_config: AppConfig) -> None:
    error = evaluate_payload({"demographics": {}}, app_config).unwrap_err()

    assert isinstance(error, InsufficientWindowError)
    assert error.days == 0


def test_minimum_window_follows_config(make_days) -> None:
    config = AppConfig(pipeline=PipelineConfig(min_window_days=3))

    assert evaluate_payload({"features": make_days(3)}, config).is_ok()


@pytest.mark.parametrize(
    "payload",
    [
        ["not", "an", "object"],
        {"features": "fourteen days"},
        {"features": [{}] * 13 + ["not a day"]},
    ],
)
def test_malformed_payloads_are_invalid(payload: Any, app_config: AppConfig) -> None:
    error = evaluate_payload(payload, app_config).unwrap_err()

    assert isinstance(error, InvalidRequestError)


def test_non_object_demographics_fall_back_to_defaults(make_days) -> None:
    request = parse_request({"features": make_days(14), "demographics": "n/a"}, 14)

    assert request.demographics.age is None
    assert request.demographics.smoker is False


def test_malformed_numbers_only_raise_missingness(make_days, app_config: AppConfig) -> None:
    days = make_days(14)
    for day in days[::2]:
        day["steps"] = "lots"
        day["resting_hr"] = float("nan")

    result = evaluate_payload({"features": days, "demographics": {"height_cm": 170}}, app_config)

    assert result.is_ok()
    assert result.unwrap().meta.missing_frac > 0.09


class ExplodingModel:
    name = "exploding"

    def score(self, features: Any) -> Any:
        raise ZeroDivisionError("model blew up")


def test_internal_fault_becomes_computation_error(
    steady_payload: dict[str, Any], app_config: AppConfig
) -> None:
    pipeline = RiskPipeline(app_config, t2d_model=ExplodingModel())

    result = evaluate_payload(steady_payload, app_config, pipeline=pipeline)

    error = result.unwrap_err()
    assert isinstance(error, PipelineComputationError)
    assert isinstance(error.cause, ZeroDivisionError)
    assert error_body(error) == {"error": "Internal error", "details": "model blew up"}


def test_service_status() -> None:
    assert service_status() == {"ok": True, "service": "vitals-risk"}
