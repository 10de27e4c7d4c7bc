"""
Request boundary between a transport layer and the scoring pipeline.

Validates the raw request mapping, enforces the minimum window and turns
every failure into a PipelineError value, so an HTTP handler (or the CLI)
only has to map errors onto status codes.
"""

from collections.abc import Mapping
from typing import Any

import structlog
from pydantic import ValidationError

from vitals_risk.config import AppConfig, get_config
from vitals_risk.domain.errors import (
    InsufficientWindowError,
    InvalidRequestError,
    PipelineComputationError,
    PipelineError,
)
from vitals_risk.domain.models import DailyRecord, PredictionRequest, PredictionResponse
from vitals_risk.services.pipeline import RiskPipeline
from vitals_risk.services.result import Result

logger = structlog.get_logger(__name__)

SERVICE_NAME = "vitals-risk"


def service_status() -> dict[str, Any]:
    """Liveness body for a health endpoint."""
    return {"ok": True, "service": SERVICE_NAME}


def error_body(error: PipelineError) -> dict[str, str]:
    return {"error": error.error, "details": error.message}


def parse_request(payload: Any, min_window_days: int) -> PredictionRequest:
    """
    Check the payload shape and window length, then build the request model.

    Raises:
        InvalidRequestError: payload, ``features`` or a record has the wrong shape.
        InsufficientWindowError: fewer than ``min_window_days`` records.
    """
    if not isinstance(payload, Mapping):
        raise InvalidRequestError("Request body must be a JSON object")

    features = payload.get("features")
    if features is None:
        features = []
    if not isinstance(features, list):
        raise InvalidRequestError("`features` must be an array of daily records")

    if len(features) < min_window_days:
        raise InsufficientWindowError(days=len(features), min_days=min_window_days)

    for index, record in enumerate(features):
        if not isinstance(record, (Mapping, DailyRecord)):
            raise InvalidRequestError(f"features[{index}] must be an object")

    demographics = payload.get("demographics")
    if demographics is not None and not isinstance(demographics, Mapping):
        demographics = None

    try:
        return PredictionRequest.model_validate(
            {
                "features": features,
                "demographics": demographics,
                "window_start": payload.get("window_start"),
                "window_end": payload.get("window_end"),
            }
        )
    except ValidationError as e:
        raise InvalidRequestError(str(e)) from e


def evaluate_payload(
    payload: Any,
    config: AppConfig | None = None,
    pipeline: RiskPipeline | None = None,
) -> Result[PredictionResponse, PipelineError]:
    """Score a raw request payload; never raises for bad input."""
    config = config or get_config()
    pipeline = pipeline or RiskPipeline(config)

    try:
        request = parse_request(payload, config.pipeline.min_window_days)
    except PipelineError as e:
        logger.warning("prediction_rejected", error=e.error, details=e.message)
        return Result.err(e)

    try:
        return Result.ok(pipeline.run(request))
    except Exception as e:
        logger.exception("prediction_failed", error=str(e))
        return Result.err(PipelineComputationError(e))
