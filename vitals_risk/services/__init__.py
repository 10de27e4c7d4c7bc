"""
Scoring services.

This package contains the pipeline components: feature engineering, anomaly
detection, risk models, explanations, the decision engine and the request
boundary that ties them together.
"""

from vitals_risk.observability import configure_structlog

from .anomaly import AnomalyResult, BaselineAnomalyDetector, CappedZTanhFusion, DeviationFusion
from .boundary import evaluate_payload, service_status
from .features import FeatureSet, MetricAggregate, engineer_features
from .pipeline import RiskPipeline, run_pipeline
from .result import Result
from .risk_models import HTNRiskModel, RiskModel, RiskResult, T2DRiskModel

# Structured logging is configured on import; levels stay with stdlib logging
configure_structlog()

__all__ = [
    "AnomalyResult",
    "BaselineAnomalyDetector",
    "CappedZTanhFusion",
    "DeviationFusion",
    "FeatureSet",
    "HTNRiskModel",
    "MetricAggregate",
    "Result",
    "RiskModel",
    "RiskPipeline",
    "RiskResult",
    "T2DRiskModel",
    "engineer_features",
    "evaluate_payload",
    "run_pipeline",
    "service_status",
]
