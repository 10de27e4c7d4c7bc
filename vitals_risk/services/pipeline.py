"""
End-to-end scoring pipeline for one subject window.

Flow:
1. Engineer aligned series and aggregates
2. Score the personal-baseline anomaly signal
3. Score both risk models
4. Attach completeness-scaled intervals and ranked contributors
5. Decide who to notify and why

A run depends only on the request and the config passed in; nothing is
kept between runs, so concurrent calls need no coordination.
"""

import time

import structlog

from vitals_risk.config import AppConfig, get_config
from vitals_risk.domain.models import (
    AnomalySummary,
    ConditionRisk,
    PredictionRequest,
    PredictionResponse,
    RiskSummary,
    TopContributors,
    WindowMeta,
)
from vitals_risk.services.anomaly import BaselineAnomalyDetector, DeviationFusion
from vitals_risk.services.decision import decide
from vitals_risk.services.explain import ci90, top_contributors
from vitals_risk.services.features import engineer_features
from vitals_risk.services.numeric import round_half_up
from vitals_risk.services.risk_models import HTNRiskModel, RiskModel, T2DRiskModel

logger = structlog.get_logger(__name__)


class RiskPipeline:
    """
    Composes the scoring components behind a single ``run`` call.

    Risk models and the anomaly fusion are injectable so a trained model or a
    weighted fusion can replace the rule-based defaults.
    """

    def __init__(
        self,
        config: AppConfig | None = None,
        t2d_model: RiskModel | None = None,
        htn_model: RiskModel | None = None,
        fusion: DeviationFusion | None = None,
    ) -> None:
        self.config = config or get_config()
        self.t2d_model = t2d_model or T2DRiskModel()
        self.htn_model = htn_model or HTNRiskModel()
        self.detector = BaselineAnomalyDetector(
            self.config.anomaly,
            baseline_days=self.config.pipeline.baseline_days,
            fusion=fusion,
        )
        self.logger = logger.bind(component="risk_pipeline")

    def run(self, request: PredictionRequest) -> PredictionResponse:
        start_time = time.perf_counter()

        features = engineer_features(request.features, request.demographics)
        anomaly = self.detector.detect(features.series)
        t2d = self.t2d_model.score(features)
        htn = self.htn_model.score(features)

        missing = features.global_missing_frac
        confidence = self.config.confidence
        top_k = self.config.pipeline.top_k_contributors

        decision = decide(t2d.prob, htn.prob, anomaly, features, self.config.decision)

        response = PredictionResponse(
            meta=WindowMeta(
                window_start=request.window_start,
                window_end=request.window_end,
                days=features.n_days,
                missing_frac=round_half_up(missing, 2),
            ),
            risk=RiskSummary(
                t2d=ConditionRisk(prob=t2d.prob, ci90=ci90(t2d.prob, missing, confidence)),
                htn=ConditionRisk(prob=htn.prob, ci90=ci90(htn.prob, missing, confidence)),
            ),
            anomaly=AnomalySummary(score=round_half_up(anomaly.score, 2), flag=anomaly.flag),
            top_contributors=TopContributors(
                t2d=top_contributors(t2d.contributions, top_k),
                htn=top_contributors(htn.contributions, top_k),
            ),
            decision=decision,
        )

        self.logger.info(
            "prediction_completed",
            days=features.n_days,
            missing_frac=response.meta.missing_frac,
            t2d_prob=t2d.prob,
            htn_prob=htn.prob,
            anomaly_flag=anomaly.flag,
            notify_client=decision.notify_client,
            notify_doctor=decision.notify_doctor,
            duration_seconds=round(time.perf_counter() - start_time, 4),
        )
        return response


def run_pipeline(request: PredictionRequest, config: AppConfig | None = None) -> PredictionResponse:
    """Score one window with the default rule-based components."""
    return RiskPipeline(config).run(request)
