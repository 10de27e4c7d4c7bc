"""
Rule-weighted logistic risk models for Type 2 Diabetes and Hypertension.

Each model reads window aggregates and demographics, substitutes a default
for anything missing, builds a linear score ``z`` from the terms in its
coefficient table and returns ``clamp(sigmoid(z), 0.01, 0.99)``.

The contribution map holds the weighted pre-sigmoid terms. It is an
approximate linear attribution: the terms add up to ``z`` minus the
intercept, not to the probability, and the sigmoid compresses large terms
differently depending on where ``z`` lands.
"""

from dataclasses import dataclass, field
from typing import Protocol

import structlog

from vitals_risk.domain.models import Demographics
from vitals_risk.services.features import FeatureSet
from vitals_risk.services.numeric import clamp, round_half_up, sigmoid
from vitals_risk.services.risk_tables import HTN_TABLE, T2D_TABLE, HTNTable, T2DTable

logger = structlog.get_logger(__name__)

PROB_FLOOR = 0.01
PROB_CEILING = 0.99


@dataclass(frozen=True)
class RiskResult:
    """Probability for one condition plus signed linear contributions by feature."""

    prob: float
    contributions: dict[str, float] = field(default_factory=dict)


class RiskModel(Protocol):
    """
    Anything that maps a FeatureSet to a probability and a contribution map.

    The rule tables below are one implementation; a trained model can take
    their place as long as it keeps this signature.
    """

    name: str

    def score(self, features: FeatureSet) -> RiskResult: ...


def _or_default(value: float | None, default: float) -> float:
    return default if value is None else value


def _age(demographics: Demographics, default: float) -> float:
    return _or_default(demographics.age, default)


def _finish(name: str, intercept: float, contributions: dict[str, float]) -> RiskResult:
    z = intercept + sum(contributions.values())
    prob = round_half_up(clamp(sigmoid(z), PROB_FLOOR, PROB_CEILING), 2)
    logger.debug("risk_scored", model=name, z=round(z, 4), prob=prob)
    return RiskResult(prob=prob, contributions=contributions)


class T2DRiskModel:
    """Type 2 Diabetes: age, BMI, weight gain, steps, diet, sleep and stress."""

    name = "t2d"

    def __init__(self, table: T2DTable = T2D_TABLE) -> None:
        self.table = table

    def score(self, features: FeatureSet) -> RiskResult:
        t = self.table
        d = t.defaults

        age = _age(features.demographics, d.age)
        bmi = _or_default(features.metric_mean("bmi"), d.bmi)
        steps = _or_default(features.metric_mean("steps"), d.steps)
        diet = _or_default(features.metric_mean("diet_score"), d.diet_score)
        sleep = _or_default(features.metric_mean("sleep_hours"), d.sleep_hours)
        stress = _or_default(features.metric_mean("stress"), d.stress)
        weight_trend = _or_default(
            features.metric_trend_per_week("weight_kg"), d.weight_trend_per_week
        )

        steps_bad = t.steps_deficit.normalize(steps)
        contributions = {
            "age": t.age.weight * t.age.normalize(age),
            "bmi": t.bmi.weight * t.bmi.normalize(bmi),
            "weight_trend_wk": t.weight_gain.weight * t.weight_gain.normalize(weight_trend),
            "steps_mean": t.steps_deficit.weight * (1 - steps_bad),
            "diet_score_mean": t.diet_deficit.weight * t.diet_deficit.normalize(diet),
            "sleep_hours_mean": t.sleep_deviation.weight * t.sleep_deviation.normalize(sleep),
            "stress_mean": t.stress.weight * t.stress.normalize(stress),
        }
        return _finish(self.name, t.intercept, contributions)


class HTNRiskModel:
    """Hypertension: age, smoking, SBP level and trend, BMI, resting HR, stress, activity."""

    name = "htn"

    def __init__(self, table: HTNTable = HTN_TABLE) -> None:
        self.table = table

    def score(self, features: FeatureSet) -> RiskResult:
        t = self.table
        d = t.defaults
        demo = features.demographics

        age = _age(demo, d.age)
        bmi = _or_default(features.metric_mean("bmi"), d.bmi)
        sbp = _or_default(features.metric_mean("systolic_bp"), d.systolic_bp)
        sbp_trend = _or_default(
            features.metric_trend_per_week("systolic_bp"), d.systolic_bp_trend_per_week
        )
        rhr = _or_default(features.metric_mean("resting_hr"), d.resting_hr)
        stress = _or_default(features.metric_mean("stress"), d.stress)
        activity = _or_default(features.metric_mean("activity_minutes"), d.activity_minutes)

        contributions = {
            "age": t.age.weight * t.age.normalize(age),
            "smoker": t.smoker_weight if demo.smoker else 0.0,
            "systolic_bp_mean": t.systolic_bp.weight * t.systolic_bp.normalize(sbp),
            "systolic_bp_trend_wk": t.systolic_bp_trend.weight
            * t.systolic_bp_trend.normalize(sbp_trend),
            "bmi": t.bmi.weight * t.bmi.normalize(bmi),
            "resting_hr_mean": t.resting_hr.weight * t.resting_hr.normalize(rhr),
            "stress_mean": t.stress.weight * t.stress.normalize(stress),
            "activity_minutes_mean": t.activity.weight * t.activity.normalize(activity),
        }
        return _finish(self.name, t.intercept, contributions)
