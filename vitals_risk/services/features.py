"""
Feature engineering over irregular daily telemetry.

Turns an ordered window of daily records into one aligned series per metric
(None kept in place so the slot index stays the day index) and per-metric
summary aggregates. Nothing here raises on bad numbers; missing or malformed
values only show up as a higher missing fraction.
"""

import math
import statistics
from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass
from typing import Any

import structlog

from vitals_risk.domain.models import DailyRecord, Demographics

logger = structlog.get_logger(__name__)

TRACKED_METRICS: tuple[str, ...] = (
    "resting_hr",
    "systolic_bp",
    "diastolic_bp",
    "steps",
    "sleep_hours",
    "water_l",
    "diet_score",
    "activity_minutes",
    "weight_kg",
    "bmi",
    "mood",
    "stress",
    "hrv",
)

# Metrics averaged into the window-level missing fraction
KEY_METRICS: tuple[str, ...] = (
    "resting_hr",
    "systolic_bp",
    "diastolic_bp",
    "steps",
    "sleep_hours",
    "weight_kg",
    "diet_score",
    "activity_minutes",
    "bmi",
    "stress",
    "mood",
)

SBP_ELEVATED_MMHG = 130.0
DBP_ELEVATED_MMHG = 80.0
OLS_DENOMINATOR_FLOOR = 1e-8

MetricSeries = dict[str, list[float | None]]


def valid_values(values: Iterable[float | None]) -> list[float]:
    return [v for v in values if v is not None and math.isfinite(v)]


def mean(values: Iterable[float | None]) -> float | None:
    """Arithmetic mean of the valid values; None when empty or not representable."""
    xs = valid_values(values)
    if not xs:
        return None
    try:
        result = statistics.fmean(xs)
    except OverflowError:
        return None
    return result if math.isfinite(result) else None


def sample_std(values: Iterable[float | None]) -> float | None:
    """
    Sample standard deviation (N-1); 0 when fewer than two valid points.

    None when the spread of the readings is too large to represent as a float.
    """
    xs = valid_values(values)
    if len(xs) < 2:
        return 0.0
    try:
        result = statistics.stdev(xs)
    except OverflowError:
        return None
    return result if math.isfinite(result) else None


def last_valid(values: Sequence[float | None]) -> float | None:
    for v in reversed(values):
        if v is not None and math.isfinite(v):
            return v
    return None


def slope_per_day(values: Sequence[float | None]) -> float:
    """
    Ordinary least squares slope of value against day index.

    Only valid points take part, but each keeps its original index as x, so
    gaps stretch the regression rather than compressing it.
    """
    points = [(float(i), v) for i, v in enumerate(values) if v is not None and math.isfinite(v)]
    n = len(points)
    if n < 2:
        return 0.0
    sx = sum(x for x, _ in points)
    sy = sum(y for _, y in points)
    sxx = sum(x * x for x, _ in points)
    sxy = sum(x * y for x, y in points)
    denom = n * sxx - sx * sx
    if abs(denom) < OLS_DENOMINATOR_FLOOR:
        return 0.0
    slope = (n * sxy - sx * sy) / denom
    # Sums of huge readings overflow to inf or nan
    return slope if math.isfinite(slope) else 0.0


def missing_fraction(values: Sequence[float | None], total: int) -> float:
    if total == 0:
        return 1.0
    return 1.0 - len(valid_values(values)) / total


def compute_bmi(weight_kg: float | None, height_cm: float | None) -> float | None:
    if weight_kg is None or height_cm is None or height_cm <= 0:
        return None
    height_m = height_cm / 100
    return weight_kg / (height_m * height_m)


@dataclass(frozen=True)
class MetricAggregate:
    """Summary statistics for one metric over the window."""

    mean: float | None
    std: float | None
    last: float | None
    trend_per_day: float
    trend_per_week: float
    missing_frac: float

    @classmethod
    def from_series(cls, values: Sequence[float | None]) -> "MetricAggregate":
        trend = slope_per_day(values)
        trend_week = trend * 7
        return cls(
            mean=mean(values),
            std=sample_std(values),
            last=last_valid(values),
            trend_per_day=trend,
            trend_per_week=trend_week if math.isfinite(trend_week) else 0.0,
            missing_frac=missing_fraction(values, len(values)),
        )


@dataclass(frozen=True)
class FeatureSet:
    """Aligned series, aggregates and cleaned demographics for one window."""

    n_days: int
    series: MetricSeries
    aggregates: dict[str, MetricAggregate]
    demographics: Demographics
    sbp_over_130_rate: float = 0.0
    dbp_over_80_rate: float = 0.0
    global_missing_frac: float = 1.0

    def metric_mean(self, metric: str) -> float | None:
        agg = self.aggregates.get(metric)
        return agg.mean if agg else None

    def metric_trend_per_week(self, metric: str) -> float | None:
        agg = self.aggregates.get(metric)
        return agg.trend_per_week if agg else None


def _as_record(raw: DailyRecord | Mapping[str, Any]) -> DailyRecord:
    if isinstance(raw, DailyRecord):
        return raw
    return DailyRecord.model_validate(raw)


def _as_demographics(raw: Demographics | Mapping[str, Any] | None) -> Demographics:
    if isinstance(raw, Demographics):
        return raw
    return Demographics.model_validate(raw or {})


def _rate_at_or_above(values: Sequence[float | None], threshold: float, total: int) -> float:
    if total == 0:
        return 0.0
    return sum(1 for v in valid_values(values) if v >= threshold) / total


def engineer_features(
    records: Sequence[DailyRecord | Mapping[str, Any]],
    demographics: Demographics | Mapping[str, Any] | None = None,
) -> FeatureSet:
    """
    Build aligned metric series and window aggregates.

    Args:
        records: Daily records in chronological order, one per day.
        demographics: Subject covariates; height is used to derive BMI.

    Returns:
        FeatureSet with one series and one MetricAggregate per tracked metric,
        the two blood pressure threshold rates and the global missing fraction.
    """
    demo = _as_demographics(demographics)
    days = [_as_record(r) for r in records]
    n_days = len(days)

    series: MetricSeries = {metric: [] for metric in TRACKED_METRICS}
    for day in days:
        bmi = day.bmi if day.bmi is not None else compute_bmi(day.weight_kg, demo.height_cm)
        for metric in TRACKED_METRICS:
            series[metric].append(bmi if metric == "bmi" else getattr(day, metric))

    aggregates = {metric: MetricAggregate.from_series(values) for metric, values in series.items()}

    key_fracs = [
        aggregates[m].missing_frac
        for m in KEY_METRICS
        if m in aggregates and math.isfinite(aggregates[m].missing_frac)
    ]
    global_missing = statistics.fmean(key_fracs) if key_fracs else 1.0

    features = FeatureSet(
        n_days=n_days,
        series=series,
        aggregates=aggregates,
        demographics=demo,
        sbp_over_130_rate=_rate_at_or_above(series["systolic_bp"], SBP_ELEVATED_MMHG, n_days),
        dbp_over_80_rate=_rate_at_or_above(series["diastolic_bp"], DBP_ELEVATED_MMHG, n_days),
        global_missing_frac=global_missing,
    )

    logger.debug(
        "features_engineered",
        days=n_days,
        global_missing_frac=round(global_missing, 3),
        sbp_over_130_rate=features.sbp_over_130_rate,
        dbp_over_80_rate=features.dbp_over_80_rate,
    )
    return features
