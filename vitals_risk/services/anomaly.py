"""
Personal-baseline anomaly detection.

Key patterns:
- Baseline per metric from the leading days of the window
- Protocol-based fusion strategy: baselines + series -> daily score in [0, 1]
- Flag on two consecutive high days, or on a single severe spike

The default fusion averages capped absolute z-scores across metrics and
squashes the average with tanh. It mixes units (bpm, mmHg, hours, steps)
without per-metric weights; swap the fusion to change that.
"""

import math
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import Protocol

import structlog

from vitals_risk.config import AnomalyConfig
from vitals_risk.services.features import mean, sample_std, valid_values

logger = structlog.get_logger(__name__)

ANOMALY_METRICS: tuple[str, ...] = (
    "resting_hr",
    "systolic_bp",
    "sleep_hours",
    "steps",
    "weight_kg",
)


@dataclass(frozen=True)
class Baseline:
    mean: float
    std: float


@dataclass(frozen=True)
class AnomalyResult:
    """Daily anomaly scores for the window and the derived flags."""

    daily_scores: list[float]
    score: float
    persisted: bool
    flag: bool


class DeviationFusion(Protocol):
    """
    Strategy turning per-metric baselines and daily values into daily scores.

    Implementations must return one score in [0, 1] per day.
    """

    def daily_scores(
        self,
        series: Mapping[str, Sequence[float | None]],
        baselines: Mapping[str, Baseline],
        n_days: int,
    ) -> list[float]: ...


class CappedZTanhFusion:
    """Average of capped |z| across available metrics, mapped through tanh."""

    def __init__(self, z_cap: float = 4.0, tanh_scale: float = 2.5) -> None:
        self.z_cap = z_cap
        self.tanh_scale = tanh_scale

    def daily_scores(
        self,
        series: Mapping[str, Sequence[float | None]],
        baselines: Mapping[str, Baseline],
        n_days: int,
    ) -> list[float]:
        scores: list[float] = []
        for i in range(n_days):
            total = 0.0
            count = 0
            for metric, baseline in baselines.items():
                values = series.get(metric, ())
                v = values[i] if i < len(values) else None
                if v is None or not math.isfinite(v):
                    continue
                total += min(abs(v - baseline.mean) / baseline.std, self.z_cap)
                count += 1
            avg = total / count if count else 0.0
            scores.append(min(1.0, max(0.0, math.tanh(avg / self.tanh_scale))))
        return scores


def compute_baselines(
    series: Mapping[str, Sequence[float | None]],
    baseline_days: int,
    std_floor: float = 1e-6,
    metrics: Sequence[str] = ANOMALY_METRICS,
) -> dict[str, Baseline]:
    """Baseline mean/std from the first ``baseline_days`` slots of each metric."""
    baselines: dict[str, Baseline] = {}
    for metric in metrics:
        values = list(series.get(metric, ()))
        window = valid_values(values[: min(baseline_days, len(values))])
        m = mean(window)
        if m is None:
            continue
        s = sample_std(window)
        if s is None:
            continue
        baselines[metric] = Baseline(mean=m, std=s if s > std_floor else std_floor)
    return baselines


class BaselineAnomalyDetector:
    """
    Scores each day of a window against the subject's own early-window baseline.

    Stateless: every call to ``detect`` works only from the series it is given.
    """

    def __init__(
        self,
        config: AnomalyConfig | None = None,
        baseline_days: int = 7,
        fusion: DeviationFusion | None = None,
    ) -> None:
        self.config = config or AnomalyConfig()
        self.baseline_days = baseline_days
        self.fusion = fusion or CappedZTanhFusion(
            z_cap=self.config.z_cap, tanh_scale=self.config.tanh_scale
        )
        self.logger = logger.bind(component="anomaly_detector")

    def detect(self, series: Mapping[str, Sequence[float | None]]) -> AnomalyResult:
        n_days = max((len(series.get(m, ())) for m in ANOMALY_METRICS), default=0)
        baselines = compute_baselines(series, self.baseline_days, self.config.std_floor)
        daily = self.fusion.daily_scores(series, baselines, n_days)

        score = daily[-1] if daily else 0.0
        threshold = self.config.persistence_threshold
        persisted = len(daily) >= 2 and daily[-1] >= threshold and daily[-2] >= threshold
        flag = persisted or score >= self.config.spike_threshold

        if flag:
            self.logger.info(
                "anomaly_detected",
                score=round(score, 3),
                persisted=persisted,
                baseline_metrics=sorted(baselines),
            )
        else:
            self.logger.debug("anomaly_checked", score=round(score, 3), days=n_days)

        return AnomalyResult(daily_scores=daily, score=score, persisted=persisted, flag=flag)


def detect_anomalies(
    series: Mapping[str, Sequence[float | None]],
    baseline_days: int = 7,
    config: AnomalyConfig | None = None,
) -> AnomalyResult:
    """Convenience wrapper around BaselineAnomalyDetector with the default fusion."""
    return BaselineAnomalyDetector(config, baseline_days=baseline_days).detect(series)
