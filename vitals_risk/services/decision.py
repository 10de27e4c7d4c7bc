"""
Notification decision for a scored window.

Fuses the anomaly flag, both risk probabilities and raw blood pressure
aggregates into client/doctor notification flags and a short reason.
"""

from vitals_risk.config import DecisionConfig
from vitals_risk.domain.models import Decision
from vitals_risk.services.anomaly import AnomalyResult
from vitals_risk.services.features import FeatureSet

STABLE_REASON = "Stable"


def _at_least(value: float | None, threshold: float) -> bool:
    return value is not None and value >= threshold


def _reasons(
    t2d_prob: float,
    htn_prob: float,
    anomaly: AnomalyResult,
    sbp_mean: float | None,
    dbp_mean: float | None,
    config: DecisionConfig,
) -> list[str]:
    """Applicable causes in priority order."""
    reasons: list[str] = []
    if anomaly.flag:
        reasons.append("Anomaly persisted for 2 days")
    if t2d_prob >= config.client_risk_threshold:
        reasons.append(f"Elevated T2D risk ({t2d_prob})")
    if htn_prob >= config.client_risk_threshold:
        reasons.append(f"Elevated HTN risk ({htn_prob})")
    if sbp_mean is not None and sbp_mean >= config.reason_mean_sbp:
        reasons.append(f"Rising BP trend / high mean SBP ({sbp_mean:.1f} mmHg)")
    if dbp_mean is not None and dbp_mean >= config.reason_mean_dbp:
        reasons.append(f"Elevated DBP ({dbp_mean:.1f} mmHg)")
    return reasons


def decide(
    t2d_prob: float,
    htn_prob: float,
    anomaly: AnomalyResult,
    features: FeatureSet,
    config: DecisionConfig | None = None,
) -> Decision:
    config = config or DecisionConfig()
    sbp_mean = features.metric_mean("systolic_bp")
    dbp_mean = features.metric_mean("diastolic_bp")

    notify_client = (
        anomaly.flag
        or t2d_prob >= config.client_risk_threshold
        or htn_prob >= config.client_risk_threshold
        or _at_least(sbp_mean, config.client_mean_sbp)
        or _at_least(dbp_mean, config.client_mean_dbp)
    )
    notify_doctor = (
        t2d_prob >= config.doctor_risk_threshold
        or htn_prob >= config.doctor_risk_threshold
        or features.sbp_over_130_rate >= config.doctor_sbp_rate
        or features.dbp_over_80_rate >= config.doctor_dbp_rate
    )

    reasons = _reasons(t2d_prob, htn_prob, anomaly, sbp_mean, dbp_mean, config)
    reason = " + ".join(reasons[: config.max_reasons]) or STABLE_REASON

    return Decision(
        notify_client=bool(notify_client),
        notify_doctor=bool(notify_doctor),
        reason=reason,
    )
