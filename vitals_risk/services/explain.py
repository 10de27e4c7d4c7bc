"""
Confidence intervals and ranked contributors for the risk models.

The interval is not a statistical CI. Its half-width grows linearly with
the window's missing fraction, inside fixed bounds.
"""

from collections.abc import Mapping

from vitals_risk.config import ConfidenceConfig
from vitals_risk.domain.models import Contributor
from vitals_risk.services.numeric import clamp, round_half_up


def interval_width(missing_frac: float, config: ConfidenceConfig | None = None) -> float:
    config = config or ConfidenceConfig()
    return clamp(
        config.base_width + config.missing_weight * missing_frac,
        config.min_width,
        config.max_width,
    )


def ci90(
    prob: float, missing_frac: float, config: ConfidenceConfig | None = None
) -> tuple[float, float]:
    """Interval around ``prob``, widened by missingness and clamped to [0, 1]."""
    width = interval_width(missing_frac, config)
    return (
        round_half_up(clamp(prob - width, 0.0, 1.0), 2),
        round_half_up(clamp(prob + width, 0.0, 1.0), 2),
    )


def top_contributors(contributions: Mapping[str, float], top_k: int = 5) -> list[Contributor]:
    """
    Largest contributions by absolute impact, rounded to 3 decimals.

    Only the magnitude is kept, so a protective factor and a risk factor of
    the same size look identical downstream. Ties keep mapping order.
    """
    ranked = sorted(
        (
            Contributor(feature=feature, impact=round_half_up(abs(impact), 3))
            for feature, impact in contributions.items()
        ),
        key=lambda c: c.impact,
        reverse=True,
    )
    return ranked[:top_k]
