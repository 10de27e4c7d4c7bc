"""
Fixed coefficient tables for the rule-weighted risk models.

These are hand-tuned heuristics, not fitted weights. Keeping every
coefficient, reference point, clamp range and default here lets the scoring
code in ``risk_models`` stay table-driven, and lets a trained model replace
the tables without touching its callers.
"""

from pydantic import BaseModel, ConfigDict, field_validator


class Term(BaseModel):
    """
    One linear term: ``weight * clamp((value - center) / scale, lo, hi)``.

    A negative scale flips the direction so "lower is worse" features read as
    deficits. With ``absolute`` set, the deviation is taken before scaling.
    """

    model_config = ConfigDict(frozen=True)

    weight: float
    center: float = 0.0
    scale: float = 1.0
    lo: float | None = None
    hi: float | None = None
    absolute: bool = False

    @field_validator("scale")
    @classmethod
    def nonzero_scale(cls, v: float) -> float:
        if v == 0:
            raise ValueError("scale must be non-zero")
        return v

    def normalize(self, value: float) -> float:
        deviation = value - self.center
        if self.absolute:
            deviation = abs(deviation)
        x = deviation / self.scale
        if self.lo is not None:
            x = max(self.lo, x)
        if self.hi is not None:
            x = min(self.hi, x)
        return x


class Defaults(BaseModel):
    """Values substituted when an aggregate or covariate is missing."""

    model_config = ConfigDict(frozen=True)

    age: float = 40.0
    bmi: float = 26.0
    steps: float = 6000.0
    diet_score: float = 3.0
    sleep_hours: float = 7.0
    stress: float = 3.0
    systolic_bp: float = 118.0
    resting_hr: float = 65.0
    activity_minutes: float = 25.0
    weight_trend_per_week: float = 0.0
    systolic_bp_trend_per_week: float = 0.0


class T2DTable(BaseModel):
    model_config = ConfigDict(frozen=True)

    intercept: float = -1.2
    age: Term = Term(weight=0.02, center=45.0)
    bmi: Term = Term(weight=0.35, center=27.0, scale=5.0)
    # Only weight gain counts: trend floored at 0, 0.5 kg/week maps to 1.0
    weight_gain: Term = Term(weight=0.25, scale=0.5, lo=0.0, hi=2.0)
    # Deficit against 10k steps; enters as weight * (1 - deficit), a reward for walking
    steps_deficit: Term = Term(weight=-0.25, center=10000.0, scale=-5000.0, lo=0.0, hi=2.0)
    diet_deficit: Term = Term(weight=0.18, center=3.0, scale=-2.0, lo=-1.5, hi=1.5)
    sleep_deviation: Term = Term(
        weight=0.15, center=7.0, scale=3.0, lo=0.0, hi=2.0, absolute=True
    )
    stress: Term = Term(weight=0.12, center=3.0, scale=2.0, lo=-1.5, hi=1.5)
    defaults: Defaults = Defaults()


class HTNTable(BaseModel):
    model_config = ConfigDict(frozen=True)

    intercept: float = -1.0
    age: Term = Term(weight=0.02, center=40.0)
    smoker_weight: float = 0.2
    systolic_bp: Term = Term(weight=0.5, center=115.0, scale=15.0)
    systolic_bp_trend: Term = Term(weight=0.25, scale=5.0)
    bmi: Term = Term(weight=0.2, center=25.0, scale=5.0)
    resting_hr: Term = Term(weight=0.12, center=60.0, scale=15.0)
    stress: Term = Term(weight=0.12, center=3.0, scale=2.0)
    activity: Term = Term(weight=-0.1, center=30.0, scale=60.0)
    defaults: Defaults = Defaults()


T2D_TABLE = T2DTable()
HTN_TABLE = HTNTable()
