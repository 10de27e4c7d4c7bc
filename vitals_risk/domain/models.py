"""
Domain models for daily health telemetry risk scoring.

Inputs are coerced rather than rejected: any numeric field that is absent,
non-numeric or non-finite becomes None and shows up later as missing data.
Outputs mirror the response contract handed back to the transport layer.
"""

import math
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

_TRUTHY_STRINGS = {"1", "true", "yes", "on", "y"}


def coerce_number(value: Any) -> float | None:
    """Best-effort conversion to a finite float; anything else becomes None."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int | float):
        try:
            number = float(value)
        except OverflowError:
            return None
    elif isinstance(value, str):
        text = value.strip()
        if not text:
            return None
        try:
            number = float(text)
        except ValueError:
            return None
    else:
        return None
    return number if math.isfinite(number) else None


class DailyRecord(BaseModel):
    """One day of telemetry. Unknown keys (e.g. ``date``) are ignored."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    resting_hr: float | None = None
    systolic_bp: float | None = None
    diastolic_bp: float | None = None
    steps: float | None = None
    sleep_hours: float | None = None
    water_l: float | None = None
    diet_score: float | None = None
    activity_minutes: float | None = None
    weight_kg: float | None = None
    mood: float | None = None
    stress: float | None = None
    hrv: float | None = None
    bmi: float | None = None

    @field_validator("*", mode="before")
    @classmethod
    def coerce_numeric(cls, v: Any) -> float | None:
        return coerce_number(v)


class Demographics(BaseModel):
    """Static subject covariates used for BMI derivation and risk scoring."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    age: float | None = None
    sex: str = Field(default="", description="Uppercased free-form sex; empty means unknown")
    smoker: bool = False
    height_cm: float | None = None

    @field_validator("age", "height_cm", mode="before")
    @classmethod
    def coerce_numeric(cls, v: Any) -> float | None:
        return coerce_number(v)

    @field_validator("sex", mode="before")
    @classmethod
    def normalize_sex(cls, v: Any) -> str:
        if v is None:
            return ""
        return str(v).strip().upper()

    @field_validator("smoker", mode="before")
    @classmethod
    def coerce_smoker(cls, v: Any) -> bool:
        if isinstance(v, str):
            return v.strip().lower() in _TRUTHY_STRINGS
        return bool(v)


class PredictionRequest(BaseModel):
    """Scoring request for one subject window."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    features: list[DailyRecord] = Field(default_factory=list)
    demographics: Demographics = Field(default_factory=Demographics)
    window_start: str | None = None
    window_end: str | None = None

    @field_validator("demographics", mode="before")
    @classmethod
    def default_demographics(cls, v: Any) -> Any:
        return {} if v is None else v

    @field_validator("window_start", "window_end", mode="before")
    @classmethod
    def stringify_window(cls, v: Any) -> str | None:
        if v is None or v == "":
            return None
        return str(v)


# Response models


class WindowMeta(BaseModel):
    window_start: str | None
    window_end: str | None
    days: int = Field(ge=0)
    missing_frac: float = Field(ge=0.0, le=1.0)


class ConditionRisk(BaseModel):
    """Probability for one condition with its completeness-scaled interval."""

    prob: float = Field(ge=0.01, le=0.99)
    ci90: tuple[float, float]


class RiskSummary(BaseModel):
    t2d: ConditionRisk
    htn: ConditionRisk


class AnomalySummary(BaseModel):
    score: float = Field(ge=0.0, le=1.0)
    flag: bool


class Contributor(BaseModel):
    """Unsigned impact of one feature on a risk model's linear score."""

    feature: str
    impact: float = Field(ge=0.0)


class TopContributors(BaseModel):
    t2d: list[Contributor]
    htn: list[Contributor]


class Decision(BaseModel):
    notify_client: bool
    notify_doctor: bool
    reason: str


class PredictionResponse(BaseModel):
    """The complete boundary contract returned for a scored window."""

    meta: WindowMeta
    risk: RiskSummary
    anomaly: AnomalySummary
    top_contributors: TopContributors
    decision: Decision
