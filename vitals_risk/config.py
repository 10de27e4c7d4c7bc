"""
Configuration management with environment variable support and validation.

Design principles:
- Every tunable threshold in one validated place
- Validation at startup (fail fast)
- Type safety with Pydantic
- Defaults reproduce the reference scoring behaviour exactly
"""

import os
from functools import lru_cache
from typing import Literal, cast

from dotenv import load_dotenv
from pydantic import BaseModel, Field, model_validator

# Load environment variables from .env file
load_dotenv()

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
Environment = Literal["development", "staging", "production"]
LogFormat = Literal["json", "console"]


class PipelineConfig(BaseModel):
    """Window-level settings for a scoring run."""

    min_window_days: int = Field(
        default=14, ge=1, description="Minimum daily records the boundary accepts"
    )
    baseline_days: int = Field(
        default=7, gt=0, description="Leading days used as the personal baseline"
    )
    top_k_contributors: int = Field(
        default=5, gt=0, description="Number of ranked contributors per risk model"
    )


class AnomalyConfig(BaseModel):
    """Baseline anomaly detector tuning."""

    z_cap: float = Field(default=4.0, gt=0.0, description="Cap applied to each absolute z-score")
    tanh_scale: float = Field(
        default=2.5, gt=0.0, description="Divisor applied before the tanh squashing"
    )
    std_floor: float = Field(default=1e-6, gt=0.0, description="Floor for baseline std")
    persistence_threshold: float = Field(
        default=0.75, ge=0.0, le=1.0, description="Daily score both of the last two days must reach"
    )
    spike_threshold: float = Field(
        default=0.9, ge=0.0, le=1.0, description="Last-day score that flags on its own"
    )


class ConfidenceConfig(BaseModel):
    """Interval width as a function of missing data."""

    base_width: float = Field(default=0.12, ge=0.0)
    missing_weight: float = Field(default=0.25, ge=0.0)
    min_width: float = Field(default=0.10, ge=0.0, le=1.0)
    max_width: float = Field(default=0.40, ge=0.0, le=1.0)

    @model_validator(mode="after")
    def width_bounds_ordered(self) -> "ConfidenceConfig":
        if self.min_width > self.max_width:
            raise ValueError("min_width must not exceed max_width")
        return self


class DecisionConfig(BaseModel):
    """Notification thresholds."""

    client_risk_threshold: float = Field(default=0.55, ge=0.0, le=1.0)
    doctor_risk_threshold: float = Field(default=0.75, ge=0.0, le=1.0)
    client_mean_sbp: float = Field(default=140.0, gt=0.0, description="mmHg")
    client_mean_dbp: float = Field(default=90.0, gt=0.0, description="mmHg")
    doctor_sbp_rate: float = Field(
        default=0.5, ge=0.0, le=1.0, description="Share of days with SBP >= 130"
    )
    doctor_dbp_rate: float = Field(
        default=0.5, ge=0.0, le=1.0, description="Share of days with DBP >= 80"
    )
    reason_mean_sbp: float = Field(default=130.0, gt=0.0, description="mmHg")
    reason_mean_dbp: float = Field(default=80.0, gt=0.0, description="mmHg")
    max_reasons: int = Field(default=2, gt=0)


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: LogLevel = Field(default="INFO", description="Logging level")
    format: LogFormat = Field(default="json", description="Logging format")


class AppConfig(BaseModel):
    """Main application configuration combining all subsystems."""

    environment: Environment = Field(default="development", description="Environment")
    debug: bool = Field(default=False, description="Enable debug mode")

    pipeline: PipelineConfig = Field(default_factory=PipelineConfig)
    anomaly: AnomalyConfig = Field(default_factory=AnomalyConfig)
    confidence: ConfidenceConfig = Field(default_factory=ConfidenceConfig)
    decision: DecisionConfig = Field(default_factory=DecisionConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    @model_validator(mode="after")
    def debug_only_in_dev(self) -> "AppConfig":
        """Ensure debug mode is only allowed in development environment."""
        if self.debug and self.environment != "development":
            raise ValueError("debug mode is only allowed in development environment")
        return self


def _env_to_literal(val: str) -> Environment:
    v = val.strip().lower()
    if v in {"dev", "development"}:
        return "development"
    if v in {"stage", "staging"}:
        return "staging"
    return "production"


def _level_to_literal(val: str) -> LogLevel:
    v = val.strip().upper()
    return cast(LogLevel, v if v in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"} else "INFO")


def load_config_from_env() -> AppConfig:
    """Load configuration from environment variables with validation."""
    environment = _env_to_literal(os.getenv("ENVIRONMENT", "development"))
    debug = environment == "development"

    pipeline_config = PipelineConfig(
        min_window_days=int(os.getenv("MIN_WINDOW_DAYS", "14")),
        baseline_days=int(os.getenv("BASELINE_DAYS", "7")),
        top_k_contributors=int(os.getenv("TOP_K_CONTRIBUTORS", "5")),
    )

    anomaly_config = AnomalyConfig(
        persistence_threshold=float(os.getenv("ANOMALY_PERSISTENCE_THRESHOLD", "0.75")),
        spike_threshold=float(os.getenv("ANOMALY_SPIKE_THRESHOLD", "0.9")),
    )

    logging_config = LoggingConfig(
        level=_level_to_literal(os.getenv("LOG_LEVEL", "INFO")),
        format="console" if debug else "json",
    )

    return AppConfig(
        environment=environment,
        debug=debug,
        pipeline=pipeline_config,
        anomaly=anomaly_config,
        confidence=ConfidenceConfig(),
        decision=DecisionConfig(),
        logging=logging_config,
    )


@lru_cache
def get_config() -> AppConfig:
    """Get cached application configuration."""
    return load_config_from_env()


def validate_config() -> None:
    """Validate configuration at startup."""
    try:
        config = get_config()
        print(f"Configuration loaded for {config.environment} environment")
    except Exception as e:
        print(f"Configuration validation failed: {e}")
        raise


def print_config_summary(config: AppConfig | None = None) -> None:
    """Print configuration summary for debugging."""
    config = config or get_config()

    print("\nCONFIGURATION SUMMARY")
    print(f"Environment: {config.environment}")
    print(f"Debug Mode: {config.debug}")
    print(f"Log Level: {config.logging.level}")

    print("\nPIPELINE")
    print(f"Minimum Window: {config.pipeline.min_window_days} days")
    print(f"Baseline Window: {config.pipeline.baseline_days} days")
    print(f"Top Contributors: {config.pipeline.top_k_contributors}")

    print("\nANOMALY")
    print(f"Persistence Threshold: {config.anomaly.persistence_threshold:.2f}")
    print(f"Spike Threshold: {config.anomaly.spike_threshold:.2f}")

    print("\nDECISION")
    print(f"Client Risk Threshold: {config.decision.client_risk_threshold:.0%}")
    print(f"Doctor Risk Threshold: {config.decision.doctor_risk_threshold:.0%}")


if __name__ == "__main__":
    validate_config()
    print_config_summary()
