"""
Engine configuration.

All tunable constants of the load, fatigue, generation and projection
calculations live in one pydantic model. Defaults are calibrated so a
typical working set of a heavy compound lift scores in the 15-30 range;
they are tuning values, not physical law.
"""

import json
from pathlib import Path

from pydantic import BaseModel, Field, model_validator


class EngineConfig(BaseModel):
    """Tunable constants used across the engine."""

    # Load scoring
    load_upper_bound: float = Field(
        default=35.0, gt=0.0, description="Maximum load score for a single exercise"
    )
    load_normalization: float = Field(
        default=500.0, gt=0.0, description="Effective volume divisor"
    )
    load_baseline: float = Field(
        default=5.0, ge=0.0, description="Baseline added before the difficulty multiplier"
    )
    secondary_muscle_share: float = Field(
        default=0.5, ge=0.0, le=1.0, description="Share of the load credited to secondary muscles"
    )

    # Fatigue model
    recovery_hours: float = Field(
        default=72.0, gt=0.0, description="Hours for a session's fatigue to ramp linearly to zero"
    )
    lookback_hours: float = Field(
        default=168.0, gt=0.0, description="Sessions older than this are ignored"
    )

    # Prescription
    progression_increment: float = Field(
        default=2.5, gt=0.0, description="Weight added when the target reps were reached"
    )
    weight_rounding: float = Field(
        default=0.5, gt=0.0, description="Increment that prescribed weights are rounded to"
    )
    max_adapted_reps: int = Field(
        default=30, ge=1, description="Rep ceiling when adapting a prescription"
    )
    tier_2_share: float = Field(
        default=0.6, ge=0.0, le=1.0, description="Share of non-lead slots filled with tier_2"
    )
    tier_fallback_threshold: int = Field(
        default=5,
        ge=1,
        description="Sessions longer than this may fill any slot from any tier",
    )

    # Goal projection
    goal_weight_increment: float = Field(
        default=2.5, gt=0.0, description="Rounding for exercise goal values"
    )
    trend_forecast_days: float = Field(
        default=30.0, gt=0.0, description="Days ahead a trend is extrapolated"
    )
    undulation_cycles: int = Field(
        default=4, ge=1, description="Number of waves in the undulating progression curve"
    )

    @model_validator(mode="after")
    def validate_windows(self):
        """The recovery ramp must fit inside the lookback window."""
        if self.recovery_hours > self.lookback_hours:
            raise ValueError(
                f"recovery_hours ({self.recovery_hours}) cannot exceed "
                f"lookback_hours ({self.lookback_hours})"
            )
        return self


DEFAULT_CONFIG = EngineConfig()


def load_config(config_path: Path) -> EngineConfig:
    """
    Load engine configuration overrides from a JSON file.

    Keys not present in the file keep their defaults.

    Args:
        config_path: Path to configuration JSON file

    Returns:
        EngineConfig instance

    Raises:
        FileNotFoundError: If the file doesn't exist
        ValueError: If the JSON is not a valid configuration
    """
    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    with open(config_path, "r") as f:
        data = json.load(f)

    try:
        return EngineConfig(**data)
    except Exception as e:
        raise ValueError(f"Invalid config file: {e}")
