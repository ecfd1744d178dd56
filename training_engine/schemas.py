"""
Pydantic models for the training load and progression engine.

This module defines the core data structures for:
- Exercise Definitions: Catalog metadata (pattern, tier, muscles, equipment, difficulty)
- Logged Training: Sets, performed exercises and sessions supplied by the caller
- Athlete Context: Bodyweight, goal, injuries and training locations
- Goals: Numeric progression goals and their observations
- Engine Outputs: Prescriptions, projections and generation decisions
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Dict, List, Optional, Set

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


# ============================================================================
# Enumerations
# ============================================================================

class MuscleGroup(str, Enum):
    """Muscle groups tracked by the fatigue model."""
    CHEST = "chest"
    BACK = "back"
    UPPER_BACK = "upper_back"
    LOWER_BACK = "lower_back"
    SHOULDERS = "shoulders"
    BICEPS = "biceps"
    TRICEPS = "triceps"
    FOREARMS = "forearms"
    TRAPEZIUS = "trapezius"
    NECK = "neck"
    ABS = "abs"
    GLUTES = "glutes"
    QUADS = "quads"
    HAMSTRINGS = "hamstrings"
    CALVES = "calves"
    ADDUCTORS = "adductors"
    ABDUCTORS = "abductors"
    HIP_FLEXORS = "hip_flexors"
    TIBIALIS = "tibialis"
    ROTATOR_CUFF = "rotator_cuff"
    GRIP = "grip"
    FULL_BODY = "full_body"


ALL_MUSCLE_GROUPS: List[MuscleGroup] = list(MuscleGroup)


class MovementPattern(str, Enum):
    """Movement pattern used to match substitutes."""
    SQUAT = "squat"
    HINGE = "hinge"
    HORIZONTAL_PUSH = "horizontal_push"
    VERTICAL_PUSH = "vertical_push"
    HORIZONTAL_PULL = "horizontal_pull"
    VERTICAL_PULL = "vertical_pull"
    LUNGE = "lunge"
    CORE = "core"
    ISOLATION = "isolation"
    MOBILITY = "mobility"
    REHAB = "rehab"
    CARDIO = "cardio"
    EXPLOSIVE = "explosive"


class ExerciseTier(str, Enum):
    """Structural importance of an exercise within a session."""
    TIER_1 = "tier_1"  # Heavy compound
    TIER_2 = "tier_2"  # Assistance
    TIER_3 = "tier_3"  # Isolation / prehab


class TrainingGoal(str, Enum):
    """Athlete's primary training goal."""
    HYPERTROPHY = "hypertrophy"
    STRENGTH = "strength"
    ENDURANCE = "endurance"
    REHAB = "rehab"


class SetType(str, Enum):
    """Kind of logged set."""
    NORMAL = "normal"
    WARMUP = "warmup"
    DROP = "drop"
    FAILURE = "failure"


class ProgressionStrategy(str, Enum):
    """Interpolation shape used to project a goal over time."""
    LINEAR = "linear"
    UNDULATING = "undulating"
    PEAKING = "peaking"


class GoalTargetType(str, Enum):
    """What a goal measures."""
    EXERCISE = "exercise"
    BODY_WEIGHT = "body_weight"
    BODY_MEASUREMENT = "body_measurement"


class GoalDirection(str, Enum):
    """Whether a goal wants its value to go up or down."""
    INCREASE = "increase"
    DECREASE = "decrease"


def to_utc_naive(value: datetime) -> datetime:
    """
    Normalize a timestamp to naive UTC.

    Aware values are converted to UTC and stripped of their offset; naive
    values are taken to be UTC already. Every timestamp the engine compares
    goes through this, so "2026-03-10T18:00:00Z" and "2026-03-10T18:00:00"
    are the same instant.
    """
    if value.tzinfo is not None:
        return value.astimezone(timezone.utc).replace(tzinfo=None)
    return value


# ============================================================================
# Catalog
# ============================================================================


class ExerciseDefinition(BaseModel):
    """
    Catalog entry for a single exercise.

    Difficulty multiplier and bodyweight coefficient are fixed per exercise
    and never derived from session data.
    """

    model_config = ConfigDict(frozen=True)

    id: str = Field(..., min_length=1, description="Unique exercise identifier")
    name: str = Field(default="", description="Human-readable exercise name")
    pattern: MovementPattern = Field(..., description="Movement pattern")
    tier: ExerciseTier = Field(..., description="Structural tier")
    primary_muscles: List[MuscleGroup] = Field(
        ...,
        min_length=1,
        description="Primary muscles, ordered. The first entry leads candidate ranking.",
    )
    secondary_muscles: List[MuscleGroup] = Field(
        default_factory=list, description="Secondary muscles (may be empty)"
    )
    muscle_groups: List[MuscleGroup] = Field(
        default_factory=list,
        description="Every muscle the exercise loads. Defaults to primary + secondary.",
    )
    equipment: Set[str] = Field(
        default_factory=set, description="Equipment required to perform the exercise"
    )
    difficulty_multiplier: float = Field(
        default=1.0,
        gt=0.0,
        description="Loading intensity relative to a canonical movement",
    )
    bodyweight_coefficient: float = Field(
        default=0.0,
        ge=0.0,
        description="Fraction of athlete bodyweight inherently loaded (pull-up ~1.0, cable row ~0)",
    )
    user_score: float = Field(
        default=5.0, ge=1.0, le=10.0, description="User preference score (1-10)"
    )

    @model_validator(mode="before")
    @classmethod
    def fill_muscle_groups(cls, data):
        """Derive the full muscle association from primary and secondary muscles."""
        if isinstance(data, dict) and not data.get("muscle_groups"):
            combined = list(data.get("primary_muscles") or [])
            for muscle in data.get("secondary_muscles") or []:
                if muscle not in combined:
                    combined.append(muscle)
            data = {**data, "muscle_groups": combined}
        return data

    @property
    def lead_muscle(self) -> MuscleGroup:
        return self.primary_muscles[0]


# ============================================================================
# Logged Training
# ============================================================================


class LoggedSet(BaseModel):
    """One logged (or prescribed) set."""

    reps: int = Field(default=0, ge=0, description="Repetitions")
    weight: float = Field(default=0.0, ge=0.0, description="External added load")
    duration_seconds: Optional[float] = Field(
        None, ge=0.0, description="Duration for time-tracked exercises"
    )
    distance_meters: Optional[float] = Field(
        None, ge=0.0, description="Distance for distance-tracked exercises"
    )
    rpe: Optional[float] = Field(None, ge=0.0, le=10.0, description="Rate of perceived exertion")
    completed: bool = Field(default=False, description="Only completed sets contribute to load")
    set_type: SetType = Field(default=SetType.NORMAL, description="Set type tag")


class PerformedExercise(BaseModel):
    """An exercise as performed within a session."""

    exercise_id: str = Field(..., min_length=1, description="Catalog exercise identifier")
    sets: List[LoggedSet] = Field(default_factory=list, description="Ordered sets")

    def completed_sets(self) -> List[LoggedSet]:
        return [s for s in self.sets if s.completed]


class TrainingSession(BaseModel):
    """A completed training session."""

    id: str = Field(default="", description="Session identifier")
    timestamp: datetime = Field(..., description="When the session took place")
    exercises: List[PerformedExercise] = Field(
        default_factory=list, description="Exercises performed"
    )

    @field_validator("timestamp")
    @classmethod
    def normalize_timestamp(cls, v: datetime) -> datetime:
        return to_utc_naive(v)


class BiometricLog(BaseModel):
    """Bodyweight and body measurements logged at a point in time."""

    timestamp: datetime = Field(..., description="When the measurements were taken")
    bodyweight: float = Field(default=0.0, ge=0.0, description="Bodyweight")
    measurements: Dict[str, float] = Field(
        default_factory=dict,
        description="Named body measurements (waist, chest, body_fat, ...)",
    )

    @field_validator("timestamp")
    @classmethod
    def normalize_timestamp(cls, v: datetime) -> datetime:
        return to_utc_naive(v)


# ============================================================================
# Athlete Context
# ============================================================================


class Athlete(BaseModel):
    """Athlete profile fields the engine needs."""

    bodyweight: float = Field(..., gt=0.0, description="Bodyweight")
    goal: TrainingGoal = Field(
        default=TrainingGoal.HYPERTROPHY, description="Primary training goal"
    )
    injuries: Set[MuscleGroup] = Field(
        default_factory=set, description="Injured muscle groups"
    )


class Location(BaseModel):
    """A training location defined by its available equipment."""

    id: str = Field(default="", description="Location identifier")
    name: str = Field(default="", description="Location name")
    equipment: Set[str] = Field(default_factory=set, description="Available equipment")

    def supports(self, exercise: ExerciseDefinition) -> bool:
        """Exact subset check: every required item must be present."""
        return exercise.equipment <= self.equipment


# ============================================================================
# Goals
# ============================================================================


class GoalSpec(BaseModel):
    """Numeric goal with an optional deadline and a progression strategy."""

    start_value: float = Field(..., description="Value when the goal was created")
    target_value: float = Field(..., description="Value to reach")
    created_at: datetime = Field(..., description="Goal creation time")
    deadline: Optional[datetime] = Field(None, description="Optional deadline")
    strategy: ProgressionStrategy = Field(
        default=ProgressionStrategy.LINEAR, description="Progression curve"
    )
    start_reps: Optional[int] = Field(None, ge=0, description="Reps at the start weight")
    target_reps: Optional[int] = Field(None, ge=0, description="Reps at the target weight")
    target_type: GoalTargetType = Field(
        default=GoalTargetType.EXERCISE, description="What the goal measures"
    )
    exercise_id: Optional[str] = Field(None, description="Exercise for exercise goals")
    measurement_key: Optional[str] = Field(
        None, description="Measurement name for body measurement goals"
    )

    @field_validator("created_at", "deadline")
    @classmethod
    def normalize_timestamps(cls, v: Optional[datetime]) -> Optional[datetime]:
        return to_utc_naive(v) if v is not None else v

    @property
    def direction(self) -> GoalDirection:
        if self.target_value < self.start_value:
            return GoalDirection.DECREASE
        return GoalDirection.INCREASE


class GoalObservation(BaseModel):
    """A measured value for a goal at a point in time."""

    timestamp: datetime = Field(..., description="Observation time")
    value: float = Field(..., description="Observed value")

    @field_validator("timestamp")
    @classmethod
    def normalize_timestamp(cls, v: datetime) -> datetime:
        return to_utc_naive(v)


# ============================================================================
# Engine Outputs
# ============================================================================

MuscleFreshness = Dict[MuscleGroup, float]


class PrescribedExercise(BaseModel):
    """An exercise prescribed by the session generator."""

    exercise_id: str = Field(..., description="Catalog exercise identifier")
    tier: ExerciseTier = Field(..., description="Template slot tier this exercise fills")
    sets: int = Field(..., ge=1, description="Number of working sets")
    reps: int = Field(..., ge=1, description="Target reps per set")
    weight: float = Field(default=0.0, ge=0.0, description="Prescribed weight (0 = caller decides)")
    estimated_1rm: float = Field(
        default=0.0, ge=0.0, description="Estimated 1RM from the best historical set"
    )
    planned_sets: List[LoggedSet] = Field(
        default_factory=list, description="Uncompleted set rows for logging"
    )


class GenerationDecision(BaseModel):
    """
    Documents a specific decision made during session generation.

    Used to explain why exercises were selected, skipped or left out.
    """

    decision_point: str = Field(..., min_length=5, description="The decision that was made")
    input_factors: List[str] = Field(
        ..., min_length=1, description="Factors that influenced this decision"
    )
    reasoning: str = Field(..., min_length=10, description="Why this decision was made")
    outcome: str = Field(..., min_length=3, description="The resulting choice")


class GeneratedSession(BaseModel):
    """Full session generator output."""

    exercises: List[PrescribedExercise] = Field(default_factory=list)
    decisions: List[GenerationDecision] = Field(default_factory=list)
    freshness: Dict[MuscleGroup, float] = Field(default_factory=dict)


class GoalProjection(BaseModel):
    """Where a goal should be at a point in time."""

    expected_value: Optional[float] = Field(
        None, description="Expected value now (None when it cannot be estimated)"
    )
    expected_reps: Optional[float] = Field(
        None, description="Expected reps now (whole reps for exercise goals)"
    )
    progress_ratio: Optional[float] = Field(
        None, ge=0.0, le=1.0, description="Elapsed share of the goal window"
    )
    unit: str = Field(default="kg", description="Display unit")
    direction: GoalDirection = Field(..., description="Whether the goal increases or decreases")
    trend_per_day: Optional[float] = Field(
        None, description="Observed trend (deadline-less goals)"
    )
    forecast_value: Optional[float] = Field(
        None, description="Trend extrapolated forward (deadline-less goals)"
    )
    forecast_at: Optional[datetime] = Field(None, description="Time of the forecast value")


class GoalStatus(BaseModel):
    """Signed difference between expected and actual goal values."""

    status_diff: float = Field(..., description="expected_value - actual_value")
    direction: GoalDirection = Field(..., description="Sign convention in force")
    behind_schedule: bool = Field(
        ...,
        description="INCREASE: diff > 0 means behind. DECREASE: diff < 0 means behind.",
    )
