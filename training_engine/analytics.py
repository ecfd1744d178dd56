"""
Training analytics.

Reporting calculations over a training history:
- Load breakdown per muscle (primary/secondary weighted load scores)
- Raw tonnage per muscle group
- Weekly set counts against per-muscle set targets
- Training consistency (rest days between sessions)
- Push/pull/legs strength profile from estimated 1RMs
"""

from datetime import datetime
from typing import Dict, Iterable, List, Optional, Sequence

from pydantic import BaseModel, Field

from training_engine.config import DEFAULT_CONFIG, EngineConfig
from training_engine.fatigue import hours_between, index_catalog
from training_engine.load import distribute_load, score_exercise_load
from training_engine.schemas import (
    Athlete,
    ExerciseDefinition,
    MuscleGroup,
    TrainingSession,
)
from training_engine.strength import estimate_1rm


class SetTarget(BaseModel):
    """Weekly working-set target for a group of muscles."""

    id: str = Field(..., description="Target identifier")
    name: str = Field(..., description="Display name")
    target_sets: int = Field(..., ge=0, description="Completed sets wanted per week")
    muscle_groups: List[MuscleGroup] = Field(..., min_length=1)


class SetTargetProgress(BaseModel):
    target: SetTarget
    current_sets: int = Field(default=0, ge=0)

    @property
    def remaining_sets(self) -> int:
        return max(0, self.target.target_sets - self.current_sets)


class WeeklySetProgress(BaseModel):
    """Progress against every set target plus the overall percentage."""

    targets: List[SetTargetProgress] = Field(default_factory=list)
    overall_percent: int = Field(default=0, ge=0)


class ConsistencyReport(BaseModel):
    """Rest days between consecutive sessions."""

    avg_rest_days: float = 0.0
    min_rest_days: int = 0
    max_rest_days: int = 0
    summary: str = Field(..., description="insufficient_data | regular | irregular | sparse")


class StrengthCategory(BaseModel):
    max_1rm: float = Field(default=0.0, ge=0.0)
    score: int = Field(default=0, ge=0, le=100)
    level: str = "beginner"


class StrengthProfile(BaseModel):
    push: StrengthCategory = Field(default_factory=StrengthCategory)
    pull: StrengthCategory = Field(default_factory=StrengthCategory)
    legs: StrengthCategory = Field(default_factory=StrengthCategory)


# Legs is checked before pull, pull before push
STRENGTH_CATEGORIES: Dict[str, List[MuscleGroup]] = {
    "legs": [
        MuscleGroup.QUADS,
        MuscleGroup.HAMSTRINGS,
        MuscleGroup.GLUTES,
        MuscleGroup.CALVES,
        MuscleGroup.ADDUCTORS,
        MuscleGroup.ABDUCTORS,
    ],
    "pull": [
        MuscleGroup.BACK,
        MuscleGroup.UPPER_BACK,
        MuscleGroup.BICEPS,
        MuscleGroup.FOREARMS,
        MuscleGroup.TRAPEZIUS,
    ],
    "push": [MuscleGroup.CHEST, MuscleGroup.SHOULDERS, MuscleGroup.TRICEPS],
}

# 1RM that scores 100 in each category
REFERENCE_1RM: Dict[str, float] = {"push": 140.0, "pull": 200.0, "legs": 180.0}


def load_breakdown(
    history: Iterable[TrainingSession],
    catalog: Iterable[ExerciseDefinition],
    athlete: Athlete,
    now: datetime,
    window_hours: Optional[float] = None,
    config: EngineConfig = DEFAULT_CONFIG,
) -> Dict[MuscleGroup, float]:
    """
    Total load per muscle over a window ending at `now`.

    Each exercise's load score is credited in full to its primary muscles
    and at half weight to its secondary muscles.

    Args:
        history: Training sessions
        catalog: Exercise definitions
        athlete: Athlete (bodyweight)
        now: End of the window
        window_hours: Window length (default: the fatigue lookback, 168 h)
        config: Engine constants

    Returns:
        Mapping of muscle to summed load; muscles with no load are absent
    """
    window = config.lookback_hours if window_hours is None else window_hours
    exercises = index_catalog(catalog)
    totals: Dict[MuscleGroup, float] = {}

    for session in history:
        # Future-dated sessions count as 0 h old, as in compute_freshness
        if hours_between(session.timestamp, now) > window:
            continue
        for performed in session.exercises:
            exercise = exercises.get(performed.exercise_id)
            if exercise is None:
                continue
            score = score_exercise_load(exercise, performed.sets, athlete.bodyweight, config)
            if score <= 0:
                continue
            for muscle, share in distribute_load(exercise, score, config).items():
                totals[muscle] = totals.get(muscle, 0.0) + share

    return totals


def volume_by_muscle_group(
    history: Iterable[TrainingSession],
    catalog: Iterable[ExerciseDefinition],
) -> Dict[MuscleGroup, float]:
    """Completed reps x weight, credited to every muscle the exercise trains."""
    exercises = index_catalog(catalog)
    volume: Dict[MuscleGroup, float] = {}

    for session in history:
        for performed in session.exercises:
            exercise = exercises.get(performed.exercise_id)
            if exercise is None:
                continue
            tonnage = sum(s.reps * s.weight for s in performed.completed_sets())
            for muscle in exercise.muscle_groups:
                volume[muscle] = volume.get(muscle, 0.0) + tonnage

    return volume


def weekly_set_progress(
    targets: Sequence[SetTarget],
    history: Iterable[TrainingSession],
    catalog: Iterable[ExerciseDefinition],
    now: datetime,
    config: EngineConfig = DEFAULT_CONFIG,
) -> WeeklySetProgress:
    """
    Completed sets inside the lookback window (7 days) for each set target.

    An exercise counts toward a target when it trains any of the target's
    muscles.
    """
    exercises = index_catalog(catalog)
    week = [s for s in history if hours_between(s.timestamp, now) <= config.lookback_hours]

    results = []
    for target in targets:
        wanted = set(target.muscle_groups)
        current = 0
        for session in week:
            for performed in session.exercises:
                exercise = exercises.get(performed.exercise_id)
                if exercise is not None and wanted.intersection(exercise.muscle_groups):
                    current += len(performed.completed_sets())
        results.append(SetTargetProgress(target=target, current_sets=current))

    total_target = sum(r.target.target_sets for r in results)
    total_current = sum(r.current_sets for r in results)
    overall = round(total_current / total_target * 100) if total_target > 0 else 0
    return WeeklySetProgress(targets=results, overall_percent=overall)


def analyze_consistency(history: Iterable[TrainingSession]) -> ConsistencyReport:
    """
    Rest days between consecutive sessions.

    Summary:
    - insufficient_data: fewer than two sessions
    - sparse: more than 4 rest days on average
    - irregular: rest periods vary by more than 3 days
    - regular: otherwise
    """
    ordered = sorted(history, key=lambda s: s.timestamp)
    if len(ordered) < 2:
        return ConsistencyReport(summary="insufficient_data")

    rest_days = []
    for previous, current in zip(ordered, ordered[1:]):
        gap_days = -(-hours_between(previous.timestamp, current.timestamp) // 24)
        rest_days.append(max(0, int(gap_days) - 1))

    average = sum(rest_days) / len(rest_days)
    summary = "regular"
    if max(rest_days) - min(rest_days) > 3:
        summary = "irregular"
    if average > 4:
        summary = "sparse"

    return ConsistencyReport(
        avg_rest_days=round(average, 1),
        min_rest_days=min(rest_days),
        max_rest_days=max(rest_days),
        summary=summary,
    )


def strength_level(score: int) -> str:
    if score < 20:
        return "beginner"
    if score < 40:
        return "recreational"
    if score < 60:
        return "experienced"
    if score < 80:
        return "athlete"
    return "elite"


def strength_profile(
    history: Iterable[TrainingSession],
    catalog: Iterable[ExerciseDefinition],
) -> StrengthProfile:
    """
    Best estimated 1RM per push/pull/legs category, scored against reference lifts.

    An exercise belongs to the first category (legs, pull, push) that one
    of its primary muscles falls in.
    """
    exercises = index_catalog(catalog)
    best: Dict[str, float] = {name: 0.0 for name in REFERENCE_1RM}

    for session in history:
        for performed in session.exercises:
            exercise = exercises.get(performed.exercise_id)
            if exercise is None:
                continue
            category = next(
                (
                    name
                    for name, muscles in STRENGTH_CATEGORIES.items()
                    if any(m in muscles for m in exercise.primary_muscles)
                ),
                None,
            )
            if category is None:
                continue
            for logged in performed.sets:
                if logged.weight > 0 and logged.reps > 0:
                    estimate = float(round(estimate_1rm(logged.weight, logged.reps)))
                    best[category] = max(best[category], estimate)

    categories = {}
    for name, reference in REFERENCE_1RM.items():
        score = min(100, round(best[name] / reference * 100))
        categories[name] = StrengthCategory(max_1rm=best[name], score=score, level=strength_level(score))
    return StrengthProfile(**categories)
