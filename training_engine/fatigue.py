"""
Muscle fatigue and recovery model.

Freshness is a 0-100 score per muscle group, 100 meaning fully recovered.
It is recomputed from a supplied history window on every call; nothing is
cached between calls.

For each session inside the lookback window (168 h), every performed
exercise with at least one completed set contributes fatigue equal to its
load score. That fatigue decays linearly to zero over the recovery window
(72 h) and is subtracted from every muscle the exercise trains.
"""

import logging
from datetime import datetime
from typing import Dict, Iterable, Optional, Sequence

from training_engine.config import DEFAULT_CONFIG, EngineConfig
from training_engine.load import score_exercise_load
from training_engine.schemas import (
    ALL_MUSCLE_GROUPS,
    Athlete,
    ExerciseDefinition,
    MuscleFreshness,
    MuscleGroup,
    TrainingSession,
    to_utc_naive,
)

logger = logging.getLogger(__name__)

FULL_FRESHNESS = 100.0


def index_catalog(catalog: Iterable[ExerciseDefinition]) -> Dict[str, ExerciseDefinition]:
    """Map exercise id to definition. Later duplicates win."""
    return {exercise.id: exercise for exercise in catalog}


def hours_between(earlier: datetime, later: datetime) -> float:
    """Hours from `earlier` to `later`. Naive values are read as UTC."""
    return (to_utc_naive(later) - to_utc_naive(earlier)).total_seconds() / 3600.0


def remaining_fatigue(
    fatigue_amount: float,
    hours_since: float,
    config: EngineConfig = DEFAULT_CONFIG,
) -> float:
    """
    Fatigue left from one contribution after `hours_since` hours.

    Linear ramp: fatigue * max(0, 1 - hours_since / recovery_hours).
    Full at 0 h, zero at 72 h and beyond. Negative elapsed time counts as 0 h.
    """
    recovery_rate = max(0.0, hours_since) / config.recovery_hours
    return fatigue_amount * max(0.0, 1.0 - recovery_rate)


def compute_freshness(
    history: Iterable[TrainingSession],
    catalog: Iterable[ExerciseDefinition],
    athlete: Athlete,
    now: datetime,
    config: EngineConfig = DEFAULT_CONFIG,
    tracked_muscles: Optional[Sequence[MuscleGroup]] = None,
) -> MuscleFreshness:
    """
    Compute per-muscle freshness at `now`.

    Args:
        history: Training sessions (any order, any age)
        catalog: Exercise definitions used to look up difficulty and muscles
        athlete: Athlete (bodyweight feeds the load score)
        now: Evaluation time; the engine never reads the clock itself
        config: Engine constants
        tracked_muscles: Muscle groups to report (default: all)

    Returns:
        Mapping of muscle group to freshness in [0, 100]
    """
    tracked = list(tracked_muscles) if tracked_muscles is not None else ALL_MUSCLE_GROUPS
    freshness: MuscleFreshness = {muscle: FULL_FRESHNESS for muscle in tracked}
    exercises = index_catalog(catalog)

    # Oldest first so flooring at 0 accumulates in chronological order
    for session in sorted(history, key=lambda s: s.timestamp):
        hours_since = hours_between(session.timestamp, now)
        if hours_since > config.lookback_hours:
            continue

        for performed in session.exercises:
            exercise = exercises.get(performed.exercise_id)
            if exercise is None:
                logger.debug(
                    "Skipping unknown exercise %s in session %s",
                    performed.exercise_id,
                    session.id,
                )
                continue

            completed = performed.completed_sets()
            if not completed:
                continue

            fatigue_amount = score_exercise_load(exercise, completed, athlete.bodyweight, config)
            left = remaining_fatigue(fatigue_amount, hours_since, config)
            if left <= 0:
                continue

            for muscle in exercise.muscle_groups:
                if muscle in freshness:
                    freshness[muscle] = max(0.0, freshness[muscle] - left)

    return freshness


def recovery_status(score: float) -> str:
    """
    Bucket a freshness score into a recovery band.

    fresh >= 95, minimal >= 80, tired >= 65, very_tired >= 45, else exhausted.
    """
    if score >= 95:
        return "fresh"
    if score >= 80:
        return "minimal"
    if score >= 65:
        return "tired"
    if score >= 45:
        return "very_tired"
    return "exhausted"
