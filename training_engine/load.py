"""
Training load scoring.

Converts the completed sets of one exercise into a single normalized,
non-negative load score and distributes that score across the muscles the
exercise trains.
"""

from typing import Dict, Iterable

from training_engine.config import DEFAULT_CONFIG, EngineConfig
from training_engine.schemas import ExerciseDefinition, LoggedSet, MuscleGroup


def effective_volume(
    exercise: ExerciseDefinition,
    sets: Iterable[LoggedSet],
    athlete_bodyweight: float,
) -> float:
    """
    Sum of effective load x reps over the completed sets.

    Effective load = athlete_bodyweight * bodyweight_coefficient + external weight
    """
    bodyweight_load = athlete_bodyweight * exercise.bodyweight_coefficient
    return sum(
        (bodyweight_load + s.weight) * s.reps for s in sets if s.completed
    )


def score_exercise_load(
    exercise: ExerciseDefinition,
    completed_sets: Iterable[LoggedSet],
    athlete_bodyweight: float,
    config: EngineConfig = DEFAULT_CONFIG,
) -> float:
    """
    Calculate the load score of one performed exercise.

    Formula:
        min(upper_bound, (total_volume / normalization + baseline) * difficulty_multiplier)

    With the default constants (35, 500, 5) a bodyweight set of 10 reps at
    80 kg scores (800/500 + 5) * 1.0 = 6.6.

    Args:
        exercise: Catalog definition of the exercise
        completed_sets: Logged sets; sets not flagged completed are ignored
        athlete_bodyweight: Athlete bodyweight
        config: Engine constants

    Returns:
        Load score in [0, upper_bound]; 0 when no set was completed
    """
    done = [s for s in completed_sets if s.completed]
    if not done:
        return 0.0

    volume = effective_volume(exercise, done, athlete_bodyweight)
    score = (volume / config.load_normalization + config.load_baseline) * exercise.difficulty_multiplier
    return max(0.0, min(config.load_upper_bound, score))


def distribute_load(
    exercise: ExerciseDefinition,
    score: float,
    config: EngineConfig = DEFAULT_CONFIG,
) -> Dict[MuscleGroup, float]:
    """
    Split a load score across muscles.

    Primary muscles each receive the full score, secondary muscles each
    receive score * secondary_muscle_share. A muscle listed as both is
    credited as primary.
    """
    shares: Dict[MuscleGroup, float] = {}
    for muscle in exercise.secondary_muscles:
        shares[muscle] = score * config.secondary_muscle_share
    for muscle in exercise.primary_muscles:
        shares[muscle] = score
    return shares
