"""
Strength estimation.

One-rep-max estimation (Epley) and the weight suggestions derived from it.
"""

import math
from typing import Iterable

from training_engine.schemas import LoggedSet, TrainingSession


def round_to_increment(value: float, increment: float) -> float:
    """Round to the nearest increment, halves rounding up."""
    return math.floor(value / increment + 0.5) * increment


def estimate_1rm(weight: float, reps: int) -> float:
    """
    Estimate a one-rep max from a single set using the Epley formula.

    Formula: 1RM = weight * (1 + reps/30), rounded to the nearest 0.5.

    Args:
        weight: Weight lifted
        reps: Number of reps completed

    Returns:
        Estimated 1RM (0 for zero reps, the weight itself for a single)
    """
    if reps <= 0:
        return 0.0
    if reps == 1:
        return float(weight)
    return round_to_increment(weight * (1 + reps / 30.0), 0.5)


def weight_for_reps(one_rep_max: float, target_reps: int, increment: float = 2.5) -> float:
    """
    Inverse Epley: the weight that should allow `target_reps` reps.

    Args:
        one_rep_max: Estimated 1RM
        target_reps: Desired repetitions
        increment: Rounding increment (plate jump)

    Returns:
        Suggested weight, 0 when there is no 1RM to work from
    """
    if one_rep_max <= 0:
        return 0.0
    if target_reps <= 1:
        return round_to_increment(one_rep_max, increment)
    return round_to_increment(one_rep_max / (1 + target_reps / 30.0), increment)


def suggest_overload(last_set: LoggedSet) -> LoggedSet:
    """Progressive overload: +2.5% on the last set's weight, same reps."""
    return LoggedSet(
        reps=last_set.reps,
        weight=round_to_increment(last_set.weight * 1.025, 0.5),
        set_type=last_set.set_type,
    )


def best_estimated_1rm(exercise_id: str, history: Iterable[TrainingSession]) -> float:
    """
    Highest 1RM estimate for an exercise across all logged sets.

    Only sets with both weight and reps contribute.
    """
    best = 0.0
    for session in history:
        for performed in session.exercises:
            if performed.exercise_id != exercise_id:
                continue
            for logged in performed.sets:
                if logged.weight > 0 and logged.reps > 0:
                    best = max(best, estimate_1rm(logged.weight, logged.reps))
    return best
