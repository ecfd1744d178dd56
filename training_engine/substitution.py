"""
Exercise substitution and volume adaptation.

When an exercise cannot be performed at the current location, a
replacement with the same movement pattern is picked from what the
location supports, and the prescription is rescaled so the difficulty
stays roughly equivalent.
"""

import logging
import math
from typing import Iterable, List

from training_engine.config import DEFAULT_CONFIG, EngineConfig
from training_engine.schemas import ExerciseDefinition, LoggedSet, Location
from training_engine.strength import round_to_increment

logger = logging.getLogger(__name__)

# Guards ceil() against ratios like 0.9 / 0.3 == 3.0000000000000004
_RATIO_TOLERANCE = 1e-9


def find_substitute(
    current_exercise: ExerciseDefinition,
    target_location: Location,
    catalog: Iterable[ExerciseDefinition],
) -> ExerciseDefinition:
    """
    Find a replacement for `current_exercise` at `target_location`.

    Candidates share the movement pattern and need only equipment the
    location has (exact subset inclusion). Among them the candidate whose
    difficulty multiplier differs MOST from the current exercise is picked;
    ties keep catalog order.

    Args:
        current_exercise: Exercise to replace
        target_location: Location to train at
        catalog: All known exercises

    Returns:
        The chosen substitute, or `current_exercise` when nothing fits
    """
    candidates = [
        exercise
        for exercise in catalog
        if exercise.pattern == current_exercise.pattern and target_location.supports(exercise)
    ]

    if not candidates:
        logger.debug(
            "No %s substitute for %s at location %s",
            current_exercise.pattern.value,
            current_exercise.id,
            target_location.id,
        )
        return current_exercise

    # max() returns the first maximal element, keeping catalog order on ties
    chosen = max(
        candidates,
        key=lambda c: abs(c.difficulty_multiplier - current_exercise.difficulty_multiplier),
    )
    logger.debug("Substituting %s with %s", current_exercise.id, chosen.id)
    return chosen


def adapt_prescription(
    original_sets: Iterable[LoggedSet],
    original_exercise: ExerciseDefinition,
    new_exercise: ExerciseDefinition,
    config: EngineConfig = DEFAULT_CONFIG,
) -> List[LoggedSet]:
    """
    Rescale sets from one exercise to another of different difficulty.

    ratio = original.difficulty_multiplier / new.difficulty_multiplier
    reps   -> min(30, ceil(reps * ratio))
    weight -> weight / ratio, rounded to the nearest 0.5
    completed -> False

    Args:
        original_sets: Sets as prescribed for the original exercise
        original_exercise: Exercise being replaced
        new_exercise: Replacement exercise
        config: Engine constants

    Returns:
        New list of uncompleted sets
    """
    ratio = original_exercise.difficulty_multiplier / new_exercise.difficulty_multiplier

    adapted = []
    for logged in original_sets:
        new_reps = min(config.max_adapted_reps, math.ceil(logged.reps * ratio - _RATIO_TOLERANCE))
        new_weight = round_to_increment(logged.weight / ratio, config.weight_rounding)
        adapted.append(
            logged.model_copy(
                update={"reps": max(0, new_reps), "weight": new_weight, "completed": False}
            )
        )
    return adapted
