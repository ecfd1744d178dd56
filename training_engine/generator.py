"""
Workout session generator.

Assembles an ordered list of prescribed exercises from:
- Target muscle groups and the equipment at the active location
- Athlete injuries (rehab movements stay allowed)
- Current muscle freshness (recovered muscles are preferred)
- The athlete's goal (sets x reps per tier) and history (weight progression)
"""

import logging
import math
from datetime import datetime
from typing import Dict, FrozenSet, Iterable, List, Optional, Sequence, Tuple

from training_engine.config import DEFAULT_CONFIG, EngineConfig
from training_engine.fatigue import FULL_FRESHNESS, compute_freshness
from training_engine.schemas import (
    Athlete,
    ExerciseDefinition,
    ExerciseTier,
    GeneratedSession,
    GenerationDecision,
    Location,
    LoggedSet,
    MovementPattern,
    MuscleFreshness,
    MuscleGroup,
    PrescribedExercise,
    SetType,
    TrainingGoal,
    TrainingSession,
)
from training_engine.strength import estimate_1rm

logger = logging.getLogger(__name__)


# (sets, reps) per tier for each goal
VOLUME_TABLE: Dict[TrainingGoal, Dict[ExerciseTier, Tuple[int, int]]] = {
    TrainingGoal.STRENGTH: {
        ExerciseTier.TIER_1: (5, 5),
        ExerciseTier.TIER_2: (4, 8),
        ExerciseTier.TIER_3: (3, 12),
    },
    TrainingGoal.ENDURANCE: {
        ExerciseTier.TIER_1: (3, 15),
        ExerciseTier.TIER_2: (3, 15),
        ExerciseTier.TIER_3: (3, 15),
    },
    TrainingGoal.REHAB: {
        ExerciseTier.TIER_1: (3, 15),
        ExerciseTier.TIER_2: (3, 15),
        ExerciseTier.TIER_3: (3, 15),
    },
    TrainingGoal.HYPERTROPHY: {
        ExerciseTier.TIER_1: (4, 8),
        ExerciseTier.TIER_2: (3, 10),
        ExerciseTier.TIER_3: (3, 12),
    },
}


def volume_for(goal: TrainingGoal, tier: ExerciseTier) -> Tuple[int, int]:
    """Sets and reps for a goal/tier pair. Unknown goals use hypertrophy."""
    table = VOLUME_TABLE.get(goal, VOLUME_TABLE[TrainingGoal.HYPERTROPHY])
    return table[tier]


def build_tier_template(exercise_count: int, tier_2_share: float = 0.6) -> List[ExerciseTier]:
    """
    Tier for each slot of a session.

    Slot 0 is tier_1, the next round(tier_2_share * (n - 1)) slots are
    tier_2 and the rest tier_3.
    """
    if exercise_count <= 0:
        return []
    tier_2_slots = math.floor(tier_2_share * (exercise_count - 1) + 0.5)
    tier_3_slots = exercise_count - 1 - tier_2_slots
    return (
        [ExerciseTier.TIER_1]
        + [ExerciseTier.TIER_2] * tier_2_slots
        + [ExerciseTier.TIER_3] * tier_3_slots
    )


def is_eligible(
    exercise: ExerciseDefinition,
    target_muscles: FrozenSet[MuscleGroup],
    location: Location,
    athlete: Athlete,
) -> bool:
    """
    Whether an exercise may appear in a generated session.

    - Every required piece of equipment is available at the location
    - It trains at least one target muscle
    - Its primary muscles avoid the athlete's injuries, unless it is a rehab movement
    """
    if not location.supports(exercise):
        return False
    if not target_muscles.intersection(exercise.muscle_groups):
        return False
    if exercise.pattern != MovementPattern.REHAB and athlete.injuries.intersection(
        exercise.primary_muscles
    ):
        return False
    return True


def rank_candidates(
    candidates: Sequence[ExerciseDefinition],
    freshness: MuscleFreshness,
) -> List[ExerciseDefinition]:
    """
    Order candidates by user_score x freshness of their lead muscle, best first.

    The sort is stable: equal scores keep catalog order. Muscles missing
    from `freshness` count as fully fresh.
    """
    return sorted(
        candidates,
        key=lambda c: c.user_score * freshness.get(c.lead_muscle, FULL_FRESHNESS),
        reverse=True,
    )


def select_for_slot(
    tier: ExerciseTier,
    candidates: Sequence[ExerciseDefinition],
    selected: FrozenSet[str],
    freshness: MuscleFreshness,
    any_tier: bool = False,
) -> Tuple[Optional[ExerciseDefinition], bool]:
    """
    Pick the best unselected candidate for one template slot.

    Args:
        tier: Tier the slot asks for
        candidates: Eligible exercises in catalog order
        selected: Ids already placed in the session
        freshness: Current muscle freshness
        any_tier: Consider every remaining tier, not only `tier`

    Returns:
        Tuple of (chosen exercise or None, whether the tier fallback was used)
    """
    remaining = [c for c in candidates if c.id not in selected]
    pool = [c for c in remaining if c.tier == tier]
    fell_back = False
    if any_tier or not pool:
        fell_back = not pool
        pool = remaining

    ranked = rank_candidates(pool, freshness)
    if not ranked:
        return None, fell_back
    return ranked[0], fell_back


def last_performance_sets(
    exercise_id: str, history: Iterable[TrainingSession]
) -> List[LoggedSet]:
    """Completed sets from the most recent session that completed the exercise."""
    for session in sorted(history, key=lambda s: s.timestamp, reverse=True):
        completed = [
            s
            for performed in session.exercises
            if performed.exercise_id == exercise_id
            for s in performed.completed_sets()
        ]
        if completed:
            return completed
    return []


def best_set(sets: Sequence[LoggedSet]) -> Optional[LoggedSet]:
    """Heaviest working set (most reps on ties). Warm-ups count only if nothing else does."""
    working = [s for s in sets if s.set_type != SetType.WARMUP] or list(sets)
    if not working:
        return None
    return max(working, key=lambda s: (s.weight, s.reps))


class SessionGenerator:
    """
    Generates a single workout session.

    The generator:
    1. Computes current muscle freshness from the history window
    2. Filters the catalog by equipment, target muscles and injuries
    3. Builds a tier template (tier_1 lead, then tier_2, then tier_3)
    4. Fills each slot with the best-ranked unselected candidate
    5. Prescribes sets/reps from the goal x tier table
    6. Prescribes weight from the most recent performance
    7. Documents every decision
    """

    def __init__(
        self,
        catalog: Sequence[ExerciseDefinition],
        config: EngineConfig = DEFAULT_CONFIG,
    ):
        """
        Initialize the session generator.

        Args:
            catalog: Exercise definitions to choose from (catalog order breaks ties)
            config: Engine constants
        """
        self.catalog = list(catalog)
        self.config = config

    def generate(
        self,
        target_muscles: Iterable[MuscleGroup],
        location: Location,
        athlete: Athlete,
        history: Sequence[TrainingSession],
        exercise_count: int,
        now: datetime,
    ) -> GeneratedSession:
        """
        Generate a session.

        Args:
            target_muscles: Muscle groups the session should train
            location: Active training location
            athlete: Athlete profile (goal, injuries, bodyweight)
            history: Past sessions (freshness window and weight lookback)
            exercise_count: Desired number of exercises
            now: Generation time

        Returns:
            GeneratedSession with prescriptions, decisions and the freshness used.
            Slots with no eligible candidate are omitted.
        """
        decisions: List[GenerationDecision] = []
        targets = frozenset(target_muscles)

        # 1. Current recovery state
        freshness = compute_freshness(history, self.catalog, athlete, now, self.config)

        # 2. Eligible candidates
        candidates = [c for c in self.catalog if is_eligible(c, targets, location, athlete)]
        decisions.append(
            GenerationDecision(
                decision_point="Candidate Eligibility",
                input_factors=[
                    f"target_muscles={sorted(m.value for m in targets)}",
                    f"location={location.id or location.name or 'unnamed'}",
                    f"injuries={sorted(m.value for m in athlete.injuries)}",
                ],
                reasoning=f"{len(candidates)} of {len(self.catalog)} catalog exercises are "
                "performable with the available equipment, train a target muscle and "
                "avoid injured primary muscles (rehab movements exempt).",
                outcome=f"{len(candidates)} eligible candidates",
            )
        )

        # 3. Tier template
        template = build_tier_template(exercise_count, self.config.tier_2_share)
        any_tier = exercise_count > self.config.tier_fallback_threshold

        # 4-6. Fill slots
        prescribed: List[PrescribedExercise] = []
        selected: FrozenSet[str] = frozenset()
        for slot, tier in enumerate(template):
            choice, fell_back = select_for_slot(tier, candidates, selected, freshness, any_tier)
            if choice is None:
                logger.debug("Slot %d (%s) left empty", slot, tier.value)
                decisions.append(
                    GenerationDecision(
                        decision_point=f"Slot {slot + 1} Selection",
                        input_factors=[f"tier={tier.value}", f"already_selected={len(selected)}"],
                        reasoning="No eligible candidate remains for this slot, so it is omitted "
                        "rather than padded with an unsuitable exercise.",
                        outcome="slot omitted",
                    )
                )
                continue

            if fell_back:
                logger.debug("Slot %d: no %s candidate left, using %s", slot, tier.value, choice.id)

            selected = selected | {choice.id}
            exercise = self._prescribe(choice, tier, athlete, history)
            prescribed.append(exercise)

            lead_freshness = freshness.get(choice.lead_muscle, FULL_FRESHNESS)
            decisions.append(
                GenerationDecision(
                    decision_point=f"Slot {slot + 1} Selection",
                    input_factors=[
                        f"tier={tier.value}",
                        f"user_score={choice.user_score}",
                        f"{choice.lead_muscle.value}_freshness={lead_freshness:.1f}",
                    ],
                    reasoning="Highest user score x freshness among "
                    + ("all remaining candidates" if any_tier or fell_back else f"{tier.value} candidates")
                    + ".",
                    outcome=f"{choice.id}: {exercise.sets}x{exercise.reps} @ {exercise.weight:g}",
                )
            )

        return GeneratedSession(exercises=prescribed, decisions=decisions, freshness=freshness)

    def _prescribe(
        self,
        exercise: ExerciseDefinition,
        tier: ExerciseTier,
        athlete: Athlete,
        history: Sequence[TrainingSession],
    ) -> PrescribedExercise:
        """
        Sets, reps and weight for a selected exercise.

        Weight comes from the most recent performance: the best set's weight,
        plus the progression increment when it reached the target reps.
        No history means weight 0 (the caller fills it in).
        """
        sets, reps = volume_for(athlete.goal, tier)

        weight = 0.0
        one_rep_max = 0.0
        top = best_set(last_performance_sets(exercise.id, history))
        if top is not None:
            weight = top.weight
            if top.reps >= reps:
                weight += self.config.progression_increment
            one_rep_max = estimate_1rm(top.weight, top.reps)

        return PrescribedExercise(
            exercise_id=exercise.id,
            tier=tier,
            sets=sets,
            reps=reps,
            weight=weight,
            estimated_1rm=one_rep_max,
            planned_sets=[LoggedSet(reps=reps, weight=weight) for _ in range(sets)],
        )


def generate_session(
    target_muscles: Iterable[MuscleGroup],
    location: Location,
    catalog: Sequence[ExerciseDefinition],
    athlete: Athlete,
    history: Sequence[TrainingSession],
    exercise_count: int,
    now: datetime,
    config: EngineConfig = DEFAULT_CONFIG,
) -> List[PrescribedExercise]:
    """Generate a session and return only the prescribed exercises."""
    generator = SessionGenerator(catalog, config)
    return generator.generate(
        target_muscles, location, athlete, history, exercise_count, now
    ).exercises
