"""
Tests for the session generator.
"""

from datetime import datetime

import pytest

from training_engine.generator import (
    SessionGenerator,
    best_set,
    build_tier_template,
    generate_session,
    volume_for,
)
from training_engine.schemas import (
    Athlete,
    ExerciseTier,
    LoggedSet,
    Location,
    MuscleGroup,
    PerformedExercise,
    SetType,
    TrainingGoal,
    TrainingSession,
)

NOW = datetime(2026, 3, 20, 18, 0, 0)

T1, T2, T3 = ExerciseTier.TIER_1, ExerciseTier.TIER_2, ExerciseTier.TIER_3


@pytest.mark.parametrize(
    "count,expected",
    [
        (0, []),
        (1, [T1]),
        (2, [T1, T2]),
        (3, [T1, T2, T3]),
        (4, [T1, T2, T2, T3]),
        (5, [T1, T2, T2, T3, T3]),
        (6, [T1, T2, T2, T2, T3, T3]),
    ],
)
def test_tier_template(count, expected):
    assert build_tier_template(count) == expected


def test_volume_table():
    assert volume_for(TrainingGoal.STRENGTH, T1) == (5, 5)
    assert volume_for(TrainingGoal.HYPERTROPHY, T2) == (3, 10)
    assert volume_for(TrainingGoal.ENDURANCE, T1) == (3, 15)
    assert volume_for(TrainingGoal.REHAB, T3) == (3, 15)


def test_best_set_prefers_working_sets():
    sets = [
        LoggedSet(reps=10, weight=100, completed=True, set_type=SetType.WARMUP),
        LoggedSet(reps=6, weight=80, completed=True),
        LoggedSet(reps=8, weight=80, completed=True),
    ]
    top = best_set(sets)

    assert (top.weight, top.reps) == (80, 8)
    assert best_set([]) is None


def test_chest_session_at_gym(catalog, locations, athlete):
    """
    Tier 1 goes to bench press, tier 2 to dumbbell press (ties with dips,
    earlier in the catalog), and the tier 3 slot falls back to dips.
    """
    generated = SessionGenerator(catalog).generate(
        [MuscleGroup.CHEST], locations["gym"], athlete, [], 3, NOW
    )

    ids = [e.exercise_id for e in generated.exercises]
    assert ids == ["bench_press", "dumbbell_press", "dips"]
    assert [(e.sets, e.reps) for e in generated.exercises] == [(4, 8), (3, 10), (3, 12)]
    assert [e.tier for e in generated.exercises] == [T1, T2, T3]


def test_no_history_means_zero_weight(catalog, locations, athlete):
    exercises = generate_session(
        [MuscleGroup.CHEST], locations["gym"], catalog, athlete, [], 3, NOW
    )

    assert all(e.weight == 0 for e in exercises)
    assert all(e.estimated_1rm == 0 for e in exercises)


def test_planned_sets_match_prescription(catalog, locations, athlete):
    exercises = generate_session(
        [MuscleGroup.CHEST], locations["gym"], catalog, athlete, [], 3, NOW
    )

    for exercise in exercises:
        assert len(exercise.planned_sets) == exercise.sets
        assert all(s.reps == exercise.reps for s in exercise.planned_sets)
        assert all(not s.completed for s in exercise.planned_sets)


def test_weight_progresses_when_target_reps_met(catalog, locations, athlete, history):
    """Bench best working set 80 x 8 meets the hypertrophy target of 8 -> 82.5."""
    exercises = generate_session(
        [MuscleGroup.CHEST], locations["gym"], catalog, athlete, history, 1, NOW
    )

    assert exercises[0].exercise_id == "bench_press"
    assert exercises[0].weight == 82.5
    assert exercises[0].estimated_1rm == 101.5


def test_strength_goal_progression(catalog, locations, history):
    """Squats 100 x 5 meet the strength target of 5 reps -> 102.5."""
    lifter = Athlete(bodyweight=80.0, goal=TrainingGoal.STRENGTH)

    exercises = generate_session(
        [MuscleGroup.QUADS], locations["gym"], catalog, lifter, history, 1, NOW
    )

    assert exercises[0].exercise_id == "back_squat"
    assert (exercises[0].sets, exercises[0].reps) == (5, 5)
    assert exercises[0].weight == 102.5


def test_weight_held_when_target_reps_missed(catalog, locations, athlete):
    history = [
        TrainingSession(
            id="short",
            timestamp=datetime(2026, 3, 15, 18, 0, 0),
            exercises=[
                PerformedExercise(
                    exercise_id="bench_press",
                    sets=[LoggedSet(reps=7, weight=85, completed=True)],
                )
            ],
        )
    ]

    exercises = generate_session(
        [MuscleGroup.CHEST], locations["gym"], catalog, athlete, history, 1, NOW
    )

    assert exercises[0].weight == 85


def test_most_recent_performance_is_used(catalog, locations, athlete, history):
    later = TrainingSession(
        id="later",
        timestamp=datetime(2026, 3, 16, 18, 0, 0),
        exercises=[
            PerformedExercise(
                exercise_id="bench_press",
                sets=[LoggedSet(reps=5, weight=70, completed=True)],
            )
        ],
    )

    exercises = generate_session(
        [MuscleGroup.CHEST], locations["gym"], catalog, athlete, history + [later], 1, NOW
    )

    assert exercises[0].weight == 70


def test_injured_primary_muscles_excluded_except_rehab(catalog, locations):
    """Shoulder injury removes overhead press and lateral raises, keeps the rehab movement."""
    injured = Athlete(bodyweight=80.0, injuries={MuscleGroup.SHOULDERS})

    exercises = generate_session(
        [MuscleGroup.SHOULDERS], locations["gym"], catalog, injured, [], 10, NOW
    )

    ids = {e.exercise_id for e in exercises}
    assert ids == {"bench_press", "dumbbell_press", "push_up", "dips", "band_external_rotation"}


def test_slots_without_candidates_are_omitted(catalog, locations, athlete):
    """Only push-ups train chest with bodyweight and bands."""
    generated = SessionGenerator(catalog).generate(
        [MuscleGroup.CHEST], locations["travel"], athlete, [], 3, NOW
    )

    assert [e.exercise_id for e in generated.exercises] == ["push_up"]
    omitted = [d for d in generated.decisions if d.outcome == "slot omitted"]
    assert len(omitted) == 2


def test_no_targets_yields_empty_session(catalog, locations, athlete):
    assert generate_session([], locations["gym"], catalog, athlete, [], 4, NOW) == []


def test_no_exercise_repeats(catalog, locations, athlete):
    exercises = generate_session(
        [MuscleGroup.CHEST, MuscleGroup.BACK, MuscleGroup.QUADS],
        locations["gym"],
        catalog,
        athlete,
        [],
        12,
        NOW,
    )

    ids = [e.exercise_id for e in exercises]
    assert len(ids) == 12
    assert len(set(ids)) == len(ids)


def test_equipment_respected(catalog, locations, athlete, exercises):
    home = locations["home"]

    generated = generate_session(
        [MuscleGroup.CHEST, MuscleGroup.BACK, MuscleGroup.QUADS], home, catalog, athlete, [], 8, NOW
    )

    assert generated
    assert all(home.supports(exercises[e.exercise_id]) for e in generated)


def test_fresher_muscles_preferred(make_exercise):
    """
    Chest exercise A (score 6) beats back exercise B (score 5) when fresh,
    but loses once chest freshness drops to 70.
    """
    chest_lift = make_exercise("chest_lift", tier=T1, primary_muscles=[MuscleGroup.CHEST], user_score=6)
    back_lift = make_exercise("back_lift", tier=T1, primary_muscles=[MuscleGroup.BACK], user_score=5)
    machine_fly = make_exercise(
        "machine_fly",
        primary_muscles=[MuscleGroup.CHEST],
        equipment={"pec_deck"},
        difficulty_multiplier=2.0,
    )
    catalog = [chest_lift, back_lift, machine_fly]
    location = Location(id="gym", equipment={"barbell"})
    athlete = Athlete(bodyweight=80.0)
    targets = [MuscleGroup.CHEST, MuscleGroup.BACK]

    fresh = generate_session(targets, location, catalog, athlete, [], 1, NOW)

    # 5 x 10 x 100 kg -> (5000 / 500 + 5) * 2.0 = 30 fatigue, right now
    history = [
        TrainingSession(
            id="flies",
            timestamp=NOW,
            exercises=[
                PerformedExercise(
                    exercise_id="machine_fly",
                    sets=[LoggedSet(reps=10, weight=100, completed=True) for _ in range(5)],
                )
            ],
        )
    ]
    tired = SessionGenerator(catalog).generate(targets, location, athlete, history, 1, NOW)

    assert fresh[0].exercise_id == "chest_lift"
    assert tired.freshness[MuscleGroup.CHEST] == pytest.approx(70.0)
    assert tired.exercises[0].exercise_id == "back_lift"


def test_long_sessions_fill_from_any_tier(make_exercise):
    """Beyond five exercises every slot may take the best remaining candidate."""
    catalog = [
        make_exercise("lead", tier=T1, primary_muscles=[MuscleGroup.CHEST], user_score=5),
        make_exercise("favourite", tier=T2, primary_muscles=[MuscleGroup.CHEST], user_score=9),
        make_exercise("filler", tier=T3, primary_muscles=[MuscleGroup.CHEST], user_score=3),
    ]
    location = Location(id="anywhere")
    athlete = Athlete(bodyweight=80.0)

    short = generate_session([MuscleGroup.CHEST], location, catalog, athlete, [], 3, NOW)
    long = generate_session([MuscleGroup.CHEST], location, catalog, athlete, [], 6, NOW)

    assert [e.exercise_id for e in short] == ["lead", "favourite", "filler"]
    assert [e.exercise_id for e in long] == ["favourite", "lead", "filler"]


def test_decisions_are_recorded(catalog, locations, athlete):
    generated = SessionGenerator(catalog).generate(
        [MuscleGroup.CHEST], locations["gym"], athlete, [], 3, NOW
    )

    points = [d.decision_point for d in generated.decisions]
    assert points[0] == "Candidate Eligibility"
    assert points[1:] == ["Slot 1 Selection", "Slot 2 Selection", "Slot 3 Selection"]
    assert generated.decisions[1].outcome.startswith("bench_press")
    assert all(len(d.reasoning) >= 10 for d in generated.decisions)


def test_generate_session_matches_generator(catalog, locations, athlete, history):
    args = ([MuscleGroup.BACK], locations["gym"])

    via_function = generate_session(*args, catalog, athlete, history, 3, NOW)
    via_class = SessionGenerator(catalog).generate(*args, athlete, history, 3, NOW).exercises

    assert via_function == via_class
