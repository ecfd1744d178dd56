"""
Tests for the freshness / recovery model.
"""

from datetime import datetime, timedelta, timezone

import pytest

from training_engine.config import EngineConfig
from training_engine.fatigue import compute_freshness, recovery_status, remaining_fatigue
from training_engine.schemas import (
    ALL_MUSCLE_GROUPS,
    Athlete,
    LoggedSet,
    MuscleGroup,
    PerformedExercise,
    TrainingSession,
)

NOW = datetime(2026, 3, 14, 12, 0, 0)


@pytest.fixture
def lifter():
    return Athlete(bodyweight=80.0)


@pytest.fixture
def pull_up_like(make_exercise):
    """Bodyweight back exercise: 10 reps at 80 kg scores 6.6."""
    return make_exercise(
        "pull_up_like",
        primary_muscles=[MuscleGroup.BACK],
        bodyweight_coefficient=1.0,
    )


def session_at(hours_ago: float, exercise_id: str = "pull_up_like", sets=None) -> TrainingSession:
    if sets is None:
        sets = [LoggedSet(reps=10, weight=0, completed=True)]
    return TrainingSession(
        id=f"s-{hours_ago}",
        timestamp=NOW - timedelta(hours=hours_ago),
        exercises=[PerformedExercise(exercise_id=exercise_id, sets=sets)],
    )


def test_empty_history_is_fully_fresh(pull_up_like, lifter):
    freshness = compute_freshness([], [pull_up_like], lifter, NOW)

    assert set(freshness) == set(ALL_MUSCLE_GROUPS)
    assert all(value == 100.0 for value in freshness.values())


def test_sessions_outside_lookback_are_ignored(pull_up_like, lifter):
    """Anything older than 168 h leaves every muscle at 100."""
    history = [session_at(169), session_at(200), session_at(1000)]

    freshness = compute_freshness(history, [pull_up_like], lifter, NOW)

    assert all(value == 100.0 for value in freshness.values())


def test_half_recovered_after_36_hours(pull_up_like, lifter):
    """6.6 fatigue at 36 h of a 72 h ramp leaves 3.3 -> back at 96.7."""
    freshness = compute_freshness([session_at(36)], [pull_up_like], lifter, NOW)

    assert freshness[MuscleGroup.BACK] == pytest.approx(96.7)
    assert freshness[MuscleGroup.CHEST] == 100.0


def test_fully_recovered_at_72_hours(pull_up_like, lifter):
    freshness = compute_freshness([session_at(72)], [pull_up_like], lifter, NOW)

    assert freshness[MuscleGroup.BACK] == 100.0


def test_remaining_fatigue_ramp():
    assert remaining_fatigue(6.6, 0) == pytest.approx(6.6)
    assert remaining_fatigue(6.6, 36) == pytest.approx(3.3)
    assert remaining_fatigue(6.6, 72) == 0.0
    assert remaining_fatigue(6.6, 100) == 0.0


def test_remaining_fatigue_treats_future_as_now():
    """A session timestamped after `now` carries its full fatigue."""
    assert remaining_fatigue(10.0, -5) == pytest.approx(10.0)


def test_remaining_fatigue_uses_config():
    config = EngineConfig(recovery_hours=48.0)
    assert remaining_fatigue(10.0, 24, config) == pytest.approx(5.0)


def test_secondary_muscles_take_full_fatigue(make_exercise, lifter):
    """Fatigue hits every muscle the exercise trains, not a weighted share."""
    exercise = make_exercise(
        "row_like",
        primary_muscles=[MuscleGroup.BACK],
        secondary_muscles=[MuscleGroup.BICEPS],
        bodyweight_coefficient=1.0,
    )
    history = [session_at(0, "row_like")]

    freshness = compute_freshness(history, [exercise], lifter, NOW)

    assert freshness[MuscleGroup.BACK] == pytest.approx(93.4)
    assert freshness[MuscleGroup.BICEPS] == pytest.approx(93.4)


def test_freshness_floors_at_zero(make_exercise, lifter):
    """Ten capped sessions an hour ago would take 350 points; the score stops at 0."""
    heavy = make_exercise("heavy", difficulty_multiplier=3.0)
    sets = [LoggedSet(reps=10, weight=200, completed=True) for _ in range(5)]
    history = [session_at(1, "heavy", sets) for _ in range(10)]

    freshness = compute_freshness(history, [heavy], lifter, NOW)

    assert freshness[MuscleGroup.BACK] == 0.0
    assert all(0.0 <= value <= 100.0 for value in freshness.values())


def test_freshness_never_decreases_as_time_passes(pull_up_like, lifter):
    history = [session_at(2), session_at(30), session_at(60)]

    previous = None
    for step in range(0, 100, 6):
        now = NOW + timedelta(hours=step)
        back = compute_freshness(history, [pull_up_like], lifter, now)[MuscleGroup.BACK]
        if previous is not None:
            assert back >= previous
        previous = back

    assert previous == 100.0


def test_uncompleted_sets_do_not_fatigue(pull_up_like, lifter):
    sets = [LoggedSet(reps=10, weight=0, completed=False)]

    freshness = compute_freshness([session_at(1, sets=sets)], [pull_up_like], lifter, NOW)

    assert freshness[MuscleGroup.BACK] == 100.0


def test_unknown_exercises_are_skipped(pull_up_like, lifter):
    history = [session_at(1, "not_in_catalog"), session_at(36)]

    freshness = compute_freshness(history, [pull_up_like], lifter, NOW)

    assert freshness[MuscleGroup.BACK] == pytest.approx(96.7)


def test_tracked_muscles_limit_the_result(pull_up_like, lifter):
    freshness = compute_freshness(
        [session_at(36)],
        [pull_up_like],
        lifter,
        NOW,
        tracked_muscles=[MuscleGroup.BACK, MuscleGroup.QUADS],
    )

    assert set(freshness) == {MuscleGroup.BACK, MuscleGroup.QUADS}
    assert freshness[MuscleGroup.QUADS] == 100.0


def test_history_fixture_with_catalog(history, catalog, athlete):
    """Squats 6 h before `now` leave quads tired; bench 78 h before is recovered."""
    now = datetime(2026, 3, 14, 0, 0, 0)

    freshness = compute_freshness(history, catalog, athlete, now)

    # 3 x 5 x 100 kg -> 1500 / 500 + 5 = 8.0; 6 of 72 h elapsed
    assert freshness[MuscleGroup.QUADS] == pytest.approx(100 - 8.0 * (1 - 6 / 72))
    assert freshness[MuscleGroup.CHEST] == 100.0


@pytest.mark.parametrize(
    "score,expected",
    [
        (100.0, "fresh"),
        (95.0, "fresh"),
        (94.9, "minimal"),
        (80.0, "minimal"),
        (79.9, "tired"),
        (65.0, "tired"),
        (64.9, "very_tired"),
        (45.0, "very_tired"),
        (44.9, "exhausted"),
        (0.0, "exhausted"),
    ],
)
def test_recovery_status_bands(score, expected):
    assert recovery_status(score) == expected


def test_utc_suffixed_history_with_naive_now(pull_up_like, lifter):
    """History stamped "Z" (as exported by most clients) lines up with a naive `now`."""
    session = TrainingSession(
        id="z",
        timestamp="2026-03-13T00:00:00Z",
        exercises=[
            PerformedExercise(
                exercise_id="pull_up_like", sets=[LoggedSet(reps=10, weight=0, completed=True)]
            )
        ],
    )

    freshness = compute_freshness([session], [pull_up_like], lifter, NOW)

    # 36 h before NOW in UTC
    assert freshness[MuscleGroup.BACK] == pytest.approx(96.7)


def test_offset_now_with_naive_history(pull_up_like, lifter):
    """14:00 at +02:00 is NOW in UTC, so the 36 h session is half recovered."""
    now = datetime(2026, 3, 14, 14, 0, 0, tzinfo=timezone(timedelta(hours=2)))

    freshness = compute_freshness([session_at(36)], [pull_up_like], lifter, now)

    assert freshness[MuscleGroup.BACK] == pytest.approx(96.7)


def test_mixed_naive_and_aware_history(pull_up_like, lifter):
    """Naive and "Z" sessions sort together without a comparison error."""
    aware = TrainingSession(
        id="aware",
        timestamp=(NOW - timedelta(hours=72)).replace(tzinfo=timezone.utc),
        exercises=session_at(72).exercises,
    )

    freshness = compute_freshness([session_at(36), aware], [pull_up_like], lifter, NOW)

    assert freshness[MuscleGroup.BACK] == pytest.approx(96.7)
