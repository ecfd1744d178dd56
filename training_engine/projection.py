"""
Goal progression projection.

Projects where a numeric goal should be at a given time under a
progression strategy, and compares that expectation with what was
actually measured.

Strategies (r = elapsed share of the goal window, 0..1):
- linear:     start + delta * r
- peaking:    start + delta * r^2 (back-loaded)
- undulating: start + delta * (r - sin(2*pi*k*r) / (2*pi*k)), k waves.
  Monotonic, oscillates around the linear ramp and meets it at the end of
  every wave.

Goals without a deadline get a trend forecast from the two most recent
observations instead.
"""

import math
from datetime import datetime, timedelta
from typing import Iterable, List, Optional, Sequence

from training_engine.config import DEFAULT_CONFIG, EngineConfig
from training_engine.schemas import (
    BiometricLog,
    GoalDirection,
    GoalObservation,
    GoalProjection,
    GoalSpec,
    GoalStatus,
    GoalTargetType,
    ProgressionStrategy,
    TrainingSession,
    to_utc_naive,
)
from training_engine.strength import round_to_increment


def progress_ratio(created_at: datetime, deadline: datetime, now: datetime) -> float:
    """
    Elapsed share of the goal window, clamped to [0, 1].

    A zero-length (or inverted) window means the goal is due now: 1.0.
    """
    created_at, deadline, now = (to_utc_naive(t) for t in (created_at, deadline, now))
    total = (deadline - created_at).total_seconds()
    if total <= 0:
        return 1.0
    elapsed = (now - created_at).total_seconds()
    return max(0.0, min(1.0, elapsed / total))


def curve_fraction(
    strategy: ProgressionStrategy, ratio: float, cycles: int = 4
) -> float:
    """Share of the total change expected at `ratio` under `strategy`."""
    if strategy == ProgressionStrategy.PEAKING:
        return ratio * ratio
    if strategy == ProgressionStrategy.UNDULATING:
        wave = 2 * math.pi * cycles
        fraction = ratio - math.sin(wave * ratio) / wave
        return max(0.0, min(1.0, fraction))
    return ratio


def goal_unit(goal: GoalSpec) -> str:
    if goal.target_type == GoalTargetType.BODY_MEASUREMENT:
        return "%" if goal.measurement_key == "body_fat" else "cm"
    return "kg"


def _clamp_to_goal(value: float, goal: GoalSpec) -> float:
    low = min(goal.start_value, goal.target_value)
    high = max(goal.start_value, goal.target_value)
    return max(low, min(high, value))


def _round_value(value: float, goal: GoalSpec, config: EngineConfig) -> float:
    if goal.target_type == GoalTargetType.EXERCISE:
        return round_to_increment(value, config.goal_weight_increment)
    return round(value, 1)


def _trend(observations: Sequence[GoalObservation]) -> Optional[float]:
    """Value change per day between the two most recent observations."""
    if len(observations) < 2:
        return None
    latest, previous = sorted(observations, key=lambda o: o.timestamp, reverse=True)[:2]
    days = (latest.timestamp - previous.timestamp).total_seconds() / 86400.0
    if days == 0:
        return None
    return (latest.value - previous.value) / days


def project_goal(
    goal: GoalSpec,
    now: datetime,
    observations: Optional[Sequence[GoalObservation]] = None,
    config: EngineConfig = DEFAULT_CONFIG,
) -> GoalProjection:
    """
    Project a goal at `now`.

    With a deadline, the expected value follows the goal's strategy and is
    rounded (2.5 for exercise goals, one decimal for body goals) without
    leaving the start..target interval. Expected reps interpolate linearly
    when both start and target reps are known; exercise goals round them to
    whole reps, body goals keep the raw value.

    Without a deadline, the trend of the two most recent observations is
    extrapolated `trend_forecast_days` past `now`. With fewer than two
    observations there is no estimate.

    Args:
        goal: Goal definition
        now: Evaluation time
        observations: Measured values (only used for deadline-less goals)
        config: Engine constants

    Returns:
        GoalProjection
    """
    unit = goal_unit(goal)
    now = to_utc_naive(now)

    if goal.deadline is None:
        points = list(observations or [])
        per_day = _trend(points)
        if per_day is None:
            return GoalProjection(unit=unit, direction=goal.direction)

        latest = max(points, key=lambda o: o.timestamp)
        forecast_at = now + timedelta(days=config.trend_forecast_days)
        days_ahead = (forecast_at - latest.timestamp).total_seconds() / 86400.0
        forecast = latest.value + per_day * days_ahead
        return GoalProjection(
            unit=unit,
            direction=goal.direction,
            trend_per_day=per_day,
            forecast_value=_round_value(forecast, goal, config),
            forecast_at=forecast_at,
        )

    ratio = progress_ratio(goal.created_at, goal.deadline, now)
    fraction = curve_fraction(goal.strategy, ratio, config.undulation_cycles)
    expected = goal.start_value + (goal.target_value - goal.start_value) * fraction
    expected = _clamp_to_goal(_round_value(expected, goal, config), goal)

    expected_reps = None
    if goal.start_reps is not None and goal.target_reps is not None:
        expected_reps = goal.start_reps + (goal.target_reps - goal.start_reps) * ratio
        if goal.target_type == GoalTargetType.EXERCISE:
            expected_reps = float(math.floor(expected_reps + 0.5))

    return GoalProjection(
        expected_value=expected,
        expected_reps=expected_reps,
        progress_ratio=ratio,
        unit=unit,
        direction=goal.direction,
    )


def compare_to_actual(projection: GoalProjection, actual_value: float) -> Optional[GoalStatus]:
    """
    Signed difference between expected and actual values.

    status_diff = expected - actual. For increasing goals a positive diff
    means behind schedule; for decreasing goals a negative diff does.

    Returns:
        GoalStatus, or None when the projection has no expected value
    """
    if projection.expected_value is None:
        return None

    diff = projection.expected_value - actual_value
    if projection.direction == GoalDirection.DECREASE:
        behind = diff < 0
    else:
        behind = diff > 0
    return GoalStatus(status_diff=diff, direction=projection.direction, behind_schedule=behind)


def goal_observations(
    goal: GoalSpec,
    sessions: Iterable[TrainingSession] = (),
    biometrics: Iterable[BiometricLog] = (),
) -> List[GoalObservation]:
    """
    Build the measured history of a goal.

    Exercise goals use the heaviest logged set of the goal's exercise in
    each session. Body goals use bodyweight or the named measurement from
    each biometric log. Zero values are dropped.
    """
    points: List[GoalObservation] = []

    if goal.target_type == GoalTargetType.EXERCISE:
        if not goal.exercise_id:
            return points
        for session in sessions:
            weights = [
                s.weight
                for performed in session.exercises
                if performed.exercise_id == goal.exercise_id
                for s in performed.sets
            ]
            if weights and max(weights) > 0:
                points.append(GoalObservation(timestamp=session.timestamp, value=max(weights)))
    else:
        for log in biometrics:
            if goal.target_type == GoalTargetType.BODY_WEIGHT:
                value = log.bodyweight
            else:
                value = log.measurements.get(goal.measurement_key or "", 0.0)
            if value > 0:
                points.append(GoalObservation(timestamp=log.timestamp, value=value))

    return sorted(points, key=lambda o: o.timestamp)
