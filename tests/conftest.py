"""
Shared fixtures: bundled catalog, locations, athlete and a short history.
"""

import json
from pathlib import Path
from typing import Dict, List

import pytest

from training_engine.schemas import (
    Athlete,
    ExerciseDefinition,
    ExerciseTier,
    Location,
    MovementPattern,
    MuscleGroup,
    TrainingSession,
)

ROOT = Path(__file__).resolve().parent.parent
FIXTURES = ROOT / "tests" / "fixtures"


def _load_json(path: Path):
    with open(path) as f:
        return json.load(f)


@pytest.fixture
def catalog() -> List[ExerciseDefinition]:
    """Load the bundled exercise catalog."""
    data = _load_json(ROOT / "models" / "exercise_catalog.json")
    return [ExerciseDefinition(**entry) for entry in data]


@pytest.fixture
def exercises(catalog) -> Dict[str, ExerciseDefinition]:
    """Catalog indexed by exercise id."""
    return {exercise.id: exercise for exercise in catalog}


@pytest.fixture
def locations() -> Dict[str, Location]:
    """Gym, home and travel locations."""
    data = _load_json(FIXTURES / "locations.json")
    return {key: Location(**value) for key, value in data.items()}


@pytest.fixture
def athlete() -> Athlete:
    """80 kg hypertrophy athlete without injuries."""
    return Athlete(**_load_json(FIXTURES / "athlete.json"))


@pytest.fixture
def history() -> List[TrainingSession]:
    """Bench + pull-up on 2026-03-10, squats on 2026-03-13 (both 18:00)."""
    return [TrainingSession(**entry) for entry in _load_json(FIXTURES / "history.json")]


@pytest.fixture
def make_exercise():
    """Factory for ad-hoc exercise definitions."""

    def _make(exercise_id: str = "test_exercise", **overrides) -> ExerciseDefinition:
        fields = {
            "id": exercise_id,
            "pattern": MovementPattern.ISOLATION,
            "tier": ExerciseTier.TIER_3,
            "primary_muscles": [MuscleGroup.BACK],
            "difficulty_multiplier": 1.0,
            "bodyweight_coefficient": 0.0,
        }
        fields.update(overrides)
        return ExerciseDefinition(**fields)

    return _make
