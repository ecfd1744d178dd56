"""
API Request Models

Pydantic models for API request validation.
"""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field

from training_engine.schemas import (
    Athlete,
    ExerciseDefinition,
    GoalObservation,
    GoalSpec,
    Location,
    LoggedSet,
    MuscleGroup,
    TrainingSession,
)


class CatalogRequest(BaseModel):
    """Base for requests that need the exercise catalog."""

    catalog: Optional[List[ExerciseDefinition]] = Field(
        None, description="Exercise catalog (defaults to the bundled catalog)"
    )


class FreshnessRequest(CatalogRequest):
    """Request model for muscle freshness."""

    athlete: Athlete = Field(..., description="Athlete profile")
    history: List[TrainingSession] = Field(default_factory=list, description="Training history")
    now: datetime = Field(..., description="Evaluation time")


class LoadRequest(CatalogRequest):
    """Request model for a load score and its muscle breakdown."""

    exercise_id: str = Field(..., description="Catalog exercise identifier")
    sets: List[LoggedSet] = Field(..., description="Logged sets")
    bodyweight: float = Field(..., gt=0.0, description="Athlete bodyweight")


class SessionRequest(CatalogRequest):
    """Request model for session generation."""

    target_muscles: List[MuscleGroup] = Field(..., min_length=1, description="Muscles to train")
    location: Location = Field(..., description="Active location")
    athlete: Athlete = Field(..., description="Athlete profile")
    history: List[TrainingSession] = Field(default_factory=list, description="Training history")
    exercise_count: int = Field(default=5, ge=1, le=20, description="Desired number of exercises")
    now: datetime = Field(..., description="Generation time")


class SubstitutionRequest(CatalogRequest):
    """Request model for exercise substitution."""

    exercise_id: str = Field(..., description="Exercise to replace")
    location: Location = Field(..., description="Target location")
    sets: List[LoggedSet] = Field(default_factory=list, description="Prescription to adapt")


class GoalProjectionRequest(BaseModel):
    """Request model for goal projection."""

    goal: GoalSpec = Field(..., description="Goal definition")
    now: datetime = Field(..., description="Evaluation time")
    actual_value: Optional[float] = Field(None, description="Current measured value")
    observations: List[GoalObservation] = Field(
        default_factory=list, description="Measured history (deadline-less goals)"
    )
