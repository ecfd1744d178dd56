"""
API Response Models

Pydantic models for API responses.
"""

from typing import Dict, List, Optional

from pydantic import BaseModel, Field

from training_engine.schemas import (
    ExerciseDefinition,
    GenerationDecision,
    GoalProjection,
    GoalStatus,
    LoggedSet,
    MuscleGroup,
    PrescribedExercise,
)


class CatalogResponse(BaseModel):
    """Response for GET /api/catalog."""

    exercises: List[ExerciseDefinition] = Field(..., description="Bundled exercise catalog")
    count: int = Field(..., description="Total number of exercises")


class FreshnessResponse(BaseModel):
    """Response for POST /api/freshness."""

    freshness: Dict[MuscleGroup, float] = Field(..., description="Freshness per muscle (0-100)")
    status: Dict[MuscleGroup, str] = Field(..., description="Recovery band per muscle")


class LoadResponse(BaseModel):
    """Response for POST /api/load."""

    score: float = Field(..., description="Load score")
    breakdown: Dict[MuscleGroup, float] = Field(..., description="Load per muscle")


class SessionResponse(BaseModel):
    """Response for POST /api/sessions/generate."""

    exercises: List[PrescribedExercise] = Field(..., description="Prescribed exercises in order")
    decisions: List[GenerationDecision] = Field(..., description="Generation decision log")
    requested: int = Field(..., description="Number of exercises requested")


class SubstitutionResponse(BaseModel):
    """Response for POST /api/substitute."""

    original_id: str = Field(..., description="Exercise that was replaced")
    substitute: ExerciseDefinition = Field(..., description="Chosen substitute")
    substituted: bool = Field(..., description="False when no substitute was available")
    sets: List[LoggedSet] = Field(..., description="Adapted prescription")


class GoalProjectionResponse(BaseModel):
    """Response for POST /api/goals/project."""

    projection: GoalProjection = Field(..., description="Projection at the requested time")
    status: Optional[GoalStatus] = Field(None, description="Comparison with the actual value")


class OneRepMaxResponse(BaseModel):
    """Response for GET /api/one-rep-max."""

    weight: float
    reps: int
    estimated_1rm: float
