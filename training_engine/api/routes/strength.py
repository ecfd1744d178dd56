"""
Strength API Routes

Endpoint for one-rep-max estimation.
"""

from fastapi import APIRouter, Query

from training_engine.api.models.responses import OneRepMaxResponse
from training_engine.strength import estimate_1rm

router = APIRouter()


@router.get("/one-rep-max", response_model=OneRepMaxResponse)
async def one_rep_max(
    weight: float = Query(..., ge=0.0, description="Weight lifted"),
    reps: int = Query(..., ge=0, description="Reps completed"),
) -> OneRepMaxResponse:
    """Estimate a one-rep max with the Epley formula."""
    return OneRepMaxResponse(weight=weight, reps=reps, estimated_1rm=estimate_1rm(weight, reps))
