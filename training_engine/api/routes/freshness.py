"""
Recovery API Routes

Endpoints for muscle freshness and load scoring.
"""

from fastapi import APIRouter, HTTPException, status

from training_engine.api.models.requests import FreshnessRequest, LoadRequest
from training_engine.api.models.responses import FreshnessResponse, LoadResponse
from training_engine.api.routes.catalog import _find_exercise, _load_catalog
from training_engine.fatigue import compute_freshness, recovery_status
from training_engine.load import distribute_load, score_exercise_load

router = APIRouter()


@router.post("/freshness", response_model=FreshnessResponse)
async def calculate_freshness(request: FreshnessRequest) -> FreshnessResponse:
    """
    Calculate muscle freshness (0-100) from the training history.

    Sessions within the last 7 days contribute fatigue equal to their load
    score, fading linearly to zero over 72 hours.

    Args:
        request: FreshnessRequest with athlete, history and evaluation time

    Returns:
        FreshnessResponse with freshness and recovery band per muscle

    Raises:
        HTTPException: If the catalog cannot be loaded or calculation fails
    """
    try:
        catalog = _load_catalog(request.catalog)
        freshness = compute_freshness(request.history, catalog, request.athlete, request.now)
        return FreshnessResponse(
            freshness=freshness,
            status={muscle: recovery_status(score) for muscle, score in freshness.items()},
        )

    except HTTPException:
        # Re-raise HTTP exceptions
        raise
    except Exception as e:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Freshness calculation failed: {str(e)}",
        )


@router.post("/load", response_model=LoadResponse)
async def calculate_load(request: LoadRequest) -> LoadResponse:
    """
    Score one performed exercise and split the score across its muscles.

    Args:
        request: LoadRequest with exercise id, sets and bodyweight

    Returns:
        LoadResponse with the score and per-muscle breakdown

    Raises:
        HTTPException: If the exercise is unknown
    """
    catalog = _load_catalog(request.catalog)
    exercise = _find_exercise(catalog, request.exercise_id)
    score = score_exercise_load(exercise, request.sets, request.bodyweight)
    return LoadResponse(score=score, breakdown=distribute_load(exercise, score))
