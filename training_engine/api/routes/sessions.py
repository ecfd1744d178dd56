"""
Sessions API Routes

Endpoint for workout session generation.
"""

from fastapi import APIRouter, HTTPException, status

from training_engine.api.models.requests import SessionRequest
from training_engine.api.models.responses import SessionResponse
from training_engine.api.routes.catalog import _load_catalog
from training_engine.generator import SessionGenerator

router = APIRouter()


@router.post("/sessions/generate", response_model=SessionResponse)
async def generate_session(request: SessionRequest) -> SessionResponse:
    """
    Generate a workout session.

    Complete workflow:
    1. Compute muscle freshness from the history
    2. Filter exercises by equipment, target muscles and injuries
    3. Fill a tier_1/tier_2/tier_3 template with the best-ranked candidates
    4. Prescribe sets, reps and weight

    Fewer exercises than requested is a valid result when the location or
    injuries leave too few candidates.

    Args:
        request: SessionRequest with targets, location, athlete and history

    Returns:
        SessionResponse with prescriptions and the decision log

    Raises:
        HTTPException: If the catalog cannot be loaded or generation fails
    """
    try:
        catalog = _load_catalog(request.catalog)
        generator = SessionGenerator(catalog)
        session = generator.generate(
            request.target_muscles,
            request.location,
            request.athlete,
            request.history,
            request.exercise_count,
            request.now,
        )
        return SessionResponse(
            exercises=session.exercises,
            decisions=session.decisions,
            requested=request.exercise_count,
        )

    except HTTPException:
        # Re-raise HTTP exceptions
        raise
    except Exception as e:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Session generation failed: {str(e)}",
        )
