"""
Substitution API Routes

Endpoint for swapping an exercise at a different location.
"""

from fastapi import APIRouter

from training_engine.api.models.requests import SubstitutionRequest
from training_engine.api.models.responses import SubstitutionResponse
from training_engine.api.routes.catalog import _find_exercise, _load_catalog
from training_engine.substitution import adapt_prescription, find_substitute

router = APIRouter()


@router.post("/substitute", response_model=SubstitutionResponse)
async def substitute_exercise(request: SubstitutionRequest) -> SubstitutionResponse:
    """
    Find a substitute with the same movement pattern and adapt the prescription.

    When nothing at the location fits, the original exercise comes back
    unchanged with `substituted=False`.

    Args:
        request: SubstitutionRequest with exercise id, location and sets

    Returns:
        SubstitutionResponse with the chosen exercise and adapted sets

    Raises:
        HTTPException: If the exercise is unknown
    """
    catalog = _load_catalog(request.catalog)
    current = _find_exercise(catalog, request.exercise_id)
    replacement = find_substitute(current, request.location, catalog)
    return SubstitutionResponse(
        original_id=current.id,
        substitute=replacement,
        substituted=replacement.id != current.id,
        sets=adapt_prescription(request.sets, current, replacement),
    )
