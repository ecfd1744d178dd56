"""
Catalog API Routes

Endpoint for the bundled exercise catalog, and the loader other routes use
when a request does not carry its own catalog.
"""

import json
from pathlib import Path
from typing import List, Optional

from fastapi import APIRouter, HTTPException, status

from training_engine.api.models.responses import CatalogResponse
from training_engine.schemas import ExerciseDefinition

router = APIRouter()

CATALOG_PATH = Path(__file__).resolve().parents[3] / "models" / "exercise_catalog.json"


def _load_catalog(
    supplied: Optional[List[ExerciseDefinition]] = None,
) -> List[ExerciseDefinition]:
    """
    Use the request's catalog, or load the bundled one.

    Raises:
        HTTPException: If the bundled catalog is missing or invalid
    """
    if supplied is not None:
        return supplied

    if not CATALOG_PATH.exists():
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Catalog file not found: {CATALOG_PATH}",
        )

    try:
        with open(CATALOG_PATH) as f:
            data = json.load(f)
        return [ExerciseDefinition(**entry) for entry in data]
    except Exception as e:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to load catalog: {str(e)}",
        )


def _find_exercise(catalog: List[ExerciseDefinition], exercise_id: str) -> ExerciseDefinition:
    exercise = next((e for e in catalog if e.id == exercise_id), None)
    if exercise is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Exercise '{exercise_id}' not found in catalog",
        )
    return exercise


@router.get("/catalog", response_model=CatalogResponse)
async def list_catalog() -> CatalogResponse:
    """
    List the bundled exercise catalog.

    Returns:
        CatalogResponse with all exercises and the total count
    """
    exercises = _load_catalog()
    return CatalogResponse(exercises=exercises, count=len(exercises))
