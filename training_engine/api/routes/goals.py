"""
Goals API Routes

Endpoint for goal progression projection.
"""

from fastapi import APIRouter

from training_engine.api.models.requests import GoalProjectionRequest
from training_engine.api.models.responses import GoalProjectionResponse
from training_engine.projection import compare_to_actual, project_goal

router = APIRouter()


@router.post("/goals/project", response_model=GoalProjectionResponse)
async def project(request: GoalProjectionRequest) -> GoalProjectionResponse:
    """
    Project a goal at the requested time.

    With a deadline the expected value follows the goal's progression
    strategy. Without one, the trend of the two latest observations is
    extrapolated 30 days ahead.

    `status.status_diff` is expected minus actual: positive means behind for
    increasing goals, negative means behind for decreasing goals.

    Args:
        request: GoalProjectionRequest

    Returns:
        GoalProjectionResponse
    """
    projection = project_goal(request.goal, request.now, request.observations)
    goal_status = None
    if request.actual_value is not None:
        goal_status = compare_to_actual(projection, request.actual_value)
    return GoalProjectionResponse(projection=projection, status=goal_status)
