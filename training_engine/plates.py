"""
Barbell plate calculator.
"""

from typing import List, Sequence

from pydantic import BaseModel, Field

AVAILABLE_PLATES = (25.0, 20.0, 15.0, 10.0, 5.0, 2.5, 1.25, 0.5, 0.25)


class PlateCount(BaseModel):
    """Number of plates of one size on each side of the bar."""

    weight: float = Field(..., gt=0.0)
    count: int = Field(..., ge=1)


def calculate_plates(
    total_weight: float,
    bar_weight: float = 20.0,
    available_plates: Sequence[float] = AVAILABLE_PLATES,
) -> List[PlateCount]:
    """
    Plates per side for a total barbell weight, largest plates first.

    Weight that cannot be made with the available plates is left off.

    Args:
        total_weight: Bar plus plates
        bar_weight: Weight of the empty bar
        available_plates: Plate sizes on hand

    Returns:
        List of plate counts per side (empty when the total does not exceed the bar)
    """
    per_side = (total_weight - bar_weight) / 2
    if per_side <= 0:
        return []

    plates: List[PlateCount] = []
    remaining = per_side
    for plate in sorted(available_plates, reverse=True):
        # Millesimal rounding keeps float error from dropping a plate
        count = int((round(remaining * 1000) / 1000) // plate)
        if count > 0:
            plates.append(PlateCount(weight=plate, count=count))
            remaining = round((remaining - count * plate) * 1000) / 1000
    return plates
