"""Barbell plate loading calculations."""

import math

from typedefs import PlateCalculation, PlateLoad, WeightUnit
from units import format_number

BAR_WEIGHTS = {"kg": 20.0, "lbs": 45.0}

# Available plate weights for one side, heaviest first
PLATES = {
    "kg": [20.0, 15.0, 10.0, 5.0, 2.5, 1.25],
    "lbs": [45.0, 35.0, 25.0, 10.0, 5.0, 2.5],
}

# Leftover weight per side below this is floating point noise
TOLERANCE = 0.1


def calculate_plates(target_weight: float, unit: WeightUnit) -> PlateCalculation:
    """Calculate which plates to load on ONE side of the bar for a target weight.

    Plates are picked greedily from heaviest to lightest, which is exact for
    the standard kg and lbs plate sets. Targets that cannot be matched
    return an invalid result carrying the closest loadable weight.

    Args:
        target_weight: Total weight including the bar
        unit: Unit of target_weight, selects bar and plate set

    Returns:
        PlateCalculation; check is_valid before using the plates
    """
    bar_weight = BAR_WEIGHTS[unit]
    available_plates = PLATES[unit]

    if not math.isfinite(target_weight):
        return PlateCalculation(
            is_valid=False,
            error_message=f"Invalid target weight: {target_weight}",
        )

    if target_weight < bar_weight:
        return PlateCalculation(
            is_valid=False,
            error_message=(
                f"Weight must be at least {format_number(bar_weight)}{unit} "
                "(barbell weight)"
            ),
        )

    weight_per_side = (target_weight - bar_weight) / 2

    remaining = weight_per_side
    plates = []
    for plate_weight in available_plates:
        if remaining >= plate_weight:
            count = math.floor(remaining / plate_weight)
            plates.append(PlateLoad(weight=plate_weight, count=count))
            remaining -= count * plate_weight

    if remaining > TOLERANCE:
        matched = weight_per_side - remaining
        closest = bar_weight + matched * 2
        return PlateCalculation(
            is_valid=False,
            plates=plates,
            total_per_side=matched,
            error_message=(
                f"Cannot load exactly {format_number(target_weight)}{unit}. "
                f"Closest: {format_number(round(closest, 2))}{unit}"
            ),
        )

    return PlateCalculation(
        is_valid=True, plates=plates, total_per_side=weight_per_side
    )


def format_plate_calculation(calculation: PlateCalculation, unit: WeightUnit) -> str:
    """Readable description, e.g. "Each side: 1×20kg, 2×5kg, 1×2.5kg"."""
    if not calculation.is_valid:
        return calculation.error_message or "Cannot calculate plates"

    if not calculation.plates:
        return "No plates needed (bar only)"

    plates = ", ".join(
        f"{p.count}×{format_number(p.weight)}{unit}" for p in calculation.plates
    )
    return f"Each side: {plates}"


def format_plate_compact(calculation: PlateCalculation) -> str:
    """Compact form for quick reference, e.g. "2×20 + 1×5 + 1×2.5"."""
    if not calculation.is_valid or not calculation.plates:
        return ""

    return " + ".join(
        f"{p.count}×{format_number(p.weight)}" for p in calculation.plates
    )
