"""Weight unit conversion and rounding helpers."""

import math

from typedefs import WeightUnit

KG_TO_LBS = 2.20462
LBS_TO_KG = 0.453592


def round_half_up(value: float, decimals: int = 0) -> float:
    """Round halves upwards (2.5 -> 3, -2.5 -> -2).

    Python's round() rounds halves to even, which makes gauges and plate
    weights jump unexpectedly.
    """
    factor = 10**decimals
    return math.floor(value * factor + 0.5) / factor


def convert_weight(weight: float, from_unit: WeightUnit, to_unit: WeightUnit) -> float:
    if from_unit == to_unit:
        return weight

    if from_unit == "kg" and to_unit == "lbs":
        return weight * KG_TO_LBS
    if from_unit == "lbs" and to_unit == "kg":
        return weight * LBS_TO_KG

    return weight


def round_weight(weight: float, unit: WeightUnit) -> float:
    """Round to the nearest loadable increment: 0.5 kg or 1 lb."""
    if unit == "kg":
        return round_half_up(weight * 2) / 2
    return round_half_up(weight)


def format_weight(weight: float, unit: WeightUnit, decimals: int = 1) -> str:
    return f"{weight:.{decimals}f} {unit}"


def format_number(value: float) -> str:
    """Format a weight without trailing zeros (100.0 -> "100", 2.5 -> "2.5")."""
    return f"{value:g}"
