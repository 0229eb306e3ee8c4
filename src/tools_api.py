"""REST API endpoints for in-workout tools: plates, units, records and stats."""

import os
from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel, Field
from sqlalchemy.orm import Session

from database import get_db
from personal_records import check_personal_record, get_pr_description
from plates import calculate_plates, format_plate_calculation, format_plate_compact
from stats import ExerciseHistory, get_exercise_history
from storage import SessionLog
from typedefs import PlateLoad, PRType, WeightUnit
from units import convert_weight, round_weight

router = APIRouter(prefix="/api/v1", tags=["tools"])


def get_default_weight_unit() -> WeightUnit:
    unit = os.environ.get("DEFAULT_WEIGHT_UNIT", "kg").lower()
    return "lbs" if unit == "lbs" else "kg"


class PlateResponse(BaseModel):
    target_weight: float
    unit: WeightUnit
    is_valid: bool
    plates: List[PlateLoad]
    total_per_side: float
    error_message: Optional[str] = None
    description: str  # e.g. "Each side: 2×20kg"
    compact: str  # e.g. "2×20"


class ConversionResponse(BaseModel):
    weight: float
    from_unit: WeightUnit
    to_unit: WeightUnit
    converted: float


class PRCheckRequest(BaseModel):
    exercise_name: str
    weight: float = Field(gt=0, allow_inf_nan=False)
    reps: int = Field(gt=0)


class PRCheckResponse(BaseModel):
    is_pr: bool
    types: List[PRType]
    description: str


@router.get("/plates", response_model=PlateResponse)
def get_plates(
    target: float = Query(allow_inf_nan=False),
    unit: Optional[WeightUnit] = None,
) -> PlateResponse:
    """Plates to load on each side of the bar for a target weight.

    An unreachable target is not an error: the response has is_valid false
    and an error_message with the closest loadable weight.
    """
    unit = unit or get_default_weight_unit()
    calculation = calculate_plates(target, unit)
    return PlateResponse(
        target_weight=target,
        unit=unit,
        is_valid=calculation.is_valid,
        plates=calculation.plates,
        total_per_side=calculation.total_per_side,
        error_message=calculation.error_message,
        description=format_plate_calculation(calculation, unit),
        compact=format_plate_compact(calculation),
    )


@router.get("/units/convert", response_model=ConversionResponse)
def convert(
    from_unit: WeightUnit,
    to_unit: WeightUnit,
    weight: float = Query(allow_inf_nan=False),
    rounded: bool = False,
) -> ConversionResponse:
    """Convert a weight between kg and lbs, optionally rounded to a loadable weight."""
    converted = convert_weight(weight, from_unit, to_unit)
    if rounded:
        converted = round_weight(converted, to_unit)
    return ConversionResponse(
        weight=weight, from_unit=from_unit, to_unit=to_unit, converted=converted
    )


@router.post("/personal-records/check", response_model=PRCheckResponse)
def check_pr(request: PRCheckRequest, db: Session = Depends(get_db)) -> PRCheckResponse:
    """Check a set against the whole log as soon as it is completed."""
    pr = check_personal_record(
        request.exercise_name,
        request.weight,
        request.reps,
        SessionLog(db).load_all_sessions(),
    )
    return PRCheckResponse(
        is_pr=pr.is_pr, types=pr.types, description=get_pr_description(pr.types)
    )


@router.get("/exercises/{exercise_name}/history", response_model=ExerciseHistory)
def exercise_history(
    exercise_name: str,
    routine_id: Optional[str] = None,
    db: Session = Depends(get_db),
) -> ExerciseHistory:
    """Per-session progress of an exercise, optionally within one routine."""
    return get_exercise_history(
        exercise_name, SessionLog(db).load_all_sessions(), routine_id=routine_id
    )
