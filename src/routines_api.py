"""REST API endpoints for routine operations."""

from typing import List, Optional

from anthropic import Anthropic
from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import BaseModel, Field
from sqlalchemy.orm import Session

from ai_utils import AIRequestError, AIResponseParseError
from client import get_anthropic_client
from coach import generate_routine
from database import get_db
from routines import (
    RoutineNotFoundError,
    RoutineProgressConflictError,
    progress_routine_day,
)
from sessions import adjust_weights, build_session_exercises, prefill_previous_weights
from stats import RoutineHistory, get_routine_history
from storage import RoutineStore, SessionLog
from typedefs import Routine, RoutineDay, WeightUnit, WorkoutExercise

router = APIRouter(prefix="/api/v1/routines", tags=["routines"])


class RoutineCreateRequest(BaseModel):
    """Request model for creating a routine. At least one day is required."""

    name: str
    days: List[RoutineDay] = Field(min_length=1)
    progressive_overload_percentage: float = 0
    notes: Optional[str] = None


class RoutineGenerateRequest(BaseModel):
    prompt: str
    days_per_week: int | None = Field(default=None, ge=1, le=7)


class SessionStartResponse(BaseModel):
    """Exercises to log for a new session of a routine day."""

    routine_id: str
    routine_name: str
    day_id: str
    day_name: str
    exercises: List[WorkoutExercise]
    # True when any set has a weight from the previous session, so the
    # client can offer to adjust all weights before starting
    has_previous_weights: bool


def get_routine_or_404(store: RoutineStore, routine_id: str) -> Routine:
    routine = store.get_routine(routine_id)
    if routine is None:
        raise HTTPException(status_code=404, detail="Routine not found")
    return routine


@router.post("", response_model=Routine, status_code=201)
def create_routine(
    request: RoutineCreateRequest, db: Session = Depends(get_db)
) -> Routine:
    """Create a new routine starting at its first day."""
    routine = Routine(
        name=request.name,
        days=request.days,
        progressive_overload_percentage=request.progressive_overload_percentage,
        notes=request.notes,
    )
    return RoutineStore(db).add_routine(routine)


@router.post("/generate", response_model=Routine, status_code=201)
def generate_routine_endpoint(
    request: RoutineGenerateRequest,
    db: Session = Depends(get_db),
    client: Anthropic = Depends(get_anthropic_client),
) -> Routine:
    """Generate a routine with AI from a free-text description and save it.

    Raises:
        422: The AI reply could not be parsed into a routine (try again)
        502: The AI request failed
    """
    try:
        routine = generate_routine(client, request.prompt, request.days_per_week)
    except AIResponseParseError as e:
        raise HTTPException(
            status_code=422,
            detail=f"Could not understand the generated routine, please try again. {e}",
        ) from e
    except AIRequestError as e:
        raise HTTPException(status_code=502, detail=str(e)) from e

    return RoutineStore(db).add_routine(routine)


@router.get("", response_model=List[Routine])
def list_routines(db: Session = Depends(get_db)) -> List[Routine]:
    """List all routines, newest first."""
    return RoutineStore(db).list_routines()


@router.get("/{routine_id}", response_model=Routine)
def get_routine(routine_id: str, db: Session = Depends(get_db)) -> Routine:
    return get_routine_or_404(RoutineStore(db), routine_id)


@router.post("/{routine_id}/progress", response_model=Routine)
def progress_routine(routine_id: str, db: Session = Depends(get_db)) -> Routine:
    """Advance the routine to its next day, wrapping after the last day."""
    store = RoutineStore(db)
    try:
        progress_routine_day(store, routine_id)
    except RoutineNotFoundError as e:
        raise HTTPException(status_code=404, detail="Routine not found") from e
    except RoutineProgressConflictError as e:
        db.rollback()
        raise HTTPException(status_code=409, detail=str(e)) from e
    db.commit()
    return store.get_routine(routine_id)


@router.get("/{routine_id}/days/{day_id}/start", response_model=SessionStartResponse)
def start_routine_day(
    routine_id: str,
    day_id: str,
    adjust_percentage: Optional[float] = Query(
        default=None, ge=-100, le=100, allow_inf_nan=False
    ),
    prefill: bool = False,
    weight_unit: WeightUnit = "kg",
    db: Session = Depends(get_db),
) -> SessionStartResponse:
    """Prepare the exercises for a new session of a routine day.

    Any day can be started; the routine's current day is not changed.

    Args:
        routine_id: Routine to train
        day_id: Day of the routine to perform
        adjust_percentage: Pre-fill weights at the previous weight plus this
            percentage (progressive overload)
        prefill: Pre-fill weights with the previous weights unchanged
        weight_unit: Unit used to round adjusted weights
        db: Database session

    Returns:
        SessionStartResponse with previous weights and reps on every set
    """
    routine = get_routine_or_404(RoutineStore(db), routine_id)
    day = routine.find_day(day_id)
    if day is None:
        raise HTTPException(status_code=404, detail="Routine day not found")

    history = SessionLog(db).sessions_for_routine(routine_id)
    exercises = build_session_exercises(routine, day, history)

    if adjust_percentage is not None:
        exercises = adjust_weights(exercises, adjust_percentage, weight_unit)
    elif prefill:
        exercises = prefill_previous_weights(exercises)

    return SessionStartResponse(
        routine_id=routine.id,
        routine_name=routine.name,
        day_id=day.id,
        day_name=day.name,
        exercises=exercises,
        has_previous_weights=any(
            s.previous_weight is not None for ex in exercises for s in ex.sets
        ),
    )


@router.get("/{routine_id}/history", response_model=RoutineHistory)
def routine_history(routine_id: str, db: Session = Depends(get_db)) -> RoutineHistory:
    """Totals and per-exercise usage over every logged session of a routine."""
    get_routine_or_404(RoutineStore(db), routine_id)
    return get_routine_history(
        routine_id, SessionLog(db).sessions_for_routine(routine_id)
    )
