"""REST API endpoints for the workout session log."""

import datetime
from typing import List, Optional

from anthropic import Anthropic
from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import BaseModel, field_validator
from sqlalchemy.orm import Session

from ai_utils import AIRequestError
from client import get_anthropic_client
from coach import generate_workout_feedback
from database import get_db
from personal_records import get_workout_prs
from routines import (
    RoutineNotFoundError,
    RoutineProgressConflictError,
    progress_routine_day,
)
from sessions import build_workout_session
from storage import RoutineStore, SessionLog
from typedefs import WeightUnit, WorkoutExercise, WorkoutPR, WorkoutSession

router = APIRouter(prefix="/api/v1/sessions", tags=["sessions"])


class SessionCreateRequest(BaseModel):
    """Request model for saving a finished workout.

    Volume and set totals are computed from the exercises.
    """

    routine_id: str
    day_id: str
    exercises: List[WorkoutExercise]
    start_time: datetime.datetime
    end_time: Optional[datetime.datetime] = None
    duration: Optional[int] = None  # seconds, defaults to end - start
    weight_unit: WeightUnit = "kg"
    notes: Optional[str] = None
    ai_feedback: Optional[str] = None

    @field_validator("start_time", "end_time")
    @classmethod
    def to_naive_utc(cls, value: Optional[datetime.datetime]):
        # Offset-aware times are stored as naive UTC
        if value is not None and value.tzinfo is not None:
            value = value.astimezone(datetime.timezone.utc).replace(tzinfo=None)
        return value


class SessionSaveResponse(BaseModel):
    session: WorkoutSession
    prs: List[WorkoutPR]
    current_day_index: int  # The routine's next suggested day


class FeedbackResponse(BaseModel):
    feedback: str
    prs: List[WorkoutPR]


def build_session_from_request(
    db: Session, request: SessionCreateRequest
) -> WorkoutSession:
    routine = RoutineStore(db).get_routine(request.routine_id)
    if routine is None:
        raise HTTPException(status_code=404, detail="Routine not found")

    day = routine.find_day(request.day_id)
    if day is None:
        raise HTTPException(status_code=404, detail="Routine day not found")

    return build_workout_session(
        routine,
        day,
        request.exercises,
        start_time=request.start_time,
        end_time=request.end_time,
        duration=request.duration,
        weight_unit=request.weight_unit,
        notes=request.notes,
        ai_feedback=request.ai_feedback,
    )


@router.post("", response_model=SessionSaveResponse, status_code=201)
def save_session(
    request: SessionCreateRequest, db: Session = Depends(get_db)
) -> SessionSaveResponse:
    """Save a finished workout and move its routine on to the next day.

    Personal records are detected against the log before the session is
    appended. The routine always advances one day, even when a different
    day than the suggested one was performed. The session and the new day
    pointer are committed together.
    """
    session = build_session_from_request(db, request)

    log = SessionLog(db)
    prs = get_workout_prs(session, log.load_all_sessions())
    log.append_session(session, commit=False)

    try:
        current_day_index = progress_routine_day(
            RoutineStore(db), session.routine_id
        )
    except RoutineNotFoundError as e:
        db.rollback()
        raise HTTPException(status_code=404, detail="Routine not found") from e
    except RoutineProgressConflictError as e:
        db.rollback()
        raise HTTPException(status_code=409, detail=str(e)) from e
    db.commit()

    return SessionSaveResponse(
        session=session, prs=prs, current_day_index=current_day_index
    )


@router.post("/feedback", response_model=FeedbackResponse)
def session_feedback(
    request: SessionCreateRequest,
    db: Session = Depends(get_db),
    client: Anthropic = Depends(get_anthropic_client),
) -> FeedbackResponse:
    """Generate AI coaching feedback for a workout that has not been saved yet.

    The returned text can be sent back as ai_feedback when saving.
    """
    session = build_session_from_request(db, request)
    prs = get_workout_prs(session, SessionLog(db).load_all_sessions())

    try:
        feedback = generate_workout_feedback(client, session, prs)
    except AIRequestError as e:
        raise HTTPException(status_code=502, detail=str(e)) from e

    return FeedbackResponse(feedback=feedback, prs=prs)


@router.get("", response_model=List[WorkoutSession])
def list_sessions(
    skip: int = Query(default=0, ge=0),
    limit: int = Query(default=100, ge=1),
    routine_id: str | None = None,
    db: Session = Depends(get_db),
) -> List[WorkoutSession]:
    """List logged sessions, newest first, optionally for one routine."""
    log = SessionLog(db)
    if routine_id is not None:
        sessions = log.sessions_for_routine(routine_id)
    else:
        sessions = log.load_all_sessions()

    sessions.sort(key=lambda s: s.start_time, reverse=True)
    return sessions[skip : skip + limit]


@router.get("/{session_id}", response_model=WorkoutSession)
def get_session(session_id: str, db: Session = Depends(get_db)) -> WorkoutSession:
    session = SessionLog(db).get_session(session_id)
    if session is None:
        raise HTTPException(status_code=404, detail="Session not found")
    return session


@router.get("/{session_id}/prs", response_model=List[WorkoutPR])
def get_session_prs(session_id: str, db: Session = Depends(get_db)) -> List[WorkoutPR]:
    """Personal records set in a logged session, compared with every other session."""
    log = SessionLog(db)
    session = log.get_session(session_id)
    if session is None:
        raise HTTPException(status_code=404, detail="Session not found")
    return get_workout_prs(session, log.load_all_sessions())
