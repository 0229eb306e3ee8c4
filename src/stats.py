"""Exercise and routine history views."""

import datetime
from typing import Dict, List, Optional, Sequence

from pydantic import BaseModel

from typedefs import WorkoutSession
from units import round_half_up


class ExerciseDataPoint(BaseModel):
    date: datetime.datetime
    max_weight: float
    total_volume: float
    total_sets: int
    total_reps: int


class ExerciseHistory(BaseModel):
    exercise_name: str
    data: List[ExerciseDataPoint]
    total_workouts: int
    total_volume: float
    max_weight: float
    total_sets: int


class ExerciseUsage(BaseModel):
    name: str
    count: int
    last_volume: float


class RoutineHistory(BaseModel):
    routine_id: str
    workouts: List[WorkoutSession]
    total_workouts: int
    total_volume: float
    total_sets: int
    avg_duration: int  # seconds
    exercises: List[ExerciseUsage]


def get_exercise_history(
    exercise_name: str,
    sessions: Sequence[WorkoutSession],
    routine_id: Optional[str] = None,
) -> ExerciseHistory:
    """Per-session progress of one exercise, oldest first.

    Args:
        exercise_name: Exercise to summarize, matched case-insensitively
        sessions: Workout session log
        routine_id: Only include sessions of this routine (default: all)

    Returns:
        ExerciseHistory with one data point per session that has at least
        one completed set of the exercise
    """
    name = exercise_name.lower()
    if routine_id is not None:
        sessions = [s for s in sessions if s.routine_id == routine_id]

    data = []
    for session in sessions:
        exercise = next((e for e in session.exercises if e.name.lower() == name), None)
        if exercise is None:
            continue

        completed = [s for s in exercise.sets if s.completed]
        if not completed:
            continue

        data.append(
            ExerciseDataPoint(
                date=session.start_time,
                max_weight=max(s.weight or 0 for s in completed),
                total_volume=sum((s.weight or 0) * (s.reps or 0) for s in completed),
                total_sets=len(completed),
                total_reps=sum(s.reps or 0 for s in completed),
            )
        )

    data.sort(key=lambda point: point.date)

    return ExerciseHistory(
        exercise_name=exercise_name,
        data=data,
        total_workouts=len(data),
        total_volume=sum(point.total_volume for point in data),
        max_weight=max((point.max_weight for point in data), default=0),
        total_sets=sum(point.total_sets for point in data),
    )


def get_routine_history(
    routine_id: str, sessions: Sequence[WorkoutSession]
) -> RoutineHistory:
    """Totals over every logged session of a routine, newest session first."""
    workouts = sorted(
        (s for s in sessions if s.routine_id == routine_id),
        key=lambda s: s.start_time,
        reverse=True,
    )

    avg_duration = 0
    if workouts:
        total_duration = sum(w.duration for w in workouts)
        avg_duration = int(round_half_up(total_duration / len(workouts)))

    # Iterate oldest first so last_volume ends up as the newest occurrence
    usage: Dict[str, ExerciseUsage] = {}
    for workout in reversed(workouts):
        for exercise in workout.exercises:
            entry = usage.setdefault(
                exercise.name, ExerciseUsage(name=exercise.name, count=0, last_volume=0)
            )
            entry.count += 1
            entry.last_volume = sum(
                (s.weight or 0) * (s.reps or 0) for s in exercise.sets
            )

    return RoutineHistory(
        routine_id=routine_id,
        workouts=workouts,
        total_workouts=len(workouts),
        total_volume=sum(w.total_volume for w in workouts),
        total_sets=sum(w.total_sets for w in workouts),
        avg_duration=avg_duration,
        exercises=sorted(usage.values(), key=lambda e: e.count, reverse=True),
    )
