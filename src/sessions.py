"""Helpers for running and recording a workout session."""

import datetime
from typing import List, Optional, Sequence, Tuple

from typedefs import (
    Routine,
    RoutineDay,
    WeightUnit,
    WorkoutExercise,
    WorkoutSession,
    WorkoutSet,
)
from units import round_weight

DEFAULT_REST_SECONDS = 90


def compute_session_totals(exercises: Sequence[WorkoutExercise]) -> Tuple[float, int]:
    """Return (total volume, completed set count) over eligible sets."""
    volume = 0.0
    completed_sets = 0
    for exercise in exercises:
        for s in exercise.sets:
            if s.is_eligible:
                volume += s.weight * s.reps
                completed_sets += 1
    return volume, completed_sets


def latest_session_for_day(
    sessions: Sequence[WorkoutSession], routine_id: str, day_id: str
) -> Optional[WorkoutSession]:
    matching = [
        s for s in sessions if s.routine_id == routine_id and s.day_id == day_id
    ]
    if not matching:
        return None
    return max(matching, key=lambda s: s.start_time)


def build_session_exercises(
    routine: Routine, day: RoutineDay, sessions: Sequence[WorkoutSession]
) -> List[WorkoutExercise]:
    """Create the empty exercises and sets for a new session of a routine day.

    Each set carries the weight and reps of the same set in the most recent
    session of this routine day, for reference while logging.
    """
    last_session = latest_session_for_day(sessions, routine.id, day.id)

    exercises = []
    for exercise in day.exercises:
        previous = None
        if last_session is not None:
            previous = next(
                (
                    e
                    for e in last_session.exercises
                    if e.name.lower() == exercise.name.lower()
                ),
                None,
            )

        sets = []
        for index in range(exercise.sets):
            previous_weight = previous_reps = None
            if previous is not None and index < len(previous.sets):
                # Zero means nothing was logged
                previous_weight = previous.sets[index].weight or None
                previous_reps = previous.sets[index].reps or None
            sets.append(
                WorkoutSet(
                    id=f"{exercise.id}-set-{index + 1}",
                    set_number=index + 1,
                    previous_weight=previous_weight,
                    previous_reps=previous_reps,
                )
            )

        exercises.append(
            WorkoutExercise(
                id=exercise.id,
                name=exercise.name,
                sets=sets,
                rest_time=exercise.rest_time or DEFAULT_REST_SECONDS,
            )
        )
    return exercises


def prefill_previous_weights(
    exercises: Sequence[WorkoutExercise],
) -> List[WorkoutExercise]:
    """Start every set at the weight used last time."""
    return [
        exercise.model_copy(
            update={
                "sets": [
                    s.model_copy(update={"weight": s.previous_weight})
                    if s.previous_weight is not None
                    else s
                    for s in exercise.sets
                ]
            }
        )
        for exercise in exercises
    ]


def adjust_weights(
    exercises: Sequence[WorkoutExercise], percentage: float, unit: WeightUnit = "kg"
) -> List[WorkoutExercise]:
    """Apply progressive overload: previous weight plus a percentage.

    Adjusted weights are rounded to a loadable increment. Sets without a
    previous weight are left untouched.
    """
    factor = 1 + percentage / 100
    return [
        exercise.model_copy(
            update={
                "sets": [
                    s.model_copy(
                        update={
                            "weight": round_weight(s.previous_weight * factor, unit)
                        }
                    )
                    if s.previous_weight is not None
                    else s
                    for s in exercise.sets
                ]
            }
        )
        for exercise in exercises
    ]


def build_workout_session(
    routine: Routine,
    day: RoutineDay,
    exercises: Sequence[WorkoutExercise],
    start_time: datetime.datetime,
    end_time: datetime.datetime | None = None,
    duration: int | None = None,
    weight_unit: WeightUnit = "kg",
    notes: str | None = None,
    ai_feedback: str | None = None,
) -> WorkoutSession:
    """Build the session record for a finished workout.

    Totals are always derived from the exercises. When no duration is given
    it is taken from the start and end times.
    """
    if end_time is None:
        end_time = datetime.datetime.now(start_time.tzinfo)
    if duration is None:
        duration = max(0, int((end_time - start_time).total_seconds()))

    total_volume, total_sets = compute_session_totals(exercises)

    return WorkoutSession(
        routine_id=routine.id,
        routine_name=routine.name,
        day_id=day.id,
        day_name=day.name,
        exercises=list(exercises),
        start_time=start_time,
        end_time=end_time,
        total_volume=total_volume,
        total_sets=total_sets,
        duration=duration,
        weight_unit=weight_unit,
        notes=(notes or "").strip() or None,
        ai_feedback=(ai_feedback or "").strip() or None,
    )
