"""Personal record detection against the workout history."""

from typing import Iterable, List, Tuple

from typedefs import PersonalRecord, PRType, WorkoutPR, WorkoutSession

ALL_PR_TYPES: List[PRType] = ["max_weight", "max_reps", "max_volume"]

PR_LABELS = {
    "max_weight": "Heaviest Weight",
    "max_reps": "Most Reps",
    "max_volume": "Best Volume",
}

# Weights closer than this are treated as the same load
WEIGHT_EPSILON = 0.01


def collect_historical_sets(
    exercise_name: str, workouts: Iterable[WorkoutSession]
) -> List[Tuple[float, int]]:
    """Return (weight, reps) of every completed set of an exercise.

    Exercises are matched by case-insensitive name, so the same exercise in
    different routines shares one history.
    """
    name = exercise_name.lower()
    history = []
    for workout in workouts:
        for exercise in workout.exercises:
            if exercise.name.lower() != name:
                continue
            for s in exercise.sets:
                if s.is_eligible:
                    history.append((s.weight, s.reps))
    return history


def check_personal_record(
    exercise_name: str,
    weight: float,
    reps: int,
    all_workouts: Iterable[WorkoutSession],
) -> PersonalRecord:
    """Check whether a set breaks any personal record for the exercise.

    The first set ever logged for an exercise is a record of every type.
    Otherwise each record type is evaluated independently:

    - max_weight: heavier than any previous set
    - max_reps: more reps than any previous set at the same weight, or the
      first set at this weight
    - max_volume: weight × reps higher than any previous set
    """
    history = collect_historical_sets(exercise_name, all_workouts)

    if not history:
        return PersonalRecord(is_pr=True, types=list(ALL_PR_TYPES))

    pr_types: List[PRType] = []

    if weight > max(w for w, _ in history):
        pr_types.append("max_weight")

    reps_at_weight = [r for w, r in history if abs(w - weight) < WEIGHT_EPSILON]
    if not reps_at_weight or reps > max(reps_at_weight):
        pr_types.append("max_reps")

    if weight * reps > max(w * r for w, r in history):
        pr_types.append("max_volume")

    return PersonalRecord(is_pr=bool(pr_types), types=pr_types)


def get_workout_prs(
    session: WorkoutSession, all_workouts: Iterable[WorkoutSession]
) -> List[WorkoutPR]:
    """List every set of a session that set a personal record.

    The session itself is excluded from the history it is compared against.
    """
    history = [w for w in all_workouts if w.id != session.id]

    prs = []
    for exercise in session.exercises:
        for s in exercise.sets:
            if not s.is_eligible:
                continue
            pr = check_personal_record(exercise.name, s.weight, s.reps, history)
            if pr.is_pr:
                prs.append(
                    WorkoutPR(
                        exercise_name=exercise.name,
                        set_number=s.set_number,
                        pr_types=pr.types,
                    )
                )
    return prs


def get_pr_description(pr_types: Iterable[PRType]) -> str:
    """User-facing label, e.g. "Heaviest Weight • Best Volume"."""
    present = set(pr_types)
    return " • ".join(PR_LABELS[t] for t in ALL_PR_TYPES if t in present)
