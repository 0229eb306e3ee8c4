"""Routine progression: which training day is suggested next."""

import logging
from typing import Optional, Protocol

from typedefs import Routine

logger = logging.getLogger(__name__)

# Concurrent saves retry the pointer swap this many times before giving up
MAX_PROGRESS_ATTEMPTS = 5


class RoutineNotFoundError(LookupError):
    def __init__(self, routine_id: str):
        super().__init__(f"Routine {routine_id} not found")
        self.routine_id = routine_id


class RoutineProgressConflictError(RuntimeError):
    def __init__(self, routine_id: str):
        super().__init__(
            f"Routine {routine_id} kept changing while advancing its day"
        )
        self.routine_id = routine_id


class RoutineStateStore(Protocol):
    def get_routine(self, routine_id: str) -> Optional[Routine]: ...

    def swap_current_day_index(
        self, routine_id: str, expected: int, index: int
    ) -> bool: ...


def next_day_index(routine: Routine) -> int:
    """Index of the day after the current one, wrapping back to the first day."""
    return (routine.current_day_index + 1) % len(routine.days)


def progress_routine_day(store: RoutineStateStore, routine_id: str) -> int:
    """Advance a routine to its next day after a workout is completed.

    This is the only transition of current_day_index. It is applied on every
    saved workout, whichever day was actually performed. The pointer is moved
    with a compare-and-set, so two saves racing on the same routine each
    advance it once.

    Returns:
        The new current_day_index

    Raises:
        RoutineNotFoundError: If the routine does not exist
        RoutineProgressConflictError: If the pointer was moved by other writers
            on every attempt
    """
    for _ in range(MAX_PROGRESS_ATTEMPTS):
        routine = store.get_routine(routine_id)
        if routine is None:
            raise RoutineNotFoundError(routine_id)

        index = next_day_index(routine)
        if store.swap_current_day_index(
            routine_id, routine.current_day_index, index
        ):
            logger.info(
                "Routine %s progressed from day %d to day %d",
                routine_id,
                routine.current_day_index,
                index,
            )
            return index

        logger.warning(
            "Routine %s day pointer changed concurrently, retrying", routine_id
        )

    raise RoutineProgressConflictError(routine_id)
