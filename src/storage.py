"""Repositories over the database.

Each repository wraps a SQLAlchemy session and converts between database
rows and the Pydantic models the calculation modules work with.
"""

import datetime
import logging
from typing import List, Optional

from sqlalchemy import update
from sqlalchemy.orm import Session

from models import HealthMetricsDB, RawHealthSampleDB, RoutineDB, WorkoutSessionDB
from typedefs import HealthMetrics, RawHealthSample, Routine, WorkoutSession

logger = logging.getLogger(__name__)


def session_from_db(row: WorkoutSessionDB) -> WorkoutSession:
    return WorkoutSession(
        id=row.id,
        routine_id=row.routine_id,
        routine_name=row.routine_name,
        day_id=row.day_id,
        day_name=row.day_name,
        exercises=row.exercises,
        start_time=row.start_time,
        end_time=row.end_time,
        total_volume=row.total_volume,
        total_sets=row.total_sets,
        duration=row.duration,
        weight_unit=row.weight_unit,
        notes=row.notes,
        ai_feedback=row.ai_feedback,
    )


def routine_from_db(row: RoutineDB) -> Routine:
    return Routine(
        id=row.id,
        name=row.name,
        days=row.days,
        current_day_index=row.current_day_index,
        progressive_overload_percentage=row.progressive_overload_percentage,
        created_at=row.created_at,
        notes=row.notes,
    )


class SessionLog:
    """Append-only log of finished workout sessions."""

    def __init__(self, db: Session):
        self.db = db

    def load_all_sessions(self) -> List[WorkoutSession]:
        rows = (
            self.db.query(WorkoutSessionDB).order_by(WorkoutSessionDB.start_time).all()
        )
        return [session_from_db(row) for row in rows]

    def get_session(self, session_id: str) -> Optional[WorkoutSession]:
        row = self.db.get(WorkoutSessionDB, session_id)
        return session_from_db(row) if row else None

    def sessions_for_routine(self, routine_id: str) -> List[WorkoutSession]:
        rows = (
            self.db.query(WorkoutSessionDB)
            .filter(WorkoutSessionDB.routine_id == routine_id)
            .order_by(WorkoutSessionDB.start_time)
            .all()
        )
        return [session_from_db(row) for row in rows]

    def append_session(self, session: WorkoutSession, commit: bool = True) -> None:
        """Add a session to the log.

        With commit=False the row is only flushed, so the caller can commit it
        together with other changes.
        """
        # Convert exercises to dicts for JSON storage
        data = session.model_dump(mode="json", include={"exercises"})
        row = WorkoutSessionDB(
            id=session.id,
            routine_id=session.routine_id,
            routine_name=session.routine_name,
            day_id=session.day_id,
            day_name=session.day_name,
            exercises=data["exercises"],
            start_time=session.start_time,
            end_time=session.end_time,
            total_volume=session.total_volume,
            total_sets=session.total_sets,
            duration=session.duration,
            weight_unit=session.weight_unit,
            notes=session.notes,
            ai_feedback=session.ai_feedback,
        )
        self.db.add(row)
        if commit:
            self.db.commit()
        else:
            self.db.flush()
        logger.info(
            "Saved workout session %s (%d sets, volume %.1f)",
            session.id,
            session.total_sets,
            session.total_volume,
        )


class RoutineStore:
    def __init__(self, db: Session):
        self.db = db

    def get_routine(self, routine_id: str) -> Optional[Routine]:
        # Reload so a pointer moved by another session is not read stale
        row = self.db.get(RoutineDB, routine_id, populate_existing=True)
        return routine_from_db(row) if row else None

    def list_routines(self) -> List[Routine]:
        """All routines, most recently created first."""
        rows = self.db.query(RoutineDB).order_by(RoutineDB.created_at.desc()).all()
        return [routine_from_db(row) for row in rows]

    def add_routine(self, routine: Routine) -> Routine:
        data = routine.model_dump(mode="json", include={"days"})
        row = RoutineDB(
            id=routine.id,
            name=routine.name,
            days=data["days"],
            current_day_index=routine.current_day_index,
            progressive_overload_percentage=routine.progressive_overload_percentage,
            notes=routine.notes,
            created_at=routine.created_at,
        )
        self.db.add(row)
        self.db.commit()
        self.db.refresh(row)
        logger.info("Created routine %s with %d days", routine.id, len(routine.days))
        return routine_from_db(row)

    def swap_current_day_index(
        self, routine_id: str, expected: int, index: int
    ) -> bool:
        """Move the day pointer only if it still points at expected.

        The change is left uncommitted in the current transaction. Returns
        False when the routine is missing or its pointer was moved by someone
        else.
        """
        result = self.db.execute(
            update(RoutineDB)
            .where(
                RoutineDB.id == routine_id,
                RoutineDB.current_day_index == expected,
            )
            .values(current_day_index=index)
        )
        return result.rowcount == 1


class HealthMetricsCache:
    """Per-date cache of computed health metrics."""

    def __init__(self, db: Session):
        self.db = db

    def get_metrics(self, day: datetime.date) -> Optional[HealthMetrics]:
        row = self.db.get(HealthMetricsDB, day)
        if row is None:
            return None
        return HealthMetrics.model_validate(row, from_attributes=True)

    def put_metrics(self, day: datetime.date, metrics: HealthMetrics) -> None:
        values = metrics.model_dump()
        values["date"] = day
        self.db.merge(HealthMetricsDB(**values))
        self.db.commit()

    def get_range(
        self, start: datetime.date, end: datetime.date
    ) -> List[HealthMetrics]:
        """Cached metrics between two dates (inclusive), oldest first."""
        rows = (
            self.db.query(HealthMetricsDB)
            .filter(HealthMetricsDB.date >= start, HealthMetricsDB.date <= end)
            .order_by(HealthMetricsDB.date)
            .all()
        )
        return [HealthMetrics.model_validate(row, from_attributes=True) for row in rows]


class StoredHealthSampleSource:
    """Raw health samples uploaded by the device, one per date."""

    def __init__(self, db: Session):
        self.db = db

    def fetch_raw_sample(self, day: datetime.date) -> RawHealthSample:
        row = self.db.get(RawHealthSampleDB, day)
        if row is None:
            logger.debug("No raw health sample for %s, using defaults", day)
            return RawHealthSample()
        return RawHealthSample.model_validate(row, from_attributes=True)

    def put_raw_sample(self, day: datetime.date, sample: RawHealthSample) -> None:
        self.db.merge(RawHealthSampleDB(date=day, **sample.model_dump()))
        self.db.commit()
