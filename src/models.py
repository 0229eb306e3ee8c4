"""SQLAlchemy database models."""

import uuid
from datetime import datetime

from sqlalchemy import JSON, Column, Date, DateTime, Float, Integer, String

from database import Base


def _new_id() -> str:
    return str(uuid.uuid4())


class WorkoutSessionDB(Base):
    """Database model for logged workout sessions.

    Sessions are append-only: rows are inserted when a workout is finished
    and never updated afterwards.
    """

    __tablename__ = "workout_sessions"

    id = Column(String(36), primary_key=True, default=_new_id)
    routine_id = Column(String(36), nullable=False, index=True)
    routine_name = Column(String, nullable=False)
    day_id = Column(String(36), nullable=False)
    day_name = Column(String, nullable=False)
    exercises = Column(JSON, nullable=False)  # List of WorkoutExercise dicts
    start_time = Column(DateTime, nullable=False, index=True)
    end_time = Column(DateTime, nullable=True)
    total_volume = Column(Float, nullable=False, default=0)
    total_sets = Column(Integer, nullable=False, default=0)
    duration = Column(Integer, nullable=False, default=0)  # seconds
    weight_unit = Column(String(3), nullable=False, default="kg")
    notes = Column(String, nullable=True)
    ai_feedback = Column(String, nullable=True)
    created_at = Column(DateTime, nullable=False, default=datetime.now)

    def __repr__(self):
        return f"<WorkoutSessionDB(id={self.id}, start_time={self.start_time})>"


class RoutineDB(Base):
    """Database model for training routines.

    The days and their exercises are stored as a JSON array. Only
    current_day_index changes as workouts are completed.
    """

    __tablename__ = "routines"

    id = Column(String(36), primary_key=True, default=_new_id)
    name = Column(String, nullable=False)
    days = Column(JSON, nullable=False)  # List of RoutineDay dicts
    current_day_index = Column(Integer, nullable=False, default=0)
    progressive_overload_percentage = Column(Float, nullable=False, default=0)
    notes = Column(String, nullable=True)
    created_at = Column(DateTime, nullable=False, default=datetime.now)

    def __repr__(self):
        return f"<RoutineDB(id={self.id}, name={self.name})>"


class HealthMetricsDB(Base):
    """Cached daily health metrics, one row per calendar date."""

    __tablename__ = "health_metrics"

    date = Column(Date, primary_key=True)
    calories_burned = Column(Float, nullable=False, default=0)
    calories_consumed = Column(Float, nullable=False, default=0)
    sleep_hours = Column(Float, nullable=False, default=0)
    sleep_percentage = Column(Integer, nullable=False, default=0)
    hrv = Column(Float, nullable=False)
    resting_heart_rate = Column(Float, nullable=False)
    stress_score = Column(Integer, nullable=False)
    recovery_score = Column(Integer, nullable=False)
    exertion_score = Column(Float, nullable=False, default=0)
    energy_balance = Column(Float, nullable=False, default=0)
    last_calculated = Column(DateTime, nullable=False)

    def __repr__(self):
        return f"<HealthMetricsDB(date={self.date})>"


class RawHealthSampleDB(Base):
    """Raw readings uploaded by the device for one calendar date.

    Every reading is nullable; missing values fall back to defaults when
    metrics are computed.
    """

    __tablename__ = "raw_health_samples"

    date = Column(Date, primary_key=True)
    sleep_hours = Column(Float, nullable=True)
    hrv = Column(Float, nullable=True)  # ms
    resting_heart_rate = Column(Float, nullable=True)  # bpm
    calories_burned = Column(Float, nullable=True)
    calories_consumed = Column(Float, nullable=True)
    updated_at = Column(
        DateTime, nullable=False, default=datetime.now, onupdate=datetime.now
    )

    def __repr__(self):
        return f"<RawHealthSampleDB(date={self.date})>"
