import datetime
from typing import List, Literal
from uuid import uuid4

from pydantic import BaseModel, Field, model_validator

WeightUnit = Literal["kg", "lbs"]

PRType = Literal["max_weight", "max_reps", "max_volume"]


def new_id() -> str:
    return str(uuid4())


class WorkoutSet(BaseModel):
    """A single performed set within a workout exercise."""

    id: str = Field(default_factory=new_id)
    set_number: int = Field(gt=0)
    weight: float | None = Field(default=None, ge=0, allow_inf_nan=False)
    reps: int | None = None
    completed: bool = False
    # Copied from the last session of the same routine day when the session
    # starts; never changed afterwards
    previous_weight: float | None = Field(default=None, ge=0, allow_inf_nan=False)
    previous_reps: int | None = None

    @property
    def is_eligible(self) -> bool:
        """Whether the set counts towards volume and personal records."""
        return (
            self.completed
            and self.weight is not None
            and self.reps is not None
            and self.weight > 0
            and self.reps > 0
        )


class WorkoutExercise(BaseModel):
    # Exercises are matched across sessions by case-insensitive name
    id: str = Field(default_factory=new_id)
    name: str
    sets: List[WorkoutSet] = []
    rest_time: int | None = None


class WorkoutSession(BaseModel):
    """A finished workout as stored in the session log."""

    id: str = Field(default_factory=new_id)
    routine_id: str
    routine_name: str
    day_id: str
    day_name: str
    exercises: List[WorkoutExercise]
    start_time: datetime.datetime
    end_time: datetime.datetime | None = None
    total_volume: float = 0
    total_sets: int = 0
    duration: int = 0  # seconds
    weight_unit: WeightUnit = "kg"
    notes: str | None = None
    ai_feedback: str | None = None


class Exercise(BaseModel):
    """Exercise prescription within a routine day."""

    id: str = Field(default_factory=new_id)
    name: str
    sets: int = Field(ge=1)
    rest_time: int | None = None  # seconds between sets
    notes: str | None = None


class RoutineDay(BaseModel):
    id: str = Field(default_factory=new_id)
    day_number: int
    name: str  # e.g. "Push Day"
    exercises: List[Exercise] = []


class Routine(BaseModel):
    """A multi-day training template.

    current_day_index points at the day suggested next and cycles through
    the days as workouts are completed.
    """

    id: str = Field(default_factory=new_id)
    name: str
    days: List[RoutineDay] = Field(min_length=1)
    current_day_index: int = 0
    progressive_overload_percentage: float = 0
    created_at: datetime.datetime = Field(default_factory=datetime.datetime.now)
    notes: str | None = None

    @model_validator(mode="after")
    def check_current_day_index(self) -> "Routine":
        if not 0 <= self.current_day_index < len(self.days):
            raise ValueError(
                f"current_day_index {self.current_day_index} is out of range "
                f"for {len(self.days)} days"
            )
        return self

    def find_day(self, day_id: str) -> RoutineDay | None:
        return next((day for day in self.days if day.id == day_id), None)


class RawHealthSample(BaseModel):
    """Raw health readings for one day. Every field may be missing.

    Readings must be finite and non-negative so the scores stay computable.
    """

    sleep_hours: float | None = Field(default=None, ge=0, allow_inf_nan=False)
    hrv: float | None = Field(default=None, ge=0, allow_inf_nan=False)  # ms
    resting_heart_rate: float | None = Field(
        default=None, ge=0, allow_inf_nan=False
    )  # bpm
    calories_burned: float | None = Field(default=None, ge=0, allow_inf_nan=False)
    calories_consumed: float | None = Field(default=None, ge=0, allow_inf_nan=False)


class HealthMetrics(BaseModel):
    date: datetime.date
    calories_burned: float
    calories_consumed: float
    sleep_hours: float
    sleep_percentage: int  # % of the 8 hour target
    hrv: float
    resting_heart_rate: float
    stress_score: int  # 0-100, lower is better
    recovery_score: int  # 0-100, higher is better
    exertion_score: float  # 0-10
    energy_balance: float  # consumed - burned, negative is a deficit
    last_calculated: datetime.datetime


class WeeklyAverages(BaseModel):
    avg_sleep_hours: float
    avg_calories_burned: float
    avg_stress: float
    avg_recovery: float


class DailyHealthSummary(BaseModel):
    metrics: HealthMetrics
    weekly_averages: WeeklyAverages
    last_7_days: List[HealthMetrics]
    workout_volume: float | None = None


class PlateLoad(BaseModel):
    weight: float
    count: int


class PlateCalculation(BaseModel):
    """Plates needed for ONE side of the barbell."""

    is_valid: bool
    plates: List[PlateLoad] = []
    total_per_side: float = 0
    error_message: str | None = None


class PersonalRecord(BaseModel):
    is_pr: bool
    types: List[PRType] = []


class WorkoutPR(BaseModel):
    exercise_name: str
    set_number: int
    pr_types: List[PRType]


class AIGeneratedExercise(BaseModel):
    name: str
    sets: int = Field(ge=1)
    rest_time: int | None = None


class AIGeneratedDay(BaseModel):
    day_name: str
    exercises: List[AIGeneratedExercise] = Field(min_length=1)


class AIGeneratedRoutine(BaseModel):
    routine_name: str
    days: List[AIGeneratedDay] = Field(min_length=1)
