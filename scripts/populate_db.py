#!/usr/bin/env python3
"""Script to populate the database with test routine, session and health data."""

import os
import sys
from datetime import date, datetime, timedelta

from dotenv import load_dotenv

# Add src to path so we can import our modules
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", "src"))

from database import Base, SessionLocal, engine  # noqa: E402
from models import RawHealthSampleDB, RoutineDB, WorkoutSessionDB  # noqa: E402
from routines import progress_routine_day  # noqa: E402
from sessions import build_session_exercises, build_workout_session  # noqa: E402
from storage import RoutineStore, SessionLog, StoredHealthSampleSource  # noqa: E402
from typedefs import Exercise, RawHealthSample, Routine, RoutineDay  # noqa: E402

# Load environment variables
load_dotenv()

# Working weights per exercise for the first session, increased each week
STARTING_WEIGHTS = {
    "Bench Press": 60.0,
    "Overhead Press": 40.0,
    "Barbell Row": 50.0,
    "Pull Up": 0.0,
    "Squat": 80.0,
    "Romanian Deadlift": 70.0,
}


def sample_routine() -> Routine:
    return Routine(
        name="Push Pull Legs",
        progressive_overload_percentage=2.5,
        days=[
            RoutineDay(
                day_number=1,
                name="Day 1 - Push",
                exercises=[
                    Exercise(name="Bench Press", sets=3, rest_time=120),
                    Exercise(name="Overhead Press", sets=3),
                ],
            ),
            RoutineDay(
                day_number=2,
                name="Day 2 - Pull",
                exercises=[
                    Exercise(name="Barbell Row", sets=3),
                    Exercise(name="Pull Up", sets=3, rest_time=60),
                ],
            ),
            RoutineDay(
                day_number=3,
                name="Day 3 - Legs",
                exercises=[
                    Exercise(name="Squat", sets=3, rest_time=180),
                    Exercise(name="Romanian Deadlift", sets=3),
                ],
            ),
        ],
    )


def create_test_sessions():
    """Create a routine and two weeks of completed sessions for it."""
    db = SessionLocal()
    try:
        # Clear existing routines and sessions
        db.query(WorkoutSessionDB).delete()
        db.query(RoutineDB).delete()
        db.commit()
        print("Cleared existing routines and sessions")

        store = RoutineStore(db)
        log = SessionLog(db)
        routine = store.add_routine(sample_routine())
        print(f"Created routine: {routine.name}")

        today = date.today()
        for index in range(6):
            routine = store.get_routine(routine.id)
            day = routine.days[routine.current_day_index]
            week = index // len(routine.days)
            start = datetime.combine(
                today - timedelta(days=14 - index * 2), datetime.min.time()
            ) + timedelta(hours=18)

            exercises = build_session_exercises(routine, day, log.load_all_sessions())
            for exercise in exercises:
                weight = STARTING_WEIGHTS[exercise.name] * (1 + 0.025 * week)
                for s in exercise.sets:
                    s.weight = weight or None
                    s.reps = 8 if weight else 10
                    s.completed = True

            session = build_workout_session(
                routine,
                day,
                exercises,
                start_time=start,
                end_time=start + timedelta(minutes=55 + index),
            )
            log.append_session(session, commit=False)
            progress_routine_day(store, routine.id)
            db.commit()
            print(
                f"  - {session.start_time:%Y-%m-%d}: {session.day_name}, "
                f"{session.total_sets} sets, volume {session.total_volume:.0f}"
            )

        print("\nDatabase populated successfully!")

    except Exception as e:
        print(f"Error populating database: {e}")
        db.rollback()
        sys.exit(1)
    finally:
        db.close()


def create_test_health_samples():
    """Create raw health samples for the last 7 days, leaving one day missing."""
    db = SessionLocal()
    try:
        db.query(RawHealthSampleDB).delete()
        db.commit()

        source = StoredHealthSampleSource(db)
        today = date.today()
        for offset in range(7):
            if offset == 3:
                continue
            day = today - timedelta(days=offset)
            source.put_raw_sample(
                day,
                RawHealthSample(
                    sleep_hours=6.5 + (offset % 3) * 0.5,
                    hrv=55 + offset * 3,
                    resting_heart_rate=62 - offset % 2,
                    calories_burned=2300 + offset * 40,
                    calories_consumed=2200 + offset * 30,
                ),
            )
            print(f"  - Health sample for {day}")

        print("\nHealth samples created successfully!")

    except Exception as e:
        print(f"Error creating health samples: {e}")
        db.rollback()
        sys.exit(1)
    finally:
        db.close()


if __name__ == "__main__":
    import argparse

    parser = argparse.ArgumentParser(description="Populate database with test data")
    parser.add_argument(
        "--sessions",
        action="store_true",
        help="Create a test routine with logged sessions",
    )
    parser.add_argument(
        "--health",
        action="store_true",
        help="Create raw health samples for the last week",
    )
    parser.add_argument(
        "--all",
        action="store_true",
        help="Run all population functions",
    )

    args = parser.parse_args()

    # If no args, default to --all
    if not (args.sessions or args.health or args.all):
        args.all = True

    Base.metadata.create_all(bind=engine)

    if args.all or args.sessions:
        create_test_sessions()

    if args.all or args.health:
        create_test_health_samples()
