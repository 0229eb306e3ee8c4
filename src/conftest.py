"""Pytest configuration and shared fixtures."""

import os
from datetime import datetime
from unittest.mock import Mock

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from client import get_anthropic_client
from database import Base, get_db
from main import app
from storage import RoutineStore
from typedefs import (
    Exercise,
    Routine,
    RoutineDay,
    WorkoutExercise,
    WorkoutSession,
    WorkoutSet,
)


def get_test_db_url():
    """Get the test database URL from environment or use in-memory SQLite."""
    return os.environ.get("TEST_DATABASE_URL", "sqlite://")


@pytest.fixture(scope="session")
def test_engine():
    """Create a test database engine that persists for the entire test session."""
    db_url = get_test_db_url()

    if db_url.startswith("sqlite"):
        # One shared connection so every session sees the same in-memory DB
        engine = create_engine(
            db_url,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )
    else:
        engine = create_engine(db_url, echo=False)

    # Create all tables
    Base.metadata.create_all(bind=engine)

    yield engine

    # Teardown: drop all tables and close connections
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def db_session(test_engine):
    """Create a new database session for each test.

    This fixture creates a transaction for each test and rolls it back
    after the test completes, ensuring test isolation.
    """
    connection = test_engine.connect()
    transaction = connection.begin()

    # Create a session bound to the connection
    TestingSessionLocal = sessionmaker(
        autocommit=False,
        autoflush=False,
        bind=connection,
    )
    session = TestingSessionLocal()

    yield session

    # Rollback the transaction and close the connection
    session.close()
    transaction.rollback()
    connection.close()


@pytest.fixture
def client(db_session):
    """Create test client with the database dependency overridden."""

    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db

    test_client = TestClient(app)
    yield test_client

    app.dependency_overrides.clear()


# Domain object builders


def make_set(set_number, weight, reps, completed=True) -> WorkoutSet:
    return WorkoutSet(
        set_number=set_number, weight=weight, reps=reps, completed=completed
    )


def make_session(
    exercises: dict,
    start_time: datetime = datetime(2025, 11, 30, 9, 0, 0),
    session_id: str | None = None,
    routine_id: str = "routine-1",
    day_id: str = "day-1",
    duration: int = 3600,
) -> WorkoutSession:
    """Build a session from {exercise name: [(weight, reps), ...]}.

    Every set is completed; totals are computed from the sets.
    """
    workout_exercises = [
        WorkoutExercise(
            name=name,
            sets=[make_set(i + 1, w, r) for i, (w, r) in enumerate(sets)],
        )
        for name, sets in exercises.items()
    ]
    volume = sum(w * r for sets in exercises.values() for w, r in sets)
    total_sets = sum(len(sets) for sets in exercises.values())

    extra = {"id": session_id} if session_id else {}
    return WorkoutSession(
        routine_id=routine_id,
        routine_name="Push Pull Legs",
        day_id=day_id,
        day_name="Day 1 - Push",
        exercises=workout_exercises,
        start_time=start_time,
        end_time=start_time,
        total_volume=volume,
        total_sets=total_sets,
        duration=duration,
        **extra,
    )


@pytest.fixture
def sample_routine() -> Routine:
    """A three day push/pull/legs routine."""
    return Routine(
        id="routine-1",
        name="Push Pull Legs",
        days=[
            RoutineDay(
                id="day-1",
                day_number=1,
                name="Day 1 - Push",
                exercises=[
                    Exercise(id="ex-bench", name="Bench Press", sets=3, rest_time=120),
                    Exercise(id="ex-ohp", name="Overhead Press", sets=2),
                ],
            ),
            RoutineDay(
                id="day-2",
                day_number=2,
                name="Day 2 - Pull",
                exercises=[Exercise(id="ex-row", name="Barbell Row", sets=3)],
            ),
            RoutineDay(
                id="day-3",
                day_number=3,
                name="Day 3 - Legs",
                exercises=[Exercise(id="ex-squat", name="Squat", sets=3)],
            ),
        ],
    )


@pytest.fixture
def session_factory():
    """Factory building completed workout sessions, see make_session."""
    return make_session


@pytest.fixture
def saved_routine(db_session, sample_routine) -> Routine:
    """The sample routine stored in the test database."""
    return RoutineStore(db_session).add_routine(sample_routine)


def mock_ai_reply(text: str) -> Mock:
    """Anthropic client mock whose messages.create replies with text."""
    mock_client = Mock()
    mock_response = Mock()
    mock_response.content = [Mock(text=text)]
    mock_client.messages.create.return_value = mock_response
    return mock_client


@pytest.fixture
def mock_anthropic_client(client):
    """Override the Anthropic client; set the reply with .messages.create."""
    mock_client = mock_ai_reply("")
    app.dependency_overrides[get_anthropic_client] = lambda: mock_client

    yield mock_client

    app.dependency_overrides.pop(get_anthropic_client, None)


@pytest.fixture
def ai_reply():
    """Factory for Anthropic client mocks, see mock_ai_reply."""
    return mock_ai_reply
