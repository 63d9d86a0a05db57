"""Pytest fixtures and configuration for dejihai tests."""

import pytest
from datetime import date, datetime
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session
from sqlalchemy.pool import StaticPool
from fastapi.testclient import TestClient
import uuid

from dejihai.database.database import Base, get_db
from dejihai.database.task_repository import TaskRepository
from dejihai.models.task import Task, TaskStatus


# Use in-memory SQLite database for tests
TEST_DATABASE_URL = "sqlite:///:memory:"

TEST_DAY = date(2025, 1, 15)


@pytest.fixture(scope="function")
def db_session():
    """Create a database session for testing.

    Uses an in-memory SQLite database that is created fresh for each test.
    Also creates two locations and one ship with blocks.
    """
    from dejihai.database.models import LocationDB, ShipDB, BlockDB

    # Create engine with StaticPool for in-memory database
    engine = create_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
        echo=False
    )

    # Create all tables
    Base.metadata.create_all(bind=engine)

    # Create session
    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    session = TestingSessionLocal()

    # Master data (required for foreign key constraints)
    session.add_all([
        LocationDB(id="loc-1", code="1A1", name="1A1 定盤", display_order=1),
        LocationDB(id="loc-2", code="1A2", name="1A2 定盤", display_order=2),
        ShipDB(id="ship-1", ship_number="S6313", name="工事番号 S6313", created_at=datetime.utcnow()),
    ])
    session.flush()
    session.add_all([
        BlockDB(ship_id="ship-1", section="E/R", large_block="E11", medium_block="E11P"),
        BlockDB(ship_id="ship-1", section="E/R", large_block="E11", medium_block="E11S"),
        BlockDB(ship_id="ship-1", section="CARGO", large_block="C21", medium_block="C21C"),
    ])
    session.commit()

    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def task_repository(db_session: Session):
    """Create a TaskRepository instance for testing."""
    return TaskRepository(db_session)


@pytest.fixture
def test_day():
    """Day under test."""
    return TEST_DAY


@pytest.fixture
def sample_task_base():
    """Base task data for creating test tasks.

    Returns a dict with default task attributes that can be overridden.
    """
    now = datetime.utcnow()
    return {
        "id": str(uuid.uuid4()),
        "ship_id": None,
        "block_info": None,
        "free_form_title": "Test Delivery",
        "location_id": "loc-1",
        "requested_date": TEST_DAY,
        "requested_time": "08:00",
        "scheduled_date": None,
        "scheduled_start_time": None,
        "scheduled_end_time": None,
        "duration": None,
        "status": TaskStatus.PENDING,
        "special_status": None,
        "notes": None,
        "person_in_charge": None,
        "created_by": None,
        "created_at": now,
        "updated_at": now,
    }


@pytest.fixture
def sample_task(sample_task_base):
    """Create a sample Task object for testing."""
    return Task(**sample_task_base)


@pytest.fixture
def make_task(sample_task_base):
    """Factory for tasks at a start time with a duration."""
    def _make(task_id: str, start: str, duration=None, **overrides):
        return Task(**{
            **sample_task_base,
            "id": task_id,
            "requested_time": start,
            "duration": duration,
            **overrides,
        })
    return _make


@pytest.fixture
def test_client(db_session: Session):
    """Create a FastAPI test client with overridden database dependency."""
    from dejihai.api.app import app

    # Override the get_db dependency to use our test database session
    def override_get_db():
        try:
            yield db_session
        finally:
            pass  # Don't close the session here, let the fixture handle it

    app.dependency_overrides[get_db] = override_get_db

    with TestClient(app) as client:
        yield client

    # Clean up dependency overrides
    app.dependency_overrides.clear()
