"""Pytest fixtures for testing"""

import pytest
from datetime import date, datetime, timedelta
from typing import Generator
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session
from allowance_ledger.api.main import create_app
from allowance_ledger.domain.models import AccountState
from allowance_ledger.infrastructure.database.models import Base
from allowance_ledger.infrastructure.database.session import get_db
from allowance_ledger.utils.clock import ScheduleThrottle


# Test database
TEST_DATABASE_URL = "sqlite:///./test.db"
engine = create_engine(TEST_DATABASE_URL, connect_args={"check_same_thread": False})
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

# Monday; two allowance Saturdays and two interest Sundays after 2024-01-01
TODAY = date(2024, 1, 15)


class FixedClock:
    """Clock pinned to a settable instant"""

    def __init__(self, current: datetime):
        self.current = current

    def now(self) -> datetime:
        return self.current

    def today(self) -> date:
        return self.current.date()

    def advance(self, **kwargs) -> None:
        self.current += timedelta(**kwargs)


@pytest.fixture
def clock() -> FixedClock:
    return FixedClock(datetime(TODAY.year, TODAY.month, TODAY.day, 9, 30))


@pytest.fixture
def base_state() -> AccountState:
    """Default account starting 2024-01-01: $5 allowance, 1% weekly interest"""
    return AccountState.default(start_date=date(2024, 1, 1))


@pytest.fixture
def db() -> Generator[Session, None, None]:
    """Create test database and session"""
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def app(db: Session, clock: FixedClock):
    """FastAPI app wired to the test database and a fixed clock"""
    app = create_app()

    def override_get_db():
        try:
            yield db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    app.state.clock = clock
    app.state.schedule_throttle = ScheduleThrottle(0, clock)
    return app


@pytest.fixture
def client(app) -> TestClient:
    """Create FastAPI test client with test database"""
    return TestClient(app)
