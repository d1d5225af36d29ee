"""
Pytest fixtures for testing
"""
import uuid

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session
from sqlalchemy.pool import StaticPool

from subscriptions_service.application.clock import FixedClock
from subscriptions_service.domain.month import Month
from subscriptions_service.infrastructure.db.session import Base, get_db
from subscriptions_service.infrastructure.db import models  # noqa: F401
from subscriptions_service.api.deps import get_clock
from subscriptions_service.main import app


AS_OF = Month(2025, 10)


@pytest.fixture
def db_engine():
    """In-memory SQLite engine shared across threads (TestClient runs sync routes in a threadpool)."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def db_session(db_engine) -> Session:
    """Create database session for tests"""
    SessionLocal = sessionmaker(bind=db_engine)
    session = SessionLocal()
    try:
        yield session
    finally:
        session.rollback()
        session.close()


@pytest.fixture
def clock():
    return FixedClock(AS_OF)


@pytest.fixture
def client(db_session, clock):
    """Test client с подменёнными get_db / get_clock"""
    def _override_db():
        yield db_session

    app.dependency_overrides[get_db] = _override_db
    app.dependency_overrides[get_clock] = lambda: clock
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def sample_user_id():
    """Sample user ID for tests"""
    return uuid.UUID("123e4567-e89b-12d3-a456-426614174000")
