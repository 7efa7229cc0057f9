"""
Pytest configuration and fixtures.
"""

from __future__ import annotations

import os
from datetime import UTC, datetime

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import Session

from tests.test_constants import EGGS_SERIES_ID, TEST_INTERNAL_JOB_TOKEN

# Force an in-memory database and offline backends; don't inherit from .env
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["FEED_USE_STATIC"] = "1"
os.environ["EMAIL_BACKEND"] = "log"
os.environ["NOTIFICATION_REPEAT_POLICY"] = "once_per_period"
os.environ.setdefault("INTERNAL_JOB_TOKEN", TEST_INTERNAL_JOB_TOKEN)


@pytest.fixture
def client() -> TestClient:
    """FastAPI test client."""
    from econwatch.main import app

    return TestClient(app)


@pytest.fixture
def db() -> Session:
    """Session on a fresh in-memory database with all tables created."""
    import econwatch.models  # noqa: F401
    from econwatch.db.session import Base, build_engine

    engine = build_engine("sqlite://")
    Base.metadata.create_all(engine)
    session = Session(bind=engine, expire_on_commit=False)
    try:
        yield session
    finally:
        session.close()
        engine.dispose()


@pytest.fixture
def owner(db: Session):
    """Threshold owner."""
    from econwatch.models import User

    user = User(email="owner@example.com", first_name="Olive", last_name="Owner")
    db.add(user)
    db.commit()
    return user


@pytest.fixture
def eggs_data(db: Session):
    """Eggs series already reconciled at 3.25 -> 3.90 (+20%)."""
    from econwatch.models import Data

    data = Data(
        name="Eggs",
        series_id=EGGS_SERIES_ID,
        unit="per dozen",
        previous_value=3.25,
        latest_value=3.90,
        year="2025",
        period="M01",
        last_updated=datetime.now(UTC),
    )
    db.add(data)
    db.commit()
    return data
