"""Shared pytest fixtures."""
from datetime import datetime

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from ecosphere.database import init_db
from ecosphere.services.store import CarbonStore


@pytest.fixture
def now():
    """Fixed reference time: 15 March 2024, 14:30 local."""
    return datetime(2024, 3, 15, 14, 30)


@pytest.fixture
def db():
    """In-memory SQLite session with all tables created."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    init_db(engine)
    session = sessionmaker(autocommit=False, autoflush=False, bind=engine)()
    try:
        yield session
    finally:
        session.close()
        engine.dispose()


@pytest.fixture
def store(db):
    return CarbonStore(db)
