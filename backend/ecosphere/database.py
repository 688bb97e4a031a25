"""Database configuration and session management."""
import logging
from pathlib import Path

from sqlalchemy import create_engine
from sqlalchemy.orm import declarative_base, sessionmaker

from ecosphere.config import settings

logger = logging.getLogger(__name__)

# Create SQLAlchemy engine
engine = create_engine(
    settings.DATABASE_URL,
    connect_args={"check_same_thread": False} if "sqlite" in settings.DATABASE_URL else {}
)

# Create SessionLocal class for database sessions
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

# Create Base class for models
Base = declarative_base()


def get_db():
    """
    Generator yielding a database session.

    Yields:
        Database session that will be closed after use.
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def init_db(bind=None):
    """
    Initialize database by creating all tables.

    Args:
        bind: Engine to create tables on (defaults to the configured engine)
    """
    # Import models so SQLAlchemy knows about them
    from ecosphere.models import Activity, Badge, Challenge, StatisticsRecord  # noqa: F401

    bind = bind or engine

    # Ensure the database directory exists for file-backed SQLite
    url = str(bind.url)
    if url.startswith("sqlite:///") and url != "sqlite:///:memory:":
        Path(url.replace("sqlite:///", "")).parent.mkdir(parents=True, exist_ok=True)

    Base.metadata.create_all(bind=bind)
    logger.info("✓ Database initialized (%s)", bind.url)
