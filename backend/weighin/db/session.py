"""
Database Session Management
Creates and manages SQLAlchemy database engine and session factory.

One session is opened per request through the get_db dependency; services
receive it as their first argument and control commits themselves.
"""

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session
from typing import Generator

from weighin.core.config import settings


def _engine_kwargs(database_url: str) -> dict:
    """Connection options for the configured backend."""
    if database_url.startswith("sqlite"):
        # Local development / tests: allow use across FastAPI's threadpool
        return {"connect_args": {"check_same_thread": False}}
    return {
        "pool_pre_ping": True,  # Check connection health before using
        "pool_recycle": 3600,  # Recycle connections every hour
    }


# Create SQLAlchemy engine
# echo=settings.DEBUG logs every SQL statement in debug mode
engine = create_engine(
    settings.DATABASE_URL,
    echo=settings.DEBUG,
    **_engine_kwargs(settings.DATABASE_URL)
)

# Session factory
# - autocommit=False: Require explicit commit() calls
# - autoflush=False: Require explicit flush() calls
SessionLocal = sessionmaker(
    autocommit=False,
    autoflush=False,
    bind=engine
)


def get_db() -> Generator[Session, None, None]:
    """
    Dependency function that provides database sessions to FastAPI endpoints.

    Yields:
        Database session object

    Usage in FastAPI endpoint:
        @router.get("/groups")
        def list_groups(db: Session = Depends(get_db)):
            ...

    The session is closed after the endpoint returns, even on error.
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
