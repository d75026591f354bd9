"""
Database configuration and session management
Handles engine setup, sessions and per-event transactions
"""

import logging
from contextlib import contextmanager
from typing import Generator

import sentry_sdk
from sqlalchemy import create_engine, text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, declarative_base, sessionmaker
from sqlalchemy.orm.exc import StaleDataError

from eduquest.core.config import settings
from eduquest.core.exceptions import ConcurrencyConflictException, DatabaseException

logger = logging.getLogger(__name__)

# Create Base class for models
Base = declarative_base()


def create_db_engine(database_url: str) -> Engine:
    """Create an engine with pool settings appropriate for the backend"""
    if database_url.startswith("sqlite"):
        return create_engine(
            database_url,
            connect_args={"check_same_thread": False},
            echo=settings.DEBUG,
        )

    return create_engine(
        database_url,
        pool_size=settings.DB_POOL_SIZE,
        max_overflow=settings.DB_MAX_OVERFLOW,
        pool_timeout=settings.DB_POOL_TIMEOUT,
        pool_recycle=settings.DB_POOL_RECYCLE,
        pool_pre_ping=True,
        echo=settings.DEBUG,
    )


engine = create_db_engine(settings.get_database_url())

# Create SessionLocal class
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine, expire_on_commit=False)


def init_db() -> None:
    """Initialize database, create tables if they don't exist"""
    try:
        # Import all models here to ensure they're registered
        import eduquest.models  # noqa: F401

        Base.metadata.create_all(bind=engine)
        logger.info("Database tables created successfully")

        with engine.connect() as conn:
            if conn.execute(text("SELECT 1")).scalar() == 1:
                logger.info("Database connection successful")
    except Exception as e:
        logger.error(f"Failed to initialize database: {e}")
        if settings.SENTRY_DSN:
            sentry_sdk.capture_exception(e)
        raise


def get_db() -> Generator[Session, None, None]:
    """
    Dependency to get database session
    Ensures proper cleanup after request
    """
    db = SessionLocal()
    try:
        yield db
    except SQLAlchemyError as e:
        logger.error(f"Database error occurred: {e}")
        db.rollback()
        if settings.SENTRY_DSN:
            sentry_sdk.capture_exception(e)
        raise
    finally:
        db.close()


@contextmanager
def transaction(db: Session, operation: str) -> Generator[Session, None, None]:
    """
    Commit everything done inside the block as one unit of work.

    Storage failures roll the whole unit back and surface as
    DatabaseException; a lost optimistic-lock race surfaces as
    ConcurrencyConflictException.
    """
    try:
        yield db
        db.commit()
    except StaleDataError as e:
        db.rollback()
        logger.warning(f"Concurrent update detected during {operation}: {e}")
        raise ConcurrencyConflictException(details={"operation": operation}) from e
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Database error during {operation}: {e}")
        if settings.SENTRY_DSN:
            sentry_sdk.capture_exception(e)
        raise DatabaseException(details={"operation": operation}) from e
    except Exception:
        db.rollback()
        raise
