"""Database connection and session management."""
import time
from sqlalchemy import create_engine, text
from sqlalchemy.orm import declarative_base, sessionmaker
from sqlalchemy.exc import OperationalError, SQLAlchemyError
from src.utils.errors import InternalError
from src.config import settings


def build_engine(database_url: str):
    """Create an engine, leaving pool sizing out for SQLite."""
    if database_url.startswith("sqlite"):
        return create_engine(
            database_url,
            connect_args={"check_same_thread": False},
            echo=False
        )
    return create_engine(
        database_url,
        pool_pre_ping=True,
        pool_size=10,
        max_overflow=20,
        echo=False  # Set to True for SQL query logging
    )


# Create database engine
engine = build_engine(settings.database_url)

# Create session factory
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

# Base class for models
Base = declarative_base()

# Retry configuration
MAX_RETRIES = 3
RETRY_DELAY_SECONDS = 1


def get_db_session():
    """
    Get a database session with retry logic.
    Retries up to 3 times on connection failure.
    """
    last_error = None

    for attempt in range(MAX_RETRIES):
        try:
            db = SessionLocal()
            db.execute(text("SELECT 1"))
            return db
        except OperationalError as e:
            last_error = e
            if attempt < MAX_RETRIES - 1:
                print(f"[DB] Connection attempt {attempt + 1} failed, retrying in {RETRY_DELAY_SECONDS}s...")
                time.sleep(RETRY_DELAY_SECONDS)
            else:
                print(f"[DB] All {MAX_RETRIES} connection attempts failed")

    raise last_error


def commit_or_rollback(db, action: str):
    """
    Commit the session, rolling back and re-raising as an internal error on failure.

    Args:
        db: Active session
        action: Short description used in the log line and error message
    """
    try:
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        print(f"[DB] Failed to {action}: {e}")
        raise InternalError(f"Failed to {action}") from e


def get_db():
    """Dependency for getting database session with retry logic."""
    db = get_db_session()
    try:
        yield db
    finally:
        db.close()
