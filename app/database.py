from sqlalchemy import create_engine, pool, event
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.declarative import declarative_base
from sqlalchemy.orm import sessionmaker, Session
import logging

from app.config import settings
from app.exceptions import StorageFailureError

logger = logging.getLogger(__name__)

if settings.DATABASE_URL.startswith("sqlite"):
    # SQLite connections are per-thread unless told otherwise
    engine = create_engine(
        settings.DATABASE_URL,
        connect_args={"check_same_thread": False},
        echo=settings.DB_ECHO,
    )
else:
    # QueuePool maintains a pool of connections that can be reused
    engine = create_engine(
        settings.DATABASE_URL,
        poolclass=pool.QueuePool,
        pool_size=settings.DB_POOL_SIZE,
        max_overflow=settings.DB_MAX_OVERFLOW,
        pool_timeout=settings.DB_POOL_TIMEOUT,
        pool_recycle=settings.DB_POOL_RECYCLE,
        pool_pre_ping=True,
        echo=settings.DB_ECHO,
    )


@event.listens_for(engine, "connect")
def receive_connect(dbapi_conn, connection_record):
    """Log when a new connection is created"""
    logger.debug("Database connection established")


SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
Base = declarative_base()


# Dependency for FastAPI routes
def get_db():
    """
    Database session dependency for FastAPI.
    One session per request; closed when the request finishes.

    Usage:
        @router.get("/endpoint")
        def endpoint(db: Session = Depends(get_db)):
            # Use db here
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def commit_or_fail(db: Session, action: str) -> None:
    """
    Commit the current unit of work.

    Any database error rolls the session back and surfaces as
    StorageFailureError. No retry is attempted; the caller decides.
    """
    try:
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Commit failed while trying to {action}: {str(e)}")
        raise StorageFailureError() from e
