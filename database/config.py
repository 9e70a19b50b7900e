# Database Configuration and Session Management
# The engine and session factory are built once at process start and passed
# to whoever needs them; nothing connects at import time.

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import sessionmaker, Session
from sqlalchemy.pool import StaticPool
from contextlib import contextmanager
from fastapi import Request
import logging

from config.app_config import DATABASE_URL
from core.errors import PersistenceError


def create_db_engine(database_url: str = None, echo: bool = False) -> Engine:
    """
    Create the SQLAlchemy engine.
    SQLite URLs (tests, local runs) share one connection across threads.
    """
    url = database_url or DATABASE_URL
    if url.startswith("sqlite"):
        return create_engine(
            url,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
            echo=echo,
        )
    return create_engine(
        url,
        pool_pre_ping=True,
        pool_size=10,
        max_overflow=20,
        echo=echo  # Set to True for SQL query logging
    )


def create_session_factory(engine: Engine) -> sessionmaker:
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


# Dependency for FastAPI
def get_db(request: Request) -> Session:
    """
    FastAPI dependency to get database session.
    Usage: db: Session = Depends(get_db)
    """
    db = request.app.state.session_factory()
    try:
        yield db
    finally:
        db.close()


@contextmanager
def get_db_context(session_factory: sessionmaker):
    """
    Context manager for database session.
    Usage:
    with get_db_context(session_factory) as db:
        # do something with db
    """
    db = session_factory()
    try:
        yield db
        db.commit()
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()


def commit_or_raise(db: Session, context: str):
    """Commit the unit of work, translating driver failures into PersistenceError."""
    try:
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logging.error(f"Database commit failed during {context}: {e}")
        raise PersistenceError(f"Failed to {context}") from e


def commit_and_publish(db: Session, events, context: str):
    """Commit, then deliver the events queued during the unit of work. Failed commits drop them."""
    try:
        commit_or_raise(db, context)
    except PersistenceError:
        events.discard()
        raise
    events.flush()


def init_db(engine: Engine):
    """
    Initialize database tables.
    Run this once to create all tables.
    """
    from database.models import Base
    from database import marketplace_models  # noqa: F401  registers campaign tables
    Base.metadata.create_all(bind=engine)
    logging.info("Database tables created successfully!")


if __name__ == "__main__":
    # Create tables when run directly
    init_db(create_db_engine())
