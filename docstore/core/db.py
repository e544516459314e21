"""
Docstore - Database Utilities
=============================

Engine and session management, the ``atomic`` transaction boundary used by
every management operation, and small row helpers.

Usage:
    from docstore.core.db import atomic, get_by_id

    with atomic() as session:
        file = get_by_id(session, File, file_id)
        ...
"""

from collections.abc import Generator
from contextlib import contextmanager
from typing import Any, TypeVar

from sqlalchemy import create_engine, event, inspect
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import QueuePool, StaticPool

from docstore.config import settings
from docstore.observability.logging_config import get_logger
from docstore.resilience.errors import NotFoundError, StorageError

from .models import Base

logger = get_logger(__name__)

ModelT = TypeVar("ModelT")

# =============================================================================
# ENGINE AND SESSION MANAGEMENT
# =============================================================================

_engine: Engine | None = None
_SessionFactory: sessionmaker | None = None


def _enable_sqlite_foreign_keys(engine: Engine) -> None:
    @event.listens_for(engine, "connect")
    def set_sqlite_pragma(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


def get_engine(url: str | None = None, echo: bool | None = None) -> Engine:
    """
    Get or create the SQLAlchemy engine.

    Args:
        url: Database URL (uses settings.DATABASE_URL if not provided)
        echo: Enable SQL logging (uses settings.DB_ECHO if not provided)

    Returns:
        SQLAlchemy Engine instance
    """
    global _engine

    if _engine is None:
        db_url = url or settings.DATABASE_URL
        engine_kwargs: dict[str, Any] = {"echo": settings.DB_ECHO if echo is None else echo}

        if db_url.startswith("sqlite"):
            engine_kwargs["connect_args"] = {"check_same_thread": False}
        else:
            engine_kwargs["poolclass"] = QueuePool
            engine_kwargs["pool_size"] = settings.DB_POOL_SIZE
            engine_kwargs["max_overflow"] = settings.DB_MAX_OVERFLOW
            engine_kwargs["pool_pre_ping"] = True

        _engine = create_engine(db_url, **engine_kwargs)
        if db_url.startswith("sqlite"):
            _enable_sqlite_foreign_keys(_engine)

    return _engine


def get_session_factory(engine: Engine | None = None) -> sessionmaker:
    """Get or create the process-wide session factory."""
    global _SessionFactory

    if _SessionFactory is None:
        _SessionFactory = sessionmaker(
            bind=engine or get_engine(),
            autocommit=False,
            autoflush=False,
        )

    return _SessionFactory


@contextmanager
def atomic(session_factory: sessionmaker | None = None) -> Generator[Session, None, None]:
    """
    Run a block inside one database transaction.

    Commits when the block finishes, rolls back on any exception. Errors
    raised by SQLAlchemy (including the commit itself) surface as
    StorageError; everything else propagates unchanged.

    Usage:
        with atomic() as session:
            session.add(obj)
    """
    session = (session_factory or get_session_factory())()
    try:
        yield session
        session.commit()
    except SQLAlchemyError as e:
        session.rollback()
        logger.error(f"Transaction rolled back: {e}")
        raise StorageError(hint="Transaction failed", reason=type(e).__name__) from e
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


# =============================================================================
# DATABASE INITIALIZATION
# =============================================================================


def init_db(engine: Engine | None = None) -> None:
    """
    Initialize the database schema.

    Creates all tables. For production, manage the schema with migrations.
    """
    Base.metadata.create_all(engine or get_engine())


# =============================================================================
# ROW HELPERS
# =============================================================================


def get_by_id(session: Session, model: type[ModelT], id_: Any) -> ModelT:
    """Fetch a row by primary key or raise NotFoundError."""
    obj = session.get(model, id_)
    if obj is None:
        raise NotFoundError(hint=f"{model.__name__} not found", id=id_)
    return obj


def row_to_dict(obj: Any) -> dict[str, Any]:
    """Column-level copy of a mapped row (relationships excluded)."""
    mapper = inspect(obj).mapper
    return {attr.key: getattr(obj, attr.key) for attr in mapper.column_attrs}


# =============================================================================
# TESTING UTILITIES
# =============================================================================


def create_test_engine(echo: bool = False) -> Engine:
    """Create an in-memory SQLite engine shared by every session bound to it."""
    engine = create_engine(
        "sqlite://",
        echo=echo,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    _enable_sqlite_foreign_keys(engine)
    Base.metadata.create_all(engine)
    return engine
