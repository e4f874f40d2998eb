# grocery_app/database.py
import logging
from contextlib import contextmanager
from functools import lru_cache

from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.pool import StaticPool
from sqlmodel import Session, create_engine

from grocery_app.core.config import get_settings
from grocery_app.core.errors import StorageError

logger = logging.getLogger(__name__)


# ---------------------------------------------------------
# Embedded SQLite connection
#
# - check_same_thread=False : FastAPI runs sync endpoints in a
#                             threadpool, so the connection is shared
#                             across worker threads
# - StaticPool for :memory: : every session must see the same
#                             in-memory database
#
# One engine per process. It is built lazily by get_engine() and
# handed to endpoints through get_session(); tests swap it out with
# app.dependency_overrides.
# ---------------------------------------------------------


def build_engine(database_url: str, echo: bool = False) -> Engine:
    """
    Create an engine for the given URL.

    SQLite URLs get the thread / pool settings described above; any
    other URL is passed to SQLAlchemy untouched.
    """
    if not database_url.startswith("sqlite"):
        return create_engine(database_url, echo=echo, pool_pre_ping=True)

    kwargs = {"connect_args": {"check_same_thread": False}}
    if database_url in ("sqlite://", "sqlite:///:memory:"):
        kwargs["poolclass"] = StaticPool

    return create_engine(database_url, echo=echo, **kwargs)


@lru_cache
def get_engine() -> Engine:
    """
    Process-wide engine, created on first access.
    """
    settings = get_settings()
    return build_engine(settings.DATABASE_URL, echo=settings.SQL_ECHO)


def create_db_and_tables(engine: Engine | None = None) -> None:
    """
    Create tables, bring the cart schema up to date and seed the catalog.

    This is called once on application startup.
    """
    from grocery_app.migrations import init_db

    init_db(engine or get_engine())


def get_session():
    """
    FastAPI dependency that yields a SQLModel Session.

    Usage:

        from fastapi import Depends

        @router.get("/example")
        def example_endpoint(session: Session = Depends(get_session)):
            ...
    """
    with Session(get_engine()) as session:
        yield session


@contextmanager
def storage_guard(session: Session, action: str):
    """
    Turn any SQLAlchemy failure inside the block into a StorageError.

    The session is rolled back first, so nothing half-written stays
    visible to the next statement on this session.
    """
    try:
        yield
    except SQLAlchemyError as exc:
        session.rollback()
        logger.error("Storage failure while trying to %s: %s", action, exc)
        raise StorageError(f"Could not {action}. Please try again.") from exc
