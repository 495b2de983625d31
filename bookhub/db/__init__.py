"""Database package: engine, session factory, init_db(), get_session()."""

import threading
from contextlib import contextmanager
from typing import Generator

from sqlalchemy import create_engine, event
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from bookhub.config import DATABASE_URL
from bookhub.db.base import Base

# Import all models so Base.metadata has all tables
from bookhub.db.models import (  # noqa: F401
    BookCatalog,
    BookSet,
    Branch,
    Counter,
    Customer,
    CustomerOrder,
    CustomerOrderItem,
    Language,
    PendingBook,
    Publication,
    PublicationSubtitle,
    SchoolClass,
    SetBookLine,
    SetQuantity,
    SetStationeryLine,
    StationeryItem,
)
from bookhub.utils.logger import get_logger

logger = get_logger("bookhub.db")

_init_lock = threading.Lock()
_engine = None
_SessionLocal: sessionmaker | None = None


def _get_engine():
    """Create engine; SQLite connections are shareable across threads (API worker threads, tests)."""
    url = DATABASE_URL
    if not url.startswith("sqlite"):
        return create_engine(url, echo=False, pool_pre_ping=True)
    kwargs: dict = {"connect_args": {"check_same_thread": False}}
    if ":memory:" in url or url in ("sqlite://", "sqlite:///"):
        # One shared connection, otherwise every new connection sees an empty database
        kwargs["poolclass"] = StaticPool
    engine = create_engine(url, echo=False, **kwargs)

    @event.listens_for(engine, "connect")
    def _enable_foreign_keys(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    return engine


def init_db() -> None:
    """Create engine and tables once per process. Existing tables are left untouched."""
    global _engine, _SessionLocal
    with _init_lock:
        if _SessionLocal is not None:
            return
        _engine = _get_engine()
        Base.metadata.create_all(bind=_engine)
        _SessionLocal = sessionmaker(bind=_engine, autocommit=False, autoflush=False, expire_on_commit=False)
        logger.debug("db.initialized", url=_engine.url.render_as_string(hide_password=True))


def reset_db() -> None:
    """Drop and recreate every table. Used by tests and the init-db --reset command."""
    init_db()
    Base.metadata.drop_all(bind=_engine)
    Base.metadata.create_all(bind=_engine)
    logger.info("db.reset")


@contextmanager
def get_session() -> Generator[Session, None, None]:
    """Context manager yielding a DB session. Calls init_db() on first use.

    The block is one unit of work: committed on success, rolled back on any exception.
    """
    init_db()
    session = _SessionLocal()
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()
