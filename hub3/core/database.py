"""
Namespace store connection handling.

The relational database only holds the namespace table; fragment documents
are searched in Elasticsearch. Any SQLAlchemy URL works, SQLite is the
default for single node deployments.
"""

import logging
from typing import Any, Dict, Generator
from contextlib import contextmanager

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session
from sqlalchemy.pool import StaticPool

from hub3.core.config import get_settings

logger = logging.getLogger(__name__)

settings = get_settings()


def engine_options(database_url: str) -> Dict[str, Any]:
    """create_engine keyword arguments for a database URL."""
    options: Dict[str, Any] = {"echo": settings.log_level == "DEBUG"}
    if not database_url.startswith("sqlite"):
        options.update(pool_size=5, max_overflow=10, pool_pre_ping=True)
        return options

    # request handlers run in a thread pool
    options["connect_args"] = {"check_same_thread": False}
    if database_url in ("sqlite://", "sqlite:///:memory:"):
        # one shared connection, or every session sees an empty database
        options["poolclass"] = StaticPool
    return options


engine = create_engine(settings.database_url, **engine_options(settings.database_url))

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def get_db() -> Generator[Session, None, None]:
    """Request scoped session for FastAPI routes; writes commit explicitly."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


@contextmanager
def get_db_session() -> Generator[Session, None, None]:
    """
    Session that commits on success, for the CLI and application startup.

    Usage:
        with get_db_session() as db:
            NamespaceService(db).seed(settings.default_namespaces)
    """
    db = SessionLocal()
    try:
        yield db
        db.commit()
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()


def init_db():
    """Create the namespace table if it does not exist."""
    from hub3.core.models.base import Base
    from hub3.core.models import namespace  # noqa: F401

    Base.metadata.create_all(bind=engine)
    logger.info(f"Namespace store ready at {engine.url.render_as_string(hide_password=True)}")
