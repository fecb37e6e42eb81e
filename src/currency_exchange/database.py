"""Database engine and session setup."""

import logging

from sqlalchemy import Engine, create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from currency_exchange.config import settings
from currency_exchange.models import Base

logger = logging.getLogger(__name__)


def create_db_engine(database_url: str | None = None) -> Engine:
    """Create a SQLAlchemy engine.

    SQLite connections are shared across request threads, and an in-memory
    SQLite database is pinned to a single connection so every session sees
    the same data.

    Args:
        database_url: SQLAlchemy URL. Defaults to settings.

    Returns:
        The engine
    """
    url = database_url or settings.database_url
    if not url.startswith("sqlite"):
        return create_engine(url, pool_pre_ping=True)

    if ":memory:" in url or url in ("sqlite://", "sqlite+pysqlite://"):
        return create_engine(url, connect_args={"check_same_thread": False}, poolclass=StaticPool)
    return create_engine(url, connect_args={"check_same_thread": False})


def create_session_factory(engine: Engine) -> sessionmaker:
    """Create a session factory bound to ``engine``."""
    return sessionmaker(bind=engine, expire_on_commit=False)


def init_db(engine: Engine) -> None:
    """Create all tables that do not exist yet."""
    Base.metadata.create_all(engine)
    logger.info("Database schema ready on %s", engine.url.render_as_string(hide_password=True))
