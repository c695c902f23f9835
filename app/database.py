"""
Database engine, session factory and request-scoped session dependency
"""
import logging
from datetime import datetime, timezone
from typing import Generator

from fastapi import Request
from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, declarative_base, sessionmaker

logger = logging.getLogger(__name__)

Base = declarative_base()


def utcnow() -> datetime:
    """Naive UTC timestamp, the form every DateTime column is stored in"""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
    """SQLite ignores ON DELETE CASCADE unless this pragma is set per connection"""
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def get_engine(database_url: str, echo: bool = False) -> Engine:
    """
    Create the SQLAlchemy engine for the given URL

    Args:
        database_url: SQLAlchemy database URL
        echo: Echo SQL statements to the log

    Returns:
        Configured engine
    """
    connect_args = {}
    if database_url.startswith("sqlite"):
        connect_args["check_same_thread"] = False

    engine = create_engine(
        database_url,
        echo=echo,
        pool_pre_ping=True,
        connect_args=connect_args,
    )

    if engine.dialect.name == "sqlite":
        event.listen(engine, "connect", _enable_sqlite_foreign_keys)

    return engine


def get_session_factory(engine: Engine) -> sessionmaker:
    return sessionmaker(
        bind=engine,
        autocommit=False,
        autoflush=False,
        expire_on_commit=False,
    )


def init_db(engine: Engine) -> None:
    """Create all tables that do not exist yet"""
    # Import models so they register on Base.metadata
    import app.models  # noqa: F401

    Base.metadata.create_all(bind=engine)
    logger.info("Database schema ensured")


def get_db(request: Request) -> Generator[Session, None, None]:
    """
    Yield a database session bound to the application's engine

    The session factory is built once by the application factory and kept on
    app.state, so every request shares the same pool.
    """
    db = request.app.state.session_factory()
    try:
        yield db
    finally:
        db.close()
