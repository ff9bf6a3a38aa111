"""Database connection and session management for the notification store."""

from contextlib import contextmanager
from pathlib import Path
from typing import Generator

from sqlalchemy import create_engine, event, text
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from app.logging import get_logger

from .exceptions import DatabaseConnectionError

_engine: Engine | None = None
_session_factory: sessionmaker | None = None

logger = get_logger(__name__, component="database")

MEMORY_URLS = ("sqlite://", "sqlite:///:memory:")


def init_database(database_url: str) -> None:
    """Initialize the engine and create the schema if it does not exist.

    Call once at startup. In-memory SQLite uses a single shared connection
    so that listener worker threads see the same data as the caller.

    Args:
        database_url: SQLAlchemy URL (e.g., "sqlite:///./data/notifications.db")

    Raises:
        DatabaseConnectionError: If initialization fails
    """
    global _engine, _session_factory

    if not database_url or not isinstance(database_url, str):
        raise DatabaseConnectionError("Database URL must be a non-empty string")

    try:
        logger.info(
            "Initializing database",
            extra={"event": "database.initializing", "database_url": _redact_url(database_url)},
        )

        if _engine is not None:
            _engine.dispose()

        is_sqlite = database_url.startswith("sqlite")
        engine_kwargs = {"pool_pre_ping": True, "future": True}

        if database_url in MEMORY_URLS:
            engine_kwargs["connect_args"] = {"check_same_thread": False}
            engine_kwargs["poolclass"] = StaticPool
        elif is_sqlite:
            _ensure_parent_directory(database_url)
            engine_kwargs["connect_args"] = {"check_same_thread": False, "timeout": 30}

        _engine = create_engine(database_url, **engine_kwargs)

        if is_sqlite:
            _configure_sqlite(_engine, in_memory=database_url in MEMORY_URLS)

        with _engine.connect() as conn:
            conn.execute(text("SELECT 1")).fetchone()

        _session_factory = sessionmaker(
            bind=_engine,
            autoflush=True,
            expire_on_commit=False,
            future=True,
        )

        from .schema import create_schema

        create_schema(_engine)

        logger.info(
            "Database initialized successfully",
            extra={"event": "database.initialised", "database_url": _redact_url(database_url)},
        )

    except DatabaseConnectionError:
        raise
    except Exception as e:
        error_msg = f"Failed to initialize database: {e}"
        logger.error(error_msg, exc_info=True)
        raise DatabaseConnectionError(error_msg) from e


def _ensure_parent_directory(database_url: str) -> None:
    db_file = Path(database_url.replace("sqlite:///", "", 1))
    if not db_file.parent.exists():
        logger.info(f"Creating database directory: {db_file.parent}")
        db_file.parent.mkdir(parents=True, exist_ok=True)


def _configure_sqlite(engine: Engine, in_memory: bool) -> None:
    @event.listens_for(engine, "connect")
    def set_sqlite_pragma(dbapi_conn, connection_record):
        cursor = dbapi_conn.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        if not in_memory:
            # Readers (live queries) keep working while the listener writes
            cursor.execute("PRAGMA journal_mode=WAL")
        cursor.close()


def _redact_url(url: str) -> str:
    """Hide the password of a server database URL."""
    if url.startswith("sqlite"):
        return url

    if "@" in url and "://" in url:
        scheme, rest = url.split("://", 1)
        credentials, host = rest.rsplit("@", 1)
        username = credentials.split(":", 1)[0]
        return f"{scheme}://{username}:***@{host}"

    return url


@contextmanager
def get_session() -> Generator[Session, None, None]:
    """Provide a session that commits on success and rolls back on error.

    Raises:
        DatabaseConnectionError: If the database has not been initialized
    """
    if _session_factory is None:
        raise DatabaseConnectionError(
            "Database not initialized. Call init_database() before using get_session()"
        )

    session = _session_factory()
    try:
        yield session
        session.commit()
    except Exception as e:
        session.rollback()
        logger.warning(
            f"Database session rolled back due to exception: {e}",
            extra={"event": "database.session.rolled_back", "error_type": type(e).__name__},
        )
        raise
    finally:
        session.close()


def get_engine() -> Engine:
    """Return the initialized engine.

    Raises:
        DatabaseConnectionError: If the database has not been initialized
    """
    if _engine is None:
        raise DatabaseConnectionError(
            "Database not initialized. Call init_database() before using get_engine()"
        )
    return _engine


def close_database() -> None:
    """Dispose of the engine; call during shutdown."""
    global _engine, _session_factory

    if _engine is not None:
        _engine.dispose()
        _engine = None
        _session_factory = None
        logger.info("Database connections closed", extra={"event": "database.closed"})
