"""Persistence layer for notification records (SQLAlchemy over SQLite by default).

Public API:
    # Database initialization and session management
    - init_database(database_url: str) -> None
    - get_session() -> ContextManager[Session]
    - close_database() -> None
    - get_engine() -> Engine

    # Repository
    - NotificationRepository: insert, list newest-first, mark viewed

    # Exceptions
    - PersistenceError: Base exception for all persistence errors
    - DatabaseConnectionError: Database connection/initialization failures
    - DataIntegrityError: Constraint violations

Example usage:
    >>> from app.persistence import init_database, get_session, NotificationRepository
    >>>
    >>> init_database("sqlite:///./data/notifications.db")
    >>>
    >>> with get_session() as session:
    ...     repo = NotificationRepository(session)
    ...     latest = repo.list_for_user("jane@example.com")
"""

from .database import close_database, get_engine, get_session, init_database
from .exceptions import DatabaseConnectionError, DataIntegrityError, PersistenceError
from .repositories import NotificationRepository

__all__ = [
    "init_database",
    "get_session",
    "close_database",
    "get_engine",
    "NotificationRepository",
    "PersistenceError",
    "DatabaseConnectionError",
    "DataIntegrityError",
]
