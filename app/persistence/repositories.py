"""Data access layer for notification records.

Repositories encapsulate database operations and return domain models
rather than ORM models.
"""

import logging
from typing import List, Optional

from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from app.domain.models import Notification

from .exceptions import DataIntegrityError, PersistenceError
from .schema import NotificationModel

logger = logging.getLogger(__name__)


class NotificationRepository:
    """Repository for notification records."""

    def __init__(self, session: Session):
        """Initialize repository with database session.

        Args:
            session: SQLAlchemy session for database operations
        """
        self.session = session

    def add(self, notification: Notification) -> Notification:
        """Insert a new notification.

        Raises:
            DataIntegrityError: If a record with the same id already exists
            PersistenceError: If database error occurs
        """
        try:
            self.session.add(NotificationModel.from_domain(notification))
            self.session.flush()
            return notification

        except IntegrityError as e:
            logger.error(f"Integrity error inserting notification {notification.id}: {e}")
            raise DataIntegrityError(f"Notification {notification.id} already exists") from e
        except SQLAlchemyError as e:
            logger.error(f"Error inserting notification {notification.id}: {e}", exc_info=True)
            raise PersistenceError(f"Failed to insert notification: {e}") from e

    def get(self, notification_id: str) -> Optional[Notification]:
        """Retrieve a notification by id, or None if it does not exist."""
        try:
            model = self.session.get(NotificationModel, notification_id)
            return model.to_domain() if model is not None else None

        except SQLAlchemyError as e:
            logger.error(f"Error retrieving notification {notification_id}: {e}", exc_info=True)
            raise PersistenceError(f"Failed to retrieve notification: {e}") from e

    def list_for_user(self, user_id: str) -> List[Notification]:
        """Return every notification addressed to ``user_id``, newest first.

        Ties on ``created_at`` fall back to id (descending) for a stable order.

        Raises:
            PersistenceError: If database error occurs
        """
        try:
            stmt = (
                select(NotificationModel)
                .where(NotificationModel.user_id == user_id)
                .order_by(NotificationModel.created_at.desc(), NotificationModel.id.desc())
            )
            models = self.session.execute(stmt).scalars().all()
            return [model.to_domain() for model in models]

        except SQLAlchemyError as e:
            logger.error(f"Error listing notifications for user: {e}", exc_info=True)
            raise PersistenceError(f"Failed to list notifications: {e}") from e

    def mark_viewed(self, notification_id: str, user_id: str) -> bool:
        """Set ``viewed`` on one record owned by ``user_id``.

        Idempotent: a record that is already viewed is left untouched.

        Returns:
            True if a row changed, False if nothing matched or it was already viewed

        Raises:
            PersistenceError: If database error occurs
        """
        try:
            stmt = (
                update(NotificationModel)
                .where(
                    NotificationModel.id == notification_id,
                    NotificationModel.user_id == user_id,
                    NotificationModel.viewed.is_(False),
                )
                .values(viewed=True)
            )
            result = self.session.execute(stmt)
            return result.rowcount > 0

        except SQLAlchemyError as e:
            logger.error(f"Error marking notification {notification_id} viewed: {e}", exc_info=True)
            raise PersistenceError(f"Failed to update notification: {e}") from e
