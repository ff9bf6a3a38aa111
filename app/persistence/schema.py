"""Database schema definition and ORM models.

This module defines SQLAlchemy ORM models for the notification store and
provides conversion methods between ORM models and domain models.
"""

import json
import logging
from typing import Any, Dict, Optional

from sqlalchemy import Boolean, Column, Index, String, Text
from sqlalchemy.engine import Engine
from sqlalchemy.orm import declarative_base

from app.domain.models import Notification, NotificationType
from app.utils.timestamps import format_timestamp, parse_iso_datetime

logger = logging.getLogger(__name__)

Base = declarative_base()


class NotificationModel(Base):
    """ORM model for the notifications table.

    ``created_at`` is stored as a fixed-width ISO 8601 string with
    microseconds, so ordering by the column is chronological.
    """

    __tablename__ = "notifications"

    id = Column(String(64), primary_key=True, nullable=False)
    user_id = Column(String(320), nullable=False)

    type = Column(String(50), nullable=True)
    title = Column(Text, nullable=True)
    message = Column(Text, nullable=False)

    created_at = Column(String(50), nullable=False)
    viewed = Column(Boolean, nullable=False, default=False)

    # JSON-encoded dict
    metadata_json = Column("metadata", Text, nullable=True)

    __table_args__ = (
        Index("idx_notifications_user_created", "user_id", "created_at"),
    )

    def to_domain(self) -> Notification:
        """Convert ORM model to domain model."""
        return Notification(
            id=self.id,
            user_id=self.user_id,
            type=_parse_type(self.type),
            title=self.title,
            message=self.message,
            created_at=parse_iso_datetime(self.created_at),
            viewed=bool(self.viewed),
            metadata=_load_metadata(self.metadata_json),
        )

    @classmethod
    def from_domain(cls, notification: Notification) -> "NotificationModel":
        """Create ORM model from domain model."""
        return cls(
            id=notification.id,
            user_id=notification.user_id,
            type=notification.type.value if notification.type else None,
            title=notification.title,
            message=notification.message,
            created_at=format_timestamp(notification.created_at, include_microseconds=True),
            viewed=notification.viewed,
            metadata_json=json.dumps(notification.metadata) if notification.metadata else None,
        )


def _parse_type(value: Optional[str]) -> Optional[NotificationType]:
    if not value:
        return None
    try:
        return NotificationType(value)
    except ValueError:
        logger.warning(f"Unknown notification type in store: {value}")
        return None


def _load_metadata(raw: Optional[str]) -> Optional[Dict[str, Any]]:
    if not raw:
        return None
    try:
        data = json.loads(raw)
    except json.JSONDecodeError:
        logger.warning("Discarding unreadable notification metadata")
        return None
    return data if isinstance(data, dict) else None


def create_schema(engine: Engine) -> None:
    """Create all tables and indexes if they do not exist (idempotent)."""
    logger.info("Creating database schema")
    Base.metadata.create_all(engine)
    logger.info("Database schema created successfully")
