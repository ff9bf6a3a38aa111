"""Portal notification feed: live store, per-user listener and producers."""

from .listener import AckOutcome, NotificationListener
from .producer import (
    create_congratulations_notification,
    create_interview_invite_notification,
    create_manager_invite_notification,
    create_notification,
    create_verify_details_notification,
)
from .store import VIEWED_PATCH, NotificationStore, Subscription

__all__ = [
    "NotificationStore",
    "Subscription",
    "VIEWED_PATCH",
    "NotificationListener",
    "AckOutcome",
    "create_notification",
    "create_interview_invite_notification",
    "create_verify_details_notification",
    "create_congratulations_notification",
    "create_manager_invite_notification",
]
