"""Helpers that record portal notifications for candidate lifecycle events."""

import uuid
from typing import Any, Dict, List, Optional

from app.domain.models import Notification, NotificationType
from app.utils.timestamps import utc_now

from .store import NotificationStore


def create_notification(
    store: NotificationStore,
    user_id: str,
    type: NotificationType,
    title: str,
    message: str,
    metadata: Optional[Dict[str, Any]] = None,
) -> Notification:
    """Store a new unviewed notification for ``user_id`` (an email address).

    Returns:
        The stored notification, including its generated id
    """
    notification = Notification(
        id=uuid.uuid4().hex,
        user_id=user_id,
        type=type,
        title=title,
        message=message,
        created_at=utc_now(),
        viewed=False,
        metadata=metadata,
    )
    return store.add(notification)


def create_interview_invite_notification(
    store: NotificationStore,
    email: str,
    role: str,
    dates: List[str],
    round_type: str,
) -> Notification:
    return create_notification(
        store,
        user_id=email,
        type=NotificationType.INTERVIEW_INVITE,
        title="Interview Invitation",
        message=(
            f"You have been invited for {round_type} round interview for the position "
            f"of {role}. Please check your email for available dates."
        ),
        metadata={"role": role, "dates": list(dates), "roundType": round_type},
    )


def create_verify_details_notification(store: NotificationStore, email: str) -> Notification:
    return create_notification(
        store,
        user_id=email,
        type=NotificationType.VERIFY_DETAILS,
        title="Verify Your Details",
        message=(
            "Please verify your details before proceeding to the next round. "
            "Check your email for the verification link."
        ),
    )


def create_congratulations_notification(
    store: NotificationStore, email: str, role: Optional[str] = None
) -> Notification:
    if role:
        message = (
            f"Congratulations! You have been selected for the position of {role}. "
            "Welcome to the team!"
        )
    else:
        message = "Congratulations! You have been selected. Welcome to the team!"

    return create_notification(
        store,
        user_id=email,
        type=NotificationType.CONGRATULATIONS,
        title="Congratulations! 🎉",
        message=message,
        metadata={"role": role} if role else None,
    )


def create_manager_invite_notification(
    store: NotificationStore, email: str, name: str
) -> Notification:
    return create_notification(
        store,
        user_id=email,
        type=NotificationType.MANAGER_INVITE,
        title="Welcome to the Team!",
        message=(
            f"Welcome {name}! Your manager account has been created. "
            "Please check your email for login credentials."
        ),
        metadata={"name": name},
    )
