"""Domain models for the candidate notification service."""

from .models import (
    Candidate,
    InterviewDetails,
    MailKind,
    MailRequest,
    Notification,
    NotificationType,
)

__all__ = [
    "Candidate",
    "InterviewDetails",
    "MailKind",
    "MailRequest",
    "Notification",
    "NotificationType",
]
