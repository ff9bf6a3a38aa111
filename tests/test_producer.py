"""Tests for the lifecycle notification helpers."""

from unittest.mock import Mock

import pytest

from app.domain.models import NotificationType
from app.feed.producer import (
    create_congratulations_notification,
    create_interview_invite_notification,
    create_manager_invite_notification,
    create_notification,
    create_verify_details_notification,
)


@pytest.fixture
def store():
    store = Mock()
    store.add.side_effect = lambda notification: notification
    return store


def test_create_notification_defaults(store):
    notification = create_notification(
        store,
        user_id="asha@example.com",
        type=NotificationType.VERIFY_DETAILS,
        title="Verify Your Details",
        message="Please verify.",
    )

    store.add.assert_called_once_with(notification)
    assert notification.viewed is False
    assert notification.metadata is None
    assert len(notification.id) == 32
    assert notification.created_at.tzinfo is not None


def test_ids_are_unique(store):
    first = create_verify_details_notification(store, "asha@example.com")
    second = create_verify_details_notification(store, "asha@example.com")

    assert first.id != second.id


def test_interview_invite(store):
    notification = create_interview_invite_notification(
        store, "asha@example.com", "Site Engineer", ["2025-11-10", "2025-11-11"], "technical"
    )

    assert notification.type is NotificationType.INTERVIEW_INVITE
    assert notification.title == "Interview Invitation"
    assert notification.message == (
        "You have been invited for technical round interview for the position of "
        "Site Engineer. Please check your email for available dates."
    )
    assert notification.metadata == {
        "role": "Site Engineer",
        "dates": ["2025-11-10", "2025-11-11"],
        "roundType": "technical",
    }


def test_verify_details(store):
    notification = create_verify_details_notification(store, "asha@example.com")

    assert notification.type is NotificationType.VERIFY_DETAILS
    assert notification.user_id == "asha@example.com"
    assert "verification link" in notification.message


@pytest.mark.parametrize(
    "role, expected_message, expected_metadata",
    [
        (
            "Site Engineer",
            "Congratulations! You have been selected for the position of Site Engineer. Welcome to the team!",
            {"role": "Site Engineer"},
        ),
        (None, "Congratulations! You have been selected. Welcome to the team!", None),
    ],
)
def test_congratulations(store, role, expected_message, expected_metadata):
    notification = create_congratulations_notification(store, "asha@example.com", role)

    assert notification.title == "Congratulations! 🎉"
    assert notification.message == expected_message
    assert notification.metadata == expected_metadata


def test_manager_invite(store):
    notification = create_manager_invite_notification(store, "vikram@example.com", "Vikram Shah")

    assert notification.type is NotificationType.MANAGER_INVITE
    assert notification.title == "Welcome to the Team!"
    assert notification.message.startswith("Welcome Vikram Shah!")
    assert notification.metadata == {"name": "Vikram Shah"}
