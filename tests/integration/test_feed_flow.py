"""Integration tests for the notification feed.

A producer writes through one store while a listener watches through
another, the way the CLI ``notify`` and ``watch`` processes share a
database file. Only the scheduler's refresh carries writes across.
"""

import pytest

from app.feed import (
    NotificationListener,
    NotificationStore,
    create_interview_invite_notification,
    create_verify_details_notification,
)
from app.persistence import NotificationRepository, close_database, get_session, init_database
from app.scheduler import StoreRefreshScheduler
from tests.helpers import ImmediateExecutor, seed_store

ASHA = "asha.rao@example.com"


@pytest.fixture
def test_database(tmp_path):
    """Setup test database with file storage."""
    db_url = f"sqlite:///{tmp_path / 'feed.db'}"
    init_database(db_url)
    yield db_url
    close_database()


@pytest.fixture
def producer_store(test_database):
    store = NotificationStore()
    seed_store(store)
    return store


@pytest.fixture
def watcher_store(test_database):
    return NotificationStore()


def viewed_flags(user_id):
    with get_session() as session:
        return {n.id: n.viewed for n in NotificationRepository(session).list_for_user(user_id)}


def test_watch_acknowledges_seeded_records(producer_store, watcher_store):
    with NotificationListener(watcher_store, executor=ImmediateExecutor()) as listener:
        listener.set_identity(ASHA)

        assert [n.id for n in listener.notifications] == ["asha-offer", "asha-verify", "asha-invite"]
        assert listener.unread_count == 0

    assert viewed_flags(ASHA) == {"asha-offer": True, "asha-verify": True, "asha-invite": True}
    assert viewed_flags("vikram.shah@example.com") == {"vikram-welcome": False}


def test_refresh_delivers_writes_from_another_store(producer_store, watcher_store):
    scheduler = StoreRefreshScheduler(watcher_store, interval_seconds=60)
    listener = NotificationListener(watcher_store, executor=ImmediateExecutor())
    listener.set_identity(ASHA)

    created = create_interview_invite_notification(
        producer_store, ASHA, "Project Manager", ["2025-12-01"], "HR"
    )

    # Not visible until the watcher refreshes
    assert created.id not in [n.id for n in listener.notifications]

    assert scheduler.refresh_once() == 1

    assert listener.notifications[0].id == created.id
    assert viewed_flags(ASHA)[created.id] is True
    listener.close()


def test_identity_switch_mid_stream(producer_store, watcher_store):
    listener = NotificationListener(watcher_store, executor=ImmediateExecutor())
    listener.set_identity(ASHA)
    listener.set_identity("vikram.shah@example.com")

    create_verify_details_notification(producer_store, ASHA)
    watcher_store.refresh()

    assert [n.id for n in listener.notifications] == ["vikram-welcome"]
    assert list(viewed_flags(ASHA).values()).count(False) == 1
    listener.close()
