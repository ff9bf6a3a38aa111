"""Notification store with per-user live queries.

The store wraps the SQL repository and pushes the full, newest-first result
set to every subscriber of a user whenever that user's records change.
Writes made by other processes are picked up by ``refresh()``, which the
scheduler calls on an interval.
"""

import threading
import uuid
from contextlib import AbstractContextManager
from typing import Any, Callable, Dict, List, Mapping, Optional, Tuple

from app.domain.models import Notification
from app.logging import get_logger
from app.persistence import NotificationRepository, get_session
from app.utils.masking import mask_email

logger = get_logger(__name__, component="feed")

BatchCallback = Callable[[List[Notification]], None]
SessionFactory = Callable[[], AbstractContextManager]

# Only patch a caller may apply; viewed never moves back to false.
VIEWED_PATCH = {"viewed": True}


class Subscription:
    """Handle for one live query; ``cancel()`` stops further batches."""

    def __init__(self, store: "NotificationStore", user_id: str, on_batch: BatchCallback):
        self.id = uuid.uuid4().hex
        self.user_id = user_id
        self._store = store
        self._on_batch = on_batch
        self._active = True

    @property
    def active(self) -> bool:
        return self._active

    def cancel(self) -> None:
        if not self._active:
            return
        self._active = False
        self._store._unregister(self)

    def deliver(self, batch: List[Notification]) -> None:
        if self._active:
            self._on_batch(list(batch))

    def __repr__(self) -> str:
        return (
            f"Subscription(id={self.id[:8]}, user={mask_email(self.user_id)}, "
            f"active={self._active})"
        )


def _fingerprint(batch: List[Notification]) -> Tuple[Tuple[Any, ...], ...]:
    return tuple(
        (n.id, n.viewed, n.created_at, n.title, n.message) for n in batch
    )


class NotificationStore:
    """SQL-backed notification collection with live queries by ``user_id``."""

    def __init__(self, session_factory: SessionFactory = get_session):
        self._session_factory = session_factory
        self._lock = threading.RLock()
        self._subscriptions: Dict[str, List[Subscription]] = {}
        self._fingerprints: Dict[str, Tuple[Tuple[Any, ...], ...]] = {}

    def query(self, user_id: str) -> List[Notification]:
        """Current records for ``user_id``, newest first."""
        with self._session_factory() as session:
            return NotificationRepository(session).list_for_user(user_id)

    def get(self, notification_id: str) -> Optional[Notification]:
        with self._session_factory() as session:
            return NotificationRepository(session).get(notification_id)

    def subscribe(self, user_id: str, on_batch: BatchCallback) -> Subscription:
        """Open a live query for ``user_id``.

        The current result set is delivered before this returns; later
        batches follow every change to the user's records until the
        subscription is cancelled.
        """
        if not user_id or not user_id.strip():
            raise ValueError("user_id is required to subscribe")

        user_id = user_id.strip()
        subscription = Subscription(self, user_id, on_batch)
        with self._lock:
            self._subscriptions.setdefault(user_id, []).append(subscription)

        logger.info(
            "Live query opened",
            extra={
                "event": "feed.subscription.opened",
                "user_id": mask_email(user_id),
                "subscription_id": subscription.id,
            },
        )

        batch = self.query(user_id)
        with self._lock:
            self._fingerprints[user_id] = _fingerprint(batch)
        self._deliver(subscription, batch)
        return subscription

    def subscriber_count(self, user_id: Optional[str] = None) -> int:
        with self._lock:
            if user_id is not None:
                return len(self._subscriptions.get(user_id, []))
            return sum(len(subs) for subs in self._subscriptions.values())

    def add(self, notification: Notification) -> Notification:
        """Persist a new record and publish the owner's updated result set."""
        with self._session_factory() as session:
            stored = NotificationRepository(session).add(notification)

        logger.info(
            "Notification stored",
            extra={
                "event": "feed.notification.created",
                "notification_id": stored.id,
                "user_id": mask_email(stored.user_id),
                "notification_type": stored.type.value if stored.type else None,
            },
        )
        self._publish(stored.user_id)
        return stored

    def update(self, notification_id: str, patch: Mapping[str, Any], user_id: str) -> bool:
        """Apply ``patch`` to one of ``user_id``'s records.

        Returns:
            True when a row changed. False when the record does not exist,
            belongs to another user, or is already viewed.

        Raises:
            ValueError: If the patch is anything other than ``{"viewed": True}``
            PersistenceError: If the write fails
        """
        if dict(patch) != VIEWED_PATCH:
            raise ValueError(f"Unsupported notification patch: {dict(patch)!r}")

        with self._session_factory() as session:
            changed = NotificationRepository(session).mark_viewed(notification_id, user_id)

        if changed:
            self._publish(user_id)
        return changed

    def refresh(self) -> int:
        """Re-query every subscribed user and re-emit batches that changed.

        Returns:
            Number of users whose batch was re-emitted
        """
        with self._lock:
            user_ids = list(self._subscriptions)

        emitted = 0
        for user_id in user_ids:
            batch = self.query(user_id)
            fingerprint = _fingerprint(batch)
            with self._lock:
                if self._fingerprints.get(user_id) == fingerprint:
                    continue
                self._fingerprints[user_id] = fingerprint
            self._broadcast(user_id, batch)
            emitted += 1

        if emitted:
            logger.debug(
                "Live queries refreshed",
                extra={"event": "feed.refresh.emitted", "users": emitted},
            )
        return emitted

    def _publish(self, user_id: str) -> None:
        with self._lock:
            if not self._subscriptions.get(user_id):
                return

        batch = self.query(user_id)
        with self._lock:
            self._fingerprints[user_id] = _fingerprint(batch)
        self._broadcast(user_id, batch)

    def _broadcast(self, user_id: str, batch: List[Notification]) -> None:
        with self._lock:
            subscribers = list(self._subscriptions.get(user_id, []))

        for subscription in subscribers:
            self._deliver(subscription, batch)

    def _deliver(self, subscription: Subscription, batch: List[Notification]) -> None:
        try:
            subscription.deliver(batch)
        except Exception as e:
            # A failing subscriber must not starve the others
            logger.error(
                f"Subscriber raised while handling a batch: {e}",
                exc_info=True,
                extra={
                    "event": "feed.subscription.callback_failed",
                    "subscription_id": subscription.id,
                    "error_type": type(e).__name__,
                },
            )

    def _unregister(self, subscription: Subscription) -> None:
        with self._lock:
            subs = self._subscriptions.get(subscription.user_id, [])
            if subscription in subs:
                subs.remove(subscription)
            if not subs:
                self._subscriptions.pop(subscription.user_id, None)
                self._fingerprints.pop(subscription.user_id, None)

        logger.info(
            "Live query cancelled",
            extra={
                "event": "feed.subscription.cancelled",
                "user_id": mask_email(subscription.user_id),
                "subscription_id": subscription.id,
            },
        )
