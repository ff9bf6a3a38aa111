"""Per-identity notification view that marks delivered records as viewed.

The listener owns at most one live query. Each batch replaces the local
view, after which every unseen record in it is acknowledged with a
background ``viewed`` write. Acknowledgement never touches the view; the
store's next batch carries the new flag.
"""

import threading
from concurrent.futures import Executor, Future, ThreadPoolExecutor
from dataclasses import dataclass
from typing import Callable, Iterable, List, Optional, Set

from app.domain.models import Notification
from app.logging import get_logger
from app.logging.context import log_context
from app.utils.masking import mask_email

from .store import VIEWED_PATCH, NotificationStore, Subscription

logger = get_logger(__name__, component="feed")


@dataclass(frozen=True)
class AckOutcome:
    """Result of one background ``viewed`` write."""

    notification_id: str
    success: bool
    changed: bool = False
    error: Optional[BaseException] = None


AckCallback = Callable[[AckOutcome], None]


class NotificationListener:
    """Keeps the newest-first view of one user's notifications.

    Args:
        store: Store providing live queries and scoped updates
        executor: Runs acknowledgement writes; a private thread pool is
            created (and shut down by ``close()``) when omitted
        on_ack: Optional callback receiving an AckOutcome per write
        max_workers: Pool size for the private executor
    """

    def __init__(
        self,
        store: NotificationStore,
        executor: Optional[Executor] = None,
        on_ack: Optional[AckCallback] = None,
        max_workers: int = 4,
    ):
        self.store = store
        self.on_ack = on_ack
        self._owns_executor = executor is None
        self._executor = executor or ThreadPoolExecutor(
            max_workers=max_workers, thread_name_prefix="feed-ack"
        )
        self._lock = threading.RLock()
        # Held across each viewed write; identity changes wait for it
        self._write_gate = threading.RLock()
        self._subscription: Optional[Subscription] = None
        self._user_id: Optional[str] = None
        self._view: List[Notification] = []
        self._generation = 0
        # Ids with a write queued or done under the current subscription
        self._submitted: Set[str] = set()

    @property
    def user_id(self) -> Optional[str]:
        return self._user_id

    @property
    def notifications(self) -> List[Notification]:
        with self._lock:
            return list(self._view)

    @property
    def unread_count(self) -> int:
        with self._lock:
            return sum(1 for n in self._view if not n.viewed)

    def set_identity(self, user_id: Optional[str]) -> None:
        """Switch the listener to ``user_id`` (None signs out).

        The previous live query is cancelled and the view cleared before the
        new one opens, so no batch or write for the old identity lands
        after this call. A write already in flight finishes before the
        switch takes effect.
        """
        user_id = user_id.strip() if user_id else None

        with self._write_gate, self._lock:
            previous = self._subscription
            self._generation += 1
            generation = self._generation
            self._subscription = None
            self._user_id = user_id or None
            self._view = []
            self._submitted = set()

        if previous is not None:
            previous.cancel()

        if not user_id:
            logger.info("Listener signed out", extra={"event": "feed.identity.cleared"})
            return

        logger.info(
            "Listener identity set",
            extra={"event": "feed.identity.set", "user_id": mask_email(user_id)},
        )

        subscription = self.store.subscribe(
            user_id, lambda batch: self._handle_batch(generation, batch)
        )

        with self._lock:
            stale = generation != self._generation
            if not stale:
                self._subscription = subscription
                initial = list(self._view)

        if stale:
            subscription.cancel()
            return

        # The immediate batch arrived before the subscription handle existed
        self.acknowledge(initial)

    def acknowledge(self, notifications: Iterable[Notification]) -> List[Future]:
        """Queue a ``viewed`` write for every unseen record not yet submitted.

        Safe to call repeatedly; records already viewed or already queued are
        skipped. Returns the futures of the writes that were queued.
        """
        with self._lock:
            subscription = self._subscription
            user_id = self._user_id
            generation = self._generation
            if subscription is None or user_id is None:
                return []

            pending = [
                n for n in notifications if not n.viewed and n.id not in self._submitted
            ]
            for notification in pending:
                self._submitted.add(notification.id)

        return [
            self._executor.submit(self._mark_viewed, subscription, generation, user_id, n.id)
            for n in pending
        ]

    def close(self) -> None:
        """Cancel the live query and stop the private executor."""
        self.set_identity(None)
        if self._owns_executor:
            self._executor.shutdown(wait=True)

    def __enter__(self) -> "NotificationListener":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def _handle_batch(self, generation: int, batch: List[Notification]) -> None:
        with self._lock:
            if generation != self._generation:
                return
            self._view = sorted(batch, key=lambda n: n.created_at, reverse=True)
            subscribed = self._subscription is not None

        logger.debug(
            "Notification batch received",
            extra={
                "event": "feed.batch.received",
                "count": len(batch),
                "unread": sum(1 for n in batch if not n.viewed),
            },
        )

        if subscribed:
            self.acknowledge(batch)

    def _mark_viewed(
        self, subscription: Subscription, generation: int, user_id: str, notification_id: str
    ) -> None:
        with self._write_gate:
            with self._lock:
                current = generation == self._generation and subscription.active
            if not current:
                logger.debug(
                    "Skipping acknowledgement for cancelled subscription",
                    extra={"event": "feed.ack.skipped", "notification_id": notification_id},
                )
                return
            self._write(generation, user_id, notification_id)

    def _write(self, generation: int, user_id: str, notification_id: str) -> None:
        with log_context(user_id=mask_email(user_id), notification_id=notification_id):
            try:
                changed = self.store.update(notification_id, VIEWED_PATCH, user_id=user_id)
            except Exception as e:
                with self._lock:
                    if generation == self._generation:
                        self._submitted.discard(notification_id)
                logger.warning(
                    f"Failed to mark notification viewed: {e}",
                    extra={"event": "feed.ack.failure", "error_type": type(e).__name__},
                )
                self._report(AckOutcome(notification_id, success=False, error=e))
                return

            logger.info(
                "Notification marked viewed",
                extra={"event": "feed.ack.success", "changed": changed},
            )
            self._report(AckOutcome(notification_id, success=True, changed=changed))

    def _report(self, outcome: AckOutcome) -> None:
        if self.on_ack is None:
            return
        try:
            self.on_ack(outcome)
        except Exception as e:
            logger.error(
                f"on_ack callback raised: {e}",
                exc_info=True,
                extra={"event": "feed.ack.callback_failed", "error_type": type(e).__name__},
            )
