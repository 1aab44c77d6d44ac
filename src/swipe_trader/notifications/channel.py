"""Single-slot notification channel with timed expiry."""

import asyncio
import logging
import time
from collections import deque
from typing import Callable, Deque, List, Optional

from ..core.enums import NotificationKind
from ..core.models import Notification, DEFAULT_NOTIFICATION_TTL_MS

logger = logging.getLogger(__name__)

Listener = Callable[[Optional[Notification]], None]


class NotificationChannel:
    """Mailbox holding at most one live notification.

    Posting replaces whatever is showing and restarts the countdown. Expiry
    is checked against ``clock`` on every read and, when an event loop is
    running, also pushed to listeners by a ``call_later`` timer.
    """

    def __init__(
        self,
        default_ttl_ms: int = DEFAULT_NOTIFICATION_TTL_MS,
        clock: Callable[[], float] = time.monotonic,
        history_size: int = 50,
    ):
        self.default_ttl_ms = default_ttl_ms
        self._clock = clock
        self._current: Optional[Notification] = None
        self._expires_at: float = 0.0
        self._timer: Optional[asyncio.TimerHandle] = None
        self._listeners: List[Listener] = []
        self._history: Deque[Notification] = deque(maxlen=history_size)

    # ------------------------------------------------------------------
    # Slot
    # ------------------------------------------------------------------

    @property
    def current(self) -> Optional[Notification]:
        """The live notification, or None."""
        if self._current is not None and self._clock() >= self._expires_at:
            self._clear("expired")
        return self._current

    def post(self, notification: Notification) -> Notification:
        """Show a notification, replacing the current one."""
        self._cancel_timer()
        if self._current is not None:
            logger.debug(f"Replacing notification '{self._current.title}'")

        self._current = notification
        self._expires_at = self._clock() + notification.ttl_ms / 1000
        self._history.append(notification)
        self._schedule_expiry(notification)

        logger.info(f"[{notification.kind.value}] {notification.title}: {notification.message}")
        self._notify(notification)
        return notification

    def dismiss(self):
        """Clear the current notification immediately."""
        if self._current is not None:
            self._clear("dismissed")

    def success(self, title: str, message: str, ttl_ms: Optional[int] = None) -> Notification:
        return self._post_kind(NotificationKind.SUCCESS, title, message, ttl_ms)

    def error(self, title: str, message: str, ttl_ms: Optional[int] = None) -> Notification:
        return self._post_kind(NotificationKind.ERROR, title, message, ttl_ms)

    def info(self, title: str, message: str, ttl_ms: Optional[int] = None) -> Notification:
        return self._post_kind(NotificationKind.INFO, title, message, ttl_ms)

    def _post_kind(
        self, kind: NotificationKind, title: str, message: str, ttl_ms: Optional[int]
    ) -> Notification:
        return self.post(Notification(
            kind=kind,
            title=title,
            message=message,
            ttl_ms=ttl_ms if ttl_ms is not None else self.default_ttl_ms,
        ))

    def _clear(self, reason: str):
        self._cancel_timer()
        cleared = self._current
        self._current = None
        if cleared is not None:
            logger.debug(f"Notification '{cleared.title}' {reason}")
            self._notify(None)

    # ------------------------------------------------------------------
    # Timer
    # ------------------------------------------------------------------

    def _schedule_expiry(self, notification: Notification):
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            return
        self._timer = loop.call_later(
            notification.ttl_ms / 1000, self._on_timer, notification
        )

    def _on_timer(self, notification: Notification):
        self._timer = None
        if self._current is notification:
            self._clear("expired")

    def _cancel_timer(self):
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

    # ------------------------------------------------------------------
    # Listeners
    # ------------------------------------------------------------------

    def subscribe(self, listener: Listener):
        """Register a callback invoked with the new live notification (or None)."""
        self._listeners.append(listener)

    def unsubscribe(self, listener: Listener):
        if listener in self._listeners:
            self._listeners.remove(listener)

    def _notify(self, notification: Optional[Notification]):
        for listener in list(self._listeners):
            try:
                listener(notification)
            except Exception as e:
                logger.error(f"Notification listener failed: {e}")

    def get_history(self) -> List[Notification]:
        return list(self._history)

    def close(self):
        """Drop the live notification and stop timers."""
        self._cancel_timer()
        self._current = None
        self._listeners.clear()
