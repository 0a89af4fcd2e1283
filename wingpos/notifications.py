"""Toast and kitchen alert fan-out.

The core emits a :class:`Notification` on each key transition (order placed,
sale completed, low stock, ...). Delivery is fire-and-forget: a sink that
raises is logged and skipped so it can never undo or block a core mutation.
"""

from __future__ import annotations

import logging
from collections import deque
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Callable

from wingpos.config import TOAST_HISTORY_SIZE

logger = logging.getLogger(__name__)

SEVERITIES = frozenset({"success", "error", "info", "warning"})

_LOG_LEVEL_BY_SEVERITY = {
    "success": logging.INFO,
    "info": logging.INFO,
    "warning": logging.WARNING,
    "error": logging.ERROR,
}


@dataclass(frozen=True)
class Notification:
    """One message for the toast area or the kitchen."""

    message: str
    severity: str = "info"
    kind: str = "general"
    created_at: datetime | None = None


NotificationSink = Callable[[Notification], None]


class NotificationHub:
    """Fans notifications out to subscribed sinks."""

    def __init__(self) -> None:
        self._sinks: list[NotificationSink] = []

    def subscribe(self, sink: NotificationSink) -> Callable[[], None]:
        """Register a sink; returns a callable that unsubscribes it."""
        self._sinks.append(sink)

        def _unsubscribe() -> None:
            if sink in self._sinks:
                self._sinks.remove(sink)

        return _unsubscribe

    def notify(self, message: str, severity: str = "info", kind: str = "general") -> Notification:
        if severity not in SEVERITIES:
            raise ValueError(f"Unknown severity '{severity}'")
        notification = Notification(
            message=message,
            severity=severity,
            kind=kind,
            created_at=datetime.now(timezone.utc),
        )
        logger.log(_LOG_LEVEL_BY_SEVERITY[severity], "notify kind=%s message=%s", kind, message)
        for sink in list(self._sinks):
            try:
                sink(notification)
            except Exception:
                logger.exception("notification sink %r failed", sink)
        return notification


class ToastQueue:
    """Sink that keeps the most recent notifications for display."""

    def __init__(self, maxlen: int = TOAST_HISTORY_SIZE) -> None:
        self._toasts: deque[Notification] = deque(maxlen=maxlen)

    def __call__(self, notification: Notification) -> None:
        self._toasts.append(notification)

    def __len__(self) -> int:
        return len(self._toasts)

    @property
    def latest(self) -> Notification | None:
        if not self._toasts:
            return None
        return self._toasts[-1]

    def items(self, kind: str | None = None) -> list[Notification]:
        return [toast for toast in self._toasts if kind is None or toast.kind == kind]

    def clear(self) -> None:
        self._toasts.clear()
