"""
Tests for wingpos.notifications: hub fan-out and toast history.
"""

import logging

import pytest

from wingpos.notifications import NotificationHub, ToastQueue


class TestNotificationHub:
    def test_notify_reaches_every_sink(self):
        hub = NotificationHub()
        first, second = ToastQueue(), ToastQueue()
        hub.subscribe(first)
        hub.subscribe(second)

        notification = hub.notify("Order created", "success", kind="order_created")

        assert first.latest == notification
        assert second.latest == notification
        assert notification.created_at is not None

    def test_unknown_severity(self):
        with pytest.raises(ValueError, match="severity"):
            NotificationHub().notify("hi", "fatal")

    def test_failing_sink_is_logged_and_skipped(self, caplog):
        hub = NotificationHub()
        toasts = ToastQueue()

        def broken(_):
            raise RuntimeError("display gone")

        hub.subscribe(broken)
        hub.subscribe(toasts)
        with caplog.at_level(logging.ERROR, logger="wingpos.notifications"):
            hub.notify("Sale completed", "success")

        assert len(toasts) == 1
        assert "notification sink" in caplog.text

    def test_unsubscribe(self):
        hub = NotificationHub()
        toasts = ToastQueue()
        unsubscribe = hub.subscribe(toasts)
        unsubscribe()
        unsubscribe()
        hub.notify("ignored")
        assert len(toasts) == 0


class TestToastQueue:
    def test_keeps_most_recent(self):
        hub = NotificationHub()
        toasts = ToastQueue(maxlen=2)
        hub.subscribe(toasts)
        for message in ("one", "two", "three"):
            hub.notify(message)
        assert [toast.message for toast in toasts.items()] == ["two", "three"]

    def test_filter_by_kind_and_clear(self):
        hub = NotificationHub()
        toasts = ToastQueue()
        hub.subscribe(toasts)
        hub.notify("Low stock: Lemons", "warning", kind="low_stock")
        hub.notify("Order created", "success", kind="order_created")
        assert [toast.message for toast in toasts.items("low_stock")] == ["Low stock: Lemons"]
        toasts.clear()
        assert toasts.latest is None
