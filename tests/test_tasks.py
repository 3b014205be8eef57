# tests/test_tasks.py
from unittest.mock import patch

from kombu.exceptions import OperationalError

from storefront.celery_worker import celery_app
from storefront.services import notification_service
from storefront.services.notification_service import NotificationService, send_order_notification_task
from storefront.tasks import reconcile


def test_notification_task_payload():
    result = send_order_notification_task.run("alice", 42)
    assert result == {"user": "alice", "order_id": 42, "status": "sent"}


def test_notification_is_queued():
    with patch.object(notification_service.send_order_notification_task, "delay") as delay:
        NotificationService.send_order_notification("alice", 42)
    delay.assert_called_once_with("alice", 42)


def test_broker_down_does_not_break_caller(caplog):
    with patch.object(
        notification_service.send_order_notification_task,
        "delay",
        side_effect=OperationalError("broker unreachable"),
    ):
        NotificationService.send_order_notification("alice", 42)

    assert "not queued" in caplog.text


def test_reconcile_is_scheduled():
    entry = celery_app.conf.beat_schedule["reconcile-order-statuses"]
    assert entry["task"] == reconcile.reconcile_orders_task.name


def test_reconcile_task_uses_configured_store(store):
    with patch.object(reconcile, "build_store", return_value=store), patch.object(
        reconcile, "build_lock_service", return_value=None
    ):
        assert reconcile.reconcile_orders_task.run() == {"fixed": 0}
