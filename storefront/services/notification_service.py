# storefront/services/notification_service.py
from kombu.exceptions import OperationalError

from storefront.celery_worker import celery_app
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


class NotificationService:
    """
    Powiadomienia o zamowieniach przez Celery.
    Niedostepny broker nie moze zepsuc checkoutu - tylko log.
    """

    @staticmethod
    def send_order_notification(username: str, order_id: int) -> None:
        try:
            send_order_notification_task.delay(username, order_id)
        except OperationalError as e:
            logger.warning(f"Order {order_id} notification not queued: {e}")


@celery_app.task(name="storefront.services.notification_service.send_order_notification_task")
def send_order_notification_task(username: str, order_id: int):
    """
    Celery task - w prawdziwym systemie wyslalby email/SMS.
    Teraz tylko loguje.
    """
    logger.info(f"[NOTIFICATION] User {username}: order {order_id} placed, payment: Cash on Delivery")

    return {"user": username, "order_id": order_id, "status": "sent"}
