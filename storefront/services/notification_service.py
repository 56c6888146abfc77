# storefront/services/notification_service.py
from kombu.exceptions import OperationalError

from storefront.celery_worker import celery_app
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


class NotificationService:
    """
    Customer notifications about orders.
    Sent through Celery so request handlers never wait on delivery.
    """

    @staticmethod
    def send_order_notification(user_id: int, order_id: int, status: str):
        try:
            send_order_notification_task.delay(user_id, order_id, status)
        except OperationalError as e:
            #the order is already committed, a lost notification must not undo it
            logger.warning(f"Could not enqueue notification for order {order_id}: {e}")


@celery_app.task(name="storefront.services.notification_service.send_order_notification_task")
def send_order_notification_task(user_id: int, order_id: int, status: str):
    """
    Delivery channel (email/SMS/push) is outside this service; the task
    records the notification in the log.
    """
    logger.info(f"[NOTIFICATION] User {user_id}: order {order_id} is {status}")
    return {"user_id": user_id, "order_id": order_id, "status": status, "sent": True}
