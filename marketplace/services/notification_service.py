# marketplace/services/notification_service.py
import smtplib
import ssl
from email.message import EmailMessage

from kombu.exceptions import OperationalError

from marketplace.celery_worker import celery_app
from marketplace.domain.schemas import OrderOut
from marketplace.utils.logging import get_logger
from marketplace.utils.settings import (
    SMTP_HOST,
    SMTP_PORT,
    SMTP_USER,
    SMTP_PASSWORD,
    SMTP_FROM,
    SMTP_USE_STARTTLS,
)

logger = get_logger(__name__)


class NotificationService:
    """
    Order e-mails, sent from a Celery worker.
    The order is already committed when this runs, so a broker outage is
    logged and never propagated.
    """

    def send_order_confirmation(self, email: str | None, order: OrderOut) -> bool:
        if not email:
            logger.warning(f"No e-mail on file for order {order.order_number}, skipping confirmation")
            return False
        try:
            send_order_confirmation_task.delay(email, order.model_dump(mode="json"))
        except OperationalError as e:
            logger.warning(f"Could not queue confirmation for order {order.order_number}: {e}")
            return False
        return True


def render_order_confirmation(order: dict) -> tuple[str, str]:
    lines = "\n".join(
        f"  - {item['title']} x{item['quantity']} @ {item['price']}" for item in order["items"]
    )
    subject = f"Your order {order['order_number']} is confirmed"
    body = (
        f"Thank you for your purchase!\n\n"
        f"Order: {order['order_number']}\n"
        f"Items:\n{lines}\n"
        f"Total: {order['total_amount']}\n"
        f"Tracking number: {order.get('tracking_number') or '-'}\n"
        f"Estimated delivery: {order.get('estimated_delivery') or '-'}\n"
    )
    return subject, body


def _send_mail(to: str, subject: str, body: str) -> None:
    msg = EmailMessage()
    msg["To"] = to
    msg["From"] = SMTP_FROM
    msg["Subject"] = subject
    msg.set_content(body)

    context = ssl.create_default_context()
    if SMTP_USE_STARTTLS:
        with smtplib.SMTP(SMTP_HOST, SMTP_PORT) as server:
            server.starttls(context=context)
            if SMTP_USER:
                server.login(SMTP_USER, SMTP_PASSWORD)
            server.send_message(msg)
    else:
        with smtplib.SMTP_SSL(SMTP_HOST, SMTP_PORT, context=context) as server:
            if SMTP_USER:
                server.login(SMTP_USER, SMTP_PASSWORD)
            server.send_message(msg)


@celery_app.task(name="marketplace.services.notification_service.send_order_confirmation_task")
def send_order_confirmation_task(email: str, order: dict):
    subject, body = render_order_confirmation(order)

    if not SMTP_HOST:
        # no SMTP configured (dev/test): log instead of sending
        logger.info(f"[NOTIFICATION] {email}: {subject}")
        return {"email": email, "order_number": order["order_number"], "status": "logged"}

    _send_mail(email, subject, body)
    logger.info(f"Confirmation for order {order['order_number']} sent to {email}")
    return {"email": email, "order_number": order["order_number"], "status": "sent"}
