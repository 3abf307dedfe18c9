"""
Order notifications: a transactional email (EmailJS) and a generic webhook.

Both deliveries are fire-and-forget. Each one runs inside its own failure
boundary, so a failing email never stops the webhook (or the other way
round), and nothing here ever raises into the checkout flow.
"""

import logging
from concurrent.futures import Executor, Future, ThreadPoolExecutor
from typing import Any, Callable, Dict, List, Optional

import requests

from schemas import Order, Settings

logger = logging.getLogger(__name__)

# shared by dispatchers that are not given an executor of their own
_executor = ThreadPoolExecutor(max_workers=4, thread_name_prefix="notify")

EMAILJS_ENDPOINT = "https://api.emailjs.com/api/v1.0/email/send"
DEFAULT_TIMEOUT = 5.0

# Sent by the admin "verify connection" button
SAMPLE_WEBHOOK_RECORD = {
    "id": "TEST-123",
    "customerName": "Test User",
    "customerEmail": "test@example.com",
    "total": 99.99,
    "items": "1x Test Product",
    "address": "123 Testing Lane",
}


class WebhookNotConfigured(ValueError):
    pass


def email_configured(settings: Settings) -> bool:
    return bool(settings.emailjs_service_id and settings.emailjs_template_id and settings.emailjs_public_key)


def webhook_url(settings: Settings) -> str:
    return settings.email_webhook or settings.spreadsheet_webhook


def format_items(order: Order) -> str:
    return ", ".join(f"{item.quantity}x {item.name}" for item in order.items)


def build_email_payload(order: Order, settings: Settings) -> Dict[str, Any]:
    return {
        "service_id": settings.emailjs_service_id,
        "template_id": settings.emailjs_template_id,
        "user_id": settings.emailjs_public_key,
        "template_params": {
            "order_id": order.id,
            "customer_name": order.customer_name,
            "customer_email": order.customer_email,
            "customer_phone": order.customer_phone,
            "address": order.address,
            "payment_method": order.payment_method,
            "items": format_items(order),
            "total_amount": f"${order.total:.2f}",
            "store_name": settings.store_name,
        },
    }


class NotificationDispatcher:
    def __init__(
        self,
        timeout: float = DEFAULT_TIMEOUT,
        email_endpoint: str = EMAILJS_ENDPOINT,
        executor: Optional[Executor] = None,
    ):
        self.timeout = timeout
        self.email_endpoint = email_endpoint
        self.executor = executor or _executor

    def dispatch(
        self, order: Order, settings: Settings, schedule: Optional[Callable[..., Any]] = None
    ) -> List[Future]:
        """Submit both deliveries for `order` without waiting on either.

        `schedule` is called as schedule(fn, *args), e.g. BackgroundTasks.add_task;
        without it each delivery is submitted to the executor. Returns the
        executor futures, if any.
        """
        futures = []
        for job in (self.send_order_email, self.send_order_webhook):
            try:
                if schedule is not None:
                    schedule(job, order, settings)
                else:
                    futures.append(self.executor.submit(job, order, settings))
            except Exception:
                logger.exception("Could not dispatch %s for order %s", job.__name__, order.id)
        return futures

    def send_order_email(self, order: Order, settings: Settings) -> None:
        if not email_configured(settings):
            logger.debug("EmailJS credentials not set, skipping email for order %s", order.id)
            return
        try:
            res = requests.post(self.email_endpoint, json=build_email_payload(order, settings), timeout=self.timeout)
            if not res.ok:
                logger.warning("EmailJS rejected order %s email: HTTP %s", order.id, res.status_code)
        except Exception:
            logger.exception("EmailJS failure for order %s", order.id)

    def send_order_webhook(self, order: Order, settings: Settings) -> None:
        url = webhook_url(settings)
        if not url:
            logger.debug("No webhook configured, skipping order %s", order.id)
            return
        try:
            # response is deliberately ignored
            requests.post(url, json=order.model_dump(mode="json", by_alias=True), timeout=self.timeout)
        except Exception:
            logger.exception("Webhook failure for order %s", order.id)


def ping_webhook(settings: Settings, timeout: float = DEFAULT_TIMEOUT) -> bool:
    """Post the sample record to the configured webhook.

    Returns False on a transport error. Only the primary webhook URL is
    checked here, matching what the admin console edits.
    """
    if not settings.email_webhook:
        raise WebhookNotConfigured("Please enter a Spreadsheet Webhook URL first!")
    try:
        requests.post(settings.email_webhook, json=SAMPLE_WEBHOOK_RECORD, timeout=timeout)
    except Exception:
        logger.exception("Webhook test failed for %s", settings.email_webhook)
        return False
    return True
