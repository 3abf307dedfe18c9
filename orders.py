"""
Order placement: snapshot the cart, persist the order, then notify.
"""

import logging
import random
import string
from datetime import datetime, timezone
from typing import Any, Callable, Optional

from cart import Cart
from database import Store
from notifications import NotificationDispatcher
from schemas import Order, PaymentMethod, Settings, ShippingInfo

logger = logging.getLogger(__name__)

ORDER_ID_ALPHABET = string.digits + string.ascii_uppercase


def generate_order_id(length: int = 9) -> str:
    # Short random id with no collision check against existing orders.
    return "".join(random.choices(ORDER_ID_ALPHABET, k=length))


def utc_timestamp() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def place_order(
    shipping: ShippingInfo,
    payment_method: PaymentMethod,
    cart: Cart,
    settings: Settings,
    store: Store,
    dispatcher: Optional[NotificationDispatcher] = None,
    schedule: Optional[Callable[..., Any]] = None,
) -> Order:
    """Create and persist an order from the current cart.

    The shipping fields are validated by ShippingInfo. The order counts as
    placed once it is stored; the cart is cleared right after. Notifications
    are submitted without waiting and their results never reach the caller.
    """
    items = cart.snapshot()
    order = Order(
        id=generate_order_id(),
        customer_name=shipping.customer_name,
        customer_email=shipping.customer_email,
        customer_phone=shipping.customer_phone,
        address=shipping.address,
        items=items,
        total=sum((item.price * item.quantity for item in items), 0.0),
        payment_method=payment_method,
        status="pending",
        created_at=utc_timestamp(),
    )
    store.append_order(order)
    cart.clear()
    logger.info("Order %s placed: %d item(s), total %.2f, %s", order.id, len(order.items), order.total, payment_method)

    dispatcher = dispatcher or NotificationDispatcher()
    try:
        dispatcher.dispatch(order, settings, schedule=schedule)
    except Exception:
        logger.exception("Notification dispatch failed for order %s", order.id)
    return order
