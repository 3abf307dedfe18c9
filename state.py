"""
In-memory application state for one storefront session.

StoreState keeps a single copy of the catalog, order history and settings,
plus the session cart and admin session. Every accepted action that changes
catalog, orders or settings is written back to the Store before returning.
"""

import base64
import json
import logging
import secrets
import threading
from typing import Any, Callable, Dict, List, Optional

import catalog
from cart import Cart
from catalog import ProductIn
from database import Store
from notifications import NotificationDispatcher
from orders import place_order
from schemas import CartItem, Order, PaymentMethod, Product, Settings, ShippingInfo

logger = logging.getLogger(__name__)


class AuthenticationError(Exception):
    pass


class EmptyCart(ValueError):
    pass


def make_token(store_name: str) -> str:
    payload = {"store": store_name, "role": "admin", "nonce": secrets.token_hex(8)}
    raw = json.dumps(payload).encode()
    return base64.urlsafe_b64encode(raw).decode()


class StoreState:
    def __init__(self, store: Store, dispatcher: Optional[NotificationDispatcher] = None):
        self.store = store
        self.dispatcher = dispatcher or NotificationDispatcher()
        self.products: List[Product] = store.load_products()
        self.orders: List[Order] = store.load_orders()
        self.settings: Settings = store.load_settings()
        self.cart = Cart()
        self._admin_token: Optional[str] = None
        # sync routes run in a threadpool; actions are applied one at a time
        self._lock = threading.RLock()

    # ============ Cart ============
    def add_to_cart(self, product_id: str) -> CartItem:
        with self._lock:
            return self.cart.add(catalog.find_product(self.products, product_id))

    def remove_from_cart(self, product_id: str) -> None:
        with self._lock:
            self.cart.remove(product_id)

    def update_cart_quantity(self, product_id: str, delta: int) -> None:
        with self._lock:
            self.cart.update_quantity(product_id, delta)

    def checkout(
        self,
        shipping: ShippingInfo,
        payment_method: PaymentMethod,
        schedule: Optional[Callable[..., Any]] = None,
    ) -> Order:
        with self._lock:
            if not len(self.cart):
                raise EmptyCart("Cart is empty")
            order = place_order(shipping, payment_method, self.cart, self.settings, self.store, self.dispatcher, schedule)
            self.orders = [order] + self.orders
            return order

    # ============ Admin session ============
    def login(self, password: str) -> str:
        with self._lock:
            if password != self.settings.admin_password:
                logger.info("Rejected admin login")
                raise AuthenticationError("Incorrect admin password. Please try again.")
            self._admin_token = make_token(self.settings.store_name)
            return self._admin_token

    def logout(self) -> None:
        with self._lock:
            self._admin_token = None

    def is_admin(self, token: Optional[str]) -> bool:
        admin_token = self._admin_token
        if not token or admin_token is None:
            return False
        return secrets.compare_digest(token, admin_token)

    # ============ Catalog ============
    def _set_products(self, products: List[Product]) -> None:
        self.products = list(products)
        self.store.save_products(self.products)

    def create_product(self, data: ProductIn) -> Product:
        with self._lock:
            products, product = catalog.create_product(self.products, data)
            self._set_products(products)
            return product

    def update_product(self, product_id: str, data: ProductIn) -> Product:
        with self._lock:
            products, product = catalog.update_product(self.products, product_id, data)
            self._set_products(products)
            return product

    def delete_product(self, product_id: str) -> None:
        with self._lock:
            self._set_products(catalog.delete_product(self.products, product_id))

    # ============ Settings ============
    def update_settings(self, changes: Dict[str, Any]) -> Settings:
        with self._lock:
            merged = {**self.settings.model_dump(), **changes}
            self.settings = Settings.model_validate(merged)
            self.store.save_settings(self.settings)
            return self.settings
