"""
Key-value persistence for the storefront.

Three named slots hold the catalog, the order history (newest first) and the
store settings as JSON. A slot that is absent, or whose contents do not parse
into the expected model, reads back as its default.
"""

import logging
import os
import tempfile
import threading
from typing import Any, Dict, List, Optional, Union

from pydantic import TypeAdapter, ValidationError

from schemas import Order, Product, Settings

logger = logging.getLogger(__name__)

KEYS = {
    "products": "aura_products",
    "orders": "aura_orders",
    "settings": "aura_settings",
}

DEFAULT_PRODUCTS = [
    Product(
        id="1",
        name="Minimalist Quartz Watch",
        description="A timeless piece with a sleek stainless steel finish and premium leather strap.",
        price=129.99,
        category="Accessories",
        image="https://picsum.photos/seed/watch/600/600",
        stock=15,
    ),
    Product(
        id="2",
        name="Premium Wireless Headphones",
        description="Noise-canceling technology with 40 hours of battery life and studio-quality sound.",
        price=249.50,
        category="Electronics",
        image="https://picsum.photos/seed/audio/600/600",
        stock=8,
    ),
    Product(
        id="3",
        name="Organic Cotton Tee",
        description="Breathable, sustainable, and incredibly soft. Perfect for everyday comfort.",
        price=35.00,
        category="Apparel",
        image="https://picsum.photos/seed/shirt/600/600",
        stock=50,
    ),
]

_ADAPTERS: Dict[str, TypeAdapter] = {
    "products": TypeAdapter(List[Product]),
    "orders": TypeAdapter(List[Order]),
    "settings": TypeAdapter(Settings),
}


def default_value(entity: str) -> Any:
    if entity == "products":
        return [p.model_copy(deep=True) for p in DEFAULT_PRODUCTS]
    if entity == "orders":
        return []
    if entity == "settings":
        return Settings()
    raise KeyError(f"Unknown entity: {entity}")


# ============ Backends ============
class MemoryBackend:
    """Process-local backend, mostly for tests."""

    def __init__(self, data: Optional[Dict[str, str]] = None):
        self.data: Dict[str, Union[str, bytes]] = dict(data or {})

    def read(self, key: str) -> Optional[Union[str, bytes]]:
        return self.data.get(key)

    def write(self, key: str, raw: str) -> None:
        self.data[key] = raw


class JsonFileBackend:
    """One `<key>.json` file per slot inside `directory`."""

    def __init__(self, directory: str):
        self.directory = directory

    def path(self, key: str) -> str:
        return os.path.join(self.directory, f"{key}.json")

    def read(self, key: str) -> Optional[bytes]:
        try:
            with open(self.path(key), "rb") as fh:
                return fh.read()
        except FileNotFoundError:
            return None

    def write(self, key: str, raw: str) -> None:
        os.makedirs(self.directory, exist_ok=True)
        fd, tmp_path = tempfile.mkstemp(dir=self.directory, prefix=f".{key}.", suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                fh.write(raw)
                fh.flush()
                os.fsync(fh.fileno())
            os.replace(tmp_path, self.path(key))
        except BaseException:
            if os.path.exists(tmp_path):
                os.unlink(tmp_path)
            raise


# ============ Store ============
class Store:
    def __init__(self, backend):
        self.backend = backend
        # guards read-modify-write of a slot
        self._lock = threading.RLock()

    def load(self, entity: str) -> Any:
        key = KEYS[entity]
        raw = self.backend.read(key)
        if not raw:
            return default_value(entity)
        try:
            return _ADAPTERS[entity].validate_json(raw)
        except ValidationError as e:
            logger.warning("Stored %s is malformed, using defaults (%d errors)", key, e.error_count())
            return default_value(entity)

    def save(self, entity: str, value: Any) -> None:
        key = KEYS[entity]
        raw = _ADAPTERS[entity].dump_json(value, by_alias=True).decode("utf-8")
        with self._lock:
            self.backend.write(key, raw)

    def load_products(self) -> List[Product]:
        return self.load("products")

    def save_products(self, products: List[Product]) -> None:
        self.save("products", products)

    def load_orders(self) -> List[Order]:
        return self.load("orders")

    def save_orders(self, orders: List[Order]) -> None:
        self.save("orders", orders)

    def append_order(self, order: Order) -> None:
        with self._lock:
            self.save("orders", [order] + self.load("orders"))

    def load_settings(self) -> Settings:
        return self.load("settings")

    def save_settings(self, settings: Settings) -> None:
        self.save("settings", settings)
