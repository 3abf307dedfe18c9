"""
Session cart: product id -> quantity, kept in insertion order.
"""

from typing import Iterator, List

from schemas import CartItem, Product


class Cart:
    def __init__(self):
        self._items: List[CartItem] = []

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[CartItem]:
        return iter(list(self._items))

    @property
    def items(self) -> List[CartItem]:
        return list(self._items)

    def _index(self, product_id: str) -> int:
        for i, item in enumerate(self._items):
            if item.id == product_id:
                return i
        return -1

    def add(self, product: Product) -> CartItem:
        i = self._index(product.id)
        if i >= 0:
            item = self._items[i]
            self._items[i] = item.model_copy(update={"quantity": item.quantity + 1})
        else:
            self._items.append(CartItem(**product.model_dump(exclude={"quantity"}), quantity=1))
            i = len(self._items) - 1
        return self._items[i]

    def remove(self, product_id: str) -> None:
        self._items = [item for item in self._items if item.id != product_id]

    def update_quantity(self, product_id: str, delta: int) -> None:
        i = self._index(product_id)
        if i < 0:
            return
        item = self._items[i]
        # decrementing never removes an item; use remove() for that
        self._items[i] = item.model_copy(update={"quantity": max(1, item.quantity + delta)})

    def clear(self) -> None:
        self._items = []

    def total(self) -> float:
        return sum((item.price * item.quantity for item in self._items), 0.0)

    def count(self) -> int:
        return sum(item.quantity for item in self._items)

    def snapshot(self) -> List[CartItem]:
        return [item.model_copy(deep=True) for item in self._items]
