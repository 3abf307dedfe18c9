"""
Catalog browsing and admin catalog edits.

All functions are pure: they take the current product list and return a new
one; persisting the result is the caller's job.
"""

import random
import time
from typing import List, Tuple

from pydantic import BaseModel, Field

from schemas import Product

ALL_CATEGORIES = "All"


class ProductNotFound(LookupError):
    pass


def random_image() -> str:
    return f"https://picsum.photos/seed/{random.random()}/600/600"


class ProductIn(BaseModel):
    """Admin product form (everything but the id)."""
    name: str = Field(..., min_length=1)
    description: str = ""
    price: float = Field(0, ge=0)
    category: str = ""
    image: str = Field(default_factory=random_image)
    stock: int = Field(0, ge=0)


def generate_product_id() -> str:
    # Millisecond timestamp; two products created in the same millisecond collide.
    return str(int(time.time() * 1000))


def categories(products: List[Product]) -> List[str]:
    seen = [ALL_CATEGORIES]
    for p in products:
        if p.category not in seen:
            seen.append(p.category)
    return seen


def visible(products: List[Product], active_category: str = ALL_CATEGORIES, search_query: str = "") -> List[Product]:
    q = search_query.lower()
    out = []
    for p in products:
        if active_category != ALL_CATEGORIES and p.category != active_category:
            continue
        if q and q not in p.name.lower() and q not in p.category.lower():
            continue
        out.append(p)
    return out


def find_product(products: List[Product], product_id: str) -> Product:
    for p in products:
        if p.id == product_id:
            return p
    raise ProductNotFound(product_id)


def create_product(products: List[Product], data: ProductIn) -> Tuple[List[Product], Product]:
    product = Product(id=generate_product_id(), **data.model_dump())
    return [product] + list(products), product


def update_product(products: List[Product], product_id: str, data: ProductIn) -> Tuple[List[Product], Product]:
    current = find_product(products, product_id)
    fields = data.model_dump()
    if "image" not in data.model_fields_set:
        fields["image"] = current.image
    updated = Product(id=product_id, **fields)
    return [updated if p.id == product_id else p for p in products], updated


def delete_product(products: List[Product], product_id: str) -> List[Product]:
    find_product(products, product_id)
    return [p for p in products if p.id != product_id]
