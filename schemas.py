"""
Data Schemas for AuraCommerce (single-store demo storefront)

Each Pydantic model maps to one of the JSON documents kept in the key-value
store (see database.py). Attribute names are snake_case; the stored and wire
JSON use the camelCase names of the storefront (e.g. customer_name ->
"customerName"), so documents written by earlier versions load unchanged.

Storage slots:
- "aura_products": List[Product]
- "aura_orders":   List[Order], newest first
- "aura_settings": Settings
"""

from typing import List, Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


PaymentMethod = Literal["online", "store"]
OrderStatus = Literal["pending", "completed", "cancelled"]


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class Product(CamelModel):
    """
    Catalog entry
    Slot: "aura_products"
    """
    id: str = Field(..., description="Opaque id, assigned at creation")
    name: str = Field(..., description="Product name")
    description: str = Field("", description="Product description")
    price: float = Field(..., ge=0, description="Unit price")
    category: str = Field(..., description="Free-text category label")
    image: str = Field("", description="Image URL")
    stock: int = Field(0, ge=0, description="Units in stock")


class CartItem(Product):
    """Product snapshot taken when it was added to the cart."""
    quantity: int = Field(1, ge=1)


class ShippingInfo(CamelModel):
    customer_name: str = Field(..., min_length=1)
    customer_email: str = Field(..., min_length=1)
    customer_phone: str = Field(..., min_length=1)
    address: str = Field(..., min_length=1)


class Order(CamelModel):
    """
    Placed orders (append-only)
    Slot: "aura_orders"
    """
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    id: str
    customer_name: str
    customer_email: str
    customer_phone: str
    address: str
    items: List[CartItem]
    total: float = Field(..., ge=0, description="Sum of price x quantity, frozen at creation")
    payment_method: PaymentMethod
    status: OrderStatus = Field("pending", description="pending|completed|cancelled")
    created_at: str = Field(..., description="ISO-8601 UTC timestamp")


class Settings(CamelModel):
    """
    Store-wide settings (single document)
    Slot: "aura_settings"
    """
    store_name: str = "AuraCommerce"
    email_webhook: str = ""
    spreadsheet_webhook: str = ""
    admin_password: str = "admin"
    gpay_id: str = "yourname@okaxis"
    gpay_qr_url: str = ""
    emailjs_service_id: str = ""
    emailjs_template_id: str = ""
    emailjs_public_key: str = ""
