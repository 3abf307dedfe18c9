import logging
from typing import List, Optional

from fastapi import BackgroundTasks, Depends, FastAPI, Header, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel

import catalog
from assistant import generate_description
from catalog import ProductIn, ProductNotFound
from config import config
from database import JsonFileBackend, Store
from notifications import NotificationDispatcher, WebhookNotConfigured, ping_webhook
from payments import payment_uri, qr_image_url
from schemas import CamelModel, PaymentMethod, ShippingInfo
from state import AuthenticationError, EmptyCart, StoreState

logging.basicConfig(level=config.LOG_LEVEL, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
logger = logging.getLogger(__name__)

app = FastAPI(title="AuraCommerce API", version="1.0.0")

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# Helpers
_state: Optional[StoreState] = None


def get_state() -> StoreState:
    global _state
    if _state is None:
        store = Store(JsonFileBackend(config.DATA_DIR))
        dispatcher = NotificationDispatcher(timeout=config.NOTIFY_TIMEOUT, email_endpoint=config.EMAILJS_ENDPOINT)
        _state = StoreState(store, dispatcher)
        logger.info("Loaded %d products and %d orders from %s", len(_state.products), len(_state.orders), config.DATA_DIR)
    return _state


def require_admin(x_admin_token: Optional[str] = Header(None), state: StoreState = Depends(get_state)) -> StoreState:
    if not state.is_admin(x_admin_token):
        raise HTTPException(status_code=401, detail="Admin login required")
    return state


def dump(model: BaseModel) -> dict:
    return model.model_dump(mode="json", by_alias=True)


def cart_view(state: StoreState) -> dict:
    return {
        "items": [dump(it) for it in state.cart],
        "count": state.cart.count(),
        "total": state.cart.total(),
    }


@app.get("/")
def root():
    return {"name": "AuraCommerce", "status": "ok"}


# ============ Catalog ============
@app.get("/api/products", response_model=List[dict])
def list_products(category: str = catalog.ALL_CATEGORIES, q: str = "", state: StoreState = Depends(get_state)):
    return [dump(p) for p in catalog.visible(state.products, category, q)]


@app.get("/api/products/{product_id}", response_model=dict)
def get_product(product_id: str, state: StoreState = Depends(get_state)):
    try:
        return dump(catalog.find_product(state.products, product_id))
    except ProductNotFound:
        raise HTTPException(status_code=404, detail="Product not found")


@app.get("/api/categories", response_model=List[str])
def list_categories(state: StoreState = Depends(get_state)):
    return catalog.categories(state.products)


# ============ Cart ============
class AddToCart(BaseModel):
    product_id: str


class UpdateQuantity(BaseModel):
    delta: int


@app.get("/api/cart", response_model=dict)
def get_cart(state: StoreState = Depends(get_state)):
    return cart_view(state)


@app.post("/api/cart/items", response_model=dict)
def add_to_cart(payload: AddToCart, state: StoreState = Depends(get_state)):
    try:
        state.add_to_cart(payload.product_id)
    except ProductNotFound:
        raise HTTPException(status_code=404, detail="Product not found")
    return cart_view(state)


@app.patch("/api/cart/items/{product_id}", response_model=dict)
def update_cart_item(product_id: str, payload: UpdateQuantity, state: StoreState = Depends(get_state)):
    state.update_cart_quantity(product_id, payload.delta)
    return cart_view(state)


@app.delete("/api/cart/items/{product_id}", response_model=dict)
def remove_cart_item(product_id: str, state: StoreState = Depends(get_state)):
    state.remove_from_cart(product_id)
    return cart_view(state)


# ============ Checkout ============
class CheckoutRequest(ShippingInfo):
    payment_method: PaymentMethod = "online"


@app.get("/api/checkout/payment", response_model=dict)
def payment_details(state: StoreState = Depends(get_state)):
    total = state.cart.total()
    return {
        "total": total,
        "upi_url": payment_uri(state.settings, total),
        "qr_url": qr_image_url(state.settings, total),
        "gpay_id": state.settings.gpay_id,
    }


@app.post("/api/checkout", response_model=dict)
def checkout(payload: CheckoutRequest, background_tasks: BackgroundTasks, state: StoreState = Depends(get_state)):
    shipping = ShippingInfo.model_validate(payload.model_dump(exclude={"payment_method"}))
    try:
        order = state.checkout(shipping, payload.payment_method, schedule=background_tasks.add_task)
    except EmptyCart as e:
        raise HTTPException(status_code=400, detail=str(e))
    return dump(order)


# ============ Admin Auth (simple) ============
class LoginAdmin(BaseModel):
    password: str


@app.post("/api/admin/login")
def login_admin(payload: LoginAdmin, state: StoreState = Depends(get_state)):
    try:
        token = state.login(payload.password)
    except AuthenticationError as e:
        raise HTTPException(status_code=401, detail=str(e))
    return {"token": token}


@app.post("/api/admin/logout")
def logout_admin(state: StoreState = Depends(require_admin)):
    state.logout()
    return {"status": "ok"}


# ============ Admin Catalog ============
class DescribeProduct(BaseModel):
    name: str = ""
    category: str = ""


@app.get("/api/admin/products", response_model=List[dict])
def admin_list_products(state: StoreState = Depends(require_admin)):
    return [dump(p) for p in state.products]


@app.post("/api/admin/products", response_model=dict)
def admin_create_product(payload: ProductIn, state: StoreState = Depends(require_admin)):
    return dump(state.create_product(payload))


@app.put("/api/admin/products/{product_id}", response_model=dict)
def admin_update_product(product_id: str, payload: ProductIn, state: StoreState = Depends(require_admin)):
    try:
        return dump(state.update_product(product_id, payload))
    except ProductNotFound:
        raise HTTPException(status_code=404, detail="Product not found")


@app.delete("/api/admin/products/{product_id}")
def admin_delete_product(product_id: str, state: StoreState = Depends(require_admin)):
    try:
        state.delete_product(product_id)
    except ProductNotFound:
        raise HTTPException(status_code=404, detail="Product not found")
    return {"id": product_id}


@app.post("/api/admin/products/describe")
def admin_describe_product(payload: DescribeProduct, state: StoreState = Depends(require_admin)):
    if not payload.name or not payload.category:
        raise HTTPException(status_code=400, detail="Enter name and category first!")
    text = generate_description(payload.name, payload.category, api_key=config.GEMINI_API_KEY, model=config.GEMINI_MODEL)
    return {"description": text}


# ============ Admin Orders ============
@app.get("/api/admin/orders", response_model=List[dict])
def admin_list_orders(state: StoreState = Depends(require_admin)):
    return [dump(o) for o in state.orders]


# ============ Admin Settings ============
class SettingsUpdate(CamelModel):
    store_name: Optional[str] = None
    email_webhook: Optional[str] = None
    spreadsheet_webhook: Optional[str] = None
    admin_password: Optional[str] = None
    gpay_id: Optional[str] = None
    gpay_qr_url: Optional[str] = None
    emailjs_service_id: Optional[str] = None
    emailjs_template_id: Optional[str] = None
    emailjs_public_key: Optional[str] = None


@app.get("/api/admin/settings", response_model=dict)
def admin_get_settings(state: StoreState = Depends(require_admin)):
    return dump(state.settings)


@app.put("/api/admin/settings", response_model=dict)
def admin_update_settings(payload: SettingsUpdate, state: StoreState = Depends(require_admin)):
    changes = {k: v for k, v in payload.model_dump(exclude_unset=True).items() if v is not None}
    return dump(state.update_settings(changes))


@app.post("/api/admin/webhook/test")
def admin_test_webhook(state: StoreState = Depends(require_admin)):
    try:
        ok = ping_webhook(state.settings, timeout=config.NOTIFY_TIMEOUT)
    except WebhookNotConfigured as e:
        raise HTTPException(status_code=400, detail=str(e))
    return {"status": "success" if ok else "error"}


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=config.PORT)
