"""
GPay / UPI payment links for the online payment option.
"""

from urllib.parse import quote

from schemas import Settings

QR_SERVICE_URL = "https://api.qrserver.com/v1/create-qr-code/?size=300x300&data="

# characters left alone by JavaScript's encodeURIComponent
_URI_COMPONENT_SAFE = "-_.!~*'()"


def encode_component(value: str) -> str:
    return quote(value, safe=_URI_COMPONENT_SAFE)


def payment_uri(settings: Settings, amount: float) -> str:
    return f"upi://pay?pa={settings.gpay_id}&pn={encode_component(settings.store_name)}&am={amount:.2f}&cu=USD"


def qr_image_url(settings: Settings, amount: float) -> str:
    """A custom QR image from settings wins over the generated one."""
    if settings.gpay_qr_url:
        return settings.gpay_qr_url
    return QR_SERVICE_URL + encode_component(payment_uri(settings, amount))
