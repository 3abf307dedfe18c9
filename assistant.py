"""
Product description helper backed by the Gemini REST API.

generate_description never raises: any failure yields a stock description.
"""

import logging
from typing import Optional

import requests

logger = logging.getLogger(__name__)

GEMINI_URL = "https://generativelanguage.googleapis.com/v1beta/models/{model}:generateContent"
DEFAULT_MODEL = "gemini-3-flash-preview"

FALLBACK_DESCRIPTION = "Standard professional product. High quality and durable."
EMPTY_DESCRIPTION = "No description generated."

PROMPT = (
    'Generate a short, professional, and compelling e-commerce product description for a product named "{name}" '
    'in the category "{category}". Keep it under 150 characters.'
)


def _response_text(data: dict) -> str:
    candidates = data.get("candidates") or []
    if not candidates:
        return ""
    parts = (candidates[0].get("content") or {}).get("parts") or []
    return "".join(part.get("text", "") for part in parts)


def generate_description(
    name: str,
    category: str,
    api_key: Optional[str] = None,
    model: str = DEFAULT_MODEL,
    timeout: float = 15.0,
) -> str:
    if not api_key:
        logger.warning("No Gemini API key configured, using fallback description")
        return FALLBACK_DESCRIPTION
    try:
        res = requests.post(
            GEMINI_URL.format(model=model),
            headers={"x-goog-api-key": api_key},
            json={"contents": [{"parts": [{"text": PROMPT.format(name=name, category=category)}]}]},
            timeout=timeout,
        )
        res.raise_for_status()
        text = _response_text(res.json())
    except Exception:
        logger.exception("Gemini error")
        return FALLBACK_DESCRIPTION
    return text.strip() or EMPTY_DESCRIPTION
