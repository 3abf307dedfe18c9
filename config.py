import os

from pydantic_settings import BaseSettings


class Config(BaseSettings):
    DATA_DIR: str = os.getenv("DATA_DIR", "data")
    # seconds; applies to the email and webhook calls made after checkout
    NOTIFY_TIMEOUT: float = float(os.getenv("NOTIFY_TIMEOUT", "5"))
    EMAILJS_ENDPOINT: str = os.getenv("EMAILJS_ENDPOINT", "https://api.emailjs.com/api/v1.0/email/send")
    GEMINI_API_KEY: str = os.getenv("GEMINI_API_KEY", os.getenv("API_KEY", ""))
    GEMINI_MODEL: str = os.getenv("GEMINI_MODEL", "gemini-3-flash-preview")
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")
    PORT: int = int(os.getenv("PORT", 8000))


config = Config()
