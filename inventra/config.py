# inventra/config.py
from __future__ import annotations
import os


def _env_float(key: str) -> float | None:
    raw = os.environ.get(key, "").strip()
    if not raw:
        return None
    return float(raw)


class Config:
    # Signs the session cookie that carries the bearer token and the cart
    SECRET_KEY = os.environ.get("SECRET_KEY", "dev-secret-key-change-me")

    # Backend REST API (all /auth, /products, /sales ... endpoints live here)
    API_BASE_URL = os.environ.get("INVENTRA_API_BASE_URL", "http://localhost:4000")

    # None = no client-side timeout, the transport decides
    API_TIMEOUT = _env_float("INVENTRA_API_TIMEOUT")

    # Test hook: an httpx transport (e.g. httpx.MockTransport)
    API_TRANSPORT = None

    CURRENCY_LABEL = os.environ.get("INVENTRA_CURRENCY", "Rs")

    PRODUCT_PICKER_LIMIT = 50
    INVOICE_TAKE_CHOICES = (50, 100, 200)
    USER_LIST_TAKE = 100
    MIN_PASSWORD_LENGTH = 6
    REPORT_DEFAULT_DAYS = 7

    LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")
