"""Login / logout against the backend /auth endpoints."""

from __future__ import annotations

from ..api_client import ApiClient
from ..schemas import SchemaError
from ..validation import require_password, require_text
from .cart import discard_cart


def login(client: ApiClient, email: str, password: str, storage=None) -> str:
    """Exchange credentials for a token and store it. A previous user's cart is dropped."""
    email = require_text(email, "Email")
    password = require_password(password)

    # Any stale token must not ride along on the login request
    client.token_store.clear_token()
    if storage is not None:
        discard_cart(storage)
    body = client.post("/auth/login", json={"email": email, "password": password})

    token = body.get("token") if isinstance(body, dict) else None
    if not isinstance(token, str) or not token:
        raise SchemaError("Unexpected response: missing token")

    client.token_store.set_token(token)
    return token


def logout(client: ApiClient, storage) -> None:
    """Forget the token and any unsaved cart. No backend call is needed."""
    client.token_store.clear_token()
    discard_cart(storage)
