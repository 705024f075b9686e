# Overview: Bearer token holder backed by the browser session (or any mapping).

# inventra/token_store.py
"""
Token store.

The token is the only credential the frontend keeps. It is written at login,
cleared at logout and read on every authenticated backend call. Expiry is
enforced by the backend; the store never inspects the token.

The store is an explicit object handed to the API client, so tests and
concurrent sessions each get their own holder instead of sharing ambient state.
"""
from __future__ import annotations

from typing import MutableMapping, Optional

from flask import has_request_context, session


TOKEN_KEY = "inventra_token"


class TokenStore:
    """
    Read/write/clear a single bearer token.

    `storage` is the backing mapping. With no storage (no browser-like
    environment, e.g. outside a request) every operation is a no-op.
    Storage failures degrade to "no token" and are never raised.
    """

    def __init__(self, storage: Optional[MutableMapping] = None):
        self._storage = storage

    @property
    def available(self) -> bool:
        return self._storage is not None

    def set_token(self, token: str) -> None:
        if self._storage is None:
            return
        try:
            self._storage[TOKEN_KEY] = token
        except Exception:
            pass

    def get_token(self) -> Optional[str]:
        if self._storage is None:
            return None
        try:
            token = self._storage.get(TOKEN_KEY)
        except Exception:
            return None
        return token or None

    def clear_token(self) -> None:
        if self._storage is None:
            return
        try:
            self._storage.pop(TOKEN_KEY, None)
        except Exception:
            pass


def session_token_store() -> TokenStore:
    """Token store for the current request, or a no-op store outside one."""
    if not has_request_context():
        return TokenStore(None)
    return TokenStore(session)
