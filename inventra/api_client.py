# Overview: HTTP client for the Inventra REST backend (bearer auth, typed errors).

# inventra/api_client.py
from __future__ import annotations

import logging
from typing import Any, Dict, Optional

import httpx
from flask import current_app, g

from .token_store import TokenStore, session_token_store


logger = logging.getLogger(__name__)


class ApiError(Exception):
    """Raised when the backend answers with a non-success status or cannot be reached."""
    def __init__(self, message: str, status: int | None = None, payload: Any = None):
        super().__init__(message)
        self.message = message
        self.status = status
        self.payload = payload


def _error_message(response: httpx.Response) -> str:
    try:
        data = response.json()
    except ValueError:
        data = None
    if isinstance(data, dict):
        message = data.get("message")
        if isinstance(message, str) and message.strip():
            return message
    return f"API error: {response.status_code}"


class ApiClient:
    """
    Thin wrapper around httpx for backend calls.

    One attempt per call: no retry, no backoff. `timeout=None` leaves timing
    out to the transport.
    """

    def __init__(
        self,
        base_url: str,
        token_store: TokenStore,
        *,
        timeout: float | None = None,
        transport: httpx.BaseTransport | None = None,
    ):
        self.base_url = (base_url or "").rstrip("/")
        self.token_store = token_store
        self.client = httpx.Client(timeout=timeout, transport=transport)

    def _headers(self, extra: Optional[Dict[str, str]] = None) -> Dict[str, str]:
        """Build request headers; caller headers win on conflict."""
        headers = {"Content-Type": "application/json"}
        token = self.token_store.get_token()
        if token:
            headers["Authorization"] = f"Bearer {token}"
        if extra:
            headers.update(extra)
        return headers

    def call(
        self,
        path: str,
        method: str = "GET",
        *,
        json: Any = None,
        params: Optional[Dict[str, Any]] = None,
        headers: Optional[Dict[str, str]] = None,
    ) -> Any:
        """Issue one request and return the parsed JSON body."""
        url = f"{self.base_url}{path}"
        try:
            response = self.client.request(
                method,
                url,
                headers=self._headers(headers),
                json=json,
                params=_clean_params(params),
            )
        except httpx.HTTPError as exc:
            logger.warning("%s %s failed: %s", method, path, exc)
            raise ApiError(f"Could not reach the server: {exc}") from exc

        if not response.is_success:
            message = _error_message(response)
            logger.warning("%s %s -> %s: %s", method, path, response.status_code, message)
            raise ApiError(message, status=response.status_code, payload=_safe_json(response))

        if not response.content:
            return {}
        try:
            return response.json()
        except ValueError as exc:
            raise ApiError(f"Invalid JSON from {path}", status=response.status_code) from exc

    def get(self, path: str, params: Optional[Dict[str, Any]] = None, **kwargs) -> Any:
        return self.call(path, "GET", params=params, **kwargs)

    def post(self, path: str, json: Any = None, **kwargs) -> Any:
        return self.call(path, "POST", json=json, **kwargs)

    def put(self, path: str, json: Any = None, **kwargs) -> Any:
        return self.call(path, "PUT", json=json, **kwargs)

    def delete(self, path: str, **kwargs) -> Any:
        return self.call(path, "DELETE", **kwargs)

    def close(self):
        """Close the HTTP client."""
        self.client.close()


def _clean_params(params: Optional[Dict[str, Any]]) -> Optional[Dict[str, Any]]:
    # Empty filters are left off the query string
    if not params:
        return None
    cleaned = {k: v for k, v in params.items() if v is not None and v != ""}
    return cleaned or None


def _safe_json(response: httpx.Response) -> Any:
    try:
        return response.json()
    except ValueError:
        return None


def get_api_client() -> ApiClient:
    """API client for the current request, bound to the session token store."""
    if "api_client" not in g:
        g.api_client = ApiClient(
            current_app.config["API_BASE_URL"],
            session_token_store(),
            timeout=current_app.config.get("API_TIMEOUT"),
            transport=current_app.config.get("API_TRANSPORT"),
        )
    return g.api_client


def close_api_client(exc=None) -> None:
    client = g.pop("api_client", None)
    if client is not None:
        client.close()
