"""User administration (manager only on the backend side as well)."""

from __future__ import annotations

from typing import Mapping, Optional
from urllib.parse import quote

from ..api_client import ApiClient
from ..schemas import ROLE_EMPLOYEE, ROLES, User, unwrap_list
from ..validation import ValidationError, check_password, require_text


def list_users(client: ApiClient, search: Optional[str] = None, take: int = 100) -> list[User]:
    body = client.get("/users", params={"search": (search or "").strip(), "take": str(take)})
    return unwrap_list(body, "users", User.from_payload)


def _role(value) -> str:
    role = (value or ROLE_EMPLOYEE).strip().upper()
    if role not in ROLES:
        raise ValidationError(f"Unknown role: {value}")
    return role


def create_user(client: ApiClient, form: Mapping[str, str], min_password: int) -> dict:
    payload = {
        "name": require_text(form.get("name"), "Name"),
        "email": require_text(form.get("email"), "Email").lower(),
        "password": check_password(form.get("password"), min_password, trim=False),
        "role": _role(form.get("role")),
    }
    return client.post("/users", json=payload)


def update_user(client: ApiClient, user_id: str, form: Mapping[str, str]) -> dict:
    """Partial update: only fields present in the form are sent."""
    patch = {}
    if "name" in form:
        patch["name"] = require_text(form.get("name"), "Name")
    if "role" in form:
        patch["role"] = _role(form.get("role"))
    if "isActive" in form:
        patch["isActive"] = form.get("isActive") in ("1", "true", "on", "yes")
    if not patch:
        raise ValidationError("Nothing to update")
    return client.put(f"/users/{quote(user_id, safe='')}", json=patch)


def reset_password(client: ApiClient, user_id: str, new_password: str, min_password: int) -> dict:
    new_password = check_password(new_password, min_password)
    return client.post(f"/users/{quote(user_id, safe='')}/reset-password", json={"newPassword": new_password})
