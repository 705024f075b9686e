"""
Inventory reads and stock actions.

Stock arithmetic happens on the backend. Each action here is a single POST;
the page reloads stock and history only after it returns.
"""

from __future__ import annotations

from typing import Mapping, Optional

from ..api_client import ApiClient
from ..schemas import StockItem, StockTxn, unwrap_list
from ..validation import ValidationError, optional_text, require_text, to_int


STOCK_ACTIONS = ("receive", "adjust", "sale", "damage")

DEFAULT_NOTES = {
    "adjust": "Manual adjustment",
    "sale": "Sale",
    "damage": "Damaged",
}


def list_stock(client: ApiClient, branch_id: str, search: Optional[str] = None) -> list[StockItem]:
    body = client.get("/inventory", params={"branchId": branch_id, "search": (search or "").strip()})
    return unwrap_list(body, "items", StockItem.from_payload)


def list_txns(client: ApiClient, branch_id: str, product_id: Optional[str] = None) -> list[StockTxn]:
    body = client.get("/inventory/txns", params={"branchId": branch_id, "productId": product_id})
    return unwrap_list(body, "txns", StockTxn.from_payload)


def build_action_payload(action: str, branch_id: str, form: Mapping[str, str]) -> dict:
    if action not in STOCK_ACTIONS:
        raise ValidationError(f"Unknown stock action: {action}")

    branch_id = require_text(branch_id, "Branch")
    product_id = require_text(form.get("productId"), "Product")
    payload = {"branchId": branch_id, "productId": product_id}

    if action == "adjust":
        payload["newQuantity"] = to_int(form.get("newQuantity"), "New quantity", minimum=0)
    else:
        payload["quantity"] = to_int(form.get("quantity"), "Quantity", minimum=1)

    note = optional_text(form.get("note")) or DEFAULT_NOTES.get(action)
    if note:
        payload["note"] = note
    return payload


def apply_action(client: ApiClient, action: str, branch_id: str, form: Mapping[str, str]) -> dict:
    payload = build_action_payload(action, branch_id, form)
    return client.post(f"/inventory/{action}", json=payload)
