"""
Catalog mutations: products, categories and branches.

Reads go through reference_service; every mutation invalidates the cached list
it touched so the page reload shows the backend's view.
"""

from __future__ import annotations

from typing import Mapping
from urllib.parse import quote

from ..api_client import ApiClient
from ..validation import optional_text, require_text, to_price
from . import reference_service


def create_product(client: ApiClient, form: Mapping[str, str]) -> dict:
    payload = {
        "name": require_text(form.get("name"), "Name"),
        "sku": require_text(form.get("sku"), "SKU"),
        "unit": optional_text(form.get("unit")) or "PCS",
        "costPrice": to_price(form.get("costPrice"), "Cost price"),
        "sellingPrice": to_price(form.get("sellingPrice"), "Selling price"),
    }
    barcode = optional_text(form.get("barcode"))
    if barcode:
        payload["barcode"] = barcode
    category_id = optional_text(form.get("categoryId"))
    if category_id:
        payload["categoryId"] = category_id
    description = optional_text(form.get("description"))
    if description:
        payload["description"] = description

    body = client.post("/products", json=payload)
    reference_service.invalidate("products")
    return body


def deactivate_product(client: ApiClient, product_id: str) -> None:
    """Soft-deactivate; the backend keeps the product for history."""
    client.delete(f"/products/{quote(product_id, safe='')}")
    reference_service.invalidate("products")


def create_category(client: ApiClient, form: Mapping[str, str]) -> dict:
    payload = {"name": require_text(form.get("name"), "Name")}
    parent_id = optional_text(form.get("parentId"))
    if parent_id:
        payload["parentId"] = parent_id
    body = client.post("/categories", json=payload)
    reference_service.invalidate("categories")
    return body


def create_branch(client: ApiClient, form: Mapping[str, str]) -> dict:
    payload = {"name": require_text(form.get("name"), "Name")}
    address = optional_text(form.get("address"))
    if address:
        payload["address"] = address
    phone = optional_text(form.get("phone"))
    if phone:
        payload["phone"] = phone
    body = client.post("/branches", json=payload)
    reference_service.invalidate("branches")
    return body
