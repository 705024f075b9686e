"""Invoice history and reprint lookups."""

from __future__ import annotations

from typing import Optional, Sequence
from urllib.parse import quote

from ..api_client import ApiClient
from ..schemas import Invoice, InvoiceRow, unwrap, unwrap_list


def normalize_take(value, choices: Sequence[int]) -> int:
    """Page size from the query string; anything unexpected falls back to the smallest."""
    try:
        take = int(value)
    except (TypeError, ValueError):
        return choices[0]
    return take if take in choices else choices[0]


def list_invoices(
    client: ApiClient,
    *,
    branch_id: Optional[str] = None,
    search: Optional[str] = None,
    take: int = 50,
) -> list[InvoiceRow]:
    params = {
        "branchId": branch_id or None,
        "search": (search or "").strip(),
        "take": str(take),
    }
    body = client.get("/invoices", params=params)
    return unwrap_list(body, "invoices", InvoiceRow.from_payload)


def get_invoice(client: ApiClient, public_id: str) -> Invoice:
    body = client.get(f"/invoices/{quote(public_id, safe='')}")
    return unwrap(body, "invoice", Invoice.from_payload)
