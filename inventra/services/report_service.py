"""Manager reports; every figure is computed by the backend."""

from __future__ import annotations

from typing import Optional

from ..api_client import ApiClient
from ..schemas import LowStockRow, SalesSummary, StockValuation, TopProductRow, unwrap_list
from ..validation import to_int


def _range_params(date_from: Optional[str], date_to: Optional[str], branch_id: Optional[str]) -> dict:
    return {"from": date_from, "to": date_to, "branchId": branch_id}


def sales_summary(client: ApiClient, date_from=None, date_to=None, branch_id=None) -> SalesSummary:
    body = client.get("/reports/sales-summary", params=_range_params(date_from, date_to, branch_id))
    return SalesSummary.from_payload(body)


def top_products(client: ApiClient, date_from=None, date_to=None, branch_id=None) -> list[TopProductRow]:
    body = client.get("/reports/top-products", params=_range_params(date_from, date_to, branch_id))
    return unwrap_list(body, "top", TopProductRow.from_payload)


def top_selling(client: ApiClient, date_from=None, date_to=None, branch_id=None) -> list[TopProductRow]:
    body = client.get("/reports/top-selling", params=_range_params(date_from, date_to, branch_id))
    return unwrap_list(body, "top", TopProductRow.from_payload)


def low_stock(client: ApiClient, branch_id=None, threshold=None) -> list[LowStockRow]:
    params = {"branchId": branch_id}
    if threshold not in (None, ""):
        params["threshold"] = str(to_int(threshold, "Threshold", minimum=0))
    body = client.get("/reports/low-stock", params=params)
    return unwrap_list(body, "items", LowStockRow.from_payload)


def stock_valuation(client: ApiClient, branch_id=None) -> StockValuation:
    body = client.get("/reports/stock-valuation", params={"branchId": branch_id})
    return StockValuation.from_payload(body)
