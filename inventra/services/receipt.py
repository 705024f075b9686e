# Overview: Printable receipt view model built from an invoice; no I/O.

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional

from ..schemas import Invoice
from ..time_utils import format_datetime
from .checkout import PENDING_INVOICE_NO


RECEIPT_FOOTER = "Thank you! Please come again."


def format_money(value: Any, currency: str = "Rs") -> str:
    try:
        number = value if isinstance(value, (int, float)) and not isinstance(value, bool) else float(value or 0)
    except (TypeError, ValueError):
        number = 0
    if isinstance(number, float) and number.is_integer():
        number = int(number)
    return f"{currency} {number}"


@dataclass(frozen=True)
class ReceiptLine:
    name: str
    sku: str
    detail: str  # "2 PCS x Rs 100"
    total: str


@dataclass(frozen=True)
class Receipt:
    shop_name: str
    shop_address: Optional[str]
    shop_phone: Optional[str]
    invoice_no: str
    date: str
    cashier: str
    cashier_role: str
    note: Optional[str]
    lines: tuple
    grand_total: str
    footer: str = RECEIPT_FOOTER


def build_receipt(invoice: Invoice, currency: str = "Rs") -> Receipt:
    lines = tuple(
        ReceiptLine(
            name=item.product.name,
            sku=item.product.sku,
            detail=f"{item.qty} {item.product.unit} x {format_money(item.unit_price, currency)}",
            total=format_money(item.line_total, currency),
        )
        for item in invoice.items
    )
    return Receipt(
        shop_name=invoice.branch.name,
        shop_address=invoice.branch.address or None,
        shop_phone=invoice.branch.phone or None,
        invoice_no=invoice.invoice_no or PENDING_INVOICE_NO,
        date=format_datetime(invoice.created_at),
        cashier=invoice.created_by.name,
        cashier_role=invoice.created_by.role,
        note=invoice.note or None,
        lines=lines,
        grand_total=format_money(invoice.total, currency),
    )


def render_receipt_text(receipt: Receipt, width: int = 40) -> str:
    """Plain-text receipt for terminals and downloads."""
    rule = "-" * width
    out = [receipt.shop_name.center(width).rstrip()]
    if receipt.shop_address:
        out.append(receipt.shop_address.center(width).rstrip())
    if receipt.shop_phone:
        out.append(f"Phone: {receipt.shop_phone}".center(width).rstrip())
    out.append(rule)
    out.append(f"Invoice: {receipt.invoice_no}")
    out.append(f"Date: {receipt.date}")
    cashier = receipt.cashier
    if receipt.cashier_role:
        cashier = f"{cashier} ({receipt.cashier_role})"
    out.append(f"Cashier: {cashier}")
    if receipt.note:
        out.append(f"Note: {receipt.note}")
    out.append(rule)
    for line in receipt.lines:
        out.append(line.name)
        left = f"  {line.sku} {line.detail}"
        pad = max(1, width - len(left) - len(line.total))
        out.append(f"{left}{' ' * pad}{line.total}")
    out.append(rule)
    label = "Grand Total"
    pad = max(1, width - len(label) - len(receipt.grand_total))
    out.append(f"{label}{' ' * pad}{receipt.grand_total}")
    out.append("")
    out.append(receipt.footer.center(width).rstrip())
    return "\n".join(out) + "\n"
