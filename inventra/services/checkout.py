"""
Checkout flow.

Turns a cart into one POST /sales/checkout call. The backend applies the stock
decrement and assigns the invoice number; the frontend only validates, submits
the locked-in prices and reports the outcome.

States: IDLE -> VALIDATING -> SUBMITTING -> (SUCCESS | FAILURE) -> IDLE
"""
from __future__ import annotations

import enum
import logging
from dataclasses import dataclass
from typing import Optional

from ..api_client import ApiClient, ApiError
from ..schemas import Invoice, unwrap
from .cart import Cart


logger = logging.getLogger(__name__)

PENDING_INVOICE_NO = "INV-PENDING"


class CheckoutState(enum.Enum):
    IDLE = "idle"
    VALIDATING = "validating"
    SUBMITTING = "submitting"
    SUCCESS = "success"
    FAILURE = "failure"


class CheckoutBusy(Exception):
    """A checkout is already in flight on this flow."""


@dataclass(frozen=True)
class CheckoutOutcome:
    ok: bool
    message: str
    invoice: Optional[Invoice] = None
    submitted: bool = False  # False when validation stopped it before any call


def build_payload(cart: Cart, branch_id: str, note: Optional[str]) -> dict:
    """Checkout body with unit prices taken from the cart snapshot."""
    payload = {
        "branchId": branch_id,
        "items": [
            {
                "productId": line.product_id,
                "qty": line.quantity,
                "unitPrice": line.unit_price,
            }
            for line in cart
        ],
    }
    note = (note or "").strip()
    if note:
        payload["note"] = note
    return payload


class CheckoutFlow:
    def __init__(self, client: ApiClient):
        self.client = client
        self.state = CheckoutState.IDLE
        self.history: list[CheckoutState] = []

    def _enter(self, state: CheckoutState) -> None:
        self.state = state
        self.history.append(state)

    def submit(self, cart: Cart, branch_id: Optional[str], note: Optional[str] = None) -> CheckoutOutcome:
        """
        Run one checkout attempt.

        The cart is never mutated here; on success the caller discards it.
        """
        if self.state is not CheckoutState.IDLE:
            raise CheckoutBusy("Checkout already in progress")

        if not branch_id:
            return CheckoutOutcome(ok=False, message="Please select a branch")
        if not cart:
            return CheckoutOutcome(ok=False, message="Cart is empty")

        self._enter(CheckoutState.VALIDATING)
        payload = build_payload(cart, branch_id, note)

        self._enter(CheckoutState.SUBMITTING)
        try:
            body = self.client.post("/sales/checkout", json=payload)
            invoice = unwrap(body, "invoice", Invoice.from_payload)
        except ApiError as exc:
            self._enter(CheckoutState.FAILURE)
            logger.info("Checkout failed for branch %s: %s", branch_id, exc.message)
            outcome = CheckoutOutcome(ok=False, message=exc.message or "Checkout failed", submitted=True)
        else:
            self._enter(CheckoutState.SUCCESS)
            number = invoice.invoice_no or PENDING_INVOICE_NO
            outcome = CheckoutOutcome(
                ok=True,
                message=f"Sale completed: {number}",
                invoice=invoice,
                submitted=True,
            )
        finally:
            if self.state is not CheckoutState.IDLE:
                self._enter(CheckoutState.IDLE)
        return outcome
