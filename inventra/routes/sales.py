# Overview: Sales (billing) page: product picker, cart, checkout and receipt.

# inventra/routes/sales.py
"""
Sales page.

The cart lives in the session while the user stays on this page; any other page,
login, logout or a successful checkout drops it. Checkout is one POST
/sales/checkout with the unit prices captured when each product was added.
"""

from flask import Blueprint, current_app, redirect, render_template, request, session, url_for

from ..api_client import ApiError, get_api_client
from ..decorators import require_login
from ..services import reference_service
from ..services.cart import discard_cart, load_cart, save_cart
from ..services.checkout import CheckoutFlow
from ..services.receipt import build_receipt


sales_bp = Blueprint("sales", __name__, url_prefix="/sales")

BRANCH_KEY = "inventra_sale_branch"
LAST_INVOICE_KEY = "inventra_last_invoice"


def _selected_branch(requested: str, branches) -> str:
    for candidate in (requested, session.get(BRANCH_KEY)):
        if candidate and any(b.id == candidate for b in branches):
            return candidate
    return branches[0].id if branches else ""


def _filter_products(products, search: str, limit: int):
    return [p for p in products if p.is_active and p.matches(search)][:limit]


def _render(branch_id: str = "", search: str = "", note: str = "", error=None, ok=None, receipt=None):
    me, branches, picker = None, [], []
    try:
        me = reference_service.current_user()
        branches = reference_service.active_branches()
        picker = _filter_products(
            reference_service.products(), search, current_app.config["PRODUCT_PICKER_LIMIT"]
        )
    except ApiError as e:
        error = error or e.message or "Failed to load"

    branch_id = _selected_branch(branch_id, branches) if branches else branch_id
    if branch_id:
        session[BRANCH_KEY] = branch_id

    cart = load_cart(session)
    return render_template(
        "sales.html",
        me=me,
        branches=branches,
        branch_id=branch_id,
        search=search,
        products=picker,
        cart=cart,
        note=note,
        error=error,
        ok=ok,
        receipt=receipt,
        last_invoice_id=session.get(LAST_INVOICE_KEY),
    )


def _back_to_page():
    return redirect(url_for(
        "sales.sales_page",
        branchId=request.form.get("branchId") or None,
        search=request.form.get("search") or None,
    ))


@sales_bp.get("")
@require_login
def sales_page():
    return _render(request.args.get("branchId", ""), request.args.get("search", ""))


@sales_bp.post("/cart/add")
@require_login
def cart_add():
    product_id = request.form.get("productId", "")
    try:
        product = reference_service.find_product(product_id)
    except ApiError as e:
        return _render(request.form.get("branchId", ""), request.form.get("search", ""), error=e.message)

    if product is None or not product.is_active:
        return _render(
            request.form.get("branchId", ""), request.form.get("search", ""),
            error="Product not found",
        )

    cart = load_cart(session)
    cart.add(product)
    save_cart(session, cart)
    return _back_to_page()


@sales_bp.post("/cart/quantity")
@require_login
def cart_quantity():
    cart = load_cart(session)
    cart.set_quantity(request.form.get("productId", ""), request.form.get("qty"))
    save_cart(session, cart)
    return _back_to_page()


@sales_bp.post("/cart/remove")
@require_login
def cart_remove():
    cart = load_cart(session)
    cart.remove(request.form.get("productId", ""))
    save_cart(session, cart)
    return _back_to_page()


@sales_bp.post("/checkout")
@require_login
def checkout():
    """
    Submit the cart.

    Success: cart and note are cleared and the receipt is shown.
    Failure: cart and note stay as they were so the user can fix and retry.

    Each request gets its own CheckoutFlow, so a double submit is stopped by
    the form disabling its button while the POST is in flight.
    """
    branch_id = request.form.get("branchId", "")
    search = request.form.get("search", "")
    note = request.form.get("note", "")
    cart = load_cart(session)

    flow = CheckoutFlow(get_api_client())
    try:
        outcome = flow.submit(cart, branch_id, note)
    except Exception:
        current_app.logger.exception("Checkout failed")
        return _render(branch_id, search, note=note, error="Checkout failed")

    if not outcome.ok:
        return _render(branch_id, search, note=note, error=outcome.message)

    discard_cart(session)
    if outcome.invoice.public_id:
        session[LAST_INVOICE_KEY] = outcome.invoice.public_id
    # Stock figures may have moved; nothing cached from before the sale is reused
    reference_service.invalidate()

    receipt = build_receipt(outcome.invoice, current_app.config["CURRENCY_LABEL"])
    return _render(branch_id, search, note="", ok=outcome.message, receipt=receipt)
