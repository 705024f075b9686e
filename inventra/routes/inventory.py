# inventra/routes/inventory.py
"""
Inventory page.

- Current stock per branch (with search)
- Stock history (audit trail), optionally filtered by product
- Manager actions: receive / adjust / sale / damage

Each action is one backend POST. Stock and history are re-read only after it
returns, via a redirect back to the page.
"""
from flask import Blueprint, abort, flash, redirect, render_template, request, url_for

from ..api_client import ApiError, get_api_client
from ..decorators import require_login
from ..services import inventory_service, reference_service
from ..services.inventory_service import STOCK_ACTIONS
from ..validation import ValidationError


inventory_bp = Blueprint("inventory", __name__, url_prefix="/inventory")

ACTION_LABELS = {
    "receive": "Stock received",
    "adjust": "Stock adjusted",
    "sale": "Sale recorded",
    "damage": "Damage recorded",
}


def _pick_branch(requested: str, branches) -> str:
    if requested and any(b.id == requested for b in branches):
        return requested
    return branches[0].id if branches else ""


def _render(branch_id: str, search: str, history_product_id: str, action=None, form=None, error=None):
    client = get_api_client()
    me, branches, products, items = None, [], [], []
    txns, history_error = [], None
    try:
        me = reference_service.current_user()
        branches = reference_service.active_branches()
        products = reference_service.active_products()
        branch_id = _pick_branch(branch_id, branches)
        if branch_id:
            items = inventory_service.list_stock(client, branch_id, search)
    except ApiError as e:
        error = error or e.message or "Failed to load"

    if branch_id and me is not None:
        try:
            txns = inventory_service.list_txns(client, branch_id, history_product_id or None)
        except ApiError as e:
            history_error = e.message or "Failed to load history"

    return render_template(
        "inventory.html",
        me=me,
        branches=branches,
        products=products,
        branch_id=branch_id,
        search=search,
        history_product_id=history_product_id,
        items=items,
        txns=txns,
        history_error=history_error,
        action=action,
        form=form or {},
        error=error,
    )


@inventory_bp.get("")
@require_login
def inventory_page():
    """
    Query params:
    - branchId: branch to show (defaults to the first active branch)
    - search: name / SKU / barcode
    - historyProductId: restrict stock history to one product
    """
    return _render(
        request.args.get("branchId", ""),
        request.args.get("search", ""),
        request.args.get("historyProductId", ""),
    )


@inventory_bp.post("/<action>")
@require_login
def stock_action(action: str):
    if action not in STOCK_ACTIONS:
        abort(404)

    branch_id = request.form.get("branchId", "")
    search = request.form.get("search", "")
    history_product_id = request.form.get("historyProductId", "")

    try:
        if not reference_service.current_user().is_manager:
            raise ValidationError("Only managers can change stock")
        inventory_service.apply_action(get_api_client(), action, branch_id, request.form)
    except (ApiError, ValidationError) as e:
        return _render(
            branch_id, search, history_product_id,
            action=action, form=request.form, error=str(e) or "Action failed",
        )

    flash(ACTION_LABELS[action], "ok")
    return redirect(url_for(
        "inventory.inventory_page",
        branchId=branch_id,
        search=search or None,
        historyProductId=history_product_id or None,
    ))
