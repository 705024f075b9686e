# Overview: Invoice history, invoice details with reprint, plain-text receipt download.

from flask import Blueprint, Response, current_app, render_template, request

from ..api_client import ApiError, get_api_client
from ..decorators import require_login
from ..schemas import attempt
from ..services import invoice_service, reference_service
from ..services.receipt import build_receipt, render_receipt_text


invoices_bp = Blueprint("invoices", __name__, url_prefix="/invoices")


@invoices_bp.get("")
@require_login
def list_invoices():
    """
    Query params:
    - branchId: empty = all branches
    - search: invoice number (e.g. INV-000001)
    - take: 50 / 100 / 200
    """
    choices = current_app.config["INVOICE_TAKE_CHOICES"]
    branch_id = request.args.get("branchId", "")
    search = request.args.get("search", "").strip()
    take = invoice_service.normalize_take(request.args.get("take"), choices)

    branches, invoices, error = [], [], None
    try:
        branches = reference_service.active_branches()
        invoices = invoice_service.list_invoices(
            get_api_client(), branch_id=branch_id, search=search, take=take
        )
    except ApiError as e:
        error = e.message or "Failed to load invoices"

    return render_template(
        "invoices.html",
        branches=branches,
        branch_id=branch_id,
        search=search,
        take=take,
        take_choices=choices,
        invoices=invoices,
        error=error,
    )


@invoices_bp.get("/<public_id>")
@require_login
def invoice_details(public_id: str):
    result = attempt(
        lambda: invoice_service.get_invoice(get_api_client(), public_id), "Failed to load invoice"
    )
    if not result.ok:
        return render_template("invoice_detail.html", public_id=public_id, receipt=None, error=result.message)

    receipt = build_receipt(result.value, current_app.config["CURRENCY_LABEL"])
    return render_template("invoice_detail.html", public_id=public_id, receipt=receipt, error=None)


@invoices_bp.get("/<public_id>/receipt.txt")
@require_login
def invoice_receipt_text(public_id: str):
    try:
        invoice = invoice_service.get_invoice(get_api_client(), public_id)
    except ApiError as e:
        return Response(f"{e.message}\n", status=e.status or 502, mimetype="text/plain")

    receipt = build_receipt(invoice, current_app.config["CURRENCY_LABEL"])
    return Response(render_receipt_text(receipt), mimetype="text/plain")
