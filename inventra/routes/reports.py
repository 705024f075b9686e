from flask import Blueprint, current_app, render_template, request

from ..api_client import ApiError, get_api_client
from ..decorators import require_login, require_manager
from ..services import reference_service, report_service
from ..time_utils import default_report_range
from ..validation import ValidationError


reports_bp = Blueprint("reports", __name__, url_prefix="/reports")

NO_PERMISSION = "You don't have permission to view reports."


@reports_bp.get("")
@require_login
@require_manager("Reports", NO_PERMISSION)
def sales_reports():
    default_from, default_to = default_report_range(current_app.config["REPORT_DEFAULT_DAYS"])
    date_from = request.args.get("from", default_from)
    date_to = request.args.get("to", default_to)
    branch_id = request.args.get("branchId", "")

    client = get_api_client()
    branches, summary, top, top_selling, error = [], None, [], [], None
    try:
        branches = reference_service.active_branches()
        summary = report_service.sales_summary(client, date_from, date_to, branch_id)
        top = report_service.top_products(client, date_from, date_to, branch_id)
        top_selling = report_service.top_selling(client, date_from, date_to, branch_id)
    except ApiError as e:
        error = e.message or "Failed to load reports"

    return render_template(
        "reports.html",
        branches=branches,
        branch_id=branch_id,
        date_from=date_from,
        date_to=date_to,
        summary=summary,
        top=top,
        top_selling=top_selling,
        error=error,
    )


@reports_bp.get("/stock")
@require_login
@require_manager("Stock Reports", NO_PERMISSION)
def stock_reports():
    branch_id = request.args.get("branchId", "")
    threshold = request.args.get("threshold", "")

    client = get_api_client()
    branches, low, valuation, error = [], [], None, None
    try:
        branches = reference_service.active_branches()
        low = report_service.low_stock(client, branch_id, threshold)
        valuation = report_service.stock_valuation(client, branch_id)
    except (ApiError, ValidationError) as e:
        error = str(e) or "Failed to load reports"

    return render_template(
        "stock_reports.html",
        branches=branches,
        branch_id=branch_id,
        threshold=threshold,
        low=low,
        valuation=valuation,
        error=error,
    )
