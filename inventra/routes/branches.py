from flask import Blueprint, flash, redirect, render_template, request, url_for

from ..api_client import ApiError, get_api_client
from ..decorators import require_login, require_manager
from ..services import catalog_service, reference_service
from ..validation import ValidationError


branches_bp = Blueprint("branches", __name__, url_prefix="/branches")

NO_PERMISSION = "Only managers can manage branches."


def _render(form=None, error=None):
    branches = []
    try:
        branches = reference_service.branches()
    except ApiError as e:
        error = error or e.message or "Failed to load"
    return render_template(
        "branches.html",
        branches=branches,
        form=form or {"name": "New Branch"},
        error=error,
    )


@branches_bp.get("")
@require_login
@require_manager("Branches", NO_PERMISSION)
def list_branches():
    return _render()


@branches_bp.post("")
@require_login
@require_manager("Branches", NO_PERMISSION)
def create_branch():
    try:
        catalog_service.create_branch(get_api_client(), request.form)
    except (ApiError, ValidationError) as e:
        return _render(form=request.form, error=str(e) or "Create failed")

    flash("Branch created", "ok")
    return redirect(url_for("branches.list_branches"))
