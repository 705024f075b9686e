from flask import Blueprint, flash, redirect, render_template, request, url_for

from ..api_client import ApiError, get_api_client
from ..decorators import require_login, require_manager
from ..services import catalog_service, reference_service
from ..validation import ValidationError


categories_bp = Blueprint("categories", __name__, url_prefix="/categories")

NO_PERMISSION = "You don't have permission to manage categories."


def _render(form=None, error=None):
    categories = []
    try:
        categories = reference_service.categories()
    except ApiError as e:
        error = error or e.message or "Failed to load"
    names = {c.id: c.name for c in categories}
    return render_template(
        "categories.html",
        categories=categories,
        parent_options=[c for c in categories if c.is_active],
        parent_names=names,
        form=form or {},
        error=error,
    )


@categories_bp.get("")
@require_login
@require_manager("Categories", NO_PERMISSION)
def list_categories():
    return _render()


@categories_bp.post("")
@require_login
@require_manager("Categories", NO_PERMISSION)
def create_category():
    try:
        catalog_service.create_category(get_api_client(), request.form)
    except (ApiError, ValidationError) as e:
        return _render(form=request.form, error=str(e) or "Create failed")

    flash("Category created", "ok")
    return redirect(url_for("categories.list_categories"))
