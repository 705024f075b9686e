# inventra/routes/products.py
"""
Products page.

Anyone logged in can search the catalog; managers can create and deactivate
products. Deactivation is a soft delete on the backend.
"""
from flask import Blueprint, flash, redirect, render_template, request, url_for

from ..api_client import ApiError, get_api_client
from ..decorators import require_login
from ..services import catalog_service, reference_service
from ..validation import ValidationError


products_bp = Blueprint("products", __name__, url_prefix="/products")


def _render(search: str, category_id: str, form=None, error=None):
    me, categories, products = None, [], []
    try:
        me = reference_service.current_user()
        categories = reference_service.active_categories()
        products = reference_service.products(search=search, category_id=category_id)
    except ApiError as e:
        error = error or e.message or "Failed to load"
    return render_template(
        "products.html",
        me=me,
        categories=categories,
        products=products,
        search=search,
        category_id=category_id,
        form=form or {},
        error=error,
    )


@products_bp.get("")
@require_login
def list_products():
    """
    Query params:
    - search: name / SKU / barcode
    - categoryId: category filter
    """
    return _render(request.args.get("search", ""), request.args.get("categoryId", ""))


@products_bp.post("")
@require_login
def create_product():
    search = request.form.get("search", "")
    category_id = request.form.get("filterCategoryId", "")
    try:
        if not reference_service.current_user().is_manager:
            raise ValidationError("Only managers can create products")
        catalog_service.create_product(get_api_client(), request.form)
    except (ApiError, ValidationError) as e:
        return _render(search, category_id, form=request.form, error=str(e) or "Create failed")

    flash("Product created", "ok")
    return redirect(url_for("products.list_products", search=search or None, categoryId=category_id or None))


@products_bp.post("/<product_id>/deactivate")
@require_login
def deactivate_product(product_id: str):
    search = request.form.get("search", "")
    category_id = request.form.get("filterCategoryId", "")
    try:
        if not reference_service.current_user().is_manager:
            raise ValidationError("Only managers can deactivate products")
        catalog_service.deactivate_product(get_api_client(), product_id)
    except (ApiError, ValidationError) as e:
        return _render(search, category_id, error=str(e) or "Deactivate failed")

    flash("Product deactivated", "ok")
    return redirect(url_for("products.list_products", search=search or None, categoryId=category_id or None))
