# inventra/routes/users.py
"""
User management (managers only).

- Create employees/managers
- Change name, role, active flag
- Reset passwords (minimum length checked before any call)
"""

from flask import Blueprint, current_app, flash, redirect, render_template, request, url_for

from ..api_client import ApiError, get_api_client
from ..decorators import require_login, require_manager
from ..schemas import ROLES
from ..services import user_service
from ..validation import ValidationError


users_bp = Blueprint("users", __name__, url_prefix="/users")

NO_PERMISSION = "You don't have permission to manage users."


def _render(search: str = "", form=None, error=None):
    users = []
    try:
        users = user_service.list_users(get_api_client(), search, current_app.config["USER_LIST_TAKE"])
    except ApiError as e:
        error = error or e.message or "Failed to load users"
    return render_template(
        "users.html",
        users=users,
        roles=ROLES,
        search=search,
        form=form or {"role": "EMPLOYEE"},
        min_password=current_app.config["MIN_PASSWORD_LENGTH"],
        error=error,
    )


def _back(search: str):
    return redirect(url_for("users.list_users", search=search or None))


@users_bp.get("")
@require_login
@require_manager("Users", NO_PERMISSION)
def list_users():
    return _render(request.args.get("search", ""))


@users_bp.post("")
@require_login
@require_manager("Users", NO_PERMISSION)
def create_user():
    search = request.form.get("search", "")
    try:
        user_service.create_user(
            get_api_client(), request.form, current_app.config["MIN_PASSWORD_LENGTH"]
        )
    except (ApiError, ValidationError) as e:
        form = {k: v for k, v in request.form.items() if k != "password"}
        return _render(search, form=form, error=str(e) or "Failed to create user")

    flash("User created successfully", "ok")
    return _back(search)


@users_bp.post("/<user_id>")
@require_login
@require_manager("Users", NO_PERMISSION)
def update_user(user_id: str):
    search = request.form.get("search", "")
    fields = {k: v for k, v in request.form.items() if k in ("name", "role", "isActive")}
    try:
        user_service.update_user(get_api_client(), user_id, fields)
    except (ApiError, ValidationError) as e:
        return _render(search, error=str(e) or "Failed to update user")

    flash("User updated", "ok")
    return _back(search)


@users_bp.post("/<user_id>/reset-password")
@require_login
@require_manager("Users", NO_PERMISSION)
def reset_password(user_id: str):
    search = request.form.get("search", "")
    try:
        user_service.reset_password(
            get_api_client(),
            user_id,
            request.form.get("newPassword", ""),
            current_app.config["MIN_PASSWORD_LENGTH"],
        )
    except (ApiError, ValidationError) as e:
        return _render(search, error=str(e) or "Failed to reset password")

    flash("Password reset", "ok")
    return _back(search)
