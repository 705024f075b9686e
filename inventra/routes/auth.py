# Overview: Login and logout pages.

from flask import Blueprint, current_app, redirect, render_template, request, session, url_for

from ..api_client import ApiError, get_api_client
from ..services import auth_service
from ..validation import ValidationError


auth_bp = Blueprint("auth", __name__)


@auth_bp.get("/login")
def login_page():
    return render_template("login.html", email="", error=None)


@auth_bp.post("/login")
def login_submit():
    """Exchange credentials for a token, store it, go to the dashboard."""
    email = request.form.get("email", "")
    password = request.form.get("password", "")
    try:
        auth_service.login(get_api_client(), email, password, session)
    except (ApiError, ValidationError) as e:
        current_app.logger.info("Login failed for %s", email)
        return render_template("login.html", email=email, error=str(e) or "Login failed")

    return redirect(url_for("main.dashboard"))


@auth_bp.post("/logout")
def logout():
    auth_service.logout(get_api_client(), session)
    return redirect(url_for("auth.login_page"))
