# Overview: Home page with quick links and the dashboard.

from flask import Blueprint, render_template

from ..decorators import require_login
from ..schemas import attempt
from ..services import reference_service


main_bp = Blueprint("main", __name__)


@main_bp.get("/")
def home():
    return render_template("home.html")


@main_bp.get("/dashboard")
@require_login
def dashboard():
    """Logged-in user's name, email and role."""
    result = attempt(reference_service.current_user, "Failed to load user")
    if not result.ok:
        return render_template("dashboard.html", user=None, error=result.message)
    return render_template("dashboard.html", user=result.value, error=None)
