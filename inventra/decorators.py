# Overview: Page guards for views (stored token required, manager role required).

from functools import wraps
from flask import g, redirect, render_template, url_for, current_app

from .api_client import ApiError, get_api_client
from .services import reference_service


def require_login(f):
    """
    Require a stored bearer token.

    With no token the browser is sent to the login page immediately, before
    any backend call is made. Token validity is left to the backend: an
    expired token surfaces as an ordinary API error on the page.
    """
    @wraps(f)
    def decorated_function(*args, **kwargs):
        token = get_api_client().token_store.get_token()
        if not token:
            return redirect(url_for("auth.login_page"))
        return f(*args, **kwargs)

    return decorated_function


def require_manager(page_title: str, message: str):
    """
    Require the MANAGER role.

    Sets g.current_user. Employees get a friendly "no permission" page
    (HTTP 403); the wrapped view, and any mutation it would issue, never runs.
    Must be stacked under @require_login.
    """
    def decorator(f):
        @wraps(f)
        def decorated_function(*args, **kwargs):
            try:
                user = reference_service.current_user()
            except ApiError as e:
                current_app.logger.info("Could not resolve current user: %s", e.message)
                return render_template(
                    "error.html", title=page_title, error=e.message or "Failed to load"
                ), e.status or 502

            g.current_user = user
            if not user.is_manager:
                return render_template(
                    "forbidden.html", title=page_title, message=message
                ), 403

            return f(*args, **kwargs)

        return decorated_function
    return decorator
