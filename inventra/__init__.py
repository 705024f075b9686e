# inventra/__init__.py
from flask import Flask, request, session

from .config import Config
from .api_client import close_api_client
from .token_store import session_token_store
from .time_utils import format_datetime
from .services.cart import discard_cart
from .services.receipt import format_money


def create_app(overrides: dict | None = None) -> Flask:
    app = Flask(__name__, instance_relative_config=True)
    app.config.from_object(Config)
    if overrides:
        app.config.update(overrides)

    app.logger.setLevel(app.config.get("LOG_LEVEL", "INFO"))

    # Register blueprints
    from .routes.system import system_bp
    from .routes.auth import auth_bp
    from .routes.main import main_bp
    from .routes.products import products_bp
    from .routes.categories import categories_bp
    from .routes.branches import branches_bp
    from .routes.inventory import inventory_bp
    from .routes.sales import sales_bp
    from .routes.invoices import invoices_bp
    from .routes.users import users_bp
    from .routes.reports import reports_bp

    app.register_blueprint(system_bp)
    app.register_blueprint(auth_bp)
    app.register_blueprint(main_bp)
    app.register_blueprint(products_bp)
    app.register_blueprint(categories_bp)
    app.register_blueprint(branches_bp)
    app.register_blueprint(inventory_bp)
    app.register_blueprint(sales_bp)
    app.register_blueprint(invoices_bp)
    app.register_blueprint(users_bp)
    app.register_blueprint(reports_bp)

    app.teardown_appcontext(close_api_client)

    # The cart only lives while the user stays on the sales page
    @app.before_request
    def drop_cart_off_sales_page():
        if request.blueprint in ("sales", "system") or request.endpoint == "static":
            return
        discard_cart(session)

    @app.template_filter("money")
    def money_filter(value):
        return format_money(value, app.config["CURRENCY_LABEL"])

    @app.template_filter("datetime")
    def datetime_filter(value):
        return format_datetime(value)

    @app.context_processor
    def inject_nav():
        return {"logged_in": bool(session_token_store().get_token())}

    # Register CLI commands
    from .cli import register_commands
    register_commands(app)

    return app
