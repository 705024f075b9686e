# Overview: Flask CLI command groups for backend checks and receipt printing.

# inventra/cli.py
# Commands Legend (run from the repository root):
# Prereqs:
# - Activate your virtualenv.
# - Set FLASK_APP to inventra (PowerShell: $env:FLASK_APP="inventra").
# - Use: python -m flask <group> <command> [options]
#
# Backend:
# - python -m flask backend check
#   Report whether INVENTRA_API_BASE_URL answers.
# - python -m flask backend login --email manager@inventra.lk
#   Log in against the backend and print the bearer token (prompts for password).
#
# Invoices:
# - python -m flask invoices receipt <publicId> --token <token>
#   Print a stored invoice as a plain-text receipt.

import click
from flask import current_app
from flask.cli import with_appcontext

from .api_client import ApiClient, ApiError
from .routes.system import check_backend_health
from .services import auth_service, invoice_service
from .services.receipt import build_receipt, render_receipt_text
from .token_store import TokenStore
from .validation import ValidationError


def _client(token: str | None = None) -> ApiClient:
    store = TokenStore({})
    if token:
        store.set_token(token)
    return ApiClient(
        current_app.config["API_BASE_URL"],
        store,
        timeout=current_app.config.get("API_TIMEOUT"),
        transport=current_app.config.get("API_TRANSPORT"),
    )


@click.group('backend')
def backend_group():
    """Backend connectivity commands."""


@backend_group.command('check')
@with_appcontext
def check_backend():
    """Check that the backend base URL is reachable."""
    result = check_backend_health()
    base_url = current_app.config["API_BASE_URL"]
    if result["status"] == "healthy":
        click.echo(f"PASS {base_url} answered HTTP {result['http_status']} in {result['latency_ms']} ms")
    else:
        click.echo(f"FAIL {base_url}: {result['error']}", err=True)
        raise SystemExit(1)


@backend_group.command('login')
@click.option('--email', prompt=True, help='Account email')
@click.option('--password', prompt=True, hide_input=True, help='Account password')
@with_appcontext
def login(email, password):
    """Log in and print the bearer token."""
    client = _client()
    try:
        token = auth_service.login(client, email, password)
    except (ApiError, ValidationError) as e:
        click.echo(f"FAIL {e}", err=True)
        raise SystemExit(1)
    finally:
        client.close()
    click.echo(token)


@click.group('invoices')
def invoices_group():
    """Invoice lookups."""


@invoices_group.command('receipt')
@click.argument('public_id')
@click.option('--token', envvar='INVENTRA_TOKEN', required=True, help='Bearer token')
@with_appcontext
def print_receipt(public_id, token):
    """Print an invoice as a plain-text receipt."""
    client = _client(token)
    try:
        invoice = invoice_service.get_invoice(client, public_id)
    except ApiError as e:
        click.echo(f"FAIL {e}", err=True)
        raise SystemExit(1)
    finally:
        client.close()
    receipt = build_receipt(invoice, current_app.config["CURRENCY_LABEL"])
    click.echo(render_receipt_text(receipt), nl=False)


def register_commands(app):
    """Register all CLI commands with Flask app."""
    app.cli.add_command(backend_group)
    app.cli.add_command(invoices_group)
