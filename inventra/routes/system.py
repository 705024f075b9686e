# inventra/routes/system.py
"""
Health endpoint.

Reports whether this frontend is up and whether the backend base URL answers.
Any HTTP answer from the backend (even 404) counts as reachable.
"""

import time
from flask import Blueprint, current_app, jsonify

import httpx


system_bp = Blueprint("system", __name__)


def check_backend_health() -> dict:
    start_time = time.time()
    try:
        with httpx.Client(
            timeout=current_app.config.get("API_TIMEOUT"),
            transport=current_app.config.get("API_TRANSPORT"),
        ) as client:
            response = client.get(current_app.config["API_BASE_URL"])
        elapsed_ms = (time.time() - start_time) * 1000
        return {
            "status": "healthy",
            "latency_ms": round(elapsed_ms, 2),
            "http_status": response.status_code,
        }
    except httpx.HTTPError as e:
        elapsed_ms = (time.time() - start_time) * 1000
        current_app.logger.warning("Backend health check failed: %s", e)
        return {
            "status": "unhealthy",
            "latency_ms": round(elapsed_ms, 2),
            "error": "Backend unreachable",
        }


@system_bp.get("/health")
def health():
    backend = check_backend_health()
    status = "healthy" if backend["status"] == "healthy" else "degraded"
    return jsonify({"status": status, "backend": backend}), 200 if status == "healthy" else 503
