"""Health check endpoints."""
import logging

from flask import Blueprint, current_app, jsonify

from skyfront.infrastructure.service_container import get_container

health_blueprint = Blueprint("health", __name__)
_logger = logging.getLogger(__name__)


@health_blueprint.route("/health", methods=["GET"])
def health_check():
    """
    Basic health check endpoint.

    Returns:
        JSON response with health status
    """
    return jsonify({
        "status": "healthy",
        "service": current_app.config["SERVICE_NAME"]
    }), 200


@health_blueprint.route("/health/ready", methods=["GET"])
def readiness_check():
    """
    Readiness check endpoint (checks the session store).

    Returns:
        JSON response with readiness status
    """
    storage = get_container().get_session_storage()
    checks = {
        "session_storage": storage.ping(),
        "storage_type": type(storage).__name__,
    }
    ready = checks["session_storage"]
    if not ready:
        _logger.error("Readiness check failed: session storage unreachable")

    return jsonify({
        "status": "ready" if ready else "not_ready",
        "checks": checks
    }), 200 if ready else 503


@health_blueprint.route("/health/live", methods=["GET"])
def liveness_check():
    """Liveness check endpoint (for Kubernetes)."""
    return jsonify({
        "status": "alive",
        "service": current_app.config["SERVICE_NAME"]
    }), 200
