"""Error handling middleware with Sentry integration."""
import logging

import sentry_sdk
from flask import flash, redirect, render_template, request, session, url_for
from flask_wtf.csrf import CSRFError
from sentry_sdk.integrations.flask import FlaskIntegration

from skyfront.domain.exceptions import (
    ApiError,
    AuthenticationError,
    NotFoundError,
    PermissionDeniedError,
    ValidationError,
)
from skyfront.decorators.auth import SESSION_KEY
from skyfront.infrastructure.service_container import get_container

logger = logging.getLogger(__name__)


def _back_or_render(message: str, status_code: int):
    """
    Send the user back where they came from with a banner.

    When there is nowhere else to go (no referrer, or the failing page is the
    referrer itself) the error page is rendered instead to avoid a loop.
    """
    referrer = request.referrer
    if referrer and referrer != request.url:
        flash(message, "error")
        return redirect(referrer)
    return render_template("errors/error.html", message=message), status_code


def init_error_handlers(app) -> None:
    """
    Initialize error handlers for the application.

    Args:
        app: Flask application instance
    """
    sentry_dsn = app.config.get("SENTRY_DSN")
    if sentry_dsn:
        sentry_sdk.init(
            dsn=sentry_dsn,
            integrations=[FlaskIntegration()],
            traces_sample_rate=0.1,
            environment=app.config.get("ENV_NAME", "production"),
        )
        logger.info("Sentry error tracking initialized")

    @app.errorhandler(AuthenticationError)
    def authentication_error(error):
        """The backend rejected our token: drop the session and log in again."""
        session_id = session.pop(SESSION_KEY, None)
        if session_id:
            get_container().get_session_storage().delete_session(session_id)
        logger.info(f"Authentication error on {request.path}: {error.message}")
        flash("Your session has expired. Please log in again.", "warning")
        return redirect(url_for("auth.login", next=request.path))

    @app.errorhandler(PermissionDeniedError)
    def permission_denied(error):
        logger.warning(f"Backend denied {request.path}: {error.message}")
        return render_template("errors/unauthorized.html", message=error.message), 403

    @app.errorhandler(NotFoundError)
    def backend_not_found(error):
        return render_template("errors/not_found.html", message=error.message), 404

    @app.errorhandler(ApiError)
    def api_error(error):
        """Any other backend failure becomes an error banner."""
        logger.warning(f"API error on {request.method} {request.path}: {error.code} {error.message}")
        status_code = 502 if error.code == "NETWORK_ERROR" else (error.status_code or 400)
        return _back_or_render(error.message, status_code)

    @app.errorhandler(ValidationError)
    def validation_error(error):
        return _back_or_render(str(error), 400)

    @app.errorhandler(CSRFError)
    def csrf_error(error):
        logger.warning(f"CSRF check failed on {request.method} {request.path}: {error.description}")
        return _back_or_render("Your form has expired. Please try again.", 400)

    @app.errorhandler(404)
    def not_found(error):
        """Handle 404 errors."""
        return render_template("errors/not_found.html"), 404

    @app.errorhandler(500)
    def internal_error(error):
        """Handle 500 errors."""
        logger.error(f"Internal server error: {error}", exc_info=True)
        return render_template("errors/error.html", message="Internal server error"), 500

    @app.errorhandler(429)
    def rate_limit_error(error):
        """Handle rate limit errors."""
        return render_template(
            "errors/error.html", message="Rate limit exceeded. Please try again later."
        ), 429
