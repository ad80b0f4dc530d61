"""Flask application factory with dependency injection."""
import logging
import sys
from datetime import timedelta

from flask import Flask, request

from skyfront.config.settings import get_config
from skyfront.decorators.auth import current_auth
from skyfront.infrastructure.service_container import ServiceContainer
from skyfront.middleware.csrf import init_csrf
from skyfront.middleware.error_handler import init_error_handlers
from skyfront.middleware.monitoring import register_metrics_middleware
from skyfront.middleware.rate_limiter import create_rate_limiter
from skyfront.navigation import is_active, visible_items
from skyfront.utils.formatting import JINJA_FILTERS
from skyfront.views import (
    admin_blueprint,
    auth_blueprint,
    customer_blueprint,
    health_blueprint,
    management_blueprint,
)


def create_app(config_class=None) -> Flask:
    """
    Create and configure the Flask application.

    Args:
        config_class: Optional configuration class (for testing)

    Returns:
        Configured Flask application
    """
    _logger = logging.getLogger(__name__)

    app = Flask(__name__)

    # Load configuration
    config = config_class or get_config()
    app.config.from_object(config)
    app.config["PERMANENT_SESSION_LIFETIME"] = timedelta(seconds=app.config["SESSION_TTL"])

    # Configure logging FIRST (needed for all subsequent operations)
    _configure_logging(app.config["DEBUG"])

    try:
        config.validate()
    except ValueError as e:
        _logger.critical(f"Invalid configuration: {e}")
        raise

    # One container per app so tests can build isolated apps
    app.config["service_container"] = ServiceContainer(app.config)

    _initialize_middleware(app)
    _register_templates(app)

    app.register_blueprint(health_blueprint)
    app.register_blueprint(auth_blueprint)
    app.register_blueprint(customer_blueprint)
    app.register_blueprint(management_blueprint)
    app.register_blueprint(admin_blueprint)

    _logger.info(
        f"Application ready ({app.config['ENV_NAME']}) - registered blueprints: "
        f"{[bp.name for bp in app.blueprints.values()]}"
    )
    return app


def _configure_logging(debug: bool) -> None:
    """Send application logs to stdout."""
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        stream=sys.stdout,
        force=True
    )


def _initialize_middleware(app: Flask) -> None:
    """
    Initialize middleware (rate limiting, CSRF, monitoring, error handling).

    Args:
        app: Flask application instance
    """
    app.config["limiter"] = create_rate_limiter(app)
    init_csrf(app)
    register_metrics_middleware(app)
    init_error_handlers(app)


def _register_templates(app: Flask) -> None:
    """Jinja filters plus the signed-in user and sidebar on every page."""
    app.jinja_env.filters.update(JINJA_FILTERS)

    @app.context_processor
    def inject_navigation():
        auth = current_auth()
        role = auth.role if auth and auth.is_authenticated else None
        return {
            "auth": auth if role else None,
            "navigation": visible_items(role),
            "nav_active": lambda href: is_active(href, request.path),
        }
