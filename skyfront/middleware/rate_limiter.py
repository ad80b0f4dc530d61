"""Rate limiting middleware using Flask-Limiter."""
import logging

from flask import current_app, session
from flask_limiter import Limiter
from flask_limiter.util import get_remote_address

from skyfront.decorators.auth import SESSION_KEY


def get_limiter_key() -> str:
    """
    Get rate limit key based on the signed-in session or IP address.

    Returns:
        String key for rate limiting
    """
    session_id = session.get(SESSION_KEY)
    if session_id:
        return f"rate_limit:session:{session_id}"

    # Fallback to IP address
    return get_remote_address()


limiter = Limiter(key_func=get_limiter_key)


def auth_limit() -> str:
    """Stricter limit for login and registration, read per request."""
    return current_app.config.get("RATELIMIT_AUTH", "10 per minute")


def create_rate_limiter(app) -> Limiter:
    """
    Configure the shared Flask-Limiter instance for an app.

    Args:
        app: Flask application instance

    Returns:
        Configured Limiter instance
    """
    if not app.config.get("RATELIMIT_ENABLED"):
        app.config["RATELIMIT_ENABLED"] = False
        app.config["RATELIMIT_STORAGE_URI"] = "memory://"
        limiter.init_app(app)
        logging.info("Rate limiting disabled")
        return limiter

    app.config.setdefault("RATELIMIT_STORAGE_URI", app.config.get("RATELIMIT_STORAGE_URL") or "memory://")
    app.config.setdefault("RATELIMIT_STRATEGY", "fixed-window")
    app.config.setdefault("RATELIMIT_HEADERS_ENABLED", True)
    app.config.setdefault("RATELIMIT_SWALLOW_ERRORS", True)
    limiter.init_app(app)
    logging.info(f"Rate limiting enabled with default limits {app.config.get('RATELIMIT_DEFAULT')}")
    return limiter
