"""CSRF protection for state-changing forms using Flask-WTF."""
import logging

from flask_wtf.csrf import CSRFProtect

csrf = CSRFProtect()


def init_csrf(app) -> CSRFProtect:
    """
    Attach CSRF checks to every POST and expose ``csrf_token()`` to templates.

    Args:
        app: Flask application instance

    Returns:
        The shared CSRFProtect instance
    """
    csrf.init_app(app)
    if app.config.get("WTF_CSRF_ENABLED", True):
        logging.info("CSRF protection enabled")
    else:
        logging.info("CSRF protection disabled")
    return csrf
