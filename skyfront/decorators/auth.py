"""Route protection for signed-in users and role-gated screens."""
import logging
from functools import wraps
from typing import Optional

from flask import flash, g, redirect, render_template, request, session, url_for

from skyfront.domain.entities.session import AuthContext
from skyfront.domain.entities.user import UserRole
from skyfront.infrastructure.service_container import get_container

SESSION_KEY = "sid"
VERIFIED_KEY = "verified"

_logger = logging.getLogger(__name__)


def current_auth() -> Optional[AuthContext]:
    """
    AuthContext of this request, loaded once from session storage.

    The first request of a returning browser session re-checks the stored
    token against the backend; later requests trust the stored context.
    """
    if "auth" not in g:
        session_id = session.get(SESSION_KEY)
        auth_service = get_container().auth_service
        if session_id and not session.get(VERIFIED_KEY):
            g.auth = auth_service.initialize(session_id)
            if g.auth is None:
                session.pop(SESSION_KEY, None)
            else:
                session[VERIFIED_KEY] = True
        else:
            g.auth = auth_service.get_context(session_id)
    return g.auth


def current_token() -> Optional[str]:
    auth = current_auth()
    return auth.token if auth else None


def login_required(func):
    """Redirect to the login page, remembering where the user was going."""
    @wraps(func)
    def wrapper(*args, **kwargs):
        auth = current_auth()
        if auth is None or not auth.is_authenticated:
            flash("Please log in first.", "warning")
            return redirect(url_for("auth.login", next=request.full_path.rstrip("?")))
        return func(*args, **kwargs)
    return wrapper


def roles_required(*roles: UserRole):
    """Allow only the given roles; everyone else gets the 403 page."""
    allowed = frozenset(roles)

    def decorator(func):
        @wraps(func)
        @login_required
        def wrapper(*args, **kwargs):
            auth = current_auth()
            if not auth.has_any_role(allowed):
                _logger.warning(
                    f"User {auth.user.username} ({auth.role.value}) denied access to {request.path}"
                )
                return render_template("errors/unauthorized.html"), 403
            return func(*args, **kwargs)
        return wrapper
    return decorator


staff_required = roles_required(UserRole.OPERATOR, UserRole.ADMINISTRATOR)
admin_required = roles_required(UserRole.ADMINISTRATOR)
