"""Login, registration and password pages."""
import logging
from typing import Optional

from flask import Blueprint, flash, redirect, render_template, request, session, url_for
from flask_limiter.util import get_remote_address

from skyfront.decorators.auth import SESSION_KEY, VERIFIED_KEY, current_auth, current_token, login_required
from skyfront.domain.entities.session import AuthContext
from skyfront.domain.entities.user import UserRole
from skyfront.domain.exceptions import ApiError, AuthenticationError, ValidationError
from skyfront.infrastructure.service_container import get_container
from skyfront.middleware.rate_limiter import auth_limit, limiter

auth_blueprint = Blueprint("auth", __name__)
_logger = logging.getLogger(__name__)


def safe_next(target: Optional[str]) -> Optional[str]:
    """Only follow same-site relative redirects."""
    if not target or not target.startswith("/") or target.startswith("//") or "\\" in target:
        return None
    return target


def landing_page(context: AuthContext) -> str:
    if context.has_any_role((UserRole.OPERATOR, UserRole.ADMINISTRATOR)):
        return url_for("management.dashboard")
    return url_for("customer.search")


@auth_blueprint.route("/login", methods=["GET", "POST"])
@limiter.limit(auth_limit, methods=["POST"], key_func=get_remote_address)
def login():
    """Sign in and open a stored session."""
    auth = current_auth()
    if auth and auth.is_authenticated:
        return redirect(landing_page(auth))

    next_url = safe_next(request.values.get("next"))
    if request.method == "GET":
        return render_template("auth/login.html", next=next_url)

    username = request.form.get("username", "").strip()
    password = request.form.get("password", "")
    if not username or not password:
        flash("Username and password are required.", "error")
        return render_template("auth/login.html", next=next_url, username=username), 400

    try:
        context = get_container().auth_service.login(username, password)
    except AuthenticationError:
        flash("Invalid username or password.", "error")
        return render_template("auth/login.html", next=next_url, username=username), 401
    except ApiError as e:
        flash(e.message, "error")
        return render_template("auth/login.html", next=next_url, username=username), 400

    session.clear()
    session[SESSION_KEY] = context.session_id
    session[VERIFIED_KEY] = True
    session.permanent = True
    flash(f"Welcome back, {context.user.first_name or context.user.username}!", "success")
    return redirect(next_url or landing_page(context))


@auth_blueprint.route("/register", methods=["GET", "POST"])
@limiter.limit(auth_limit, methods=["POST"], key_func=get_remote_address)
def register():
    if request.method == "GET":
        return render_template("auth/register.html", form={}, errors={})

    try:
        get_container().auth_service.register(request.form)
    except ValidationError as e:
        return render_template("auth/register.html", form=request.form, errors=e.errors), 400
    except ApiError as e:
        flash(e.message, "error")
        return render_template("auth/register.html", form=request.form, errors={}), 400

    flash("Account created. Please sign in.", "success")
    return redirect(url_for("auth.login"))


@auth_blueprint.route("/logout", methods=["POST"])
def logout():
    get_container().auth_service.logout(session.get(SESSION_KEY))
    session.clear()
    flash("You have been signed out.", "info")
    return redirect(url_for("auth.login"))


@auth_blueprint.route("/profile/password", methods=["GET", "POST"])
@login_required
def change_password():
    if request.method == "GET":
        return render_template("auth/change_password.html", errors={})
    try:
        get_container().auth_service.change_password(current_token(), request.form)
    except ValidationError as e:
        return render_template("auth/change_password.html", errors=e.errors), 400
    flash("Password updated.", "success")
    return redirect(url_for("customer.home"))


@auth_blueprint.route("/forgot-password", methods=["GET", "POST"])
@limiter.limit(auth_limit, methods=["POST"], key_func=get_remote_address)
def forgot_password():
    if request.method == "GET":
        return render_template("auth/forgot_password.html")
    email = request.form.get("email", "").strip()
    if not email:
        flash("Email is required.", "error")
        return render_template("auth/forgot_password.html"), 400
    try:
        get_container().auth_service.forgot_password(email)
    except ApiError as e:
        # Response is identical whether or not the account exists
        _logger.info(f"Forgot-password request failed: {e.code}")
    flash("If an account exists for that email, a reset link has been sent.", "info")
    return redirect(url_for("auth.login"))


@auth_blueprint.route("/reset-password", methods=["GET", "POST"])
def reset_password():
    if request.method == "GET":
        return render_template("auth/reset_password.html", token=request.args.get("token", ""), errors={})
    try:
        get_container().auth_service.reset_password(request.form)
    except ValidationError as e:
        return render_template(
            "auth/reset_password.html", token=request.form.get("token", ""), errors=e.errors
        ), 400
    flash("Password reset. Please sign in with your new password.", "success")
    return redirect(url_for("auth.login"))


@auth_blueprint.route("/unauthorized", methods=["GET"])
def unauthorized():
    return render_template("errors/unauthorized.html"), 403
