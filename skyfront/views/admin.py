"""User administration (administrators only)."""
from typing import Any, Dict

from flask import Blueprint, current_app, flash, redirect, render_template, request, url_for

from skyfront.decorators.auth import admin_required, current_auth, current_token
from skyfront.domain.entities.user import User, UserRole
from skyfront.domain.exceptions import ValidationError
from skyfront.infrastructure.service_container import get_container
from skyfront.views.forms import form_page, page_arg

admin_blueprint = Blueprint("admin", __name__)


def _user_initial(user: User) -> Dict[str, Any]:
    return {
        "username": user.username,
        "email": user.email,
        "firstName": user.first_name,
        "lastName": user.last_name,
        "phoneNumber": user.phone_number or "",
        "role": user.role.value,
    }


def _is_active_arg(value):
    if value == "active":
        return True
    if value == "inactive":
        return False
    return None


@admin_blueprint.route("/manage/users", methods=["GET"])
@admin_required
def users():
    role = request.args.get("role", "all")
    try:
        page = get_container().user_service.list(
            current_token(),
            page=page_arg(),
            limit=current_app.config["DEFAULT_PAGE_SIZE"],
            role=role,
            search=request.args.get("q") or None,
            is_active=_is_active_arg(request.args.get("status")),
            sort_by=request.args.get("sortBy") or None,
            sort_order=request.args.get("sortOrder") or None,
        )
    except ValueError:
        flash("Invalid role filter.", "error")
        return redirect(url_for("admin.users"))
    return render_template(
        "admin/users.html",
        users=page.items,
        pagination=page.pagination,
        roles=list(UserRole),
        args=request.args,
    )


@admin_blueprint.route("/manage/users/new", methods=["GET", "POST"])
@admin_required
def user_create():
    return form_page(
        "admin/user_form.html",
        lambda: get_container().user_service.create(current_token(), request.form),
        "User created.",
        "admin.users",
        {"role": UserRole.CUSTOMER.value},
        roles=list(UserRole),
        creating=True,
    )


@admin_blueprint.route("/manage/users/<int:user_id>/edit", methods=["GET", "POST"])
@admin_required
def user_edit(user_id):
    service = get_container().user_service
    user = service.get(current_token(), user_id)
    return form_page(
        "admin/user_form.html",
        lambda: service.update(current_token(), user_id, request.form),
        f"User {user.username} updated.",
        "admin.users",
        _user_initial(user),
        user=user,
        roles=list(UserRole),
        creating=False,
    )


@admin_blueprint.route("/manage/users/<int:user_id>/delete", methods=["POST"])
@admin_required
def user_delete(user_id):
    if str(user_id) == str(current_auth().user.id):
        raise ValidationError({"user": "You cannot delete your own account"})
    get_container().user_service.delete(current_token(), user_id)
    flash("User deleted.", "success")
    return redirect(url_for("admin.users"))


@admin_blueprint.route("/manage/users/<int:user_id>/toggle-status", methods=["POST"])
@admin_required
def user_toggle_status(user_id):
    user = get_container().user_service.toggle_status(current_token(), user_id)
    if user is None:
        flash(f"User {user_id} status updated.", "success")
    else:
        state = "activated" if user.is_active else "deactivated"
        flash(f"User {user.username} {state}.", "success")
    return redirect(request.referrer or url_for("admin.users"))


@admin_blueprint.route("/manage/users/<int:user_id>/reset-password", methods=["POST"])
@admin_required
def user_reset_password(user_id):
    temporary = get_container().user_service.reset_password(current_token(), user_id)
    flash(f"Temporary password: {temporary}", "info")
    return redirect(request.referrer or url_for("admin.users"))
