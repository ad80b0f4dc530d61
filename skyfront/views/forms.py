"""Request helpers shared by the management and admin blueprints."""
from typing import Any, Callable, Dict

from flask import flash, redirect, render_template, request, url_for

from skyfront.domain.exceptions import ApiError, AuthenticationError, ValidationError


def page_arg() -> int:
    """``?page=`` as a positive int, 1 when missing or malformed."""
    try:
        return max(int(request.args.get("page", 1)), 1)
    except (TypeError, ValueError):
        return 1


def form_page(template: str, save: Callable[[], Any], success: str, target: str, initial: Dict[str, Any], **context):
    """
    Shared GET/POST flow of the create/edit forms.

    GET renders ``initial``; POST calls ``save`` and redirects to ``target``
    or re-renders with per-field errors.
    """
    if request.method == "GET":
        return render_template(template, form=initial, errors={}, **context)
    try:
        save()
    except ValidationError as e:
        return render_template(template, form=request.form, errors=e.errors, **context), 400
    except AuthenticationError:
        raise
    except ApiError as e:
        flash(e.message, "error")
        return render_template(template, form=request.form, errors={}, **context), 400
    flash(success, "success")
    return redirect(url_for(target))
