"""Form validation and payload normalisation for backend writes.

Each ``validate_*`` function takes raw form values (strings from
``request.form`` or plain Python values) and returns the camelCase payload
the backend expects, or raises ValidationError with one message per field.
"""
import re
from datetime import datetime
from typing import Any, Dict, Mapping, Optional

from skyfront.domain.entities.common import parse_datetime
from skyfront.domain.entities.fleet import AirplaneCapacity
from skyfront.domain.entities.user import UserRole
from skyfront.domain.exceptions import ValidationError

USERNAME_RE = re.compile(r"^[A-Za-z0-9_]+$")
NAME_RE = re.compile(r"^[A-Za-z\s]+$")
EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
PHONE_RE = re.compile(r"^\+?[1-9]\d{1,14}$")
PASSWORD_RE = re.compile(r"^(?=.*[a-z])(?=.*[A-Z])(?=.*\d)")


def _text(form: Mapping[str, Any], key: str) -> str:
    value = form.get(key)
    return str(value).strip() if value is not None else ""


def _number(form: Mapping[str, Any], key: str, errors: Dict[str, str], cast=float) -> Optional[float]:
    raw = form.get(key)
    if raw is None or raw == "":
        return None
    try:
        return cast(raw)
    except (TypeError, ValueError):
        errors[key] = "Must be a number"
        return None


def _checkbox(form: Mapping[str, Any], key: str, default: bool = False) -> bool:
    value = form.get(key)
    if value is None:
        return default
    if isinstance(value, bool):
        return value
    return str(value).lower() in ("1", "true", "on", "yes")


def normalize_phone(phone_number: str) -> str:
    """Strip spaces and dashes from a phone number."""
    return phone_number.replace(" ", "").replace("-", "")


def validate_phone(phone_number: str) -> bool:
    return bool(PHONE_RE.match(normalize_phone(phone_number)))


def _check_password(password: str, errors: Dict[str, str], key: str = "password") -> None:
    if len(password) < 8:
        errors[key] = "Password must be at least 8 characters"
    elif len(password) > 100:
        errors[key] = "Password must not exceed 100 characters"
    elif not PASSWORD_RE.match(password):
        errors[key] = ("Password must contain at least one uppercase letter, "
                       "one lowercase letter, and one number")


def _check_profile(form: Mapping[str, Any], errors: Dict[str, str]) -> Dict[str, Any]:
    username = _text(form, "username")
    first_name = _text(form, "firstName")
    last_name = _text(form, "lastName")
    email = _text(form, "email")
    phone = normalize_phone(_text(form, "phoneNumber"))

    if not username:
        errors["username"] = "Username is required"
    elif len(username) > 50:
        errors["username"] = "Username must not exceed 50 characters"
    elif not USERNAME_RE.match(username):
        errors["username"] = "Username can only contain letters, numbers, and underscores"

    for key, label, value in (("firstName", "First name", first_name), ("lastName", "Last name", last_name)):
        if not value:
            errors[key] = f"{label} is required"
        elif len(value) > 100:
            errors[key] = f"{label} must not exceed 100 characters"
        elif not NAME_RE.match(value):
            errors[key] = f"{label} can only contain letters and spaces"

    if not email:
        errors["email"] = "Email is required"
    elif len(email) > 100:
        errors["email"] = "Email must not exceed 100 characters"
    elif not EMAIL_RE.match(email):
        errors["email"] = "Please enter a valid email address"

    if phone and not PHONE_RE.match(phone):
        errors["phoneNumber"] = "Please enter a valid phone number"

    payload = {"username": username, "email": email, "firstName": first_name, "lastName": last_name}
    if phone:
        payload["phoneNumber"] = phone
    return payload


def validate_registration(form: Mapping[str, Any]) -> Dict[str, Any]:
    """Self-service sign-up; the backend assigns the CUSTOMER role."""
    errors: Dict[str, str] = {}
    payload = _check_profile(form, errors)
    password = form.get("password") or ""
    _check_password(password, errors)
    if not form.get("confirmPassword"):
        errors["confirmPassword"] = "Please confirm your password"
    elif form.get("confirmPassword") != password:
        errors["confirmPassword"] = "Passwords don't match"
    if errors:
        raise ValidationError(errors)
    payload["password"] = password
    return payload


def validate_user(form: Mapping[str, Any], creating: bool = True) -> Dict[str, Any]:
    """Administrator create/edit user form."""
    errors: Dict[str, str] = {}
    payload = _check_profile(form, errors)
    try:
        payload["role"] = UserRole.parse(_text(form, "role") or UserRole.CUSTOMER.value).value
    except ValueError:
        errors["role"] = "Please select a valid role"
    if creating:
        password = form.get("password") or ""
        _check_password(password, errors)
        payload["password"] = password
    if errors:
        raise ValidationError(errors)
    return payload


def validate_password_change(form: Mapping[str, Any]) -> Dict[str, str]:
    errors: Dict[str, str] = {}
    current = form.get("currentPassword") or ""
    new = form.get("newPassword") or ""
    if not current:
        errors["currentPassword"] = "Current password is required"
    _check_password(new, errors, key="newPassword")
    if form.get("confirmPassword") != new:
        errors["confirmPassword"] = "Passwords don't match"
    if errors:
        raise ValidationError(errors)
    return {"currentPassword": current, "newPassword": new}


def validate_password_reset(form: Mapping[str, Any]) -> Dict[str, str]:
    errors: Dict[str, str] = {}
    reset_token = _text(form, "token")
    new = form.get("newPassword") or ""
    if not reset_token:
        errors["token"] = "Reset link is invalid or incomplete"
    _check_password(new, errors, key="newPassword")
    if form.get("confirmPassword") != new:
        errors["confirmPassword"] = "Passwords don't match"
    if errors:
        raise ValidationError(errors)
    return {"token": reset_token, "newPassword": new}


def validate_airport(form: Mapping[str, Any]) -> Dict[str, Any]:
    errors: Dict[str, str] = {}
    code = _text(form, "code").upper()
    if len(code) < 3:
        errors["code"] = "Airport code must be at least 3 characters"
    elif len(code) > 4:
        errors["code"] = "Airport code must be at most 4 characters"

    payload: Dict[str, Any] = {"code": code}
    for key, label in (("name", "Airport name"), ("city", "City"), ("country", "Country"), ("timeZone", "Timezone")):
        value = _text(form, key)
        if key == "timeZone" and not value:
            value = _text(form, "timezone")
        if not value:
            errors[key] = f"{label} is required"
        payload[key] = value

    latitude = _number(form, "latitude", errors)
    longitude = _number(form, "longitude", errors)
    if latitude is not None:
        if not -90 <= latitude <= 90:
            errors["latitude"] = "Invalid latitude"
        payload["latitude"] = latitude
    if longitude is not None:
        if not -180 <= longitude <= 180:
            errors["longitude"] = "Invalid longitude"
        payload["longitude"] = longitude

    if errors:
        raise ValidationError(errors)
    return payload


def validate_airplane(form: Mapping[str, Any]) -> Dict[str, Any]:
    errors: Dict[str, str] = {}
    model = _text(form, "model")
    registration = _text(form, "registrationNumber")
    if not model:
        errors["model"] = "Model is required"
    if not registration:
        errors["registrationNumber"] = "Registration is required"
    try:
        size = AirplaneCapacity(_text(form, "size").upper()).value
    except ValueError:
        errors["size"] = "Please select a valid size"
        size = None

    capacities = {}
    for key, minimum in (("firstClassCapacity", 0), ("businessClassCapacity", 0), ("economyClassCapacity", 1)):
        value = _number(form, key, errors, cast=int)
        value = 0 if value is None else value
        if key not in errors and value < minimum:
            errors[key] = "Must have at least 1 economy seat" if minimum else "Must be 0 or greater"
        capacities[key] = value

    if errors:
        raise ValidationError(errors)
    return {
        "model": model,
        "registrationNumber": registration,
        "size": size,
        **capacities,
        "active": _checkbox(form, "active", default=True),
    }


def validate_flight(form: Mapping[str, Any]) -> Dict[str, Any]:
    errors: Dict[str, str] = {}
    flight_number = _text(form, "flightNumber").upper()
    if len(flight_number) < 2:
        errors["flightNumber"] = "Flight number must be at least 2 characters"

    payload: Dict[str, Any] = {"flightNumber": flight_number}
    for key, message in (
        ("airplaneId", "Please select an airplane"),
        ("originId", "Please select origin airport"),
        ("destinationId", "Please select destination airport"),
    ):
        payload[key] = _text(form, key)
        if not payload[key]:
            errors[key] = message
    if payload["originId"] and payload["originId"] == payload["destinationId"]:
        errors["destinationId"] = "Destination must differ from origin"

    times: Dict[str, Optional[datetime]] = {}
    for key, label in (("departureTime", "Departure time"), ("arrivalTime", "Arrival time")):
        raw = _text(form, key)
        times[key] = None
        if not raw:
            errors[key] = f"{label} is required"
            continue
        try:
            times[key] = parse_datetime(raw)
        except ValueError:
            errors[key] = f"{label} is not a valid date and time"
        payload[key] = raw
    if times["departureTime"] and times["arrivalTime"] and times["arrivalTime"] <= times["departureTime"]:
        errors["arrivalTime"] = "Arrival must be after departure"

    for key in ("firstClassPrice", "businessClassPrice", "economyClassPrice"):
        value = _number(form, key, errors)
        if value is None and key not in errors:
            errors[key] = "Price is required"
        elif value is not None and value < 0:
            errors[key] = "Price must be positive"
        payload[key] = value

    if errors:
        raise ValidationError(errors)
    return payload
