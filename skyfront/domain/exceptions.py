"""Domain exceptions shared by the API client, services and views."""
from typing import Any, Dict, Optional


class ApiError(Exception):
    """
    Normalised failure of a call to the airline backend.

    ``code`` is ``HTTP_<status>`` when the server answered, ``NETWORK_ERROR``
    when no response arrived and ``UNKNOWN_ERROR`` otherwise.
    """

    def __init__(
        self,
        code: str,
        message: str,
        status_code: Optional[int] = None,
        details: Any = None
    ):
        super().__init__(message)
        self.code = code
        self.message = message
        self.status_code = status_code
        self.details = details

    def __repr__(self) -> str:
        return f"{type(self).__name__}(code={self.code!r}, message={self.message!r})"


class AuthenticationError(ApiError):
    """Missing, invalid or expired credentials (HTTP 401)."""


class PermissionDeniedError(ApiError):
    """Authenticated but not allowed (HTTP 403)."""


class NotFoundError(ApiError):
    """Requested resource does not exist (HTTP 404)."""


class ValidationError(ValueError):
    """Local form validation failed before any request was made."""

    def __init__(self, errors: Dict[str, str]):
        self.errors = dict(errors)
        super().__init__("; ".join(f"{field}: {msg}" for field, msg in self.errors.items()))
