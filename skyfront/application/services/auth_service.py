"""Authentication service for the airline backend."""
import logging
import secrets
from datetime import datetime, timezone
from typing import Any, Dict, Iterable, Mapping, Optional

from skyfront.domain.entities.session import AuthContext
from skyfront.domain.entities.user import User, UserRole
from skyfront.domain.exceptions import ApiError, AuthenticationError
from skyfront.domain.interfaces.session_storage import ISessionStorage
from skyfront.infrastructure.clients.backend_api_client import BackendAPIClient, mask_token
from skyfront.utils.validators import (
    validate_password_change,
    validate_password_reset,
    validate_registration,
)


logger = logging.getLogger(__name__)


class AuthService:
    """
    Service for the login/logout lifecycle.

    The backend token never reaches the browser. It is kept in session
    storage under a random session id, and only that id goes into the signed
    Flask cookie.
    """

    def __init__(
        self,
        api_client: BackendAPIClient,
        session_storage: ISessionStorage,
        session_ttl: Optional[int] = None
    ):
        """
        Initialize authentication service.

        Args:
            api_client: Backend API client instance (Dependency Injection)
            session_storage: Session storage instance (Dependency Injection)
            session_ttl: Lifetime of a stored session in seconds
        """
        self.api_client = api_client
        self.session_storage = session_storage
        self.session_ttl = session_ttl
        self._logger = logging.getLogger(__name__)

    def login(self, username: str, password: str) -> AuthContext:
        """
        Log in and open a new stored session.

        Args:
            username: Account username
            password: Account password

        Returns:
            AuthContext for the new session

        Raises:
            AuthenticationError: If the backend rejects the credentials or
                returns no token
            ApiError: For any other backend failure
        """
        self._logger.info(f"Logging in user {username}")
        data = self.api_client.post(
            "/auth/login", json_data={"username": username, "password": password}
        ) or {}

        token = data.get("token")
        if not token:
            raise AuthenticationError("HTTP_401", data.get("message") or "Invalid login response: missing token")

        user = User.from_dict(data)
        context = AuthContext(
            session_id=secrets.token_urlsafe(32),
            token=token,
            user=user,
            authenticated_at=self._get_timestamp(),
        )
        self._store(context)
        self._logger.info(f"Login successful for {user.username} ({user.role.value}), token {mask_token(token)}")
        return context

    def logout(self, session_id: Optional[str]) -> None:
        """Tell the backend, then always drop the stored session."""
        if not session_id:
            return
        context = self.get_context(session_id)
        try:
            if context and context.token:
                self.api_client.post("/auth/logout", token=context.token)
        except ApiError as e:
            self._logger.warning(f"Logout API call failed: {e.message}")
        finally:
            self.session_storage.delete_session(session_id)
            self._logger.info("Session cleared")

    def register(self, form: Mapping[str, Any]) -> User:
        """
        Validate a sign-up form locally and create the account.

        Raises:
            ValidationError: If a field is invalid (no request is made)
            ApiError: If the backend refuses the registration
        """
        payload = validate_registration(form)
        data = self.api_client.post("/auth/register", json_data=payload)
        self._logger.info(f"Registered user {payload['username']}")
        return User.from_dict(data or payload)

    def get_current_user(self, token: str) -> User:
        return User.from_dict(self.api_client.get("/auth/me", token=token))

    def refresh_token(self, session_id: str) -> AuthContext:
        """
        Exchange the stored token for a fresh one.

        Raises:
            AuthenticationError: If there is no stored session
        """
        context = self.get_context(session_id)
        if context is None or not context.token:
            raise AuthenticationError("HTTP_401", "Not authenticated")

        data = self.api_client.post("/auth/refresh", token=context.token) or {}
        if data.get("token"):
            context.token = data["token"]
            if data.get("username"):
                context.user = User.from_dict(data)
            self._store(context)
            self._logger.info(f"Token refreshed, now {mask_token(context.token)}")
        return context

    def change_password(self, token: str, form: Mapping[str, Any]) -> None:
        payload = validate_password_change(form)
        self.api_client.post("/auth/change-password", token=token, json_data=payload)

    def forgot_password(self, email: str) -> None:
        self.api_client.post("/auth/forgot-password", json_data={"email": email})

    def reset_password(self, form: Mapping[str, Any]) -> None:
        """Complete a reset with the token from the e-mailed link."""
        payload = validate_password_reset(form)
        self.api_client.post("/auth/reset-password", json_data=payload)

    def get_context(self, session_id: Optional[str]) -> Optional[AuthContext]:
        """
        Retrieve the stored session.

        Returns:
            AuthContext or None if there is no (valid) stored session
        """
        if not session_id:
            return None
        data = self.session_storage.get_session(session_id)
        if not data:
            return None
        try:
            return AuthContext.from_dict(session_id, data)
        except (ValueError, TypeError) as e:
            self._logger.warning(f"Discarding unreadable session: {e}")
            self.session_storage.delete_session(session_id)
            return None

    def initialize(self, session_id: Optional[str]) -> Optional[AuthContext]:
        """
        Verify a stored session against ``/auth/me``.

        An authentication failure or an unsuccessful response clears the
        session. A network failure keeps the stored context so a flaky
        backend does not log everyone out.
        """
        context = self.get_context(session_id)
        if context is None or not context.token:
            return None
        try:
            context.user = self.get_current_user(context.token)
        except AuthenticationError:
            self._logger.info("Stored token rejected, clearing session")
            self.session_storage.delete_session(context.session_id)
            return None
        except ApiError as e:
            if e.code == "NETWORK_ERROR":
                self._logger.warning("Backend unreachable, keeping stored session")
                return context
            self._logger.info(f"Session verification failed ({e.code}), clearing session")
            self.session_storage.delete_session(context.session_id)
            return None
        self._store(context)
        return context

    @staticmethod
    def has_role(context: Optional[AuthContext], role: UserRole) -> bool:
        return bool(context and context.is_authenticated and context.has_role(role))

    @staticmethod
    def has_any_role(context: Optional[AuthContext], roles: Iterable[UserRole]) -> bool:
        return bool(context and context.is_authenticated and context.has_any_role(roles))

    def _store(self, context: AuthContext) -> None:
        data: Dict[str, Any] = context.to_dict()
        self.session_storage.set_session(context.session_id, data, ttl=self.session_ttl)

    @staticmethod
    def _get_timestamp() -> str:
        """Get current timestamp as ISO string."""
        return datetime.now(timezone.utc).isoformat()
