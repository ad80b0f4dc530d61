"""User administration."""
import logging
from typing import Any, List, Mapping, Optional

from skyfront.domain.entities.common import Page, page_of
from skyfront.domain.entities.user import User, UserRole
from skyfront.infrastructure.clients.backend_api_client import BackendAPIClient
from skyfront.utils.validators import validate_user


class UserService:
    """Wraps the ``/users`` endpoints (administrators only)."""

    base_path = "/users"

    def __init__(self, api_client: BackendAPIClient):
        self.api_client = api_client
        self._logger = logging.getLogger(__name__)

    def list(
        self,
        token: Optional[str],
        page: int = 1,
        limit: int = 10,
        role=None,
        search: Optional[str] = None,
        is_active: Optional[bool] = None,
        sort_by: Optional[str] = None,
        sort_order: Optional[str] = None
    ) -> Page:
        role = UserRole.parse(role).value if role not in (None, "", "all") else None
        raw = self.api_client.get_paginated(
            self.base_path,
            token=token,
            params={
                "page": page,
                "limit": limit,
                "role": role,
                "search": search,
                "isActive": is_active,
                "sortBy": sort_by,
                "sortOrder": sort_order,
            },
        )
        return page_of(raw, User.from_dict)

    def get(self, token: Optional[str], user_id: Any) -> User:
        return User.from_dict(self.api_client.get(f"{self.base_path}/{user_id}", token=token))

    def create(self, token: Optional[str], form: Mapping[str, Any]) -> Optional[User]:
        payload = validate_user(form, creating=True)
        data = self.api_client.post(self.base_path, token=token, json_data=payload)
        self._logger.info(f"Created user {payload['username']} with role {payload['role']}")
        return User.from_dict(data) if data else None

    def update(self, token: Optional[str], user_id: Any, form: Mapping[str, Any]) -> Optional[User]:
        payload = validate_user(form, creating=False)
        data = self.api_client.put(f"{self.base_path}/{user_id}", token=token, json_data=payload)
        self._logger.info(f"Updated user {user_id}")
        return User.from_dict(data) if data else None

    def delete(self, token: Optional[str], user_id: Any) -> None:
        self.api_client.delete(f"{self.base_path}/{user_id}", token=token)
        self._logger.info(f"Deleted user {user_id}")

    def toggle_status(self, token: Optional[str], user_id: Any) -> Optional[User]:
        data = self.api_client.patch(f"{self.base_path}/{user_id}/toggle-status", token=token)
        return User.from_dict(data) if data else None

    def reset_password(self, token: Optional[str], user_id: Any) -> str:
        """Reset a user's password; returns the temporary password."""
        data = self.api_client.post(f"{self.base_path}/{user_id}/reset-password", token=token) or {}
        self._logger.info(f"Password reset for user {user_id}")
        return data.get("temporaryPassword", "")

    def by_role(self, token: Optional[str], role) -> List[User]:
        role = UserRole.parse(role)
        data = self.api_client.get(f"{self.base_path}/by-role/{role.value}", token=token)
        return [User.from_dict(item) for item in data or []]

    def search(self, token: Optional[str], query: str) -> List[User]:
        data = self.api_client.get(f"{self.base_path}/search", token=token, params={"q": query})
        return [User.from_dict(item) for item in data or []]
