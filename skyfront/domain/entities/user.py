"""User domain entities."""
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any, Dict, Mapping, Optional

from skyfront.domain.entities.common import parse_datetime, pick


class UserRole(str, Enum):
    """Roles issued by the backend; they gate every screen."""

    CUSTOMER = "CUSTOMER"
    OPERATOR = "OPERATOR"
    ADMINISTRATOR = "ADMINISTRATOR"

    @classmethod
    def parse(cls, value: Any) -> "UserRole":
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).upper())
        except ValueError:
            raise ValueError(f"Invalid role: {value}")


@dataclass
class User:
    """Domain entity representing an account on the airline backend."""

    id: int
    username: str
    email: str
    first_name: str
    last_name: str
    role: UserRole
    phone_number: Optional[str] = None
    is_active: Optional[bool] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    def __post_init__(self):
        if not self.username:
            raise ValueError("username is required")
        self.role = UserRole.parse(self.role)

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> "User":
        return cls(
            id=pick(payload, "id", "userId"),
            username=payload.get("username", ""),
            email=payload.get("email", ""),
            first_name=payload.get("firstName", ""),
            last_name=payload.get("lastName", ""),
            role=payload.get("role", UserRole.CUSTOMER.value),
            phone_number=payload.get("phoneNumber"),
            is_active=pick(payload, "isActive", "active"),
            created_at=parse_datetime(payload.get("createdAt")),
            updated_at=parse_datetime(payload.get("updatedAt")),
        )

    def to_dict(self) -> Dict[str, Any]:
        """Serialise to the backend's camelCase shape (used by the session store)."""
        return {
            "id": self.id,
            "username": self.username,
            "email": self.email,
            "firstName": self.first_name,
            "lastName": self.last_name,
            "role": self.role.value,
            "phoneNumber": self.phone_number,
            "isActive": self.is_active,
        }
