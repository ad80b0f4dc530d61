"""Authentication context kept for each signed-in browser session."""
from dataclasses import dataclass
from typing import Any, Dict, Iterable, Mapping, Optional

from skyfront.domain.entities.user import User, UserRole


@dataclass
class AuthContext:
    """Current session: the backend token plus the user it belongs to."""

    session_id: str
    token: Optional[str] = None
    user: Optional[User] = None
    authenticated_at: Optional[str] = None

    @property
    def is_authenticated(self) -> bool:
        return bool(self.token) and self.user is not None

    @property
    def role(self) -> Optional[UserRole]:
        return self.user.role if self.user else None

    def has_role(self, role: UserRole) -> bool:
        return self.role == role

    def has_any_role(self, roles: Iterable[UserRole]) -> bool:
        return self.role is not None and self.role in set(roles)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "token": self.token,
            "user": self.user.to_dict() if self.user else None,
            "authenticated_at": self.authenticated_at,
        }

    @classmethod
    def from_dict(cls, session_id: str, data: Mapping[str, Any]) -> "AuthContext":
        user = data.get("user")
        return cls(
            session_id=session_id,
            token=data.get("token"),
            user=User.from_dict(user) if user else None,
            authenticated_at=data.get("authenticated_at"),
        )
