"""Interface for server-side auth session storage (Repository Pattern)."""
from abc import ABC, abstractmethod
from typing import Optional, Dict, Any


class ISessionStorage(ABC):
    """
    Stores the backend token and user record for each browser session.

    The browser only holds an opaque session id in its signed cookie;
    the bearer token never leaves the server.
    """

    @abstractmethod
    def get_session(self, session_id: str) -> Optional[Dict[str, Any]]:
        """
        Retrieve session data.

        Args:
            session_id: Opaque id stored in the browser cookie

        Returns:
            Session data dictionary or None if missing or expired
        """
        pass

    @abstractmethod
    def set_session(self, session_id: str, data: Dict[str, Any], ttl: Optional[int] = None) -> None:
        """
        Store session data, replacing anything stored under the id.

        Args:
            session_id: Opaque id stored in the browser cookie
            data: Serialisable session record
            ttl: Optional time to live in seconds (storage default otherwise)
        """
        pass

    @abstractmethod
    def delete_session(self, session_id: str) -> None:
        """Forget a session; deleting an unknown id is not an error."""
        pass

    @abstractmethod
    def update_session(self, session_id: str, updates: Dict[str, Any]) -> None:
        """
        Merge updates into an existing session, keeping its remaining TTL.

        Raises:
            ValueError: If the session does not exist
        """
        pass

    def ping(self) -> bool:
        """Report whether the backing store is reachable."""
        return True
