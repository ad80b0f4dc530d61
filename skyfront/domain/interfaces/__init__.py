"""Domain interfaces following Dependency Inversion Principle."""

from skyfront.domain.interfaces.session_storage import ISessionStorage

__all__ = [
    "ISessionStorage",
]
