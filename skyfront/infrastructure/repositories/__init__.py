"""Repository implementations (Infrastructure Layer).

These implement domain interfaces defined in skyfront.domain.interfaces.
"""
from skyfront.infrastructure.repositories.session_storage import (
    RedisSessionStorage,
    InMemorySessionStorage,
)

__all__ = [
    "RedisSessionStorage",
    "InMemorySessionStorage",
]
