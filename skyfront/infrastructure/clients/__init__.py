"""External API clients module."""
from skyfront.infrastructure.clients.backend_api_client import BackendAPIClient

__all__ = [
    "BackendAPIClient",
]
