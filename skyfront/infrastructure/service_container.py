"""Service container for dependency injection (IoC Container Pattern)."""
import logging
from typing import Any, Mapping, Optional

from flask import current_app

from skyfront.application.services import (
    AirplaneService,
    AirportService,
    AuthService,
    BookingService,
    FlightService,
    ReportService,
    UserService,
)
from skyfront.domain.interfaces.session_storage import ISessionStorage
from skyfront.infrastructure.clients.backend_api_client import BackendAPIClient
from skyfront.infrastructure.redis_client import RedisClientFactory
from skyfront.infrastructure.repositories.session_storage import (
    InMemorySessionStorage,
    RedisSessionStorage,
)


class ServiceContainer:
    """
    Service container implementing Dependency Injection pattern.

    One container per Flask app, stored in ``app.config["service_container"]``.
    Every dependency is created on first use and then reused.
    """

    def __init__(self, config: Mapping[str, Any]):
        """
        Initialize service container.

        Args:
            config: Flask app config the dependencies are built from
        """
        self.config = config
        self._logger = logging.getLogger(__name__)
        self._api_client: Optional[BackendAPIClient] = None
        self._session_storage: Optional[ISessionStorage] = None
        self._services = {}

    def get_api_client(self) -> BackendAPIClient:
        """Get or create the backend API client."""
        if self._api_client is None:
            self._api_client = BackendAPIClient(
                base_url=self.config["API_BASE_URL"],
                timeout=self.config["API_TIMEOUT"],
                retry_total=self.config["API_RETRY_TOTAL"],
                retry_backoff=self.config["API_RETRY_BACKOFF"],
                enable_metrics=self.config.get("ENABLE_METRICS", False),
            )
            self._logger.info(f"BackendAPIClient created for {self._api_client.base_url}")
        return self._api_client

    def get_session_storage(self) -> ISessionStorage:
        """
        Get or create session storage.

        Falls back to process memory when Redis is requested but unreachable.
        """
        if self._session_storage is None:
            storage_type = (self.config.get("SESSION_STORAGE_TYPE") or "redis").lower()
            ttl = self.config.get("SESSION_TTL")
            if storage_type == "redis":
                redis_client = RedisClientFactory.get_client(self.config.get("REDIS_URL"))
                if redis_client is not None:
                    self._session_storage = RedisSessionStorage(redis_client, ttl=ttl)
                    self._logger.info("SessionStorage created with redis")
                else:
                    self._logger.warning("Redis unavailable, sessions will be kept in memory")
            elif storage_type != "memory":
                raise ValueError(f"Unknown session storage type: {storage_type}")
            if self._session_storage is None:
                self._session_storage = InMemorySessionStorage(ttl=ttl)
                self._logger.info("SessionStorage created with memory")
        return self._session_storage

    def _service(self, name: str, factory):
        if name not in self._services:
            self._services[name] = factory()
            self._logger.debug(f"{type(self._services[name]).__name__} created")
        return self._services[name]

    @property
    def auth_service(self) -> AuthService:
        return self._service(
            "auth",
            lambda: AuthService(
                self.get_api_client(),
                self.get_session_storage(),
                session_ttl=self.config.get("SESSION_TTL"),
            ),
        )

    @property
    def flight_service(self) -> FlightService:
        return self._service("flight", lambda: FlightService(self.get_api_client()))

    @property
    def airport_service(self) -> AirportService:
        return self._service("airport", lambda: AirportService(self.get_api_client()))

    @property
    def airplane_service(self) -> AirplaneService:
        return self._service("airplane", lambda: AirplaneService(self.get_api_client()))

    @property
    def booking_service(self) -> BookingService:
        return self._service("booking", lambda: BookingService(self.get_api_client()))

    @property
    def user_service(self) -> UserService:
        return self._service("user", lambda: UserService(self.get_api_client()))

    @property
    def report_service(self) -> ReportService:
        return self._service("report", lambda: ReportService(self.get_api_client()))

    def reset(self) -> None:
        """Reset all service instances (useful for testing)."""
        self._api_client = None
        self._session_storage = None
        self._services = {}


def get_container() -> ServiceContainer:
    """Container of the current Flask app."""
    return current_app.config["service_container"]
