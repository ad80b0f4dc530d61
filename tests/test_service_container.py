import pytest

from skyfront.infrastructure.redis_client import RedisClientFactory
from skyfront.infrastructure.repositories.session_storage import InMemorySessionStorage
from skyfront.infrastructure.service_container import ServiceContainer, get_container


def test_services_are_built_once(container):
    assert container.flight_service is container.flight_service
    assert container.booking_service.api_client is container.flight_service.api_client


def test_testing_config_uses_memory_sessions(container):
    assert isinstance(container.get_session_storage(), InMemorySessionStorage)
    assert container.auth_service.session_storage is container.get_session_storage()


def test_falls_back_to_memory_when_redis_is_down(app, monkeypatch):
    monkeypatch.setattr(RedisClientFactory, "get_client", classmethod(lambda cls, url=None: None))
    container = ServiceContainer(dict(app.config, SESSION_STORAGE_TYPE="redis"))

    assert isinstance(container.get_session_storage(), InMemorySessionStorage)


def test_unknown_storage_type(app):
    container = ServiceContainer(dict(app.config, SESSION_STORAGE_TYPE="disk"))

    with pytest.raises(ValueError):
        container.get_session_storage()


def test_reset_rebuilds_services(container):
    service = container.user_service
    container.reset()

    assert container.user_service is not service


def test_get_container_returns_app_container(app, container):
    with app.app_context():
        assert get_container() is container
