from skyfront.infrastructure.repositories.session_storage import InMemorySessionStorage


def test_health(client):
    response = client.get("/health")

    assert response.status_code == 200
    assert response.get_json() == {"status": "healthy", "service": "skyfront"}


def test_liveness(client):
    assert client.get("/health/live").get_json()["status"] == "alive"


def test_readiness(client):
    response = client.get("/health/ready")

    assert response.status_code == 200
    assert response.get_json()["checks"] == {
        "session_storage": True,
        "storage_type": "InMemorySessionStorage",
    }


def test_not_ready_when_storage_is_down(client, monkeypatch):
    monkeypatch.setattr(InMemorySessionStorage, "ping", lambda self: False)

    response = client.get("/health/ready")

    assert response.status_code == 503
    assert response.get_json()["status"] == "not_ready"
