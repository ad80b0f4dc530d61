"""
Shared fixtures.

The airline backend is faked by patching ``requests.Session.request``:
tests register canned responses per ``(method, path)`` and inspect the
calls the client made.
"""
import json
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List, Optional
from unittest import mock

import pytest
import requests

from skyfront import create_app
from skyfront.config.settings import TestingConfig
from skyfront.infrastructure.clients.backend_api_client import BackendAPIClient

BASE_URL = TestingConfig.API_BASE_URL


def envelope(data: Any = None, success: bool = True, message: Optional[str] = None) -> Dict[str, Any]:
    body = {"success": success, "data": data}
    if message is not None:
        body["message"] = message
    return body


def make_response(status: int = 200, body: Any = None, content: Optional[bytes] = None) -> requests.Response:
    response = requests.Response()
    response.status_code = status
    if content is not None:
        response._content = content
        response.headers["Content-Type"] = "application/pdf"
    elif body is None:
        response._content = b""
    else:
        response._content = json.dumps(body).encode("utf-8")
        response.headers["Content-Type"] = "application/json"
    return response


class FakeBackend:
    """Canned responses keyed by HTTP method and API path."""

    def __init__(self):
        self.routes: Dict[tuple, Any] = {}
        self.calls: List[Dict[str, Any]] = []

    def add(self, method: str, path: str, body: Any = None, status: int = 200, content: Optional[bytes] = None):
        self.routes[(method.upper(), path)] = (status, body, content)

    def queue(self, method: str, path: str, *bodies: Any):
        """Answer successive calls to one path with successive bodies; the last one repeats."""
        self.routes[(method.upper(), path)] = [(200, body, None) for body in bodies]

    def fail(self, method: str, path: str, exc: Exception):
        self.routes[(method.upper(), path)] = exc

    def calls_to(self, method: str, path: str) -> List[Dict[str, Any]]:
        return [c for c in self.calls if c["method"] == method.upper() and c["path"] == path]

    def last(self) -> Dict[str, Any]:
        return self.calls[-1]

    def __call__(self, session, method=None, url=None, **kwargs):
        path = url[len(BASE_URL):] if url.startswith(BASE_URL) else url
        self.calls.append({
            "method": method,
            "path": path,
            "params": kwargs.get("params"),
            "json": kwargs.get("json"),
            "headers": kwargs.get("headers") or {},
        })
        route = self.routes.get((method, path))
        if route is None:
            return make_response(404, {"message": f"No route for {method} {path}"})
        if isinstance(route, Exception):
            raise route
        if isinstance(route, list):
            route = route.pop(0) if len(route) > 1 else route[0]
        status, body, content = route
        return make_response(status, body, content)


@pytest.fixture
def backend():
    fake = FakeBackend()
    with mock.patch.object(requests.Session, "request", autospec=True, side_effect=fake):
        yield fake


@pytest.fixture
def api_client(backend):
    return BackendAPIClient(base_url=BASE_URL, timeout=1, retry_total=0)


@pytest.fixture
def app(backend):
    return create_app(TestingConfig)


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def container(app):
    return app.config["service_container"]


# Payload factories

def user_payload(user_id: int = 1, role: str = "CUSTOMER", username: str = "jdoe", **extra) -> Dict[str, Any]:
    payload = {
        "id": user_id,
        "username": username,
        "email": f"{username}@example.com",
        "firstName": "Jane",
        "lastName": "Doe",
        "role": role,
    }
    payload.update(extra)
    return payload


def airport_payload(airport_id: int = 1, code: str = "JFK", city: str = "New York", country: str = "United States"):
    return {
        "id": airport_id,
        "code": code,
        "name": f"{city} International",
        "city": city,
        "country": country,
        "timezone": "UTC",
        "latitude": 40.6,
        "longitude": -73.8,
    }


def airplane_payload(airplane_id: int = 7, first: int = 2, business: int = 4, economy: int = 12, **extra):
    payload = {
        "id": airplane_id,
        "model": "A320",
        "registrationNumber": "N320SF",
        "size": "MEDIUM",
        "firstClassCapacity": first,
        "businessClassCapacity": business,
        "economyClassCapacity": economy,
        "active": True,
    }
    payload.update(extra)
    return payload


def iso(moment: datetime) -> str:
    return moment.isoformat()


def flight_payload(
    flight_id: int = 10,
    number: str = "SK101",
    departure: Optional[datetime] = None,
    hours: int = 3,
    status: str = "SCHEDULED",
    economy: float = 199.0,
    **extra
) -> Dict[str, Any]:
    departure = departure or datetime.now(timezone.utc) + timedelta(days=5)
    payload = {
        "id": flight_id,
        "flightNumber": number,
        "origin": airport_payload(1, "JFK", "New York"),
        "destination": airport_payload(2, "LAX", "Los Angeles"),
        "departureTime": iso(departure),
        "arrivalTime": iso(departure + timedelta(hours=hours)),
        "status": status,
        "airplane": airplane_payload(),
        "firstClassPrice": 900.0,
        "businessClassPrice": 450.0,
        "economyClassPrice": economy,
        "availableFirstClassSeats": 2,
        "availableBusinessClassSeats": 4,
        "availableEconomyClassSeats": 10,
    }
    payload.update(extra)
    return payload


def booking_payload(
    booking_id: int = 100,
    reference: str = "SKY123",
    status: str = "CONFIRMED",
    seat_class: str = "ECONOMY",
    price: float = 199.0,
    flight: Optional[Dict[str, Any]] = None,
    **extra
) -> Dict[str, Any]:
    payload = {
        "id": booking_id,
        "bookingReference": reference,
        "customer": user_payload(),
        "flight": flight or flight_payload(),
        "seatClass": seat_class,
        "price": price,
        "status": status,
        "seatNumber": "E4",
    }
    payload.update(extra)
    return payload


@pytest.fixture
def login(client, backend):
    """Sign the test client in with the given role."""
    def _login(role: str = "CUSTOMER", user_id: int = 1, username: str = "jdoe"):
        data = dict(user_payload(user_id, role, username), token=f"token-{username}-123456")
        data["userId"] = data.pop("id")
        backend.add("POST", "/auth/login", envelope(data))
        response = client.post("/login", data={"username": username, "password": "Secret123"})
        assert response.status_code == 302
        return client
    return _login
