"""Flight search, scheduling and seat availability."""
import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Mapping, Optional

from skyfront.domain.entities.common import Page, page_of
from skyfront.domain.entities.flight import (
    Flight,
    FlightSearchCriteria,
    FlightSearchResult,
    FlightStatus,
    SeatClass,
)
from skyfront.infrastructure.clients.backend_api_client import BackendAPIClient
from skyfront.utils.validators import validate_flight


logger = logging.getLogger(__name__)


def _seat_class_value(seat_class) -> str:
    return (SeatClass.parse(seat_class) or SeatClass.ECONOMY).value


class FlightService:
    """Wraps the ``/flights`` endpoints."""

    def __init__(self, api_client: BackendAPIClient):
        self.api_client = api_client
        self._logger = logging.getLogger(__name__)

    # Search

    def search(self, token: Optional[str], criteria: FlightSearchCriteria) -> FlightSearchResult:
        """
        Run a flight search on the backend.

        Args:
            token: Bearer token of the current user
            criteria: Search form values

        Returns:
            Direct flights and transit options, unfiltered
        """
        self._logger.info(
            f"Searching flights {criteria.origin} -> {criteria.destination} on {criteria.departure_date}"
        )
        data = self.api_client.post("/flights/search", token=token, json_data=criteria.to_payload())
        result = FlightSearchResult.from_dict(data)
        self._logger.info(
            f"Found {len(result.direct_flights)} direct and {len(result.transit_flights)} transit options"
        )
        return result

    def direct(self, token: Optional[str], origin: str, destination: str, departure_date: str) -> List[Flight]:
        data = self.api_client.get(
            "/flights/direct",
            token=token,
            params={"origin": origin, "destination": destination, "departureDate": departure_date},
        )
        return [Flight.from_dict(item) for item in data or []]

    def transit(self, token: Optional[str], origin: str, destination: str, departure_date: str) -> FlightSearchResult:
        data = self.api_client.get(
            "/flights/transit",
            token=token,
            params={"origin": origin, "destination": destination, "departureDate": departure_date},
        )
        return FlightSearchResult.from_dict(data)

    # Management

    def list(
        self,
        token: Optional[str],
        page: int = 1,
        limit: int = 10,
        origin: Optional[str] = None,
        destination: Optional[str] = None,
        date: Optional[str] = None,
        status: Optional[str] = None
    ) -> Page:
        raw = self.api_client.get_paginated(
            "/flights",
            token=token,
            params={
                "page": page,
                "limit": limit,
                "origin": origin,
                "destination": destination,
                "date": date,
                "status": status,
            },
        )
        return page_of(raw, Flight.from_dict)

    def get(self, token: Optional[str], flight_id: str) -> Flight:
        return Flight.from_dict(self.api_client.get(f"/flights/{flight_id}", token=token))

    def create(self, token: Optional[str], form: Mapping[str, Any]) -> Optional[Flight]:
        """
        Validate and create a flight.

        Raises:
            ValidationError: If the form is invalid (no request is made)
            ApiError: If the backend refuses it, e.g. on a schedule conflict
        """
        payload = validate_flight(form)
        data = self.api_client.post("/flights", token=token, json_data=payload)
        self._logger.info(f"Created flight {payload['flightNumber']}")
        return Flight.from_dict(data) if data else None

    def update(self, token: Optional[str], flight_id: str, form: Mapping[str, Any]) -> Optional[Flight]:
        payload = validate_flight(form)
        data = self.api_client.put(f"/flights/{flight_id}", token=token, json_data=payload)
        self._logger.info(f"Updated flight {flight_id}")
        return Flight.from_dict(data) if data else None

    def delete(self, token: Optional[str], flight_id: str) -> None:
        self.api_client.delete(f"/flights/{flight_id}", token=token)
        self._logger.info(f"Deleted flight {flight_id}")

    def update_status(self, token: Optional[str], flight_id: str, status) -> Optional[Flight]:
        status = FlightStatus(str(getattr(status, "value", status)).upper())
        data = self.api_client.patch(
            f"/flights/{flight_id}/status", token=token, json_data={"status": status.value}
        )
        self._logger.info(f"Flight {flight_id} status set to {status.value}")
        return Flight.from_dict(data) if data else None

    # Availability

    def seat_availability(self, token: Optional[str], flight_id: str, seat_class=None) -> Dict[str, int]:
        data = self.api_client.get(
            f"/flights/{flight_id}/availability/{_seat_class_value(seat_class)}", token=token
        ) or {}
        return {"available": int(data.get("available", 0)), "total": int(data.get("total", 0))}

    def available_seats(self, token: Optional[str], flight_id: str, seat_class=None) -> List[str]:
        data = self.api_client.get(f"/flights/{flight_id}/seats/{_seat_class_value(seat_class)}", token=token)
        return list(data or [])

    # Utilities

    def popular_routes(self, token: Optional[str]) -> List[Dict[str, Any]]:
        return list(self.api_client.get("/flights/popular-routes", token=token) or [])

    def by_airplane(self, token: Optional[str], airplane_id: str) -> List[Flight]:
        data = self.api_client.get(f"/flights/airplane/{airplane_id}", token=token)
        return [Flight.from_dict(item) for item in data or []]

    def validate_schedule(self, token: Optional[str], form: Mapping[str, Any]) -> Dict[str, Any]:
        """Ask the backend whether a schedule conflicts with existing flights."""
        payload = validate_flight(form)
        data = self.api_client.post("/flights/validate-schedule", token=token, json_data=payload) or {}
        return {"valid": bool(data.get("valid")), "conflicts": list(data.get("conflicts") or [])}

    def bookable_flights(self, token: Optional[str], now: Optional[datetime] = None, limit: int = 100) -> List[Flight]:
        """Scheduled flights that have not departed yet, for booking forms."""
        now = now or datetime.now(timezone.utc)
        page = self.list(token, page=1, limit=limit, status=FlightStatus.SCHEDULED.value)
        return [flight for flight in page.items if flight.is_bookable(now)]
