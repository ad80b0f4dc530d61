"""Airplane (fleet) management."""
import logging
from typing import Any, List, Mapping, Optional

from skyfront.domain.entities.fleet import Airplane
from skyfront.infrastructure.clients.backend_api_client import BackendAPIClient
from skyfront.utils.validators import validate_airplane


class AirplaneService:
    """Wraps the ``/airplanes`` endpoints."""

    def __init__(self, api_client: BackendAPIClient):
        self.api_client = api_client
        self._logger = logging.getLogger(__name__)

    def list(self, token: Optional[str]) -> List[Airplane]:
        return [Airplane.from_dict(item) for item in self.api_client.get("/airplanes", token=token) or []]

    def get(self, token: Optional[str], airplane_id: str) -> Airplane:
        return Airplane.from_dict(self.api_client.get(f"/airplanes/{airplane_id}", token=token))

    def create(self, token: Optional[str], form: Mapping[str, Any]) -> Optional[Airplane]:
        payload = validate_airplane(form)
        data = self.api_client.post("/airplanes", token=token, json_data=payload)
        self._logger.info(f"Created airplane {payload['registrationNumber']}")
        return Airplane.from_dict(data) if data else None

    def update(self, token: Optional[str], airplane_id: str, form: Mapping[str, Any]) -> Optional[Airplane]:
        payload = validate_airplane(form)
        data = self.api_client.put(f"/airplanes/{airplane_id}", token=token, json_data=payload)
        self._logger.info(f"Updated airplane {airplane_id}")
        return Airplane.from_dict(data) if data else None

    def delete(self, token: Optional[str], airplane_id: str) -> None:
        self.api_client.delete(f"/airplanes/{airplane_id}", token=token)
        self._logger.info(f"Deleted airplane {airplane_id}")

    def available(self, token: Optional[str], departure_time: str, arrival_time: str) -> List[Airplane]:
        """Airplanes free for the whole departure-arrival window."""
        data = self.api_client.get(
            "/airplanes/available",
            token=token,
            params={"departureTime": departure_time, "arrivalTime": arrival_time},
        )
        return [Airplane.from_dict(item) for item in data or []]
