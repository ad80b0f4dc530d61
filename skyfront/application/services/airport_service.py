"""Airport management."""
import logging
from typing import Any, List, Mapping, Optional

from skyfront.domain.entities.fleet import Airport
from skyfront.infrastructure.clients.backend_api_client import BackendAPIClient
from skyfront.utils.validators import validate_airport


class AirportService:
    """Wraps the ``/airports`` endpoints."""

    def __init__(self, api_client: BackendAPIClient):
        self.api_client = api_client
        self._logger = logging.getLogger(__name__)

    def list(self, token: Optional[str]) -> List[Airport]:
        return [Airport.from_dict(item) for item in self.api_client.get("/airports", token=token) or []]

    def get(self, token: Optional[str], airport_id: str) -> Airport:
        return Airport.from_dict(self.api_client.get(f"/airports/{airport_id}", token=token))

    def create(self, token: Optional[str], form: Mapping[str, Any]) -> Optional[Airport]:
        payload = validate_airport(form)
        data = self.api_client.post("/airports", token=token, json_data=payload)
        self._logger.info(f"Created airport {payload['code']}")
        return Airport.from_dict(data) if data else None

    def update(self, token: Optional[str], airport_id: str, form: Mapping[str, Any]) -> Optional[Airport]:
        payload = validate_airport(form)
        data = self.api_client.put(f"/airports/{airport_id}", token=token, json_data=payload)
        self._logger.info(f"Updated airport {airport_id}")
        return Airport.from_dict(data) if data else None

    def delete(self, token: Optional[str], airport_id: str) -> None:
        self.api_client.delete(f"/airports/{airport_id}", token=token)
        self._logger.info(f"Deleted airport {airport_id}")
