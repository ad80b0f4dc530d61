"""Operational reports."""
from typing import Any, Optional

from skyfront.domain.entities.booking import AirportFlightReport
from skyfront.infrastructure.clients.backend_api_client import BackendAPIClient


class ReportService:
    """Wraps the ``/reports`` endpoints."""

    def __init__(self, api_client: BackendAPIClient):
        self.api_client = api_client

    def airport_flights(
        self,
        token: Optional[str],
        airport_id: str,
        start_date: str,
        end_date: str
    ) -> AirportFlightReport:
        """Arrivals and departures at one airport between two dates."""
        data = self.api_client.get(
            f"/reports/airport/{airport_id}/flights",
            token=token,
            params={"startDate": start_date, "endDate": end_date},
        )
        return AirportFlightReport.from_dict(data or {})

    def flight_statistics(self, token: Optional[str], period: Optional[str] = None) -> Any:
        return self.api_client.get("/reports/flight-statistics", token=token, params={"period": period})
