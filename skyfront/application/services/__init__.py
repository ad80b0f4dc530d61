"""Application services module.

One service per backend resource; each takes the shared API client and the
caller's bearer token.
"""
from skyfront.application.services.auth_service import AuthService
from skyfront.application.services.flight_service import FlightService
from skyfront.application.services.airport_service import AirportService
from skyfront.application.services.airplane_service import AirplaneService
from skyfront.application.services.booking_service import BookingService
from skyfront.application.services.user_service import UserService
from skyfront.application.services.report_service import ReportService

__all__ = [
    "AuthService",
    "FlightService",
    "AirportService",
    "AirplaneService",
    "BookingService",
    "UserService",
    "ReportService",
]
