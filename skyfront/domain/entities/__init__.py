"""Domain entities - records mirrored from the airline backend."""
from skyfront.domain.entities.common import Page, Pagination
from skyfront.domain.entities.user import User, UserRole
from skyfront.domain.entities.fleet import Airport, Airplane, AirplaneCapacity
from skyfront.domain.entities.flight import (
    Flight,
    FlightStatus,
    SeatClass,
    TransitFlightOption,
    FlightSearchCriteria,
    FlightSearchResult,
)
from skyfront.domain.entities.booking import (
    Booking,
    BookingStatus,
    PassengerManifest,
    AirportFlightReport,
)
from skyfront.domain.entities.session import AuthContext

__all__ = [
    "Page",
    "Pagination",
    "User",
    "UserRole",
    "Airport",
    "Airplane",
    "AirplaneCapacity",
    "Flight",
    "FlightStatus",
    "SeatClass",
    "TransitFlightOption",
    "FlightSearchCriteria",
    "FlightSearchResult",
    "Booking",
    "BookingStatus",
    "PassengerManifest",
    "AirportFlightReport",
    "AuthContext",
]
