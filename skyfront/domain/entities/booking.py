"""Booking and report domain entities."""
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, List, Mapping, Optional

from skyfront.domain.entities.common import parse_datetime, pick, to_float
from skyfront.domain.entities.fleet import Airport
from skyfront.domain.entities.flight import Flight, SeatClass
from skyfront.domain.entities.user import User


class BookingStatus(str, Enum):
    CONFIRMED = "CONFIRMED"
    CANCELLED = "CANCELLED"
    COMPLETED = "COMPLETED"


@dataclass
class Booking:
    """Domain entity representing a seat reservation on a flight."""

    id: str
    booking_reference: str
    customer: Optional[User]
    flight: Flight
    seat_class: SeatClass
    price: float
    status: BookingStatus = BookingStatus.CONFIRMED
    seat_number: Optional[str] = None
    booking_date: Optional[datetime] = None
    created_by: Optional[User] = None
    passenger_name: Optional[str] = None
    passenger_email: Optional[str] = None

    def __post_init__(self):
        """Validate booking entity."""
        if not self.id:
            raise ValueError("id is required")
        if self.price < 0:
            raise ValueError("price must be non-negative")
        if not isinstance(self.status, BookingStatus):
            self.status = BookingStatus(str(self.status).upper())
        if not isinstance(self.seat_class, SeatClass):
            self.seat_class = SeatClass(str(self.seat_class).upper())

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> "Booking":
        customer = payload.get("customer")
        created_by = payload.get("createdBy")
        return cls(
            id=str(payload.get("id", "")),
            booking_reference=payload.get("bookingReference", ""),
            customer=User.from_dict(customer) if customer else None,
            flight=Flight.from_dict(payload.get("flight") or {}),
            seat_class=payload.get("seatClass") or SeatClass.ECONOMY,
            price=to_float(payload.get("price")),
            status=payload.get("status") or BookingStatus.CONFIRMED,
            seat_number=payload.get("seatNumber"),
            booking_date=parse_datetime(payload.get("bookingDate")),
            created_by=User.from_dict(created_by) if created_by else None,
            passenger_name=payload.get("passengerName"),
            passenger_email=payload.get("passengerEmail"),
        )


@dataclass
class PassengerManifest:
    """Everyone booked on a flight."""

    flight: Flight
    passengers: List[Booking] = field(default_factory=list)
    generated_at: Optional[datetime] = None

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> "PassengerManifest":
        return cls(
            flight=Flight.from_dict(payload.get("flight") or {}),
            passengers=[Booking.from_dict(item) for item in payload.get("passengers") or []],
            generated_at=parse_datetime(payload.get("generatedAt")),
        )


@dataclass
class AirportFlightReport:
    """Arrivals and departures at one airport over a date range."""

    airport: Airport
    date: Optional[str] = None
    arriving_flights: List[Flight] = field(default_factory=list)
    departing_flights: List[Flight] = field(default_factory=list)
    generated_at: Optional[datetime] = None

    @property
    def total(self) -> int:
        return len(self.arriving_flights) + len(self.departing_flights)

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> "AirportFlightReport":
        return cls(
            airport=Airport.from_dict(payload.get("airport") or {}),
            date=pick(payload, "date", "startDate"),
            arriving_flights=[Flight.from_dict(item) for item in payload.get("arrivingFlights") or []],
            departing_flights=[Flight.from_dict(item) for item in payload.get("departingFlights") or []],
            generated_at=parse_datetime(payload.get("generatedAt")),
        )
