"""Flight domain entities."""
from dataclasses import dataclass, field
from datetime import date, datetime, timedelta
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional

from skyfront.domain.entities.common import align_now, parse_datetime, to_float, to_int
from skyfront.domain.entities.fleet import Airplane, Airport


class FlightStatus(str, Enum):
    SCHEDULED = "SCHEDULED"
    BOARDING = "BOARDING"
    DEPARTED = "DEPARTED"
    IN_FLIGHT = "IN_FLIGHT"
    ARRIVED = "ARRIVED"
    CANCELLED = "CANCELLED"
    DELAYED = "DELAYED"


class SeatClass(str, Enum):
    """Fare tier used for pricing and seat-map partitioning."""

    FIRST = "FIRST"
    BUSINESS = "BUSINESS"
    ECONOMY = "ECONOMY"

    @classmethod
    def parse(cls, value: Any) -> Optional["SeatClass"]:
        """Parse a form/query value; blank and ``all`` mean no class."""
        if value is None or isinstance(value, cls):
            return value
        text = str(value).strip().upper()
        if not text or text == "ALL":
            return None
        return cls(text)


@dataclass
class Flight:
    """Domain entity representing a scheduled flight."""

    id: str
    flight_number: str
    origin: Airport
    destination: Airport
    departure_time: datetime
    arrival_time: datetime
    status: FlightStatus = FlightStatus.SCHEDULED
    airplane: Optional[Airplane] = None
    first_class_price: float = 0.0
    business_class_price: float = 0.0
    economy_class_price: float = 0.0
    available_first_class_seats: int = 0
    available_business_class_seats: int = 0
    available_economy_class_seats: int = 0

    def __post_init__(self):
        """Validate flight entity."""
        if not self.id:
            raise ValueError("id is required")
        if not isinstance(self.status, FlightStatus):
            self.status = FlightStatus(str(self.status).upper())

    @property
    def duration(self) -> timedelta:
        return self.arrival_time - self.departure_time

    @property
    def airline_code(self) -> str:
        return self.flight_number[:2].upper()

    def price_for(self, seat_class: Optional[SeatClass] = None) -> float:
        """Fare for a seat class; no class means economy."""
        if seat_class == SeatClass.FIRST:
            return self.first_class_price
        if seat_class == SeatClass.BUSINESS:
            return self.business_class_price
        return self.economy_class_price

    def available_seats_for(self, seat_class: Optional[SeatClass] = None) -> int:
        if seat_class == SeatClass.FIRST:
            return self.available_first_class_seats
        if seat_class == SeatClass.BUSINESS:
            return self.available_business_class_seats
        return self.available_economy_class_seats

    def is_bookable(self, now: datetime) -> bool:
        """Scheduled and still in the future."""
        if self.departure_time is None:
            return False
        now = align_now(self.departure_time, now)
        return self.status == FlightStatus.SCHEDULED and self.departure_time > now

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> "Flight":
        airplane = payload.get("airplane")
        return cls(
            id=str(payload.get("id", "")),
            flight_number=payload.get("flightNumber", ""),
            origin=Airport.from_dict(payload.get("origin") or {}),
            destination=Airport.from_dict(payload.get("destination") or {}),
            departure_time=parse_datetime(payload.get("departureTime")),
            arrival_time=parse_datetime(payload.get("arrivalTime")),
            status=payload.get("status") or FlightStatus.SCHEDULED,
            airplane=Airplane.from_dict(airplane) if airplane else None,
            first_class_price=to_float(payload.get("firstClassPrice")),
            business_class_price=to_float(payload.get("businessClassPrice")),
            economy_class_price=to_float(payload.get("economyClassPrice")),
            available_first_class_seats=to_int(payload.get("availableFirstClassSeats")),
            available_business_class_seats=to_int(payload.get("availableBusinessClassSeats")),
            available_economy_class_seats=to_int(payload.get("availableEconomyClassSeats")),
        )


@dataclass
class TransitFlightOption:
    """Multi-leg itinerary computed by the backend; rendered as-is."""

    id: str
    total_duration: int
    total_price: float
    flights: List[Flight] = field(default_factory=list)
    transit_airports: List[Airport] = field(default_factory=list)

    @property
    def stops(self) -> int:
        return max(len(self.flights) - 1, 0)

    @property
    def airline_codes(self) -> List[str]:
        return [leg.airline_code for leg in self.flights]

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> "TransitFlightOption":
        return cls(
            id=str(payload.get("id", "")),
            total_duration=to_int(payload.get("totalDuration")),
            total_price=to_float(payload.get("totalPrice")),
            flights=[Flight.from_dict(item) for item in payload.get("flights") or []],
            transit_airports=[Airport.from_dict(item) for item in payload.get("transitAirports") or []],
        )


@dataclass
class FlightSearchCriteria:
    """What the customer asked for on the search form."""

    origin: str
    destination: str
    departure_date: str
    seat_class: Optional[SeatClass] = None
    passengers: int = 1
    include_transit: bool = False

    def __post_init__(self):
        self.seat_class = SeatClass.parse(self.seat_class)
        if self.passengers < 1:
            raise ValueError("passengers must be positive")

    @property
    def travel_date(self) -> Optional[date]:
        try:
            return date.fromisoformat(self.departure_date)
        except ValueError:
            return None

    def to_payload(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "origin": self.origin,
            "destination": self.destination,
            "departureDate": self.departure_date,
            "passengers": self.passengers,
            "includeTransit": self.include_transit,
        }
        if self.seat_class is not None:
            payload["seatClass"] = self.seat_class.value
        return payload


@dataclass
class FlightSearchResult:
    """Direct flights plus transit options for one search."""

    direct_flights: List[Flight] = field(default_factory=list)
    transit_flights: List[TransitFlightOption] = field(default_factory=list)

    @property
    def total(self) -> int:
        return len(self.direct_flights) + len(self.transit_flights)

    @classmethod
    def from_dict(cls, payload: Optional[Mapping[str, Any]]) -> "FlightSearchResult":
        payload = payload or {}
        return cls(
            direct_flights=[Flight.from_dict(item) for item in payload.get("directFlights") or []],
            transit_flights=[
                TransitFlightOption.from_dict(item) for item in payload.get("transitFlights") or []
            ],
        )
