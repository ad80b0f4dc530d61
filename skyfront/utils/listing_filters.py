"""In-page filters and counters for the management listings."""
from typing import Dict, Iterable, List, Optional

from skyfront.domain.entities.fleet import Airplane, AirplaneCapacity, Airport
from skyfront.domain.entities.flight import Flight, FlightStatus

CONTINENT_COUNTRIES: Dict[str, List[str]] = {
    "north-america": ["United States", "Canada", "Mexico"],
    "europe": ["United Kingdom", "France", "Germany", "Italy", "Spain", "Netherlands", "Switzerland"],
    "asia": ["Japan", "China", "Singapore", "Thailand", "India", "South Korea"],
    "oceania": ["Australia", "New Zealand"],
    "africa": ["South Africa", "Egypt", "Kenya", "Morocco"],
}

IN_PROGRESS_STATUSES = (FlightStatus.BOARDING, FlightStatus.DEPARTED, FlightStatus.IN_FLIGHT)
ISSUE_STATUSES = (FlightStatus.CANCELLED, FlightStatus.DELAYED)


def _unset(value) -> bool:
    return value in (None, "", "all")


def _contains(term: str, *fields: Optional[str]) -> bool:
    needle = term.lower()
    return any(needle in (value or "").lower() for value in fields)


def filter_flights(
    flights: Iterable[Flight],
    term: str = "",
    status=None,
    origin_id: Optional[str] = None,
    destination_id: Optional[str] = None,
    date: Optional[str] = None
) -> List[Flight]:
    """
    Filter the flight management table.

    ``date`` is ``YYYY-MM-DD`` and matches the departure's calendar day.
    """
    result = list(flights)
    term = (term or "").strip()
    if term:
        result = [
            f for f in result
            if _contains(
                term,
                f.flight_number,
                f.origin.code,
                f.destination.code,
                f.origin.city,
                f.destination.city,
                f.airplane.model if f.airplane else None,
            )
        ]
    if not _unset(status):
        status = FlightStatus(str(getattr(status, "value", status)).upper())
        result = [f for f in result if f.status == status]
    if not _unset(origin_id):
        result = [f for f in result if str(f.origin.id) == str(origin_id)]
    if not _unset(destination_id):
        result = [f for f in result if str(f.destination.id) == str(destination_id)]
    if date:
        result = [f for f in result if f.departure_time and f.departure_time.date().isoformat() == date]
    return result


def flight_stats(flights: Iterable[Flight]) -> Dict[str, int]:
    flights = list(flights)
    return {
        "scheduled": sum(1 for f in flights if f.status == FlightStatus.SCHEDULED),
        "in_progress": sum(1 for f in flights if f.status in IN_PROGRESS_STATUSES),
        "completed": sum(1 for f in flights if f.status == FlightStatus.ARRIVED),
        "issues": sum(1 for f in flights if f.status in ISSUE_STATUSES),
    }


def filter_airports(
    airports: Iterable[Airport],
    term: str = "",
    country: Optional[str] = None,
    continent: Optional[str] = None
) -> List[Airport]:
    result = list(airports)
    term = (term or "").strip()
    if term:
        result = [a for a in result if _contains(term, a.code, a.name, a.city, a.country)]
    if not _unset(country):
        result = [a for a in result if a.country == country]
    if not _unset(continent):
        countries = CONTINENT_COUNTRIES.get(continent, [])
        result = [a for a in result if a.country in countries]
    return result


def airport_stats(airports: Iterable[Airport]) -> Dict[str, int]:
    airports = list(airports)
    return {
        "total": len(airports),
        "countries": len({a.country for a in airports if a.country}),
        "with_coordinates": sum(1 for a in airports if a.has_coordinates),
    }


def countries(airports: Iterable[Airport]) -> List[str]:
    return sorted({a.country for a in airports if a.country})


def filter_airplanes(
    airplanes: Iterable[Airplane],
    term: str = "",
    capacity=None,
    active: Optional[str] = None
) -> List[Airplane]:
    """``active`` is ``all``, ``active`` or ``inactive``."""
    result = list(airplanes)
    term = (term or "").strip()
    if term:
        result = [a for a in result if _contains(term, a.model, a.registration)]
    if not _unset(active):
        wanted = active == "active"
        result = [a for a in result if a.is_active == wanted]
    if not _unset(capacity):
        capacity = AirplaneCapacity(str(getattr(capacity, "value", capacity)).upper())
        result = [a for a in result if a.capacity == capacity]
    return result


def fleet_stats(airplanes: Iterable[Airplane]) -> Dict[str, int]:
    airplanes = list(airplanes)
    return {
        "total": len(airplanes),
        "active": sum(1 for a in airplanes if a.is_active),
        "inactive": sum(1 for a in airplanes if not a.is_active),
        "total_seats": sum(a.total_seats for a in airplanes),
    }
