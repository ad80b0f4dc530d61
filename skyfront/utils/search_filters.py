"""Client-side filtering and sorting of flight search results.

The backend computes the itineraries; these helpers only narrow and order
what it returned, driven by the filter sidebar on the search page.
"""
from dataclasses import dataclass, field, replace
from datetime import time
from typing import Any, List, Mapping, Optional, Tuple

from skyfront.domain.entities.flight import Flight, FlightSearchResult, SeatClass

SORT_OPTIONS = ("price", "departure", "duration")
DEFAULT_MAX_STOPS = 2
DEFAULT_PRICE_RANGE = (0.0, 5000.0)


def _parse_hhmm(value: str) -> Optional[time]:
    if not value:
        return None
    try:
        hours, minutes = value.split(":")[:2]
        return time(int(hours), int(minutes))
    except ValueError:
        return None


@dataclass
class SearchFilters:
    """State of the filter sidebar."""

    max_price: float = 0
    seat_class: Optional[SeatClass] = None
    departure_start: str = ""
    departure_end: str = ""
    airlines: Tuple[str, ...] = field(default_factory=tuple)
    max_stops: int = DEFAULT_MAX_STOPS
    sort_by: str = "price"

    def __post_init__(self):
        self.seat_class = SeatClass.parse(self.seat_class)
        self.airlines = tuple(code.upper() for code in self.airlines if code)
        if self.sort_by not in SORT_OPTIONS:
            self.sort_by = "price"

    @property
    def departure_window(self) -> Optional[Tuple[time, time]]:
        start = _parse_hhmm(self.departure_start)
        end = _parse_hhmm(self.departure_end)
        if start is None or end is None:
            return None
        return start, end

    @classmethod
    def from_args(cls, args: Mapping[str, Any]) -> "SearchFilters":
        """
        Build filters from query-string arguments.

        Invalid numbers fall back to defaults instead of failing the page.
        """
        try:
            max_price = max(float(args.get("max_price") or 0), 0)
        except (TypeError, ValueError):
            max_price = 0
        try:
            max_stops = int(args.get("max_stops", DEFAULT_MAX_STOPS))
        except (TypeError, ValueError):
            max_stops = DEFAULT_MAX_STOPS
        try:
            seat_class = SeatClass.parse(args.get("filter_class"))
        except ValueError:
            seat_class = None

        if hasattr(args, "getlist"):
            airlines = args.getlist("airline")
        else:
            airlines = args.get("airline") or []
            if isinstance(airlines, str):
                airlines = [airlines]

        return cls(
            max_price=max_price,
            seat_class=seat_class,
            departure_start=args.get("departure_start") or "",
            departure_end=args.get("departure_end") or "",
            airlines=tuple(airlines),
            max_stops=max(max_stops, 0),
            sort_by=args.get("sort_by") or "price",
        )


def _sort_key(filters: SearchFilters):
    if filters.sort_by == "departure":
        return lambda flight: flight.departure_time
    if filters.sort_by == "duration":
        return lambda flight: flight.duration
    return lambda flight: flight.price_for(filters.seat_class)


def apply_filters(result: FlightSearchResult, filters: SearchFilters) -> FlightSearchResult:
    """
    Narrow and sort a search result.

    Args:
        result: Unfiltered result from the backend
        filters: Sidebar state

    Returns:
        A new FlightSearchResult; the input is left untouched
    """
    direct: List[Flight] = list(result.direct_flights)
    transit = list(result.transit_flights)

    if filters.max_price > 0:
        direct = [f for f in direct if f.price_for(filters.seat_class) <= filters.max_price]
        transit = [option for option in transit if option.total_price <= filters.max_price]

    if filters.seat_class is not None:
        direct = [f for f in direct if f.available_seats_for(filters.seat_class) > 0]

    window = filters.departure_window
    if window is not None:
        start, end = window
        direct = [
            f for f in direct
            if start <= f.departure_time.time().replace(second=0, microsecond=0) <= end
        ]

    if filters.airlines:
        selected = set(filters.airlines)
        direct = [f for f in direct if f.airline_code in selected]
        transit = [option for option in transit if all(code in selected for code in option.airline_codes)]

    direct.sort(key=_sort_key(filters))
    transit = [option for option in transit if option.stops <= filters.max_stops]

    return replace(result, direct_flights=direct, transit_flights=transit)


def price_range(result: Optional[FlightSearchResult]) -> Tuple[float, float]:
    """Cheapest and dearest fare across every class and transit total."""
    if result is None:
        return DEFAULT_PRICE_RANGE
    prices = []
    for flight in result.direct_flights:
        prices.extend((flight.economy_class_price, flight.business_class_price, flight.first_class_price))
    prices.extend(option.total_price for option in result.transit_flights)
    if not prices:
        return DEFAULT_PRICE_RANGE
    return min(prices), max(prices)


def available_airlines(result: Optional[FlightSearchResult]) -> List[str]:
    if result is None:
        return []
    codes = {flight.airline_code for flight in result.direct_flights}
    for option in result.transit_flights:
        codes.update(option.airline_codes)
    return sorted(codes)


def has_active_filters(filters: SearchFilters) -> bool:
    return bool(
        filters.max_price > 0
        or filters.seat_class
        or filters.departure_start
        or filters.departure_end
        or filters.airlines
        or filters.max_stops < DEFAULT_MAX_STOPS
    )
