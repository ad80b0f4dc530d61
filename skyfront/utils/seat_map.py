"""Seat-map derivation from an airplane's cabin layout."""
from typing import Iterable, List, Optional

from skyfront.domain.entities.fleet import Airplane
from skyfront.domain.entities.flight import Flight, SeatClass

SEAT_PREFIXES = {
    SeatClass.FIRST: "F",
    SeatClass.BUSINESS: "B",
    SeatClass.ECONOMY: "E",
}


def seat_prefix(seat_class: Optional[SeatClass]) -> str:
    return SEAT_PREFIXES[SeatClass.parse(seat_class) or SeatClass.ECONOMY]


def class_capacity(airplane: Optional[Airplane], seat_class: Optional[SeatClass]) -> int:
    if airplane is None:
        return 0
    seat_class = SeatClass.parse(seat_class) or SeatClass.ECONOMY
    if seat_class == SeatClass.FIRST:
        return airplane.first_class_capacity
    if seat_class == SeatClass.BUSINESS:
        return airplane.business_class_capacity
    return airplane.economy_class_capacity


def generate_seats(prefix: str, capacity: int) -> List[str]:
    """Seat labels ``<prefix>1`` to ``<prefix><capacity>``."""
    return [f"{prefix}{number}" for number in range(1, max(capacity, 0) + 1)]


def available_seats(flight: Flight, seat_class: Optional[SeatClass], booked: Iterable[str]) -> List[str]:
    """
    Seats of one class not yet booked, in cabin order.

    Args:
        flight: Flight whose airplane defines the cabin
        seat_class: Class to lay out (economy when None)
        booked: Seat labels already taken, from the backend

    Returns:
        Free seat labels; empty when the flight has no airplane attached
    """
    taken = set(booked)
    seats = generate_seats(seat_prefix(seat_class), class_capacity(flight.airplane, seat_class))
    return [seat for seat in seats if seat not in taken]


def seat_rows(seats: List[str], per_row: int = 6) -> List[List[str]]:
    if per_row < 1:
        raise ValueError("per_row must be positive")
    return [seats[index:index + per_row] for index in range(0, len(seats), per_row)]
