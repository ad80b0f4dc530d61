"""Grouping, filtering and summary figures for booking lists."""
from datetime import datetime
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from skyfront.domain.entities.booking import Booking, BookingStatus
from skyfront.domain.entities.common import align_now
from skyfront.domain.entities.flight import SeatClass

PAID_STATUSES = (BookingStatus.CONFIRMED, BookingStatus.COMPLETED)


def _is_future(moment: Optional[datetime], now: datetime) -> bool:
    return moment is not None and moment > align_now(moment, now)


def _parse_status(value) -> Optional[BookingStatus]:
    if value in (None, "", "all"):
        return None
    return BookingStatus(str(getattr(value, "value", value)).upper())


def _parse_class(value) -> Optional[SeatClass]:
    return SeatClass.parse(value)


def organize(bookings: Iterable[Booking], now: datetime) -> Tuple[List[Booking], List[Booking]]:
    """
    Split bookings into upcoming and past trips.

    Upcoming means CONFIRMED and departing after ``now``, soonest first.
    Everything else is past, most recent departure first.
    """
    upcoming, past = [], []
    for booking in bookings:
        if booking.status == BookingStatus.CONFIRMED and _is_future(booking.flight.departure_time, now):
            upcoming.append(booking)
        else:
            past.append(booking)
    upcoming.sort(key=lambda b: b.flight.departure_time)
    past.sort(key=lambda b: (b.flight.departure_time is not None, b.flight.departure_time or 0), reverse=True)
    return upcoming, past


def _matches(term: str, *fields: Optional[str]) -> bool:
    needle = term.lower()
    return any(needle in (value or "").lower() for value in fields)


def _filter(bookings, status, seat_class) -> List[Booking]:
    status = _parse_status(status)
    seat_class = _parse_class(seat_class)
    result = list(bookings)
    if status is not None:
        result = [b for b in result if b.status == status]
    if seat_class is not None:
        result = [b for b in result if b.seat_class == seat_class]
    return result


def filter_customer_bookings(
    bookings: Iterable[Booking],
    term: str = "",
    status=None,
    seat_class=None
) -> List[Booking]:
    """Filter a customer's own bookings; ``all`` disables a filter."""
    result = _filter(bookings, status, seat_class)
    term = (term or "").strip()
    if term:
        result = [
            b for b in result
            if _matches(
                term,
                b.booking_reference,
                b.flight.flight_number,
                b.flight.origin.code,
                b.flight.destination.code,
                b.flight.origin.city,
                b.flight.destination.city,
            )
        ]
    return result


def filter_managed_bookings(
    bookings: Iterable[Booking],
    term: str = "",
    status=None,
    flight_id: Optional[str] = None,
    seat_class=None
) -> List[Booking]:
    """Filter bookings on the management screen."""
    result = _filter(bookings, status, seat_class)
    if flight_id and flight_id != "all":
        result = [b for b in result if str(b.flight.id) == str(flight_id)]
    term = (term or "").strip()
    if term:
        result = [
            b for b in result
            if _matches(
                term,
                b.booking_reference,
                b.customer.first_name if b.customer else None,
                b.customer.last_name if b.customer else None,
                b.customer.email if b.customer else None,
                b.flight.flight_number,
            )
        ]
    return result


def customer_stats(bookings: Sequence[Booking], upcoming: Sequence[Booking]) -> Dict[str, float]:
    return {
        "total": len(bookings),
        "upcoming": len(upcoming),
        "total_spent": sum(b.price for b in bookings if b.status in PAID_STATUSES),
        "cancelled": sum(1 for b in bookings if b.status == BookingStatus.CANCELLED),
    }


def management_stats(bookings: Sequence[Booking]) -> Dict[str, float]:
    return {
        "total": len(bookings),
        "confirmed": sum(1 for b in bookings if b.status == BookingStatus.CONFIRMED),
        "cancelled": sum(1 for b in bookings if b.status == BookingStatus.CANCELLED),
        "completed": sum(1 for b in bookings if b.status == BookingStatus.COMPLETED),
        "revenue": sum(b.price for b in bookings if b.status in PAID_STATUSES),
    }


def can_cancel(booking: Booking, now: datetime) -> bool:
    """Only confirmed bookings on flights that have not left can be cancelled."""
    return booking.status == BookingStatus.CONFIRMED and _is_future(booking.flight.departure_time, now)
