"""Booking lifecycle, manifests and booking reports."""
import logging
from typing import Any, Dict, List, Mapping, Optional, Sequence

from skyfront.domain.entities.booking import Booking, BookingStatus, PassengerManifest
from skyfront.domain.entities.common import Page, page_of
from skyfront.domain.entities.flight import SeatClass
from skyfront.domain.entities.user import User, UserRole
from skyfront.domain.exceptions import ValidationError
from skyfront.infrastructure.clients.backend_api_client import BackendAPIClient


def _status_value(status) -> Optional[str]:
    if status in (None, "", "all"):
        return None
    return BookingStatus(str(getattr(status, "value", status)).upper()).value


class BookingService:
    """
    Wraps the ``/bookings`` endpoints.

    Seat assignment, pricing and inventory are decided by the backend;
    this service only shapes requests and parses responses.
    """

    def __init__(self, api_client: BackendAPIClient):
        self.api_client = api_client
        self._logger = logging.getLogger(__name__)

    @staticmethod
    def booking_payload(
        acting_user: Optional[User],
        customer_id: Any,
        flight_id: Any,
        seat_class,
        seat_number: Optional[str] = None
    ) -> Dict[str, Any]:
        """
        Build a create-booking body.

        A CUSTOMER always books for themselves, whatever customer id the
        form carried.

        Raises:
            ValidationError: If flight, class or customer are missing
        """
        errors = {}
        if acting_user is not None and acting_user.role == UserRole.CUSTOMER:
            customer_id = acting_user.id
        if customer_id in (None, ""):
            errors["customerId"] = "Please select a customer"
        if flight_id in (None, ""):
            errors["flightId"] = "Please select a flight"
        try:
            parsed_class = SeatClass.parse(seat_class)
        except ValueError:
            parsed_class = None
        if parsed_class is None:
            errors["seatClass"] = "Please select a seat class"
        if errors:
            raise ValidationError(errors)

        payload = {
            "customerId": str(customer_id),
            "flightId": str(flight_id),
            "seatClass": parsed_class.value,
        }
        if seat_number:
            payload["seatNumber"] = seat_number
        return payload

    def create(
        self,
        token: Optional[str],
        acting_user: Optional[User],
        customer_id: Any,
        flight_id: Any,
        seat_class,
        seat_number: Optional[str] = None
    ) -> Optional[Booking]:
        """
        Create a booking.

        Args:
            token: Bearer token of the current user
            acting_user: Signed-in user placing the booking
            customer_id: Customer the booking is for (ignored for customers)
            flight_id: Flight to book
            seat_class: FIRST, BUSINESS or ECONOMY
            seat_number: Optional seat; the backend assigns one otherwise

        Returns:
            The confirmed booking, or None when the backend sends no body
        """
        payload = self.booking_payload(acting_user, customer_id, flight_id, seat_class, seat_number)
        data = self.api_client.post("/bookings", token=token, json_data=payload)
        if not data:
            self._logger.info(f"Created booking on flight {payload['flightId']}")
            return None
        booking = Booking.from_dict(data)
        self._logger.info(f"Created booking {booking.booking_reference} on flight {payload['flightId']}")
        return booking

    def get(self, token: Optional[str], booking_id: str) -> Booking:
        return Booking.from_dict(self.api_client.get(f"/bookings/{booking_id}", token=token))

    def get_by_reference(self, token: Optional[str], reference: str) -> Booking:
        return Booking.from_dict(self.api_client.get(f"/bookings/reference/{reference}", token=token))

    def list(
        self,
        token: Optional[str],
        page: int = 1,
        limit: int = 10,
        customer_id: Optional[str] = None,
        flight_id: Optional[str] = None,
        status=None,
        start_date: Optional[str] = None,
        end_date: Optional[str] = None
    ) -> Page:
        raw = self.api_client.get_paginated(
            "/bookings",
            token=token,
            params={
                "page": page,
                "limit": limit,
                "customerId": customer_id,
                "flightId": flight_id,
                "status": _status_value(status),
                "startDate": start_date,
                "endDate": end_date,
            },
        )
        return page_of(raw, Booking.from_dict)

    def for_user(self, token: Optional[str], user_id: Any, page: int = 1, limit: int = 10, status=None) -> Page:
        raw = self.api_client.get_paginated(
            f"/bookings/user/{user_id}",
            token=token,
            params={"page": page, "limit": limit, "status": _status_value(status)},
        )
        return page_of(raw, Booking.from_dict)

    def mine(self, token: Optional[str], page: int = 1, limit: int = 100, status=None) -> Page:
        raw = self.api_client.get_paginated(
            "/bookings/me",
            token=token,
            params={"page": page, "limit": limit, "status": _status_value(status)},
        )
        return page_of(raw, Booking.from_dict)

    def all_mine(self, token: Optional[str], limit: int = 100, status=None) -> List[Booking]:
        """Every booking of the signed-in user, following the backend's pages."""
        first = self.mine(token, page=1, limit=limit, status=status)
        bookings = list(first.items)
        for page in range(2, first.pagination.total_pages + 1):
            items = self.mine(token, page=page, limit=limit, status=status).items
            if not items:
                break
            bookings.extend(items)
        return bookings

    def update(self, token: Optional[str], booking_id: str, changes: Mapping[str, Any]) -> Optional[Booking]:
        data = self.api_client.put(f"/bookings/{booking_id}", token=token, json_data=dict(changes))
        return Booking.from_dict(data) if data else None

    def cancel(self, token: Optional[str], booking_id: str, reason: Optional[str] = None) -> Optional[Booking]:
        data = self.api_client.patch(
            f"/bookings/{booking_id}/cancel", token=token, json_data={"reason": reason or None}
        )
        self._logger.info(f"Cancelled booking {booking_id}")
        return Booking.from_dict(data) if data else None

    def confirm(self, token: Optional[str], booking_id: str) -> Optional[Booking]:
        data = self.api_client.patch(f"/bookings/{booking_id}/confirm", token=token)
        self._logger.info(f"Confirmed booking {booking_id}")
        return Booking.from_dict(data) if data else None

    def select_seat(self, token: Optional[str], booking_id: str, seat_number: str) -> Optional[Booking]:
        data = self.api_client.patch(
            f"/bookings/{booking_id}/seat", token=token, json_data={"seatNumber": seat_number}
        )
        return Booking.from_dict(data) if data else None

    def booked_seats(self, token: Optional[str], flight_id: str, seat_class) -> List[str]:
        seat_class = (SeatClass.parse(seat_class) or SeatClass.ECONOMY).value
        data = self.api_client.get(f"/bookings/flight/{flight_id}/booked-seats/{seat_class}", token=token)
        return list(data or [])

    # Manifests

    def manifest(self, token: Optional[str], flight_id: str) -> PassengerManifest:
        data = self.api_client.get(f"/bookings/flight/{flight_id}/manifest", token=token)
        return PassengerManifest.from_dict(data)

    def manifest_pdf(self, token: Optional[str], flight_id: str) -> bytes:
        return self.api_client.get_bytes(f"/bookings/flight/{flight_id}/manifest/pdf", token=token)

    # Reports

    def statistics(
        self,
        token: Optional[str],
        start_date: Optional[str] = None,
        end_date: Optional[str] = None,
        group_by: Optional[str] = None
    ) -> Any:
        if group_by not in (None, "", "day", "week", "month"):
            raise ValidationError({"groupBy": "Group by must be day, week or month"})
        return self.api_client.get(
            "/bookings/statistics",
            token=token,
            params={"startDate": start_date, "endDate": end_date, "groupBy": group_by},
        )

    def revenue(
        self,
        token: Optional[str],
        start_date: Optional[str] = None,
        end_date: Optional[str] = None,
        airline_id: Optional[str] = None
    ) -> Any:
        return self.api_client.get(
            "/bookings/revenue",
            token=token,
            params={"startDate": start_date, "endDate": end_date, "airlineId": airline_id},
        )

    def popular_destinations(
        self,
        token: Optional[str],
        limit: Optional[int] = None,
        period: Optional[str] = None
    ) -> List[Dict[str, Any]]:
        data = self.api_client.get(
            "/bookings/popular-destinations", token=token, params={"limit": limit, "period": period}
        )
        return list(data or [])

    # Search and bulk operations

    def search(self, token: Optional[str], criteria: Mapping[str, Any]) -> List[Booking]:
        """
        Search bookings by customerName, customerEmail, flightNumber,
        bookingReference, origin, destination or travelDate.
        """
        body = {key: value for key, value in criteria.items() if value not in (None, "")}
        data = self.api_client.post("/bookings/search", token=token, json_data=body)
        return [Booking.from_dict(item) for item in data or []]

    def bulk_cancel(self, token: Optional[str], booking_ids: Sequence[str], reason: str) -> None:
        if not booking_ids:
            raise ValidationError({"bookingIds": "Select at least one booking"})
        self.api_client.post(
            "/bookings/bulk-cancel", token=token, json_data={"bookingIds": list(booking_ids), "reason": reason}
        )
        self._logger.info(f"Bulk cancelled {len(booking_ids)} bookings")

    def bulk_confirm(self, token: Optional[str], booking_ids: Sequence[str]) -> None:
        if not booking_ids:
            raise ValidationError({"bookingIds": "Select at least one booking"})
        self.api_client.post("/bookings/bulk-confirm", token=token, json_data={"bookingIds": list(booking_ids)})
        self._logger.info(f"Bulk confirmed {len(booking_ids)} bookings")

    # Validation, check-in and notifications

    def validate(
        self,
        token: Optional[str],
        acting_user: Optional[User],
        customer_id: Any,
        flight_id: Any,
        seat_class,
        seat_number: Optional[str] = None
    ) -> Dict[str, Any]:
        """Dry-run a booking; returns ``{valid, errors, warnings, pricing}``."""
        payload = self.booking_payload(acting_user, customer_id, flight_id, seat_class, seat_number)
        data = self.api_client.post("/bookings/validate", token=token, json_data=payload) or {}
        return {
            "valid": bool(data.get("valid")),
            "errors": list(data.get("errors") or []),
            "warnings": list(data.get("warnings") or []),
            "pricing": data.get("pricing"),
        }

    def check_in(self, token: Optional[str], booking_id: str) -> Optional[Booking]:
        data = self.api_client.patch(f"/bookings/{booking_id}/check-in", token=token)
        return Booking.from_dict(data) if data else None

    def checked_in(self, token: Optional[str], flight_id: str) -> List[Booking]:
        data = self.api_client.get(f"/bookings/flight/{flight_id}/checked-in", token=token)
        return [Booking.from_dict(item) for item in data or []]

    def send_confirmation(self, token: Optional[str], booking_id: str) -> None:
        self.api_client.post(f"/bookings/{booking_id}/send-confirmation", token=token)

    def send_reminder(self, token: Optional[str], booking_id: str) -> None:
        self.api_client.post(f"/bookings/{booking_id}/send-reminder", token=token)
        self._logger.info(f"Reminder sent for booking {booking_id}")
