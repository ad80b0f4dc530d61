"""Customer-facing pages: search, booking and My Bookings."""
import logging
from datetime import datetime, timezone

from flask import Blueprint, flash, redirect, render_template, request, url_for

from skyfront.decorators.auth import current_auth, current_token, login_required
from skyfront.domain.entities.flight import FlightSearchCriteria, SeatClass
from skyfront.domain.exceptions import ApiError, AuthenticationError, ValidationError
from skyfront.infrastructure.service_container import get_container
from skyfront.utils import booking_filters, search_filters, seat_map

customer_blueprint = Blueprint("customer", __name__)
_logger = logging.getLogger(__name__)

SEAT_CLASSES = (SeatClass.ECONOMY, SeatClass.BUSINESS, SeatClass.FIRST)


def _now() -> datetime:
    return datetime.now(timezone.utc)


def _int_arg(name: str, default: int, minimum: int = 1) -> int:
    try:
        return max(int(request.args.get(name, default)), minimum)
    except (TypeError, ValueError):
        return default


@customer_blueprint.route("/", methods=["GET"])
def home():
    auth = current_auth()
    if auth is None or not auth.is_authenticated:
        return redirect(url_for("customer.search"))
    return render_template("customer/home.html")


@customer_blueprint.route("/search", methods=["GET"])
def search():
    """
    Flight search with the filter sidebar.

    Search criteria and filters both travel in the query string so results
    can be bookmarked and re-filtered without re-posting the form.
    """
    container = get_container()
    token = current_token()

    try:
        airports = container.airport_service.list(token)
    except AuthenticationError:
        raise
    except ApiError as e:
        _logger.warning(f"Failed to load airports for search form: {e.message}")
        airports = []

    filters = search_filters.SearchFilters.from_args(request.args)
    result = filtered = criteria = None
    error = None

    origin = request.args.get("origin", "").strip().upper()
    destination = request.args.get("destination", "").strip().upper()
    departure_date = request.args.get("departureDate", "").strip()
    if origin or destination or departure_date:
        try:
            if not (origin and destination and departure_date):
                raise ValueError("Origin, destination and departure date are required")
            if origin == destination:
                raise ValueError("Destination must be different from origin")
            criteria = FlightSearchCriteria(
                origin=origin,
                destination=destination,
                departure_date=departure_date,
                seat_class=request.args.get("seatClass"),
                passengers=_int_arg("passengers", 1),
                include_transit=request.args.get("includeTransit", "").lower() in ("1", "true", "on"),
            )
            if criteria.travel_date is None:
                raise ValueError("Departure date must be YYYY-MM-DD")
        except ValueError as e:
            error = str(e)
        else:
            try:
                result = container.flight_service.search(token, criteria)
            except AuthenticationError:
                raise
            except ApiError as e:
                error = e.message
            else:
                filtered = search_filters.apply_filters(result, filters)

    return render_template(
        "customer/search.html",
        airports=airports,
        criteria=criteria,
        result=result,
        filtered=filtered,
        filters=filters,
        price_range=search_filters.price_range(result),
        airlines=search_filters.available_airlines(result),
        has_active_filters=search_filters.has_active_filters(filters),
        tab=request.args.get("tab", "direct"),
        error=error,
    )


@customer_blueprint.route("/book/<flight_id>", methods=["GET", "POST"])
@login_required
def book(flight_id):
    """Pick a seat class (and optionally a seat) and confirm the booking."""
    container = get_container()
    token = current_token()
    flight = container.flight_service.get(token, flight_id)

    values = request.form if request.method == "POST" else request.args
    try:
        seat_class = SeatClass.parse(values.get("seatClass")) or SeatClass.ECONOMY
    except ValueError:
        seat_class = SeatClass.ECONOMY
    try:
        passengers = max(int(values.get("passengers", 1)), 1)
    except (TypeError, ValueError):
        passengers = 1

    if request.method == "POST":
        if not flight.is_bookable(_now()):
            flash("This flight can no longer be booked.", "error")
        elif flight.available_seats_for(seat_class) < passengers:
            flash(
                f"Not enough seats available in {seat_class.value.lower()} class for {passengers} passengers.",
                "error",
            )
        else:
            try:
                booking = container.booking_service.create(
                    token,
                    current_auth().user,
                    current_auth().user.id,
                    flight.id,
                    seat_class,
                    request.form.get("seatNumber") or None,
                )
            except ValidationError as e:
                flash(str(e), "error")
            else:
                if booking is None:
                    flash("Booking confirmed!", "success")
                    return redirect(url_for("customer.my_bookings"))
                flash(f"Booking confirmed! Reference {booking.booking_reference}", "success")
                return redirect(url_for("customer.booking_detail", booking_id=booking.id))

    try:
        booked = container.booking_service.booked_seats(token, flight.id, seat_class)
        seats = seat_map.available_seats(flight, seat_class, booked)
    except AuthenticationError:
        raise
    except ApiError as e:
        _logger.warning(f"Failed to load booked seats for flight {flight.id}: {e.message}")
        seats = []

    return render_template(
        "customer/book.html",
        flight=flight,
        seat_classes=SEAT_CLASSES,
        seat_class=seat_class,
        passengers=passengers,
        total_price=flight.price_for(seat_class) * passengers,
        seat_rows=seat_map.seat_rows(seats),
        bookable=flight.is_bookable(_now()),
    )


@customer_blueprint.route("/my-bookings", methods=["GET"])
@login_required
def my_bookings():
    bookings = get_container().booking_service.all_mine(current_token())
    now = _now()
    upcoming, past = booking_filters.organize(bookings, now)

    term = request.args.get("q", "")
    status = request.args.get("status", "all")
    seat_class = request.args.get("seatClass", "all")
    try:
        upcoming_shown = booking_filters.filter_customer_bookings(upcoming, term, status, seat_class)
        past_shown = booking_filters.filter_customer_bookings(past, term, status, seat_class)
    except ValueError:
        flash("Invalid filter value.", "error")
        upcoming_shown, past_shown = upcoming, past

    return render_template(
        "customer/my_bookings.html",
        upcoming=upcoming_shown,
        past=past_shown,
        upcoming_total=len(upcoming),
        past_total=len(past),
        stats=booking_filters.customer_stats(bookings, upcoming),
        can_cancel=lambda booking: booking_filters.can_cancel(booking, now),
        tab=request.args.get("tab", "upcoming"),
        q=term,
        status=status,
        seat_class=seat_class,
    )


@customer_blueprint.route("/booking/<booking_id>", methods=["GET"])
@login_required
def booking_detail(booking_id):
    booking = get_container().booking_service.get(current_token(), booking_id)
    return render_template(
        "customer/booking_detail.html",
        booking=booking,
        can_cancel=booking_filters.can_cancel(booking, _now()),
    )


@customer_blueprint.route("/booking/<booking_id>/cancel", methods=["POST"])
@login_required
def cancel_booking(booking_id):
    reason = request.form.get("reason", "").strip()
    get_container().booking_service.cancel(current_token(), booking_id, reason or None)
    flash(f"Booking {booking_id} has been cancelled.", "success")
    return redirect(url_for("customer.my_bookings"))
