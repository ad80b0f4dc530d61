"""Operator and administrator screens: fleet, schedule, bookings and reports."""
import logging
from datetime import date, datetime, timedelta, timezone
from typing import Any, Callable, Dict

from flask import (
    Blueprint,
    Response,
    current_app,
    flash,
    redirect,
    render_template,
    request,
    url_for,
)

from skyfront.decorators.auth import current_auth, current_token, staff_required
from skyfront.domain.entities.booking import BookingStatus
from skyfront.domain.entities.fleet import Airplane, AirplaneCapacity, Airport
from skyfront.domain.entities.flight import Flight, FlightStatus, SeatClass
from skyfront.domain.entities.user import UserRole
from skyfront.domain.exceptions import ApiError, AuthenticationError
from skyfront.infrastructure.service_container import get_container
from skyfront.utils import booking_filters, listing_filters
from skyfront.views.forms import form_page, page_arg

management_blueprint = Blueprint("management", __name__)
_logger = logging.getLogger(__name__)


def _optional(label: str, call: Callable[[], Any], default: Any = None) -> Any:
    """Run a secondary backend call; a failure only blanks that panel."""
    try:
        return call()
    except AuthenticationError:
        raise
    except ApiError as e:
        _logger.warning(f"Failed to load {label}: {e.message}")
        return default


def _local_input(value: datetime) -> str:
    """Render a datetime for an ``<input type="datetime-local">``."""
    return value.strftime("%Y-%m-%dT%H:%M") if value else ""


# Dashboard

@management_blueprint.route("/dashboard", methods=["GET"])
@staff_required
def dashboard():
    container = get_container()
    token = current_token()
    return render_template(
        "management/dashboard.html",
        statistics=_optional("booking statistics", lambda: container.booking_service.statistics(token)),
        destinations=_optional(
            "popular destinations", lambda: container.booking_service.popular_destinations(token, limit=5), []
        ),
        routes=_optional("popular routes", lambda: container.flight_service.popular_routes(token), []),
    )


# Flights

def _flight_form_context() -> Dict[str, Any]:
    container = get_container()
    token = current_token()
    return {
        "airports": container.airport_service.list(token),
        "airplanes": [a for a in container.airplane_service.list(token) if a.is_active],
    }


def _flight_initial(flight: Flight) -> Dict[str, Any]:
    return {
        "flightNumber": flight.flight_number,
        "airplaneId": flight.airplane.id if flight.airplane else "",
        "originId": flight.origin.id,
        "destinationId": flight.destination.id,
        "departureTime": _local_input(flight.departure_time),
        "arrivalTime": _local_input(flight.arrival_time),
        "firstClassPrice": flight.first_class_price,
        "businessClassPrice": flight.business_class_price,
        "economyClassPrice": flight.economy_class_price,
    }


@management_blueprint.route("/manage/flights", methods=["GET"])
@staff_required
def flights():
    container = get_container()
    token = current_token()
    status = request.args.get("status", "all")
    page = container.flight_service.list(
        token,
        page=page_arg(),
        limit=current_app.config["DEFAULT_PAGE_SIZE"],
        status=status.upper() if status not in ("", "all") else None,
    )
    try:
        shown = listing_filters.filter_flights(
            page.items,
            term=request.args.get("q", ""),
            status=status,
            origin_id=request.args.get("origin"),
            destination_id=request.args.get("destination"),
            date=request.args.get("date") or None,
        )
    except ValueError:
        flash("Invalid filter value.", "error")
        shown = page.items
    return render_template(
        "management/flights.html",
        flights=shown,
        pagination=page.pagination,
        stats=listing_filters.flight_stats(shown),
        airports=_optional("airports", lambda: container.airport_service.list(token), []),
        statuses=list(FlightStatus),
        args=request.args,
    )


@management_blueprint.route("/manage/flights/new", methods=["GET", "POST"])
@staff_required
def flight_create():
    return form_page(
        "management/flight_form.html",
        lambda: get_container().flight_service.create(current_token(), request.form),
        "Flight created.",
        "management.flights",
        {},
        **_flight_form_context(),
    )


@management_blueprint.route("/manage/flights/<flight_id>", methods=["GET"])
@staff_required
def flight_detail(flight_id):
    container = get_container()
    token = current_token()
    flight = container.flight_service.get(token, flight_id)
    available_airplanes = _optional(
        "available airplanes",
        lambda: container.airplane_service.available(
            token, flight.departure_time.isoformat(), flight.arrival_time.isoformat()
        ),
        [],
    )
    availability = {
        seat_class: _optional(
            f"{seat_class.value} availability",
            lambda seat_class=seat_class: container.flight_service.seat_availability(token, flight.id, seat_class),
        )
        for seat_class in SeatClass
    }
    return render_template(
        "management/flight_detail.html",
        flight=flight,
        available_airplanes=available_airplanes,
        availability=availability,
        statuses=list(FlightStatus),
    )


@management_blueprint.route("/manage/flights/<flight_id>/edit", methods=["GET", "POST"])
@staff_required
def flight_edit(flight_id):
    container = get_container()
    token = current_token()
    flight = container.flight_service.get(token, flight_id)
    return form_page(
        "management/flight_form.html",
        lambda: container.flight_service.update(token, flight_id, request.form),
        f"Flight {flight.flight_number} updated.",
        "management.flights",
        _flight_initial(flight),
        flight=flight,
        **_flight_form_context(),
    )


@management_blueprint.route("/manage/flights/<flight_id>/delete", methods=["POST"])
@staff_required
def flight_delete(flight_id):
    get_container().flight_service.delete(current_token(), flight_id)
    flash("Flight deleted.", "success")
    return redirect(url_for("management.flights"))


@management_blueprint.route("/manage/flights/<flight_id>/status", methods=["POST"])
@staff_required
def flight_status(flight_id):
    try:
        status = FlightStatus(request.form.get("status", "").upper())
    except ValueError:
        flash("Please select a valid status.", "error")
        return redirect(request.referrer or url_for("management.flights"))
    get_container().flight_service.update_status(current_token(), flight_id, status)
    flash(f"Flight {flight_id} is now {status.value.replace('_', ' ').lower()}.", "success")
    return redirect(request.referrer or url_for("management.flights"))


@management_blueprint.route("/manage/flights/<flight_id>/manifest", methods=["GET"])
@staff_required
def flight_manifest(flight_id):
    manifest = get_container().booking_service.manifest(current_token(), flight_id)
    return render_template("management/manifest.html", manifest=manifest)


@management_blueprint.route("/manage/flights/<flight_id>/manifest.pdf", methods=["GET"])
@staff_required
def flight_manifest_pdf(flight_id):
    content = get_container().booking_service.manifest_pdf(current_token(), flight_id)
    return Response(
        content,
        mimetype="application/pdf",
        headers={"Content-Disposition": f"attachment; filename=manifest-{flight_id}.pdf"},
    )


# Bookings

@management_blueprint.route("/manage/bookings", methods=["GET"])
@staff_required
def bookings():
    container = get_container()
    status = request.args.get("status", "all")
    flight_id = request.args.get("flight", "all")
    try:
        page = container.booking_service.list(
            current_token(),
            page=page_arg(),
            limit=current_app.config["DEFAULT_PAGE_SIZE"],
            status=status,
            flight_id=flight_id if flight_id != "all" else None,
            start_date=request.args.get("startDate") or None,
            end_date=request.args.get("endDate") or None,
        )
        shown = booking_filters.filter_managed_bookings(
            page.items,
            term=request.args.get("q", ""),
            status=status,
            flight_id=flight_id,
            seat_class=request.args.get("seatClass", "all"),
        )
    except ValueError:
        flash("Invalid filter value.", "error")
        return redirect(url_for("management.bookings"))

    flights_on_page = {b.flight.id: b.flight for b in page.items}
    return render_template(
        "management/bookings.html",
        bookings=shown,
        pagination=page.pagination,
        stats=booking_filters.management_stats(shown),
        flights=list(flights_on_page.values()),
        statuses=list(BookingStatus),
        args=request.args,
    )


@management_blueprint.route("/manage/bookings/new", methods=["GET", "POST"])
@staff_required
def booking_create():
    container = get_container()
    token = current_token()
    context = {
        "customers": container.user_service.by_role(token, UserRole.CUSTOMER),
        "flights": container.flight_service.bookable_flights(token),
        "seat_classes": list(SeatClass),
    }
    return form_page(
        "management/booking_form.html",
        lambda: container.booking_service.create(
            token,
            current_auth().user,
            request.form.get("customerId"),
            request.form.get("flightId"),
            request.form.get("seatClass"),
            request.form.get("seatNumber") or None,
        ),
        "Booking created.",
        "management.bookings",
        {"seatClass": SeatClass.ECONOMY.value},
        **context,
    )


@management_blueprint.route("/manage/bookings/<booking_id>/confirm", methods=["POST"])
@staff_required
def booking_confirm(booking_id):
    get_container().booking_service.confirm(current_token(), booking_id)
    flash(f"Booking {booking_id} confirmed.", "success")
    return redirect(request.referrer or url_for("management.bookings"))


@management_blueprint.route("/manage/bookings/<booking_id>/cancel", methods=["POST"])
@staff_required
def booking_cancel(booking_id):
    reason = request.form.get("reason", "").strip() or None
    get_container().booking_service.cancel(current_token(), booking_id, reason)
    flash(f"Booking {booking_id} cancelled.", "success")
    return redirect(request.referrer or url_for("management.bookings"))


@management_blueprint.route("/manage/bookings/<booking_id>/remind", methods=["POST"])
@staff_required
def booking_remind(booking_id):
    get_container().booking_service.send_reminder(current_token(), booking_id)
    flash("Reminder sent.", "success")
    return redirect(request.referrer or url_for("management.bookings"))


@management_blueprint.route("/manage/bookings/bulk", methods=["POST"])
@staff_required
def bookings_bulk():
    service = get_container().booking_service
    booking_ids = request.form.getlist("bookingIds")
    action = request.form.get("action")
    if action == "cancel":
        service.bulk_cancel(current_token(), booking_ids, request.form.get("reason", "").strip())
        flash(f"{len(booking_ids)} bookings cancelled.", "success")
    elif action == "confirm":
        service.bulk_confirm(current_token(), booking_ids)
        flash(f"{len(booking_ids)} bookings confirmed.", "success")
    else:
        flash("Unknown bulk action.", "error")
    return redirect(url_for("management.bookings"))


# Airports

def _airport_initial(airport: Airport) -> Dict[str, Any]:
    return {
        "code": airport.code,
        "name": airport.name,
        "city": airport.city,
        "country": airport.country,
        "timeZone": airport.timezone,
        "latitude": "" if airport.latitude is None else airport.latitude,
        "longitude": "" if airport.longitude is None else airport.longitude,
    }


@management_blueprint.route("/manage/airports", methods=["GET"])
@staff_required
def airports():
    all_airports = get_container().airport_service.list(current_token())
    shown = listing_filters.filter_airports(
        all_airports,
        term=request.args.get("q", ""),
        country=request.args.get("country"),
        continent=request.args.get("continent"),
    )
    return render_template(
        "management/airports.html",
        airports=shown,
        stats=listing_filters.airport_stats(all_airports),
        countries=listing_filters.countries(all_airports),
        continents=list(listing_filters.CONTINENT_COUNTRIES),
        args=request.args,
    )


@management_blueprint.route("/manage/airports/new", methods=["GET", "POST"])
@staff_required
def airport_create():
    return form_page(
        "management/airport_form.html",
        lambda: get_container().airport_service.create(current_token(), request.form),
        "Airport created.",
        "management.airports",
        {},
    )


@management_blueprint.route("/manage/airports/<airport_id>/edit", methods=["GET", "POST"])
@staff_required
def airport_edit(airport_id):
    service = get_container().airport_service
    airport = service.get(current_token(), airport_id)
    return form_page(
        "management/airport_form.html",
        lambda: service.update(current_token(), airport_id, request.form),
        f"Airport {airport.code} updated.",
        "management.airports",
        _airport_initial(airport),
        airport=airport,
    )


@management_blueprint.route("/manage/airports/<airport_id>/delete", methods=["POST"])
@staff_required
def airport_delete(airport_id):
    get_container().airport_service.delete(current_token(), airport_id)
    flash("Airport deleted.", "success")
    return redirect(url_for("management.airports"))


@management_blueprint.route("/manage/airports/<airport_id>/report", methods=["GET"])
@staff_required
def airport_report(airport_id):
    today = date.today()
    start_date = request.args.get("startDate") or today.isoformat()
    end_date = request.args.get("endDate") or (today + timedelta(days=7)).isoformat()
    report = get_container().report_service.airport_flights(current_token(), airport_id, start_date, end_date)
    return render_template(
        "management/airport_report.html", report=report, start_date=start_date, end_date=end_date
    )


# Airplanes

def _airplane_initial(airplane: Airplane) -> Dict[str, Any]:
    return {
        "model": airplane.model,
        "registrationNumber": airplane.registration,
        "size": airplane.capacity.value if airplane.capacity else "",
        "firstClassCapacity": airplane.first_class_capacity,
        "businessClassCapacity": airplane.business_class_capacity,
        "economyClassCapacity": airplane.economy_class_capacity,
        "active": airplane.is_active,
    }


@management_blueprint.route("/manage/airplanes", methods=["GET"])
@staff_required
def airplanes():
    fleet = get_container().airplane_service.list(current_token())
    try:
        shown = listing_filters.filter_airplanes(
            fleet,
            term=request.args.get("q", ""),
            capacity=request.args.get("capacity"),
            active=request.args.get("active"),
        )
    except ValueError:
        flash("Invalid filter value.", "error")
        shown = fleet
    return render_template(
        "management/airplanes.html",
        airplanes=shown,
        stats=listing_filters.fleet_stats(fleet),
        capacities=list(AirplaneCapacity),
        args=request.args,
    )


@management_blueprint.route("/manage/airplanes/new", methods=["GET", "POST"])
@staff_required
def airplane_create():
    return form_page(
        "management/airplane_form.html",
        lambda: get_container().airplane_service.create(current_token(), request.form),
        "Airplane created.",
        "management.airplanes",
        {"active": True},
        capacities=list(AirplaneCapacity),
    )


@management_blueprint.route("/manage/airplanes/<airplane_id>/edit", methods=["GET", "POST"])
@staff_required
def airplane_edit(airplane_id):
    service = get_container().airplane_service
    airplane = service.get(current_token(), airplane_id)
    return form_page(
        "management/airplane_form.html",
        lambda: service.update(current_token(), airplane_id, request.form),
        f"Airplane {airplane.registration} updated.",
        "management.airplanes",
        _airplane_initial(airplane),
        airplane=airplane,
        capacities=list(AirplaneCapacity),
    )


@management_blueprint.route("/manage/airplanes/<airplane_id>/delete", methods=["POST"])
@staff_required
def airplane_delete(airplane_id):
    get_container().airplane_service.delete(current_token(), airplane_id)
    flash("Airplane deleted.", "success")
    return redirect(url_for("management.airplanes"))


@management_blueprint.route("/manage/airplanes/<airplane_id>/flights", methods=["GET"])
@staff_required
def airplane_flights(airplane_id):
    container = get_container()
    token = current_token()
    airplane = container.airplane_service.get(token, airplane_id)
    assigned = container.flight_service.by_airplane(token, airplane_id)
    return render_template("management/airplane_flights.html", airplane=airplane, flights=assigned)


# Reports

@management_blueprint.route("/reports", methods=["GET"])
@staff_required
def reports():
    container = get_container()
    token = current_token()
    today = datetime.now(timezone.utc).date()
    airport_id = request.args.get("airportId")
    start_date = request.args.get("startDate") or today.isoformat()
    end_date = request.args.get("endDate") or (today + timedelta(days=7)).isoformat()
    period = request.args.get("period") or "month"

    airport_report = None
    if airport_id:
        airport_report = container.report_service.airport_flights(token, airport_id, start_date, end_date)

    return render_template(
        "management/reports.html",
        airports=_optional("airports", lambda: container.airport_service.list(token), []),
        airport_report=airport_report,
        flight_statistics=_optional(
            "flight statistics", lambda: container.report_service.flight_statistics(token, period)
        ),
        revenue=_optional(
            "revenue report", lambda: container.booking_service.revenue(token, start_date, end_date)
        ),
        airport_id=airport_id,
        start_date=start_date,
        end_date=end_date,
        period=period,
    )
