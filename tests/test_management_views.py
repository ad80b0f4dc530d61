import pytest

from conftest import airplane_payload, airport_payload, booking_payload, envelope, flight_payload

FLIGHT_FORM = {
    "flightNumber": "sk500",
    "airplaneId": "7",
    "originId": "1",
    "destinationId": "2",
    "departureTime": "2030-05-01T10:00",
    "arrivalTime": "2030-05-01T13:00",
    "firstClassPrice": "900",
    "businessClassPrice": "450",
    "economyClassPrice": "199",
}


@pytest.fixture
def staff(login):
    return login("OPERATOR", 9, "ops")


def flashes(client):
    with client.session_transaction() as sess:
        return [message for _, message in sess.get("_flashes", [])]


def add_form_lists(backend):
    backend.add("GET", "/airports", envelope([airport_payload(1), airport_payload(2, "LAX", "Los Angeles")]))
    backend.add("GET", "/airplanes", envelope([airplane_payload(), airplane_payload(8, active=False)]))


def test_dashboard(staff, backend):
    backend.add("GET", "/bookings/statistics", envelope({"totalBookings": 12, "totalRevenue": 2400.5}))
    backend.add("GET", "/bookings/popular-destinations", envelope([{"city": "Paris", "bookings": 5}]))
    backend.add("GET", "/flights/popular-routes", envelope([{"origin": "JFK", "destination": "LAX"}]))

    response = staff.get("/dashboard")

    assert response.status_code == 200
    assert b"$2,400.50" in response.data
    assert b"Paris" in response.data
    assert backend.calls_to("GET", "/bookings/popular-destinations")[0]["params"] == {"limit": 5}


def test_dashboard_survives_missing_panels(staff):
    response = staff.get("/dashboard")

    assert response.status_code == 200
    assert b"Booking statistics are unavailable right now." in response.data


def test_flight_list_filters_by_status(staff, backend):
    backend.add("GET", "/flights", envelope([flight_payload(1, "SK1"), flight_payload(2, "AB2", status="DELAYED")]))
    backend.add("GET", "/airports", envelope([airport_payload()]))

    response = staff.get("/manage/flights?status=delayed")

    assert response.status_code == 200
    assert b">AB2</a>" in response.data
    assert b">SK1</a>" not in response.data
    assert backend.calls_to("GET", "/flights")[0]["params"]["status"] == "DELAYED"


def test_create_flight_shows_errors(staff, backend):
    add_form_lists(backend)

    response = staff.post("/manage/flights/new", data=dict(FLIGHT_FORM, destinationId="1"))

    assert response.status_code == 400
    assert b"Destination must differ from origin" in response.data
    assert backend.calls_to("POST", "/flights") == []


def test_create_flight(staff, backend):
    add_form_lists(backend)
    backend.add("POST", "/flights", envelope(flight_payload()))

    response = staff.post("/manage/flights/new", data=FLIGHT_FORM)

    assert response.headers["Location"].endswith("/manage/flights")
    assert backend.calls_to("POST", "/flights")[0]["json"]["flightNumber"] == "SK500"


def test_create_flight_backend_conflict(staff, backend):
    add_form_lists(backend)
    backend.add("POST", "/flights", {"message": "Airplane is already scheduled"}, status=409)

    response = staff.post("/manage/flights/new", data=FLIGHT_FORM)

    assert response.status_code == 400
    assert b"Airplane is already scheduled" in response.data


def test_edit_form_is_prefilled(staff, backend):
    add_form_lists(backend)
    backend.add("GET", "/flights/10", envelope(flight_payload()))

    response = staff.get("/manage/flights/10/edit")

    assert response.status_code == 200
    assert b'value="SK101"' in response.data


def test_flight_detail_tolerates_missing_availability(staff, backend):
    backend.add("GET", "/flights/10", envelope(flight_payload()))
    backend.add("GET", "/airplanes/available", envelope([airplane_payload(8)]))
    backend.add("GET", "/flights/10/availability/FIRST", envelope({"available": 1, "total": 2}))

    response = staff.get("/manage/flights/10")

    assert response.status_code == 200
    assert b"N320SF" in response.data


def test_update_flight_status(staff, backend):
    backend.add("PATCH", "/flights/10/status", envelope(flight_payload(status="BOARDING")))

    response = staff.post("/manage/flights/10/status", data={"status": "boarding"})

    assert response.status_code == 302
    assert backend.last()["json"] == {"status": "BOARDING"}
    assert "Flight 10 is now boarding." in flashes(staff)


def test_flight_status_update_without_body(staff, backend):
    backend.add("PATCH", "/flights/10/status", None, status=204)

    response = staff.post("/manage/flights/10/status", data={"status": "delayed"})

    assert response.status_code == 302
    assert "Flight 10 is now delayed." in flashes(staff)


def test_invalid_flight_status_is_not_sent(staff, backend):
    response = staff.post("/manage/flights/10/status", data={"status": "flying"})

    assert response.status_code == 302
    assert backend.calls_to("PATCH", "/flights/10/status") == []


def test_manifest_pdf_download(staff, backend):
    backend.add("GET", "/bookings/flight/10/manifest/pdf", content=b"%PDF-1.4 manifest")

    response = staff.get("/manage/flights/10/manifest.pdf")

    assert response.status_code == 200
    assert response.mimetype == "application/pdf"
    assert response.data == b"%PDF-1.4 manifest"
    assert "manifest-10.pdf" in response.headers["Content-Disposition"]


def test_manifest_page(staff, backend):
    backend.add("GET", "/bookings/flight/10/manifest", envelope({
        "flight": flight_payload(),
        "passengers": [booking_payload(passengerName="Ada Lovelace")],
    }))

    response = staff.get("/manage/flights/10/manifest")

    assert b"Ada Lovelace" in response.data


def test_booking_list_with_invalid_status(staff, backend):
    response = staff.get("/manage/bookings?status=lost")

    assert response.headers["Location"].endswith("/manage/bookings")
    assert backend.calls_to("GET", "/bookings") == []


def test_booking_list(staff, backend):
    backend.add("GET", "/bookings", envelope([
        booking_payload(),
        booking_payload(101, "CAN001", status="CANCELLED"),
    ]))

    response = staff.get("/manage/bookings?q=can001")

    assert b"CAN001" in response.data
    assert b"SKY123" not in response.data


def test_staff_books_for_a_customer(staff, backend):
    backend.add("GET", "/users/by-role/CUSTOMER", envelope([{
        "id": 42, "username": "cust", "email": "c@example.com", "firstName": "C", "lastName": "Ust", "role": "CUSTOMER",
    }]))
    backend.add("GET", "/flights", envelope([flight_payload()]))
    backend.add("POST", "/bookings", envelope(booking_payload()))

    response = staff.post("/manage/bookings/new", data={"customerId": "42", "flightId": "10", "seatClass": "FIRST"})

    assert response.headers["Location"].endswith("/manage/bookings")
    assert backend.calls_to("POST", "/bookings")[0]["json"] == {
        "customerId": "42", "flightId": "10", "seatClass": "FIRST",
    }


@pytest.mark.parametrize("action, path, message", [
    ("confirm", "/bookings/100/confirm", "Booking 100 confirmed."),
    ("cancel", "/bookings/100/cancel", "Booking 100 cancelled."),
])
def test_single_booking_action_without_data(staff, backend, action, path, message):
    backend.add("PATCH", path, envelope(message="Done"))

    response = staff.post(f"/manage/bookings/100/{action}")

    assert response.status_code == 302
    assert message in flashes(staff)


def test_bulk_cancel(staff, backend):
    backend.add("POST", "/bookings/bulk-cancel", envelope())

    response = staff.post("/manage/bookings/bulk", data={
        "action": "cancel", "bookingIds": ["1", "2"], "reason": "Weather",
    })

    assert response.headers["Location"].endswith("/manage/bookings")
    assert backend.last()["json"] == {"bookingIds": ["1", "2"], "reason": "Weather"}


def test_bulk_without_selection(staff, backend):
    response = staff.post("/manage/bookings/bulk", data={"action": "confirm"})

    assert response.status_code == 400
    assert b"Select at least one booking" in response.data
    assert backend.calls_to("POST", "/bookings/bulk-confirm") == []


def test_create_airport(staff, backend):
    backend.add("POST", "/airports", envelope(airport_payload(5, "CDG", "Paris", "France")))

    response = staff.post("/manage/airports/new", data={
        "code": "cdg", "name": "Charles de Gaulle", "city": "Paris", "country": "France", "timeZone": "Europe/Paris",
    })

    assert response.headers["Location"].endswith("/manage/airports")
    assert backend.last()["json"]["code"] == "CDG"


def test_airport_list_filters_by_continent(staff, backend):
    backend.add("GET", "/airports", envelope([
        airport_payload(1, "JFK", "New York"),
        airport_payload(5, "CDG", "Paris", "France"),
    ]))

    response = staff.get("/manage/airports?continent=europe")

    assert b"CDG" in response.data
    assert b"JFK" not in response.data


def test_airplane_list_with_bad_capacity(staff, backend):
    backend.add("GET", "/airplanes", envelope([airplane_payload()]))

    response = staff.get("/manage/airplanes?capacity=HUGE")

    assert response.status_code == 200
    assert b"Invalid filter value." in response.data


def test_airplane_edit_unchecks_active(staff, backend):
    backend.add("GET", "/airplanes/7", envelope(airplane_payload()))
    backend.add("PUT", "/airplanes/7", envelope(airplane_payload(active=False)))

    staff.post("/manage/airplanes/7/edit", data={
        "model": "A320", "registrationNumber": "N320SF", "size": "MEDIUM",
        "firstClassCapacity": "2", "businessClassCapacity": "4", "economyClassCapacity": "12",
        "active": "false",
    })

    assert backend.last()["json"]["active"] is False


def test_reports(staff, backend):
    backend.add("GET", "/airports", envelope([airport_payload()]))
    backend.add("GET", "/reports/flight-statistics", envelope({"totalFlights": 40}))
    backend.add("GET", "/bookings/revenue", envelope({"totalRevenue": 1000}))
    backend.add("GET", "/reports/airport/1/flights", envelope({
        "airport": airport_payload(),
        "departingFlights": [flight_payload(1, "SK1")],
        "arrivingFlights": [],
    }))

    response = staff.get("/reports?airportId=1&startDate=2030-01-01&endDate=2030-01-07&period=week")

    assert response.status_code == 200
    assert b"$1,000.00" in response.data
    assert b"SK1" in response.data
    assert backend.calls_to("GET", "/reports/flight-statistics")[0]["params"] == {"period": "week"}
    assert backend.calls_to("GET", "/reports/airport/1/flights")[0]["params"] == {
        "startDate": "2030-01-01", "endDate": "2030-01-07",
    }


def test_operator_cannot_manage_users(staff):
    assert staff.get("/manage/users").status_code == 403
