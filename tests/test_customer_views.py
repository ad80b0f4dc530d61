from conftest import airport_payload, booking_payload, envelope, flight_payload

SEARCH = {"origin": "jfk", "destination": "LAX", "departureDate": "2030-05-01"}


def add_airports(backend):
    backend.add("GET", "/airports", envelope([
        airport_payload(1, "JFK", "New York"),
        airport_payload(2, "LAX", "Los Angeles"),
    ]))


def test_search_form_is_public(client, backend):
    add_airports(backend)

    response = client.get("/search")

    assert response.status_code == 200
    assert b"JFK - New York" in response.data
    assert backend.calls_to("POST", "/flights/search") == []


def test_anonymous_home_redirects_to_search(client):
    response = client.get("/")

    assert response.headers["Location"].endswith("/search")


def test_search_results_respect_filters(client, backend):
    add_airports(backend)
    backend.add("POST", "/flights/search", envelope({
        "directFlights": [flight_payload(10, "SK101"), flight_payload(11, "AB202")],
        "transitFlights": [],
    }))

    response = client.get("/search", query_string=dict(SEARCH, airline="SK"))

    assert response.status_code == 200
    assert b"SK101" in response.data
    assert b"AB202" not in response.data
    sent = backend.calls_to("POST", "/flights/search")[0]["json"]
    assert sent["origin"] == "JFK"
    assert sent["includeTransit"] is False


def test_search_shows_transit_tab(client, backend):
    add_airports(backend)
    backend.add("POST", "/flights/search", envelope({
        "directFlights": [],
        "transitFlights": [{
            "id": "t1",
            "totalDuration": 430,
            "totalPrice": 512.0,
            "flights": [flight_payload(20, "SK20"), flight_payload(21, "SK21")],
            "transitAirports": [airport_payload(3, "ORD", "Chicago")],
        }],
    }))

    response = client.get("/search", query_string=dict(SEARCH, includeTransit="true", tab="transit"))

    assert b"$512.00" in response.data
    assert b"7h 10m" in response.data
    assert b"Via ORD" in response.data


def test_search_rejects_same_airports(client, backend):
    add_airports(backend)

    response = client.get("/search", query_string=dict(SEARCH, destination="JFK"))

    assert b"Destination must be different from origin" in response.data
    assert backend.calls_to("POST", "/flights/search") == []


def test_search_backend_error_is_shown(client, backend):
    add_airports(backend)
    backend.add("POST", "/flights/search", {"message": "Search is down"}, status=503)

    response = client.get("/search", query_string=SEARCH)

    assert response.status_code == 200
    assert b"Search is down" in response.data


def test_book_page_lists_free_seats(client, backend, login):
    login()
    backend.add("GET", "/flights/10", envelope(flight_payload()))
    backend.add("GET", "/bookings/flight/10/booked-seats/ECONOMY", envelope(["E1", "E2"]))

    response = client.get("/book/10")

    assert response.status_code == 200
    assert b'value="E3"' in response.data
    assert b'value="E1"' not in response.data
    assert b"$199.00" in response.data


def test_book_creates_booking(client, backend, login):
    login()
    backend.add("GET", "/flights/10", envelope(flight_payload()))
    backend.add("POST", "/bookings", envelope(booking_payload()))

    response = client.post("/book/10", data={"seatClass": "BUSINESS", "passengers": "1", "seatNumber": "B3"})

    assert response.headers["Location"].endswith("/booking/100")
    assert backend.calls_to("POST", "/bookings")[0]["json"] == {
        "customerId": "1",
        "flightId": "10",
        "seatClass": "BUSINESS",
        "seatNumber": "B3",
    }


def test_book_without_booking_body_goes_to_my_bookings(client, backend, login):
    login()
    backend.add("GET", "/flights/10", envelope(flight_payload()))
    backend.add("POST", "/bookings", None, status=204)

    response = client.post("/book/10", data={"seatClass": "ECONOMY"})

    assert response.status_code == 302
    assert response.headers["Location"].endswith("/my-bookings")


def test_book_checks_availability(client, backend, login):
    login()
    backend.add("GET", "/flights/10", envelope(flight_payload()))
    backend.add("GET", "/bookings/flight/10/booked-seats/BUSINESS", envelope([]))

    response = client.post("/book/10", data={"seatClass": "BUSINESS", "passengers": "5"})

    assert response.status_code == 200
    assert b"Not enough seats available in business class for 5 passengers." in response.data
    assert backend.calls_to("POST", "/bookings") == []


def test_departed_flight_cannot_be_booked(client, backend, login):
    login()
    backend.add("GET", "/flights/10", envelope(flight_payload(status="DEPARTED")))
    backend.add("GET", "/bookings/flight/10/booked-seats/ECONOMY", envelope([]))

    response = client.post("/book/10", data={"seatClass": "ECONOMY"})

    assert b"This flight can no longer be booked." in response.data
    assert backend.calls_to("POST", "/bookings") == []


def test_my_bookings_tabs(client, backend, login):
    login()
    backend.add("GET", "/bookings/me", envelope([
        booking_payload(),
        booking_payload(101, "OLD999", status="CANCELLED"),
    ]))

    upcoming = client.get("/my-bookings")
    past = client.get("/my-bookings?tab=past")

    assert b"SKY123" in upcoming.data
    assert b"OLD999" not in upcoming.data
    assert b"OLD999" in past.data


def test_my_bookings_reads_every_page(client, backend, login):
    login()
    paging = {"limit": 100, "total": 101, "totalPages": 2}
    backend.queue(
        "GET",
        "/bookings/me",
        dict(envelope([booking_payload()]), pagination=dict(paging, page=1)),
        dict(envelope([booking_payload(101, "SKY124")]), pagination=dict(paging, page=2)),
    )

    response = client.get("/my-bookings")

    assert b"SKY123" in response.data
    assert b"SKY124" in response.data
    assert b"$398.00" in response.data


def test_cancel_booking(client, backend, login):
    login()
    backend.add("PATCH", "/bookings/100/cancel", envelope(booking_payload(status="CANCELLED")))

    response = client.post("/booking/100/cancel", data={"reason": "Plans changed"})

    assert response.headers["Location"].endswith("/my-bookings")
    assert backend.last()["json"] == {"reason": "Plans changed"}


def test_cancel_booking_without_data(client, backend, login):
    login()
    backend.add("PATCH", "/bookings/100/cancel", envelope(message="Booking cancelled"))

    response = client.post("/booking/100/cancel")

    assert response.status_code == 302
    assert response.headers["Location"].endswith("/my-bookings")
    with client.session_transaction() as sess:
        assert ("success", "Booking 100 has been cancelled.") in sess["_flashes"]


def test_missing_booking_renders_not_found(client, login):
    login()

    response = client.get("/booking/404")

    assert response.status_code == 404
    assert b"Page not found" in response.data
