from datetime import datetime, timezone

from conftest import airplane_payload, airport_payload, flight_payload
from skyfront.domain.entities.fleet import Airplane, Airport
from skyfront.domain.entities.flight import Flight
from skyfront.utils import listing_filters


def flights():
    return [
        Flight.from_dict(flight_payload(1, "SK1", departure=datetime(2030, 3, 1, 8, tzinfo=timezone.utc))),
        Flight.from_dict(flight_payload(2, "SK2", status="DELAYED",
                                        departure=datetime(2030, 3, 2, 8, tzinfo=timezone.utc),
                                        origin=airport_payload(3, "ORD", "Chicago"))),
        Flight.from_dict(flight_payload(3, "AB3", status="IN_FLIGHT")),
        Flight.from_dict(flight_payload(4, "AB4", status="ARRIVED")),
    ]


def test_filter_flights():
    items = flights()

    assert [f.id for f in listing_filters.filter_flights(items, "chicago")] == ["2"]
    assert [f.id for f in listing_filters.filter_flights(items, status="delayed")] == ["2"]
    assert [f.id for f in listing_filters.filter_flights(items, origin_id="1")] == ["1", "3", "4"]
    assert [f.id for f in listing_filters.filter_flights(items, date="2030-03-01")] == ["1"]
    assert len(listing_filters.filter_flights(items, "a320", "all", "all", "all")) == 4


def test_flight_stats():
    assert listing_filters.flight_stats(flights()) == {
        "scheduled": 1, "in_progress": 1, "completed": 1, "issues": 1,
    }


def test_airports():
    airports = [
        Airport.from_dict(airport_payload(1, "JFK", "New York")),
        Airport.from_dict(airport_payload(2, "LHR", "London", "United Kingdom")),
        Airport.from_dict(dict(airport_payload(3, "NRT", "Tokyo", "Japan"), latitude=None)),
    ]

    assert [a.code for a in listing_filters.filter_airports(airports, "lon")] == ["LHR"]
    assert [a.code for a in listing_filters.filter_airports(airports, continent="asia")] == ["NRT"]
    assert [a.code for a in listing_filters.filter_airports(airports, country="United States")] == ["JFK"]
    assert listing_filters.countries(airports) == ["Japan", "United Kingdom", "United States"]
    assert listing_filters.airport_stats(airports) == {"total": 3, "countries": 3, "with_coordinates": 2}


def test_airplanes():
    fleet = [
        Airplane.from_dict(airplane_payload(1)),
        Airplane.from_dict(airplane_payload(2, model="B777", size="LARGE", active=False,
                                            registrationNumber="N777SF")),
    ]

    assert [a.id for a in listing_filters.filter_airplanes(fleet, "777")] == ["2"]
    assert [a.id for a in listing_filters.filter_airplanes(fleet, active="active")] == ["1"]
    assert [a.id for a in listing_filters.filter_airplanes(fleet, capacity="medium")] == ["1"]
    assert listing_filters.fleet_stats(fleet) == {"total": 2, "active": 1, "inactive": 1, "total_seats": 36}
