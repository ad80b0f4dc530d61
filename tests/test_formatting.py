from datetime import datetime, timedelta, timezone

import pytest

from skyfront.domain.entities.flight import FlightStatus
from skyfront.utils.formatting import (
    format_date,
    format_datetime,
    format_duration,
    format_label,
    format_price,
    format_time,
    time_until,
)

NOW = datetime(2030, 5, 1, 8, 0, tzinfo=timezone.utc)


def test_format_price():
    assert format_price(1234.5) == "$1,234.50"
    assert format_price(-5) == "-$5.00"
    assert format_price(None) == "$0.00"


def test_format_duration():
    assert format_duration(timedelta(minutes=125)) == "2h 5m"
    assert format_duration(420) == "7h 0m"
    assert format_duration(NOW, NOW + timedelta(hours=3, minutes=15)) == "3h 15m"
    assert format_duration(NOW) == ""
    assert format_duration(None) == ""


@pytest.mark.parametrize("delta, expected", [
    (timedelta(days=3, hours=1), "3 days left"),
    (timedelta(days=1), "1 day left"),
    (timedelta(hours=2, minutes=30), "2 hours left"),
    (timedelta(hours=1), "1 hour left"),
    (timedelta(minutes=30), "Departing soon"),
    (timedelta(minutes=-1), "Departed"),
])
def test_time_until(delta, expected):
    assert time_until(NOW + delta, NOW) == expected


def test_time_until_without_moment():
    assert time_until(None, NOW) == ""


def test_datetime_filters_accept_strings():
    assert format_datetime("2030-05-01T10:05:00Z") == "May 01, 2030 10:05"
    assert format_date("2030-05-01T10:05:00Z") == "Wed, May 01, 2030"
    assert format_time(NOW) == "08:00"
    assert format_datetime("") == ""


def test_format_label():
    assert format_label("IN_FLIGHT") == "In Flight"
    assert format_label(FlightStatus.SCHEDULED) == "Scheduled"
    assert format_label(None) == ""
