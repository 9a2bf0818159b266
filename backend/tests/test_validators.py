"""
Tests for the pure validation helpers and the pricing rule.
"""

from datetime import datetime, timedelta, timezone
from decimal import Decimal

import pytest

from conference_center.core.exceptions import ValidationError
from conference_center.models import Facility
from conference_center.services.booking_service import calculate_total_price
from conference_center.services.validators import (
    ensure_customer,
    ensure_valid_range,
    is_date_in_past,
    is_valid_email,
    is_valid_range,
    normalize_email,
    strip_timezone,
)
from tests.conftest import future


def test_today_is_not_in_the_past():
    assert not is_date_in_past(future(0, 0))
    assert is_date_in_past(future(-1, 23))


def test_valid_range():
    assert is_valid_range(future(1), future(2))
    assert is_valid_range(future(1, 9), future(1, 17))
    assert not is_valid_range(future(2), future(1))
    assert not is_valid_range(future(1), future(1))
    assert not is_valid_range(future(-1), future(3))


def test_ensure_valid_range_raises():
    with pytest.raises(ValidationError):
        ensure_valid_range(future(3), future(2))


def test_strip_timezone():
    aware = datetime(2030, 5, 1, 9, 0, tzinfo=timezone(timedelta(hours=2)))
    assert strip_timezone(aware) == datetime(2030, 5, 1, 9, 0)
    naive = datetime(2030, 5, 1, 9, 0)
    assert strip_timezone(naive) is naive


@pytest.mark.parametrize(
    "email,valid",
    [
        ("anna@acme.se", True),
        ("  anna@acme.se ", True),
        ("", False),
        ("   ", False),
        (None, False),
        ("anna", False),
        ("anna@", False),
        ("a" * 250 + "@acme.se", False),
    ],
)
def test_is_valid_email(email, valid):
    assert is_valid_email(email) is valid


def test_normalize_email():
    assert normalize_email("  Anna@ACME.se ") == "anna@acme.se"


def test_ensure_customer():
    ensure_customer("Anna", "", "anna@acme.se")
    with pytest.raises(ValidationError):
        ensure_customer(" ", None, "anna@acme.se")
    with pytest.raises(ValidationError):
        ensure_customer("Anna", "Svensson", "bad-email")


@pytest.mark.parametrize(
    "start,end,expected",
    [
        (datetime(2030, 1, 1, 9), datetime(2030, 1, 3, 9), Decimal("2000")),
        (datetime(2030, 1, 1, 9), datetime(2030, 1, 1, 17), Decimal("1000")),
        (datetime(2030, 1, 1, 23), datetime(2030, 1, 2, 1), Decimal("1000")),
        (datetime(2030, 1, 1, 9), datetime(2030, 1, 11, 8), Decimal("10000")),
    ],
)
def test_calculate_total_price(start, end, expected):
    facility = Facility(price_per_day=Decimal("1000.00"))
    assert calculate_total_price(facility, start, end) == expected
