"""Tests for normalization, money and time-window helpers."""
from datetime import datetime, timezone

import pytest

from recovery_crm.utils.money import format_inr, percentage
from recovery_crm.utils.normalization import (
    escape_like_string,
    normalize_aadhaar,
    normalize_pan,
    normalize_phone,
)
from recovery_crm.utils.time_windows import local_date_string, month_start, today_bounds


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("9876543210", "9876543210"),
        ("98765 43210", "9876543210"),
        ("+91-98765-43210", "9876543210"),
        ("09876543210", "9876543210"),
    ],
)
def test_normalize_phone(raw, expected):
    assert normalize_phone(raw) == expected


def test_normalize_phone_rejects_short_numbers():
    with pytest.raises(ValueError):
        normalize_phone("12345")


def test_identity_numbers():
    assert normalize_pan(" abcde1234f ") == "ABCDE1234F"
    assert normalize_aadhaar("1234 5678 9012") == "123456789012"
    with pytest.raises(ValueError):
        normalize_aadhaar("1234")


def test_escape_like_string():
    assert escape_like_string("50%_off") == "50\\%\\_off"


def test_format_inr():
    assert format_inr(150000) == "₹150,000"
    assert format_inr(99.5) == "₹99.50"
    assert format_inr(None) == "₹0"


def test_percentage():
    assert percentage(1, 3) == 33.3
    assert percentage(5, 0) == 0.0


def test_today_bounds_follow_business_day():
    # 20:00 UTC is 01:30 the next day in Asia/Kolkata
    now = datetime(2026, 10, 19, 20, 0, tzinfo=timezone.utc)
    start, end = today_bounds(now)
    assert start == datetime(2026, 10, 19, 18, 30, tzinfo=timezone.utc)
    assert end == datetime(2026, 10, 20, 18, 30, tzinfo=timezone.utc)
    assert local_date_string(now) == "2026-10-20"


def test_month_start_in_business_timezone():
    now = datetime(2026, 10, 19, 12, 0, tzinfo=timezone.utc)
    assert month_start(now) == datetime(2026, 9, 30, 18, 30, tzinfo=timezone.utc)
