"""Unit tests for date/time helpers (src/utils/datetime_helpers.py)"""
from datetime import datetime, timedelta, timezone

from src.utils.datetime_helpers import now_utc, optional_to_utc, to_utc


def test_naive_assumed_utc():
    converted = to_utc(datetime(2024, 6, 1, 12, 0))

    assert converted == datetime(2024, 6, 1, 12, 0, tzinfo=timezone.utc)
    assert converted.tzinfo == timezone.utc


def test_aware_converted_to_utc():
    dubai = timezone(timedelta(hours=4))

    converted = to_utc(datetime(2024, 6, 1, 16, 0, tzinfo=dubai))

    assert converted.hour == 12
    assert converted.tzinfo == timezone.utc


def test_optional_passes_none():
    assert optional_to_utc(None) is None


def test_now_utc_is_aware():
    assert now_utc().tzinfo == timezone.utc
