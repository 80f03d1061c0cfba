"""Tests for helper utilities."""

from datetime import datetime, timezone
from decimal import Decimal

import pytest

from storefront.utils.helpers import (
    format_currency,
    format_local_datetime,
    parse_timestamp,
    to_decimal,
)


class TestParseTimestamp:
    @pytest.mark.parametrize("value, expected", [
        ("2024-01-01", datetime(2024, 1, 1, tzinfo=timezone.utc)),
        ("2024-01-01T10:30:00Z", datetime(2024, 1, 1, 10, 30, tzinfo=timezone.utc)),
        ("2024-01-01T10:30:00.250Z", datetime(2024, 1, 1, 10, 30, 0, 250000, tzinfo=timezone.utc)),
        (1704067200000, datetime(2024, 1, 1, tzinfo=timezone.utc)),
    ])
    def test_parses_supported_formats(self, value, expected):
        assert parse_timestamp(value) == expected

    def test_naive_datetime_is_utc(self):
        assert parse_timestamp(datetime(2024, 1, 1)).tzinfo == timezone.utc

    @pytest.mark.parametrize("value", [None, "", "yesterday", True, {"seconds": 1}])
    def test_unparseable_values(self, value):
        assert parse_timestamp(value) is None


class TestFormatting:
    def test_indian_grouping(self):
        assert format_currency(123456.5) == "₹ 1,23,456.50"
        assert format_currency(Decimal("1180")) == "₹ 1,180.00"
        assert format_currency(99) == "₹ 99.00"

    def test_negative_amount(self):
        assert format_currency(-1500) == "₹ -1,500.00"

    def test_other_currency(self):
        assert format_currency(1234.5, currency="USD") == "USD 1,234.50"

    def test_to_decimal_avoids_float_artefacts(self):
        assert to_decimal(0.1) == Decimal("0.1")
        assert to_decimal(None) == Decimal("0")

    def test_local_datetime(self):
        assert format_local_datetime("2024-03-05T14:07:09Z") == "05/03/2024, 02:07:09 pm"
        assert format_local_datetime(None) == "N/A"
