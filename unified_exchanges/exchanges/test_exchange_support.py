from decimal import Decimal
from types import SimpleNamespace

import pytest

from unified_exchanges.exchanges.exchange_support import (
    filter_by_since_limit,
    iso8601,
    omit,
    parse_timeframe,
    round_to_precision,
    safe_decimal,
    safe_integer,
    safe_string,
    safe_value,
    truncate_to_precision,
    ymd,
)


class TestSafeAccess:
    """Missing or malformed fields come back as None."""

    def test_missing_key(self):
        assert safe_decimal({}, "price") is None
        assert safe_integer({}, "date") is None
        assert safe_string({}, "id") is None

    def test_non_numeric(self):
        assert safe_decimal({"price": "abc"}, "price") is None
        assert safe_integer({"date": "soon"}, "date") is None

    def test_none_and_empty(self):
        assert safe_decimal({"price": None}, "price") is None
        assert safe_decimal({"price": ""}, "price") is None
        assert safe_string({"id": ""}, "id", "fallback") == "fallback"

    def test_numeric_values(self):
        assert safe_decimal({"price": 0.021946}, "price") == Decimal("0.021946")
        assert safe_decimal({"price": "9605.77"}, "price") == Decimal("9605.77")
        assert safe_integer({"date": "1564520003"}, "date") == 1564520003
        assert safe_string({"code": 0}, "code") == "0"

    def test_safe_value_on_lists_and_none(self):
        assert safe_value([1, 2], 5) is None
        assert safe_value(None, "x", []) == []
        assert safe_value({"list": None}, "list", []) == []


class TestPrecision:
    def test_truncate_drops_digits(self):
        assert truncate_to_precision(0.123456, 4) == "0.1234"
        assert truncate_to_precision("1.99999", 2) == "1.99"

    def test_round_half_up(self):
        assert round_to_precision(9605.775, 2) == "9605.78"
        assert round_to_precision(9605.774, 2) == "9605.77"

    def test_trailing_zeros_stripped(self):
        assert truncate_to_precision(1, 4) == "1"
        assert round_to_precision("2.50", 2) == "2.5"

    def test_unknown_precision_passes_value_through(self):
        assert truncate_to_precision("0.123456789", None) == "0.123456789"


class TestTime:
    def test_iso8601(self):
        assert iso8601(1564518452000) == "2019-07-30T20:27:32.000Z"
        assert iso8601(None) is None

    def test_ymd(self):
        assert ymd(1564520003000) == "2019-07-30"

    def test_parse_timeframe(self):
        assert parse_timeframe("1m") == 60
        assert parse_timeframe("4h") == 4 * 3600
        assert parse_timeframe("1w") == 7 * 86400

    def test_parse_timeframe_invalid(self):
        with pytest.raises(ValueError):
            parse_timeframe("1x")


def test_filter_by_since_limit_sorts_then_filters():
    items = [SimpleNamespace(timestamp=t) for t in (3000, 1000, 2000, 4000)]
    result = filter_by_since_limit(items, since=2000, limit=2)
    assert [i.timestamp for i in result] == [2000, 3000]


def test_omit():
    assert omit({"type": "spot", "page": 1}, "type") == {"page": 1}
    assert omit(None, "type") == {}
