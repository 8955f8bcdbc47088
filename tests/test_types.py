"""
Tests for wire value types.

Tests cover:
- Currency and book parsing, with and without a catalog
- Monetary conversions
- TID normalization
- Timestamp variants
"""

from datetime import datetime, timedelta, timezone
from decimal import Decimal
import pytest

from bitso.api.bitso_errors import DecodeError
from bitso.api.models.types import (
    MAX_TID,
    Book,
    Currency,
    CurrencyCatalog,
    Monetary,
    format_time,
    parse_optional_time,
    parse_tid,
    parse_time,
)


CATALOG = CurrencyCatalog.from_codes(
    "test", ["btc", "eth", "mxn", "usd", "ars", "brl", "xrp", "mana"]
)


class TestCurrency:
    """Tests for Currency parsing."""

    def test_normalizes_case_and_whitespace(self):
        assert Currency.from_string("  BTC ") == "btc"

    def test_catalog_membership(self):
        assert Currency.from_string("mxn", CATALOG) == "mxn"
        with pytest.raises(DecodeError, match="Unsupported currency"):
            Currency.from_string("doge", CATALOG)

    def test_without_catalog_accepts_any_code(self):
        assert Currency.from_string("doge") == "doge"

    @pytest.mark.parametrize("value", ["", "b-t-c", "btc mxn", None, 5])
    def test_malformed(self, value):
        with pytest.raises(DecodeError):
            Currency.from_string(value)


class TestCurrencyCatalog:
    """Tests for CurrencyCatalog."""

    def test_contains(self):
        assert "btc" in CATALOG
        assert "doge" not in CATALOG
        assert 5 not in CATALOG
        assert len(CATALOG) == 8

    def test_codes_are_normalized(self):
        catalog = CurrencyCatalog.from_codes(1, [" BTC", "Mxn"])
        assert catalog.version == "1"
        assert "btc" in catalog
        assert "mxn" in catalog


class TestBook:
    """Tests for Book encoding and decoding."""

    def test_to_string(self):
        assert str(Book.from_currencies("btc", "mxn")) == "btc_mxn"

    def test_round_trip_over_catalog(self):
        """Test that every pair of catalog currencies survives encode/decode."""
        for major in sorted(CATALOG.codes):
            for minor in sorted(CATALOG.codes):
                book = Book(Currency(major), Currency(minor))
                assert Book.from_string(str(book), CATALOG) == book

    def test_uppercase_is_normalized(self):
        assert Book.from_string("ETH_MXN") == Book.from_currencies("eth", "mxn")

    @pytest.mark.parametrize(
        "value",
        ["btc", "btc_mxn_usd", "_mxn", "btc_", "btc-mxn", "", None, 42],
    )
    def test_malformed_books(self, value):
        with pytest.raises(DecodeError):
            Book.from_string(value)

    def test_unknown_currency_with_catalog(self):
        with pytest.raises(DecodeError):
            Book.from_string("doge_mxn", CATALOG)

    def test_books_are_hashable(self):
        books = {Book.from_string("btc_mxn"), Book.from_string("BTC_MXN")}
        assert len(books) == 1


class TestMonetary:
    """Tests for Monetary amounts."""

    def test_keeps_string_exactly(self):
        assert Monetary.parse("0.00000001") == "0.00000001"

    def test_parse_number(self):
        assert Monetary.parse(12) == "12"

    def test_parse_none(self):
        assert Monetary.parse(None) == ""

    def test_parse_bool_raises(self):
        with pytest.raises(DecodeError):
            Monetary.parse(True)

    def test_from_float(self):
        assert Monetary.from_float(1.5) == "1.500000"

    def test_to_float(self):
        assert Monetary("123.45").to_float() == 123.45
        assert Monetary("").to_float() == 0.0
        assert Monetary("abc").to_float() == 0.0

    def test_to_decimal(self):
        assert Monetary("500000.00").to_decimal() == Decimal("500000.00")
        with pytest.raises(ValueError):
            Monetary("abc").to_decimal()


class TestTID:
    """Tests for TID normalization."""

    def test_int(self):
        assert parse_tid(12345) == 12345

    def test_numeric_string(self):
        assert parse_tid("12345") == 12345

    def test_max_value(self):
        assert parse_tid(str(MAX_TID)) == MAX_TID

    @pytest.mark.parametrize(
        "value",
        [True, 1.5, -1, "-1", "12a", "", None, MAX_TID + 1, "١٢٣"],
    )
    def test_invalid(self, value):
        with pytest.raises(DecodeError):
            parse_tid(value)


class TestTime:
    """Tests for timestamp parsing."""

    def test_without_fraction(self):
        ts = parse_time("2024-01-15T10:30:00+00:00")
        assert ts == datetime(2024, 1, 15, 10, 30, tzinfo=timezone.utc)

    def test_with_fraction(self):
        ts = parse_time("2024-01-15T10:30:00.123-0600")
        assert ts.microsecond == 123000
        assert ts.utcoffset() == timedelta(hours=-6)

    def test_offset_without_colon(self):
        assert parse_time("2024-01-15T10:30:00+0000") == parse_time(
            "2024-01-15T10:30:00+00:00"
        )

    @pytest.mark.parametrize("value", ["2024-01-15", "yesterday", "", None, 1705312200])
    def test_invalid(self, value):
        with pytest.raises(DecodeError):
            parse_time(value)

    def test_optional(self):
        assert parse_optional_time(None) is None
        assert parse_optional_time("") is None

    def test_format(self):
        ts = parse_time("2024-01-15T10:30:00.5+00:00")
        assert format_time(ts) == "2024-01-15T10:30:00+0000"
