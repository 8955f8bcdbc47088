"""
Wire value types shared by REST and WebSocket payloads.

- Currency: lowercase ticker code ("btc", "mxn")
- Book: ordered currency pair serialized as "<major>_<minor>"
- Monetary: decimal string, never stored as float
- TID: transaction ID sent either as a JSON integer or a numeric string
- Time: ISO-8601 timestamps in two tolerated variants

The supported currency list changes over time, so it is loaded as data
(see CurrencyCatalog) instead of being fixed here.
"""

import re
from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal, InvalidOperation
from typing import Any, FrozenSet, Iterable, Optional

from ..bitso_errors import DecodeError

_CURRENCY_RE = re.compile(r"^[a-z0-9]+$")

TIME_FORMAT = "%Y-%m-%dT%H:%M:%S%z"
TIME_FORMATS = (
    "%Y-%m-%dT%H:%M:%S%z",
    "%Y-%m-%dT%H:%M:%S.%f%z",
)

MAX_TID = 2 ** 64 - 1


@dataclass(frozen=True)
class CurrencyCatalog:
    """Versioned set of currency codes supported by the exchange."""

    version: str
    codes: FrozenSet[str] = field(default_factory=frozenset)

    @classmethod
    def from_codes(cls, version: str, codes: Iterable[str]) -> "CurrencyCatalog":
        return cls(
            version=str(version),
            codes=frozenset(c.strip().lower() for c in codes),
        )

    def __contains__(self, code: object) -> bool:
        return isinstance(code, str) and code in self.codes

    def __len__(self) -> int:
        return len(self.codes)


class Currency(str):
    """Currency code, normalized to lowercase."""

    @classmethod
    def from_string(
        cls,
        value: Any,
        catalog: Optional[CurrencyCatalog] = None,
    ) -> "Currency":
        """
        Parse a currency code.

        Args:
            value: Raw code (case and surrounding whitespace are ignored)
            catalog: If given, the code must be listed in it

        Raises:
            DecodeError: If the code is malformed or not in the catalog
        """
        if not isinstance(value, str):
            raise DecodeError(f"Currency must be a string, got {value!r}")

        code = value.strip().lower()
        if not _CURRENCY_RE.match(code):
            raise DecodeError(f"Malformed currency code: {value!r}")

        if catalog is not None and code not in catalog:
            raise DecodeError(
                f"Unsupported currency {code!r} (catalog {catalog.version})"
            )

        return cls(code)


@dataclass(frozen=True)
class Book:
    """An exchange order book (major/minor currency pair)."""

    major: Currency
    minor: Currency

    def __str__(self) -> str:
        return f"{self.major}_{self.minor}"

    @classmethod
    def from_currencies(cls, major: str, minor: str) -> "Book":
        return cls(Currency.from_string(major), Currency.from_string(minor))

    @classmethod
    def from_string(
        cls,
        value: Any,
        catalog: Optional[CurrencyCatalog] = None,
    ) -> "Book":
        """
        Parse a book identifier such as "btc_mxn".

        Raises:
            DecodeError: If the value is not exactly two currencies joined by "_"
        """
        if not isinstance(value, str):
            raise DecodeError(f"Book must be a string, got {value!r}")

        parts = value.split("_")
        if len(parts) != 2:
            raise DecodeError(f"Unexpected book format: {value!r}")

        return cls(
            major=Currency.from_string(parts[0], catalog),
            minor=Currency.from_string(parts[1], catalog),
        )


class Monetary(str):
    """
    Monetary amount kept as the decimal string received from the API.

    Conversions are explicit and meant for display or computation only.
    """

    @classmethod
    def parse(cls, value: Any) -> "Monetary":
        """Build from a JSON value (string, number, or null)."""
        if value is None:
            return cls("")
        if isinstance(value, bool):
            raise DecodeError(f"Monetary value cannot be boolean: {value!r}")
        if isinstance(value, (int, float, Decimal)):
            return cls(str(value))
        if isinstance(value, str):
            return cls(value)
        raise DecodeError(f"Unexpected monetary value: {value!r}")

    @classmethod
    def from_float(cls, value: float) -> "Monetary":
        """Format a float with six decimal places."""
        return cls("%f" % value)

    def to_float(self) -> float:
        """Float value, or 0.0 if the string is not a number."""
        try:
            return float(self)
        except ValueError:
            return 0.0

    def to_decimal(self) -> Decimal:
        """
        Exact decimal value.

        Raises:
            ValueError: If the string is not a valid decimal
        """
        try:
            return Decimal(str(self))
        except InvalidOperation:
            raise ValueError(f"Invalid monetary value: {str(self)!r}")


def parse_tid(value: Any) -> int:
    """
    Normalize a transaction ID to an unsigned 64-bit integer.

    Bitso sends "tid" values sometimes as integers and sometimes as strings.

    Raises:
        DecodeError: If the value is not a non-negative integer in range
    """
    if isinstance(value, bool):
        raise DecodeError(f"Invalid TID: {value!r}")

    if isinstance(value, int):
        tid = value
    elif isinstance(value, str) and value.isascii() and value.isdigit():
        tid = int(value)
    else:
        raise DecodeError(f"Invalid TID: {value!r}")

    if tid < 0 or tid > MAX_TID:
        raise DecodeError(f"TID out of range: {value!r}")

    return tid


def parse_time(value: Any) -> datetime:
    """
    Parse an ISO-8601 timestamp with a UTC offset.

    Accepts both "2024-01-15T10:30:00+00:00" and
    "2024-01-15T10:30:00.123-0600" (sub-seconds and the offset colon are
    optional).

    Raises:
        DecodeError: If no supported format matches
    """
    if not isinstance(value, str) or not value:
        raise DecodeError(f"Invalid timestamp: {value!r}")

    for fmt in TIME_FORMATS:
        try:
            return datetime.strptime(value, fmt)
        except ValueError:
            continue

    raise DecodeError(f"Unsupported timestamp format: {value!r}")


def parse_optional_time(value: Any) -> Optional[datetime]:
    if value is None or value == "":
        return None
    return parse_time(value)


def format_time(value: datetime) -> str:
    """Format as "2024-01-15T10:30:00+0000"."""
    return value.strftime(TIME_FORMAT)


def parse_optional_book(value: Any) -> Optional[Book]:
    if value is None or value == "":
        return None
    return Book.from_string(value)
