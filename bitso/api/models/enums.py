"""
Enumerations used in Bitso payloads.

Decoding is always fallible: an unknown value raises DecodeError instead of
crashing, since the values come from the server.
"""

from enum import Enum
from typing import Any, Type, TypeVar

from ..bitso_errors import DecodeError

E = TypeVar("E", bound=Enum)


def _from_str(enum_cls: Type[E], value: Any) -> E:
    if not isinstance(value, str):
        raise DecodeError(f"Unsupported {enum_cls.__name__}: {value!r}")
    try:
        return enum_cls(value.strip().lower())
    except ValueError:
        raise DecodeError(f"Unsupported {enum_cls.__name__}: {value!r}")


class OrderSide(Enum):
    """Order side (buy/sell)."""
    BUY = "buy"
    SELL = "sell"

    @classmethod
    def from_str(cls, value: Any) -> "OrderSide":
        return _from_str(cls, value)


class OrderType(Enum):
    """Order types supported by Bitso."""
    MARKET = "market"
    LIMIT = "limit"

    @classmethod
    def from_str(cls, value: Any) -> "OrderType":
        return _from_str(cls, value)


class OrderStatus(Enum):
    """Order status values."""
    QUEUED = "queued"
    OPEN = "open"
    PARTIALLY_FILLED = "partially filled"
    COMPLETED = "completed"
    CANCELLED = "cancelled"

    @classmethod
    def from_str(cls, value: Any) -> "OrderStatus":
        return _from_str(cls, value)

    @property
    def is_open(self) -> bool:
        return self in (
            OrderStatus.QUEUED,
            OrderStatus.OPEN,
            OrderStatus.PARTIALLY_FILLED,
        )


class Operation(Enum):
    """Ledger operation types."""
    FUNDING = "funding"
    WITHDRAWAL = "withdrawal"
    TRADE = "trade"
    FEE = "fee"

    @classmethod
    def from_str(cls, value: Any) -> "Operation":
        return _from_str(cls, value)

    @property
    def ledger_path(self) -> str:
        """Path segment of the per-operation ledger endpoint."""
        return f"{self.value}s"


class ChannelType(Enum):
    """WebSocket subscription channels."""
    TRADES = "trades"
    DIFF_ORDERS = "diff-orders"
    ORDERS = "orders"
