"""
Public market data models.

Each model is built from the decoded JSON of one payload item. Unknown
fields are ignored so that additive server changes do not break decoding.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional

from .enums import OrderSide
from .types import (
    Book,
    Monetary,
    parse_optional_book,
    parse_optional_time,
    parse_tid,
)


@dataclass
class BookFlatRate:
    """Default maker/taker fees for a book."""
    maker: Monetary
    taker: Monetary

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "BookFlatRate":
        return cls(
            maker=Monetary.parse(data.get("maker")),
            taker=Monetary.parse(data.get("taker")),
        )


@dataclass
class BookFeesTier:
    """Volume-based fee tier."""
    volume: Monetary
    maker: Monetary
    taker: Monetary

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "BookFeesTier":
        return cls(
            volume=Monetary.parse(data.get("volume")),
            maker=Monetary.parse(data.get("maker")),
            taker=Monetary.parse(data.get("taker")),
        )


@dataclass
class BookFees:
    """Fee structure for a book."""
    flat_rate: Optional[BookFlatRate] = None
    structure: List[BookFeesTier] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "BookFees":
        flat_rate = data.get("flat_rate")
        return cls(
            flat_rate=BookFlatRate.from_dict(flat_rate) if flat_rate else None,
            structure=[
                BookFeesTier.from_dict(tier)
                for tier in data.get("structure") or []
            ],
        )


@dataclass
class ExchangeOrderBook:
    """Order placement limits for an available book."""
    book: Optional[Book]
    default_chart: str = ""
    minimum_amount: Monetary = Monetary("")
    maximum_amount: Monetary = Monetary("")
    minimum_price: Monetary = Monetary("")
    maximum_price: Monetary = Monetary("")
    minimum_value: Monetary = Monetary("")
    maximum_value: Monetary = Monetary("")
    tick_size: Monetary = Monetary("")
    fees: Optional[BookFees] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ExchangeOrderBook":
        # Older responses misspell minimum_value as "minimun_value"
        minimum_value = data.get("minimum_value", data.get("minimun_value"))
        fees = data.get("fees")
        return cls(
            book=parse_optional_book(data.get("book")),
            default_chart=data.get("default_chart") or "",
            minimum_amount=Monetary.parse(data.get("minimum_amount")),
            maximum_amount=Monetary.parse(data.get("maximum_amount")),
            minimum_price=Monetary.parse(data.get("minimum_price")),
            maximum_price=Monetary.parse(data.get("maximum_price")),
            minimum_value=Monetary.parse(minimum_value),
            maximum_value=Monetary.parse(data.get("maximum_value")),
            tick_size=Monetary.parse(data.get("tick_size")),
            fees=BookFees.from_dict(fees) if fees else None,
        )


@dataclass
class Ticker:
    """Trading information for a book."""
    book: Optional[Book]
    volume: Monetary  # Last 24 hours volume
    high: Monetary  # Last 24 hours price high
    last: Monetary  # Last traded price
    low: Monetary  # Last 24 hours price low
    vwap: Monetary  # Last 24 hours volume weighted average price
    ask: Monetary  # Lowest sell order
    bid: Monetary  # Highest buy order
    change_24: Monetary = Monetary("")
    rolling_average_change: Dict[str, Monetary] = field(default_factory=dict)
    created_at: Optional[datetime] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Ticker":
        rolling = data.get("rolling_average_change") or {}
        return cls(
            book=parse_optional_book(data.get("book")),
            volume=Monetary.parse(data.get("volume")),
            high=Monetary.parse(data.get("high")),
            last=Monetary.parse(data.get("last")),
            low=Monetary.parse(data.get("low")),
            vwap=Monetary.parse(data.get("vwap")),
            ask=Monetary.parse(data.get("ask")),
            bid=Monetary.parse(data.get("bid")),
            change_24=Monetary.parse(data.get("change_24")),
            rolling_average_change={
                str(hours): Monetary.parse(value)
                for hours, value in rolling.items()
            },
            created_at=parse_optional_time(data.get("created_at")),
        )

    @property
    def spread(self) -> Monetary:
        """Ask minus bid, as a decimal string."""
        return Monetary(str(self.ask.to_decimal() - self.bid.to_decimal()))


@dataclass
class Trade:
    """A recent public trade on a book."""
    book: Optional[Book]
    tid: int
    amount: Monetary
    price: Monetary
    maker_side: Optional[OrderSide] = None
    created_at: Optional[datetime] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Trade":
        maker_side = data.get("maker_side")
        return cls(
            book=parse_optional_book(data.get("book")),
            tid=parse_tid(data["tid"]),
            amount=Monetary.parse(data.get("amount")),
            price=Monetary.parse(data.get("price")),
            maker_side=OrderSide.from_str(maker_side) if maker_side else None,
            created_at=parse_optional_time(data.get("created_at")),
        )


@dataclass
class Order:
    """A public order on the order book."""
    book: Optional[Book]
    price: Monetary  # Price per unit of major
    amount: Monetary  # Major amount in order
    oid: str = ""  # Only present for unaggregated books

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Order":
        return cls(
            book=parse_optional_book(data.get("book")),
            price=Monetary.parse(data.get("price")),
            amount=Monetary.parse(data.get("amount")),
            oid=data.get("oid") or "",
        )


@dataclass
class OrderBook:
    """Open orders on a book, as returned by /order_book."""
    asks: List[Order] = field(default_factory=list)
    bids: List[Order] = field(default_factory=list)
    updated_at: Optional[datetime] = None
    sequence: str = ""

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "OrderBook":
        return cls(
            asks=[Order.from_dict(o) for o in data.get("asks") or []],
            bids=[Order.from_dict(o) for o in data.get("bids") or []],
            updated_at=parse_optional_time(data.get("updated_at")),
            sequence=str(data.get("sequence") or ""),
        )

    @property
    def best_bid(self) -> Optional[Order]:
        return self.bids[0] if self.bids else None

    @property
    def best_ask(self) -> Optional[Order]:
        return self.asks[0] if self.asks else None
