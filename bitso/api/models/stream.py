"""
WebSocket stream messages.

Frames are routed on their "type" field. Trade, diff-order and order-book
frames with a payload decode into their own classes; everything else
(subscription acks, payload-less frames, unknown types) is a WebSocketReply.
Payload items use Bitso's single-letter keys.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Union

from ..bitso_errors import DecodeError
from .enums import ChannelType
from .types import Book, Monetary, parse_optional_book, parse_tid


def _parse_int(value: Any, name: str) -> int:
    if value is None:
        return 0
    if isinstance(value, bool) or not isinstance(value, int):
        raise DecodeError(f"Field {name!r} must be an integer, got {value!r}")
    return value


def _parse_id(value: Any, name: str) -> str:
    if value is None:
        return ""
    if isinstance(value, bool) or not isinstance(value, (str, int)):
        raise DecodeError(f"Field {name!r} must be a string ID, got {value!r}")
    return str(value)


def _payload_list(data: Dict[str, Any]) -> List[Dict[str, Any]]:
    payload = data.get("payload") or []
    if not isinstance(payload, list):
        raise DecodeError(f"Expected payload list, got {type(payload).__name__}")
    return payload


@dataclass
class WebSocketReply:
    """Generic frame: subscription responses and payload-less updates."""
    type: str = ""
    action: str = ""
    response: str = ""
    time: int = 0
    payload: Any = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "WebSocketReply":
        return cls(
            type=data.get("type") or "",
            action=data.get("action") or "",
            response=data.get("response") or "",
            time=_parse_int(data.get("time"), "time"),
            payload=data.get("payload"),
        )


@dataclass
class StreamTrade:
    """One executed trade from the trades channel."""
    tid: int
    amount: Monetary
    price: Monetary
    value: Monetary
    maker_side: str  # "0" buy, "1" sell
    creation_timestamp: int
    maker_order_id: str
    taker_order_id: str

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "StreamTrade":
        return cls(
            tid=parse_tid(data["i"]),
            amount=Monetary.parse(data.get("a")),
            price=Monetary.parse(data.get("r")),
            value=Monetary.parse(data.get("v")),
            maker_side=str(data.get("t", "")),
            creation_timestamp=_parse_int(data.get("x"), "x"),
            maker_order_id=_parse_id(data.get("mo"), "mo"),
            taker_order_id=_parse_id(data.get("to"), "to"),
        )


@dataclass
class WebSocketTrade:
    """Trades channel frame."""
    book: Optional[Book]
    payload: List[StreamTrade] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "WebSocketTrade":
        return cls(
            book=parse_optional_book(data.get("book")),
            payload=[StreamTrade.from_dict(t) for t in _payload_list(data)],
        )


@dataclass
class DiffOrderEntry:
    """Single order book change from the diff-orders channel."""
    timestamp: int
    price: Monetary
    status: str
    position: int  # 0 buy, 1 sell
    amount: Monetary
    value: Monetary
    last_update_timestamp: int
    order_id: str

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "DiffOrderEntry":
        return cls(
            timestamp=_parse_int(data.get("d"), "d"),
            price=Monetary.parse(data.get("r")),
            status=data.get("s") or "",
            position=_parse_int(data.get("t"), "t"),
            amount=Monetary.parse(data.get("a")),
            value=Monetary.parse(data.get("v")),
            last_update_timestamp=_parse_int(data.get("z"), "z"),
            order_id=_parse_id(data.get("o"), "o"),
        )


@dataclass
class WebSocketDiffOrder:
    """Diff-orders channel frame."""
    book: Optional[Book]
    sequence: int = 0
    payload: List[DiffOrderEntry] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "WebSocketDiffOrder":
        return cls(
            book=parse_optional_book(data.get("book")),
            sequence=_parse_int(data.get("sequence"), "sequence"),
            payload=[DiffOrderEntry.from_dict(d) for d in _payload_list(data)],
        )


@dataclass
class OrderBookEntry:
    """Resting order from the orders channel snapshot."""
    amount: Monetary
    order_id: str
    position: int
    price: Monetary
    status: str
    timestamp: int
    value: Monetary

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "OrderBookEntry":
        return cls(
            amount=Monetary.parse(data.get("a")),
            order_id=_parse_id(data.get("o"), "o"),
            position=_parse_int(data.get("t"), "t"),
            price=Monetary.parse(data.get("r")),
            status=data.get("s") or "",
            timestamp=_parse_int(data.get("d"), "d"),
            value=Monetary.parse(data.get("v")),
        )


@dataclass
class WebSocketOrder:
    """Orders channel frame: top of the book snapshot."""
    book: Optional[Book]
    bids: List[OrderBookEntry] = field(default_factory=list)
    asks: List[OrderBookEntry] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "WebSocketOrder":
        payload = data.get("payload") or {}
        if not isinstance(payload, dict):
            raise DecodeError(
                f"Expected payload object, got {type(payload).__name__}"
            )
        return cls(
            book=parse_optional_book(data.get("book")),
            bids=[OrderBookEntry.from_dict(o) for o in payload.get("bids") or []],
            asks=[OrderBookEntry.from_dict(o) for o in payload.get("asks") or []],
        )


@dataclass
class WebSocketMessage:
    """Outbound subscription request."""
    book: Book
    type: str
    action: str = "subscribe"

    def to_dict(self) -> Dict[str, str]:
        return {
            "action": self.action,
            "book": str(self.book),
            "type": self.type,
        }


StreamMessage = Union[WebSocketReply, WebSocketTrade, WebSocketDiffOrder, WebSocketOrder]

STREAM_VARIANTS = {
    ChannelType.TRADES.value: WebSocketTrade,
    ChannelType.DIFF_ORDERS.value: WebSocketDiffOrder,
    ChannelType.ORDERS.value: WebSocketOrder,
}
