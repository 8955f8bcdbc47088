"""
Typed Bitso payloads: wire value types, enums, and response models.
"""

from .types import (
    Book,
    Currency,
    CurrencyCatalog,
    Monetary,
    format_time,
    parse_optional_book,
    parse_optional_time,
    parse_tid,
    parse_time,
)
from .enums import (
    ChannelType,
    Operation,
    OrderSide,
    OrderStatus,
    OrderType,
)
from .market import (
    BookFees,
    BookFeesTier,
    BookFlatRate,
    ExchangeOrderBook,
    Order,
    OrderBook,
    Ticker,
    Trade,
)
from .account import (
    Balance,
    BalanceUpdate,
    CustomerFees,
    Fee,
    Funding,
    OrderPlacement,
    Transaction,
    UserOrder,
    UserOrderTrade,
    UserTrade,
    Withdrawal,
)
from .stream import (
    DiffOrderEntry,
    OrderBookEntry,
    StreamMessage,
    StreamTrade,
    WebSocketDiffOrder,
    WebSocketMessage,
    WebSocketOrder,
    WebSocketReply,
    WebSocketTrade,
)


__all__ = [
    # Value types
    "Book",
    "Currency",
    "CurrencyCatalog",
    "Monetary",
    "format_time",
    "parse_optional_book",
    "parse_optional_time",
    "parse_tid",
    "parse_time",
    # Enums
    "ChannelType",
    "Operation",
    "OrderSide",
    "OrderStatus",
    "OrderType",
    # Market data
    "BookFees",
    "BookFeesTier",
    "BookFlatRate",
    "ExchangeOrderBook",
    "Order",
    "OrderBook",
    "Ticker",
    "Trade",
    # Account
    "Balance",
    "BalanceUpdate",
    "CustomerFees",
    "Fee",
    "Funding",
    "OrderPlacement",
    "Transaction",
    "UserOrder",
    "UserOrderTrade",
    "UserTrade",
    "Withdrawal",
    # Stream
    "DiffOrderEntry",
    "OrderBookEntry",
    "StreamMessage",
    "StreamTrade",
    "WebSocketDiffOrder",
    "WebSocketMessage",
    "WebSocketOrder",
    "WebSocketReply",
    "WebSocketTrade",
]
