"""
Bitso API Module.

Provides clients and utilities for interacting with the Bitso exchange:
- Authentication (HMAC-SHA256)
- REST API v3 (market data, balances, ledger, orders)
- WebSocket (trades, diff-orders, order book snapshots)
- Burst-rate limiting
- Error handling

Usage:
    # Public API (no auth needed)
    from bitso.api import BitsoClient

    client = BitsoClient()
    ticker = client.ticker("btc_mxn")

    # Private API (requires credentials)
    from bitso.api import Book, Monetary, OrderPlacement, OrderSide, OrderType

    client = BitsoClient.from_env()  # Uses BITSO_API_KEY, BITSO_API_SECRET
    balances = client.balances()
    oid = client.place_order(OrderPlacement(
        book=Book.from_string("btc_mxn"),
        side=OrderSide.BUY,
        type=OrderType.LIMIT,
        major=Monetary("0.001"),
        price=Monetary("500000"),
    ))

    # WebSocket (real-time data)
    from bitso.api import BitsoWebSocketClient, ChannelType

    async with BitsoWebSocketClient() as ws:
        await ws.subscribe("btc_mxn", ChannelType.TRADES)
        async for msg in ws:
            print(msg)
"""

# Error handling
from .bitso_errors import (
    BitsoError,
    TransportError,
    DecodeError,
    APIError,
    AuthenticationError,
    InvalidParameterError,
    OrderError,
    OrderNotFoundError,
    StreamError,
    ErrorCategory,
    classify_and_raise,
)

# Envelope
from .envelope import (
    Envelope,
    EnvelopeError,
    parse_envelope,
)

# Authentication
from .auth import (
    BitsoAuth,
    BitsoCredentials,
    NonceManager,
    load_credentials_from_env,
    load_credentials_from_file,
)

# Rate limiting
from .rate_limiter import (
    RateLimiter,
    RateLimitConfig,
)

# Models
from .models import (
    Book,
    Currency,
    CurrencyCatalog,
    Monetary,
    ChannelType,
    Operation,
    OrderSide,
    OrderStatus,
    OrderType,
    Balance,
    CustomerFees,
    ExchangeOrderBook,
    Funding,
    OrderBook,
    OrderPlacement,
    Ticker,
    Trade,
    Transaction,
    UserOrder,
    UserOrderTrade,
    UserTrade,
    Withdrawal,
    WebSocketDiffOrder,
    WebSocketOrder,
    WebSocketReply,
    WebSocketTrade,
)

# REST API
from .bitso_client import BitsoClient

# WebSocket
from .websocket_client import (
    BitsoWebSocketClient,
    ConnectionState,
    parse_stream_frame,
)


__all__ = [
    # Errors
    "BitsoError",
    "TransportError",
    "DecodeError",
    "APIError",
    "AuthenticationError",
    "InvalidParameterError",
    "OrderError",
    "OrderNotFoundError",
    "StreamError",
    "ErrorCategory",
    "classify_and_raise",
    # Envelope
    "Envelope",
    "EnvelopeError",
    "parse_envelope",
    # Authentication
    "BitsoAuth",
    "BitsoCredentials",
    "NonceManager",
    "load_credentials_from_env",
    "load_credentials_from_file",
    # Rate limiting
    "RateLimiter",
    "RateLimitConfig",
    # Models
    "Book",
    "Currency",
    "CurrencyCatalog",
    "Monetary",
    "ChannelType",
    "Operation",
    "OrderSide",
    "OrderStatus",
    "OrderType",
    "Balance",
    "CustomerFees",
    "ExchangeOrderBook",
    "Funding",
    "OrderBook",
    "OrderPlacement",
    "Ticker",
    "Trade",
    "Transaction",
    "UserOrder",
    "UserOrderTrade",
    "UserTrade",
    "Withdrawal",
    "WebSocketDiffOrder",
    "WebSocketOrder",
    "WebSocketReply",
    "WebSocketTrade",
    # REST client
    "BitsoClient",
    # WebSocket
    "BitsoWebSocketClient",
    "ConnectionState",
    "parse_stream_frame",
]
