"""
Tests for REST and stream payload models.

Tests cover:
- Market data models (books, tickers, trades, order book)
- Account models (balances, fees, ledger, fundings, user orders)
- Order placement body
- Stream messages
"""

from datetime import timezone
import pytest

from bitso.api.bitso_errors import DecodeError
from bitso.api.models import (
    Balance,
    Book,
    CustomerFees,
    ExchangeOrderBook,
    Funding,
    Monetary,
    Operation,
    OrderBook,
    OrderPlacement,
    OrderSide,
    OrderStatus,
    OrderType,
    Ticker,
    Trade,
    Transaction,
    UserOrder,
    UserOrderTrade,
    UserTrade,
    WebSocketDiffOrder,
    WebSocketMessage,
    WebSocketOrder,
    WebSocketReply,
    WebSocketTrade,
    Withdrawal,
)


class TestMarketModels:
    """Tests for public market data models."""

    def test_exchange_order_book(self):
        book = ExchangeOrderBook.from_dict({
            "book": "btc_mxn",
            "minimum_amount": ".003",
            "maximum_amount": "1000.00",
            "minimum_price": "100.00",
            "maximum_price": "1000000.00",
            "minimum_value": "25.00",
            "maximum_value": "1000000.00",
            "tick_size": "0.01",
            "fees": {
                "flat_rate": {"maker": "0.500", "taker": "0.650"},
                "structure": [{"volume": "1500000", "maker": "0.00500", "taker": "0.00650"}],
            },
        })
        assert str(book.book) == "btc_mxn"
        assert book.minimum_amount == ".003"
        assert book.minimum_value == "25.00"
        assert book.fees.flat_rate.taker == "0.650"
        assert book.fees.structure[0].volume == "1500000"

    def test_exchange_order_book_misspelled_minimum_value(self):
        book = ExchangeOrderBook.from_dict({"book": "eth_mxn", "minimun_value": "10"})
        assert book.minimum_value == "10"

    def test_ticker(self):
        ticker = Ticker.from_dict({
            "book": "btc_mxn",
            "volume": "1000.5",
            "high": "550000.00",
            "last": "520000.00",
            "low": "480000.00",
            "vwap": "510000.00",
            "ask": "520100.00",
            "bid": "519900.00",
            "change_24": "14060",
            "rolling_average_change": {"6": "0.0919"},
            "created_at": "2024-01-15T10:30:00+00:00",
        })
        assert ticker.last == "520000.00"
        assert ticker.rolling_average_change["6"] == "0.0919"
        assert ticker.created_at.tzinfo == timezone.utc
        assert ticker.spread == "200.00"

    def test_trade_with_integer_tid(self):
        trade = Trade.from_dict({
            "book": "eth_mxn",
            "created_at": "2024-01-15T10:30:00+00:00",
            "amount": "2.5",
            "maker_side": "buy",
            "price": "35000.00",
            "tid": 12345,
        })
        assert trade.tid == 12345
        assert trade.maker_side == OrderSide.BUY

    def test_trade_with_string_tid(self):
        trade = Trade.from_dict({
            "book": "eth_mxn",
            "amount": "2.5",
            "maker_side": "sell",
            "price": "35000.00",
            "tid": "67890",
        })
        assert trade.tid == 67890
        assert trade.maker_side == OrderSide.SELL

    def test_trade_unknown_side_raises(self):
        with pytest.raises(DecodeError):
            Trade.from_dict({"book": "eth_mxn", "tid": 1, "maker_side": "hold"})

    def test_order_book(self):
        order_book = OrderBook.from_dict({
            "asks": [{"book": "btc_mxn", "price": "5632.24", "amount": "1.34491802"}],
            "bids": [{"book": "btc_mxn", "price": "6123.55", "amount": "1.12560000", "oid": "abc"}],
            "updated_at": "2016-04-08T17:52:31.000+00:00",
            "sequence": 27214,
        })
        assert order_book.best_ask.price == "5632.24"
        assert order_book.best_bid.oid == "abc"
        assert order_book.sequence == "27214"

    def test_empty_order_book(self):
        order_book = OrderBook.from_dict({"asks": [], "bids": []})
        assert order_book.best_bid is None
        assert order_book.best_ask is None


class TestAccountModels:
    """Tests for private account models."""

    def test_balance(self):
        balance = Balance.from_dict({
            "currency": "btc",
            "total": "1.5",
            "locked": "0.5",
            "available": "1.0",
            "pending_deposit": "0.1",
            "pending_withdrawal": "0.0",
        })
        assert balance.currency == "btc"
        assert balance.available == "1.0"
        assert balance.pending_deposit == "0.1"

    def test_customer_fees(self):
        fees = CustomerFees.from_dict({
            "fees": [
                {"book": "btc_mxn", "fee_decimal": "0.0065", "fee_percent": "0.65"},
                {"book": "eth_mxn", "fee_decimal": "0.0065", "fee_percent": "0.65"},
            ],
            "withdrawal_fees": {"btc": "0.001", "eth": "0.0025"},
        })
        assert len(fees.fees) == 2
        assert str(fees.fees[1].book) == "eth_mxn"
        assert fees.withdrawal_fees["btc"] == "0.001"

    def test_transaction(self):
        tx = Transaction.from_dict({
            "eid": "c4ca4238a0b923820dcc509a6f75849b",
            "operation": "trade",
            "created_at": "2016-04-08T17:52:31.000+00:00",
            "balance_updates": [
                {"currency": "btc", "amount": "-0.25232073"},
                {"currency": "mxn", "amount": "1013.540958479115"},
            ],
            "details": {"tid": 51756, "oid": "wri0yg8miihs80ngk"},
        })
        assert tx.operation == Operation.TRADE
        assert tx.balance_updates[1].amount == "1013.540958479115"
        assert tx.details["tid"] == 51756

    def test_funding(self):
        funding = Funding.from_dict({
            "fid": "c5b8d7f0768ee91d3b33bee648318688",
            "status": "pending",
            "created_at": "2016-04-08T17:52:31.000+00:00",
            "currency": "btc",
            "method": "btc",
            "amount": "0.48650929",
            "details": {"tx_hash": "abc"},
        })
        assert funding.fid == "c5b8d7f0768ee91d3b33bee648318688"
        assert funding.amount == "0.48650929"
        assert funding.details["tx_hash"] == "abc"

    def test_withdrawal(self):
        withdrawal = Withdrawal.from_dict({
            "wid": "c5b8d7f0768ee91d3b33bee648318688",
            "status": "pending",
            "currency": "mxn",
            "method": "sp",
            "amount": "300.15",
        })
        assert withdrawal.method == "sp"
        assert withdrawal.created_at is None

    def test_user_trade(self):
        trade = UserTrade.from_dict({
            "book": "btc_mxn",
            "major": "-0.1",
            "created_at": "2024-01-15T10:30:00+00:00",
            "minor": "50000.00",
            "fees_amount": "325.00",
            "fees_currency": "mxn",
            "price": "500000.00",
            "tid": 12345,
            "oid": "order123",
            "side": "sell",
        })
        assert trade.fees_currency == "mxn"
        assert trade.side == OrderSide.SELL
        assert trade.tid == 12345

    def test_user_order_trade_currency_key(self):
        trade = UserOrderTrade.from_dict({
            "book": "btc_mxn",
            "fees_amount": "162.50",
            "currency": "mxn",
            "tid": "12346",
            "oid": "order123",
            "side": "sell",
        })
        assert trade.fees_currency == "mxn"
        assert trade.tid == 12346

    def test_user_order(self):
        order = UserOrder.from_dict({
            "book": "btc_mxn",
            "original_amount": "0.01000000",
            "unfilled_amount": "0.00500000",
            "original_value": "56.0",
            "created_at": "2016-04-08T17:52:31.000+00:00",
            "updated_at": "2016-04-08T17:52:51.000+00:00",
            "price": "5600.00",
            "oid": "543cr2v32a1h68443",
            "side": "buy",
            "status": "partially filled",
            "type": "limit",
        })
        assert order.status == OrderStatus.PARTIALLY_FILLED
        assert order.is_open
        assert order.unfilled_amount == "0.00500000"


class TestOrderPlacement:
    """Tests for OrderPlacement body building."""

    def test_limit_order_body(self):
        order = OrderPlacement(
            book=Book.from_string("btc_mxn"),
            side=OrderSide.BUY,
            type=OrderType.LIMIT,
            major=Monetary("0.001"),
            price=Monetary("500000"),
        )
        assert order.to_dict() == {
            "book": "btc_mxn",
            "side": "buy",
            "type": "limit",
            "major": "0.001",
            "price": "500000",
        }

    def test_market_order_by_minor(self):
        order = OrderPlacement(
            book=Book.from_string("eth_mxn"),
            side=OrderSide.SELL,
            type=OrderType.MARKET,
            minor=Monetary("100"),
        )
        body = order.to_dict()
        assert body["minor"] == "100"
        assert "major" not in body
        assert "price" not in body

    def test_amount_required(self):
        with pytest.raises(ValueError):
            OrderPlacement(Book.from_string("btc_mxn"), OrderSide.BUY, OrderType.MARKET)

    def test_limit_requires_price(self):
        with pytest.raises(ValueError):
            OrderPlacement(
                Book.from_string("btc_mxn"),
                OrderSide.BUY,
                OrderType.LIMIT,
                major=Monetary("1"),
            )

    def test_from_dict(self):
        order = OrderPlacement.from_dict({
            "book": "btc_mxn", "side": "sell", "type": "market", "major": "0.5",
        })
        assert order.side == OrderSide.SELL
        assert order.price is None


class TestStreamModels:
    """Tests for WebSocket message models."""

    def test_trade_frame(self):
        frame = WebSocketTrade.from_dict({
            "type": "trades",
            "book": "btc_mxn",
            "payload": [{
                "i": 12345,
                "a": "0.5",
                "r": "500000.00",
                "v": "250000.00",
                "t": "0",
                "x": 1705312200000,
                "mo": "maker-order-123",
                "to": "taker-order-456",
            }],
        })
        assert str(frame.book) == "btc_mxn"
        entry = frame.payload[0]
        assert entry.tid == 12345
        assert entry.value == "250000.00"
        assert entry.maker_side == "0"
        assert entry.creation_timestamp == 1705312200000
        assert entry.taker_order_id == "taker-order-456"

    def test_diff_order_frame(self):
        frame = WebSocketDiffOrder.from_dict({
            "type": "diff-orders",
            "book": "eth_mxn",
            "sequence": 12345,
            "payload": [{
                "d": 1705312200000,
                "r": "35000.00",
                "s": "cancelled",
                "t": 1,
                "a": "2.5",
                "v": "87500.00",
                "z": 1705312200500,
                "o": "order-123",
            }],
        })
        assert frame.sequence == 12345
        assert frame.payload[0].status == "cancelled"
        assert frame.payload[0].position == 1
        assert frame.payload[0].last_update_timestamp == 1705312200500

    def test_orders_frame(self):
        frame = WebSocketOrder.from_dict({
            "type": "orders",
            "book": "btc_mxn",
            "payload": {
                "bids": [{"a": "0.5", "o": "bid-1", "t": 0, "r": "499000.00",
                          "s": "open", "d": 1705312200000, "v": "249500.00"}],
                "asks": [],
            },
        })
        assert frame.bids[0].order_id == "bid-1"
        assert frame.asks == []

    def test_orders_frame_float_values(self):
        frame = WebSocketOrder.from_dict({
            "book": "btc_mxn",
            "payload": {"bids": [{"a": 0.5, "r": 499000.0, "v": 249500.0}]},
        })
        assert frame.bids[0].amount.to_float() == 0.5

    def test_reply(self):
        reply = WebSocketReply.from_dict({
            "action": "subscribe",
            "response": "ok",
            "time": 1705312200000,
            "type": "trades",
        })
        assert reply.response == "ok"
        assert reply.payload is None

    def test_subscribe_message(self):
        message = WebSocketMessage(book=Book.from_string("sol_usd"), type="orders")
        assert message.to_dict() == {
            "action": "subscribe",
            "book": "sol_usd",
            "type": "orders",
        }

    def test_bad_timestamp_type_raises(self):
        with pytest.raises(DecodeError):
            WebSocketDiffOrder.from_dict({
                "book": "btc_mxn",
                "payload": [{"d": "yesterday"}],
            })

    def test_numeric_order_ids_become_strings(self):
        trade = WebSocketTrade.from_dict({
            "book": "btc_mxn",
            "payload": [{"i": 1, "mo": 987, "to": 654}],
        })
        diff = WebSocketDiffOrder.from_dict({
            "book": "btc_mxn",
            "payload": [{"o": 321}],
        })
        orders = WebSocketOrder.from_dict({
            "book": "btc_mxn",
            "payload": {"asks": [{"o": 123}]},
        })

        assert trade.payload[0].maker_order_id == "987"
        assert trade.payload[0].taker_order_id == "654"
        assert diff.payload[0].order_id == "321"
        assert orders.asks[0].order_id == "123"

    def test_missing_order_id_is_empty(self):
        diff = WebSocketDiffOrder.from_dict({"book": "btc_mxn", "payload": [{}]})
        assert diff.payload[0].order_id == ""

    @pytest.mark.parametrize("value", [{"id": 1}, ["a"], True, 1.5])
    def test_invalid_order_id_raises(self, value):
        with pytest.raises(DecodeError):
            WebSocketDiffOrder.from_dict({
                "book": "btc_mxn",
                "payload": [{"o": value}],
            })
