"""
Private account models: balances, fees, ledger, fundings, withdrawals,
user trades and orders.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional

from ..bitso_errors import DecodeError
from .enums import Operation, OrderSide, OrderStatus, OrderType
from .types import (
    Book,
    Currency,
    Monetary,
    parse_optional_book,
    parse_optional_time,
    parse_tid,
)


@dataclass
class Balance:
    """Account balance for a single currency."""
    currency: Currency
    total: Monetary
    locked: Monetary
    available: Monetary
    pending_deposit: Monetary = Monetary("")
    pending_withdrawal: Monetary = Monetary("")

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Balance":
        return cls(
            currency=Currency.from_string(data["currency"]),
            total=Monetary.parse(data.get("total")),
            locked=Monetary.parse(data.get("locked")),
            available=Monetary.parse(data.get("available")),
            pending_deposit=Monetary.parse(data.get("pending_deposit")),
            pending_withdrawal=Monetary.parse(data.get("pending_withdrawal")),
        )


@dataclass
class Fee:
    """Trading fee charged on a book."""
    book: Optional[Book]
    fee_decimal: Monetary
    fee_percent: Monetary

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Fee":
        return cls(
            book=parse_optional_book(data.get("book")),
            fee_decimal=Monetary.parse(data.get("fee_decimal")),
            fee_percent=Monetary.parse(data.get("fee_percent")),
        )


@dataclass
class CustomerFees:
    """Trading fees per book and withdrawal fees per currency."""
    fees: List[Fee] = field(default_factory=list)
    withdrawal_fees: Dict[str, Monetary] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "CustomerFees":
        return cls(
            fees=[Fee.from_dict(f) for f in data.get("fees") or []],
            withdrawal_fees={
                currency: Monetary.parse(amount)
                for currency, amount in (data.get("withdrawal_fees") or {}).items()
            },
        )


@dataclass
class Funding:
    """A deposit into the user's account."""
    fid: str
    currency: Currency
    method: str
    amount: Monetary
    status: str
    created_at: Optional[datetime] = None
    details: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Funding":
        return cls(
            fid=data.get("fid") or "",
            currency=Currency.from_string(data["currency"]),
            method=data.get("method") or "",
            amount=Monetary.parse(data.get("amount")),
            status=data.get("status") or "",
            created_at=parse_optional_time(data.get("created_at")),
            details=data.get("details") or {},
        )


@dataclass
class Withdrawal:
    """A withdrawal from the user's account."""
    wid: str
    currency: Currency
    method: str
    amount: Monetary
    status: str
    created_at: Optional[datetime] = None
    details: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Withdrawal":
        return cls(
            wid=data.get("wid") or "",
            currency=Currency.from_string(data["currency"]),
            method=data.get("method") or "",
            amount=Monetary.parse(data.get("amount")),
            status=data.get("status") or "",
            created_at=parse_optional_time(data.get("created_at")),
            details=data.get("details") or {},
        )


@dataclass
class BalanceUpdate:
    """Change to one currency balance within a ledger entry."""
    currency: Currency
    amount: Monetary

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "BalanceUpdate":
        return cls(
            currency=Currency.from_string(data["currency"]),
            amount=Monetary.parse(data.get("amount")),
        )


@dataclass
class Transaction:
    """An entry in the user's ledger."""
    eid: str
    operation: Operation
    created_at: Optional[datetime] = None
    balance_updates: List[BalanceUpdate] = field(default_factory=list)
    details: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Transaction":
        return cls(
            eid=data.get("eid") or "",
            operation=Operation.from_str(data.get("operation")),
            created_at=parse_optional_time(data.get("created_at")),
            balance_updates=[
                BalanceUpdate.from_dict(u)
                for u in data.get("balance_updates") or []
            ],
            details=data.get("details") or {},
        )


@dataclass
class UserTrade:
    """A trade made by the user."""
    book: Optional[Book]
    tid: int
    oid: str
    side: OrderSide
    major: Monetary
    minor: Monetary
    price: Monetary
    fees_amount: Monetary
    fees_currency: Optional[Currency] = None
    created_at: Optional[datetime] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "UserTrade":
        fees_currency = data.get("fees_currency", data.get("currency"))
        return cls(
            book=parse_optional_book(data.get("book")),
            tid=parse_tid(data["tid"]),
            oid=data.get("oid") or "",
            side=OrderSide.from_str(data.get("side")),
            major=Monetary.parse(data.get("major")),
            minor=Monetary.parse(data.get("minor")),
            price=Monetary.parse(data.get("price")),
            fees_amount=Monetary.parse(data.get("fees_amount")),
            fees_currency=(
                Currency.from_string(fees_currency) if fees_currency else None
            ),
            created_at=parse_optional_time(data.get("created_at")),
        )


@dataclass
class UserOrderTrade(UserTrade):
    """A trade that filled (part of) one of the user's orders."""
    pass


@dataclass
class UserOrder:
    """An order placed by the user."""
    book: Optional[Book]
    oid: str
    side: OrderSide
    status: OrderStatus
    type: str
    price: Monetary
    original_amount: Monetary
    unfilled_amount: Monetary
    original_value: Monetary
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "UserOrder":
        return cls(
            book=parse_optional_book(data.get("book")),
            oid=data.get("oid") or "",
            side=OrderSide.from_str(data.get("side")),
            status=OrderStatus.from_str(data.get("status")),
            type=data.get("type") or "",
            price=Monetary.parse(data.get("price")),
            original_amount=Monetary.parse(data.get("original_amount")),
            unfilled_amount=Monetary.parse(data.get("unfilled_amount")),
            original_value=Monetary.parse(data.get("original_value")),
            created_at=parse_optional_time(data.get("created_at")),
            updated_at=parse_optional_time(data.get("updated_at")),
        )

    @property
    def is_open(self) -> bool:
        """Check if order is still open."""
        return self.status.is_open


@dataclass
class OrderPlacement:
    """
    A new order to submit with place_order().

    Market orders set either major or minor; limit orders set major (or
    minor) plus price.
    """
    book: Book
    side: OrderSide
    type: OrderType
    major: Optional[Monetary] = None
    minor: Optional[Monetary] = None
    price: Optional[Monetary] = None

    def __post_init__(self):
        if not self.major and not self.minor:
            raise ValueError("Either major or minor amount is required")
        if self.type == OrderType.LIMIT and not self.price:
            raise ValueError("Limit orders require a price")

    def to_dict(self) -> Dict[str, str]:
        """JSON body for POST /orders/ (empty amounts omitted)."""
        body = {
            "book": str(self.book),
            "side": self.side.value,
            "type": self.type.value,
        }
        if self.major:
            body["major"] = str(self.major)
        if self.minor:
            body["minor"] = str(self.minor)
        if self.price:
            body["price"] = str(self.price)
        return body

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "OrderPlacement":
        book = parse_optional_book(data.get("book"))
        if book is None:
            raise DecodeError("Order placement requires a book")
        return cls(
            book=book,
            side=OrderSide.from_str(data.get("side")),
            type=OrderType.from_str(data.get("type")),
            major=Monetary.parse(data["major"]) if data.get("major") else None,
            minor=Monetary.parse(data["minor"]) if data.get("minor") else None,
            price=Monetary.parse(data["price"]) if data.get("price") else None,
        )
