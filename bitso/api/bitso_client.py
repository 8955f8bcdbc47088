"""
Bitso REST API Client.

Client for Bitso v3 public and private endpoints:
- Market data (available books, tickers, order book, trades)
- Account data (balances, fees, ledger, fundings, withdrawals)
- User trades and orders
- Order placement and cancellation

Private endpoints require HMAC-SHA256 authentication. Without credentials
every request is sent unsigned. Requests are never retried.
"""

import json
import logging
import threading
from typing import Any, Callable, Dict, Iterable, List, Optional, Union
from urllib.parse import quote, urlencode, urlsplit

import requests
from requests.adapters import HTTPAdapter
from requests.utils import requote_uri
from urllib3.util.retry import Retry

from config.settings import BitsoConfig, ClientConfig
from .auth import BitsoAuth, BitsoCredentials, load_credentials_from_env
from .bitso_errors import (
    DecodeError,
    OrderNotFoundError,
    TransportError,
    classify_and_raise,
)
from .envelope import decode_body, parse_envelope
from .models import (
    Balance,
    Book,
    CustomerFees,
    ExchangeOrderBook,
    Funding,
    Operation,
    OrderBook,
    OrderPlacement,
    Ticker,
    Trade,
    Transaction,
    UserOrder,
    UserOrderTrade,
    UserTrade,
    Withdrawal,
)
from .rate_limiter import RateLimiter

logger = logging.getLogger(__name__)

BookLike = Union[Book, str]
Parser = Callable[[Dict[str, Any]], Any]


def _payload(data: Dict[str, Any]) -> Any:
    return data["payload"]


def _parse_list(model: Any) -> Parser:
    """Parser for a payload that is a list of model objects."""
    def parse(data: Dict[str, Any]) -> List[Any]:
        return [model.from_dict(item) for item in _payload(data)]
    return parse


def _parse_one(model: Any) -> Parser:
    """Parser for a payload that is a single model object."""
    def parse(data: Dict[str, Any]) -> Any:
        return model.from_dict(_payload(data))
    return parse


def _path_ids(oids: Iterable[str]) -> str:
    """Comma-joined order IDs, each escaped as a single path segment."""
    return ",".join(quote(str(oid), safe="") for oid in oids)


def _page_params(
    book: Optional[BookLike] = None,
    marker: Optional[str] = None,
    sort: Optional[str] = None,
    limit: Optional[int] = None,
) -> Dict[str, Any]:
    """Common pagination query parameters, skipping unset ones."""
    params: Dict[str, Any] = {}
    if book is not None:
        params["book"] = str(book)
    if marker:
        params["marker"] = marker
    if sort:
        params["sort"] = sort
    if limit is not None:
        params["limit"] = limit
    return params


class BitsoClient:
    """
    Client for the Bitso REST API.

    Usage:
        # Public data, unsigned
        client = BitsoClient()
        books = client.available_books()

        # From environment variables
        client = BitsoClient.from_env()
        balances = client.balances()

        # Place order
        oid = client.place_order(OrderPlacement(
            book=Book.from_string("btc_mxn"),
            side=OrderSide.BUY,
            type=OrderType.LIMIT,
            major=Monetary("0.001"),
            price=Monetary("500000"),
        ))
    """

    DEFAULT_BASE_URL = "https://bitso.com/api"
    DEFAULT_VERSION = "v3"

    # Endpoint paths
    AVAILABLE_BOOKS_PATH = "/available_books"
    TICKER_PATH = "/ticker"
    TRADES_PATH = "/trades"
    ORDER_BOOK_PATH = "/order_book"
    BALANCE_PATH = "/balance"
    FEES_PATH = "/fees"
    LEDGER_PATH = "/ledger"
    FUNDINGS_PATH = "/fundings/"
    WITHDRAWALS_PATH = "/withdrawals"
    USER_TRADES_PATH = "/user_trades"
    ORDER_TRADES_PATH = "/order_trades"
    OPEN_ORDERS_PATH = "/open_orders"
    ORDERS_PATH = "/orders"

    def __init__(
        self,
        api_key: Optional[str] = None,
        api_secret: Optional[str] = None,
        base_url: str = DEFAULT_BASE_URL,
        api_version: str = DEFAULT_VERSION,
        timeout: float = 30.0,
        burst_rate: float = 0.0,
    ):
        """
        Initialize Bitso client.

        Args:
            api_key: Bitso API key (None for unsigned requests)
            api_secret: Bitso API secret
            base_url: REST API prefix, without version
            api_version: API version path segment
            timeout: Request timeout in seconds
            burst_rate: Minimum seconds between requests (0 = no throttling)
        """
        credentials = None
        if api_key or api_secret:
            credentials = BitsoCredentials(api_key=api_key or "", api_secret=api_secret or "")

        self._lock = threading.Lock()
        self._auth = BitsoAuth(credentials)
        self._base_url = self._normalize_base_url(base_url)
        self._version = api_version
        self._timeout = timeout
        self._rate_limiter = RateLimiter(burst_rate=burst_rate)

        self._session = requests.Session()
        retry_strategy = Retry(total=0)
        adapter = HTTPAdapter(max_retries=retry_strategy)
        self._session.mount("https://", adapter)
        self._session.mount("http://", adapter)

        logger.info(
            f"Initialized Bitso client "
            f"(base_url={self._base_url}, signed={credentials is not None})"
        )

    @classmethod
    def from_config(
        cls,
        config: Union[ClientConfig, BitsoConfig],
        credentials: Optional[BitsoCredentials] = None,
    ) -> "BitsoClient":
        """Create client from a config object, optionally with credentials."""
        if isinstance(config, ClientConfig):
            config = config.bitso

        return cls(
            api_key=credentials.api_key if credentials else None,
            api_secret=credentials.api_secret if credentials else None,
            base_url=config.rest_base_url,
            api_version=config.api_version,
            timeout=config.request_timeout,
            burst_rate=config.burst_rate,
        )

    @classmethod
    def from_env(cls, **kwargs) -> "BitsoClient":
        """
        Create client from environment variables.

        Expects BITSO_API_KEY and BITSO_API_SECRET.
        """
        credentials = load_credentials_from_env()
        return cls(
            api_key=credentials.api_key,
            api_secret=credentials.api_secret,
            **kwargs,
        )

    # ==========================================
    # RUNTIME CONFIGURATION
    # ==========================================

    @staticmethod
    def _normalize_base_url(url: str) -> str:
        return url.rstrip("/") + "/"

    @property
    def api_base_url(self) -> str:
        """REST API prefix, always ending in "/"."""
        with self._lock:
            return self._base_url

    @api_base_url.setter
    def api_base_url(self, url: str) -> None:
        with self._lock:
            self._base_url = self._normalize_base_url(url)

    @property
    def burst_rate(self) -> float:
        """Minimum seconds between request dispatches."""
        return self._rate_limiter.burst_rate

    @burst_rate.setter
    def burst_rate(self, value: float) -> None:
        self._rate_limiter.burst_rate = value

    @property
    def is_authenticated(self) -> bool:
        with self._lock:
            return self._auth.is_authenticated

    def set_auth(self, api_key: str, api_secret: str) -> None:
        """
        Replace the credentials used for signing.

        Passing two empty values switches the client to unsigned requests.

        Raises:
            ValueError: If only one of key and secret is given
        """
        credentials = None
        if api_key or api_secret:
            credentials = BitsoCredentials(api_key=api_key, api_secret=api_secret)

        with self._lock:
            self._auth = BitsoAuth(credentials)

        logger.info(f"Credentials {'set' if credentials else 'cleared'}")

    @staticmethod
    def set_log_level(level: Union[int, str]) -> None:
        """Set the level of the library's "bitso" logger."""
        if isinstance(level, str):
            level = level.upper()
        logging.getLogger("bitso").setLevel(level)

    # ==========================================
    # TRANSPORT
    # ==========================================

    def _endpoint_url(self, endpoint: str, params: Optional[Dict[str, Any]] = None) -> str:
        url = f"{self.api_base_url}{self._version}{endpoint}"
        if params:
            url += "?" + urlencode(sorted(params.items()), doseq=True)
        # Same quoting requests applies when preparing the request
        return requote_uri(url)

    def _make_request(
        self,
        method: str,
        endpoint: str,
        params: Optional[Dict[str, Any]] = None,
        body: Optional[Dict[str, Any]] = None,
        parse: Optional[Parser] = None,
    ) -> Any:
        """
        Send one request and decode its envelope.

        Args:
            method: HTTP method (GET, POST, DELETE)
            endpoint: Path after the version (e.g., "/balance")
            params: Query parameters
            body: JSON body (POST only)
            parse: Called with the full decoded response body on success

        Returns:
            Result of parse, or the decoded body if no parser is given

        Raises:
            TransportError: On network failure or an unparseable non-2xx response
            DecodeError: On a malformed 2xx response or payload
            APIError: When the envelope reports success=false
        """
        url = self._endpoint_url(endpoint, params)
        split = urlsplit(url)
        request_uri = split.path + (f"?{split.query}" if split.query else "")

        data = None
        headers: Dict[str, str] = {}
        if body is not None:
            data = json.dumps(body, separators=(",", ":")).encode("utf-8")
        if method == "POST":
            headers["Content-Type"] = "application/json"
            headers["Accept"] = "application/json"

        self._rate_limiter.acquire()

        with self._lock:
            auth = self._auth
        headers.update(auth.sign_request(method, request_uri, data or b""))

        logger.debug(f"{method} {request_uri}")

        try:
            response = self._session.request(
                method,
                url,
                data=data,
                headers=headers,
                timeout=self._timeout,
            )
        except requests.exceptions.RequestException as e:
            logger.error(f"{method} {request_uri} failed: {e}")
            raise TransportError(f"Request failed: {e}") from e

        status = response.status_code
        ok = 200 <= status < 300
        logger.debug(f"{method} {request_uri} -> {status}: {response.text}")

        try:
            result = decode_body(response.content)
            envelope = parse_envelope(result)
        except DecodeError as e:
            if not ok:
                logger.error(f"{method} {request_uri} returned HTTP {status}")
                raise TransportError(f"HTTP {status}: {response.reason}", status_code=status) from e
            logger.error(f"Cannot decode response from {request_uri}: {e}")
            raise

        if not envelope.success:
            error = envelope.error
            logger.error(
                f"Bitso API error on {method} {request_uri}: "
                f"{error.code} {error.message}"
            )
            classify_and_raise(error.code, error.message, status_code=status, response=result)

        if not ok:
            logger.error(f"{method} {request_uri} returned HTTP {status} with success=true")
            raise TransportError(f"HTTP {status}: {response.reason}", status_code=status)

        if parse is None:
            return result

        try:
            return parse(result)
        except DecodeError:
            logger.error(f"Unexpected payload from {request_uri}")
            raise
        except (KeyError, TypeError, ValueError) as e:
            logger.error(f"Unexpected payload from {request_uri}: {e}")
            raise DecodeError(f"Unexpected payload from {endpoint}: {e}") from e

    # ==========================================
    # PUBLIC MARKET DATA
    # ==========================================

    def available_books(self) -> List[ExchangeOrderBook]:
        """Get existing books and their order placement limits."""
        return self._make_request(
            "GET", self.AVAILABLE_BOOKS_PATH, parse=_parse_list(ExchangeOrderBook)
        )

    def tickers(self) -> List[Ticker]:
        """Get trading information for all books."""
        return self._make_request("GET", self.TICKER_PATH, parse=_parse_list(Ticker))

    def ticker(self, book: BookLike) -> Ticker:
        """Get trading information for one book."""
        return self._make_request(
            "GET",
            self.TICKER_PATH,
            params={"book": str(book)},
            parse=_parse_one(Ticker),
        )

    def trades(
        self,
        book: BookLike,
        marker: Optional[str] = None,
        sort: Optional[str] = None,
        limit: Optional[int] = None,
    ) -> List[Trade]:
        """
        Get recent trades on a book.

        Args:
            book: Book to query
            marker: Return trades older (or newer, with sort="asc") than this TID
            sort: "asc" or "desc"
            limit: Maximum number of trades
        """
        return self._make_request(
            "GET",
            self.TRADES_PATH,
            params=_page_params(book, marker, sort, limit),
            parse=_parse_list(Trade),
        )

    def order_book(self, book: BookLike, aggregate: bool = True) -> OrderBook:
        """
        Get open orders on a book.

        Args:
            book: Book to query
            aggregate: Group orders by price (order IDs are only returned
                when False)
        """
        return self._make_request(
            "GET",
            self.ORDER_BOOK_PATH,
            params={"book": str(book), "aggregate": str(aggregate).lower()},
            parse=_parse_one(OrderBook),
        )

    # ==========================================
    # ACCOUNT METHODS
    # ==========================================

    def balances(self) -> List[Balance]:
        """Get the user's balances for all currencies."""
        def parse(data: Dict[str, Any]) -> List[Balance]:
            return [Balance.from_dict(b) for b in _payload(data)["balances"]]

        balances = self._make_request("GET", self.BALANCE_PATH, parse=parse)
        logger.debug(f"Got balance for {len(balances)} currencies")
        return balances

    def fees(self) -> CustomerFees:
        """Get trading fees per book and withdrawal fees per currency."""
        return self._make_request("GET", self.FEES_PATH, parse=_parse_one(CustomerFees))

    def ledger(
        self,
        marker: Optional[str] = None,
        sort: Optional[str] = None,
        limit: Optional[int] = None,
    ) -> List[Transaction]:
        """Get all of the user's registered operations."""
        return self._make_request(
            "GET",
            self.LEDGER_PATH,
            params=_page_params(marker=marker, sort=sort, limit=limit),
            parse=_parse_list(Transaction),
        )

    def ledger_by_operation(
        self,
        operation: Operation,
        marker: Optional[str] = None,
        sort: Optional[str] = None,
        limit: Optional[int] = None,
    ) -> List[Transaction]:
        """Get the user's operations of one type (fundings, trades, ...)."""
        return self._make_request(
            "GET",
            f"{self.LEDGER_PATH}/{operation.ledger_path}",
            params=_page_params(marker=marker, sort=sort, limit=limit),
            parse=_parse_list(Transaction),
        )

    def fundings(
        self,
        marker: Optional[str] = None,
        limit: Optional[int] = None,
    ) -> List[Funding]:
        """Get the user's fundings."""
        return self._make_request(
            "GET",
            self.FUNDINGS_PATH,
            params=_page_params(marker=marker, limit=limit),
            parse=_parse_list(Funding),
        )

    def withdrawals(
        self,
        marker: Optional[str] = None,
        limit: Optional[int] = None,
    ) -> List[Withdrawal]:
        """Get the user's withdrawals."""
        return self._make_request(
            "GET",
            self.WITHDRAWALS_PATH,
            params=_page_params(marker=marker, limit=limit),
            parse=_parse_list(Withdrawal),
        )

    # ==========================================
    # USER TRADES AND ORDERS
    # ==========================================

    def my_trades(
        self,
        book: Optional[BookLike] = None,
        marker: Optional[str] = None,
        sort: Optional[str] = None,
        limit: Optional[int] = None,
    ) -> List[UserTrade]:
        """Get the user's trades."""
        return self._make_request(
            "GET",
            self.USER_TRADES_PATH,
            params=_page_params(book, marker, sort, limit),
            parse=_parse_list(UserTrade),
        )

    def order_trades(self, oid: str) -> List[UserOrderTrade]:
        """Get the trades that filled one order."""
        return self._make_request(
            "GET",
            f"{self.ORDER_TRADES_PATH}/{_path_ids([oid])}",
            parse=_parse_list(UserOrderTrade),
        )

    def my_open_orders(
        self,
        book: Optional[BookLike] = None,
        marker: Optional[str] = None,
        sort: Optional[str] = None,
        limit: Optional[int] = None,
    ) -> List[UserOrder]:
        """Get the user's open orders."""
        orders = self._make_request(
            "GET",
            self.OPEN_ORDERS_PATH,
            params=_page_params(book, marker, sort, limit),
            parse=_parse_list(UserOrder),
        )
        logger.debug(f"Got {len(orders)} open orders")
        return orders

    def lookup_orders(self, oids: Iterable[str]) -> List[UserOrder]:
        """Get details for one or more orders."""
        return self._make_request(
            "GET",
            f"{self.ORDERS_PATH}/{_path_ids(oids)}",
            parse=_parse_list(UserOrder),
        )

    def lookup_order(self, oid: str) -> UserOrder:
        """
        Get details for a single order.

        Raises:
            OrderNotFoundError: If Bitso returns no order for the ID
        """
        orders = self.lookup_orders([oid])
        if not orders:
            raise OrderNotFoundError(oid)
        return orders[0]

    def cancel_orders(self, oids: Iterable[str]) -> List[str]:
        """
        Cancel open orders.

        Returns:
            IDs of the cancelled orders
        """
        oids = list(oids)
        cancelled = self._make_request(
            "DELETE",
            f"{self.ORDERS_PATH}/{_path_ids(oids)}",
            parse=lambda data: [str(oid) for oid in _payload(data)],
        )
        logger.info(f"Cancelled orders {cancelled}")
        return cancelled

    def cancel_order(self, oid: str) -> List[str]:
        """Cancel a single open order."""
        return self.cancel_orders([oid])

    def place_order(self, order: OrderPlacement) -> str:
        """
        Place a buy or sell order.

        Returns:
            ID of the new order

        Raises:
            OrderError: If Bitso rejects the order parameters
        """
        oid = self._make_request(
            "POST",
            f"{self.ORDERS_PATH}/",
            body=order.to_dict(),
            parse=lambda data: str(_payload(data)["oid"]),
        )
        logger.info(
            f"Order placed: {oid} ({order.side.value} {order.type.value} on {order.book})"
        )
        return oid

    # ==========================================
    # UTILITY METHODS
    # ==========================================

    def close(self) -> None:
        """Close the HTTP session."""
        self._session.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
