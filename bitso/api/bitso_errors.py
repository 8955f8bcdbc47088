"""
Bitso API Error Handling.

Error taxonomy for the REST transport and the WebSocket stream:
- Transport errors (connection refused, timeout, unparseable HTTP response)
- Decode errors (response or frame does not match the expected shape)
- API errors (envelope reports success=false, carries code and message)
- Not-found errors (single order lookup with an empty result)
- Stream faults (read or decode failure on the WebSocket connection)

Bitso error codes are grouped by their hundreds digit:
- 01xx - General errors
- 02xx - Authentication errors (invalid nonce, key, signature)
- 03xx - Invalid request parameters
- 04xx - Order placement errors (price/amount/value out of range)

None of these errors are retried by the library. The nonce-based replay
protection makes automatic retries unsafe, so retry policy belongs to the
caller.
"""

import logging
from enum import Enum
from typing import Any, Dict, Optional

logger = logging.getLogger(__name__)


class ErrorCategory(Enum):
    """Categories of Bitso API errors."""
    GENERAL = "general"
    AUTHENTICATION = "authentication"
    INVALID_PARAMETER = "invalid_parameter"
    ORDER = "order"
    UNKNOWN = "unknown"


# Category by the hundreds digit of the error code
CATEGORY_BY_GROUP: Dict[int, ErrorCategory] = {
    1: ErrorCategory.GENERAL,
    2: ErrorCategory.AUTHENTICATION,
    3: ErrorCategory.INVALID_PARAMETER,
    4: ErrorCategory.ORDER,
}


def categorize(code: int) -> ErrorCategory:
    """Map a numeric Bitso error code to its category."""
    return CATEGORY_BY_GROUP.get(code // 100, ErrorCategory.UNKNOWN)


class BitsoError(Exception):
    """Base exception for everything raised by this library."""
    pass


class TransportError(BitsoError):
    """Network or HTTP-level failure. The request may not have reached Bitso."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        self.status_code = status_code
        super().__init__(message)


class DecodeError(BitsoError):
    """Payload did not match the expected envelope, model or value shape."""
    pass


class APIError(BitsoError):
    """
    Bitso explicitly rejected the request (envelope success=false).

    Attributes:
        code: Numeric error code (0 if the server sent a non-numeric code)
        message: Human-readable message from the server
        status_code: HTTP status of the response, if known
        response: Full decoded response body
    """

    def __init__(
        self,
        code: int,
        message: str,
        status_code: Optional[int] = None,
        response: Optional[Dict[str, Any]] = None,
    ):
        self.code = code
        self.message = message
        self.status_code = status_code
        self.response = response

        super().__init__(f"Bitso API error {code}: {message}")

    @property
    def category(self) -> ErrorCategory:
        """Get error category."""
        return categorize(self.code)


class AuthenticationError(APIError):
    """Specific exception for authentication errors (bad key, nonce, signature)."""
    pass


class InvalidParameterError(APIError):
    """Specific exception for missing or malformed request parameters."""
    pass


class OrderError(APIError):
    """Specific exception for order placement errors."""
    pass


class OrderNotFoundError(BitsoError):
    """Lookup of a single order returned no results."""

    def __init__(self, oid: str):
        self.oid = oid
        super().__init__(f"No such order: {oid}")


class StreamError(BitsoError):
    """Read failure on the WebSocket connection."""
    pass


ERROR_CLASSES = {
    ErrorCategory.AUTHENTICATION: AuthenticationError,
    ErrorCategory.INVALID_PARAMETER: InvalidParameterError,
    ErrorCategory.ORDER: OrderError,
}


def classify_and_raise(
    code: int,
    message: str,
    status_code: Optional[int] = None,
    response: Optional[Dict[str, Any]] = None,
) -> None:
    """
    Classify an API error and raise the appropriate exception type.

    Args:
        code: Numeric error code from the envelope
        message: Error message from the envelope
        status_code: HTTP status code
        response: Full API response

    Raises:
        Appropriate APIError subclass
    """
    error_class = ERROR_CLASSES.get(categorize(code), APIError)
    raise error_class(code, message, status_code=status_code, response=response)
