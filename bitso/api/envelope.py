"""
Response envelope codec.

Every Bitso REST response is wrapped in the same top-level object:

    {"success": true, "payload": ...}
    {"success": false, "error": {"code": "0201", "message": "..."}}

The payload is a sibling of the envelope fields, so the envelope is decoded
first and the caller re-reads the full body for the payload.
"""

import json
from dataclasses import dataclass
from typing import Any, Dict, Optional, Union

from .bitso_errors import DecodeError


@dataclass
class EnvelopeError:
    """Error block of a failed response."""
    code: int
    message: str
    raw_code: Any = None


@dataclass
class Envelope:
    """Decoded outer wrapper of a REST response."""
    success: bool
    error: Optional[EnvelopeError] = None


def parse_error_code(value: Any) -> int:
    """
    Normalize an error code sent as a JSON number or a JSON string.

    Bitso sends codes like "0201" as strings on some endpoints and as
    integers on others. Non-numeric codes map to 0.
    """
    if isinstance(value, bool):
        return 0
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    if isinstance(value, str):
        try:
            return int(value.strip())
        except ValueError:
            return 0
    return 0


def decode_body(raw: Union[bytes, str]) -> Dict[str, Any]:
    """
    Decode a raw response body into a JSON object.

    Raises:
        DecodeError: If the body is not valid JSON or not an object
    """
    try:
        data = json.loads(raw)
    except (ValueError, UnicodeDecodeError) as e:
        raise DecodeError(f"Response is not valid JSON: {e}") from e
    except RecursionError as e:
        raise DecodeError("Response JSON is nested too deeply") from e

    if not isinstance(data, dict):
        raise DecodeError(f"Expected JSON object, got {type(data).__name__}")

    return data


def parse_envelope(data: Dict[str, Any]) -> Envelope:
    """
    Parse the envelope fields out of a decoded response body.

    Raises:
        DecodeError: If "success" is missing or not a boolean
    """
    success = data.get("success")
    if not isinstance(success, bool):
        raise DecodeError("Response envelope has no boolean 'success' field")

    error = None
    error_data = data.get("error")
    if isinstance(error_data, dict):
        raw_code = error_data.get("code")
        error = EnvelopeError(
            code=parse_error_code(raw_code),
            message=str(error_data.get("message") or ""),
            raw_code=raw_code,
        )
    elif not success:
        error = EnvelopeError(code=0, message="Unknown error")

    return Envelope(success=success, error=error)
