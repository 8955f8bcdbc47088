"""
Bitso API Authentication.

Implements HMAC-SHA256 request signing for Bitso private API endpoints.
Public endpoints are sent unsigned when no credentials are configured.

Usage:
    auth = BitsoAuth(BitsoCredentials(api_key="...", api_secret="..."))
    headers = auth.sign_request("GET", "/api/v3/balance")
"""

import hashlib
import hmac
import json
import logging
import os
import threading
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Optional, Union

logger = logging.getLogger(__name__)

AUTH_SCHEME = "Bitso"


@dataclass
class BitsoCredentials:
    """API credentials for Bitso authentication."""
    api_key: str
    api_secret: Union[str, bytes]

    def __post_init__(self):
        """Validate credentials format."""
        if not self.api_key:
            raise ValueError("API key is required")
        if not self.api_secret:
            raise ValueError("API secret is required")

    @property
    def secret_bytes(self) -> bytes:
        """Secret as raw bytes for the HMAC key."""
        if isinstance(self.api_secret, bytes):
            return self.api_secret
        return self.api_secret.encode("utf-8")


class NonceManager:
    """
    Thread-safe nonce generator.

    Nonces are nanosecond timestamps. If the clock does not advance between
    two calls (or goes backwards), the last nonce is incremented instead, so
    the sequence is strictly increasing for the lifetime of the manager.
    """

    def __init__(self):
        """Initialize nonce manager."""
        self._last_nonce = 0
        self._lock = threading.Lock()

    def get_nonce(self) -> int:
        """
        Get next nonce value (thread-safe).

        Returns:
            Strictly increasing nonce
        """
        with self._lock:
            nonce = time.time_ns()
            if nonce <= self._last_nonce:
                nonce = self._last_nonce + 1
            self._last_nonce = nonce
            return nonce


class BitsoAuth:
    """
    Authentication handler for Bitso private API.

    Bitso uses HMAC-SHA256 with the following signing scheme:
    1. Concatenate nonce + HTTP method + request path (with query) + body
    2. Calculate HMAC-SHA256 of the message keyed by the API secret
    3. Hex encode the digest
    4. Send "Authorization: Bitso <key>:<nonce>:<signature>"
    """

    def __init__(
        self,
        credentials: Optional[BitsoCredentials] = None,
        nonce_manager: Optional[NonceManager] = None,
    ):
        """
        Initialize authentication handler.

        Args:
            credentials: API credentials (None for unsigned requests)
            nonce_manager: Nonce source (one per instance by default)
        """
        self._credentials = credentials
        self._nonces = nonce_manager or NonceManager()

    @property
    def credentials(self) -> Optional[BitsoCredentials]:
        return self._credentials

    @property
    def is_authenticated(self) -> bool:
        """Check if requests will be signed."""
        return self._credentials is not None

    def generate_nonce(self) -> int:
        """Get the next strictly increasing nonce."""
        return self._nonces.get_nonce()

    def build_signature(
        self,
        nonce: int,
        method: str,
        request_uri: str,
        body: bytes = b"",
    ) -> str:
        """
        Compute the hex HMAC-SHA256 signature for a request.

        Args:
            nonce: Request nonce
            method: HTTP method (GET, POST, DELETE)
            request_uri: Path plus query string as sent (e.g., "/api/v3/trades?book=btc_mxn")
            body: Raw request body

        Returns:
            Lowercase hex digest
        """
        if self._credentials is None:
            raise ValueError("Cannot sign without credentials")

        message = f"{nonce}{method}{request_uri}".encode("utf-8") + (body or b"")
        return hmac.new(
            self._credentials.secret_bytes,
            message,
            hashlib.sha256,
        ).hexdigest()

    def sign_request(
        self,
        method: str,
        request_uri: str,
        body: bytes = b"",
        nonce: Optional[int] = None,
    ) -> Dict[str, str]:
        """
        Sign a request for Bitso private API.

        Args:
            method: HTTP method
            request_uri: Path plus query string as sent
            body: Raw request body
            nonce: Optional explicit nonce (generated if not provided)

        Returns:
            Headers dict with Authorization, or an empty dict when no
            credentials are configured
        """
        if self._credentials is None:
            return {}

        if nonce is None:
            nonce = self.generate_nonce()

        signature = self.build_signature(nonce, method, request_uri, body)
        header = f"{AUTH_SCHEME} {self._credentials.api_key}:{nonce}:{signature}"

        logger.debug(f"Signed {method} {request_uri} with nonce {nonce}")

        return {"Authorization": header}


def load_credentials_from_env() -> BitsoCredentials:
    """
    Load API credentials from environment variables.

    Expects:
        BITSO_API_KEY: API key
        BITSO_API_SECRET: API secret

    Returns:
        BitsoCredentials instance

    Raises:
        ValueError: If environment variables not set
    """
    api_key = os.environ.get("BITSO_API_KEY", "")
    api_secret = os.environ.get("BITSO_API_SECRET", "")

    if not api_key or not api_secret:
        raise ValueError(
            "BITSO_API_KEY and BITSO_API_SECRET environment variables required"
        )

    return BitsoCredentials(api_key=api_key, api_secret=api_secret)


def load_credentials_from_file(path: str) -> BitsoCredentials:
    """
    Load API credentials from a file.

    File format (one per line):
        api_key=YOUR_KEY
        api_secret=YOUR_SECRET

    Or JSON format:
        {"api_key": "...", "api_secret": "..."}

    Args:
        path: Path to credentials file

    Returns:
        BitsoCredentials instance
    """
    file_path = Path(path)
    if not file_path.exists():
        raise FileNotFoundError(f"Credentials file not found: {path}")

    content = file_path.read_text().strip()

    if content.startswith("{"):
        data = json.loads(content)
        return BitsoCredentials(
            api_key=data["api_key"],
            api_secret=data["api_secret"],
        )

    api_key = ""
    api_secret = ""

    for line in content.split("\n"):
        line = line.strip()
        if line.startswith("api_key="):
            api_key = line.split("=", 1)[1]
        elif line.startswith("api_secret="):
            api_secret = line.split("=", 1)[1]

    return BitsoCredentials(api_key=api_key, api_secret=api_secret)
