"""
Configuration dataclasses for the Bitso client.

All configuration parameters are defined here with sensible defaults.
Values can be overridden via config.yaml or environment variables.
"""

from dataclasses import dataclass, field
from typing import List, Optional


# ===========================================
# BITSO API CONFIGURATION
# ===========================================

@dataclass
class BitsoConfig:
    """Bitso REST API configuration."""

    rest_base_url: str = "https://bitso.com/api"
    api_version: str = "v3"
    request_timeout: float = 30.0  # seconds

    # Minimum seconds between request dispatches (0 = no throttling)
    burst_rate: float = 0.0


@dataclass
class WebSocketConfig:
    """WebSocket connection configuration."""

    url: str = "wss://ws.bitso.com"
    message_queue_size: int = 8  # Reader blocks when the inbox is full
    open_timeout: float = 10.0  # seconds
    close_timeout: float = 10.0
    ping_interval: Optional[float] = 20.0  # None disables keepalive pings


# ===========================================
# LOGGING CONFIGURATION
# ===========================================

@dataclass
class LoggingConfig:
    """Logging configuration."""

    level: str = "INFO"
    file_path: Optional[str] = None


# ===========================================
# MAIN CLIENT CONFIGURATION
# ===========================================

@dataclass
class ClientConfig:
    """Complete client configuration combining all sub-configs."""

    bitso: BitsoConfig = field(default_factory=BitsoConfig)
    websocket: WebSocketConfig = field(default_factory=WebSocketConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    # Versioned list of supported currency codes
    currency_catalog_path: str = "config/currencies.yaml"

    def validate(self) -> List[str]:
        """
        Validate configuration and return list of errors.

        Returns:
            List of error messages (empty if valid)
        """
        errors = []

        if not self.bitso.rest_base_url.startswith(("http://", "https://")):
            errors.append(
                f"rest_base_url must be an http(s) URL, got {self.bitso.rest_base_url!r}"
            )

        if self.bitso.request_timeout <= 0:
            errors.append("request_timeout must be > 0")

        if self.bitso.burst_rate < 0:
            errors.append("burst_rate must be >= 0")

        if not self.websocket.url.startswith(("ws://", "wss://")):
            errors.append(f"websocket url must be ws(s)://, got {self.websocket.url!r}")

        if self.websocket.message_queue_size < 1:
            errors.append("message_queue_size must be >= 1")

        if self.logging.level.upper() not in (
            "DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"
        ):
            errors.append(f"Unknown log level: {self.logging.level}")

        return errors
