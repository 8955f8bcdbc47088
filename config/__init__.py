"""Configuration module for the Bitso client."""

from .settings import (
    BitsoConfig,
    WebSocketConfig,
    LoggingConfig,
    ClientConfig,
)

__all__ = [
    "BitsoConfig",
    "WebSocketConfig",
    "LoggingConfig",
    "ClientConfig",
]
