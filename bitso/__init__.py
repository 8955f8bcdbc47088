"""Client library for the Bitso exchange REST API and WebSocket feed."""

__version__ = "0.1.0"
