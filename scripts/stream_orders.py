#!/usr/bin/env python3
"""
Stream Bitso Order Book Updates.

Subscribes to a WebSocket channel on one or more books and logs every
message until interrupted or the connection drops.

Usage:
    # Top of the book for eth_mxn
    python scripts/stream_orders.py --books eth_mxn

    # Trades on two books
    python scripts/stream_orders.py --books btc_mxn eth_mxn --channel trades
"""

import argparse
import asyncio
import logging
import sys
from pathlib import Path

# Add project root to path
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from bitso.api import (
    BitsoError,
    BitsoWebSocketClient,
    Book,
    ChannelType,
)
from bitso.utils.config_loader import ConfigLoader
from bitso.utils.logging_setup import setup_logging_from_config

logger = logging.getLogger(__name__)


async def on_error(error: BitsoError) -> None:
    logger.error(f"Stream stopped: {error}")


async def stream(books, channel: ChannelType, ws_config, catalog=None) -> None:
    """Subscribe and print messages until the stream ends."""
    client = BitsoWebSocketClient(config=ws_config, on_error=on_error)

    async with client:
        for name in books:
            await client.subscribe(Book.from_string(name, catalog), channel)

        async for message in client:
            print(message)

    if client.last_error is not None:
        raise client.last_error


def main():
    parser = argparse.ArgumentParser(
        description="Stream real-time Bitso market data",
    )

    parser.add_argument(
        "--books",
        nargs="+",
        default=["eth_mxn"],
        help="Books to subscribe to (e.g., btc_mxn eth_mxn)",
    )

    parser.add_argument(
        "--channel",
        choices=[c.value for c in ChannelType],
        default=ChannelType.ORDERS.value,
        help="Channel to subscribe to (default: orders)",
    )

    parser.add_argument(
        "--config",
        type=str,
        default=None,
        help="Path to config YAML (default: config/config.yaml)",
    )

    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Enable verbose logging",
    )

    args = parser.parse_args()

    loader = ConfigLoader(args.config)
    config = loader.load()
    setup_logging_from_config(config.logging, verbose=args.verbose)

    try:
        catalog = loader.load_currency_catalog(config.currency_catalog_path)
    except FileNotFoundError:
        logger.warning("Currency catalog not found, currencies will not be checked")
        catalog = None

    try:
        asyncio.run(stream(args.books, ChannelType(args.channel), config.websocket, catalog))
    except KeyboardInterrupt:
        logger.info("Interrupted")
    except BitsoError as e:
        logger.error(str(e))
        sys.exit(1)


if __name__ == "__main__":
    main()
