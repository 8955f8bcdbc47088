#!/usr/bin/env python3
"""
Print Account Balances.

Shows total, locked and available amounts for every currency.
Credentials are read from BITSO_API_KEY / BITSO_API_SECRET (or .env).

Usage:
    python scripts/print_balance.py

    # Hide currencies with a zero total
    python scripts/print_balance.py --non-zero
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import List

# Add project root to path
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from bitso.api import Balance, BitsoClient, BitsoError
from bitso.utils.config_loader import ConfigLoader
from bitso.utils.logging_setup import setup_logging_from_config

logger = logging.getLogger(__name__)


def format_balances(balances: List[Balance], non_zero: bool = False) -> str:
    """Render balances as an aligned table."""
    rows = [("CURRENCY", "TOTAL", "LOCKED", "AVAILABLE")]
    for b in balances:
        if non_zero and b.total.to_float() == 0:
            continue
        rows.append((b.currency.upper(), b.total, b.locked, b.available))

    widths = [max(len(row[i]) for row in rows) for i in range(4)]
    return "\n".join(
        "   ".join(cell.ljust(width) for cell, width in zip(row, widths)).rstrip()
        for row in rows
    )


def main():
    parser = argparse.ArgumentParser(
        description="Print Bitso account balances",
    )

    parser.add_argument(
        "--config",
        type=str,
        default=None,
        help="Path to config YAML (default: config/config.yaml)",
    )

    parser.add_argument(
        "--non-zero",
        action="store_true",
        dest="non_zero",
        help="Only show currencies with a non-zero total",
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
        api_key, api_secret = loader.get_api_credentials()
    except ValueError as e:
        logger.error(str(e))
        sys.exit(1)

    with BitsoClient(
        api_key=api_key,
        api_secret=api_secret,
        base_url=config.bitso.rest_base_url,
        api_version=config.bitso.api_version,
        timeout=config.bitso.request_timeout,
        burst_rate=config.bitso.burst_rate,
    ) as client:
        try:
            balances = client.balances()
        except BitsoError as e:
            logger.error(f"Balance request failed: {e}")
            sys.exit(1)

    print(format_balances(balances, non_zero=args.non_zero))


if __name__ == "__main__":
    main()
