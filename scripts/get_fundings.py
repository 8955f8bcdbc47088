#!/usr/bin/env python3
"""
List Account Fundings.

Credentials are read from BITSO_API_KEY / BITSO_API_SECRET (or .env).

Usage:
    python scripts/get_fundings.py

    # Only the last 5 fundings
    python scripts/get_fundings.py --limit 5
"""

import argparse
import logging
import sys
from pathlib import Path

# Add project root to path
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from bitso.api import BitsoClient, BitsoCredentials, BitsoError
from bitso.utils.config_loader import ConfigLoader
from bitso.utils.logging_setup import setup_logging_from_config

logger = logging.getLogger(__name__)


def main():
    parser = argparse.ArgumentParser(
        description="List Bitso account fundings",
    )

    parser.add_argument(
        "--config",
        type=str,
        default=None,
        help="Path to config YAML (default: config/config.yaml)",
    )

    parser.add_argument(
        "--limit",
        type=int,
        default=None,
        help="Maximum number of fundings to fetch",
    )

    parser.add_argument(
        "--marker",
        type=str,
        default=None,
        help="Funding ID to page from",
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

    credentials = BitsoCredentials(api_key=api_key, api_secret=api_secret)

    with BitsoClient.from_config(config, credentials) as client:
        try:
            fundings = client.fundings(marker=args.marker, limit=args.limit)
        except BitsoError as e:
            logger.error(f"Fundings request failed: {e}")
            sys.exit(1)

    logger.info(f"Got {len(fundings)} fundings")
    for funding in fundings:
        created = funding.created_at.isoformat() if funding.created_at else "-"
        print(
            f"{funding.fid}  {created}  {funding.currency.upper():<5} "
            f"{funding.amount:>16}  {funding.method:<10} {funding.status}"
        )


if __name__ == "__main__":
    main()
