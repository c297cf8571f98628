#!/usr/bin/env python3
"""CLI entry point for running a Shopify bulk query.

Usage:
    # All products with variants and media
    PYTHONPATH=src python scripts/run_bulk_query.py --model product

    # Custom query from a file, decoded as collections
    PYTHONPATH=src python scripts/run_bulk_query.py --model collection --query-file q.graphql

    # Cancel whatever bulk query is running for the shop
    PYTHONPATH=src python scripts/run_bulk_query.py --cancel-current
"""
import argparse
import asyncio
import logging
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from shopql_core.config import ShopifySettings
from shopql_core.schemas.models import Collection, Metafield, Product
from shopql_core.shopify.client import ShopifyClient
from shopql_core.shopify.exceptions import ShopifyClientError


MODELS = {
    "product": Product,
    "collection": Collection,
    "metafield": Metafield,
}


def setup_logging(verbose: bool = False) -> None:
    """Configure logging."""
    level = logging.DEBUG if verbose else logging.INFO

    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        stream=sys.stderr,
    )


async def run(args: argparse.Namespace) -> int:
    settings = ShopifySettings.from_env()

    async with ShopifyClient.from_settings(settings) as client:
        if args.cancel_current:
            operation = await client.bulk.cancel_current(interval=args.interval)
            status = operation.status.value if operation else "NONE"
            print(f"current bulk operation status: {status}")
            return 0

        if args.query_file:
            query = Path(args.query_file).read_text(encoding="utf-8")
        elif args.query:
            query = args.query
        else:
            query = None

        if query is None:
            services = {
                "product": client.products.list_all,
                "collection": client.collections.list_all,
                "metafield": client.metafields.list_all_shop_metafields,
            }
            results = await services[args.model]()
        else:
            results = await client.bulk.bulk_query(
                query,
                MODELS[args.model],
                interval=args.interval,
                timeout=args.timeout,
            )

        for item in results:
            print(item.model_dump_json(by_alias=True, exclude_none=True))

    logging.getLogger(__name__).info("Fetched %s %s records", len(results), args.model)
    return 0


async def main() -> int:
    """Main entry point."""
    parser = argparse.ArgumentParser(description="Run a Shopify bulk query")
    parser.add_argument(
        "--model",
        choices=sorted(MODELS),
        default="product",
        help="Type of the top-level objects the query returns",
    )
    parser.add_argument("--query", type=str, help="Bulk GraphQL query string")
    parser.add_argument("--query-file", type=str, help="File containing the bulk query")
    parser.add_argument(
        "--interval",
        type=float,
        default=None,
        help="Seconds between status polls (default: SHOPIFY_BULK_POLL_INTERVAL)",
    )
    parser.add_argument(
        "--timeout",
        type=float,
        default=None,
        help="Max seconds to wait for the job (default: no limit)",
    )
    parser.add_argument(
        "--cancel-current",
        action="store_true",
        help="Cancel the running bulk query and exit",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable debug logging",
    )

    args = parser.parse_args()

    setup_logging(args.verbose)

    try:
        return await run(args)
    except ShopifyClientError as exc:
        logging.getLogger(__name__).error("Bulk query failed: %s", exc)
        return 1


if __name__ == "__main__":
    sys.exit(asyncio.run(main()))
