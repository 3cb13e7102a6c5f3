"""
Live watcher: python -m viteset_client

Subscribes to a blob and prints every update until interrupted.
Flags default to VITESET_BLOB, VITESET_SECRET, VITESET_HOST and
VITESET_INTERVAL_SECONDS.
"""

import argparse
import asyncio
import sys

from loguru import logger
from pydantic import ValidationError

from .client import VitesetClient
from .config import ClientConfig
from .exceptions import ConfigurationError
from .types import Update


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="viteset_client",
        description="Watch a Viteset blob and print its updates",
    )
    parser.add_argument("--blob", help="Blob name (env: VITESET_BLOB)")
    parser.add_argument("--secret", help="Client secret (env: VITESET_SECRET)")
    parser.add_argument("--host", help="API host (env: VITESET_HOST)")
    parser.add_argument(
        "--interval",
        type=float,
        dest="interval_seconds",
        help="Polling interval in seconds (env: VITESET_INTERVAL_SECONDS)",
    )
    parser.add_argument("--debug", action="store_true", help="Log every poll")
    return parser.parse_args(argv)


def print_update(update: Update) -> None:
    if update.error is not None:
        print(f"Update: error: {update.error}")
    else:
        print(f"Update: value: {update.value.decode('utf-8', errors='replace')}")


async def watch(config: ClientConfig) -> None:
    async with VitesetClient(config) as client:
        await client.listen(print_update)


def main(argv=None) -> int:
    args = parse_args(argv)

    logger.remove()
    logger.add(sys.stderr, level="DEBUG" if args.debug else "INFO")

    try:
        config = ClientConfig.from_env(
            blob=args.blob,
            secret=args.secret,
            host=args.host,
            interval_seconds=args.interval_seconds,
        )
    except ValidationError as e:
        logger.error(f"Invalid configuration: {e}")
        return 2

    try:
        asyncio.run(watch(config))
    except ConfigurationError as e:
        logger.error(f"Cannot subscribe: {e}")
        return 2
    except KeyboardInterrupt:
        logger.info("Interrupted, stopping")
    return 0


if __name__ == "__main__":
    sys.exit(main())
