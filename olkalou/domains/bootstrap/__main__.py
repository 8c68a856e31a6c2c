# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Command-line entry point for the database bootstrap.

Usage:
    olkalou-bootstrap                 # run the bootstrap
    olkalou-bootstrap --status        # print the progress checklist
    olkalou-bootstrap --reset [--include-user-data]

Exit codes: 0 on success, 1 when the run or reset failed.
"""

import argparse
import asyncio
import logging
import sys
from typing import Optional

from olkalou.core.config import Settings, get_settings
from olkalou.domains.bootstrap.models import ProgressEvent
from olkalou.domains.bootstrap.service import DatabaseInitializer
from olkalou.infrastructure.cache.redis_client import RedisClient, close_redis, init_redis
from olkalou.infrastructure.database.connection import RemoteStoreGateway, options_from_settings
from olkalou.infrastructure.state import MigrationStateTracker, create_state_store
from olkalou.utils.logging import setup_logging

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="olkalou-bootstrap",
        description="Verify the school backend and seed its initial data.",
    )
    action = parser.add_mutually_exclusive_group()
    action.add_argument(
        "--status",
        action="store_true",
        help="Print bootstrap progress without contacting the backend.",
    )
    action.add_argument(
        "--reset",
        action="store_true",
        help="Forget bootstrap progress so the next run checks every step again.",
    )
    parser.add_argument(
        "--include-user-data",
        action="store_true",
        help="With --reset, also request removal of seeded users (not performed).",
    )
    return parser


def print_progress(event: ProgressEvent) -> None:
    line = f"[{event.percent_complete:3d}%] {event.step_name}"
    if event.error_message:
        line += f" ({event.error_message})"
    print(line, flush=True)


async def _main(args: argparse.Namespace, settings: Settings) -> int:
    redis_client: Optional[RedisClient] = None
    if settings.redis.enabled:
        redis_client = await init_redis(settings)

    gateway = RemoteStoreGateway(
        settings.remote_db.url,
        options=options_from_settings(settings),
        redis_client=redis_client,
        cache_ttl_seconds=settings.redis.cache_ttl_seconds,
    )
    tracker = MigrationStateTracker(create_state_store(settings, redis_client))

    try:
        async with DatabaseInitializer(gateway, tracker, settings.bootstrap) as initializer:
            if args.status:
                print(await initializer.get_initialization_summary())
                return 0

            if args.reset:
                result = await initializer.reset_state(args.include_user_data)
                if not result.success:
                    print(result.error_message, file=sys.stderr)
                    return 1
                print(result.details or "Bootstrap state cleared")
                return 0

            report = await initializer.run(progress=print_progress)
            for warning in report.warnings:
                print(f"warning: {warning}", file=sys.stderr)
            if not report.success:
                print(f"error: {report.error_message}", file=sys.stderr)
                return 1
            print(f"Bootstrap completed in {report.duration_ms:.0f} ms")
            return 0
    finally:
        await gateway.close()
        if redis_client is not None:
            await close_redis()


def main(argv: Optional[list[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    if args.include_user_data and not args.reset:
        parser.error("--include-user-data requires --reset")

    settings = get_settings()
    setup_logging(settings)
    return asyncio.run(_main(args, settings))


if __name__ == "__main__":
    sys.exit(main())
