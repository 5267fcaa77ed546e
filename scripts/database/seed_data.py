#!/usr/bin/env python3
"""
Seed sample links into a link store.

Usage:
    python seed_data.py --store-url redis://localhost:6379/0 --count 10 --expired 2

Expired samples use fixed codes (seed-expired-N) and are rewritten on every run.
"""

import argparse
import asyncio
import random
import sys
import os
from datetime import timedelta

# Add parent directories to path
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '../..')))

from app import build_registry
from config import load_config
from shortlink.errors import RegistryError
from shortlink.storage.models import LinkRecord
from shortlink.common.logging_config import setup_logging


SAMPLE_URLS = [
    "https://github.com/python/cpython",
    "https://docs.python.org/3/library/asyncio.html",
    "https://fastapi.tiangolo.com/",
    "https://www.postgresql.org/docs/",
    "https://redis.io/documentation",
    "https://stackoverflow.com/questions/tagged/python",
    "https://news.ycombinator.com/",
]

# Spread validity so listings show a mix of short- and long-lived links
VALIDITY_CHOICES = [1, 5, 30, 60, 240, 1440]


async def main():
    parser = argparse.ArgumentParser(description="Seed sample links")
    parser.add_argument(
        "--store-url",
        default=os.getenv("STORE_URL", "memory://"),
        help="Link store URL"
    )
    parser.add_argument("--count", type=int, default=10, help="Number of links to create")
    parser.add_argument("--expired", type=int, default=0, help="Number of already-expired links to write")
    parser.add_argument("-v", "--verbose", action="store_true", help="Verbose output")

    args = parser.parse_args()

    logger = setup_logging(level="DEBUG" if args.verbose else "INFO")
    config = load_config().model_copy(update={"store_url": args.store_url})
    registry = build_registry(config, logger)

    try:
        await registry.store.initialize()
        logger.info(f"Creating {args.count} sample links...")

        created = 0
        for i in range(args.count):
            url = f"{random.choice(SAMPLE_URLS)}?seed={i}"
            result = await registry.create(url, validity_minutes=random.choice(VALIDITY_CHOICES))

            if isinstance(result, RegistryError):
                logger.warning(f"Failed to create link {i}: {result.message}")
                continue

            logger.info(f"Created: {result.code} -> {url} (valid {result.validity_minutes} min)")
            created += 1

        logger.info(f"Successfully created {created} links")

        # Backdated past their validity so listings and redirects show expiry
        created_at = registry.clock() - timedelta(hours=2)
        for i in range(args.expired):
            url = f"{SAMPLE_URLS[i % len(SAMPLE_URLS)]}?expired={i}"
            record = LinkRecord.new(f"seed-expired-{i}", url, 1, created_at)
            await registry.store.put(record)
            logger.info(f"Wrote expired sample: {record.code} (expired {record.expires_at.isoformat()})")
        return 0

    except Exception:
        logger.exception("Error seeding data")
        return 1

    finally:
        await registry.close()


if __name__ == "__main__":
    exit_code = asyncio.run(main())
    sys.exit(exit_code)
