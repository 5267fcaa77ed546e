"""Storage layer for the short-link registry."""

import logging
from typing import Optional
from urllib.parse import urlparse

from .base import LinkStore
from .memory import MemoryLinkStore
from .models import LinkRecord


def create_store(
    store_url: str,
    create_tables: bool = False,
    pool_max_size: int = 10,
    key_prefix: str = "shortlink",
    logger: Optional[logging.Logger] = None,
) -> LinkStore:
    """Build a store from its connection URL.

    Supported schemes: memory://, postgresql:// (or postgres://), redis:// (or rediss://).

    Raises:
        ValueError: If the scheme is not supported
    """
    scheme = urlparse(store_url).scheme.lower()

    if scheme == "memory":
        return MemoryLinkStore(store_url, logger=logger)

    if scheme in ("postgresql", "postgres"):
        from .postgres import PostgresLinkStore
        return PostgresLinkStore(
            store_url,
            create_tables=create_tables,
            pool_max_size=pool_max_size,
            logger=logger,
        )

    if scheme in ("redis", "rediss"):
        from .redis_store import RedisLinkStore
        return RedisLinkStore(store_url, key_prefix=key_prefix, logger=logger)

    raise ValueError(f"Unsupported store URL scheme: '{scheme}'")


__all__ = ["LinkStore", "MemoryLinkStore", "LinkRecord", "create_store"]
