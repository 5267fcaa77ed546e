"""Redis implementation of the link store."""

import json
import logging
from datetime import datetime
from typing import Optional, List

import redis.asyncio as redis
from redis.exceptions import WatchError

from .base import LinkStore
from .models import LinkRecord


class RedisLinkStore(LinkStore):
    """Redis link store.

    Each record is a JSON string under ``<prefix>:link:<code>``; a sorted set
    ``<prefix>:index`` scores codes by creation time for listing.
    """

    def __init__(
        self,
        store_url: str,
        key_prefix: str = "shortlink",
        logger: Optional[logging.Logger] = None,
    ):
        """Initialize Redis store.

        Args:
            store_url: Redis connection URL (e.g., redis://localhost:6379/0)
            key_prefix: Namespace for all keys written by this store
            logger: Optional logger instance
        """
        super().__init__(store_url)
        self.key_prefix = key_prefix
        self.logger = logger or logging.getLogger(__name__)
        self.client: redis.Redis = redis.from_url(
            store_url,
            encoding="utf-8",
            decode_responses=True,
        )

    def get_record_key(self, code: str) -> str:
        return f"{self.key_prefix}:link:{code}"

    @property
    def index_key(self) -> str:
        return f"{self.key_prefix}:index"

    async def initialize(self) -> None:
        """Verify the connection."""
        try:
            await self.client.ping()
            self.logger.info("Connected to Redis")
        except Exception as e:
            self.logger.error(f"Failed to connect to Redis: {e}")
            raise

    async def get(self, code: str) -> Optional[LinkRecord]:
        try:
            raw = await self.client.get(self.get_record_key(code))
        except Exception as e:
            self.logger.error(f"Redis get error for {code}: {e}")
            raise

        return LinkRecord.from_dict(json.loads(raw)) if raw else None

    async def put(self, record: LinkRecord) -> None:
        try:
            async with self.client.pipeline(transaction=True) as pipe:
                pipe.set(self.get_record_key(record.code), json.dumps(record.to_dict()))
                pipe.zadd(self.index_key, {record.code: record.created_at.timestamp()})
                await pipe.execute()
        except Exception as e:
            self.logger.error(f"Redis put error for {record.code}: {e}")
            raise

    async def insert(self, record: LinkRecord, replace_expired_at: Optional[datetime] = None) -> bool:
        key = self.get_record_key(record.code)
        try:
            async with self.client.pipeline(transaction=True) as pipe:
                while True:
                    try:
                        await pipe.watch(key)
                        raw = await pipe.get(key)
                        if raw is not None:
                            existing = LinkRecord.from_dict(json.loads(raw))
                            if replace_expired_at is None or not existing.is_expired(replace_expired_at):
                                return False

                        pipe.multi()
                        pipe.set(key, json.dumps(record.to_dict()))
                        pipe.zadd(self.index_key, {record.code: record.created_at.timestamp()})
                        await pipe.execute()
                        return True
                    except WatchError:
                        # Key changed under us; re-read and decide again
                        continue
        except Exception as e:
            self.logger.error(f"Redis insert error for {record.code}: {e}")
            raise

    async def add_click(self, code: str, now: datetime) -> Optional[LinkRecord]:
        key = self.get_record_key(code)
        try:
            async with self.client.pipeline(transaction=True) as pipe:
                while True:
                    try:
                        await pipe.watch(key)
                        raw = await pipe.get(key)
                        if raw is None:
                            return None
                        record = LinkRecord.from_dict(json.loads(raw))
                        if record.is_expired(now):
                            return None

                        record = record.with_click()
                        pipe.multi()
                        pipe.set(key, json.dumps(record.to_dict()))
                        await pipe.execute()
                        return record
                    except WatchError:
                        continue
        except Exception as e:
            self.logger.error(f"Redis click error for {code}: {e}")
            raise

    async def delete(self, code: str) -> bool:
        try:
            async with self.client.pipeline(transaction=True) as pipe:
                pipe.delete(self.get_record_key(code))
                pipe.zrem(self.index_key, code)
                deleted, _ = await pipe.execute()
        except Exception as e:
            self.logger.error(f"Redis delete error for {code}: {e}")
            raise

        return deleted > 0

    async def list_all(self) -> List[LinkRecord]:
        try:
            codes = await self.client.zrevrange(self.index_key, 0, -1)
            if not codes:
                return []
            values = await self.client.mget([self.get_record_key(code) for code in codes])
        except Exception as e:
            self.logger.error(f"Redis list error: {e}")
            raise

        return [LinkRecord.from_dict(json.loads(raw)) for raw in values if raw]

    async def health_check(self) -> bool:
        try:
            await self.client.ping()
            return True
        except Exception as e:
            self.logger.error(f"Health check failed: {e}")
            return False

    async def close(self) -> None:
        """Close Redis connection."""
        await self.client.aclose()
        self.logger.info("Redis connection closed")
