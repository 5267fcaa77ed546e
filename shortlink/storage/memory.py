"""In-process dictionary store."""

import logging
from datetime import datetime
from typing import Dict, List, Optional

from .base import LinkStore
from .models import LinkRecord


class MemoryLinkStore(LinkStore):
    """Non-durable store backed by a dict; contents vanish with the process.

    Check and write happen without awaiting in between, so each call is atomic
    on the event loop.
    """

    def __init__(self, store_url: str = "memory://", logger: Optional[logging.Logger] = None):
        super().__init__(store_url)
        self.logger = logger or logging.getLogger(__name__)
        self._records: Dict[str, LinkRecord] = {}

    async def get(self, code: str) -> Optional[LinkRecord]:
        return self._records.get(code)

    async def put(self, record: LinkRecord) -> None:
        self._records[record.code] = record

    async def insert(self, record: LinkRecord, replace_expired_at: Optional[datetime] = None) -> bool:
        existing = self._records.get(record.code)
        if existing is not None:
            if replace_expired_at is None or not existing.is_expired(replace_expired_at):
                return False
        self._records[record.code] = record
        return True

    async def add_click(self, code: str, now: datetime) -> Optional[LinkRecord]:
        record = self._records.get(code)
        if record is None or record.is_expired(now):
            return None
        record = self._records[code] = record.with_click()
        return record

    async def delete(self, code: str) -> bool:
        return self._records.pop(code, None) is not None

    async def list_all(self) -> List[LinkRecord]:
        return list(self._records.values())

    async def close(self) -> None:
        self.logger.debug(f"Discarding {len(self._records)} in-memory records")
        self._records.clear()

    async def health_check(self) -> bool:
        return True
