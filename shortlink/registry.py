"""Short-code registry: creation, resolution and deletion of TTL-bounded links."""

import asyncio
import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Callable, Dict, Iterable, List, Optional, Union

from .shortcode import ShortCodeGenerator
from .errors import ErrorKind, RegistryError
from .storage.base import LinkStore
from .storage.models import LinkRecord
from .common.validators import (
    RESERVED_CODES,
    is_valid_short_code,
    is_valid_url,
    is_valid_validity,
)

DEFAULT_VALIDITY_MINUTES = 30


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class Resolution:
    """Successful resolution of a short code."""

    url: str
    clicks: int


class LinkRegistry:
    """Owns the code -> record mapping and enforces uniqueness, expiry and click accounting.

    Every public operation returns a value; expected failures come back as
    ``RegistryError`` instead of being raised. Store failures still raise.
    """

    def __init__(
        self,
        store: LinkStore,
        short_code_generator: Optional[ShortCodeGenerator] = None,
        logger: Optional[logging.Logger] = None,
        clock: Optional[Callable[[], datetime]] = None,
        max_generation_attempts: int = 10,
        max_code_length: int = 64,
        reserved_codes: Iterable[str] = RESERVED_CODES,
        allow_expired_code_reuse: bool = False,
    ):
        """Initialize the registry.

        Args:
            store: Storage backend holding the records
            short_code_generator: Optional short code generator
            logger: Optional logger
            clock: Callable returning the current aware datetime (defaults to UTC now)
            max_generation_attempts: Random draws tried before giving up on a generated code
            max_code_length: Longest custom code accepted
            reserved_codes: Codes that shadow HTTP routes and are never handed out
            allow_expired_code_reuse: Let create() replace an expired record holding the code
        """
        self.store = store
        self.generator = short_code_generator or ShortCodeGenerator()
        self.logger = logger or logging.getLogger(__name__)
        self.clock = clock or utcnow
        self.max_generation_attempts = max_generation_attempts
        self.max_code_length = max_code_length
        self.reserved_codes = frozenset(code.lower() for code in reserved_codes)
        self.allow_expired_code_reuse = allow_expired_code_reuse

        # Orders calls through this registry; cross-process safety comes from
        # the store's conditional insert and add_click
        self._lock = asyncio.Lock()

    async def create(
        self,
        original_url: str,
        custom_code: Optional[str] = None,
        validity_minutes: int = DEFAULT_VALIDITY_MINUTES,
    ) -> Union[LinkRecord, RegistryError]:
        """Create a new short link.

        Args:
            original_url: The destination URL
            custom_code: Optional code requested by the caller
            validity_minutes: Minutes the link stays resolvable (1-1440)

        Returns:
            The stored record, or a RegistryError (INVALID_URL, INVALID_VALIDITY,
            INVALID_CODE_FORMAT, CODE_TAKEN, GENERATION_EXHAUSTED)
        """
        is_valid, error = is_valid_url(original_url)
        if not is_valid:
            return self._fail(ErrorKind.INVALID_URL, f"Invalid URL: {error}")

        is_valid, error = is_valid_validity(validity_minutes)
        if not is_valid:
            return self._fail(ErrorKind.INVALID_VALIDITY, error)

        if custom_code is not None:
            is_valid, error = is_valid_short_code(
                custom_code,
                max_length=self.max_code_length,
                reserved=self.reserved_codes,
            )
            if not is_valid:
                return self._fail(ErrorKind.INVALID_CODE_FORMAT, f"Invalid short code: {error}")

        async with self._lock:
            now = self.clock()

            if custom_code is not None:
                record = LinkRecord.new(custom_code, original_url, validity_minutes, created_at=now)
                if not await self.store.insert(record, self._replace_expired_at(now)):
                    return self._fail(
                        ErrorKind.CODE_TAKEN,
                        f"Short code '{custom_code}' already exists",
                    )
            else:
                record = await self._insert_generated(original_url, validity_minutes, now)
                if record is None:
                    return self._fail(
                        ErrorKind.GENERATION_EXHAUSTED,
                        f"Unable to generate unique short code after "
                        f"{self.max_generation_attempts} attempts",
                    )

        self.logger.info(
            f"Created short link: {record.code} -> {record.original_url} "
            f"(valid {record.validity_minutes} min)"
        )
        return record

    async def resolve(self, code: str) -> Union[Resolution, RegistryError]:
        """Resolve a code to its destination and count the click.

        Expired records are left untouched (no click, no deletion).

        Returns:
            Resolution with the URL and the post-increment click count,
            or a RegistryError (NOT_FOUND, EXPIRED)
        """
        async with self._lock:
            now = self.clock()
            record = await self.store.add_click(code, now)
            if record is None:
                existing = await self.store.get(code)
                if existing is not None and existing.is_expired(now):
                    return self._fail(ErrorKind.EXPIRED, f"Short code '{code}' has expired")
                return self._fail(ErrorKind.NOT_FOUND, f"Short code '{code}' not found")

        self.logger.debug(f"Resolved {code} -> {record.original_url} (clicks={record.clicks})")
        return Resolution(url=record.original_url, clicks=record.clicks)

    async def delete(self, code: str) -> Union[LinkRecord, RegistryError]:
        """Delete a link whether or not it has expired.

        Returns:
            The removed record, or RegistryError(NOT_FOUND)
        """
        async with self._lock:
            record = await self.store.get(code)
            if record is None or not await self.store.delete(code):
                return self._fail(ErrorKind.NOT_FOUND, f"Short code '{code}' not found")

        self.logger.info(f"Deleted short link: {code}")
        return record

    async def list(self, limit: Optional[int] = None) -> List[LinkRecord]:
        """List active and expired records, most recently created first."""
        async with self._lock:
            records = await self.store.list_all()

        records = sorted(records, key=lambda r: (r.created_at, r.code), reverse=True)
        if limit is not None:
            records = records[:limit]
        return records

    async def get(self, code: str) -> Optional[LinkRecord]:
        """Look up a record without counting a click."""
        async with self._lock:
            return await self.store.get(code)

    def is_expired(self, record: LinkRecord, now: Optional[datetime] = None) -> bool:
        """True once now (default: the registry clock) is past record.expires_at."""
        return record.is_expired(now or self.clock())

    async def health_check(self) -> Dict[str, bool]:
        """Perform health check.

        Returns:
            Dictionary with health status
        """
        store_healthy = await self.store.health_check()
        return {
            "store": store_healthy,
            "overall": store_healthy,
        }

    async def close(self) -> None:
        """Close store connections."""
        await self.store.close()

    def _replace_expired_at(self, now: datetime) -> Optional[datetime]:
        return now if self.allow_expired_code_reuse else None

    async def _insert_generated(
        self,
        original_url: str,
        validity_minutes: int,
        now: datetime,
    ) -> Optional[LinkRecord]:
        """Draw random codes until the store accepts one.

        Returns:
            The stored record, or None after max_generation_attempts collisions
        """
        for attempt in range(self.max_generation_attempts):
            code = self.generator.generate()

            if code.lower() in self.reserved_codes:
                continue

            record = LinkRecord.new(code, original_url, validity_minutes, created_at=now)
            if await self.store.insert(record, self._replace_expired_at(now)):
                if attempt:
                    self.logger.debug(f"Generated code after {attempt + 1} attempts: {code}")
                return record

        return None

    def _fail(self, kind: ErrorKind, message: str) -> RegistryError:
        self.logger.warning(f"{kind.value}: {message}")
        return RegistryError(kind=kind, message=message)
