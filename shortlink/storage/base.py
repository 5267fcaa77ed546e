"""Abstract base class for link storage backends."""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Optional, List

from .models import LinkRecord


class LinkStore(ABC):
    """Keyed storage for link records.

    Stores do no validation. Writes are conditional and atomic in the backend,
    so several registries (the server, the CLI, the seed script) can share one
    store without overwriting each other.
    """

    def __init__(self, store_url: str):
        """Initialize store.

        Args:
            store_url: Store connection string
        """
        self.store_url = store_url

    async def initialize(self) -> None:
        """Open connections ahead of the first request (no-op by default)."""

    @abstractmethod
    async def get(self, code: str) -> Optional[LinkRecord]:
        """Get the record stored under a code.

        Args:
            code: The short code to lookup

        Returns:
            The record if found, None otherwise
        """
        pass

    @abstractmethod
    async def put(self, record: LinkRecord) -> None:
        """Insert or replace the record stored under record.code unconditionally.

        The registry never calls this; it is for fixtures and imports that own
        their codes.

        Args:
            record: The record to persist
        """
        pass

    @abstractmethod
    async def insert(self, record: LinkRecord, replace_expired_at: Optional[datetime] = None) -> bool:
        """Store a record unless its code is already held.

        Args:
            record: The record to persist
            replace_expired_at: When set, a held record whose expires_at is
                before this time is replaced instead of blocking the insert

        Returns:
            True if the record was stored, False if the code is taken
        """
        pass

    @abstractmethod
    async def add_click(self, code: str, now: datetime) -> Optional[LinkRecord]:
        """Increment the click count of a record that is still active at now.

        Returns:
            The updated record, or None when the code is unknown or expired
        """
        pass

    @abstractmethod
    async def delete(self, code: str) -> bool:
        """Delete the record stored under a code.

        Args:
            code: The short code to delete

        Returns:
            True if deleted, False if not found
        """
        pass

    @abstractmethod
    async def list_all(self) -> List[LinkRecord]:
        """List every stored record, in no particular order."""
        pass

    @abstractmethod
    async def close(self) -> None:
        """Close store connections."""
        pass

    @abstractmethod
    async def health_check(self) -> bool:
        """Check if the store is reachable.

        Returns:
            True if healthy, False otherwise
        """
        pass
