"""Data models for the short-link registry."""

from dataclasses import dataclass, replace
from datetime import datetime, timedelta, timezone


@dataclass(frozen=True)
class LinkRecord:
    """A short code mapped to its destination, with expiry and click metadata."""

    code: str
    original_url: str
    created_at: datetime
    validity_minutes: int
    expires_at: datetime
    clicks: int = 0

    @classmethod
    def new(cls, code: str, original_url: str, validity_minutes: int, created_at: datetime) -> "LinkRecord":
        """Build a fresh record; expires_at is derived from created_at."""
        return cls(
            code=code,
            original_url=original_url,
            created_at=created_at,
            validity_minutes=validity_minutes,
            expires_at=created_at + timedelta(minutes=validity_minutes),
            clicks=0,
        )

    def is_expired(self, now: datetime) -> bool:
        """True once now is strictly past expires_at."""
        return now > self.expires_at

    def with_click(self) -> "LinkRecord":
        """Copy of this record with the click counter incremented."""
        return replace(self, clicks=self.clicks + 1)

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "code": self.code,
            "original_url": self.original_url,
            "created_at": self.created_at.isoformat(),
            "validity_minutes": self.validity_minutes,
            "expires_at": self.expires_at.isoformat(),
            "clicks": self.clicks,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "LinkRecord":
        """Create from dictionary (accepts datetimes or ISO strings)."""
        return cls(
            code=data["code"],
            original_url=data["original_url"],
            created_at=_as_utc(data["created_at"]),
            validity_minutes=int(data["validity_minutes"]),
            expires_at=_as_utc(data["expires_at"]),
            clicks=int(data.get("clicks", 0)),
        )


def _as_utc(value) -> datetime:
    if not isinstance(value, datetime):
        value = datetime.fromisoformat(value)
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value
