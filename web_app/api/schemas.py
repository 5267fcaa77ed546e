"""Pydantic schemas for API requests and responses."""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field

from shortlink.storage.models import LinkRecord


class CreateLinkRequest(BaseModel):
    """Request to shorten a URL."""

    url: str = Field(..., description="The URL to shorten")
    custom_code: Optional[str] = Field(None, description="Optional custom short code")
    validity_minutes: Optional[int] = Field(
        None,
        description="Minutes the link stays resolvable (1-1440); server default when omitted",
    )

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "url": "https://example.com/very/long/path/to/resource",
                    "validity_minutes": 30
                },
                {
                    "url": "https://github.com/user/repo",
                    "custom_code": "my-repo",
                    "validity_minutes": 1440
                }
            ]
        }
    }


class LinkResponse(BaseModel):
    """A stored link as seen by API clients."""

    code: str = Field(..., description="The short code")
    short_url: str = Field(..., description="The complete short URL")
    original_url: str = Field(..., description="The destination URL")
    created_at: datetime = Field(..., description="Creation timestamp")
    expires_at: datetime = Field(..., description="Instant after which the link stops resolving")
    validity_minutes: int
    clicks: int = Field(..., description="Successful resolutions so far")
    expired: bool

    @classmethod
    def from_record(cls, record: LinkRecord, short_url: str, expired: bool) -> "LinkResponse":
        return cls(
            code=record.code,
            short_url=short_url,
            original_url=record.original_url,
            created_at=record.created_at,
            expires_at=record.expires_at,
            validity_minutes=record.validity_minutes,
            clicks=record.clicks,
            expired=expired,
        )

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "code": "k3x9qa",
                    "short_url": "https://short.link/k3x9qa",
                    "original_url": "https://example.com/very/long/path",
                    "created_at": "2024-01-01T12:00:00Z",
                    "expires_at": "2024-01-01T12:30:00Z",
                    "validity_minutes": 30,
                    "clicks": 0,
                    "expired": False
                }
            ]
        }
    }


class LinkListResponse(BaseModel):
    """Links, most recently created first."""

    count: int
    links: List[LinkResponse]


class HealthResponse(BaseModel):
    """Health check response."""

    status: str = Field(..., description="Overall status")
    store: str = Field(..., description="Link store status")
    timestamp: datetime = Field(..., description="Check timestamp")


class ErrorResponse(BaseModel):
    """Error response."""

    error: str = Field(..., description="Error kind, e.g. code_taken")
    detail: Optional[str] = Field(None, description="Detailed error information")
