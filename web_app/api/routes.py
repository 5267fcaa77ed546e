"""API routes implementation."""

from datetime import datetime, timezone

from fastapi import APIRouter, Query, Request, Response, status
from fastapi.responses import JSONResponse

from .schemas import (
    CreateLinkRequest,
    LinkResponse,
    LinkListResponse,
    HealthResponse,
    ErrorResponse,
)
from shortlink.errors import ErrorKind, RegistryError
from shortlink.common.logging_config import get_logger
from shortlink.common.url_builder import build_base_url, build_short_url, get_forwarded_path_prefix

router = APIRouter()

logger = get_logger("web")

ERROR_STATUS = {
    ErrorKind.INVALID_URL: status.HTTP_400_BAD_REQUEST,
    ErrorKind.INVALID_VALIDITY: status.HTTP_400_BAD_REQUEST,
    ErrorKind.INVALID_CODE_FORMAT: status.HTTP_400_BAD_REQUEST,
    ErrorKind.CODE_TAKEN: status.HTTP_409_CONFLICT,
    ErrorKind.GENERATION_EXHAUSTED: status.HTTP_503_SERVICE_UNAVAILABLE,
    ErrorKind.NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorKind.EXPIRED: status.HTTP_410_GONE,
}


def error_response(error: RegistryError) -> JSONResponse:
    """Translate a registry error into its HTTP status and body."""
    return JSONResponse(
        status_code=ERROR_STATUS[error.kind],
        content=ErrorResponse(error=error.kind.value, detail=error.message).model_dump(),
    )


def short_url_for(request: Request, code: str) -> str:
    """Public short URL; honours X-Forwarded-* so links are right behind a proxy."""
    config = request.app.state.config
    headers = dict(request.headers)

    base_url = build_base_url(
        headers=headers,
        fallback_base_url=config.base_url,
        request_scheme=request.url.scheme,
        request_host=request.headers.get("host"),
    )
    path_prefix = get_forwarded_path_prefix(headers) or config.path_prefix

    return build_short_url(short_code=code, base_url=base_url, path_prefix=path_prefix)


def link_response(request: Request, record) -> LinkResponse:
    registry = request.app.state.registry
    return LinkResponse.from_record(
        record,
        short_url=short_url_for(request, record.code),
        expired=registry.is_expired(record),
    )


@router.post(
    "/links",
    response_model=LinkResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        400: {"model": ErrorResponse, "description": "Invalid URL, validity or code format"},
        409: {"model": ErrorResponse, "description": "Short code already exists"},
        503: {"model": ErrorResponse, "description": "No free code could be generated"},
    },
    summary="Create short link",
    description="Create a short link valid for 1-1440 minutes. Optionally provide a custom short code.",
)
async def create_link(request: Request, body: CreateLinkRequest):
    """Create a short link."""
    registry = request.app.state.registry
    config = request.app.state.config

    validity = body.validity_minutes
    if validity is None:
        validity = config.default_validity_minutes

    # Blank means generate; anything else is validated as sent
    custom_code = body.custom_code if body.custom_code and body.custom_code.strip() else None

    result = await registry.create(
        body.url,
        custom_code=custom_code,
        validity_minutes=validity,
    )

    if isinstance(result, RegistryError):
        logger.info(
            f"Rejected link creation: {result.kind.value} - {result.message}",
            extra={"event": "validation_failed"},
        )
        return error_response(result)

    logger.info(
        f"Link created: {result.code} (expires {result.expires_at.isoformat()})",
        extra={"event": "link_created"},
    )
    return link_response(request, result)


@router.get(
    "/links",
    response_model=LinkListResponse,
    summary="List links",
    description="List active and expired links, most recently created first.",
)
async def list_links(request: Request, limit: int = Query(100, ge=1, le=1000)):
    """List links."""
    registry = request.app.state.registry

    records = await registry.list(limit=limit)
    links = [link_response(request, record) for record in records]

    return LinkListResponse(count=len(links), links=links)


@router.get(
    "/links/{code}",
    response_model=LinkResponse,
    responses={
        404: {"model": ErrorResponse, "description": "Short code not found"},
    },
    summary="Get link information",
    description="Get a link's destination, expiry and click count without counting a click.",
)
async def get_link(request: Request, code: str):
    """Get information about a short link."""
    registry = request.app.state.registry

    record = await registry.get(code)
    if record is None:
        return error_response(RegistryError(ErrorKind.NOT_FOUND, f"Short code '{code}' not found"))

    return link_response(request, record)


@router.delete(
    "/links/{code}",
    status_code=status.HTTP_204_NO_CONTENT,
    responses={
        404: {"model": ErrorResponse, "description": "Short code not found"},
    },
    summary="Delete link",
    description="Delete a link whether or not it has expired.",
)
async def delete_link(request: Request, code: str):
    """Delete a short link."""
    registry = request.app.state.registry

    result = await registry.delete(code)
    if isinstance(result, RegistryError):
        return error_response(result)

    logger.info(f"Link deleted: {code}", extra={"event": "link_deleted"})
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Health check",
    description="Check if the service and its link store are healthy.",
)
async def health_check(request: Request):
    """Health check endpoint for proxies and monitoring."""
    registry = request.app.state.registry

    health = await registry.health_check()

    return HealthResponse(
        status="healthy" if health["overall"] else "unhealthy",
        store="healthy" if health["store"] else "unhealthy",
        timestamp=datetime.now(timezone.utc),
    )
