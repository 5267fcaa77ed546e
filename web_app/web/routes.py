"""Browser-facing routes: short-code redirects."""

from fastapi import APIRouter, HTTPException, Request, status
from fastapi.responses import RedirectResponse

from shortlink.errors import ErrorKind, RegistryError
from shortlink.common.logging_config import get_logger

router = APIRouter()

logger = get_logger("web")


@router.get("/health", include_in_schema=False)
async def health_check_web(request: Request):
    """Health check endpoint (simple version for load balancers)."""
    registry = request.app.state.registry

    health = await registry.health_check()

    if health["overall"]:
        return {"status": "healthy"}
    raise HTTPException(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        detail="Service unhealthy",
    )


@router.get("/{code}", include_in_schema=False)
async def redirect_to_url(request: Request, code: str):
    """Redirect to the original URL (counts a click); 404 when unknown, 410 when expired."""
    registry = request.app.state.registry

    result = await registry.resolve(code)

    if isinstance(result, RegistryError):
        if result.kind == ErrorKind.EXPIRED:
            logger.info(f"Expired link accessed: {code}", extra={"event": "link_expired"})
            raise HTTPException(status_code=status.HTTP_410_GONE, detail=result.message)
        logger.info(f"Unknown link accessed: {code}", extra={"event": "link_not_found"})
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=result.message)

    logger.info(
        f"Link accessed: {code} (clicks={result.clicks})",
        extra={"event": "link_accessed"},
    )

    # Temporary redirect so every visit comes back here and is counted
    return RedirectResponse(url=result.url, status_code=status.HTTP_302_FOUND)
