"""
Rate limiting utilities using slowapi.
Protects public order placement from abuse (QR links are unauthenticated).

Usage in a router:
    from shared.security.rate_limit import limiter

    @router.post("/orders")
    @limiter.limit(settings.order_create_rate_limit)
    async def create_order(request: Request, ...):
        ...
"""

from fastapi import Request
from fastapi.responses import JSONResponse
from slowapi import Limiter
from slowapi.errors import RateLimitExceeded
from slowapi.util import get_remote_address

from shared.config.constants import ErrorMessages
from shared.config.logging import get_logger
from shared.config.settings import settings

logger = get_logger(__name__)

# Limiter keyed on client IP; in-memory storage (single process)
limiter = Limiter(key_func=get_remote_address, enabled=settings.rate_limit_enabled)


def rate_limit_exceeded_handler(request: Request, exc: RateLimitExceeded) -> JSONResponse:
    """
    Handler for rate limit exceeded errors.
    Returns a JSON response with retry information.
    """
    retry_after = exc.limit.limit.get_expiry()
    logger.warning(
        "Rate limit exceeded",
        path=request.url.path,
        client=get_remote_address(request),
        limit=str(exc.detail),
    )
    return JSONResponse(
        status_code=429,
        content={
            "detail": ErrorMessages.RATE_LIMIT_EXCEEDED,
            "limit": str(exc.detail),
            "retry_after": retry_after,
        },
        headers={"Retry-After": str(retry_after)},
    )
