"""
Rate limiting middleware using slowapi.

Every route shares the default limit, keyed by client IP. This also bounds
how fast a single client can guess API keys. X-Forwarded-For is only
honoured when RATE_LIMIT_TRUST_FORWARDED_FOR is set, since a direct caller
could otherwise pick a fresh bucket per request.
"""
import logging
from typing import Optional
from slowapi import Limiter
from slowapi.util import get_remote_address
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIASGIMiddleware
from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from app.api.deps import record_rejected_request
from app.config import settings
from app.core.logging_utils import sanitize_log_message, get_request_id

logger = logging.getLogger(__name__)


def get_client_ip(request: Request) -> str:
    """
    Get client IP address from request.
    Uses the first X-Forwarded-For hop only when the proxy is trusted.
    """
    if settings.RATE_LIMIT_TRUST_FORWARDED_FOR:
        forwarded = request.headers.get("X-Forwarded-For")
        if forwarded:
            # Take the first IP in the chain (original client)
            return forwarded.split(",")[0].strip()
    return get_remote_address(request)


limiter = Limiter(
    key_func=get_client_ip,
    default_limits=[settings.RATE_LIMIT_DEFAULT],
    storage_uri=settings.RATE_LIMIT_STORAGE_URI,
    enabled=settings.RATE_LIMIT_ENABLED
)


async def rate_limit_exceeded_handler(request: Request, exc: RateLimitExceeded) -> JSONResponse:
    """Reply 429 in the API's error shape and call-log the refusal."""
    logger.warning(
        sanitize_log_message(
            "Rate limit exceeded",
            RequestID=get_request_id(request),
            Path=request.url.path,
            IP=get_client_ip(request),
            Limit=str(exc.detail)
        )
    )
    await record_rejected_request(request, status.HTTP_429_TOO_MANY_REQUESTS)
    return JSONResponse(
        status_code=status.HTTP_429_TOO_MANY_REQUESTS,
        content={"error": f"Rate limit exceeded: {exc.detail}"}
    )


def setup_rate_limiting(app: FastAPI, app_limiter: Optional[Limiter] = None) -> None:
    """
    Configure rate limiting for the FastAPI application.

    Args:
        app: FastAPI application instance
        app_limiter: Limiter to install (defaults to the settings-driven one)
    """
    app_limiter = app_limiter or limiter
    if not app_limiter.enabled:
        logger.info("Rate limiting is disabled")
        return

    app.state.limiter = app_limiter
    app.add_exception_handler(RateLimitExceeded, rate_limit_exceeded_handler)
    # The ASGI variant awaits async exception handlers; the BaseHTTPMiddleware one does not
    app.add_middleware(SlowAPIASGIMiddleware)

    logger.info(f"Rate limiting enabled: default={settings.RATE_LIMIT_DEFAULT}")
