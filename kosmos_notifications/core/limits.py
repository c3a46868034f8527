import logging
from fastapi import Request
from fastapi.responses import JSONResponse
from slowapi import Limiter
from slowapi.errors import RateLimitExceeded
from slowapi.util import get_remote_address

from kosmos_notifications.core import config

logger = logging.getLogger(__name__)

limiter = Limiter(key_func=get_remote_address, enabled=config.RATE_LIMIT_ENABLED)


def notifications_rate_limit() -> str:
    """Per-client limit of the notifications endpoint, read on every request"""
    return config.NOTIFICATIONS_RATE_LIMIT


async def rate_limit_handler(request: Request, exc: RateLimitExceeded) -> JSONResponse:
    """429 in the application's error body format"""
    logger.warning(
        f"Rate limit exceeded: {exc.detail}",
        extra={
            "path": request.url.path,
            "method": request.method,
            "client_ip": get_remote_address(request),
        },
    )

    return JSONResponse(
        status_code=429,
        content={
            "error": "RATE_LIMIT_EXCEEDED",
            "message": f"Rate limit exceeded: {exc.detail}",
            "details": {},
            "path": request.url.path,
        },
    )
