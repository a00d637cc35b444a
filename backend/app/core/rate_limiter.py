"""
Rate Limiting for the Admin Panel API
=====================================
Implements login brute-force protection using slowapi.

Storage defaults to in-process memory (RATE_LIMIT_STORAGE_URI=memory://).
Limits are keyed by client IP, so a single address cannot hammer
/auth/login with password guesses. Set RATE_LIMIT_ENABLED=false to
switch the limiter off (tests do this).
"""

from slowapi import Limiter
from slowapi.util import get_remote_address
from slowapi.errors import RateLimitExceeded
from fastapi import Request
from fastapi.responses import JSONResponse

from app.core.config import settings
from app.core.exceptions import error_response
from app.core.logging_config import logger


def get_client_identifier(request: Request) -> str:
    """
    Get rate limit key for the caller.

    Honors the first X-Forwarded-For hop when the API sits behind a proxy,
    otherwise falls back to the socket address.
    """
    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        return f"ip:{forwarded.split(',')[0].strip()}"
    return f"ip:{get_remote_address(request)}"


# Create limiter instance
limiter = Limiter(
    key_func=get_client_identifier,
    storage_uri=settings.RATE_LIMIT_STORAGE_URI,
    strategy="fixed-window",
    enabled=settings.RATE_LIMIT_ENABLED,
)


async def rate_limit_exceeded_handler(request: Request, exc: RateLimitExceeded):
    """
    Custom handler for rate limit exceeded errors.

    Returns the standard error envelope with a Retry-After header.
    """
    retry_after = exc.detail.split(":")[-1].strip() if exc.detail else "60"

    logger.warning(
        f"[RateLimit] Exceeded for {get_client_identifier(request)}: {exc.detail}",
        extra={"event_type": "rate_limited", "http_path": request.url.path}
    )

    return JSONResponse(
        status_code=429,
        content=error_response("Too many requests. Please slow down.", "RATE_LIMITED"),
        headers={"Retry-After": retry_after if retry_after.isdigit() else "60"},
    )


def login_rate_limit():
    """Rate limit for the login endpoint (LOGIN_RATE_LIMIT, default 10/min)"""
    return limiter.limit(settings.LOGIN_RATE_LIMIT, key_func=get_client_identifier)
