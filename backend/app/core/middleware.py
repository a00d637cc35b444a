"""
Admin Panel API - HTTP Middleware

- RequestLoggingMiddleware: one start/complete line per API call, tagged
  with the request id and the account the access gate resolved
- SecurityHeadersMiddleware: headers for API responses and for uploaded
  avatars/student documents served back from /uploads
- RequestSizeLimitMiddleware: rejects bodies larger than one full student
  form (photo + documents) before multipart parsing starts
"""

import time
from typing import Callable, Optional, Tuple
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import JSONResponse, Response
from starlette.types import ASGIApp

from app.core.exceptions import error_response
from app.core.logging_config import (
    logger,
    set_request_id,
    set_user_id,
    generate_request_id,
)

UPLOADS_PATH_PREFIX = "/uploads/"

# Liveness checks hit these every few seconds
LIVENESS_PATHS = {"/health", "/api/v1/health/live"}

SLOW_REQUEST_MS = 1000


def should_skip_logging(path: str) -> bool:
    """Liveness checks and static upload downloads are not logged"""
    return path in LIVENESS_PATHS or path.startswith(UPLOADS_PATH_PREFIX)


def bind_actor(request: Request, user_id: str, role: str) -> None:
    """
    Record the authenticated account on the request.

    ``request.state`` is shared with the middleware, so the completion line
    can name the caller; the context var covers log lines written while the
    handler runs.
    """
    request.state.actor_id = str(user_id)
    request.state.actor_role = getattr(role, "value", str(role))
    set_user_id(str(user_id))


def get_actor(request: Request) -> Tuple[Optional[str], Optional[str]]:
    return (
        getattr(request.state, "actor_id", None),
        getattr(request.state, "actor_role", None),
    )


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """
    Assigns or echoes X-Request-ID, adds X-Response-Time and logs the call
    with the resolved actor (anonymous for login and rejected tokens).
    """

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        request_id = request.headers.get("X-Request-ID") or generate_request_id()
        set_request_id(request_id)

        path = request.url.path
        skip_logging = should_skip_logging(path)
        start_time = time.perf_counter()

        if not skip_logging:
            logger.info(
                f"→ {request.method} {path}",
                extra={
                    "event_type": "http_request_start",
                    "http_method": request.method,
                    "http_path": path,
                    "client_ip": request.client.host if request.client else "unknown",
                }
            )

        try:
            response = await call_next(request)
        except Exception as exc:
            duration_ms = (time.perf_counter() - start_time) * 1000
            actor_id, actor_role = get_actor(request)
            logger.error(
                f"✗ {request.method} {path} - {type(exc).__name__} ({duration_ms:.2f}ms)",
                exc_info=True,
                extra={
                    "event_type": "http_request_error",
                    "http_method": request.method,
                    "http_path": path,
                    "duration_ms": duration_ms,
                    "actor_id": actor_id,
                    "actor_role": actor_role,
                }
            )
            raise
        finally:
            set_request_id("")
            set_user_id("")

        duration_ms = (time.perf_counter() - start_time) * 1000
        response.headers["X-Request-ID"] = request_id
        response.headers["X-Response-Time"] = f"{duration_ms:.2f}ms"

        if not skip_logging:
            status_code = response.status_code
            actor_id, actor_role = get_actor(request)
            actor = f"{actor_role}:{actor_id}" if actor_id else "anonymous"

            if status_code >= 500:
                log = logger.error
            elif status_code >= 400:
                log = logger.warning
            else:
                log = logger.info

            log(
                f"← {request.method} {path} - {status_code} ({duration_ms:.2f}ms) [{actor}]",
                extra={
                    "event_type": "http_request_complete",
                    "http_method": request.method,
                    "http_path": path,
                    "http_status": status_code,
                    "duration_ms": duration_ms,
                    "actor_id": actor_id,
                    "actor_role": actor_role,
                    "slow": duration_ms > SLOW_REQUEST_MS,
                }
            )

        return response


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """
    nosniff/frame-deny everywhere. Uploaded files are user supplied, so they
    are never rendered as active content; API responses carry bearer tokens
    and account data, so they are not cached.
    """

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        response = await call_next(request)

        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["X-Frame-Options"] = "DENY"
        response.headers["Referrer-Policy"] = "strict-origin-when-cross-origin"

        if request.url.path.startswith(UPLOADS_PATH_PREFIX):
            response.headers["Content-Security-Policy"] = "default-src 'none'; img-src 'self'; sandbox"
        else:
            response.headers["Cache-Control"] = "no-store"

        return response


class RequestSizeLimitMiddleware(BaseHTTPMiddleware):
    """Rejects oversized bodies by Content-Length with 413 in the error envelope"""

    def __init__(self, app: ASGIApp, max_size: int):
        super().__init__(app)
        self.max_size = max_size

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        content_length = request.headers.get("content-length")

        if content_length and content_length.isdigit() and int(content_length) > self.max_size:
            logger.warning(
                f"Request body too large: {content_length} bytes (max: {self.max_size})",
                extra={"event_type": "request_too_large", "http_path": request.url.path}
            )
            return JSONResponse(
                status_code=413,
                content=error_response(
                    f"Request body too large. Maximum size is {self.max_size // 1024 // 1024}MB",
                    "PAYLOAD_TOO_LARGE"
                )
            )

        return await call_next(request)
