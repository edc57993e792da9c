import logging
import time
import uuid
from typing import Optional

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint

from rentdesk.core.config import settings

logger = logging.getLogger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"


def route_template(request: Request) -> str:
    """'/api/bookings/{booking_id}' rather than '/api/bookings/17', when a route matched."""
    route = request.scope.get("route")
    return getattr(route, "path", None) or request.url.path


def access_level(status_code: int, duration_ms: float) -> Optional[int]:
    """
    Which access lines are worth keeping: server errors always, booking
    conflicts (409) for the audit trail, anything else only when slow.
    """
    if status_code >= 500:
        return logging.ERROR
    if duration_ms > settings.log_slow_request_threshold_ms:
        return logging.WARNING
    if status_code == 409:
        return logging.INFO
    return None


class RequestLoggerMiddleware(BaseHTTPMiddleware):
    """
    Correlates each API call with a request id (reused from the caller when
    present) and writes one access line for failed, conflicting or slow calls.
    """

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        started = time.perf_counter()
        request.state.request_id = request.headers.get(REQUEST_ID_HEADER) or uuid.uuid4().hex
        request.state.user_id = request.headers.get("X-User-Id")

        status_code = 500
        try:
            response = await call_next(request)
            status_code = response.status_code
            response.headers[REQUEST_ID_HEADER] = request.state.request_id
            return response
        finally:
            elapsed_ms = round((time.perf_counter() - started) * 1000, 2)
            level = access_level(status_code, elapsed_ms)
            if level is not None:
                route = route_template(request)
                logger.log(
                    level,
                    f"{request.method} {route} -> {status_code} in {elapsed_ms}ms",
                    extra={
                        "method": request.method,
                        "route": route,
                        "status_code": status_code,
                        "duration_ms": elapsed_ms,
                        "request_id": request.state.request_id,
                        "user_id": request.state.user_id,
                    },
                )
