"""Request logging middleware.

Every request gets a short request_id in request.state (echoed by handlers
in ApiResponse and returned as the X-Request-ID header). One log line per
request; the level follows the outcome:

    INFO  [GET] /api/v1/categories → 200 (4ms) req_a1b2c3d4e5f6
    WARN  [PUT] /api/v1/categories/x → 404 (6ms) req_...
    ERROR [GET] /api/v1/reports/summary → 503 (10012ms) req_...
"""

import logging
import time
import uuid

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

logger = logging.getLogger("ft.request")


def _level_for(status_code: int) -> int:
    if status_code >= 500:
        return logging.ERROR
    if status_code >= 400:
        return logging.WARNING
    return logging.INFO


class RequestLogMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        request_id = f"req_{uuid.uuid4().hex[:12]}"
        request.state.request_id = request_id

        start = time.perf_counter()
        response: Response = await call_next(request)
        elapsed_ms = (time.perf_counter() - start) * 1000

        response.headers["X-Request-ID"] = request_id
        logger.log(
            _level_for(response.status_code),
            "[%s] %s → %d (%.0fms) %s",
            request.method,
            request.url.path,
            response.status_code,
            elapsed_ms,
            request_id,
        )
        return response
