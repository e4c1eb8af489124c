"""Per-request correlation and access log for the presentation adapter.

The adapter may forward its own X-Request-Id; otherwise one is minted. The id
lands on request.state (ApiResponse.request_id picks it up) and is echoed
back in the response header so adapter logs and ours can be joined.

    INFO  [POST] /api/v1/markets/3/stakes 200 12ms user=u-42 req_a1b2c3d4e5f6
    WARN  [POST] /api/v1/admin/markets/3/resolve 503 5004ms user=admin req_...
"""

import logging
import time
import uuid

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

logger = logging.getLogger("wl.request")

REQUEST_ID_HEADER = "x-request-id"


class RequestLogMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        request_id = request.headers.get(REQUEST_ID_HEADER) or f"req_{uuid.uuid4().hex[:12]}"
        request.state.request_id = request_id

        started = time.perf_counter()
        response = await call_next(request)
        elapsed_ms = (time.perf_counter() - started) * 1000
        response.headers[REQUEST_ID_HEADER] = request_id

        # 5xx means the store or the app failed; business rejections stay at INFO
        level = logging.WARNING if response.status_code >= 500 else logging.INFO
        logger.log(
            level,
            "[%s] %s %d %.0fms user=%s %s",
            request.method,
            request.url.path,
            response.status_code,
            elapsed_ms,
            request.headers.get("x-user-id", "-"),
            request_id,
        )
        return response
