"""Request logging middleware for Cinestream."""

import time
import uuid
from typing import Iterable, Optional

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from cinestream.core.logger import get_logger

DEFAULT_IGNORED_PATHS = {"/favicon.ico", "/docs", "/openapi.json", "/redoc"}


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Log one structured line per request and tag the response with a request id.

    Example:
        app.add_middleware(RequestLoggingMiddleware, service_name="cinestream")
    """

    def __init__(
        self,
        app,
        service_name: str = "cinestream",
        add_request_id_header: bool = True,
        ignored_paths: Optional[Iterable[str]] = None,
        logger=None,
    ):
        super().__init__(app)
        self.service_name = service_name
        self.add_request_id_header = add_request_id_header
        self.ignored_paths = set(ignored_paths) if ignored_paths is not None else DEFAULT_IGNORED_PATHS
        self.logger = logger or get_logger("requests")

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        request_id = request.headers.get("X-Request-ID") or uuid.uuid4().hex
        start = time.perf_counter()

        response = await call_next(request)

        duration_ms = round((time.perf_counter() - start) * 1000, 2)
        if request.url.path not in self.ignored_paths:
            self.logger.info(
                "request",
                service=self.service_name,
                method=request.method,
                path=request.url.path,
                status_code=response.status_code,
                duration_ms=duration_ms,
                request_id=request_id,
            )
        if self.add_request_id_header:
            response.headers["X-Request-ID"] = request_id
        return response
