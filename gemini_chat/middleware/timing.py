"""
Request timing middleware

Captures high-resolution start time for each request and logs total request time.
"""

import time
import uuid
import logging
from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import JSONResponse
from ..utils.debug_logger import debug_logger
from ..config import get_settings

logger = logging.getLogger(__name__)


class TimingMiddleware(BaseHTTPMiddleware):
    """Middleware to capture request timing and log total request duration"""

    async def dispatch(self, request: Request, call_next):
        request.state.start_time = time.perf_counter()
        request.state.request_id = str(uuid.uuid4())[:8]

        if get_settings().debug:
            logger.debug(f"Request ID {request.state.request_id} for {request.url.path}")

        debug_logger.log_route(
            request.state.request_id,
            f"Request started: {request.method} {request.url.path}",
            request
        )

        try:
            response = await call_next(request)
        except Exception as e:
            logger.exception(f"Unhandled exception for {request.url.path}: {e}")
            return JSONResponse(status_code=500, content={"error": str(e)})

        total_time_ms = (time.perf_counter() - request.state.start_time) * 1000
        debug_logger.log_timing(
            request.state.request_id,
            f"Request {request.method} {request.url.path} -> {response.status_code}",
            total_time_ms
        )
        response.headers["X-Request-ID"] = request.state.request_id
        return response
