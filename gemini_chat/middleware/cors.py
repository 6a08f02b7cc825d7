"""
CORS middleware

Answers pre-flight OPTIONS requests before any route (and so before any
body parsing) runs, and stamps the CORS headers on every other response.
"""

import logging
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response
from ..config import get_settings

logger = logging.getLogger(__name__)

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Headers": "authorization, x-client-info, apikey, content-type",
}


class CorsMiddleware(BaseHTTPMiddleware):
    """
    Permissive CORS handling for the browser client.

    - OPTIONS requests get an empty response with CORS headers
    - All other responses get the CORS headers added
    """

    async def dispatch(self, request, call_next):
        if request.method == "OPTIONS":
            if get_settings().debug:
                logger.debug(f"Pre-flight request to {request.url.path}")
            return Response(status_code=200, headers=CORS_HEADERS)

        response: Response = await call_next(request)
        for name, value in CORS_HEADERS.items():
            response.headers[name] = value
        return response
