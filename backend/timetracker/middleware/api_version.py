"""
Adds `api-supported-versions` to every /api/ response.

Applies to error responses and to handlers returning a bare Response as
well as to regular JSON bodies.
"""

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from timetracker.versioning import SUPPORTED_VERSIONS_HEADER


class ApiVersionHeaderMiddleware(BaseHTTPMiddleware):
    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        response = await call_next(request)
        if request.url.path.startswith("/api/"):
            response.headers["api-supported-versions"] = SUPPORTED_VERSIONS_HEADER
        return response
