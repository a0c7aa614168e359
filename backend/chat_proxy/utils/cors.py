"""
CORS headers attached to every response.

Starlette's CORSMiddleware only answers real preflights (requests carrying
Origin and Access-Control-Request-Method). Browser clients and plain tools
both need the same three headers on every response, and any OPTIONS request
is answered with 204 without reaching the routes.
"""

from collections.abc import Awaitable, Callable

from fastapi import Request, Response, status
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.types import ASGIApp

ALLOWED_METHODS = "POST, OPTIONS"
ALLOWED_HEADERS = "Content-Type, Authorization"


def cors_headers(allow_origin: str) -> dict[str, str]:
    return {
        "Access-Control-Allow-Origin": allow_origin,
        "Access-Control-Allow-Methods": ALLOWED_METHODS,
        "Access-Control-Allow-Headers": ALLOWED_HEADERS,
    }


class CORSHeadersMiddleware(BaseHTTPMiddleware):
    """Answer OPTIONS with 204 and stamp CORS headers on every response."""

    def __init__(self, app: ASGIApp, allow_origin: str = "*"):
        super().__init__(app)
        self.headers = cors_headers(allow_origin)

    async def dispatch(
        self,
        request: Request,
        call_next: Callable[[Request], Awaitable[Response]],
    ) -> Response:
        if request.method == "OPTIONS":
            return Response(status_code=status.HTTP_204_NO_CONTENT, headers=self.headers)

        response = await call_next(request)
        response.headers.update(self.headers)
        return response
