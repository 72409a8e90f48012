"""
API Key Authentication Middleware
=================================
Protects API endpoints with secret key authentication and
resolves the caller's audience from the key
"""

from typing import Optional

from fastapi import Request, status
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import JSONResponse

from mobiya.config import settings


def resolve_audience(api_key: str) -> Optional[str]:
    """
    Map an API key to an audience.

    Returns:
        'employee' for settings.employee_api_key, 'public' for
        settings.api_secret_key, None for anything else
    """
    if settings.employee_api_key and api_key == settings.employee_api_key:
        return "employee"
    if api_key == settings.api_secret_key:
        return "public"
    return None


class APIKeyMiddleware(BaseHTTPMiddleware):
    """
    Middleware to validate API key for protected endpoints

    The API key should be sent in the header:
    - Header name: X-API-Key
    - Header value: <your-secret-key>

    On success the audience is stored on request.state.audience.

    Public endpoints (no auth required):
    - / (root)
    - /health
    - /docs
    - /redoc
    - /openapi.json
    """

    # Endpoints that don't require authentication
    PUBLIC_PATHS = {
        "/",
        "/health",
        "/docs",
        "/redoc",
        "/openapi.json",
    }

    async def dispatch(self, request: Request, call_next):
        """
        Enforce API key authentication for non-public paths.

        - 401 MISSING_API_KEY if the X-API-Key header is absent
        - 403 INVALID_API_KEY if it matches neither configured key
        """
        if request.url.path in self.PUBLIC_PATHS:
            return await call_next(request)

        # CORS preflight
        if request.method == "OPTIONS":
            return await call_next(request)

        api_key = request.headers.get("X-API-Key")

        if not api_key:
            return JSONResponse(
                status_code=status.HTTP_401_UNAUTHORIZED,
                content={
                    "detail": "Missing API key. Please provide X-API-Key header.",
                    "code": "MISSING_API_KEY"
                }
            )

        audience = resolve_audience(api_key)
        if audience is None:
            return JSONResponse(
                status_code=status.HTTP_403_FORBIDDEN,
                content={
                    "detail": "Invalid API key.",
                    "code": "INVALID_API_KEY"
                }
            )

        request.state.audience = audience
        return await call_next(request)


def get_audience(request: Request) -> str:
    """Dependency returning the audience resolved by APIKeyMiddleware"""
    return getattr(request.state, "audience", "public")
