"""
Security middleware for the Movie Tracker API
Implements security headers and CORS headers for error responses
"""
from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response
from typing import Iterable, Optional
import logging

logger = logging.getLogger(__name__)

# Loosened for Swagger UI (jsdelivr CDN) and YouTube trailers
CSP_DIRECTIVES = [
    "default-src 'self'",
    "script-src 'self' 'unsafe-inline' https://www.youtube.com https://cdn.jsdelivr.net",
    "style-src 'self' 'unsafe-inline' https://cdn.jsdelivr.net https://fonts.googleapis.com",
    "img-src 'self' https://image.tmdb.org https://fastapi.tiangolo.com data:",
    "font-src 'self' https://fonts.gstatic.com",
    "frame-src https://www.youtube.com",
    "connect-src 'self' https://api.themoviedb.org",
]

CORS_METHODS = "GET, POST, PUT, PATCH, DELETE, OPTIONS"


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """Add security headers (XSS, CSP, HSTS, etc.)"""

    def __init__(self, app, enable_hsts: bool = False):
        super().__init__(app)
        self.enable_hsts = enable_hsts

    async def dispatch(self, request: Request, call_next):
        response = await call_next(request)

        # XSS Protection & Clickjacking
        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["X-Frame-Options"] = "DENY"
        response.headers["X-XSS-Protection"] = "1; mode=block"

        # HSTS only makes sense behind TLS
        if self.enable_hsts:
            response.headers["Strict-Transport-Security"] = "max-age=31536000; includeSubDomains"

        response.headers["Content-Security-Policy"] = "; ".join(CSP_DIRECTIVES)

        # Additional headers
        response.headers["Referrer-Policy"] = "strict-origin-when-cross-origin"
        response.headers["Permissions-Policy"] = "geolocation=(), microphone=(), camera=()"

        return response


def add_cors_headers(response: Response, origin: Optional[str], allowed_origins: Iterable[str]) -> Response:
    """
    Copy CORS headers onto a response built by an exception handler.

    Error responses produced outside the CORS middleware (401s in particular)
    would otherwise be unreadable by the frontend.
    """
    if origin and origin in allowed_origins:
        response.headers["Access-Control-Allow-Origin"] = origin
        response.headers["Access-Control-Allow-Credentials"] = "true"
        response.headers["Access-Control-Allow-Methods"] = CORS_METHODS
        response.headers["Access-Control-Allow-Headers"] = "*"
        response.headers["Access-Control-Expose-Headers"] = "*"
    return response
