"""
Middleware package for security and request processing
"""
from .security import SecurityHeadersMiddleware, add_cors_headers

__all__ = [
    "SecurityHeadersMiddleware",
    "add_cors_headers"
]
