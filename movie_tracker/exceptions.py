"""
Error taxonomy for Movie Tracker

Only ConfigurationError is fatal (raised at startup). Upstream errors are
caught by TMDBService and turned into mock data; auth and persistence
failures are returned as result objects by the services.
"""
from typing import Optional


class ConfigurationError(RuntimeError):
    """Startup configuration is missing or insecure for the current environment"""


class UpstreamError(Exception):
    """Base class for failures talking to the TMDB API"""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class UpstreamUnauthorized(UpstreamError):
    """TMDB rejected the credential (401/403)"""


class UpstreamUntrusted(UpstreamUnauthorized):
    """Credential is missing or a placeholder; no request was sent"""


class UpstreamHttpError(UpstreamError):
    """TMDB answered with a non-2xx status other than 401/403, or an unreadable body"""


class UpstreamNetworkError(UpstreamError):
    """Transport failure: DNS, connection refused, timeout..."""
