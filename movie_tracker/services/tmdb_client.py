import requests
from typing import Dict, Optional
import logging

from movie_tracker.config import clean_credential, is_placeholder_credential
from movie_tracker.exceptions import (
    UpstreamHttpError,
    UpstreamNetworkError,
    UpstreamUnauthorized,
    UpstreamUntrusted,
)

logger = logging.getLogger(__name__)


# Thin HTTP client for The Movie Database API (v3, bearer-token auth)
class TMDBClient:
    BASE_URL = "https://api.themoviedb.org/3"

    def __init__(
        self,
        access_token: Optional[str],
        base_url: str = BASE_URL,
        timeout: float = 10,
        session: Optional[requests.Session] = None,
    ):
        self.access_token = clean_credential(access_token)
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()

        if not self.is_trusted:
            logger.warning("TMDB credential missing or placeholder; requests will use mock data")

    @property
    def is_trusted(self) -> bool:
        """False when the credential is empty or a known demo value"""
        return not is_placeholder_credential(self.access_token)

    def fetch_resource(self, path: str, params: Dict = None) -> Dict:
        """
        GET a TMDB resource.

        Args:
            path: API path (e.g., "/movie/popular")
            params: Query parameters

        Returns:
            Decoded JSON body

        Raises:
            UpstreamUntrusted: credential unusable, nothing was sent
            UpstreamUnauthorized: TMDB answered 401/403
            UpstreamHttpError: any other non-2xx answer or a non-JSON body
            UpstreamNetworkError: connection failure or timeout
        """
        if not self.is_trusted:
            raise UpstreamUntrusted("TMDB access token not configured")

        url = f"{self.base_url}{path}"
        headers = {
            "accept": "application/json",
            "Authorization": f"Bearer {self.access_token}",
        }

        try:
            response = self.session.get(url, params=params or {}, headers=headers, timeout=self.timeout)
        except requests.exceptions.RequestException as e:
            logger.error(f"TMDB network error for {path}: {str(e)}")
            raise UpstreamNetworkError(f"TMDB network error: {str(e)}") from e

        if response.status_code in (401, 403):
            logger.error(f"TMDB API error ({response.status_code}) for {path}: unauthorized")
            raise UpstreamUnauthorized("TMDB rejected the access token", status_code=response.status_code)

        if not response.ok:
            logger.error(f"TMDB API error ({response.status_code}): {response.reason} for {path}")
            raise UpstreamHttpError(f"TMDB API error: {response.reason}", status_code=response.status_code)

        try:
            payload = response.json()
        except ValueError as e:
            raise UpstreamHttpError("TMDB returned a non-JSON body", status_code=response.status_code) from e

        logger.debug(f"TMDB API request successful: {path}")
        return payload

    def close(self) -> None:
        self.session.close()
