"""
TMDB Service
============
Cached access to TMDB with graceful degradation to the mock dataset.

Every public operation is bound to one cache policy with @cache_policy and
only describes its request; the shared resolution logic is:

1. Fresh cache entry -> return it
2. Otherwise call TMDB; on success cache and return the payload
3. On any upstream failure return mock data (never cached)
4. If even the mock provider fails, serve a stale entry or an empty payload

Read paths never raise: page rendering must not break because TMDB is
unreachable or misconfigured.
"""
from copy import deepcopy
from dataclasses import dataclass
from functools import wraps
from typing import Any, Callable, Dict, Optional
import logging

from movie_tracker.config import Settings
from movie_tracker.exceptions import UpstreamError, UpstreamUnauthorized
from movie_tracker.services.metadata import Endpoint, MetadataRequest
from movie_tracker.services.mock_data import MockProvider, mock_for
from movie_tracker.services.tmdb_client import TMDBClient
from movie_tracker.utils.cache import CachePolicy, CacheStore, POLICIES

logger = logging.getLogger(__name__)


@dataclass
class TMDBContext:
    """Collaborators of TMDBService, built once at startup"""
    client: TMDBClient
    cache: CacheStore
    mock_provider: MockProvider = mock_for


def cache_policy(name: str):
    """
    Bind a TMDBService operation to a named cache policy.

    The decorated method returns the MetadataRequest describing the call;
    the wrapper resolves it through the cache / TMDB / mock chain.

    Usage:
        @cache_policy("trending")
        def get_popular(self, locale="en", page=1):
            return MetadataRequest.build(Endpoint.POPULAR, locale, page)
    """
    policy = POLICIES[name]

    def decorator(func: Callable[..., MetadataRequest]) -> Callable[..., Dict[str, Any]]:
        @wraps(func)
        def wrapper(self: "TMDBService", *args, **kwargs) -> Dict[str, Any]:
            request = func(self, *args, **kwargs)
            return self._resolve(func.__name__, request, policy)

        # Expose policy for route-level Cache-Control headers
        wrapper.policy = policy
        return wrapper

    return decorator


class TMDBService:
    """
    Named TMDB operations, each cached under one policy.

    Usage:
        service = TMDBService(TMDBContext(client=TMDBClient(token), cache=CacheStore()))
        service.get_trending("en", "week")
    """

    def __init__(self, context: TMDBContext):
        self.context = context

    @property
    def is_live(self) -> bool:
        """True when real TMDB calls are attempted (credential is usable)"""
        return self.context.client.is_trusted

    def _resolve(self, operation: str, request: MetadataRequest, policy: CachePolicy) -> Dict[str, Any]:
        cache = self.context.cache
        key = request.cache_key(operation)

        entry = cache.get_entry(key)
        if entry is not None and entry.is_fresh(cache.now()):
            logger.debug(f"Cache hit for {operation} ({request.locale}, page {request.page})")
            return deepcopy(entry.value)

        logger.debug(f"Cache miss for {operation}")
        try:
            payload = self.context.client.fetch_resource(request.path, request.query_params())
        except UpstreamUnauthorized as e:
            logger.warning(f"Falling back to mock data for {operation}: {str(e)}")
            return self._fallback(operation, request, entry)
        except UpstreamError as e:
            logger.error(f"TMDB request failed for {operation}, serving mock data: {str(e)}")
            return self._fallback(operation, request, entry)

        cache.set(key, payload, policy, tags=request.tags())
        return deepcopy(payload)

    def _fallback(self, operation: str, request: MetadataRequest, entry) -> Dict[str, Any]:
        try:
            return self.context.mock_provider(request)
        except Exception:
            logger.exception(f"Mock provider failed for {operation}")
            if entry is not None:
                logger.warning(f"Serving stale cache entry for {operation}")
                return deepcopy(entry.value)
            return request.empty_payload()

    # ==================== LISTS ====================

    @cache_policy("trending")
    def get_trending(self, locale: str = "en", time_window: str = "week", page: int = 1) -> MetadataRequest:
        """Trending movies for the day or the week"""
        return MetadataRequest.build(Endpoint.TRENDING, locale, page, time_window=time_window)

    @cache_policy("trending")
    def get_popular(self, locale: str = "en", page: int = 1) -> MetadataRequest:
        return MetadataRequest.build(Endpoint.POPULAR, locale, page)

    @cache_policy("trending")
    def get_top_rated(self, locale: str = "en", page: int = 1) -> MetadataRequest:
        return MetadataRequest.build(Endpoint.TOP_RATED, locale, page)

    @cache_policy("trending")
    def get_now_playing(self, locale: str = "en", page: int = 1) -> MetadataRequest:
        """Movies currently in theaters"""
        return MetadataRequest.build(Endpoint.NOW_PLAYING, locale, page)

    @cache_policy("trending")
    def get_upcoming(self, locale: str = "en", page: int = 1) -> MetadataRequest:
        return MetadataRequest.build(Endpoint.UPCOMING, locale, page)

    # ==================== SEARCH & DISCOVER ====================

    @cache_policy("search")
    def search_movies(self, query: str, locale: str = "en", page: int = 1) -> MetadataRequest:
        """Search movies by title (adult titles excluded)"""
        return MetadataRequest.build(Endpoint.SEARCH, locale, page, query=query.strip())

    @cache_policy("search")
    def discover_movies(
        self,
        locale: str = "en",
        page: int = 1,
        sort_by: str = "popularity.desc",
        with_genres: Optional[str] = None,
        year: Optional[int] = None,
        vote_average_gte: Optional[float] = None,
    ) -> MetadataRequest:
        """
        Discover movies with filters.
        Supports: genres (comma-separated IDs, all required), release year, minimum rating, sort.
        """
        return MetadataRequest.build(
            Endpoint.DISCOVER,
            locale,
            page,
            sort_by=sort_by or "popularity.desc",
            with_genres=with_genres or None,
            primary_release_year=year or None,
            **{"vote_average.gte": vote_average_gte or None},
        )

    # ==================== MOVIE ====================

    @cache_policy("movie")
    def get_movie_details(self, movie_id: int, locale: str = "en") -> MetadataRequest:
        return MetadataRequest.build(Endpoint.MOVIE_DETAILS, locale, 1, movie_id=movie_id)

    @cache_policy("movie")
    def get_movie_credits(self, movie_id: int, locale: str = "en") -> MetadataRequest:
        """Cast and crew"""
        return MetadataRequest.build(Endpoint.MOVIE_CREDITS, locale, 1, movie_id=movie_id)

    @cache_policy("movie")
    def get_movie_recommendations(self, movie_id: int, locale: str = "en", page: int = 1) -> MetadataRequest:
        return MetadataRequest.build(Endpoint.RECOMMENDATIONS, locale, page, movie_id=movie_id)

    @cache_policy("movie")
    def get_similar_movies(self, movie_id: int, locale: str = "en", page: int = 1) -> MetadataRequest:
        return MetadataRequest.build(Endpoint.SIMILAR, locale, page, movie_id=movie_id)

    # ==================== GENRES ====================

    @cache_policy("genres")
    def get_genres(self, locale: str = "en") -> MetadataRequest:
        """Genre list ({"genres": [{id, name}, ...]}); changes rarely"""
        return MetadataRequest.build(Endpoint.GENRES, locale, 1)

    # ==================== CACHE MANAGEMENT ====================

    def invalidate(self, tag: str) -> int:
        """Drop cached responses tagged with tag (e.g. "trending", "movie-550")"""
        return self.context.cache.invalidate_tag(tag)

    def clear_cache(self) -> None:
        self.context.cache.clear()

    def cache_stats(self) -> dict:
        stats = self.context.cache.get_stats()
        stats["upstream"] = "live" if self.is_live else "mock"
        return stats

    def close(self) -> None:
        self.context.client.close()


def build_tmdb_service(settings: Settings) -> TMDBService:
    """Wire the production TMDBService from settings"""
    client = TMDBClient(
        settings.tmdb_access_token,
        base_url=settings.tmdb_base_url,
        timeout=settings.tmdb_timeout,
    )
    cache = CacheStore(max_size=settings.cache_max_size)
    return TMDBService(TMDBContext(client=client, cache=cache))
