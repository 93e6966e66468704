"""
TMDB request description shared by the client, the mock provider and the cache.
"""
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional, Tuple

from movie_tracker.utils.cache import make_key

PAGE_SIZE = 20


class Endpoint(str, Enum):
    """Endpoint categories served by TMDBService"""
    TRENDING = "trending"
    POPULAR = "popular"
    TOP_RATED = "top-rated"
    NOW_PLAYING = "now-playing"
    UPCOMING = "upcoming"
    SEARCH = "search"
    MOVIE_DETAILS = "movie-details"
    MOVIE_CREDITS = "movie-credits"
    RECOMMENDATIONS = "recommendations"
    SIMILAR = "similar"
    GENRES = "genres"
    DISCOVER = "discover"


# Paginated list endpoints under /movie/<list>
MOVIE_LISTS = {
    Endpoint.POPULAR: "popular",
    Endpoint.TOP_RATED: "top_rated",
    Endpoint.NOW_PLAYING: "now_playing",
    Endpoint.UPCOMING: "upcoming",
}

# Endpoints whose upstream call takes a page parameter
PAGINATED = {
    Endpoint.TRENDING, Endpoint.POPULAR, Endpoint.TOP_RATED, Endpoint.NOW_PLAYING,
    Endpoint.UPCOMING, Endpoint.SEARCH, Endpoint.RECOMMENDATIONS, Endpoint.SIMILAR,
    Endpoint.DISCOVER,
}


def empty_page(page: int = 1) -> Dict[str, Any]:
    return {"page": page, "results": [], "total_pages": 0, "total_results": 0}


@dataclass(frozen=True)
class MetadataRequest:
    """
    One cacheable TMDB request.

    params holds the endpoint-specific values (query, movie_id, time_window,
    discover filters) as sorted (name, value) pairs; None values are dropped.
    """
    endpoint: Endpoint
    locale: str = "en"
    page: int = 1
    params: Tuple[Tuple[str, Any], ...] = field(default_factory=tuple)

    @classmethod
    def build(cls, endpoint: Endpoint, locale: str = "en", page: int = 1, **params) -> "MetadataRequest":
        clean = tuple(sorted((k, v) for k, v in params.items() if v is not None))
        return cls(endpoint=endpoint, locale=locale, page=page, params=clean)

    def param(self, name: str, default: Any = None) -> Any:
        return dict(self.params).get(name, default)

    @property
    def movie_id(self) -> Optional[int]:
        value = self.param("movie_id")
        return int(value) if value is not None else None

    @property
    def path(self) -> str:
        """Upstream path relative to the API base URL"""
        endpoint = self.endpoint
        if endpoint == Endpoint.TRENDING:
            return f"/trending/movie/{self.param('time_window', 'week')}"
        if endpoint in MOVIE_LISTS:
            return f"/movie/{MOVIE_LISTS[endpoint]}"
        if endpoint == Endpoint.SEARCH:
            return "/search/movie"
        if endpoint == Endpoint.MOVIE_DETAILS:
            return f"/movie/{self.movie_id}"
        if endpoint == Endpoint.MOVIE_CREDITS:
            return f"/movie/{self.movie_id}/credits"
        if endpoint == Endpoint.RECOMMENDATIONS:
            return f"/movie/{self.movie_id}/recommendations"
        if endpoint == Endpoint.SIMILAR:
            return f"/movie/{self.movie_id}/similar"
        if endpoint == Endpoint.GENRES:
            return "/genre/movie/list"
        return "/discover/movie"

    def query_params(self) -> Dict[str, str]:
        """Query string for the upstream call"""
        query = {"language": self.locale}
        if self.endpoint in PAGINATED:
            query["page"] = str(self.page)

        if self.endpoint == Endpoint.SEARCH:
            query["query"] = str(self.param("query", ""))
            query["include_adult"] = "false"
        elif self.endpoint == Endpoint.DISCOVER:
            query["include_adult"] = "false"
            for name, value in self.params:
                query[name] = str(value)
        return query

    def tags(self) -> Tuple[str, ...]:
        """Cache tags, one per endpoint group or movie resource"""
        movie_id = self.movie_id
        if self.endpoint == Endpoint.MOVIE_DETAILS:
            return (f"movie-{movie_id}",)
        if self.endpoint == Endpoint.MOVIE_CREDITS:
            return (f"movie-{movie_id}", f"movie-{movie_id}-credits")
        if self.endpoint == Endpoint.RECOMMENDATIONS:
            return (f"movie-{movie_id}", f"movie-{movie_id}-recommendations")
        if self.endpoint == Endpoint.SIMILAR:
            return (f"movie-{movie_id}", f"movie-{movie_id}-similar")
        return (self.endpoint.value,)

    def cache_key(self, operation: str) -> str:
        return make_key(operation, self.locale, self.page, self.params)

    def empty_payload(self) -> Dict[str, Any]:
        """Empty response of the right shape for this endpoint"""
        if self.endpoint == Endpoint.GENRES:
            return {"genres": []}
        if self.endpoint == Endpoint.MOVIE_CREDITS:
            return {"id": self.movie_id, "cast": [], "crew": []}
        if self.endpoint == Endpoint.MOVIE_DETAILS:
            return {"id": self.movie_id}
        return empty_page(self.page)
