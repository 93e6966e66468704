"""
Movie endpoint schemas
"""
from pydantic import BaseModel, ConfigDict
from typing import List
from enum import Enum


class SortOption(str, Enum):
    """Available sort options for movie discovery"""
    POPULARITY_DESC = "popularity.desc"
    POPULARITY_ASC = "popularity.asc"
    VOTE_AVERAGE_DESC = "vote_average.desc"
    VOTE_AVERAGE_ASC = "vote_average.asc"
    RELEASE_DATE_DESC = "release_date.desc"
    RELEASE_DATE_ASC = "release_date.asc"
    REVENUE_DESC = "revenue.desc"
    REVENUE_ASC = "revenue.asc"


class TimeWindow(str, Enum):
    """Time window for trending movies"""
    DAY = "day"
    WEEK = "week"


class BrowseCategory(str, Enum):
    """Categories offered by the browse listing"""
    TRENDING = "trending"
    POPULAR = "popular"
    NOW_PLAYING = "now_playing"
    UPCOMING = "upcoming"


class MovieListResponse(BaseModel):
    """Standard response for movie list endpoints"""
    page: int
    total_pages: int
    total_results: int
    results: List[dict]

    model_config = ConfigDict(extra="allow")


class GenreResponse(BaseModel):
    id: int
    name: str


class GenreListResponse(BaseModel):
    """Response for genres endpoint"""
    genres: List[GenreResponse]


class CreditsResponse(BaseModel):
    cast: List[dict] = []
    crew: List[dict] = []

    model_config = ConfigDict(extra="allow")
