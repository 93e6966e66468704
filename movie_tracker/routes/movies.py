from fastapi import APIRouter, Depends, HTTPException, Path, Query, Response
from pydantic import ValidationError
from sqlalchemy.orm import Session
from typing import Optional

from movie_tracker.database import get_db
from movie_tracker.models.user import User
from movie_tracker.schemas.movies import (
    BrowseCategory,
    CreditsResponse,
    GenreListResponse,
    MovieListResponse,
    SortOption,
    TimeWindow,
)
from movie_tracker.schemas.validation import SearchQuerySchema
from movie_tracker.services.history_service import HistoryService
from movie_tracker.services.tmdb_service import TMDBService
from movie_tracker.utils.dependencies import get_locale, get_optional_user, get_tmdb_service

router = APIRouter(prefix="/api/movies", tags=["Movies"])


def _with_cache_headers(response: Response, operation) -> None:
    """Advertise the operation's cache policy to browsers and CDNs"""
    response.headers["Cache-Control"] = operation.policy.cache_control()


# ============================================
# Trending, Popular, Top Rated, Now Playing, Upcoming
# ============================================

@router.get("/trending/{time_window}", response_model=MovieListResponse)
def get_trending(
    response: Response,
    time_window: TimeWindow,
    page: int = Query(1, ge=1, le=500),
    locale: str = Depends(get_locale),
    tmdb: TMDBService = Depends(get_tmdb_service)
):
    """Get trending movies (day/week)"""
    _with_cache_headers(response, TMDBService.get_trending)
    return tmdb.get_trending(locale, time_window.value, page)


@router.get("/popular", response_model=MovieListResponse)
def get_popular(
    response: Response,
    page: int = Query(1, ge=1, le=500),
    locale: str = Depends(get_locale),
    tmdb: TMDBService = Depends(get_tmdb_service)
):
    _with_cache_headers(response, TMDBService.get_popular)
    return tmdb.get_popular(locale, page)


@router.get("/top-rated", response_model=MovieListResponse)
def get_top_rated(
    response: Response,
    page: int = Query(1, ge=1, le=500),
    locale: str = Depends(get_locale),
    tmdb: TMDBService = Depends(get_tmdb_service)
):
    _with_cache_headers(response, TMDBService.get_top_rated)
    return tmdb.get_top_rated(locale, page)


@router.get("/now-playing", response_model=MovieListResponse)
def get_now_playing(
    response: Response,
    page: int = Query(1, ge=1, le=500),
    locale: str = Depends(get_locale),
    tmdb: TMDBService = Depends(get_tmdb_service)
):
    _with_cache_headers(response, TMDBService.get_now_playing)
    return tmdb.get_now_playing(locale, page)


@router.get("/upcoming", response_model=MovieListResponse)
def get_upcoming(
    response: Response,
    page: int = Query(1, ge=1, le=500),
    locale: str = Depends(get_locale),
    tmdb: TMDBService = Depends(get_tmdb_service)
):
    _with_cache_headers(response, TMDBService.get_upcoming)
    return tmdb.get_upcoming(locale, page)


@router.get("/browse", response_model=MovieListResponse)
def browse_movies(
    response: Response,
    category: BrowseCategory = Query(BrowseCategory.POPULAR),
    page: int = Query(1, ge=1, le=500),
    locale: str = Depends(get_locale),
    tmdb: TMDBService = Depends(get_tmdb_service)
):
    """
    "View all" listing for one home-page category

    - trending always uses the weekly window
    """
    _with_cache_headers(response, TMDBService.get_popular)
    if category == BrowseCategory.TRENDING:
        return tmdb.get_trending(locale, TimeWindow.WEEK.value, page)
    if category == BrowseCategory.NOW_PLAYING:
        return tmdb.get_now_playing(locale, page)
    if category == BrowseCategory.UPCOMING:
        return tmdb.get_upcoming(locale, page)
    return tmdb.get_popular(locale, page)


# ============================================
# Search & Discovery
# ============================================

@router.get("/search", response_model=MovieListResponse)
def search_movies(
    response: Response,
    query: str = Query("", max_length=200, description="Search query"),
    page: int = Query(1, ge=1, le=500, description="Page number"),
    locale: str = Depends(get_locale),
    tmdb: TMDBService = Depends(get_tmdb_service)
):
    """
    Simple text search for movies

    Used for: search bar; an empty query returns an empty page
    """
    try:
        search_params = SearchQuerySchema(query=query)
    except ValidationError:
        raise HTTPException(status_code=422, detail="Invalid search query")
    _with_cache_headers(response, TMDBService.search_movies)
    return tmdb.search_movies(search_params.query, locale, page)


@router.get("/discover", response_model=MovieListResponse)
def discover_movies(
    response: Response,
    genre: Optional[str] = Query(None, pattern=r"^\d+(,\d+)*$", description="Genre IDs (comma-separated)"),
    year: Optional[int] = Query(None, ge=1900, le=2100, description="Release year"),
    min_rating: Optional[float] = Query(None, ge=0, le=10, description="Minimum rating"),
    sort_by: SortOption = Query(SortOption.POPULARITY_DESC, description="Sort option"),
    page: int = Query(1, ge=1, le=500, description="Page number"),
    locale: str = Depends(get_locale),
    tmdb: TMDBService = Depends(get_tmdb_service)
):
    """
    Movie discovery with filters

    - genre: e.g. "28,12" for Action+Adventure (all required)
    - year: primary release year
    - min_rating: minimum vote average (0-10)
    - sort_by: popularity.desc, vote_average.desc, ...
    """
    _with_cache_headers(response, TMDBService.discover_movies)
    return tmdb.discover_movies(
        locale,
        page=page,
        sort_by=sort_by.value,
        with_genres=genre,
        year=year,
        vote_average_gte=min_rating,
    )


@router.get("/genres", response_model=GenreListResponse)
def get_genres(
    response: Response,
    locale: str = Depends(get_locale),
    tmdb: TMDBService = Depends(get_tmdb_service)
):
    """Get list of all available movie genres"""
    _with_cache_headers(response, TMDBService.get_genres)
    return tmdb.get_genres(locale)


# ============================================
# Movie Details (MUST be last - dynamic routes)
# ============================================

@router.get("/{movie_id}/credits", response_model=CreditsResponse)
def get_movie_credits(
    response: Response,
    movie_id: int = Path(..., gt=0),
    locale: str = Depends(get_locale),
    tmdb: TMDBService = Depends(get_tmdb_service)
):
    _with_cache_headers(response, TMDBService.get_movie_credits)
    return tmdb.get_movie_credits(movie_id, locale)


@router.get("/{movie_id}/recommendations", response_model=MovieListResponse)
def get_movie_recommendations(
    response: Response,
    movie_id: int = Path(..., gt=0),
    page: int = Query(1, ge=1, le=500),
    locale: str = Depends(get_locale),
    tmdb: TMDBService = Depends(get_tmdb_service)
):
    _with_cache_headers(response, TMDBService.get_movie_recommendations)
    return tmdb.get_movie_recommendations(movie_id, locale, page)


@router.get("/{movie_id}/similar", response_model=MovieListResponse)
def get_similar_movies(
    response: Response,
    movie_id: int = Path(..., gt=0),
    page: int = Query(1, ge=1, le=500),
    locale: str = Depends(get_locale),
    tmdb: TMDBService = Depends(get_tmdb_service)
):
    _with_cache_headers(response, TMDBService.get_similar_movies)
    return tmdb.get_similar_movies(movie_id, locale, page)


@router.get("/{movie_id}")
def get_movie_details(
    response: Response,
    movie_id: int = Path(..., gt=0),
    locale: str = Depends(get_locale),
    tmdb: TMDBService = Depends(get_tmdb_service),
    current_user: Optional[User] = Depends(get_optional_user),
    db: Session = Depends(get_db)
):
    """Get movie details by ID; records a view for logged-in users"""
    movie = tmdb.get_movie_details(movie_id, locale)
    # Stand-in or empty fallback payloads describe some other movie (or none)
    if movie.get("id") == movie_id and movie.get("title"):
        HistoryService.add_to_view_history(db, current_user, movie_id, movie["title"], movie.get("poster_path"))

    _with_cache_headers(response, TMDBService.get_movie_details)
    if current_user is not None:
        # Personalised response must not be shared by caches
        response.headers["Cache-Control"] = "private, no-store"
    return movie
