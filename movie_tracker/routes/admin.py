"""
Admin Routes for the TMDB response cache

Features:
- Cache statistics (hits, misses, entries, policies)
- Tag invalidation (e.g. "trending", "movie-550")
- Full cache clear

All endpoints require authentication via get_current_user dependency
"""

import logging
from datetime import datetime, timezone

from fastapi import APIRouter, Depends, Path, status

from movie_tracker.models.user import User
from movie_tracker.services.tmdb_service import TMDBService
from movie_tracker.utils.dependencies import get_current_user, get_tmdb_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/admin/cache", tags=["Admin - Cache"])


@router.get("/stats", status_code=status.HTTP_200_OK)
def get_cache_stats(
    current_user: User = Depends(get_current_user),
    tmdb: TMDBService = Depends(get_tmdb_service)
):
    """
    Get TMDB cache statistics

    Returns:
    - Entry count and capacity
    - Hit / stale hit / miss counters
    - Policy windows per endpoint class
    - Upstream mode (live or mock)

    **Requires authentication**
    """
    return tmdb.cache_stats()


@router.post("/invalidate/{tag}", status_code=status.HTTP_200_OK)
def invalidate_cache_tag(
    tag: str = Path(..., min_length=1, max_length=100),
    current_user: User = Depends(get_current_user),
    tmdb: TMDBService = Depends(get_tmdb_service)
):
    """
    Drop every cached response carrying a tag

    **Requires authentication**
    """
    removed = tmdb.invalidate(tag)
    logger.info(f"Cache tag '{tag}' invalidated by user {current_user.id}: {removed} entries")
    return {
        "message": f"Invalidated {removed} cache entries",
        "tag": tag,
        "removed": removed,
        "invalidated_at": datetime.now(timezone.utc).isoformat(),
        "invalidated_by": current_user.email
    }


@router.post("/clear", status_code=status.HTTP_200_OK)
def clear_cache(
    current_user: User = Depends(get_current_user),
    tmdb: TMDBService = Depends(get_tmdb_service)
):
    """
    Clear the whole TMDB cache

    **Requires authentication**
    """
    tmdb.clear_cache()
    logger.info(f"Cache cleared by user {current_user.id}")
    return {
        "message": "Cache cleared",
        "cleared_at": datetime.now(timezone.utc).isoformat(),
        "cleared_by": current_user.email
    }
