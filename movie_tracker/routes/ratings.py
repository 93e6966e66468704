"""
Rating Routes - API endpoints for movie rating system
Follows RESTful conventions and watchlist routes pattern
"""

from fastapi import APIRouter, Depends, Response, Query, Path
from sqlalchemy.orm import Session
from typing import List, Optional

from movie_tracker.database import get_db
from movie_tracker.utils.dependencies import get_current_user, get_optional_user
from movie_tracker.models.user import User
from movie_tracker.schemas.rating import (
    RatingCreate,
    RatingResponse,
    UserRatingForMovie
)
from movie_tracker.schemas.results import ActionResult, status_for
from movie_tracker.services.rating_service import RatingService

router = APIRouter(prefix="/api/ratings", tags=["Ratings"])


# ==================== RATING ENDPOINTS ====================

@router.post("/", response_model=ActionResult)
def rate_movie(
    rating_data: RatingCreate,
    response: Response,
    current_user: Optional[User] = Depends(get_optional_user),
    db: Session = Depends(get_db)
):
    """
    Add a new rating or update existing one for a movie

    - **movie_id**: TMDB movie ID (required)
    - **rating**: Rating value from 1 to 10 (required)

    If user has already rated this movie, the rating will be updated.
    Otherwise, a new rating will be created.
    """
    result = RatingService.rate_movie(db, current_user, rating_data)
    response.status_code = status_for(result)
    return result


@router.get("/movie/{movie_id}", response_model=UserRatingForMovie)
def get_my_rating_for_movie(
    movie_id: int = Path(..., gt=0, description="TMDB movie ID"),
    current_user: Optional[User] = Depends(get_optional_user),
    db: Session = Depends(get_db)
):
    """
    Check if current user has rated a specific movie

    Returns the rating value, or null when not rated (or not logged in)
    """
    return UserRatingForMovie(
        movie_id=movie_id,
        rating=RatingService.get_movie_rating(db, current_user, movie_id)
    )


@router.get("/user/me", response_model=List[RatingResponse])
def get_my_ratings(
    skip: int = Query(0, ge=0, description="Pagination offset"),
    limit: int = Query(100, ge=1, le=200, description="Max results per page"),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """
    Get all ratings by current user

    Ordered by most recently updated first
    """
    return RatingService.get_user_ratings(db, current_user, skip, limit)
