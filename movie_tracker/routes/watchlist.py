from fastapi import APIRouter, Depends, Path, Response, status
from sqlalchemy.orm import Session
from typing import List, Optional

from movie_tracker.database import get_db
from movie_tracker.utils.dependencies import get_current_user, get_optional_user
from movie_tracker.models.user import User
from movie_tracker.schemas.results import ActionResult, status_for
from movie_tracker.schemas.watchlist import (
    WatchlistAdd,
    WatchlistResponse,
    WatchlistCheck,
)
from movie_tracker.services.watchlist_service import WatchlistService

router = APIRouter(prefix="/api/watchlist", tags=["Watchlist"])


# ==================== WATCHLIST ENDPOINTS ====================

@router.post("/", response_model=ActionResult, status_code=status.HTTP_201_CREATED)
def add_to_watchlist(
    watchlist_data: WatchlistAdd,
    response: Response,
    current_user: Optional[User] = Depends(get_optional_user),
    db: Session = Depends(get_db)
):
    """
    Add a movie to user's watchlist

    - **movie_id**: TMDB movie ID (required)
    - **title**, **poster_path**, **vote_average**: display snapshot of the movie
    """
    result = WatchlistService.add_to_watchlist(db, current_user, watchlist_data)
    response.status_code = status_for(result, status.HTTP_201_CREATED)
    return result


@router.get("/", response_model=List[WatchlistResponse])
def get_watchlist(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Get user's watchlist, most recently added first"""
    return WatchlistService.get_watchlist(db, current_user)


@router.get("/check/{movie_id}", response_model=WatchlistCheck)
def check_in_watchlist(
    movie_id: int = Path(..., gt=0),
    current_user: Optional[User] = Depends(get_optional_user),
    db: Session = Depends(get_db)
):
    """Check if a movie is in the watchlist (always false when logged out)"""
    return WatchlistCheck(
        movie_id=movie_id,
        in_watchlist=WatchlistService.is_in_watchlist(db, current_user, movie_id)
    )


@router.delete("/{movie_id}", response_model=ActionResult)
def remove_from_watchlist(
    response: Response,
    movie_id: int = Path(..., gt=0),
    current_user: Optional[User] = Depends(get_optional_user),
    db: Session = Depends(get_db)
):
    """Remove a movie from the watchlist by its TMDB id"""
    result = WatchlistService.remove_from_watchlist(db, current_user, movie_id)
    response.status_code = status_for(result)
    return result
