"""
Import all models to ensure they are registered with SQLAlchemy
"""
from movie_tracker.models.user import User
from movie_tracker.models.watchlist import WatchlistItem
from movie_tracker.models.rating import Rating
from movie_tracker.models.view_history import ViewHistory

__all__ = [
    "User",
    "WatchlistItem",
    "Rating",
    "ViewHistory",
]
