from sqlalchemy.orm import Session
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from typing import List, Optional
import logging

from movie_tracker.models.user import User
from movie_tracker.models.watchlist import WatchlistItem
from movie_tracker.schemas.results import ActionResult, FailureKind
from movie_tracker.schemas.watchlist import WatchlistAdd

logger = logging.getLogger(__name__)


class WatchlistService:
    """Service for watchlist operations (one entry per user and movie)"""

    @staticmethod
    def add_to_watchlist(db: Session, user: Optional[User], watchlist_data: WatchlistAdd) -> ActionResult:
        """Add a movie to user's watchlist"""
        if user is None:
            return ActionResult.fail("Please login to add movies to your watchlist", FailureKind.AUTHORIZATION)

        existing = db.query(WatchlistItem).filter(
            WatchlistItem.user_id == user.id,
            WatchlistItem.movie_id == watchlist_data.movie_id
        ).first()
        if existing:
            return ActionResult.fail("Movie already in watchlist", FailureKind.CONFLICT)

        db.add(WatchlistItem(
            user_id=user.id,
            movie_id=watchlist_data.movie_id,
            title=watchlist_data.title,
            poster_path=watchlist_data.poster_path,
            vote_average=watchlist_data.vote_average,
        ))
        try:
            db.commit()
        except IntegrityError:
            # Lost a race with a concurrent add of the same movie
            db.rollback()
            return ActionResult.fail("Movie already in watchlist", FailureKind.CONFLICT)
        except SQLAlchemyError as e:
            db.rollback()
            logger.error(f"Add to watchlist error: {str(e)}")
            return ActionResult.fail("Failed to add to watchlist")

        return ActionResult.ok()

    @staticmethod
    def remove_from_watchlist(db: Session, user: Optional[User], movie_id: int) -> ActionResult:
        """Remove a movie (by TMDB id) from watchlist"""
        if user is None:
            return ActionResult.fail("Please login first", FailureKind.AUTHORIZATION)

        item = db.query(WatchlistItem).filter(
            WatchlistItem.user_id == user.id,
            WatchlistItem.movie_id == movie_id
        ).first()
        if not item:
            return ActionResult.fail("Movie not in watchlist", FailureKind.NOT_FOUND)

        try:
            db.delete(item)
            db.commit()
        except SQLAlchemyError as e:
            db.rollback()
            logger.error(f"Remove from watchlist error: {str(e)}")
            return ActionResult.fail("Failed to remove from watchlist")

        return ActionResult.ok()

    @staticmethod
    def is_in_watchlist(db: Session, user: Optional[User], movie_id: int) -> bool:
        """Anonymous users never have anything in their watchlist"""
        if user is None:
            return False
        return db.query(WatchlistItem.id).filter(
            WatchlistItem.user_id == user.id,
            WatchlistItem.movie_id == movie_id
        ).first() is not None

    @staticmethod
    def get_watchlist(db: Session, user: User) -> List[WatchlistItem]:
        """User's watchlist, most recently added first"""
        return db.query(WatchlistItem).filter(
            WatchlistItem.user_id == user.id
        ).order_by(WatchlistItem.added_at.desc(), WatchlistItem.id.desc()).all()
