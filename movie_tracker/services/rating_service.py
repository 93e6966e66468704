"""
Rating Service - Handle all rating-related business logic
Follows the same pattern as WatchlistService for consistency
"""

from sqlalchemy.orm import Session
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from typing import List, Optional
from datetime import datetime, timezone
import logging

from movie_tracker.models.rating import Rating
from movie_tracker.models.user import User
from movie_tracker.schemas.rating import RatingCreate
from movie_tracker.schemas.results import ActionResult, FailureKind

logger = logging.getLogger(__name__)


class RatingService:
    """Service for movie rating operations"""

    @staticmethod
    def _upsert(db: Session, user_id: int, rating_data: RatingCreate) -> None:
        existing_rating = db.query(Rating).filter(
            Rating.user_id == user_id,
            Rating.movie_id == rating_data.movie_id
        ).first()

        if existing_rating:
            existing_rating.rating = rating_data.rating
            existing_rating.updated_at = datetime.now(timezone.utc)
        else:
            db.add(Rating(
                user_id=user_id,
                movie_id=rating_data.movie_id,
                title=rating_data.title,
                poster_path=rating_data.poster_path,
                rating=rating_data.rating,
            ))
        db.commit()

    @staticmethod
    def rate_movie(db: Session, user: Optional[User], rating_data: RatingCreate) -> ActionResult:
        """
        Add a new rating or update existing one

        Args:
            db: Database session
            user: Current user (None when not logged in)
            rating_data: RatingCreate schema with movie_id and rating value

        Returns:
            ActionResult; at most one rating row exists per (user, movie)
        """
        if user is None:
            return ActionResult.fail("Please login to rate movies", FailureKind.AUTHORIZATION)

        try:
            RatingService._upsert(db, user.id, rating_data)
        except IntegrityError:
            # A concurrent request inserted the row first: retry as an update
            db.rollback()
            try:
                RatingService._upsert(db, user.id, rating_data)
            except SQLAlchemyError as e:
                db.rollback()
                logger.error(f"Rate movie error: {str(e)}")
                return ActionResult.fail("Failed to rate movie")
        except SQLAlchemyError as e:
            db.rollback()
            logger.error(f"Rate movie error: {str(e)}")
            return ActionResult.fail("Failed to rate movie")

        return ActionResult.ok()

    @staticmethod
    def get_movie_rating(db: Session, user: Optional[User], movie_id: int) -> Optional[float]:
        """User's rating for a movie (by TMDB id), None if not rated or anonymous"""
        if user is None:
            return None
        rating = db.query(Rating).filter(
            Rating.user_id == user.id,
            Rating.movie_id == movie_id
        ).first()
        return rating.rating if rating else None

    @staticmethod
    def get_user_ratings(db: Session, user: User, skip: int = 0, limit: int = 100) -> List[Rating]:
        """All ratings by a user, most recently updated first"""
        return db.query(Rating).filter(
            Rating.user_id == user.id
        ).order_by(
            Rating.updated_at.desc(), Rating.id.desc()
        ).offset(skip).limit(limit).all()
