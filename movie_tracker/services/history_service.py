from sqlalchemy.orm import Session
from sqlalchemy.exc import SQLAlchemyError
from typing import List, Optional
import logging

from movie_tracker.models.user import User
from movie_tracker.models.view_history import ViewHistory

logger = logging.getLogger(__name__)


class HistoryService:
    """Recently viewed movies"""

    @staticmethod
    def add_to_view_history(
        db: Session,
        user: Optional[User],
        movie_id: int,
        title: str,
        poster_path: Optional[str]
    ) -> None:
        """Record a visit. Best effort: failures are logged and never reach the caller."""
        if user is None:
            return
        try:
            db.add(ViewHistory(user_id=user.id, movie_id=movie_id, title=title or "Unknown", poster_path=poster_path))
            db.commit()
        except SQLAlchemyError as e:
            db.rollback()
            logger.warning(f"Could not record view of movie {movie_id}: {str(e)}")

    @staticmethod
    def get_view_history(db: Session, user: User, limit: int = 20) -> List[ViewHistory]:
        return db.query(ViewHistory).filter(
            ViewHistory.user_id == user.id
        ).order_by(ViewHistory.viewed_at.desc(), ViewHistory.id.desc()).limit(limit).all()
