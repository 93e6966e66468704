from sqlalchemy import Column, Integer, String, Float, DateTime, ForeignKey, UniqueConstraint
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
from movie_tracker.database import Base


class WatchlistItem(Base):
    """
    Movies saved by users to watch later.
    movie_id is the TMDB id; title/poster/vote are denormalized so the
    watchlist renders without calling TMDB.
    """
    __tablename__ = "watchlist_items"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey('users.id', ondelete='CASCADE'), nullable=False, index=True)
    movie_id = Column(Integer, nullable=False, index=True)
    title = Column(String(500), nullable=False)
    poster_path = Column(String(255), nullable=True)
    vote_average = Column(Float, default=0.0)
    added_at = Column(DateTime(timezone=True), server_default=func.now())

    # Relationships
    user = relationship("User", back_populates="watchlist_items")

    # Ensure one entry per user per movie
    __table_args__ = (
        UniqueConstraint('user_id', 'movie_id', name='unique_user_movie_watchlist'),
    )

    def __repr__(self):
        return f"<WatchlistItem(user_id={self.user_id}, movie_id={self.movie_id})>"
