from sqlalchemy import Column, Integer, String, DateTime, ForeignKey
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
from movie_tracker.database import Base


class ViewHistory(Base):
    """Movie detail pages visited by a user (one row per visit)"""
    __tablename__ = "view_history"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey('users.id', ondelete='CASCADE'), nullable=False, index=True)
    movie_id = Column(Integer, nullable=False)
    title = Column(String(500), nullable=False)
    poster_path = Column(String(255), nullable=True)
    viewed_at = Column(DateTime(timezone=True), server_default=func.now(), index=True)

    user = relationship("User", back_populates="view_history")
