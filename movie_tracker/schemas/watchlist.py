from pydantic import BaseModel, Field, field_validator
from datetime import datetime
from typing import Optional

from movie_tracker.schemas.validation import SafeStringMixin


class WatchlistAdd(BaseModel):
    """Schema for adding a movie to watchlist"""
    movie_id: int = Field(..., gt=0, description="TMDB movie ID")
    title: str = Field(..., min_length=1, max_length=500)
    poster_path: Optional[str] = Field(None, max_length=255)
    vote_average: float = Field(0.0, ge=0, le=10)

    @field_validator('title')
    @classmethod
    def clean_title(cls, v):
        return SafeStringMixin.clean_text(v)


class WatchlistResponse(BaseModel):
    """Schema for watchlist item response"""
    id: int
    user_id: int
    movie_id: int
    title: str
    poster_path: Optional[str] = None
    vote_average: Optional[float] = None
    added_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class WatchlistCheck(BaseModel):
    movie_id: int
    in_watchlist: bool
