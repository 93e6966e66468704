"""
Rating Schemas - Pydantic models for rating request/response validation
Follows the same pattern as watchlist schemas for consistency
"""

from pydantic import BaseModel, Field, field_validator
from datetime import datetime
from typing import Optional

from movie_tracker.schemas.validation import SafeStringMixin


class RatingCreate(BaseModel):
    """Schema for creating/updating a rating (upsert)"""
    movie_id: int = Field(..., description="TMDB movie ID", gt=0)
    title: str = Field(..., min_length=1, max_length=500)
    poster_path: Optional[str] = Field(None, max_length=255)
    rating: float = Field(..., description="Rating value (1-10)", ge=1.0, le=10.0)

    @field_validator('rating')
    @classmethod
    def validate_rating(cls, v):
        """Round to 1 decimal place"""
        return round(v, 1)

    @field_validator('title')
    @classmethod
    def clean_title(cls, v):
        return SafeStringMixin.clean_text(v)


class RatingResponse(BaseModel):
    """Schema for rating response (matches database model)"""
    id: int
    user_id: int
    movie_id: int
    title: str
    poster_path: Optional[str] = None
    rating: float
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class UserRatingForMovie(BaseModel):
    """
    Schema for checking if user has rated a specific movie
    Returns rating value or None
    """
    movie_id: int
    rating: Optional[float] = Field(None, description="User's rating (1-10) or None if not rated")
