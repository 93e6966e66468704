from pydantic import BaseModel
from datetime import datetime
from typing import Optional


class ViewHistoryResponse(BaseModel):
    id: int
    movie_id: int
    title: str
    poster_path: Optional[str] = None
    viewed_at: Optional[datetime] = None

    class Config:
        from_attributes = True
