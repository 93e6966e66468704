from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
from typing import List

from movie_tracker.database import get_db
from movie_tracker.utils.dependencies import get_current_user
from movie_tracker.models.user import User
from movie_tracker.schemas.history import ViewHistoryResponse
from movie_tracker.services.history_service import HistoryService

router = APIRouter(prefix="/api/history", tags=["History"])


@router.get("/", response_model=List[ViewHistoryResponse])
def get_view_history(
    limit: int = Query(20, ge=1, le=100),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Recently viewed movies, newest first"""
    return HistoryService.get_view_history(db, current_user, limit)
