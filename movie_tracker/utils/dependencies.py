from typing import Optional
from fastapi import Depends, HTTPException, Query, Request, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.orm import Session

from movie_tracker.config import Settings, get_settings
from movie_tracker.database import get_db
from movie_tracker.models.user import User
from movie_tracker.services.auth_service import AuthService
from movie_tracker.services.tmdb_service import TMDBService
from movie_tracker.utils.security import decode_token

# Bearer header is optional: browsers send the auth cookie instead
security = HTTPBearer(auto_error=False)


def get_session_token(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    settings: Settings = Depends(get_settings),
) -> Optional[str]:
    """First valid session token: Authorization: Bearer header, then the auth cookie"""
    candidates = [
        credentials.credentials if credentials else None,
        request.cookies.get(settings.auth_cookie_name),
    ]
    for token in candidates:
        if token and decode_token(token) is not None:
            return token
    return None


# Current user, or None when there is no valid session
def get_optional_user(
    token: Optional[str] = Depends(get_session_token),
    db: Session = Depends(get_db)
) -> Optional[User]:
    return AuthService.get_user_from_token(db, token)


# Current user; responds 401 when there is no valid session
def get_current_user(user: Optional[User] = Depends(get_optional_user)) -> User:
    if user is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Please login first")
    return user


def get_tmdb_service(request: Request) -> TMDBService:
    """TMDBService built in the application lifespan"""
    return request.app.state.tmdb_service


def get_locale(
    locale: Optional[str] = Query(None, max_length=10, description="Response language (en, es, ca)"),
    settings: Settings = Depends(get_settings),
) -> str:
    """Requested locale, falling back to the default for unsupported values"""
    return settings.resolve_locale(locale)
