from fastapi import APIRouter, Depends, Response, status
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session
from movie_tracker.config import Settings, get_settings
from movie_tracker.database import get_db
from movie_tracker.schemas.auth import (
    UserRegister,
    UserLogin,
    UserResponse,
    TokenResponse,
)
from movie_tracker.schemas.results import ActionResult, status_for
from movie_tracker.services.auth_service import AuthService
from movie_tracker.utils.dependencies import get_current_user
from movie_tracker.models.user import User

# Define router
router = APIRouter(prefix="/api/auth", tags=["Authentication"])

# Register a new user
@router.post("/register", response_model=ActionResult, status_code=status.HTTP_201_CREATED)
def register(user_data: UserRegister, response: Response, db: Session = Depends(get_db)):
    """Register a new user"""
    result = AuthService.register_user(db, user_data)
    response.status_code = status_for(result, status.HTTP_201_CREATED)
    return result

# Login endpoint
@router.post("/login", response_model=TokenResponse, responses={401: {"model": ActionResult}})
def login(
    credentials: UserLogin,
    response: Response,
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings)
):
    """Login with email and password; the token is also set as an httpOnly cookie"""
    result = AuthService.login_user(db, credentials)
    if not result.success:
        return JSONResponse(
            status_code=status.HTTP_401_UNAUTHORIZED,
            content=ActionResult(success=False, error=result.error).model_dump(),
        )

    response.set_cookie(
        key=settings.auth_cookie_name,
        value=result.access_token,
        max_age=result.expires_in,
        path="/",
        httponly=True,
        secure=settings.is_production,
        samesite="lax",
    )
    return TokenResponse(
        access_token=result.access_token,
        expires_in=result.expires_in,
        user=UserResponse.model_validate(result.user),
    )

# Logout endpoint
@router.post("/logout", response_model=ActionResult)
def logout(response: Response, settings: Settings = Depends(get_settings)):
    """Clear the session cookie"""
    response.delete_cookie(
        key=settings.auth_cookie_name,
        path="/",
        httponly=True,
        secure=settings.is_production,
        samesite="lax",
    )
    return ActionResult.ok()

# Get current authenticated user
@router.get("/me", response_model=UserResponse)
def get_me(current_user: User = Depends(get_current_user)):
    """Get current authenticated user"""
    return current_user
