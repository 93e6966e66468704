from sqlalchemy.orm import Session
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from typing import Optional
from dataclasses import dataclass
import logging

from movie_tracker.config import get_settings
from movie_tracker.models.user import User
from movie_tracker.schemas.auth import UserRegister, UserLogin
from movie_tracker.schemas.results import ActionResult, FailureKind
from movie_tracker.utils.security import (
    hash_password,
    verify_password,
    password_needs_rehash,
    create_access_token,
    decode_token,
)

logger = logging.getLogger(__name__)


@dataclass
class LoginResult:
    success: bool
    error: Optional[str] = None
    access_token: Optional[str] = None
    expires_in: int = 0
    user: Optional[User] = None


class AuthService:
    @staticmethod
    def register_user(db: Session, user_data: UserRegister) -> ActionResult:
        """Create an account; duplicate emails are reported, not raised"""
        email = user_data.email.lower()

        # Check existing email
        if db.query(User).filter(User.email == email).first():
            return ActionResult.fail("User already exists", FailureKind.CONFLICT)

        new_user = User(
            email=email,
            password_hash=hash_password(user_data.password),
            name=user_data.name,
        )
        db.add(new_user)
        try:
            db.commit()
        except IntegrityError:
            # Concurrent registration with the same email
            db.rollback()
            return ActionResult.fail("User already exists", FailureKind.CONFLICT)
        except SQLAlchemyError as e:
            db.rollback()
            logger.error(f"Registration error: {str(e)}")
            return ActionResult.fail("Failed to create account. Please try again later.")

        logger.info(f"Registered user {new_user.id}")
        return ActionResult.ok()

    @staticmethod
    def login_user(db: Session, credentials: UserLogin) -> LoginResult:
        """Check credentials and issue a session token"""
        email = credentials.email.lower()
        user = db.query(User).filter(User.email == email).first()

        if not user or not user.password_hash:
            logger.warning(f"Login failed: no user with email {email}")
            return LoginResult(success=False, error="Invalid credentials")

        if not verify_password(credentials.password, str(user.password_hash)):
            logger.warning(f"Login failed: incorrect password for user {user.id}")
            return LoginResult(success=False, error="Invalid credentials")

        # Upgrade legacy / outdated hashes while we know the plaintext
        if password_needs_rehash(str(user.password_hash)):
            user.password_hash = hash_password(credentials.password)
            try:
                db.commit()
            except SQLAlchemyError as e:
                db.rollback()
                logger.error(f"Could not upgrade password hash for user {user.id}: {str(e)}")

        settings = get_settings()
        access_token = create_access_token(data={"user_id": user.id, "email": user.email})

        return LoginResult(
            success=True,
            access_token=access_token,
            expires_in=settings.access_token_expire_days * 24 * 60 * 60,
            user=user,
        )

    @staticmethod
    def get_user_from_token(db: Session, token: Optional[str]) -> Optional[User]:
        """User behind a session token, or None when there is no valid session"""
        payload = decode_token(token) if token else None
        if payload is None:
            return None

        user_id = payload.get("user_id")
        if user_id is None:
            return None
        return db.query(User).filter(User.id == user_id).first()
