from passlib.context import CryptContext
from jose import JWTError, jwt
from datetime import datetime, timedelta, timezone
from typing import Optional
import binascii
import hashlib
import hmac

from movie_tracker.config import get_settings

# Password hashing: scrypt with a fresh random salt per hash, salt embedded in the stored string
pwd_context = CryptContext(schemes=["scrypt"], deprecated="auto", scrypt__rounds=14)

# Hashes created before the move to passlib: "<hex derived key>.<hex salt>"
LEGACY_SCRYPT_N = 16384
LEGACY_SCRYPT_R = 8
LEGACY_SCRYPT_P = 1
LEGACY_KEY_LENGTH = 64


def _is_legacy_hash(stored_hash: str) -> bool:
    return "." in stored_hash and not stored_hash.startswith("$")


def _verify_legacy(plain_password: str, stored_hash: str) -> bool:
    """Check a "<hash>.<salt>" scrypt record (salt is used as its hex text, not decoded)"""
    derived_hex, _, salt = stored_hash.partition(".")
    if not derived_hex or not salt:
        return False
    try:
        expected = binascii.unhexlify(derived_hex)
    except (binascii.Error, ValueError):
        return False

    candidate = hashlib.scrypt(
        plain_password.encode("utf-8"),
        salt=salt.encode("utf-8"),
        n=LEGACY_SCRYPT_N,
        r=LEGACY_SCRYPT_R,
        p=LEGACY_SCRYPT_P,
        dklen=LEGACY_KEY_LENGTH,
    )
    return hmac.compare_digest(candidate, expected)


# Password hashing and verification
def hash_password(password: str) -> str:
    """Hash a password (new random salt every call)"""
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a password against its stored hash; malformed hashes never match"""
    if not hashed_password:
        return False
    if _is_legacy_hash(hashed_password):
        return _verify_legacy(plain_password, hashed_password)
    try:
        return pwd_context.verify(plain_password, hashed_password)
    except (ValueError, TypeError):
        return False


def password_needs_rehash(hashed_password: str) -> bool:
    """True for legacy records or hashes made with outdated parameters"""
    if _is_legacy_hash(hashed_password):
        return True
    return pwd_context.needs_update(hashed_password)


# JWT token creation and decoding
def create_access_token(data: dict, expires_delta: Optional[timedelta] = None) -> str:
    """Sign a session token carrying data plus iat/exp claims (7 days by default)"""
    settings = get_settings()
    to_encode = data.copy()
    issued_at = datetime.now(timezone.utc)
    expire = issued_at + (expires_delta or timedelta(days=settings.access_token_expire_days))
    to_encode.update({"iat": issued_at, "exp": expire})
    return jwt.encode(to_encode, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def decode_token(token: str) -> Optional[dict]:
    """Claims of a valid token; None for invalid, expired or tampered tokens"""
    if not token:
        return None
    settings = get_settings()
    try:
        return jwt.decode(token, settings.jwt_secret, algorithms=[settings.jwt_algorithm])
    except JWTError:
        return None
