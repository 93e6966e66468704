"""
Application settings
====================
All configuration comes from environment variables (optionally loaded from a
.env file). Settings are read once per process via get_settings().

Production posture (ENVIRONMENT=production) refuses to start with an insecure
JWT secret, a missing DATABASE_URL or a missing/placeholder TMDB credential.
"""
from dataclasses import dataclass, field
from functools import lru_cache
from typing import List, Optional
from dotenv import load_dotenv
import os
import logging

from movie_tracker.exceptions import ConfigurationError

load_dotenv()
logger = logging.getLogger(__name__)

DEFAULT_JWT_SECRET = "your-super-secret-key-change-in-production"
DEFAULT_DATABASE_URL = "sqlite:///./movie_tracker.db"
PLACEHOLDER_TOKENS = {"demo_token"}
PLACEHOLDER_PREFIX = "your_"


def clean_credential(raw: Optional[str]) -> str:
    """Strip literal '\\n' sequences, quotes and whitespace pasted into env files"""
    if not raw:
        return ""
    return raw.replace("\\n", "").replace('"', "").strip()


def is_placeholder_credential(token: str) -> bool:
    """True when the TMDB token is empty or one of the known demo values"""
    return not token or token in PLACEHOLDER_TOKENS or token.startswith(PLACEHOLDER_PREFIX)


def _env_bool(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() == "true"


def _env_list(name: str, default: str) -> List[str]:
    return [item.strip() for item in os.getenv(name, default).split(",") if item.strip()]


@dataclass
class Settings:
    environment: str = "development"

    # TMDB
    tmdb_access_token: str = ""
    tmdb_base_url: str = "https://api.themoviedb.org/3"
    tmdb_timeout: float = 10.0

    # Auth
    jwt_secret: str = DEFAULT_JWT_SECRET
    jwt_algorithm: str = "HS256"
    access_token_expire_days: int = 7
    auth_cookie_name: str = "auth_token"

    # Database
    database_url: Optional[str] = None
    db_pool_size: int = 5
    db_max_overflow: int = 10
    db_pool_timeout: int = 30
    db_pool_recycle: int = 3600
    db_echo: bool = False
    auto_create_tables: bool = True

    # Cache / i18n / HTTP
    cache_max_size: int = 1000
    supported_locales: List[str] = field(default_factory=lambda: ["en", "es", "ca"])
    default_locale: str = "en"
    frontend_url: Optional[str] = None
    trusted_hosts: List[str] = field(default_factory=list)
    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> "Settings":
        """Build settings from the process environment"""
        token = clean_credential(
            os.getenv("TMDB_ACCESS_TOKEN") or os.getenv("TMDB_READ_ACCESS_TOKEN")
        )
        return cls(
            environment=os.getenv("ENVIRONMENT", "development").lower(),
            tmdb_access_token=token,
            tmdb_base_url=os.getenv("TMDB_BASE_URL", "https://api.themoviedb.org/3").rstrip("/"),
            tmdb_timeout=float(os.getenv("TMDB_TIMEOUT", "10")),
            jwt_secret=os.getenv("JWT_SECRET") or DEFAULT_JWT_SECRET,
            jwt_algorithm=os.getenv("JWT_ALGORITHM", "HS256"),
            access_token_expire_days=int(os.getenv("ACCESS_TOKEN_EXPIRE_DAYS", "7")),
            database_url=os.getenv("DATABASE_URL") or None,
            db_pool_size=int(os.getenv("DB_POOL_SIZE", 5)),
            db_max_overflow=int(os.getenv("DB_MAX_OVERFLOW", 10)),
            db_pool_timeout=int(os.getenv("DB_POOL_TIMEOUT", 30)),
            db_pool_recycle=int(os.getenv("DB_POOL_RECYCLE", 3600)),
            db_echo=_env_bool("DB_ECHO", "false"),
            auto_create_tables=_env_bool("AUTO_CREATE_TABLES", "true"),
            cache_max_size=int(os.getenv("CACHE_MAX_SIZE", 1000)),
            supported_locales=_env_list("SUPPORTED_LOCALES", "en,es,ca"),
            default_locale=os.getenv("DEFAULT_LOCALE", "en"),
            frontend_url=os.getenv("FRONTEND_URL") or None,
            trusted_hosts=_env_list("TRUSTED_HOSTS", ""),
            log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
        )

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    @property
    def has_valid_tmdb_credentials(self) -> bool:
        return not is_placeholder_credential(self.tmdb_access_token)

    @property
    def effective_database_url(self) -> str:
        """DATABASE_URL, or a local SQLite file outside production"""
        if self.database_url:
            return self.database_url
        if self.is_production:
            raise ConfigurationError("Missing required environment variable: DATABASE_URL")
        return DEFAULT_DATABASE_URL

    def resolve_locale(self, locale: Optional[str]) -> str:
        """Return locale if supported, otherwise the default locale"""
        if locale and locale in self.supported_locales:
            return locale
        return self.default_locale

    def validate(self) -> None:
        """
        Check the configuration for the current environment.

        Raises:
            ConfigurationError: in production, for any insecure or missing value
        """
        problems = []
        if not self.jwt_secret or self.jwt_secret == DEFAULT_JWT_SECRET:
            problems.append("JWT_SECRET is using the default development value")
        if not self.database_url:
            problems.append("DATABASE_URL is not set")
        if not self.has_valid_tmdb_credentials:
            problems.append("TMDB_ACCESS_TOKEN is missing or a placeholder (mock data will be served)")

        if not problems:
            return

        if self.is_production:
            for problem in problems:
                logger.critical(f"❌ CRITICAL: {problem}")
            raise ConfigurationError("Insecure or incomplete configuration in production: " + "; ".join(problems))

        for problem in problems:
            logger.warning(f"Configuration: {problem}")


@lru_cache()
def get_settings() -> Settings:
    """Process-wide settings (cached). Call get_settings.cache_clear() in tests after changing env."""
    return Settings.from_env()
