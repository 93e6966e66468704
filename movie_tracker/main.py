from fastapi import FastAPI, Request, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.trustedhost import TrustedHostMiddleware
from fastapi.responses import JSONResponse
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from dotenv import load_dotenv
import logging

from movie_tracker.config import get_settings
from movie_tracker.database import init_db
from movie_tracker.middleware import SecurityHeadersMiddleware, add_cors_headers
from movie_tracker.routes import admin, auth, history, movies, ratings, watchlist
from movie_tracker.services.tmdb_service import build_tmdb_service

# Load environment variables
load_dotenv()
settings = get_settings()

# Configure logging
logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)
logger = logging.getLogger(__name__)

API_VERSION = "1.0.0"


# ============================================
# Application Lifespan Management
# ============================================

@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Manage application lifespan events

    Startup:
    - Validate configuration (fatal in production)
    - Create tables when AUTO_CREATE_TABLES is on
    - Build the cached TMDB service

    Shutdown:
    - Close the TMDB HTTP session
    """
    # Startup
    settings.validate()
    if settings.auto_create_tables:
        init_db()

    app.state.tmdb_service = build_tmdb_service(settings)

    logger.info("=" * 60)
    logger.info("🚀 Movie Tracker API Starting...")
    logger.info(f"   Environment: {settings.environment}")
    logger.info(f"   TMDB upstream: {'live' if app.state.tmdb_service.is_live else 'mock'}")
    logger.info(f"   CORS Origins: {len(allowed_origins)} configured")
    logger.info("=" * 60)

    yield

    # Shutdown
    logger.info("🛑 Movie Tracker API Shutting Down...")
    app.state.tmdb_service.close()


# Create FastAPI app with lifespan handler
app = FastAPI(
    title="Movie Tracker API",
    description="Movie browsing, watchlists and ratings backed by a cached TMDB client",
    version=API_VERSION,
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan
)

# ============================================
# Security Configuration
# ============================================

# CORS - Whitelist allowed origins
allowed_origins = [
    "http://localhost:3000",
    "http://localhost:5173",
]
if settings.frontend_url:
    allowed_origins.append(settings.frontend_url)

app.add_middleware(
    CORSMiddleware,
    allow_origins=allowed_origins,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
    allow_headers=["*"],
    expose_headers=["*"],
)

app.add_middleware(SecurityHeadersMiddleware, enable_hsts=settings.is_production)

# Trusted Hosts - Production only
if settings.is_production and settings.trusted_hosts:
    app.add_middleware(TrustedHostMiddleware, allowed_hosts=settings.trusted_hosts)

# ============================================
# Exception Handlers - keep CORS headers on every error response
# ============================================

@app.exception_handler(HTTPException)
async def http_exception_handler(request: Request, exc: HTTPException):
    """Especially important for 401 Unauthorized errors"""
    response = JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.detail},
        headers=exc.headers,
    )
    return add_cors_headers(response, request.headers.get("origin"), allowed_origins)

@app.exception_handler(Exception)
async def general_exception_handler(request: Request, exc: Exception):
    """Catch-all handler: log and answer 500"""
    logger.error(f"Unhandled exception: {str(exc)}", exc_info=True)

    response = JSONResponse(
        status_code=500,
        content={"detail": "Internal server error"}
    )
    return add_cors_headers(response, request.headers.get("origin"), allowed_origins)

# ============================================
# Routes
# ============================================

@app.get("/", tags=["Health"])
async def root():
    """Basic health check"""
    return {
        "message": "Movie Tracker API",
        "version": API_VERSION,
        "status": "healthy",
        "docs": "/docs"
    }

@app.get("/health", tags=["Health"])
async def health_check(request: Request):
    """Detailed health check for monitoring"""
    tmdb_service = getattr(request.app.state, "tmdb_service", None)
    return {
        "status": "healthy",
        "api_version": API_VERSION,
        "environment": settings.environment,
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "upstream": "live" if tmdb_service is not None and tmdb_service.is_live else "mock",
    }

app.include_router(auth.router)
app.include_router(movies.router)
app.include_router(watchlist.router)
app.include_router(ratings.router)
app.include_router(history.router)
app.include_router(admin.router)  # TMDB cache management

if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        app,
        host="0.0.0.0",
        port=8000,
        log_level=settings.log_level.lower()
    )
