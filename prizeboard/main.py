"""
Prizeboard API - Main Application
"""
import logging
import sys
import traceback
import uuid
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from sqlalchemy.exc import SQLAlchemyError
import uvicorn

from prizeboard.api.v1 import api_router
from prizeboard.core.config import Settings, get_settings
from prizeboard.core.errors import PrizeboardError, StorageFailure
from prizeboard.core.rate_limit import limiter
from prizeboard.database import Database
from prizeboard.utils.time_utils import Clock, to_utc_isoformat, utc_now

logger = logging.getLogger(__name__)

VERSION = "1.0.0"


def configure_logging(settings: Settings):
    logging.basicConfig(
        level=getattr(logging, settings.LOG_LEVEL.upper()),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[
            logging.StreamHandler(sys.stdout),
        ]
    )


def create_app(settings: Optional[Settings] = None, clock: Clock = utc_now) -> FastAPI:
    """
    Build the application with its own database, clock and settings

    Nothing is created at import time; tests pass an in-memory sqlite URL
    and a fixed clock.
    """
    if settings is None:
        settings = get_settings()
    configure_logging(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Application lifespan manager."""
        logger.info(f"Starting {settings.PROJECT_NAME} ({settings.ENVIRONMENT})")
        try:
            app.state.database.create_all()
            logger.info("Database initialized successfully")
        except SQLAlchemyError as e:
            logger.error(f"Failed to initialize database: {e}")
            raise

        yield  # Application runs here

        logger.info(f"Shutting down {settings.PROJECT_NAME}")

    app = FastAPI(
        title=settings.PROJECT_NAME,
        description="Monthly trading competitions, prize breakdowns and winner payouts",
        version=VERSION,
        docs_url="/docs" if settings.DEBUG else None,
        redoc_url="/redoc" if settings.DEBUG else None,
        openapi_url=f"{settings.API_PREFIX}/openapi.json",
        lifespan=lifespan,
        redirect_slashes=False
    )

    app.state.settings = settings
    app.state.database = Database(settings.SQLALCHEMY_DATABASE_URL)
    app.state.clock = clock
    app.state.instance_id = uuid.uuid4().hex

    # Rate limiter
    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(PrizeboardError)
    async def prizeboard_error_handler(request: Request, exc: PrizeboardError):
        return JSONResponse(status_code=exc.status_code, content=exc.to_dict())

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        errors = [
            {
                "loc": [str(part) for part in error.get("loc", ())],
                "msg": error.get("msg", ""),
                "type": error.get("type", ""),
            }
            for error in exc.errors()
        ]
        detail = "; ".join(f"{'.'.join(e['loc'])}: {e['msg']}" for e in errors) or "Invalid request"
        return JSONResponse(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            content={
                "success": False,
                "error": "validation_error",
                "detail": detail,
                "errors": errors,
            }
        )

    @app.exception_handler(SQLAlchemyError)
    async def storage_error_handler(request: Request, exc: SQLAlchemyError):
        logger.error(
            f"Storage failure on {request.method} {request.url.path}: {exc}",
            exc_info=True
        )
        failure = StorageFailure()
        return JSONResponse(status_code=failure.status_code, content=failure.to_dict())

    # Global exception handler
    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        """Global exception handler for unexpected errors."""
        # Generate a unique error ID for tracking
        error_id = str(uuid.uuid4())[:8]

        # Always log the full error on the server
        logger.error(
            f"[ERROR_ID: {error_id}] Unhandled exception on {request.method} {request.url.path}",
            exc_info=True
        )

        if settings.DEBUG:
            return JSONResponse(
                status_code=500,
                content={
                    "success": False,
                    "detail": str(exc),
                    "error_id": error_id,
                    "type": type(exc).__name__,
                    "path": str(request.url.path),
                    "traceback": traceback.format_exc()
                }
            )
        return JSONResponse(
            status_code=500,
            content={
                "success": False,
                "detail": "An internal server error occurred. Please try again later.",
                "error_id": error_id
            }
        )

    @app.get("/")
    async def root():
        """Root endpoint with API information."""
        return {
            "service": settings.PROJECT_NAME,
            "version": VERSION,
            "status": "running",
            "environment": settings.ENVIRONMENT,
            "docs_url": "/docs" if settings.DEBUG else "disabled",
        }

    @app.get("/health")
    async def health_check(request: Request):
        """Health check endpoint for monitoring."""
        database_ok = request.app.state.database.ping()
        return JSONResponse(
            status_code=200 if database_ok else 503,
            content={
                "status": "healthy" if database_ok else "unhealthy",
                "timestamp": to_utc_isoformat(request.app.state.clock()),
                "service": "prizeboard-api",
                "version": VERSION,
                "services": {
                    "database": {
                        "status": "connected" if database_ok else "unreachable",
                    },
                },
            }
        )

    app.include_router(api_router, prefix=settings.API_PREFIX)

    return app


if __name__ == "__main__":
    _settings = get_settings()
    uvicorn.run(
        "prizeboard.main:create_app",
        factory=True,
        host=_settings.API_HOST,
        port=_settings.API_PORT,
        reload=_settings.DEBUG,
        log_level=_settings.LOG_LEVEL.lower()
    )
