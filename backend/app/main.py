"""
Event Attendees API - Main Application Entry Point

A CRUD backend for events and their attendee lists:
- JWT bearer authentication re-checked against the database on every request
- Owner-only access to events and attendee rosters
- Transactional cascade delete of a user's account and everything it owns
- Structured logging with request correlation
"""

from contextlib import asynccontextmanager
from datetime import datetime, timezone

from fastapi import Depends, FastAPI, Request, status
from fastapi.exception_handlers import request_validation_exception_handler
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware

from app import models  # noqa: F401 - register tables on Base.metadata
from app.api.deps import get_app_settings
from app.api.middleware import RequestLoggingMiddleware
from app.api.router import api_router
from app.core.config import Settings, get_settings
from app.core.logging import setup_logging, get_logger
from app.core.metrics import metrics_endpoint
from app.core.security import CredentialStore, TokenService
from app.db.base import Base
from app.db.session import create_engine, create_sessionmaker


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifecycle: startup and shutdown hooks."""
    settings: Settings = app.state.settings
    setup_logging(settings)
    logger = get_logger(__name__)

    logger.info(
        "application_starting",
        app=settings.APP_NAME,
        version=settings.APP_VERSION,
        environment=settings.ENVIRONMENT,
    )

    if settings.ENVIRONMENT in ("development", "test"):
        # Production schema is managed by Alembic
        async with app.state.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        logger.info("database_tables_ready")

    yield

    await app.state.engine.dispose()
    logger.info("application_shutdown")


async def validation_error_handler(request: Request, exc: RequestValidationError):
    """Malformed input is a 400, matching the rest of the error taxonomy."""
    response = await request_validation_exception_handler(request, exc)
    response.status_code = status.HTTP_400_BAD_REQUEST
    return response


def create_app(settings: Settings) -> FastAPI:
    app = FastAPI(
        title=settings.APP_NAME,
        version=settings.APP_VERSION,
        description="Events and attendee lists with JWT authentication and owner-only access",
        lifespan=lifespan,
        docs_url="/docs",
        redoc_url="/redoc",
    )

    # Shared components, built once from the immutable settings
    engine = create_engine(settings)
    app.state.settings = settings
    app.state.engine = engine
    app.state.sessionmaker = create_sessionmaker(engine, settings.DB_OPERATION_TIMEOUT_SECONDS)
    app.state.token_service = TokenService.from_settings(settings)
    app.state.credential_store = CredentialStore(rounds=settings.PASSWORD_HASH_ROUNDS)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["Origin", "Content-Type", "Authorization"],
    )
    app.add_middleware(RequestLoggingMiddleware)

    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.include_router(api_router)

    @app.get("/health", tags=["Health"])
    async def health_check(settings: Settings = Depends(get_app_settings)):
        """Health check endpoint for Docker and load balancers."""
        return {
            "status": "healthy",
            "version": settings.APP_VERSION,
            "environment": settings.ENVIRONMENT,
            "timestamp": datetime.now(timezone.utc).isoformat(),
        }

    @app.get("/metrics", tags=["Health"], include_in_schema=False)
    async def metrics():
        return metrics_endpoint()

    @app.get("/", tags=["Root"])
    async def root(settings: Settings = Depends(get_app_settings)):
        return {
            "message": f"Welcome to {settings.APP_NAME}",
            "version": settings.APP_VERSION,
            "docs": "/docs",
        }

    return app


app = create_app(get_settings())
