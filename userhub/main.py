"""FastAPI application — main entry point.

Run with ``uvicorn userhub.main:create_app --factory``.
"""

from contextlib import asynccontextmanager
from typing import Optional

import structlog
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from userhub.config import Settings, get_settings
from userhub.application.services.auth_service import PasswordHasher, TokenService
from userhub.application.services.user_service import UserService
from userhub.core.exceptions import register_exception_handlers
from userhub.core.logging import configure_logging
from userhub.core.middleware import setup_middleware
from userhub.infrastructure.database import Base, build_engine, build_session_factory
from userhub.infrastructure.image_store import ImageStore
from userhub.infrastructure.repositories.user_repository import SQLAlchemyUserRepository

# Import all models so SQLAlchemy knows about them
from userhub.domain.models.user import User  # noqa: F401

from userhub.interfaces.api.auth import router as auth_router
from userhub.interfaces.api.users import router as users_router

logger = structlog.get_logger(__name__)


def bootstrap_admin(app: FastAPI) -> None:
    """Create the configured admin account if it does not exist yet."""
    settings: Settings = app.state.settings
    if not settings.ADMIN_EMAIL or not settings.ADMIN_PASSWORD:
        return

    db = app.state.session_factory()
    try:
        service = UserService(SQLAlchemyUserRepository(db), app.state.password_hasher, app.state.image_store)
        service.create_admin(settings.ADMIN_NAME, settings.ADMIN_EMAIL, settings.ADMIN_PASSWORD)
    finally:
        db.close()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan — startup and shutdown events."""
    settings: Settings = app.state.settings
    logger.info("Starting Userhub...", env=settings.ENVIRONMENT)

    # Create DB tables (dev only — use migrations in production)
    Base.metadata.create_all(bind=app.state.engine)
    logger.info("Database tables created/verified")

    bootstrap_admin(app)

    yield

    app.state.engine.dispose()
    logger.info("Userhub stopped")


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """Build the application and every component it depends on from ``settings``."""
    settings = settings or get_settings()
    configure_logging(settings)

    app = FastAPI(
        title="Userhub",
        description="User management API — registration, login and role-gated user records",
        version="1.0.0",
        lifespan=lifespan,
    )

    app.state.settings = settings
    app.state.engine = build_engine(settings.DATABASE_URL)
    app.state.session_factory = build_session_factory(app.state.engine)
    app.state.password_hasher = PasswordHasher(rounds=settings.BCRYPT_ROUNDS)
    app.state.token_service = TokenService(
        settings.SECRET_KEY,
        algorithm=settings.JWT_ALGORITHM,
        expires_minutes=settings.JWT_EXPIRATION_MINUTES,
    )
    app.state.image_store = ImageStore(
        settings.UPLOAD_DIR,
        public_prefix=settings.UPLOAD_URL_PREFIX,
        allowed_extensions=settings.ALLOWED_IMAGE_EXTENSIONS,
    )

    setup_middleware(app)
    register_exception_handlers(app)

    # CORS outermost (added last, runs first)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(auth_router)
    app.include_router(users_router)

    # Profile images are public to anyone holding the path
    app.mount(
        app.state.image_store.public_prefix,
        StaticFiles(directory=str(app.state.image_store.directory)),
        name="uploads",
    )

    @app.get("/")
    def root():
        return {
            "name": "Userhub",
            "version": "1.0.0",
            "status": "running",
            "docs": "/docs",
        }

    @app.get("/health")
    def health():
        return {"status": "healthy"}

    return app
