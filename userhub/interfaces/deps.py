"""
API Dependencies.
"""

from fastapi import Depends, Request
from sqlalchemy.orm import Session

from userhub.application.services.auth_service import PasswordHasher
from userhub.application.services.user_service import UserService
from userhub.domain.repositories.user_repository import UserRepository
from userhub.infrastructure.database import get_db
from userhub.infrastructure.image_store import ImageStore
from userhub.infrastructure.repositories.user_repository import SQLAlchemyUserRepository


def get_user_repository(db: Session = Depends(get_db)) -> UserRepository:
    """Get user repository instance."""
    return SQLAlchemyUserRepository(db)


def get_password_hasher(request: Request) -> PasswordHasher:
    return request.app.state.password_hasher


def get_image_store(request: Request) -> ImageStore:
    return request.app.state.image_store


def get_user_service(
    request: Request,
    repo: UserRepository = Depends(get_user_repository),
    hasher: PasswordHasher = Depends(get_password_hasher),
    images: ImageStore = Depends(get_image_store),
) -> UserService:
    """Get user service instance bound to this request's session."""
    return UserService(
        repo,
        hasher,
        images,
        allow_admin_self_registration=request.app.state.settings.ALLOW_ADMIN_SELF_REGISTRATION,
    )
