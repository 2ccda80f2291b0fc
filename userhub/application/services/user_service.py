"""User service — registration and the user-record lifecycle.

Keeps each record and its profile image consistent: a file saved for a
request that then fails is removed before the error is returned, and a
file replaced or orphaned by a successful request is handed back to the
caller for best-effort cleanup.
"""

from typing import List, Optional, Tuple

import structlog
from fastapi import UploadFile

from userhub.application.services.auth_service import PasswordHasher
from userhub.core.exceptions import (
    AppError,
    ConflictException,
    EntityNotFoundException,
    ForbiddenException,
)
from userhub.domain.models.user import ROLE_ADMIN, ROLE_USER, User
from userhub.domain.repositories.user_repository import UserRepository
from userhub.domain.schemas.auth import TokenPayload
from userhub.domain.schemas.user import UserRead, UserRegister, UserUpdate
from userhub.infrastructure.image_store import ImageStore

logger = structlog.get_logger(__name__)


def has_file(upload: Optional[UploadFile]) -> bool:
    # Browsers send an empty file part when no file was picked
    return upload is not None and bool(upload.filename)


def ensure_can_view(caller: TokenPayload, target_id: str) -> None:
    if caller.role != ROLE_ADMIN and caller.id != target_id:
        raise ForbiddenException("Access denied. You can only view your own profile.")


class UserService:
    def __init__(
        self,
        repo: UserRepository,
        hasher: PasswordHasher,
        images: ImageStore,
        allow_admin_self_registration: bool = True,
    ):
        self.repo = repo
        self.hasher = hasher
        self.images = images
        self.allow_admin_self_registration = allow_admin_self_registration

    def to_read(self, user: User) -> UserRead:
        read = UserRead.model_validate(user)
        read.profile_image_url = self.images.resolve(user.profile_image)
        return read

    def register(self, data: UserRegister, image: Optional[UploadFile] = None) -> User:
        if data.role == ROLE_ADMIN and not self.allow_admin_self_registration:
            raise ForbiddenException("Admin accounts cannot be self-registered")

        if self.repo.get_by_email(data.email):
            raise ConflictException("Email already registered")

        if has_file(image):
            # Reject a bad file type before paying for the hash
            self.images.extension_for(image.filename)

        fields = data.model_dump(exclude={"password", "role"})
        fields["password_hash"] = self.hasher.hash(data.password)
        fields["role"] = data.role or ROLE_USER
        fields["profile_image"] = self.images.save(image) if has_file(image) else None

        try:
            user = self.repo.create(fields)
        except AppError:
            self.images.discard(fields["profile_image"])
            raise

        logger.info("User registered", user_id=user.id, role=user.role)
        return user

    def create_admin(self, name: str, email: str, password: str) -> Optional[User]:
        """Seed an admin account unless the email is already registered."""
        if self.repo.get_by_email(email):
            return None
        user = self.repo.create({
            "name": name,
            "email": email,
            "password_hash": self.hasher.hash(password),
            "role": ROLE_ADMIN,
        })
        logger.info("Admin user created", user_id=user.id, email=email)
        return user

    def list_users(self) -> List[User]:
        return self.repo.list()

    def get_user(self, caller: TokenPayload, user_id: str) -> User:
        user = self.repo.get_by_id(user_id)
        if user is None:
            raise EntityNotFoundException("User not found")
        ensure_can_view(caller, user.id)
        return user

    def update_user(
        self, user_id: str, data: UserUpdate, image: Optional[UploadFile] = None
    ) -> Tuple[User, Optional[str]]:
        """Apply an admin update.

        Returns the updated user and the reference of an image that the
        update made stale, if any.
        """
        existing = self.repo.get_by_id(user_id)
        if existing is None:
            raise EntityNotFoundException("User not found")
        previous_image = existing.profile_image

        fields = data.model_dump(exclude_unset=True, exclude={"password"})
        if "role" in fields and fields["role"] is None:
            del fields["role"]
        if data.password:
            fields["password_hash"] = self.hasher.hash(data.password)

        new_image = None
        if has_file(image):
            new_image = self.images.save(image)
            fields["profile_image"] = new_image

        try:
            user = self.repo.update(user_id, fields)
        except AppError:
            self.images.discard(new_image)
            raise

        logger.info("User updated", user_id=user.id, fields=sorted(k for k in fields if k != "password_hash"))
        stale = previous_image if new_image and previous_image != new_image else None
        return user, stale

    def delete_user(self, user_id: str) -> Optional[str]:
        """Remove the record. Returns its image reference for cleanup."""
        user = self.repo.delete(user_id)
        if user is None:
            raise EntityNotFoundException("User not found")
        logger.info("User deleted", user_id=user_id)
        return user.profile_image
