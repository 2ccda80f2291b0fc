"""
SQLAlchemy implementation of the User Repository (the credential store).
"""

from typing import Any, Dict, Optional

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from userhub.core.exceptions import ConflictException
from userhub.domain.models.user import User
from userhub.domain.repositories.user_repository import UserRepository
from userhub.infrastructure.repositories.base_repository import SQLAlchemyRepository


class SQLAlchemyUserRepository(SQLAlchemyRepository[User], UserRepository):
    not_found_message = "User not found"

    def __init__(self, db: Session):
        super().__init__(db, User)

    def get_by_email(self, email: str) -> Optional[User]:
        return self.db.query(User).filter(User.email == email).first()

    def create(self, data: Dict[str, Any]) -> User:
        # The unique index still guards against a racing insert
        if self.get_by_email(data["email"]):
            raise ConflictException("Email already registered")
        return super().create(data)

    def update(self, id: str, fields: Dict[str, Any]) -> User:
        email = fields.get("email")
        if email:
            owner = self.get_by_email(email)
            if owner is not None and owner.id != id:
                raise ConflictException("Email already registered")
        return super().update(id, fields)

    def _raise_for(self, error: SQLAlchemyError) -> None:
        if isinstance(error, IntegrityError):
            raise ConflictException("Email already registered") from error
        super()._raise_for(error)
