"""
SQLAlchemy implementation of the Base Repository.
"""

from typing import Any, Dict, Generic, List, Optional, Type, TypeVar

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from userhub.core.exceptions import EntityNotFoundException, InternalError
from userhub.domain.repositories.base import BaseRepository
from userhub.infrastructure.database import Base

ModelType = TypeVar("ModelType", bound=Base)


class SQLAlchemyRepository(BaseRepository[ModelType], Generic[ModelType]):
    """Generic repository implementation for SQLAlchemy models."""

    not_found_message = "Entity not found"

    def __init__(self, db: Session, model: Type[ModelType]):
        self.db = db
        self.model = model

    def get_by_id(self, id: str) -> Optional[ModelType]:
        return self.db.get(self.model, id)

    def list(self) -> List[ModelType]:
        return self.db.query(self.model).order_by(self.model.created_at.asc()).all()

    def create(self, data: Dict[str, Any]) -> ModelType:
        db_obj = self.model(**data)
        self.db.add(db_obj)
        self._commit()
        self.db.refresh(db_obj)
        return db_obj

    def update(self, id: str, fields: Dict[str, Any]) -> ModelType:
        db_obj = self.get_by_id(id)
        if db_obj is None:
            raise EntityNotFoundException(self.not_found_message)

        for field, value in fields.items():
            if hasattr(db_obj, field):
                setattr(db_obj, field, value)

        self._commit()
        self.db.refresh(db_obj)
        return db_obj

    def delete(self, id: str) -> Optional[ModelType]:
        db_obj = self.get_by_id(id)
        if db_obj:
            self.db.delete(db_obj)
            self._commit()
        return db_obj

    def _commit(self) -> None:
        try:
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            self._raise_for(e)

    def _raise_for(self, error: SQLAlchemyError) -> None:
        """Translate a failed commit into an application error."""
        raise InternalError("Server error", details={"error": str(error.__class__.__name__)}) from error
