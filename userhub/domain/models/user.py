"""User domain model — maps to the 'users' table."""

import uuid

from sqlalchemy import Column, String, DateTime
from sqlalchemy.sql import func

from userhub.infrastructure.database import Base

ROLE_USER = "user"
ROLE_ADMIN = "admin"
ROLES = (ROLE_USER, ROLE_ADMIN)


def _new_id() -> str:
    return uuid.uuid4().hex


class User(Base):
    __tablename__ = "users"

    id = Column(String(32), primary_key=True, default=_new_id)
    name = Column(String(200), nullable=False)
    email = Column(String(255), unique=True, nullable=False, index=True)
    password_hash = Column(String(255), nullable=False)

    # Profile
    phone = Column(String(50), nullable=True)
    city = Column(String(200), nullable=True)
    state = Column(String(200), nullable=True)
    country = Column(String(200), nullable=True)
    pincode = Column(String(20), nullable=True)
    address = Column(String(1000), nullable=True)
    profile_image = Column(String(255), nullable=True)  # filename in the image store

    role = Column(String(20), nullable=False, default=ROLE_USER)  # user, admin
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    def __repr__(self):
        return f"<User {self.email}>"
