"""Pydantic schemas for User records, one per operation."""

from datetime import datetime
from typing import Annotated, Optional

from pydantic import AfterValidator, BaseModel, field_validator, model_serializer

from userhub.domain.models.user import ROLES


def _check_role(value: Optional[str]) -> Optional[str]:
    if value is not None and value not in ROLES:
        raise ValueError(f"Role must be one of: {', '.join(ROLES)}")
    return value


RoleName = Annotated[Optional[str], AfterValidator(_check_role)]


class UserProfile(BaseModel):
    phone: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    country: Optional[str] = None
    pincode: Optional[str] = None
    address: Optional[str] = None

    @field_validator("phone", "city", "state", "country", "pincode", "address")
    @classmethod
    def blank_clears(cls, value: Optional[str]) -> Optional[str]:
        if value is not None and not value.strip():
            return None
        return value


class UserRegister(UserProfile):
    name: str
    email: str
    password: str
    role: RoleName = None

    @field_validator("name", "email")
    @classmethod
    def required_not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("Field required")
        return value

    @field_validator("password")
    @classmethod
    def password_not_blank(cls, value: str) -> str:
        # passwords are kept verbatim, surrounding spaces included
        if not value.strip():
            raise ValueError("Field required")
        return value


class UserUpdate(UserProfile):
    """Fields an admin may change. Unset fields are left untouched."""
    name: Optional[str] = None
    email: Optional[str] = None
    password: Optional[str] = None
    role: RoleName = None

    @field_validator("name", "email")
    @classmethod
    def not_blank(cls, value: Optional[str]) -> Optional[str]:
        if value is not None:
            value = value.strip()
            if not value:
                raise ValueError("Field cannot be blank")
        return value


class UserRead(UserProfile):
    id: str
    name: str
    email: str
    profile_image: Optional[str] = None
    profile_image_url: Optional[str] = None
    role: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = {"from_attributes": True}

    @model_serializer(mode="wrap")
    def serialize_with_legacy_id(self, handler):
        # the dashboard SPA keys user records on `_id`
        data = handler(self)
        data["_id"] = self.id
        return data


class UserRegistered(BaseModel):
    message: str
    user: UserRead


class UserUpdated(BaseModel):
    message: str
    user: UserRead


class MessageResponse(BaseModel):
    message: str
