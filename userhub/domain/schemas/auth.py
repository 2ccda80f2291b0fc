"""Pydantic schemas for Auth."""

from pydantic import BaseModel, Field


class LoginRequest(BaseModel):
    email: str = Field(min_length=1)
    password: str = Field(min_length=1)


class TokenPayload(BaseModel):
    """Claims carried by an access token, trusted after signature and expiry checks."""
    id: str
    role: str


class LoginResponse(BaseModel):
    token: str
    id: str
    name: str
    email: str
    role: str
