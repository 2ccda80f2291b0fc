"""FastAPI dependencies — JWT authentication and role gates."""

from typing import Optional

from fastapi import Depends, Request
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials

from userhub.application.services.auth_service import TokenService
from userhub.core.exceptions import ForbiddenException, UnauthorizedException
from userhub.domain.models.user import ROLE_ADMIN
from userhub.domain.schemas.auth import TokenPayload

# auto_error=False so a missing header is reported as 401, not FastAPI's default
security = HTTPBearer(auto_error=False)


def get_token_service(request: Request) -> TokenService:
    return request.app.state.token_service


def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    tokens: TokenService = Depends(get_token_service),
) -> TokenPayload:
    """Identify the caller from the bearer token alone; no store lookup."""
    if credentials is None or not credentials.credentials:
        raise UnauthorizedException("No token provided")
    return tokens.verify(credentials.credentials)


def require_admin(user: TokenPayload = Depends(get_current_user)) -> TokenPayload:
    """Require admin role."""
    if user.role != ROLE_ADMIN:
        raise ForbiddenException("Access denied. Admins only.")
    return user
