"""Auth service — JWT token management and password hashing."""

from datetime import datetime, timedelta, timezone
from typing import Optional

import structlog
from jose import JWTError, jwt
from passlib.context import CryptContext

from userhub.core.exceptions import InvalidCredentialsException, UnauthorizedException
from userhub.domain.models.user import ROLES, User
from userhub.domain.repositories.user_repository import UserRepository
from userhub.domain.schemas.auth import LoginResponse, TokenPayload

logger = structlog.get_logger(__name__)


class PasswordHasher:
    """One-way salted bcrypt hashing with a fixed work factor."""

    def __init__(self, rounds: int = 10):
        self._context = CryptContext(schemes=["bcrypt"], deprecated="auto", bcrypt__rounds=rounds)

    def hash(self, password: str) -> str:
        return self._context.hash(password)

    def verify(self, plain_password: str, hashed_password: str) -> bool:
        try:
            return self._context.verify(plain_password, hashed_password)
        except (ValueError, TypeError):
            # Unrecognised or corrupt stored hash
            return False


class TokenService:
    """Issues and verifies signed, time-limited ``{id, role}`` tokens."""

    def __init__(self, secret_key: str, algorithm: str = "HS256", expires_minutes: int = 60 * 24):
        self.secret_key = secret_key
        self.algorithm = algorithm
        self.expires_delta = timedelta(minutes=expires_minutes)

    def issue(self, user_id: str, role: str, expires_delta: Optional[timedelta] = None) -> str:
        expire = datetime.now(timezone.utc) + (expires_delta if expires_delta is not None else self.expires_delta)
        to_encode = {"id": user_id, "role": role, "exp": expire}
        return jwt.encode(to_encode, self.secret_key, algorithm=self.algorithm)

    def verify(self, token: str) -> TokenPayload:
        try:
            payload = jwt.decode(
                token, self.secret_key, algorithms=[self.algorithm], options={"require_exp": True}
            )
        except JWTError:
            raise UnauthorizedException("Invalid token")

        user_id = payload.get("id")
        role = payload.get("role")
        if not isinstance(user_id, str) or role not in ROLES:
            raise UnauthorizedException("Invalid token")
        return TokenPayload(id=user_id, role=role)


def authenticate_user(repo: UserRepository, hasher: PasswordHasher, email: str, password: str) -> Optional[User]:
    user = repo.get_by_email(email)
    if not user or not hasher.verify(password, user.password_hash):
        return None
    return user


def login(repo: UserRepository, hasher: PasswordHasher, tokens: TokenService, email: str, password: str) -> LoginResponse:
    """Exchange credentials for a token.

    Unknown email and wrong password raise the same error so the response
    cannot be used to probe which accounts exist.
    """
    user = authenticate_user(repo, hasher, email, password)
    if user is None:
        logger.info("Login failed")
        raise InvalidCredentialsException()

    logger.info("Login succeeded", user_id=user.id, role=user.role)
    return LoginResponse(
        token=tokens.issue(user.id, user.role),
        id=user.id,
        name=user.name,
        email=user.email,
        role=user.role,
    )
