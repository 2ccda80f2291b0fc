"""Auth API routes — register, login."""

from typing import Optional

from fastapi import APIRouter, Depends, File, Form, UploadFile, status

from userhub.application.services import auth_service
from userhub.application.services.auth_service import PasswordHasher, TokenService
from userhub.application.services.user_service import UserService
from userhub.domain.repositories.user_repository import UserRepository
from userhub.domain.schemas.auth import LoginRequest, LoginResponse
from userhub.domain.schemas.user import UserRegister, UserRegistered
from userhub.interfaces.api.deps import get_token_service
from userhub.interfaces.api.forms import parse_form
from userhub.interfaces.deps import get_password_hasher, get_user_repository, get_user_service

router = APIRouter(prefix="/api/auth", tags=["Auth"])


@router.post("/register", response_model=UserRegistered, status_code=status.HTTP_201_CREATED)
def register(
    name: Optional[str] = Form(None),
    email: Optional[str] = Form(None),
    password: Optional[str] = Form(None),
    phone: Optional[str] = Form(None),
    city: Optional[str] = Form(None),
    state: Optional[str] = Form(None),
    country: Optional[str] = Form(None),
    pincode: Optional[str] = Form(None),
    address: Optional[str] = Form(None),
    role: Optional[str] = Form(None),
    profile_image: Optional[UploadFile] = File(None),
    service: UserService = Depends(get_user_service),
):
    body = parse_form(
        UserRegister,
        {
            "name": name,
            "email": email,
            "password": password,
            "phone": phone,
            "city": city,
            "state": state,
            "country": country,
            "pincode": pincode,
            "address": address,
            # an empty select means "no role chosen"
            "role": role or None,
        },
        required_message="Name, email, password required.",
    )
    user = service.register(body, profile_image)
    return UserRegistered(message="User registered successfully", user=service.to_read(user))


@router.post("/login", response_model=LoginResponse)
def login(
    body: LoginRequest,
    repo: UserRepository = Depends(get_user_repository),
    hasher: PasswordHasher = Depends(get_password_hasher),
    tokens: TokenService = Depends(get_token_service),
):
    return auth_service.login(repo, hasher, tokens, body.email, body.password)
