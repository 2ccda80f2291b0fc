"""Users API routes — list, read, admin update and delete."""

from typing import Dict, List, Optional

from fastapi import APIRouter, BackgroundTasks, Depends, File, UploadFile

from userhub.application.services.user_service import UserService
from userhub.domain.schemas.auth import TokenPayload
from userhub.domain.schemas.user import MessageResponse, UserRead, UserUpdate, UserUpdated
from userhub.interfaces.api.deps import get_current_user, require_admin
from userhub.interfaces.api.forms import parse_form, submitted_form
from userhub.interfaces.deps import get_user_service

router = APIRouter(prefix="/api/users", tags=["Users"])


@router.get("", response_model=List[UserRead])
def list_users(
    service: UserService = Depends(get_user_service),
    user: TokenPayload = Depends(get_current_user),
):
    return [service.to_read(u) for u in service.list_users()]


@router.get("/{user_id}", response_model=UserRead)
def get_user(
    user_id: str,
    service: UserService = Depends(get_user_service),
    user: TokenPayload = Depends(get_current_user),
):
    return service.to_read(service.get_user(user, user_id))


@router.put("/{user_id}", response_model=UserUpdated)
def update_user(
    user_id: str,
    background_tasks: BackgroundTasks,
    profile_image: Optional[UploadFile] = File(None),
    form: Dict[str, str] = Depends(submitted_form),
    service: UserService = Depends(get_user_service),
    admin: TokenPayload = Depends(require_admin),
):
    """Admin-only update. The uploaded file is only persisted once the caller is known to be an admin."""
    values = {field: form[field] for field in UserUpdate.model_fields if field in form}
    # an empty select means "keep the current role"
    if not values.get("role"):
        values.pop("role", None)
    body = parse_form(UserUpdate, values)
    user, stale_image = service.update_user(user_id, body, profile_image)
    if stale_image:
        background_tasks.add_task(service.images.discard, stale_image)
    return UserUpdated(message="User updated successfully", user=service.to_read(user))


@router.delete("/{user_id}", response_model=MessageResponse)
def delete_user(
    user_id: str,
    background_tasks: BackgroundTasks,
    service: UserService = Depends(get_user_service),
    admin: TokenPayload = Depends(require_admin),
):
    image = service.delete_user(user_id)
    if image:
        background_tasks.add_task(service.images.discard, image)
    return MessageResponse(message="User deleted successfully")
