"""
Admin users router for LearnHub.

Lists accounts, changes their role flags and deactivates or reactivates them.
"""

from typing import List
from fastapi import APIRouter, Depends
import logging

from learnhub.core.exceptions import NotFound, ValidationError
from learnhub.routers.auth import get_current_admin_user
from learnhub.schemas import UserInDB, UserRead, UserRoleUpdate, UserUpdate
from learnhub.storage import Storage, get_storage


logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("", response_model=List[UserRead])
async def list_users(storage: Storage = Depends(get_storage)) -> List[UserInDB]:
    return storage.list_users()


@router.put("/{user_id}", response_model=UserRead)
async def update_user_roles(
    user_id: int,
    role_update: UserRoleUpdate,
    admin_user: UserInDB = Depends(get_current_admin_user),
    storage: Storage = Depends(get_storage)
) -> UserInDB:
    """
    Grant or revoke the admin and instructor roles of a user, or set whether
    the account is active. Deactivated users can neither log in nor use
    tokens issued before.
    """
    if role_update.is_empty():
        raise ValidationError(
            "Invalid request body",
            errors=[{"field": "body", "message": "Provide is_admin, is_instructor and/or is_active"}]
        )

    # The acting admin stays active
    if user_id == admin_user.id and role_update.is_active is False:
        raise ValidationError(
            "Invalid request body",
            errors=[{"field": "is_active", "message": "Admins cannot deactivate their own account"}]
        )

    if storage.get_user(user_id) is None:
        raise NotFound("User not found")

    user = storage.update_user(user_id, UserUpdate(**role_update.changes()))
    if user is None:
        raise NotFound("User not found")

    logger.info(f"Admin {admin_user.id} updated user {user_id}: {role_update.changes()}")
    return user
