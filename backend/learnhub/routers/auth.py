"""
Authentication router for LearnHub.

Registration, login and logout, plus the dependencies every other router
uses to resolve the acting user from the bearer token.
"""

from typing import Any, Dict, Optional
from fastapi import APIRouter, Depends, status
from fastapi.security import OAuth2PasswordBearer, OAuth2PasswordRequestForm
import logging

from learnhub.core.config import settings
from learnhub.core.exceptions import Conflict, Forbidden, Unauthorized, ValidationError
from learnhub.core.permissions import is_admin, is_instructor_or_admin
from learnhub.core.security import (
    create_access_token,
    get_password_hash,
    password_issues,
    username_from_token,
    verify_password,
)
from learnhub.schemas import Token, UserCreate, UserInDB, UserRead
from learnhub.storage import Storage, get_storage


logger = logging.getLogger(__name__)

router = APIRouter()

# auto_error is off so anonymous requests reach the public endpoints
bearer_token = OAuth2PasswordBearer(
    tokenUrl=f"{settings.API_PREFIX}/auth/login",
    auto_error=False
)


def get_optional_user(
    token: Optional[str] = Depends(bearer_token),
    storage: Storage = Depends(get_storage)
) -> Optional[UserInDB]:
    """
    The user behind the bearer token, or None when no token was sent.

    A token that is sent but invalid, or names an unknown user, is a 401;
    a deactivated account is a 403.
    """
    if not token:
        return None

    username = username_from_token(token)
    user = storage.get_user_by_username(username) if username else None
    if user is None:
        raise Unauthorized("Could not validate credentials")
    if not user.is_active:
        raise Forbidden("Inactive user")
    return user


def get_current_user(user: Optional[UserInDB] = Depends(get_optional_user)) -> UserInDB:
    if user is None:
        raise Unauthorized("Not authenticated")
    return user


def get_current_instructor_user(
    current_user: UserInDB = Depends(get_current_user)
) -> UserInDB:
    if not is_instructor_or_admin(current_user):
        raise Forbidden("Instructor access required")
    return current_user


def get_current_admin_user(
    current_user: UserInDB = Depends(get_current_user)
) -> UserInDB:
    if not is_admin(current_user):
        raise Forbidden("Admin access required")
    return current_user


@router.post("/register", response_model=UserRead, status_code=status.HTTP_201_CREATED)
async def register(
    user_data: UserCreate,
    storage: Storage = Depends(get_storage)
) -> UserInDB:
    """
    Create a learner account. Instructor and admin roles are granted by an admin.
    """
    if storage.get_user_by_email(user_data.email):
        raise Conflict("Email already registered")
    if storage.get_user_by_username(user_data.username):
        raise Conflict("Username already taken")

    issues = password_issues(user_data.password)
    if issues:
        raise ValidationError(
            "Password does not meet requirements",
            errors=[{"field": "password", "message": issue} for issue in issues]
        )

    user = storage.create_user(user_data, hashed_password=get_password_hash(user_data.password))
    logger.info(f"User registered: {user.username} (id={user.id})")
    return user


@router.post("/login", response_model=Token)
async def login(
    form_data: OAuth2PasswordRequestForm = Depends(),
    storage: Storage = Depends(get_storage)
) -> Dict[str, Any]:
    """
    Exchange a username (or email) and password for a bearer token.
    """
    identifier = form_data.username
    user = storage.get_user_by_username(identifier)
    if user is None and "@" in identifier:
        user = storage.get_user_by_email(identifier)

    if user is None or not verify_password(form_data.password, user.hashed_password):
        logger.warning(f"Failed login attempt for {identifier}")
        raise Unauthorized("Incorrect username or password")
    if not user.is_active:
        raise Forbidden("Inactive user")

    return {
        "access_token": create_access_token(user.username),
        "token_type": "bearer",
        "user": user,
    }


@router.post("/logout")
async def logout(current_user: UserInDB = Depends(get_current_user)) -> Dict[str, str]:
    # Tokens are stateless; the client discards its copy
    logger.info(f"User logged out: {current_user.username}")
    return {"message": "Successfully logged out"}
