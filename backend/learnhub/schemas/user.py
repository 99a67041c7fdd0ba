"""
User schemas: registration payload, profile/role field masks and read records.
"""

from datetime import datetime
from typing import ClassVar, FrozenSet, Optional
from pydantic import BaseModel, EmailStr, Field, StrictBool

from .base import FieldMask, ReadModel


class UserCreate(BaseModel):
    """Registration payload."""

    username: str = Field(..., min_length=3, max_length=50, pattern=r"^[A-Za-z0-9_.-]+$")
    email: EmailStr
    password: str = Field(..., min_length=8, max_length=128)
    first_name: str = Field(..., min_length=1, max_length=100)
    last_name: str = Field(..., min_length=1, max_length=100)
    bio: Optional[str] = None
    avatar_url: Optional[str] = Field(None, max_length=500)


class UserUpdate(FieldMask):
    nullable_fields: ClassVar[FrozenSet[str]] = frozenset({"bio", "avatar_url"})

    first_name: Optional[str] = Field(None, min_length=1, max_length=100)
    last_name: Optional[str] = Field(None, min_length=1, max_length=100)
    bio: Optional[str] = None
    avatar_url: Optional[str] = Field(None, max_length=500)
    is_admin: Optional[bool] = None
    is_instructor: Optional[bool] = None
    is_active: Optional[bool] = None


class UserRoleUpdate(FieldMask):
    """Admin-only change of role flags and account status."""

    is_admin: Optional[StrictBool] = None
    is_instructor: Optional[StrictBool] = None
    is_active: Optional[StrictBool] = None


class UserRead(ReadModel):
    id: int
    username: str
    email: str
    first_name: str
    last_name: str
    bio: Optional[str] = None
    avatar_url: Optional[str] = None
    is_active: bool = True
    is_admin: bool = False
    is_instructor: bool = False
    created_at: datetime


class UserInDB(UserRead):
    """Stored user, including the credential hash. Never returned by the API."""

    hashed_password: str


class UserSummary(ReadModel):
    """Public reviewer card."""

    id: int
    username: str
    first_name: str
    last_name: str
    avatar_url: Optional[str] = None
