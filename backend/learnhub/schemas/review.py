"""
Review schemas.
"""

from datetime import datetime
from typing import Optional
from pydantic import BaseModel, Field, StrictInt

from .base import ReadModel
from .user import UserSummary


class ReviewCreate(BaseModel):
    course_id: StrictInt
    rating: int = Field(..., ge=1, le=5)
    comment: Optional[str] = Field(None, max_length=5000)


class ReviewRead(ReadModel):
    id: int
    user_id: int
    course_id: int
    rating: int
    comment: Optional[str] = None
    created_at: datetime


class ReviewWithUser(ReviewRead):
    user: Optional[UserSummary] = None
