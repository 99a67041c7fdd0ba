"""
Pydantic schemas for LearnHub.

Create payloads, field-mask updates and the read records that both
storage adapters return.
"""

from .auth import Token
from .base import FieldMask, ReadModel
from .course import (
    CategoryCreate,
    CategoryRead,
    CourseCreate,
    CourseFilters,
    CourseRead,
    CourseUpdate,
    LessonCreate,
    LessonRead,
    LessonUpdate,
    SectionCreate,
    SectionRead,
    SectionUpdate,
)
from .progress import (
    EnrolledCourse,
    EnrollmentCreate,
    EnrollmentRead,
    ProgressSummary,
    ProgressUpdate,
)
from .review import ReviewCreate, ReviewRead, ReviewWithUser
from .user import UserCreate, UserInDB, UserRead, UserRoleUpdate, UserSummary, UserUpdate

__all__ = [
    "Token",
    "FieldMask",
    "ReadModel",
    "CategoryCreate",
    "CategoryRead",
    "CourseCreate",
    "CourseFilters",
    "CourseRead",
    "CourseUpdate",
    "LessonCreate",
    "LessonRead",
    "LessonUpdate",
    "SectionCreate",
    "SectionRead",
    "SectionUpdate",
    "EnrolledCourse",
    "EnrollmentCreate",
    "EnrollmentRead",
    "ProgressSummary",
    "ProgressUpdate",
    "ReviewCreate",
    "ReviewRead",
    "ReviewWithUser",
    "UserCreate",
    "UserInDB",
    "UserRead",
    "UserRoleUpdate",
    "UserSummary",
    "UserUpdate",
]
