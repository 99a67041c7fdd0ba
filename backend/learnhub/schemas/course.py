"""
Catalogue schemas: categories, courses, sections and lessons.
"""

from datetime import datetime
from typing import ClassVar, FrozenSet, Optional
from pydantic import BaseModel, ConfigDict, Field

from learnhub.models.course import CourseLevel
from .base import FieldMask, ReadModel


SLUG_PATTERN = r"^[a-z0-9]+(?:-[a-z0-9]+)*$"


class CategoryCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    slug: str = Field(..., min_length=1, max_length=100, pattern=SLUG_PATTERN)
    icon_name: str = Field(..., min_length=1, max_length=50)
    color_class: str = Field(..., min_length=1, max_length=50)
    description: Optional[str] = None


class CategoryRead(ReadModel):
    id: int
    name: str
    slug: str
    icon_name: str
    color_class: str
    description: Optional[str] = None


class CourseCreate(BaseModel):
    """
    New course payload.

    ``instructor_id`` defaults to the acting user; only admins may create a
    course on behalf of someone else.
    """

    model_config = ConfigDict(use_enum_values=True)

    title: str = Field(..., min_length=1, max_length=255)
    slug: str = Field(..., min_length=1, max_length=255, pattern=SLUG_PATTERN)
    description: str = Field(..., min_length=1)
    price: int = Field(0, ge=0)
    thumbnail_url: Optional[str] = Field(None, max_length=500)
    instructor_id: Optional[int] = None
    category_id: int
    level: CourseLevel = CourseLevel.BEGINNER
    duration_hours: int = Field(0, ge=0)
    is_featured: bool = False


class CourseUpdate(FieldMask):
    nullable_fields: ClassVar[FrozenSet[str]] = frozenset({"thumbnail_url"})

    title: Optional[str] = Field(None, min_length=1, max_length=255)
    slug: Optional[str] = Field(None, min_length=1, max_length=255, pattern=SLUG_PATTERN)
    description: Optional[str] = Field(None, min_length=1)
    price: Optional[int] = Field(None, ge=0)
    thumbnail_url: Optional[str] = Field(None, max_length=500)
    instructor_id: Optional[int] = None
    category_id: Optional[int] = None
    level: Optional[CourseLevel] = None
    duration_hours: Optional[int] = Field(None, ge=0)
    is_featured: Optional[bool] = None


class CourseRead(ReadModel):
    id: int
    title: str
    slug: str
    description: str
    price: int
    thumbnail_url: Optional[str] = None
    instructor_id: int
    category_id: int
    level: CourseLevel
    duration_hours: int
    is_featured: bool
    created_at: datetime
    updated_at: datetime


class CourseFilters(BaseModel):
    """Catalogue filters, combined with logical AND."""

    category_id: Optional[int] = None
    featured: Optional[bool] = None
    search: Optional[str] = None

    def matches(self, course: CourseRead) -> bool:
        if self.category_id is not None and course.category_id != self.category_id:
            return False
        if self.featured and not course.is_featured:
            return False
        if self.search:
            term = self.search.lower()
            return term in course.title.lower() or term in course.description.lower()
        return True


class SectionCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=255)
    course_id: int
    order: int = Field(..., ge=0)


class SectionUpdate(FieldMask):
    title: Optional[str] = Field(None, min_length=1, max_length=255)
    order: Optional[int] = Field(None, ge=0)


class SectionRead(ReadModel):
    id: int
    title: str
    course_id: int
    order: int


class LessonCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = None
    video_url: str = Field(..., min_length=1, max_length=500)
    section_id: int
    order: int = Field(..., ge=0)
    duration_minutes: int = Field(0, ge=0)


class LessonUpdate(FieldMask):
    nullable_fields: ClassVar[FrozenSet[str]] = frozenset({"description"})

    title: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = None
    video_url: Optional[str] = Field(None, min_length=1, max_length=500)
    order: Optional[int] = Field(None, ge=0)
    duration_minutes: Optional[int] = Field(None, ge=0)


class LessonRead(ReadModel):
    id: int
    title: str
    description: Optional[str] = None
    video_url: str
    section_id: int
    order: int
    duration_minutes: int
