"""
Enrollment and progress schemas.
"""

from datetime import datetime
from typing import Dict
from pydantic import AliasChoices, BaseModel, Field, StrictBool, StrictInt

from .base import ReadModel
from .course import CourseRead


class EnrollmentCreate(BaseModel):
    course_id: StrictInt


class EnrollmentRead(ReadModel):
    id: int
    user_id: int
    course_id: int
    enrolled_at: datetime
    progress: Dict[str, bool] = Field(default_factory=dict)
    is_completed: bool = False

    @property
    def completed_lesson_count(self) -> int:
        return sum(1 for done in self.progress.values() if done)


class ProgressUpdate(BaseModel):
    """
    Body of a progress write; types are strict, "1" or "true" are rejected.

    The lesson may be sent as either ``lesson_id`` or ``lessonId``.
    """

    lesson_id: StrictInt = Field(..., validation_alias=AliasChoices("lesson_id", "lessonId"))
    completed: StrictBool


class ProgressSummary(BaseModel):
    completed_lessons: int
    total_lessons: int
    percentage: int = Field(..., ge=0, le=100)
    is_completed: bool


class EnrolledCourse(BaseModel):
    enrollment: EnrollmentRead
    course: CourseRead
    progress: ProgressSummary
