"""
Persistence contract for LearnHub.

Both adapters (in-memory and relational) implement this interface with
identical semantics:

- lookups by id, slug or unique key return the record or ``None``
- list operations return a (possibly empty) list
- create operations assign a new id and set timestamps server-side
- update operations apply a field mask and return ``None`` if the target
  is missing; the id is never part of the mask
- delete operations return whether a row existed and never raise on a
  missing target
- unique-key violations raise ``Conflict``
"""

from abc import ABC, abstractmethod
from typing import List, Optional

from learnhub.schemas import (
    CategoryCreate,
    CategoryRead,
    CourseCreate,
    CourseFilters,
    CourseRead,
    CourseUpdate,
    EnrollmentRead,
    LessonCreate,
    LessonRead,
    LessonUpdate,
    ReviewCreate,
    ReviewRead,
    SectionCreate,
    SectionRead,
    SectionUpdate,
    UserCreate,
    UserInDB,
    UserUpdate,
)


class Storage(ABC):
    """Capability set every persistence adapter provides."""

    # User methods
    @abstractmethod
    def get_user(self, user_id: int) -> Optional[UserInDB]: ...

    @abstractmethod
    def get_user_by_username(self, username: str) -> Optional[UserInDB]: ...

    @abstractmethod
    def get_user_by_email(self, email: str) -> Optional[UserInDB]: ...

    @abstractmethod
    def list_users(self) -> List[UserInDB]: ...

    @abstractmethod
    def create_user(
        self,
        user: UserCreate,
        hashed_password: str,
        is_admin: bool = False,
        is_instructor: bool = False,
    ) -> UserInDB: ...

    @abstractmethod
    def update_user(self, user_id: int, update: UserUpdate) -> Optional[UserInDB]: ...

    # Category methods
    @abstractmethod
    def list_categories(self) -> List[CategoryRead]: ...

    @abstractmethod
    def get_category(self, category_id: int) -> Optional[CategoryRead]: ...

    @abstractmethod
    def get_category_by_slug(self, slug: str) -> Optional[CategoryRead]: ...

    @abstractmethod
    def create_category(self, category: CategoryCreate) -> CategoryRead: ...

    # Course methods
    @abstractmethod
    def list_courses(self, filters: Optional[CourseFilters] = None) -> List[CourseRead]: ...

    @abstractmethod
    def get_course(self, course_id: int) -> Optional[CourseRead]: ...

    @abstractmethod
    def get_course_by_slug(self, slug: str) -> Optional[CourseRead]: ...

    @abstractmethod
    def list_courses_by_instructor(self, instructor_id: int) -> List[CourseRead]: ...

    @abstractmethod
    def create_course(self, course: CourseCreate) -> CourseRead:
        """``course.instructor_id`` must be set by the caller."""

    @abstractmethod
    def update_course(self, course_id: int, update: CourseUpdate) -> Optional[CourseRead]: ...

    @abstractmethod
    def delete_course(self, course_id: int) -> bool:
        """Removes the course with its sections, lessons, enrollments and reviews."""

    # Section methods
    @abstractmethod
    def list_sections_by_course(self, course_id: int) -> List[SectionRead]: ...

    @abstractmethod
    def get_section(self, section_id: int) -> Optional[SectionRead]: ...

    @abstractmethod
    def create_section(self, section: SectionCreate) -> SectionRead: ...

    @abstractmethod
    def update_section(self, section_id: int, update: SectionUpdate) -> Optional[SectionRead]: ...

    @abstractmethod
    def delete_section(self, section_id: int) -> bool: ...

    # Lesson methods
    @abstractmethod
    def list_lessons_by_section(self, section_id: int) -> List[LessonRead]: ...

    @abstractmethod
    def get_lesson(self, lesson_id: int) -> Optional[LessonRead]: ...

    @abstractmethod
    def create_lesson(self, lesson: LessonCreate) -> LessonRead: ...

    @abstractmethod
    def update_lesson(self, lesson_id: int, update: LessonUpdate) -> Optional[LessonRead]: ...

    @abstractmethod
    def delete_lesson(self, lesson_id: int) -> bool: ...

    @abstractmethod
    def count_lessons_by_course(self, course_id: int) -> int: ...

    # Enrollment methods
    @abstractmethod
    def list_enrollments_by_user(self, user_id: int) -> List[EnrollmentRead]: ...

    @abstractmethod
    def get_enrollment(self, enrollment_id: int) -> Optional[EnrollmentRead]: ...

    @abstractmethod
    def get_enrollment_by_course_and_user(
        self, course_id: int, user_id: int
    ) -> Optional[EnrollmentRead]: ...

    @abstractmethod
    def create_enrollment(self, user_id: int, course_id: int) -> EnrollmentRead: ...

    @abstractmethod
    def upsert_lesson_progress(
        self, enrollment_id: int, lesson_id: int, completed: bool
    ) -> Optional[EnrollmentRead]:
        """
        Set one key of the progress mapping as a single atomic write.

        Concurrent writes for different lessons of the same enrollment never
        overwrite each other. Returns ``None`` if the enrollment is missing.
        """

    @abstractmethod
    def set_enrollment_completed(
        self, enrollment_id: int, is_completed: bool
    ) -> Optional[EnrollmentRead]: ...

    # Review methods
    @abstractmethod
    def list_reviews_by_course(self, course_id: int) -> List[ReviewRead]: ...

    @abstractmethod
    def get_review_by_course_and_user(
        self, course_id: int, user_id: int
    ) -> Optional[ReviewRead]: ...

    @abstractmethod
    def create_review(self, user_id: int, review: ReviewCreate) -> ReviewRead: ...
