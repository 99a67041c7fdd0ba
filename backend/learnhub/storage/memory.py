"""
In-memory storage adapter for LearnHub.

Map-backed, process-lifetime store used for tests and demos. Each entity
type has its own monotonic id counter; every mutation runs under a single
re-entrant lock so read-modify-write sequences cannot interleave.
"""

from datetime import datetime, timezone
from itertools import count
from threading import RLock
from typing import Dict, List, Optional
import logging

from learnhub.core.exceptions import Conflict
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
from .base import Storage


logger = logging.getLogger(__name__)


def _copy(record):
    """Detached copy of a stored record, or None."""
    return record.model_copy() if record is not None else None


def _now() -> datetime:
    return datetime.now(timezone.utc)


class MemoryStorage(Storage):
    """Non-durable implementation of the storage contract."""

    def __init__(self) -> None:
        self._lock = RLock()
        self._users: Dict[int, UserInDB] = {}
        self._categories: Dict[int, CategoryRead] = {}
        self._courses: Dict[int, CourseRead] = {}
        self._sections: Dict[int, SectionRead] = {}
        self._lessons: Dict[int, LessonRead] = {}
        self._enrollments: Dict[int, EnrollmentRead] = {}
        self._reviews: Dict[int, ReviewRead] = {}
        # enrollment id -> lesson id -> completed
        self._progress: Dict[int, Dict[int, bool]] = {}
        self._ids = {
            name: count(1)
            for name in ("user", "category", "course", "section", "lesson", "enrollment", "review")
        }

    def _next_id(self, entity: str) -> int:
        return next(self._ids[entity])

    # User methods
    def get_user(self, user_id: int) -> Optional[UserInDB]:
        return _copy(self._users.get(user_id))

    def get_user_by_username(self, username: str) -> Optional[UserInDB]:
        return _copy(next((u for u in self._users.values() if u.username == username), None))

    def get_user_by_email(self, email: str) -> Optional[UserInDB]:
        return _copy(next((u for u in self._users.values() if u.email == email), None))

    def list_users(self) -> List[UserInDB]:
        return [record.model_copy() for record in self._users.values()]

    def create_user(
        self,
        user: UserCreate,
        hashed_password: str,
        is_admin: bool = False,
        is_instructor: bool = False,
    ) -> UserInDB:
        with self._lock:
            if self.get_user_by_username(user.username) or self.get_user_by_email(user.email):
                logger.warning(f"Duplicate user rejected: {user.username}")
                raise Conflict("Username or email already registered")

            record = UserInDB(
                id=self._next_id("user"),
                hashed_password=hashed_password,
                is_admin=is_admin,
                is_instructor=is_instructor,
                created_at=_now(),
                **user.model_dump(exclude={"password"}),
            )
            self._users[record.id] = record
            logger.info(f"User created: {record.username} (id={record.id})")
            return record.model_copy()

    def update_user(self, user_id: int, update: UserUpdate) -> Optional[UserInDB]:
        with self._lock:
            user = self._users.get(user_id)
            if user is None:
                return None
            updated = user.model_copy(update=update.changes())
            self._users[user_id] = updated
            return updated.model_copy()

    # Category methods
    def list_categories(self) -> List[CategoryRead]:
        return [record.model_copy() for record in self._categories.values()]

    def get_category(self, category_id: int) -> Optional[CategoryRead]:
        return _copy(self._categories.get(category_id))

    def get_category_by_slug(self, slug: str) -> Optional[CategoryRead]:
        return _copy(next((c for c in self._categories.values() if c.slug == slug), None))

    def create_category(self, category: CategoryCreate) -> CategoryRead:
        with self._lock:
            if self.get_category_by_slug(category.slug):
                raise Conflict("Category with this slug already exists")
            record = CategoryRead(id=self._next_id("category"), **category.model_dump())
            self._categories[record.id] = record
            return record.model_copy()

    # Course methods
    def list_courses(self, filters: Optional[CourseFilters] = None) -> List[CourseRead]:
        courses = [course.model_copy() for course in self._courses.values()]
        if filters is None:
            return courses
        return [course for course in courses if filters.matches(course)]

    def get_course(self, course_id: int) -> Optional[CourseRead]:
        return _copy(self._courses.get(course_id))

    def get_course_by_slug(self, slug: str) -> Optional[CourseRead]:
        return _copy(next((c for c in self._courses.values() if c.slug == slug), None))

    def list_courses_by_instructor(self, instructor_id: int) -> List[CourseRead]:
        return [c.model_copy() for c in self._courses.values() if c.instructor_id == instructor_id]

    def create_course(self, course: CourseCreate) -> CourseRead:
        with self._lock:
            if self.get_course_by_slug(course.slug):
                logger.warning(f"Duplicate course slug rejected: {course.slug}")
                raise Conflict("Course with this slug already exists")
            now = _now()
            record = CourseRead(
                id=self._next_id("course"),
                created_at=now,
                updated_at=now,
                **course.model_dump(),
            )
            self._courses[record.id] = record
            logger.info(f"Course created: {record.slug} (id={record.id})")
            return record.model_copy()

    def update_course(self, course_id: int, update: CourseUpdate) -> Optional[CourseRead]:
        with self._lock:
            course = self._courses.get(course_id)
            if course is None:
                return None
            changes = update.changes()
            slug = changes.get("slug")
            if slug and slug != course.slug and self.get_course_by_slug(slug):
                raise Conflict("Course with this slug already exists")
            updated = course.model_copy(update={**changes, "updated_at": _now()})
            self._courses[course_id] = updated
            return updated.model_copy()

    def delete_course(self, course_id: int) -> bool:
        with self._lock:
            if self._courses.pop(course_id, None) is None:
                return False
            for section in self.list_sections_by_course(course_id):
                self.delete_section(section.id)
            for enrollment_id in [e.id for e in self._enrollments.values() if e.course_id == course_id]:
                del self._enrollments[enrollment_id]
                self._progress.pop(enrollment_id, None)
            for review_id in [r.id for r in self._reviews.values() if r.course_id == course_id]:
                del self._reviews[review_id]
            logger.info(f"Course deleted: id={course_id}")
            return True

    # Section methods
    def list_sections_by_course(self, course_id: int) -> List[SectionRead]:
        sections = [s for s in self._sections.values() if s.course_id == course_id]
        return [s.model_copy() for s in sorted(sections, key=lambda s: (s.order, s.id))]

    def get_section(self, section_id: int) -> Optional[SectionRead]:
        return _copy(self._sections.get(section_id))

    def create_section(self, section: SectionCreate) -> SectionRead:
        with self._lock:
            record = SectionRead(id=self._next_id("section"), **section.model_dump())
            self._sections[record.id] = record
            return record.model_copy()

    def update_section(self, section_id: int, update: SectionUpdate) -> Optional[SectionRead]:
        with self._lock:
            section = self._sections.get(section_id)
            if section is None:
                return None
            updated = section.model_copy(update=update.changes())
            self._sections[section_id] = updated
            return updated.model_copy()

    def delete_section(self, section_id: int) -> bool:
        with self._lock:
            if self._sections.pop(section_id, None) is None:
                return False
            for lesson in self.list_lessons_by_section(section_id):
                self.delete_lesson(lesson.id)
            return True

    # Lesson methods
    def list_lessons_by_section(self, section_id: int) -> List[LessonRead]:
        lessons = [l for l in self._lessons.values() if l.section_id == section_id]
        return [l.model_copy() for l in sorted(lessons, key=lambda l: (l.order, l.id))]

    def get_lesson(self, lesson_id: int) -> Optional[LessonRead]:
        return _copy(self._lessons.get(lesson_id))

    def create_lesson(self, lesson: LessonCreate) -> LessonRead:
        with self._lock:
            record = LessonRead(id=self._next_id("lesson"), **lesson.model_dump())
            self._lessons[record.id] = record
            return record.model_copy()

    def update_lesson(self, lesson_id: int, update: LessonUpdate) -> Optional[LessonRead]:
        with self._lock:
            lesson = self._lessons.get(lesson_id)
            if lesson is None:
                return None
            updated = lesson.model_copy(update=update.changes())
            self._lessons[lesson_id] = updated
            return updated.model_copy()

    def delete_lesson(self, lesson_id: int) -> bool:
        with self._lock:
            if self._lessons.pop(lesson_id, None) is None:
                return False
            for progress in self._progress.values():
                progress.pop(lesson_id, None)
            return True

    def count_lessons_by_course(self, course_id: int) -> int:
        section_ids = {s.id for s in self._sections.values() if s.course_id == course_id}
        return sum(1 for lesson in self._lessons.values() if lesson.section_id in section_ids)

    # Enrollment methods
    def _with_progress(self, enrollment: EnrollmentRead) -> EnrollmentRead:
        progress = self._progress.get(enrollment.id, {})
        return enrollment.model_copy(
            update={"progress": {str(lesson_id): done for lesson_id, done in progress.items()}}
        )

    def list_enrollments_by_user(self, user_id: int) -> List[EnrollmentRead]:
        with self._lock:
            return [
                self._with_progress(e) for e in self._enrollments.values() if e.user_id == user_id
            ]

    def get_enrollment(self, enrollment_id: int) -> Optional[EnrollmentRead]:
        with self._lock:
            enrollment = self._enrollments.get(enrollment_id)
            return self._with_progress(enrollment) if enrollment else None

    def get_enrollment_by_course_and_user(
        self, course_id: int, user_id: int
    ) -> Optional[EnrollmentRead]:
        with self._lock:
            enrollment = next(
                (
                    e for e in self._enrollments.values()
                    if e.course_id == course_id and e.user_id == user_id
                ),
                None,
            )
            return self._with_progress(enrollment) if enrollment else None

    def create_enrollment(self, user_id: int, course_id: int) -> EnrollmentRead:
        with self._lock:
            if self.get_enrollment_by_course_and_user(course_id, user_id):
                logger.warning(f"Duplicate enrollment rejected: user={user_id} course={course_id}")
                raise Conflict("Already enrolled in this course")
            record = EnrollmentRead(
                id=self._next_id("enrollment"),
                user_id=user_id,
                course_id=course_id,
                enrolled_at=_now(),
                progress={},
                is_completed=False,
            )
            self._enrollments[record.id] = record
            self._progress[record.id] = {}
            logger.info(f"Enrollment created: user={user_id} course={course_id}")
            return self._with_progress(record)

    def upsert_lesson_progress(
        self, enrollment_id: int, lesson_id: int, completed: bool
    ) -> Optional[EnrollmentRead]:
        with self._lock:
            enrollment = self._enrollments.get(enrollment_id)
            if enrollment is None:
                return None
            self._progress.setdefault(enrollment_id, {})[lesson_id] = completed
            return self._with_progress(enrollment)

    def set_enrollment_completed(
        self, enrollment_id: int, is_completed: bool
    ) -> Optional[EnrollmentRead]:
        with self._lock:
            enrollment = self._enrollments.get(enrollment_id)
            if enrollment is None:
                return None
            updated = enrollment.model_copy(update={"is_completed": is_completed})
            self._enrollments[enrollment_id] = updated
            return self._with_progress(updated)

    # Review methods
    def list_reviews_by_course(self, course_id: int) -> List[ReviewRead]:
        return [r.model_copy() for r in self._reviews.values() if r.course_id == course_id]

    def get_review_by_course_and_user(
        self, course_id: int, user_id: int
    ) -> Optional[ReviewRead]:
        return _copy(next(
            (r for r in self._reviews.values() if r.course_id == course_id and r.user_id == user_id),
            None,
        ))

    def create_review(self, user_id: int, review: ReviewCreate) -> ReviewRead:
        with self._lock:
            if self.get_review_by_course_and_user(review.course_id, user_id):
                raise Conflict("You have already reviewed this course")
            record = ReviewRead(
                id=self._next_id("review"),
                user_id=user_id,
                created_at=_now(),
                **review.model_dump(),
            )
            self._reviews[record.id] = record
            return record.model_copy()
