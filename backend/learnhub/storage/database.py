"""
Relational storage adapter for LearnHub.

Backed by SQLAlchemy; identity comes from the database's autoincrement
keys. Each operation runs in its own short session and returns pydantic
records, so nothing handed back to callers is bound to a session.
"""

from contextlib import contextmanager
from typing import Any, Callable, Iterator, List, Optional, Type
import logging

from sqlalchemy import func, or_, select, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from learnhub.core.exceptions import Conflict, InternalError
from learnhub.models import (
    Category,
    Course,
    Enrollment,
    Lesson,
    LessonProgress,
    Review,
    Section,
    User,
)
from learnhub.schemas import (
    CategoryCreate,
    CategoryRead,
    CourseCreate,
    CourseFilters,
    CourseRead,
    CourseUpdate,
    EnrollmentRead,
    FieldMask,
    LessonCreate,
    LessonRead,
    LessonUpdate,
    ReadModel,
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


class DatabaseStorage(Storage):
    """Durable implementation of the storage contract."""

    def __init__(self, session_factory: Callable[[], Session]) -> None:
        self._session_factory = session_factory

    @contextmanager
    def _session(self) -> Iterator[Session]:
        db = self._session_factory()
        try:
            yield db
        except IntegrityError:
            db.rollback()
            raise
        except SQLAlchemyError as e:
            db.rollback()
            logger.exception(f"Storage operation failed: {e}")
            raise InternalError() from e
        finally:
            db.close()

    def _add(self, db: Session, row: Any, conflict_message: str) -> None:
        db.add(row)
        try:
            db.commit()
        except IntegrityError as e:
            db.rollback()
            logger.warning(f"{conflict_message}: {e.orig}")
            raise Conflict(conflict_message) from e
        db.refresh(row)

    def _first(self, schema: Type[ReadModel], statement) -> Optional[Any]:
        with self._session() as db:
            row = db.scalars(statement).first()
            return schema.model_validate(row) if row is not None else None

    def _all(self, schema: Type[ReadModel], statement) -> List[Any]:
        with self._session() as db:
            return [schema.model_validate(row) for row in db.scalars(statement).all()]

    def _apply(
        self,
        model: Type[Any],
        schema: Type[ReadModel],
        row_id: int,
        mask: FieldMask,
        conflict_message: str = "Update violates a unique constraint",
    ) -> Optional[Any]:
        with self._session() as db:
            row = db.get(model, row_id)
            if row is None:
                return None
            for field, value in mask.changes().items():
                setattr(row, field, value)
            try:
                db.commit()
            except IntegrityError as e:
                db.rollback()
                raise Conflict(conflict_message) from e
            db.refresh(row)
            return schema.model_validate(row)

    def _delete(self, model: Type[Any], row_id: int) -> bool:
        with self._session() as db:
            row = db.get(model, row_id)
            if row is None:
                return False
            db.delete(row)
            db.commit()
            logger.info(f"{model.__name__} deleted: id={row_id}")
            return True

    # User methods
    def get_user(self, user_id: int) -> Optional[UserInDB]:
        return self._first(UserInDB, select(User).where(User.id == user_id))

    def get_user_by_username(self, username: str) -> Optional[UserInDB]:
        return self._first(UserInDB, select(User).where(User.username == username))

    def get_user_by_email(self, email: str) -> Optional[UserInDB]:
        return self._first(UserInDB, select(User).where(User.email == email))

    def list_users(self) -> List[UserInDB]:
        return self._all(UserInDB, select(User).order_by(User.id))

    def create_user(
        self,
        user: UserCreate,
        hashed_password: str,
        is_admin: bool = False,
        is_instructor: bool = False,
    ) -> UserInDB:
        with self._session() as db:
            row = User(
                hashed_password=hashed_password,
                is_admin=is_admin,
                is_instructor=is_instructor,
                **user.model_dump(exclude={"password"}),
            )
            self._add(db, row, "Username or email already registered")
            logger.info(f"User created: {row.username} (id={row.id})")
            return UserInDB.model_validate(row)

    def update_user(self, user_id: int, update: UserUpdate) -> Optional[UserInDB]:
        return self._apply(User, UserInDB, user_id, update)

    # Category methods
    def list_categories(self) -> List[CategoryRead]:
        return self._all(CategoryRead, select(Category).order_by(Category.id))

    def get_category(self, category_id: int) -> Optional[CategoryRead]:
        return self._first(CategoryRead, select(Category).where(Category.id == category_id))

    def get_category_by_slug(self, slug: str) -> Optional[CategoryRead]:
        return self._first(CategoryRead, select(Category).where(Category.slug == slug))

    def create_category(self, category: CategoryCreate) -> CategoryRead:
        with self._session() as db:
            row = Category(**category.model_dump())
            self._add(db, row, "Category with this slug already exists")
            return CategoryRead.model_validate(row)

    # Course methods
    def list_courses(self, filters: Optional[CourseFilters] = None) -> List[CourseRead]:
        query = select(Course)

        if filters is not None:
            if filters.category_id is not None:
                query = query.where(Course.category_id == filters.category_id)

            if filters.featured:
                query = query.where(Course.is_featured.is_(True))

            if filters.search:
                # autoescape keeps % and _ literal, matching CourseFilters.matches
                query = query.where(
                    or_(
                        Course.title.icontains(filters.search, autoescape=True),
                        Course.description.icontains(filters.search, autoescape=True)
                    )
                )

        return self._all(CourseRead, query.order_by(Course.id))

    def get_course(self, course_id: int) -> Optional[CourseRead]:
        return self._first(CourseRead, select(Course).where(Course.id == course_id))

    def get_course_by_slug(self, slug: str) -> Optional[CourseRead]:
        return self._first(CourseRead, select(Course).where(Course.slug == slug))

    def list_courses_by_instructor(self, instructor_id: int) -> List[CourseRead]:
        return self._all(
            CourseRead,
            select(Course).where(Course.instructor_id == instructor_id).order_by(Course.id)
        )

    def create_course(self, course: CourseCreate) -> CourseRead:
        with self._session() as db:
            row = Course(**course.model_dump())
            self._add(db, row, "Course with this slug already exists")
            logger.info(f"Course created: {row.slug} (id={row.id})")
            return CourseRead.model_validate(row)

    def update_course(self, course_id: int, update: CourseUpdate) -> Optional[CourseRead]:
        return self._apply(
            Course, CourseRead, course_id, update, "Course with this slug already exists"
        )

    def delete_course(self, course_id: int) -> bool:
        return self._delete(Course, course_id)

    # Section methods
    def list_sections_by_course(self, course_id: int) -> List[SectionRead]:
        return self._all(
            SectionRead,
            select(Section)
            .where(Section.course_id == course_id)
            .order_by(Section.order, Section.id)
        )

    def get_section(self, section_id: int) -> Optional[SectionRead]:
        return self._first(SectionRead, select(Section).where(Section.id == section_id))

    def create_section(self, section: SectionCreate) -> SectionRead:
        with self._session() as db:
            row = Section(**section.model_dump())
            self._add(db, row, "Section could not be created")
            return SectionRead.model_validate(row)

    def update_section(self, section_id: int, update: SectionUpdate) -> Optional[SectionRead]:
        return self._apply(Section, SectionRead, section_id, update)

    def delete_section(self, section_id: int) -> bool:
        return self._delete(Section, section_id)

    # Lesson methods
    def list_lessons_by_section(self, section_id: int) -> List[LessonRead]:
        return self._all(
            LessonRead,
            select(Lesson)
            .where(Lesson.section_id == section_id)
            .order_by(Lesson.order, Lesson.id)
        )

    def get_lesson(self, lesson_id: int) -> Optional[LessonRead]:
        return self._first(LessonRead, select(Lesson).where(Lesson.id == lesson_id))

    def create_lesson(self, lesson: LessonCreate) -> LessonRead:
        with self._session() as db:
            row = Lesson(**lesson.model_dump())
            self._add(db, row, "Lesson could not be created")
            return LessonRead.model_validate(row)

    def update_lesson(self, lesson_id: int, update: LessonUpdate) -> Optional[LessonRead]:
        return self._apply(Lesson, LessonRead, lesson_id, update)

    def delete_lesson(self, lesson_id: int) -> bool:
        return self._delete(Lesson, lesson_id)

    def count_lessons_by_course(self, course_id: int) -> int:
        with self._session() as db:
            return db.scalar(
                select(func.count(Lesson.id))
                .join(Section, Lesson.section_id == Section.id)
                .where(Section.course_id == course_id)
            ) or 0

    # Enrollment methods
    def list_enrollments_by_user(self, user_id: int) -> List[EnrollmentRead]:
        return self._all(
            EnrollmentRead,
            select(Enrollment).where(Enrollment.user_id == user_id).order_by(Enrollment.id)
        )

    def get_enrollment(self, enrollment_id: int) -> Optional[EnrollmentRead]:
        return self._first(EnrollmentRead, select(Enrollment).where(Enrollment.id == enrollment_id))

    def get_enrollment_by_course_and_user(
        self, course_id: int, user_id: int
    ) -> Optional[EnrollmentRead]:
        return self._first(
            EnrollmentRead,
            select(Enrollment).where(
                Enrollment.course_id == course_id,
                Enrollment.user_id == user_id
            )
        )

    def create_enrollment(self, user_id: int, course_id: int) -> EnrollmentRead:
        with self._session() as db:
            row = Enrollment(user_id=user_id, course_id=course_id, is_completed=False)
            self._add(db, row, "Already enrolled in this course")
            logger.info(f"Enrollment created: user={user_id} course={course_id}")
            return EnrollmentRead.model_validate(row)

    def _progress_upsert(self, db: Session, enrollment_id: int, lesson_id: int, completed: bool):
        """Single-statement insert-or-update of one progress row."""
        dialect = db.get_bind().dialect.name
        if dialect == "postgresql":
            from sqlalchemy.dialects.postgresql import insert
        elif dialect == "sqlite":
            from sqlalchemy.dialects.sqlite import insert
        else:
            raise InternalError(f"Progress upsert is not supported on {dialect}")

        statement = insert(LessonProgress).values(
            enrollment_id=enrollment_id,
            lesson_id=lesson_id,
            completed=completed
        )
        return statement.on_conflict_do_update(
            index_elements=[LessonProgress.enrollment_id, LessonProgress.lesson_id],
            set_={"completed": statement.excluded.completed, "updated_at": func.now()}
        )

    def upsert_lesson_progress(
        self, enrollment_id: int, lesson_id: int, completed: bool
    ) -> Optional[EnrollmentRead]:
        with self._session() as db:
            if db.get(Enrollment, enrollment_id) is None:
                return None
            db.execute(self._progress_upsert(db, enrollment_id, lesson_id, completed))
            db.commit()
            db.expire_all()
            row = db.scalars(select(Enrollment).where(Enrollment.id == enrollment_id)).one()
            return EnrollmentRead.model_validate(row)

    def set_enrollment_completed(
        self, enrollment_id: int, is_completed: bool
    ) -> Optional[EnrollmentRead]:
        with self._session() as db:
            result = db.execute(
                update(Enrollment)
                .where(Enrollment.id == enrollment_id)
                .values(is_completed=is_completed)
            )
            db.commit()
            if result.rowcount == 0:
                return None
            db.expire_all()
            row = db.scalars(select(Enrollment).where(Enrollment.id == enrollment_id)).one()
            return EnrollmentRead.model_validate(row)

    # Review methods
    def list_reviews_by_course(self, course_id: int) -> List[ReviewRead]:
        return self._all(
            ReviewRead,
            select(Review).where(Review.course_id == course_id).order_by(Review.id)
        )

    def get_review_by_course_and_user(
        self, course_id: int, user_id: int
    ) -> Optional[ReviewRead]:
        return self._first(
            ReviewRead,
            select(Review).where(Review.course_id == course_id, Review.user_id == user_id)
        )

    def create_review(self, user_id: int, review: ReviewCreate) -> ReviewRead:
        with self._session() as db:
            row = Review(user_id=user_id, **review.model_dump())
            self._add(db, row, "You have already reviewed this course")
            return ReviewRead.model_validate(row)
