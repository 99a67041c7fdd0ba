"""Tests for the storage contract, run against both adapters."""

import pytest
from pydantic import ValidationError as SchemaValidationError

from conftest import Catalog, add_lesson, make_user
from learnhub.core.exceptions import Conflict
from learnhub.schemas import (
    CourseCreate,
    CourseFilters,
    CourseUpdate,
    ReviewCreate,
    SectionCreate,
    SectionUpdate,
    UserUpdate,
)
from learnhub.storage import Storage


class TestLookups:
    """Lookups return the record or None."""

    def test_missing_records_are_none(self, storage: Storage) -> None:
        """Unknown ids, slugs and keys should yield None."""
        assert storage.get_user(999) is None
        assert storage.get_user_by_username("nobody") is None
        assert storage.get_user_by_email("nobody@learnhub.dev") is None
        assert storage.get_course(999) is None
        assert storage.get_course_by_slug("missing") is None
        assert storage.get_category_by_slug("missing") is None

    def test_results_are_detached(self, storage: Storage, catalog: Catalog) -> None:
        """Editing a returned record should not change what is stored."""
        course = storage.get_course(catalog.course.id)
        course.title = "Renamed"
        storage.list_courses()[0].is_featured = True
        storage.get_user(catalog.learner.id).is_admin = True

        stored = storage.get_course(catalog.course.id)
        assert stored.title == "Python Fundamentals"
        assert stored.is_featured is False
        assert storage.get_user(catalog.learner.id).is_admin is False
        assert storage.get_section(999) is None
        assert storage.get_lesson(999) is None
        assert storage.get_enrollment(999) is None
        assert storage.get_enrollment_by_course_and_user(1, 1) is None
        assert storage.get_review_by_course_and_user(1, 1) is None

    def test_lists_are_empty(self, storage: Storage) -> None:
        """Lists over an empty store should be empty, never None."""
        assert storage.list_users() == []
        assert storage.list_categories() == []
        assert storage.list_courses() == []
        assert storage.list_sections_by_course(1) == []
        assert storage.list_lessons_by_section(1) == []
        assert storage.list_enrollments_by_user(1) == []
        assert storage.list_reviews_by_course(1) == []
        assert storage.count_lessons_by_course(1) == 0

    def test_user_lookups(self, storage: Storage) -> None:
        """Users should be found by id, username and email."""
        user = make_user(storage, "alice")

        assert storage.get_user(user.id).username == "alice"
        assert storage.get_user_by_username("alice").id == user.id
        assert storage.get_user_by_email("alice@learnhub.dev").id == user.id
        assert user.hashed_password != "secret123"
        assert user.created_at is not None

    def test_course_lookups(self, storage: Storage, catalog: Catalog) -> None:
        """Courses should be found by id, slug and instructor."""
        assert storage.get_course(catalog.course.id).slug == "python-fundamentals"
        assert storage.get_course_by_slug("python-fundamentals").id == catalog.course.id
        assert [c.id for c in storage.list_courses_by_instructor(catalog.instructor.id)] == [
            catalog.course.id
        ]
        assert storage.list_courses_by_instructor(catalog.learner.id) == []


class TestCreate:
    """Creates assign ids and enforce unique keys."""

    def test_ids_are_distinct(self, storage: Storage) -> None:
        """Each created user should receive a new id."""
        first = make_user(storage, "first")
        second = make_user(storage, "second")
        assert first.id != second.id

    def test_duplicate_username_conflicts(self, storage: Storage) -> None:
        """A second user with the same username should raise Conflict."""
        make_user(storage, "alice")
        with pytest.raises(Conflict):
            make_user(storage, "alice")

    def test_duplicate_course_slug_conflicts(self, storage: Storage, catalog: Catalog) -> None:
        """Course slugs should be unique."""
        with pytest.raises(Conflict):
            storage.create_course(
                CourseCreate(
                    title="Another",
                    slug="python-fundamentals",
                    description="Same slug",
                    instructor_id=catalog.instructor.id,
                    category_id=catalog.category.id,
                )
            )

    def test_duplicate_enrollment_conflicts(self, storage: Storage, catalog: Catalog) -> None:
        """A user may enroll in a course only once."""
        storage.create_enrollment(catalog.learner.id, catalog.course.id)
        with pytest.raises(Conflict):
            storage.create_enrollment(catalog.learner.id, catalog.course.id)

    def test_new_enrollment_has_empty_progress(self, storage: Storage, catalog: Catalog) -> None:
        """Fresh enrollments should start with no progress."""
        enrollment = storage.create_enrollment(catalog.learner.id, catalog.course.id)

        assert enrollment.progress == {}
        assert enrollment.is_completed is False
        assert enrollment.enrolled_at is not None

    def test_duplicate_review_conflicts(self, storage: Storage, catalog: Catalog) -> None:
        """A user may review a course only once."""
        review = ReviewCreate(course_id=catalog.course.id, rating=5, comment="Great")
        storage.create_review(catalog.learner.id, review)
        with pytest.raises(Conflict):
            storage.create_review(catalog.learner.id, review)


class TestUpdate:
    """Updates apply only the fields present in the mask."""

    def test_partial_update_keeps_other_fields(self, storage: Storage, catalog: Catalog) -> None:
        """Fields absent from the mask should be untouched."""
        updated = storage.update_course(catalog.course.id, CourseUpdate(price=4900))

        assert updated.price == 4900
        assert updated.title == catalog.course.title
        assert updated.slug == catalog.course.slug
        assert updated.id == catalog.course.id

    def test_nullable_field_can_be_cleared(self, storage: Storage) -> None:
        """Explicit null should clear a nullable field."""
        user = make_user(storage, "alice")
        storage.update_user(user.id, UserUpdate(bio="Hello"))

        updated = storage.update_user(user.id, UserUpdate(bio=None))

        assert updated.bio is None
        assert updated.first_name == user.first_name

    def test_update_missing_target_returns_none(self, storage: Storage) -> None:
        """Updating an unknown id should return None."""
        assert storage.update_course(999, CourseUpdate(price=1)) is None
        assert storage.update_section(999, SectionUpdate(title="x")) is None
        assert storage.update_user(999, UserUpdate(first_name="x")) is None

    def test_update_to_taken_slug_conflicts(self, storage: Storage, catalog: Catalog) -> None:
        """Renaming a course onto another course's slug should raise Conflict."""
        storage.create_course(
            CourseCreate(
                title="Go",
                slug="go-basics",
                description="Goroutines",
                instructor_id=catalog.instructor.id,
                category_id=catalog.category.id,
            )
        )
        with pytest.raises(Conflict):
            storage.update_course(catalog.course.id, CourseUpdate(slug="go-basics"))


class TestFieldMask:
    """Field masks never carry identifiers or nulls for required fields."""

    def test_id_is_rejected(self) -> None:
        """The identifier may not be part of a mask."""
        with pytest.raises(SchemaValidationError):
            CourseUpdate(id=5)

    def test_null_for_required_field_is_rejected(self) -> None:
        """Non-nullable fields may be omitted but not nulled."""
        with pytest.raises(SchemaValidationError):
            CourseUpdate(title=None)

    def test_changes_only_lists_set_fields(self) -> None:
        """changes() should contain exactly the provided fields."""
        mask = CourseUpdate(price=100, thumbnail_url=None)
        assert mask.changes() == {"price": 100, "thumbnail_url": None}
        assert not mask.is_empty()
        assert CourseUpdate().is_empty()


class TestDelete:
    """Deletes report whether a row existed and cascade to children."""

    def test_delete_missing_returns_false(self, storage: Storage) -> None:
        """Deleting an unknown id should return False without raising."""
        assert storage.delete_course(999) is False
        assert storage.delete_section(999) is False
        assert storage.delete_lesson(999) is False

    def test_delete_is_idempotent(self, storage: Storage, catalog: Catalog) -> None:
        """A second delete should return False."""
        assert storage.delete_lesson(catalog.lessons[0].id) is True
        assert storage.delete_lesson(catalog.lessons[0].id) is False
        assert storage.get_lesson(catalog.lessons[0].id) is None

    def test_course_delete_cascades(self, storage: Storage, catalog: Catalog) -> None:
        """Deleting a course should remove its content, enrollments and reviews."""
        enrollment = storage.create_enrollment(catalog.learner.id, catalog.course.id)
        storage.upsert_lesson_progress(enrollment.id, catalog.lessons[0].id, True)
        storage.create_review(
            catalog.learner.id, ReviewCreate(course_id=catalog.course.id, rating=4)
        )

        assert storage.delete_course(catalog.course.id) is True

        assert storage.get_course(catalog.course.id) is None
        assert storage.get_section(catalog.section.id) is None
        assert all(storage.get_lesson(lesson.id) is None for lesson in catalog.lessons)
        assert storage.get_enrollment(enrollment.id) is None
        assert storage.list_reviews_by_course(catalog.course.id) == []

    def test_lesson_delete_drops_progress(self, storage: Storage, catalog: Catalog) -> None:
        """Progress entries for a deleted lesson should disappear."""
        first, second = catalog.lessons
        enrollment = storage.create_enrollment(catalog.learner.id, catalog.course.id)
        storage.upsert_lesson_progress(enrollment.id, first.id, True)
        storage.upsert_lesson_progress(enrollment.id, second.id, True)

        assert storage.delete_lesson(first.id) is True

        assert storage.get_enrollment(enrollment.id).progress == {str(second.id): True}

    def test_section_delete_removes_lessons(self, storage: Storage, catalog: Catalog) -> None:
        """Deleting a section should delete its lessons, not the course."""
        enrollment = storage.create_enrollment(catalog.learner.id, catalog.course.id)
        storage.upsert_lesson_progress(enrollment.id, catalog.lessons[0].id, True)

        assert storage.delete_section(catalog.section.id) is True

        assert storage.get_section(catalog.section.id) is None
        assert all(storage.get_lesson(lesson.id) is None for lesson in catalog.lessons)
        assert storage.list_lessons_by_section(catalog.section.id) == []
        assert storage.count_lessons_by_course(catalog.course.id) == 0
        assert storage.get_course(catalog.course.id) is not None
        assert storage.get_enrollment(enrollment.id).progress == {}


class TestOrdering:
    """Sections and lessons come back in display order."""

    def test_sections_ordered_by_order(self, storage: Storage, catalog: Catalog) -> None:
        """Sections should sort by their order field, not by creation."""
        intro = storage.create_section(
            SectionCreate(title="Intro", course_id=catalog.course.id, order=0)
        )
        titles = [s.title for s in storage.list_sections_by_course(catalog.course.id)]
        assert titles == [intro.title, catalog.section.title]

    def test_lessons_ordered_by_order(self, storage: Storage, catalog: Catalog) -> None:
        """Lessons should sort by their order field."""
        first = add_lesson(storage, catalog.section, 0)
        ids = [lesson.id for lesson in storage.list_lessons_by_section(catalog.section.id)]
        assert ids == [first.id] + [lesson.id for lesson in catalog.lessons]

    def test_count_lessons_spans_sections(self, storage: Storage, catalog: Catalog) -> None:
        """Lesson count should include every section of the course."""
        second = storage.create_section(
            SectionCreate(title="Advanced", course_id=catalog.course.id, order=2)
        )
        add_lesson(storage, second, 1)
        assert storage.count_lessons_by_course(catalog.course.id) == 3


class TestCourseFilters:
    """Catalogue filtering."""

    @pytest.fixture
    def courses(self, storage: Storage, catalog: Catalog) -> Catalog:
        storage.create_course(
            CourseCreate(
                title="Advanced SQL",
                slug="advanced-sql",
                description="Window functions and query plans",
                instructor_id=catalog.instructor.id,
                category_id=catalog.category.id,
                is_featured=True,
            )
        )
        return catalog

    def test_no_filters_returns_all(self, storage: Storage, courses: Catalog) -> None:
        """An empty filter should list every course."""
        assert len(storage.list_courses(CourseFilters())) == 2

    def test_search_is_case_insensitive(self, storage: Storage, courses: Catalog) -> None:
        """Search should match title or description ignoring case."""
        assert [c.slug for c in storage.list_courses(CourseFilters(search="PYTHON"))] == [
            "python-fundamentals"
        ]
        assert [c.slug for c in storage.list_courses(CourseFilters(search="query plans"))] == [
            "advanced-sql"
        ]

    def test_featured_filter(self, storage: Storage, courses: Catalog) -> None:
        """featured=True should keep only featured courses; False is no filter."""
        assert [c.slug for c in storage.list_courses(CourseFilters(featured=True))] == [
            "advanced-sql"
        ]
        assert len(storage.list_courses(CourseFilters(featured=False))) == 2

    def test_filters_combine(self, storage: Storage, courses: Catalog) -> None:
        """Filters should be ANDed together."""
        filters = CourseFilters(category_id=courses.category.id, featured=True, search="python")
        assert storage.list_courses(filters) == []

    def test_no_match_is_empty(self, storage: Storage, courses: Catalog) -> None:
        """Unknown categories or terms should yield an empty list."""
        assert storage.list_courses(CourseFilters(category_id=999)) == []
        assert storage.list_courses(CourseFilters(search="haskell")) == []

    @pytest.mark.parametrize("term", ["_", "%", "Python_Fundamentals", "Py%on"])
    def test_wildcards_are_literal(self, storage: Storage, courses: Catalog, term: str) -> None:
        """LIKE wildcards in a search term should only match themselves."""
        assert storage.list_courses(CourseFilters(search=term)) == []

    def test_literal_percent_matches(self, storage: Storage, courses: Catalog) -> None:
        """A percent sign in a title should be found by searching for it."""
        storage.create_course(
            CourseCreate(
                title="100% Test Coverage",
                slug="full-coverage",
                description="Testing everything",
                instructor_id=courses.instructor.id,
                category_id=courses.category.id,
            )
        )
        assert [c.slug for c in storage.list_courses(CourseFilters(search="100%"))] == [
            "full-coverage"
        ]
