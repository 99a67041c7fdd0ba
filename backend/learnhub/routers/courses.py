"""
Courses router for LearnHub.

Handles the course catalogue (filtered listing and detail), course
authoring, and the per-course section and review listings.
"""

from typing import List, Optional
from fastapi import APIRouter, Depends, Response, status
import logging

from learnhub.core.exceptions import Forbidden, NotFound, ValidationError
from learnhub.core.permissions import ensure_course_owner, is_admin
from learnhub.routers.auth import get_current_instructor_user
from learnhub.schemas import (
    CourseCreate,
    CourseFilters,
    CourseRead,
    CourseUpdate,
    ReviewWithUser,
    SectionRead,
    UserInDB,
    UserSummary,
)
from learnhub.storage import Storage, get_storage


logger = logging.getLogger(__name__)

router = APIRouter()


def _check_category(storage: Storage, category_id: int) -> None:
    if storage.get_category(category_id) is None:
        raise ValidationError(
            "Category not found",
            errors=[{"field": "category_id", "message": "Category does not exist"}]
        )


def _check_instructor(storage: Storage, current_user: UserInDB, instructor_id: int) -> None:
    """Only admins may assign a course to somebody else."""
    if instructor_id == current_user.id:
        return
    if not is_admin(current_user):
        raise Forbidden("Only admins can assign courses to another instructor")
    if storage.get_user(instructor_id) is None:
        raise ValidationError(
            "Instructor not found",
            errors=[{"field": "instructor_id", "message": "User does not exist"}]
        )


@router.get("", response_model=List[CourseRead])
async def list_courses(
    category_id: Optional[int] = None,
    featured: Optional[bool] = None,
    search: Optional[str] = None,
    storage: Storage = Depends(get_storage)
) -> List[CourseRead]:
    """
    List courses with optional filtering.

    Filters combine with AND; ``search`` matches title or description
    case-insensitively. No match yields an empty list.
    """
    filters = CourseFilters(
        category_id=category_id,
        featured=featured,
        search=search or None
    )
    return storage.list_courses(filters)


@router.get("/{course_slug}", response_model=CourseRead)
async def get_course(
    course_slug: str,
    storage: Storage = Depends(get_storage)
) -> CourseRead:
    """
    Get a course by its slug.
    """
    course = storage.get_course_by_slug(course_slug)
    if course is None:
        raise NotFound("Course not found")
    return course


@router.post("", response_model=CourseRead, status_code=status.HTTP_201_CREATED)
async def create_course(
    course_data: CourseCreate,
    current_user: UserInDB = Depends(get_current_instructor_user),
    storage: Storage = Depends(get_storage)
) -> CourseRead:
    """
    Create a new course owned by the current instructor.
    """
    instructor_id = course_data.instructor_id or current_user.id
    _check_instructor(storage, current_user, instructor_id)
    _check_category(storage, course_data.category_id)

    course = storage.create_course(
        course_data.model_copy(update={"instructor_id": instructor_id})
    )
    logger.info(f"Course {course.id} created by user {current_user.id}")
    return course


@router.put("/{course_id}", response_model=CourseRead)
async def update_course(
    course_id: int,
    course_update: CourseUpdate,
    current_user: UserInDB = Depends(get_current_instructor_user),
    storage: Storage = Depends(get_storage)
) -> CourseRead:
    """
    Update a course. Only the owning instructor or an admin may do so.
    """
    course = storage.get_course(course_id)
    if course is None:
        raise NotFound("Course not found")
    ensure_course_owner(current_user, course)

    changes = course_update.changes()
    if "instructor_id" in changes and changes["instructor_id"] != course.instructor_id:
        _check_instructor(storage, current_user, changes["instructor_id"])
    if "category_id" in changes:
        _check_category(storage, changes["category_id"])

    updated_course = storage.update_course(course_id, course_update)
    if updated_course is None:
        raise NotFound("Course not found")
    return updated_course


@router.delete("/{course_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_course(
    course_id: int,
    current_user: UserInDB = Depends(get_current_instructor_user),
    storage: Storage = Depends(get_storage)
) -> Response:
    """
    Delete a course together with its content, enrollments and reviews.
    """
    course = storage.get_course(course_id)
    if course is None:
        raise NotFound("Course not found")
    ensure_course_owner(current_user, course)

    if not storage.delete_course(course_id):
        raise NotFound("Course not found")
    logger.info(f"Course {course_id} deleted by user {current_user.id}")
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/{course_id}/sections", response_model=List[SectionRead])
async def list_course_sections(
    course_id: int,
    storage: Storage = Depends(get_storage)
) -> List[SectionRead]:
    """
    List a course's sections in display order.
    """
    return storage.list_sections_by_course(course_id)


@router.get("/{course_id}/reviews", response_model=List[ReviewWithUser])
async def list_course_reviews(
    course_id: int,
    storage: Storage = Depends(get_storage)
) -> List[ReviewWithUser]:
    """
    List a course's reviews with a summary of each reviewer.
    """
    reviews = []
    for review in storage.list_reviews_by_course(course_id):
        reviewer = storage.get_user(review.user_id)
        reviews.append(
            ReviewWithUser(
                **review.model_dump(),
                user=UserSummary.model_validate(reviewer) if reviewer else None
            )
        )
    return reviews
