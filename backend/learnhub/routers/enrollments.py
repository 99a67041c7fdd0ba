"""
Enrollments router for LearnHub.

Handles enrolling in a course and recording lesson progress.
"""

from fastapi import APIRouter, Depends, status
import logging

from learnhub.core.exceptions import NotFound, ValidationError
from learnhub.routers.auth import get_current_user
from learnhub.schemas import EnrollmentCreate, EnrollmentRead, ProgressUpdate, UserInDB
from learnhub.services.progress import ProgressTracker
from learnhub.storage import Storage, get_storage


logger = logging.getLogger(__name__)

router = APIRouter()


def get_progress_tracker(storage: Storage = Depends(get_storage)) -> ProgressTracker:
    return ProgressTracker(storage)


@router.post("", response_model=EnrollmentRead, status_code=status.HTTP_201_CREATED)
async def enroll_in_course(
    enrollment_data: EnrollmentCreate,
    current_user: UserInDB = Depends(get_current_user),
    storage: Storage = Depends(get_storage)
) -> EnrollmentRead:
    """
    Enroll the current user in a course.

    Paid courses are enrolled without checkout; price is informational.
    """
    course = storage.get_course(enrollment_data.course_id)
    if course is None:
        raise ValidationError(
            "Course not found",
            errors=[{"field": "course_id", "message": "Course does not exist"}]
        )

    # Storage enforces (user, course) uniqueness; Conflict propagates as 400
    enrollment = storage.create_enrollment(current_user.id, course.id)
    logger.info(f"User {current_user.id} enrolled in course {course.id}")
    return enrollment


@router.put("/{course_id}/progress", response_model=EnrollmentRead)
async def update_progress(
    course_id: int,
    progress_update: ProgressUpdate,
    current_user: UserInDB = Depends(get_current_user),
    storage: Storage = Depends(get_storage),
    tracker: ProgressTracker = Depends(get_progress_tracker)
) -> EnrollmentRead:
    """
    Mark a lesson of the course completed (or not) for the current user.
    """
    enrollment = storage.get_enrollment_by_course_and_user(course_id, current_user.id)
    if enrollment is None:
        raise NotFound("Enrollment not found")

    lesson = storage.get_lesson(progress_update.lesson_id)
    section = storage.get_section(lesson.section_id) if lesson else None
    if section is None or section.course_id != course_id:
        raise ValidationError(
            "Lesson does not belong to this course",
            errors=[{"field": "lesson_id", "message": "Unknown lesson for this course"}]
        )

    return tracker.mark_lesson_progress(
        enrollment.id,
        progress_update.lesson_id,
        progress_update.completed
    )
