"""
Current-user router for LearnHub: profile and enrolled courses.
"""

from typing import List
from fastapi import APIRouter, Depends

from learnhub.routers.auth import get_current_user
from learnhub.routers.enrollments import get_progress_tracker
from learnhub.schemas import EnrolledCourse, UserInDB, UserRead
from learnhub.services.progress import ProgressTracker
from learnhub.storage import Storage, get_storage


router = APIRouter()


@router.get("", response_model=UserRead)
async def read_current_user(
    current_user: UserInDB = Depends(get_current_user)
) -> UserInDB:
    """
    Get the authenticated user's profile.
    """
    return current_user


@router.get("/enrollments", response_model=List[EnrolledCourse])
async def list_my_enrollments(
    current_user: UserInDB = Depends(get_current_user),
    storage: Storage = Depends(get_storage),
    tracker: ProgressTracker = Depends(get_progress_tracker)
) -> List[EnrolledCourse]:
    """
    List the user's enrollments, each with its course and progress summary.
    """
    enrolled_courses = []
    for enrollment in storage.list_enrollments_by_user(current_user.id):
        course = storage.get_course(enrollment.course_id)
        if course is None:
            continue
        enrolled_courses.append(
            EnrolledCourse(
                enrollment=enrollment,
                course=course,
                progress=tracker.summarize(enrollment)
            )
        )
    return enrolled_courses
