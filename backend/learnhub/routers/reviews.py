"""
Reviews router for LearnHub.
"""

from fastapi import APIRouter, Depends, status

from learnhub.core.exceptions import Conflict, Forbidden
from learnhub.routers.auth import get_current_user
from learnhub.schemas import ReviewCreate, ReviewRead, UserInDB
from learnhub.storage import Storage, get_storage


router = APIRouter()


@router.post("", response_model=ReviewRead, status_code=status.HTTP_201_CREATED)
async def create_review(
    review_data: ReviewCreate,
    current_user: UserInDB = Depends(get_current_user),
    storage: Storage = Depends(get_storage)
) -> ReviewRead:
    """
    Review a course. The reviewer must be enrolled and may review a course once.
    """
    enrollment = storage.get_enrollment_by_course_and_user(review_data.course_id, current_user.id)
    if enrollment is None:
        raise Forbidden("You must be enrolled to review this course")

    if storage.get_review_by_course_and_user(review_data.course_id, current_user.id):
        raise Conflict("You have already reviewed this course")

    return storage.create_review(current_user.id, review_data)
