"""
Instructor router for LearnHub.
"""

from typing import List
from fastapi import APIRouter, Depends

from learnhub.routers.auth import get_current_instructor_user
from learnhub.schemas import CourseRead, UserInDB
from learnhub.storage import Storage, get_storage


router = APIRouter()


@router.get("/courses", response_model=List[CourseRead])
async def list_my_courses(
    current_user: UserInDB = Depends(get_current_instructor_user),
    storage: Storage = Depends(get_storage)
) -> List[CourseRead]:
    """
    List the courses the current instructor owns.
    """
    return storage.list_courses_by_instructor(current_user.id)
