"""
Lessons router for LearnHub.

Ownership resolves through the lesson's section to the course.
"""

from fastapi import APIRouter, Depends, Response, status

from learnhub.core.exceptions import NotFound
from learnhub.routers.auth import get_current_instructor_user
from learnhub.routers.sections import load_owned_section
from learnhub.schemas import LessonCreate, LessonRead, LessonUpdate, UserInDB
from learnhub.storage import Storage, get_storage


router = APIRouter()


def load_owned_lesson(storage: Storage, lesson_id: int, current_user: UserInDB) -> LessonRead:
    lesson = storage.get_lesson(lesson_id)
    if lesson is None:
        raise NotFound("Lesson not found")
    load_owned_section(storage, lesson.section_id, current_user)
    return lesson


@router.get("/{lesson_id}", response_model=LessonRead)
async def get_lesson(
    lesson_id: int,
    storage: Storage = Depends(get_storage)
) -> LessonRead:
    lesson = storage.get_lesson(lesson_id)
    if lesson is None:
        raise NotFound("Lesson not found")
    return lesson


@router.post("", response_model=LessonRead, status_code=status.HTTP_201_CREATED)
async def create_lesson(
    lesson_data: LessonCreate,
    current_user: UserInDB = Depends(get_current_instructor_user),
    storage: Storage = Depends(get_storage)
) -> LessonRead:
    """
    Add a lesson to a section of a course the user owns.
    """
    load_owned_section(storage, lesson_data.section_id, current_user)
    return storage.create_lesson(lesson_data)


@router.put("/{lesson_id}", response_model=LessonRead)
async def update_lesson(
    lesson_id: int,
    lesson_update: LessonUpdate,
    current_user: UserInDB = Depends(get_current_instructor_user),
    storage: Storage = Depends(get_storage)
) -> LessonRead:
    load_owned_lesson(storage, lesson_id, current_user)
    lesson = storage.update_lesson(lesson_id, lesson_update)
    if lesson is None:
        raise NotFound("Lesson not found")
    return lesson


@router.delete("/{lesson_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_lesson(
    lesson_id: int,
    current_user: UserInDB = Depends(get_current_instructor_user),
    storage: Storage = Depends(get_storage)
) -> Response:
    load_owned_lesson(storage, lesson_id, current_user)
    if not storage.delete_lesson(lesson_id):
        raise NotFound("Lesson not found")
    return Response(status_code=status.HTTP_204_NO_CONTENT)
