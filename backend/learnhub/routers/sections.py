"""
Sections router for LearnHub.

Section authoring is gated on ownership of the parent course.
"""

from typing import List
from fastapi import APIRouter, Depends, Response, status

from learnhub.core.exceptions import NotFound
from learnhub.core.permissions import ensure_course_owner
from learnhub.routers.auth import get_current_instructor_user
from learnhub.schemas import (
    LessonRead,
    SectionCreate,
    SectionRead,
    SectionUpdate,
    UserInDB,
)
from learnhub.storage import Storage, get_storage


router = APIRouter()


def load_owned_section(storage: Storage, section_id: int, current_user: UserInDB) -> SectionRead:
    """
    Load a section and check the user owns its course.

    Raises NotFound if the section or its course is missing, Forbidden if
    the user is neither the course instructor nor an admin.
    """
    section = storage.get_section(section_id)
    if section is None:
        raise NotFound("Section not found")
    course = storage.get_course(section.course_id)
    if course is None:
        raise NotFound("Course not found")
    ensure_course_owner(current_user, course)
    return section


@router.get("/{section_id}/lessons", response_model=List[LessonRead])
async def list_section_lessons(
    section_id: int,
    storage: Storage = Depends(get_storage)
) -> List[LessonRead]:
    """
    List a section's lessons in sequence order.
    """
    return storage.list_lessons_by_section(section_id)


@router.post("", response_model=SectionRead, status_code=status.HTTP_201_CREATED)
async def create_section(
    section_data: SectionCreate,
    current_user: UserInDB = Depends(get_current_instructor_user),
    storage: Storage = Depends(get_storage)
) -> SectionRead:
    course = storage.get_course(section_data.course_id)
    if course is None:
        raise NotFound("Course not found")
    ensure_course_owner(current_user, course)
    return storage.create_section(section_data)


@router.put("/{section_id}", response_model=SectionRead)
async def update_section(
    section_id: int,
    section_update: SectionUpdate,
    current_user: UserInDB = Depends(get_current_instructor_user),
    storage: Storage = Depends(get_storage)
) -> SectionRead:
    load_owned_section(storage, section_id, current_user)
    section = storage.update_section(section_id, section_update)
    if section is None:
        raise NotFound("Section not found")
    return section


@router.delete("/{section_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_section(
    section_id: int,
    current_user: UserInDB = Depends(get_current_instructor_user),
    storage: Storage = Depends(get_storage)
) -> Response:
    """
    Delete a section and its lessons.
    """
    load_owned_section(storage, section_id, current_user)
    if not storage.delete_section(section_id):
        raise NotFound("Section not found")
    return Response(status_code=status.HTTP_204_NO_CONTENT)
