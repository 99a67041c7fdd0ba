"""
Categories router for LearnHub.
"""

from typing import List
from fastapi import APIRouter, Depends, status

from learnhub.core.exceptions import NotFound
from learnhub.routers.auth import get_current_admin_user
from learnhub.schemas import CategoryCreate, CategoryRead, UserInDB
from learnhub.storage import Storage, get_storage


router = APIRouter()


@router.get("", response_model=List[CategoryRead])
async def list_categories(storage: Storage = Depends(get_storage)) -> List[CategoryRead]:
    return storage.list_categories()


@router.get("/{category_slug}", response_model=CategoryRead)
async def get_category(
    category_slug: str,
    storage: Storage = Depends(get_storage)
) -> CategoryRead:
    category = storage.get_category_by_slug(category_slug)
    if category is None:
        raise NotFound("Category not found")
    return category


@router.post("", response_model=CategoryRead, status_code=status.HTTP_201_CREATED)
async def create_category(
    category_data: CategoryCreate,
    admin_user: UserInDB = Depends(get_current_admin_user),
    storage: Storage = Depends(get_storage)
) -> CategoryRead:
    """
    Create a category. Admin only.
    """
    return storage.create_category(category_data)
