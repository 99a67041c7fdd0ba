"""
Admin routers for LearnHub.

This module contains all admin-specific API endpoints:
- users: account listing and role management
"""

from fastapi import APIRouter, Depends

from learnhub.routers.auth import get_current_admin_user

# Import admin sub-routers
from .users import router as users_router


# Create admin router
admin_router = APIRouter()

# Include all admin sub-routers
admin_router.include_router(
    users_router,
    prefix="/users",
    tags=["admin-users"],
    dependencies=[Depends(get_current_admin_user)]
)
