"""
API routers for LearnHub.

This module contains all API endpoint routers:
- auth: Authentication endpoints (register, login, logout)
- users: Current user profile and enrollments
- categories, courses, sections, lessons: Catalogue and authoring
- enrollments: Enrolling and lesson progress
- reviews: Course reviews
- instructor: Instructor's own courses
- admin: Administrative endpoints for user management
- health: Service health
"""

from fastapi import APIRouter

# Import individual routers
from .auth import router as auth_router
from .users import router as users_router
from .categories import router as categories_router
from .courses import router as courses_router
from .sections import router as sections_router
from .lessons import router as lessons_router
from .enrollments import router as enrollments_router
from .reviews import router as reviews_router
from .instructor import router as instructor_router
from .health import router as health_router

# Import admin sub-routers
from .admin import admin_router

# Create main API router
api_router = APIRouter()

# Include all routers with their prefixes
api_router.include_router(auth_router, prefix="/auth", tags=["authentication"])
api_router.include_router(users_router, prefix="/user", tags=["user"])
api_router.include_router(categories_router, prefix="/categories", tags=["categories"])
api_router.include_router(courses_router, prefix="/courses", tags=["courses"])
api_router.include_router(sections_router, prefix="/sections", tags=["sections"])
api_router.include_router(lessons_router, prefix="/lessons", tags=["lessons"])
api_router.include_router(enrollments_router, prefix="/enrollments", tags=["enrollments"])
api_router.include_router(reviews_router, prefix="/reviews", tags=["reviews"])
api_router.include_router(instructor_router, prefix="/instructor", tags=["instructor"])
api_router.include_router(admin_router, prefix="/admin", tags=["admin"])
api_router.include_router(health_router, tags=["health"])

# Export all routers
__all__ = [
    "api_router",
    "auth_router",
    "users_router",
    "categories_router",
    "courses_router",
    "sections_router",
    "lessons_router",
    "enrollments_router",
    "reviews_router",
    "instructor_router",
    "admin_router",
    "health_router"
]
