"""
Database models for LearnHub.

This module contains all SQLAlchemy models for the application:
- User model for authentication, profiles and roles
- Catalogue models (categories, courses, sections, lessons)
- Progress models for enrollments and per-lesson completion
- Review model for course ratings
"""

from learnhub.core.database import Base

# Import all models to ensure they're registered with SQLAlchemy
from .user import User
from .course import Category, Course, Section, Lesson, CourseLevel
from .progress import Enrollment, LessonProgress
from .review import Review

# Export all models
__all__ = [
    "Base",
    "User",
    "Category",
    "Course",
    "Section",
    "Lesson",
    "CourseLevel",
    "Enrollment",
    "LessonProgress",
    "Review"
]
