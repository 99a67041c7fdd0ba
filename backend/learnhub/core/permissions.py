"""
Access policy for LearnHub.

Users carry two role flags (``is_admin``, ``is_instructor``); the policy
works on the capability set derived from them, where admin implies
instructor-level access. ``None`` stands for an anonymous request.
"""

from enum import Enum
from typing import FrozenSet, Optional

from learnhub.core.exceptions import Forbidden
from learnhub.schemas import CourseRead, UserRead


class Capability(str, Enum):
    LEARNER = "learner"
    INSTRUCTOR = "instructor"
    ADMIN = "admin"


def capabilities_for(user: Optional[UserRead]) -> FrozenSet[Capability]:
    """Capability set of a user; empty for anonymous requests."""
    if user is None:
        return frozenset()
    capabilities = {Capability.LEARNER}
    if user.is_instructor or user.is_admin:
        capabilities.add(Capability.INSTRUCTOR)
    if user.is_admin:
        capabilities.add(Capability.ADMIN)
    return frozenset(capabilities)


def is_authenticated(user: Optional[UserRead]) -> bool:
    return user is not None and user.is_active


def is_admin(user: Optional[UserRead]) -> bool:
    return is_authenticated(user) and Capability.ADMIN in capabilities_for(user)


def is_instructor_or_admin(user: Optional[UserRead]) -> bool:
    return is_authenticated(user) and Capability.INSTRUCTOR in capabilities_for(user)


def can_manage_course(user: Optional[UserRead], course: CourseRead) -> bool:
    """Owner instructor or admin."""
    if not is_authenticated(user):
        return False
    return course.instructor_id == user.id or is_admin(user)


def ensure_course_owner(user: Optional[UserRead], course: CourseRead) -> None:
    if not can_manage_course(user, course):
        raise Forbidden("Only the course instructor or an admin can modify this course")
