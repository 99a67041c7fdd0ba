"""
Progress tracking models for LearnHub.

Defines Enrollment and LessonProgress. Per-lesson completion lives in its
own rows keyed by (enrollment_id, lesson_id) so a progress write is a
single-row upsert rather than a rewrite of the whole mapping.
"""

from datetime import datetime
from typing import Dict
from sqlalchemy import (
    Boolean, Integer, DateTime, ForeignKey, UniqueConstraint, Index
)
from sqlalchemy.orm import relationship, Mapped, mapped_column
from sqlalchemy.sql import func

from learnhub.core.database import Base


class Enrollment(Base):
    """
    A learner's registration in a course.
    """
    __tablename__ = "enrollments"

    # Primary key
    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)

    # User and course relationship
    user_id: Mapped[int] = mapped_column(Integer, ForeignKey("users.id"), nullable=False)
    course_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("courses.id", ondelete="CASCADE"),
        nullable=False
    )

    enrolled_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False
    )

    # Cached; recomputed against the course's lesson count on every progress write
    is_completed: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)

    # Relationships
    user = relationship("User", back_populates="enrollments")
    course = relationship("Course", back_populates="enrollments")
    lesson_progress = relationship(
        "LessonProgress",
        back_populates="enrollment",
        cascade="all, delete-orphan",
        lazy="selectin"
    )

    # Table constraints
    __table_args__ = (
        UniqueConstraint("user_id", "course_id", name="uq_enrollment_user_course"),
        Index("idx_enrollment_course", "course_id"),
    )

    def __repr__(self) -> str:
        return f"<Enrollment(user_id={self.user_id}, course_id={self.course_id}, completed={self.is_completed})>"

    @property
    def progress(self) -> Dict[str, bool]:
        """Progress mapping: lesson id (as a string) -> completion flag."""
        return {str(record.lesson_id): record.completed for record in self.lesson_progress}


class LessonProgress(Base):
    """
    Completion state of one lesson within one enrollment.
    """
    __tablename__ = "lesson_progress"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    enrollment_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("enrollments.id", ondelete="CASCADE"),
        nullable=False
    )
    lesson_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("lessons.id", ondelete="CASCADE"),
        nullable=False
    )
    completed: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False
    )

    enrollment = relationship("Enrollment", back_populates="lesson_progress")
    lesson = relationship("Lesson", back_populates="progress_records")

    __table_args__ = (
        UniqueConstraint("enrollment_id", "lesson_id", name="uq_lesson_progress_enrollment_lesson"),
    )

    def __repr__(self) -> str:
        return f"<LessonProgress(enrollment_id={self.enrollment_id}, lesson_id={self.lesson_id}, completed={self.completed})>"
