"""
Course models for LearnHub.

Defines Category, Course, Section and Lesson models for the
catalogue and the learning content structure.
"""

from datetime import datetime
from typing import Optional
from enum import Enum
from sqlalchemy import (
    Boolean, Integer, String, DateTime, Text,
    ForeignKey, Index, CheckConstraint
)
from sqlalchemy.orm import relationship, Mapped, mapped_column
from sqlalchemy.sql import func

from learnhub.core.database import Base


class CourseLevel(str, Enum):
    """Difficulty levels for courses."""
    BEGINNER = "beginner"
    INTERMEDIATE = "intermediate"
    ADVANCED = "advanced"


class Category(Base):
    """
    Static reference data grouping courses.
    """
    __tablename__ = "categories"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    slug: Mapped[str] = mapped_column(String(100), unique=True, nullable=False, index=True)
    icon_name: Mapped[str] = mapped_column(String(50), nullable=False)
    color_class: Mapped[str] = mapped_column(String(50), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    courses = relationship("Course", back_populates="category")

    def __repr__(self) -> str:
        return f"<Category(id={self.id}, slug='{self.slug}')>"


class Course(Base):
    """
    Course model, owned by its instructor.
    """
    __tablename__ = "courses"

    # Primary key
    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)

    # Basic information
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    slug: Mapped[str] = mapped_column(String(255), unique=True, nullable=False, index=True)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    price: Mapped[int] = mapped_column(Integer, default=0, nullable=False)  # minor currency unit, 0 = free
    thumbnail_url: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)

    # Ownership and classification
    instructor_id: Mapped[int] = mapped_column(Integer, ForeignKey("users.id"), nullable=False)
    category_id: Mapped[int] = mapped_column(Integer, ForeignKey("categories.id"), nullable=False)

    # Course metadata
    level: Mapped[str] = mapped_column(
        String(20),
        default=CourseLevel.BEGINNER.value,
        nullable=False
    )
    duration_hours: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    is_featured: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)

    # Timestamps
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False
    )

    # Relationships
    instructor = relationship("User", back_populates="courses")
    category = relationship("Category", back_populates="courses")
    sections = relationship(
        "Section",
        back_populates="course",
        cascade="all, delete-orphan",
        order_by="Section.order"
    )
    enrollments = relationship("Enrollment", back_populates="course", cascade="all, delete-orphan")
    reviews = relationship("Review", back_populates="course", cascade="all, delete-orphan")

    # Table constraints
    __table_args__ = (
        CheckConstraint("price >= 0", name="check_price_positive"),
        CheckConstraint("duration_hours >= 0", name="check_duration_positive"),
        Index("idx_course_category_featured", "category_id", "is_featured"),
        Index("idx_course_instructor", "instructor_id"),
    )

    def __repr__(self) -> str:
        return f"<Course(id={self.id}, title='{self.title}', slug='{self.slug}')>"


class Section(Base):
    """
    Ordered group of lessons within a course.
    """
    __tablename__ = "sections"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    course_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("courses.id", ondelete="CASCADE"),
        nullable=False
    )
    order: Mapped[int] = mapped_column(Integer, nullable=False)

    course = relationship("Course", back_populates="sections")
    lessons = relationship(
        "Lesson",
        back_populates="section",
        cascade="all, delete-orphan",
        order_by="Lesson.order"
    )

    __table_args__ = (
        Index("idx_section_course_order", "course_id", "order"),
    )

    def __repr__(self) -> str:
        return f"<Section(id={self.id}, course_id={self.course_id}, order={self.order})>"


class Lesson(Base):
    """
    A single video lesson, sequenced within its section.
    """
    __tablename__ = "lessons"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    video_url: Mapped[str] = mapped_column(String(500), nullable=False)
    section_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("sections.id", ondelete="CASCADE"),
        nullable=False
    )
    order: Mapped[int] = mapped_column(Integer, nullable=False)
    duration_minutes: Mapped[int] = mapped_column(Integer, default=0, nullable=False)

    section = relationship("Section", back_populates="lessons")
    progress_records = relationship(
        "LessonProgress",
        back_populates="lesson",
        cascade="all, delete"
    )

    __table_args__ = (
        CheckConstraint("duration_minutes >= 0", name="check_lesson_duration_positive"),
        Index("idx_lesson_section_order", "section_id", "order"),
    )

    def __repr__(self) -> str:
        return f"<Lesson(id={self.id}, section_id={self.section_id}, order={self.order})>"
