"""Shared fixtures for the LearnHub test suite."""

import os

# Settings are read at import time, so configure the environment first
os.environ.setdefault("TESTING", "True")
os.environ.setdefault("STORAGE_BACKEND", "memory")
os.environ.setdefault("BCRYPT_ROUNDS", "4")
os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ.setdefault("LOG_LEVEL", "WARNING")

from dataclasses import dataclass
from typing import Dict, Iterator

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker

from learnhub.core.database import DatabaseManager, build_engine
from learnhub.core.security import create_access_token, get_password_hash
from learnhub.main import create_app
from learnhub.schemas import (
    CategoryCreate,
    CategoryRead,
    CourseCreate,
    CourseRead,
    LessonCreate,
    LessonRead,
    SectionCreate,
    SectionRead,
    UserCreate,
    UserInDB,
)
from learnhub.storage import DatabaseStorage, MemoryStorage, Storage


PASSWORD = "secret123"


def make_user(
    storage: Storage,
    username: str,
    is_admin: bool = False,
    is_instructor: bool = False,
) -> UserInDB:
    return storage.create_user(
        UserCreate(
            username=username,
            email=f"{username}@learnhub.dev",
            password=PASSWORD,
            first_name=username.capitalize(),
            last_name="Tester",
        ),
        hashed_password=get_password_hash(PASSWORD),
        is_admin=is_admin,
        is_instructor=is_instructor,
    )


def auth_headers(user: UserInDB) -> Dict[str, str]:
    return {"Authorization": f"Bearer {create_access_token(user.username)}"}


def sqlite_storage(database_url: str) -> Iterator[DatabaseStorage]:
    engine = build_engine(database_url)
    DatabaseManager.create_all_tables(engine)
    factory = sessionmaker(autocommit=False, autoflush=False, expire_on_commit=False, bind=engine)
    yield DatabaseStorage(factory)
    engine.dispose()


@dataclass
class Catalog:
    """A small published course: one section with two lessons."""

    admin: UserInDB
    instructor: UserInDB
    learner: UserInDB
    category: CategoryRead
    course: CourseRead
    section: SectionRead
    lessons: list


@pytest.fixture
def memory_storage() -> MemoryStorage:
    """Fresh in-memory store."""
    return MemoryStorage()


@pytest.fixture
def database_storage() -> Iterator[DatabaseStorage]:
    """Fresh SQLite-backed store living in memory."""
    yield from sqlite_storage("sqlite:///:memory:")


@pytest.fixture(params=["memory", "database"])
def storage(request: pytest.FixtureRequest) -> Storage:
    """Each storage adapter in turn."""
    return request.getfixturevalue(f"{request.param}_storage")


@pytest.fixture
def client(storage: Storage) -> TestClient:
    """Test client serving the API from the parametrised storage."""
    return TestClient(create_app(storage))


@pytest.fixture
def catalog(storage: Storage) -> Catalog:
    """Users with each role and a course of two lessons."""
    admin = make_user(storage, "root", is_admin=True, is_instructor=True)
    instructor = make_user(storage, "teacher", is_instructor=True)
    learner = make_user(storage, "learner")
    category = storage.create_category(
        CategoryCreate(
            name="Development",
            slug="development",
            icon_name="code",
            color_class="bg-blue-500",
        )
    )
    course = storage.create_course(
        CourseCreate(
            title="Python Fundamentals",
            slug="python-fundamentals",
            description="Variables, functions and the standard library",
            price=0,
            instructor_id=instructor.id,
            category_id=category.id,
        )
    )
    section = storage.create_section(SectionCreate(title="Basics", course_id=course.id, order=1))
    lessons = [
        storage.create_lesson(
            LessonCreate(
                title=f"Lesson {n}",
                video_url=f"https://videos.learnhub.dev/{n}.mp4",
                section_id=section.id,
                order=n,
                duration_minutes=15,
            )
        )
        for n in (1, 2)
    ]
    return Catalog(admin, instructor, learner, category, course, section, lessons)


def add_lesson(storage: Storage, section: SectionRead, order: int) -> LessonRead:
    return storage.create_lesson(
        LessonCreate(
            title=f"Extra {order}",
            video_url=f"https://videos.learnhub.dev/extra-{order}.mp4",
            section_id=section.id,
            order=order,
        )
    )
