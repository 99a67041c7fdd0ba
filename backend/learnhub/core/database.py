"""
SQLAlchemy wiring for LearnHub: engine, session factory, declarative base
and schema management. Only the relational storage adapter talks to it.
"""

from typing import Optional
from sqlalchemy import create_engine, MetaData, text
from sqlalchemy.engine import Engine
from sqlalchemy.orm import declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool
import logging

from .config import settings


logger = logging.getLogger(__name__)


# Deterministic constraint names, so migrations can refer to them
convention = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_name)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s"
}

metadata = MetaData(naming_convention=convention)


def build_engine(database_url: Optional[str] = None) -> Engine:
    """
    Create an engine for the given URL (defaults to the configured one).

    SQLite URLs get a shared connection pool so an in-memory database
    survives across sessions; anything else gets a regular pool.
    """
    url = database_url or settings.DATABASE_URL
    if url.startswith("sqlite"):
        options = {"connect_args": {"check_same_thread": False}}
        if ":memory:" in url or url == "sqlite://":
            options["poolclass"] = StaticPool
        return create_engine(url, echo=settings.DEBUG, **options)

    return create_engine(
        url,
        pool_pre_ping=True,
        pool_size=settings.DB_POOL_SIZE,
        max_overflow=settings.DB_MAX_OVERFLOW,
        echo=settings.DEBUG,
    )


engine = build_engine("sqlite:///:memory:" if settings.TESTING else None)


# Session factory
SessionLocal = sessionmaker(
    autocommit=False,
    autoflush=False,
    expire_on_commit=False,
    bind=engine
)


# Base class for models
Base = declarative_base(metadata=metadata)


def init_db(storage) -> None:
    """
    Initialize the store with required data.

    Creates the default admin user on first startup. Works against any
    storage adapter, so the in-memory store gets an admin as well.

    Args:
        storage: Storage adapter to seed
    """
    from learnhub.core.security import get_password_hash
    from learnhub.schemas.user import UserCreate

    admin_user = storage.get_user_by_email(settings.FIRST_ADMIN_EMAIL)
    if admin_user:
        return

    admin_user = storage.create_user(
        UserCreate(
            username=settings.FIRST_ADMIN_USERNAME,
            email=settings.FIRST_ADMIN_EMAIL,
            password=settings.FIRST_ADMIN_PASSWORD,
            first_name="Admin",
            last_name="User",
            bio="LearnHub Administrator",
        ),
        hashed_password=get_password_hash(settings.FIRST_ADMIN_PASSWORD),
        is_admin=True,
        is_instructor=True,
    )
    logger.info(f"Admin user created: {admin_user.email}")


def check_database_connection(bind: Optional[Engine] = None) -> bool:
    """
    Check if database is accessible.

    Returns:
        bool: True if database is accessible, False otherwise
    """
    try:
        with (bind or engine).connect() as connection:
            connection.execute(text("SELECT 1"))
        return True
    except Exception as e:
        logger.error(f"Database connection failed: {e}")
        return False


class DatabaseManager:
    """
    Database manager for handling schema operations.
    """

    @staticmethod
    def create_all_tables(bind: Optional[Engine] = None):
        """Create all database tables."""
        import learnhub.models  # noqa: F401  (register tables)

        Base.metadata.create_all(bind=bind or engine)
        logger.info("All database tables created successfully")
