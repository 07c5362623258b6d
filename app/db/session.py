"""Database session management."""
from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker, Session
from typing import Generator

from app.core.config import settings

DATABASE_URL = settings.get_database_url()


def build_engine(url: str):
    """Create an engine, applying SQLite specifics where needed."""
    if url.startswith("sqlite"):
        new_engine = create_engine(
            url,
            echo=False,
            connect_args={"check_same_thread": False},
        )
        enable_sqlite_foreign_keys(new_engine)
        return new_engine

    return create_engine(
        url,
        pool_pre_ping=True,
        echo=False,
        pool_size=settings.DB_POOL_SIZE,
        max_overflow=settings.DB_MAX_OVERFLOW
    )


def enable_sqlite_foreign_keys(sqlite_engine) -> None:
    """SQLite ignores ON DELETE rules unless foreign keys are switched on per connection."""
    @event.listens_for(sqlite_engine, "connect")
    def _set_sqlite_pragma(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


engine = build_engine(DATABASE_URL)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def get_db() -> Generator[Session, None, None]:
    """Dependency for FastAPI to get database session."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
