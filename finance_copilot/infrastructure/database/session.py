"""Database session management with connection pooling"""

from typing import Iterator

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker, Session
from finance_copilot.config import Settings


def create_db_engine(settings: Settings) -> Engine:
    """Engine for the configured database; SQLite gets no pool sizing"""
    if settings.database_url.startswith("sqlite"):
        return create_engine(
            settings.database_url,
            echo=settings.sql_echo,
            connect_args={"check_same_thread": False},
        )

    # Verify connections before use and recycle them to avoid stale connections
    return create_engine(
        settings.database_url,
        echo=settings.sql_echo,
        pool_pre_ping=True,
        pool_size=settings.db_pool_size,
        max_overflow=settings.db_max_overflow,
        pool_recycle=settings.db_pool_recycle_seconds,
    )


def create_session_factory(engine: Engine) -> sessionmaker:
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


def session_scope(session_factory: sessionmaker) -> Iterator[Session]:
    """Yield a session and always close it"""
    db = session_factory()
    try:
        yield db
    finally:
        db.close()
