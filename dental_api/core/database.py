from functools import lru_cache

import redis
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool

from .config import settings

Base = declarative_base()


def create_store_engine(database_url: str) -> Engine:
    """Create an engine with pool settings appropriate for the backend."""
    if database_url.startswith("sqlite"):
        kwargs = {"connect_args": {"check_same_thread": False}}
        # In-memory databases live inside a single connection
        if database_url in ("sqlite://", "sqlite:///:memory:"):
            kwargs["poolclass"] = StaticPool
        return create_engine(database_url, **kwargs)

    return create_engine(
        database_url,
        pool_size=5,
        max_overflow=10,
        pool_timeout=settings.DB_POOL_TIMEOUT,
        pool_recycle=1800,  # Recycle connections after 30 minutes
        pool_pre_ping=True,
    )


engine = create_store_engine(settings.get_database_url)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@lru_cache
def get_redis() -> redis.Redis:
    """Get Redis client."""
    return redis.from_url(settings.REDIS_URL, decode_responses=True)


def init_db(bind: Engine = engine):
    """Initialize database tables."""
    # Registers the documents table on Base.metadata
    from ..models import document  # noqa: F401

    Base.metadata.create_all(bind=bind)
