"""
Database connections (SQLAlchemy 2.x) with optional Redis
SQLite for local development and tests, PostgreSQL in production.
"""
import logging
from contextlib import contextmanager
from typing import Any, Dict, Generator, Optional

import redis
from sqlalchemy import create_engine, event, text
from sqlalchemy.orm import Session, declarative_base, sessionmaker

from config import parse_db_scheme, settings

logger = logging.getLogger(__name__)

# ==================== SQL DATABASE ====================

if parse_db_scheme(settings.DATABASE_URL) == "sqlite":
    engine_kwargs: Dict[str, Any] = {"connect_args": {"check_same_thread": False}}
else:
    engine_kwargs = {
        "pool_pre_ping": True,
        "pool_recycle": 300,
        "pool_size": 5,
        "max_overflow": 10,
    }

engine = create_engine(settings.DATABASE_URL, **engine_kwargs)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
Base = declarative_base()


if parse_db_scheme(settings.DATABASE_URL) == "sqlite":
    @event.listens_for(engine, "connect")
    def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


# ==================== REDIS (OPTIONAL) ====================

redis_client: Optional[redis.Redis] = None
if settings.redis_enabled:
    try:
        redis_client = redis.Redis.from_url(
            settings.REDIS_URL,
            decode_responses=True,
            socket_connect_timeout=2,
            socket_timeout=2,
            retry_on_timeout=False,
        )
        redis_client.ping()
        logger.info("Redis connected")
    except redis.RedisError as e:
        logger.warning(f"Redis unavailable: {e}. Falling back to in-memory rate limiting.")
        redis_client = None
else:
    logger.info("Redis disabled (REDIS_URL not set)")


def get_db() -> Generator[Session, None, None]:
    """FastAPI dependency yielding a database session"""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


@contextmanager
def get_db_session() -> Generator[Session, None, None]:
    """Context manager for sessions used outside requests (jobs, scripts)"""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def test_connections() -> Dict[str, Any]:
    """Probe every backing service without raising"""
    status: Dict[str, Any] = {
        "database": False,
        "redis": None,
    }

    try:
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
            status["database"] = True
    except Exception as e:
        logger.error(f"DB error: {e}")
        status["database_error"] = str(e)

    if redis_client is not None:
        try:
            redis_client.ping()
            status["redis"] = True
        except redis.RedisError as e:
            logger.error(f"Redis error: {e}")
            status["redis"] = False
            status["redis_error"] = str(e)

    return status


def init_database() -> None:
    """
    Create tables if they do not exist.
    Raises on failure: startup must not continue with a broken schema.
    """
    import models  # noqa: F401  (registers mappers on Base.metadata)

    Base.metadata.create_all(bind=engine)
    logger.info(f"Database schema ready ({len(Base.metadata.tables)} tables)")
