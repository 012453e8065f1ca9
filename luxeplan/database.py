import logging
import os
import time
from typing import Optional

from fastapi import Request
from sqlalchemy import create_engine, event
from sqlalchemy.orm import declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool

from .config import DATABASE_URL

logger = logging.getLogger(__name__)

# Get environment-specific pool settings
POOL_SIZE = int(os.getenv("DB_POOL_SIZE", "20"))
MAX_OVERFLOW = int(os.getenv("DB_MAX_OVERFLOW", "30"))
POOL_TIMEOUT = int(os.getenv("DB_POOL_TIMEOUT", "30"))
POOL_RECYCLE = int(os.getenv("DB_POOL_RECYCLE", "300"))
ENABLE_QUERY_LOGGING = os.getenv("DB_LOG_SLOW_QUERIES", "true").lower() == "true"
SLOW_QUERY_THRESHOLD = float(os.getenv("DB_SLOW_QUERY_THRESHOLD", "1.0"))

Base = declarative_base()


def _engine_options(url: str) -> dict:
    """Pool options per backend; SQLite rejects the sizing arguments"""
    if url.startswith("sqlite"):
        options = {"connect_args": {"check_same_thread": False}}
        if ":memory:" in url or url in ("sqlite://", "sqlite+pysqlite://"):
            # One shared connection so every session sees the same in-memory database
            options["poolclass"] = StaticPool
        return options
    return {
        "pool_pre_ping": True,  # Test connections before using
        "pool_recycle": POOL_RECYCLE,
        "pool_size": POOL_SIZE,
        "max_overflow": MAX_OVERFLOW,
        "pool_timeout": POOL_TIMEOUT,
    }


class Database:
    """
    Shared storage handle.

    Created once at application start-up, stored on ``app.state.database``
    and disposed on shut-down. Request handlers receive sessions from it
    through the ``get_db`` dependency.
    """

    def __init__(self, url: Optional[str] = None):
        self.url = url or DATABASE_URL
        try:
            self.engine = create_engine(self.url, echo=False, **_engine_options(self.url))
            logger.info("✅ Database engine created successfully")
        except Exception as e:
            logger.error(f"❌ Failed to create database engine: {e}")
            raise

        if ENABLE_QUERY_LOGGING:
            self._install_slow_query_logging()

        self.SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=self.engine)

    def _install_slow_query_logging(self):
        @event.listens_for(self.engine, "before_cursor_execute")
        def before_cursor_execute(conn, _cursor, statement, _parameters, context, _executemany):
            conn.info.setdefault("query_start_time", []).append(time.time())

        @event.listens_for(self.engine, "after_cursor_execute")
        def after_cursor_execute(conn, _cursor, statement, _parameters, context, _executemany):
            total = time.time() - conn.info["query_start_time"].pop(-1)
            if total > SLOW_QUERY_THRESHOLD:
                logger.warning(f"🐌 Slow query ({total:.2f}s): {statement[:200]}...")

    def init(self):
        """Create all tables that do not exist yet"""
        # Register every model on Base.metadata before creating tables
        from . import models  # noqa: F401

        Base.metadata.create_all(bind=self.engine, checkfirst=True)
        logger.info("Database tables created successfully")

    def session(self):
        return self.SessionLocal()

    def dispose(self):
        self.engine.dispose()
        logger.info("Database connection pool disposed")


def get_db(request: Request):
    database: Database = request.app.state.database
    db = database.session()
    try:
        yield db
    finally:
        db.close()
