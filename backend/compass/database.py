from sqlalchemy import create_engine, event
from sqlalchemy.orm import declarative_base, sessionmaker
from compass.core.config import settings
import logging
import time

logger = logging.getLogger(__name__)

logger.info("COMPASS DATABASE_URL = %s", settings.get_masked_database_url())

_engine_kwargs = {"pool_pre_ping": True, "echo": False}
if settings.DATABASE_URL.startswith("sqlite"):
    # Local/dev SQLite: allow the FastAPI threadpool to share connections
    _engine_kwargs["connect_args"] = {"check_same_thread": False}

engine = create_engine(settings.DATABASE_URL, **_engine_kwargs)

# Add slow query logging (DEBUG mode only)
if settings.DEBUG:
    SLOW_QUERY_THRESHOLD_MS = 200.0

    @event.listens_for(engine, "before_cursor_execute")
    def receive_before_cursor_execute(conn, cursor, statement, parameters, context, executemany):
        """Store query start time before execution."""
        context._query_start_time = time.perf_counter()

    @event.listens_for(engine, "after_cursor_execute")
    def receive_after_cursor_execute(conn, cursor, statement, parameters, context, executemany):
        """Log slow queries after execution."""
        if hasattr(context, "_query_start_time"):
            elapsed_ms = (time.perf_counter() - context._query_start_time) * 1000
            if elapsed_ms >= SLOW_QUERY_THRESHOLD_MS:
                statement_first_line = statement.split("\n")[0].strip()[:100]
                logger.warning(
                    f"SLOW_QUERY: {elapsed_ms:.2f}ms - {statement_first_line}"
                )

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base = declarative_base()


def get_db():
    """Dependency for getting database session."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def init_db() -> None:
    """
    Dev convenience: create missing tables when no Alembic migrations are present.

    WARNING: create_all() will NOT add missing columns to existing tables.
    Use 'alembic upgrade head' for schema changes.
    """
    import os
    alembic_versions_path = os.path.join(os.path.dirname(__file__), "..", "alembic", "versions")
    if os.path.exists(alembic_versions_path) and any(
        name.endswith(".py") for name in os.listdir(alembic_versions_path)
    ):
        logger.info("Alembic migrations detected. Skipping Base.metadata.create_all().")
        return

    # Import all models to ensure they're registered with Base.metadata
    from compass import models  # noqa: F401

    Base.metadata.create_all(bind=engine)
