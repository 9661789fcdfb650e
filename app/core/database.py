from typing import Any, Dict

from sqlalchemy import create_engine, event, text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import declarative_base, sessionmaker
from sqlalchemy.pool import QueuePool, StaticPool
from .config import settings
import logging

logger = logging.getLogger(__name__)

# =============================================================================
# DATABASE ENGINE CONFIGURATION
# =============================================================================

def engine_options(url: str) -> Dict[str, Any]:
    """
    Build create_engine() keyword arguments for the given database URL.

    SQLite gets a thread-agnostic connection (FastAPI runs sync endpoints in a
    threadpool); in-memory SQLite shares one connection so every session sees
    the same database. Server databases get a tuned QueuePool.
    """
    options: Dict[str, Any] = {"echo": settings.DB_ECHO_SQL}

    if url.startswith("sqlite"):
        options["connect_args"] = {"check_same_thread": False}
        if url in ("sqlite://", "sqlite:///:memory:") or "mode=memory" in url:
            options["poolclass"] = StaticPool
        return options

    options.update(
        poolclass=QueuePool,
        pool_size=settings.DB_POOL_SIZE,  # Number of connections to keep open
        max_overflow=settings.DB_MAX_OVERFLOW,  # Max connections beyond pool_size
        pool_timeout=settings.DB_POOL_TIMEOUT,  # Seconds to wait for connection
        pool_recycle=settings.DB_POOL_RECYCLE,  # Recycle connections after N seconds
        pool_pre_ping=True,  # Detect dropped connections before use
    )
    return options


engine = create_engine(settings.DATABASE_URL, **engine_options(settings.DATABASE_URL))


def _unicode_lower(value):
    return value.lower() if isinstance(value, str) else value


@event.listens_for(engine, "connect")
def register_sqlite_functions(dbapi_conn, connection_record):
    """
    SQLite's built-in lower() only folds ASCII; ilike() searches rely on it,
    so replace it with Python's str.lower on every new SQLite connection.
    """
    if engine.dialect.name == "sqlite":
        dbapi_conn.create_function("lower", 1, _unicode_lower, deterministic=True)


# =============================================================================
# SESSION CONFIGURATION
# =============================================================================

SessionLocal = sessionmaker(
    autocommit=False,
    autoflush=False,
    bind=engine,
    expire_on_commit=False  # Keep loaded attributes usable after commit
)

# Create Base class for models
Base = declarative_base()


# =============================================================================
# DATABASE UTILITIES
# =============================================================================

def create_database_tables():
    """
    Create all database tables defined in models.

    Only meant for development and tests; production schemas come from Alembic.
    """
    # Register models on Base.metadata
    import app.models.student  # noqa: F401

    logger.info("Creating database tables...")
    Base.metadata.create_all(bind=engine)
    logger.info("✅ Database tables created successfully!")


def drop_database_tables():
    """
    Drop all database tables. This deletes all data!
    """
    logger.warning("⚠️ Dropping all database tables...")
    Base.metadata.drop_all(bind=engine)
    logger.info("✅ Database tables dropped!")


def check_database_connection() -> bool:
    """
    Check if database connection is working.

    Returns:
        bool: True if connection successful, False otherwise
    """
    try:
        with engine.connect() as connection:
            connection.execute(text("SELECT 1"))
        return True
    except SQLAlchemyError as e:
        logger.error(f"❌ Database connection failed: {e}")
        return False


def init_db():
    """
    Initialize database.
    Run this when starting the application.
    """
    logger.info(f"Initializing database at {settings.masked_database_url()}")

    if not check_database_connection():
        raise RuntimeError("Cannot connect to database!")

    if settings.AUTO_CREATE_TABLES:
        create_database_tables()

    logger.info("✅ Database initialized successfully!")
