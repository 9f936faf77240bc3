from datetime import datetime, timezone

from loguru import logger
from sqlalchemy import MetaData, inspect, text
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import DeclarativeBase

DEFAULT_DB_URL = "sqlite+aiosqlite:///./askbot.db"


def utcnow() -> datetime:
    """Naive UTC timestamp, comparable with values read back from SQLite."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def process_database_url(url: str | None) -> str:
    """Normalize a database URL to an async driver."""
    if not url:
        logger.warning("No database URL provided, falling back to SQLite")
        return DEFAULT_DB_URL

    logger.info(f"Processing database URL (starts with): {url[:15]}...")

    if url.startswith("sqlite"):
        if "aiosqlite" not in url:
            url = url.replace("sqlite://", "sqlite+aiosqlite://", 1)
        logger.info("Using SQLite database")
        return url

    # Hosted Postgres hands out postgres:// URLs; asyncpg needs postgresql+asyncpg://
    if url.startswith("postgres://"):
        return url.replace("postgres://", "postgresql+asyncpg://", 1)
    if url.startswith("postgresql://"):
        return url.replace("postgresql://", "postgresql+asyncpg://", 1)

    logger.warning(f"Unrecognized database URL format: {url[:10]}...")
    return url


# Naming convention for constraints
convention = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_name)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}

metadata = MetaData(naming_convention=convention)


class Base(DeclarativeBase):
    """Base class for all models."""
    metadata = metadata


def get_async_engine(database_url: str | None = None, echo: bool = False) -> AsyncEngine:
    """Create the SQLAlchemy async engine for the given URL."""
    url = process_database_url(database_url)
    logger.info(f"Using database driver: {url.split('://')[0]}")

    if url.startswith("sqlite"):
        return create_async_engine(url, echo=echo, future=True)

    return create_async_engine(
        url,
        echo=echo,
        future=True,
        pool_pre_ping=True,               # Verify connections before using them
        pool_recycle=300,                 # Recycle connections every 5 minutes
        pool_timeout=30,
        pool_size=5,
        max_overflow=10,
        connect_args={
            "timeout": 10,
            "server_settings": {"application_name": "askbot"},
        },
    )


def get_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Create the async session factory bound to an engine."""
    return async_sessionmaker(
        engine,
        expire_on_commit=False,
        class_=AsyncSession,
    )


async def init_models(engine: AsyncEngine) -> None:
    """Create the schema if the database is empty."""
    # Register every model on the metadata before create_all
    import askbot.db.models  # noqa: F401

    logger.info("Initializing database models...")

    async with engine.begin() as conn:
        await conn.execute(text("SELECT 1"))
        logger.info("Database connection successful")

        tables = await conn.run_sync(lambda sync_conn: inspect(sync_conn).get_table_names())
        missing = set(Base.metadata.tables) - set(tables)
        if missing:
            logger.info(f"Missing tables {sorted(missing)}. Creating database schema...")
            await conn.run_sync(Base.metadata.create_all)
            logger.info("Database schema created.")
        else:
            logger.info(f"Found existing tables: {tables}")

    logger.info("Database models initialization complete.")
