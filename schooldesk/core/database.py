from typing import AsyncGenerator
from contextlib import asynccontextmanager
from sqlalchemy.ext.asyncio import create_async_engine, async_sessionmaker, AsyncSession
from schooldesk.core.config import get_database_url, settings
from schooldesk.models.base import Base

SQLALCHEMY_DATABASE_URL = get_database_url()

engine_options = {
    "echo": settings.DB_ECHO,
    "pool_pre_ping": True,
}
if not SQLALCHEMY_DATABASE_URL.startswith("sqlite"):
    engine_options.update(
        pool_size=20,              # Maximum number of connections in the pool
        max_overflow=10,           # Connections allowed beyond pool_size
        pool_timeout=30,           # Seconds to wait on checkout
        pool_recycle=1800,         # Recycle connections after 30 minutes
    )

engine = create_async_engine(SQLALCHEMY_DATABASE_URL, **engine_options)

AsyncSessionLocal = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autoflush=False
)

async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """
    FastAPI dependency that provides an async database session.
    Usage: db: AsyncSession = Depends(get_db)
    """
    session = AsyncSessionLocal()
    try:
        yield session
    except Exception:
        await session.rollback()
        raise
    finally:
        await session.close()

@asynccontextmanager
async def get_db_context() -> AsyncGenerator[AsyncSession, None]:
    """
    Context manager for database sessions outside of request context.
    Usage: async with get_db_context() as session:
    """
    session = AsyncSessionLocal()
    try:
        yield session
        await session.commit()
    except Exception:
        await session.rollback()
        raise
    finally:
        await session.close()

async def init_db() -> None:
    """Create all tables"""
    import schooldesk.models  # noqa: F401  registers every table on Base.metadata
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

async def reset_db() -> None:
    """Drop and recreate all tables"""
    import schooldesk.models  # noqa: F401
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await init_db()

async def close_db() -> None:
    """Close database connections"""
    await engine.dispose()
