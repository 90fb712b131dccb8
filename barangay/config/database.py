import logging

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import NullPool

from barangay.config.settings import settings

logger = logging.getLogger("uvicorn.error")

engine_kwargs = {"echo": settings.DB_ECHO, "future": True}
if settings.database_url.startswith("sqlite"):
    # aiosqlite connections must not outlive the event loop that opened them
    engine_kwargs["poolclass"] = NullPool

# Create async engine
engine = create_async_engine(settings.database_url, **engine_kwargs)

# Create session factory
AsyncSessionLocal = sessionmaker(
    bind=engine,
    class_=AsyncSession,
    expire_on_commit=False
)


# Dependency for FastAPI routes
async def get_db():
    async with AsyncSessionLocal() as session:
        yield session


# Create tables and check the connection
async def init_db():
    from barangay.infrastructure.database.models import Base

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
        await conn.execute(text("SELECT 1"))
    logger.info("Database connection successful, tables ready.")


async def close_db():
    await engine.dispose()
