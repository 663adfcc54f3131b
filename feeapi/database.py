from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import declarative_base

from feeapi.config import settings

# No connection is opened until the first query; pre-ping drops connections
# the database closed while the cache sat idle between refreshes.
engine = create_async_engine(
    settings.DATABASE_URL,
    echo=settings.DATABASE_ECHO,
    pool_pre_ping=True,
)

FeeSession = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)

Base = declarative_base()


async def get_db():
    async with FeeSession() as db:
        yield db


async def dispose_engine() -> None:
    await engine.dispose()
