from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from pillarlog.core.config import settings


def async_url(url: str) -> str:
    """Sync driver URLs from the deploy env are switched to asyncpg."""
    return url.replace("postgresql+psycopg2://", "postgresql+asyncpg://").replace(
        "postgresql://", "postgresql+asyncpg://"
    )


engine = create_async_engine(async_url(settings.DB_URL), echo=settings.DB_ECHO, pool_pre_ping=True)
SessionLocal = async_sessionmaker(bind=engine, class_=AsyncSession, expire_on_commit=False)


async def get_db():
    """One session per request; routers and get_current_user share it."""
    async with SessionLocal() as session:
        yield session
