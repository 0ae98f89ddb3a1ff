"""
Schema bootstrap for local development and tests.

Production databases are versioned with Alembic (``alembic upgrade head``);
this helper only mirrors the ORM metadata onto an empty database.
"""
import logging

from sqlalchemy.ext.asyncio import AsyncEngine

from pillarlog.db.models import Base

log = logging.getLogger(__name__)


async def create_all(engine: AsyncEngine) -> None:
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    log.info("Schema created on %s", engine.url.render_as_string(hide_password=True))


async def drop_all(engine: AsyncEngine) -> None:
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
