import logging
from contextlib import asynccontextmanager

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from pillarlog.core.errors import StoreFailure

log = logging.getLogger(__name__)


@asynccontextmanager
async def store_errors(db: AsyncSession, action: str):
    """Roll back and re-raise unexpected database errors as StoreFailure."""
    try:
        yield
    except SQLAlchemyError as exc:
        await db.rollback()
        log.exception("Store failure while trying to %s", action)
        raise StoreFailure(f"Failed to {action}") from exc
