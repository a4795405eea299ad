from contextlib import asynccontextmanager
from typing import AsyncGenerator

from sqlalchemy.ext.asyncio import AsyncSession

from achievement_api.database.session import get_default_session_maker
from achievement_api.log import get_logger

log = get_logger(__name__)


@asynccontextmanager
async def get_async_db() -> AsyncGenerator[AsyncSession, None]:
    """
    Context manager yielding an AsyncSession; rolls back on error and
    always closes the session.
    """
    session = get_default_session_maker()()
    try:
        yield session
    except Exception:
        await session.rollback()
        raise
    finally:
        try:
            await session.close()
        except Exception as e:
            log.error(f"Error closing session: {e}")


async def get_db() -> AsyncGenerator[AsyncSession, None]:  # pragma: no cover
    """
    FastAPI dependency yielding a database session for one request.

    Yields:
        AsyncSession: A database session object.
    """
    async with get_async_db() as session:
        yield session
