"""PostgreSQL connection and session management for the audit trail.

The database layer is *optional*: when PostgreSQL is unreachable the
application keeps serving computations and simply skips auditing.
"""

from __future__ import annotations
import json
import logging
from contextlib import asynccontextmanager
from typing import Any, AsyncGenerator, Dict, Optional

from sqlalchemy.ext.asyncio import (
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from app.config import settings
from app.models.db_models import Base, ComputationAudit

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Engine & session factory
# ---------------------------------------------------------------------------
_engine = None
_async_session_factory = None
_db_available: bool = False


async def init_db() -> None:
    """Initialise the async engine, session factory, and create tables."""
    global _engine, _async_session_factory, _db_available

    try:
        _engine = create_async_engine(
            settings.DATABASE_URL,
            echo=False,
            pool_size=5,
            max_overflow=10,
            pool_pre_ping=True,
        )
        _async_session_factory = async_sessionmaker(
            bind=_engine,
            class_=AsyncSession,
            expire_on_commit=False,
        )

        async with _engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

        _db_available = True
        logger.info("PostgreSQL connection established; audit trail enabled.")
    except Exception as exc:
        _db_available = False
        logger.warning(
            "PostgreSQL unavailable — running without audit trail. Error: %s",
            exc,
        )


async def close_db() -> None:
    """Dispose of the connection pool."""
    global _engine, _db_available
    if _engine is not None:
        await _engine.dispose()
        _db_available = False
        logger.info("PostgreSQL connection pool closed.")


@asynccontextmanager
async def get_session() -> AsyncGenerator[AsyncSession | None, None]:
    """Yield an async session if DB is available, otherwise yield None."""
    if not _db_available or _async_session_factory is None:
        yield None
        return

    session = _async_session_factory()
    try:
        yield session
        await session.commit()
    except Exception:
        await session.rollback()
        raise
    finally:
        await session.close()


async def record_audit(
    endpoint: str,
    input_count: int,
    summary: Optional[Dict[str, Any]] = None,
) -> None:
    """Store one audit row; a no-op when the database is unavailable."""
    async with get_session() as session:
        if session is not None:
            session.add(
                ComputationAudit(
                    endpoint=endpoint,
                    input_count=input_count,
                    summary=json.dumps(summary) if summary is not None else None,
                )
            )
