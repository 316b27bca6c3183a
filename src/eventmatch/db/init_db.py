"""
eventmatch.db.init_db

Schema bootstrap for the local store.
"""

from __future__ import annotations

from sqlalchemy.ext.asyncio import AsyncEngine

from eventmatch.db.models import Base


async def init_db(engine: AsyncEngine) -> None:
    """Create the key/value table if it doesn't exist."""

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
