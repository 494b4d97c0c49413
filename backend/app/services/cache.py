"""Persistence of the last successfully parsed portfolio.

The calculation core never touches storage; the HTTP layer hands finished
results to :class:`PortfolioCache`, which keeps exactly one serialized bundle
under a single key.
"""

from __future__ import annotations

import logging

from sqlalchemy import delete

from app.db.database import Database
from app.models import CacheEntry
from portfolio_tracker.errors import PersistenceDecodeError
from portfolio_tracker.models import ParsedResult
from portfolio_tracker.serialization import dumps_result, loads_result

logger = logging.getLogger(__name__)

CACHE_KEY = "portfolioData"


class PortfolioCache:
    """Load, replace or clear the cached :class:`ParsedResult`."""

    def __init__(self, database: Database, key: str = CACHE_KEY):
        self._database = database
        self._key = key

    @property
    def key(self) -> str:
        return self._key

    async def load(self) -> ParsedResult | None:
        """Return the stored result verbatim, or ``None`` if absent or corrupt."""

        async with self._database.session() as session:
            entry = await session.get(CacheEntry, self._key)
            if entry is None:
                return None
            try:
                return loads_result(entry.payload)
            except PersistenceDecodeError as exc:
                logger.warning("Discarding unreadable cached portfolio: %s", exc)
                await session.delete(entry)
                await session.commit()
                return None

    async def save(self, result: ParsedResult) -> None:
        """Replace any previously cached result with ``result``."""

        await self.store_raw(dumps_result(result))
        logger.info("Cached portfolio with %d holding(s)", len(result.holdings))

    async def store_raw(self, payload: str) -> None:
        """Write ``payload`` as-is; used to seed or repair the cache."""

        async with self._database.session() as session:
            entry = await session.get(CacheEntry, self._key)
            if entry is None:
                session.add(CacheEntry(key=self._key, payload=payload))
            else:
                entry.payload = payload
            await session.commit()

    async def clear(self) -> None:
        async with self._database.session() as session:
            await session.execute(delete(CacheEntry).where(CacheEntry.key == self._key))
            await session.commit()
        logger.info("Cleared cached portfolio")


__all__ = ["CACHE_KEY", "PortfolioCache"]
