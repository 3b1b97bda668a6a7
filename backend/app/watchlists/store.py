"""
Watchlist store — the queries the API layer composes.

Every function takes the request-scoped AsyncSession as its first argument and
only flushes; the get_db dependency owns commit/rollback.

Note: watchlist_exists + add_item are two statements. They share the request's
transaction, but nothing locks the watchlist row in between, so the foreign key
is the last line of defence if the watchlist disappears mid-request.
"""

import logging
from decimal import Decimal
from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.watchlist import Watchlist, WatchlistItem

logger = logging.getLogger(__name__)


async def create_watchlist(db: AsyncSession, name: str) -> Watchlist:
    watchlist = Watchlist(name=name)
    db.add(watchlist)
    await db.flush()
    logger.info(f"Watchlist #{watchlist.id} created: {name!r}")
    return watchlist


async def watchlist_exists(db: AsyncSession, watchlist_id: int) -> bool:
    result = await db.execute(
        select(Watchlist.id).where(Watchlist.id == watchlist_id)
    )
    return result.scalars().first() is not None


async def add_item(
    db: AsyncSession,
    watchlist_id: int,
    symbol: str,
    initial_price: float | Decimal,
) -> WatchlistItem:
    """Insert a symbol at the given price. Caller has already validated both."""
    item = WatchlistItem(
        watchlist_id=watchlist_id,
        symbol=symbol,
        initial_price=Decimal(str(initial_price)),
    )
    db.add(item)
    await db.flush()
    # added_at is assigned by the database
    await db.refresh(item)
    logger.info(f"Watchlist #{watchlist_id}: added {symbol} @ {initial_price}")
    return item


async def list_items(db: AsyncSession, watchlist_id: int) -> list[WatchlistItem]:
    """All items of a watchlist, oldest first (ascending id)."""
    result = await db.execute(
        select(WatchlistItem)
        .where(WatchlistItem.watchlist_id == watchlist_id)
        .order_by(WatchlistItem.id)
    )
    return list(result.scalars().all())


async def delete_item(
    db: AsyncSession, watchlist_id: int, item_id: int
) -> Optional[WatchlistItem]:
    """
    Delete one item, scoped to its watchlist.
    Returns the deleted row, or None when (watchlist_id, item_id) matches nothing.
    """
    result = await db.execute(
        select(WatchlistItem).where(
            WatchlistItem.watchlist_id == watchlist_id,
            WatchlistItem.id == item_id,
        )
    )
    item = result.scalars().first()
    if item is None:
        return None

    await db.delete(item)
    await db.flush()
    logger.info(f"Watchlist #{watchlist_id}: deleted item #{item_id} ({item.symbol})")
    return item
