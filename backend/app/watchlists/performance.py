"""
Watchlist performance — price change of every item since it was added.

  abs_change      = current - initial
  pct_change      = abs_change / initial * 100   (None when initial is 0)
  avg_pct_change  = mean of the non-None pct_change values (None if there are none)

Quotes for all items are fetched concurrently. There is no partial result: if any
single fetch fails, build_performance raises and the request fails.
"""

import asyncio
import logging
from typing import Optional, Protocol

from app.models.watchlist import WatchlistItem
from app.schemas.market import is_number
from app.schemas.watchlist import (
    PerformanceItem,
    PerformanceSummary,
    WatchlistPerformance,
)

logger = logging.getLogger(__name__)


class QuoteSource(Protocol):
    async def fetch_quote(self, symbol: str) -> dict: ...


def item_performance(item: WatchlistItem, current_price: float) -> PerformanceItem:
    initial = float(item.initial_price)
    abs_change = current_price - initial
    pct_change = (abs_change / initial) * 100 if initial != 0 else None
    return PerformanceItem(
        id=item.id,
        symbol=item.symbol,
        added_at=item.added_at,
        initial_price=initial,
        current_price=current_price,
        abs_change=abs_change,
        pct_change=pct_change,
    )


def summarize(items: list[PerformanceItem]) -> PerformanceSummary:
    pct_values = [i.pct_change for i in items if i.pct_change is not None]
    avg_pct: Optional[float] = (
        sum(pct_values) / len(pct_values) if pct_values else None
    )
    return PerformanceSummary(count=len(items), avg_pct_change=avg_pct)


def _current_price(quote: dict) -> float:
    # Finnhub reports c=0 (or omits it) for symbols it has no price for;
    # anything that isn't a number counts the same way
    current = quote.get("c") if isinstance(quote, dict) else None
    return float(current) if is_number(current) else 0.0


async def build_performance(
    watchlist_id: int,
    items: list[WatchlistItem],
    quotes: QuoteSource,
) -> WatchlistPerformance:
    if not items:
        return WatchlistPerformance(
            watchlist_id=watchlist_id,
            items=[],
            summary=summarize([]),
        )

    logger.info(f"Watchlist #{watchlist_id}: fetching {len(items)} quotes for performance")
    raw_quotes = await asyncio.gather(
        *(quotes.fetch_quote(item.symbol) for item in items)
    )

    with_perf = [
        item_performance(item, _current_price(quote))
        for item, quote in zip(items, raw_quotes)
    ]
    return WatchlistPerformance(
        watchlist_id=watchlist_id,
        items=with_perf,
        summary=summarize(with_perf),
    )
