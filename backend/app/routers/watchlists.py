"""
Watchlists API — create lists, add/remove symbols, and price performance since adding.
"""

import logging

from fastapi import APIRouter, Depends
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.data.finnhub_client import FinnhubClient, QuoteError, get_quote_client
from app.database import get_db
from app.schemas.api import ApiError
from app.schemas.market import InvalidQuoteError, Quote
from app.schemas.watchlist import (
    AddSymbolRequest,
    CreateWatchlistRequest,
    DeletedItemResponse,
    WatchlistItemResponse,
    WatchlistPerformance,
    WatchlistResponse,
)
from app.watchlists import performance, store

logger = logging.getLogger(__name__)
router = APIRouter()


@router.post("", status_code=201, response_model=WatchlistResponse)
async def create_watchlist(body: CreateWatchlistRequest, db: AsyncSession = Depends(get_db)):
    if not body.name:
        raise ApiError(400, "name is required")

    try:
        watchlist = await store.create_watchlist(db, body.name)
    except SQLAlchemyError as e:
        logger.error(f"Error creating watchlist: {e}")
        raise ApiError(500, "Failed to create watchlist") from e

    return WatchlistResponse.model_validate(watchlist)


@router.post("/{watchlist_id}/items", status_code=201, response_model=WatchlistItemResponse)
async def add_symbol(
    watchlist_id: int,
    body: AddSymbolRequest,
    db: AsyncSession = Depends(get_db),
    quotes: FinnhubClient = Depends(get_quote_client),
):
    """
    Add a symbol at today's price. The price comes from Finnhub, never the client,
    so initial_price is always what the market said at insertion time.
    """
    if not body.symbol or not body.symbol.strip():
        raise ApiError(400, "symbol is required")
    symbol = body.symbol.upper().strip()

    try:
        if not await store.watchlist_exists(db, watchlist_id):
            raise ApiError(404, "Watchlist not found")

        raw = await quotes.fetch_quote(symbol)
        try:
            quote = Quote.from_finnhub(symbol, raw)
        except InvalidQuoteError:
            quote = None
        if quote is None or quote.current <= 0:
            raise ApiError(400, "Invalid price from Finnhub", detail=raw)

        item = await store.add_item(db, watchlist_id, symbol, quote.current)
    except (QuoteError, SQLAlchemyError) as e:
        logger.error(f"Error adding {symbol} to watchlist #{watchlist_id}: {e}")
        detail = e.detail if isinstance(e, QuoteError) else None
        raise ApiError(500, "Failed to add symbol", detail=detail) from e

    return WatchlistItemResponse.model_validate(item)


@router.get("/{watchlist_id}/items", response_model=list[WatchlistItemResponse])
async def get_items(watchlist_id: int, db: AsyncSession = Depends(get_db)):
    """Items in insertion order. An unknown watchlist simply has no items."""
    try:
        items = await store.list_items(db, watchlist_id)
    except SQLAlchemyError as e:
        logger.error(f"Error getting items for watchlist #{watchlist_id}: {e}")
        raise ApiError(500, "Failed to get items") from e

    return [WatchlistItemResponse.model_validate(i) for i in items]


@router.get("/{watchlist_id}/performance", response_model=WatchlistPerformance)
async def get_performance(
    watchlist_id: int,
    db: AsyncSession = Depends(get_db),
    quotes: FinnhubClient = Depends(get_quote_client),
):
    """Per-item change since adding, plus the average % change across the list."""
    try:
        items = await store.list_items(db, watchlist_id)
        return await performance.build_performance(watchlist_id, items, quotes)
    except (QuoteError, SQLAlchemyError, ValueError) as e:
        logger.error(f"Error getting performance for watchlist #{watchlist_id}: {e}")
        detail = e.detail if isinstance(e, QuoteError) else None
        raise ApiError(500, "Failed to get performance", detail=detail) from e


@router.delete("/{watchlist_id}/items/{item_id}", response_model=DeletedItemResponse)
async def delete_item(watchlist_id: int, item_id: int, db: AsyncSession = Depends(get_db)):
    try:
        item = await store.delete_item(db, watchlist_id, item_id)
    except SQLAlchemyError as e:
        logger.error(f"Error deleting item #{item_id} from watchlist #{watchlist_id}: {e}")
        raise ApiError(500, "Failed to delete item") from e

    if item is None:
        raise ApiError(404, "Item not found in this watchlist")

    return DeletedItemResponse(item=WatchlistItemResponse.model_validate(item))
