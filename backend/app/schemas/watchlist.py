"""
Watchlist schemas for API request/response objects.
Mirrors the ORM models but shaped for the API layer.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel


class CreateWatchlistRequest(BaseModel):
    # Optional so a missing name gets our 400 message, not a validation error
    name: Optional[str] = None


class AddSymbolRequest(BaseModel):
    symbol: Optional[str] = None


class WatchlistResponse(BaseModel):
    id: int
    name: str

    model_config = {"from_attributes": True}


class WatchlistItemResponse(BaseModel):
    id: int
    watchlist_id: int
    symbol: str
    initial_price: float
    added_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class DeletedItemResponse(BaseModel):
    message: str = "Item deleted"
    item: WatchlistItemResponse


# ── Performance ────────────────────────────────────────────────────────────


class PerformanceItem(BaseModel):
    id: int
    symbol: str
    added_at: Optional[datetime] = None
    initial_price: float
    current_price: float
    abs_change: float
    pct_change: Optional[float] = None  # None when initial_price is 0


class PerformanceSummary(BaseModel):
    count: int
    avg_pct_change: Optional[float] = None


class WatchlistPerformance(BaseModel):
    watchlist_id: int
    items: list[PerformanceItem]
    summary: PerformanceSummary
