"""
Quote API — live Finnhub quote for a single symbol.
"""

import logging

from fastapi import APIRouter, Depends

from app.data.finnhub_client import FinnhubClient, QuoteError, get_quote_client
from app.schemas.api import ApiError
from app.schemas.market import InvalidQuoteError, Quote, QuoteResponse

logger = logging.getLogger(__name__)
router = APIRouter()


@router.get("/{symbol}", response_model=QuoteResponse)
async def get_quote(symbol: str, quotes: FinnhubClient = Depends(get_quote_client)):
    """Current, high, low, open and previous close, plus the raw payload."""
    symbol = symbol.upper().strip()

    try:
        raw = await quotes.fetch_quote(symbol)
    except QuoteError as e:
        logger.error(f"Error in /quote route: {e}")
        raise ApiError(500, "Failed to fetch quote from Finnhub", detail=e.detail) from e

    try:
        quote = Quote.from_finnhub(symbol, raw)
    except InvalidQuoteError as e:
        logger.error(f"Error in /quote route: {e}")
        raise ApiError(500, "Invalid response from Finnhub", detail=raw) from e

    return QuoteResponse.from_quote(quote, raw)
