"""
Finnhub client — real-time quotes for watchlist symbols.
One SDK call per lookup: no caching, no retries. Errors are surfaced, not swallowed;
the route layer decides what the user sees.
"""

import asyncio
import logging
from functools import lru_cache
from typing import Any, Optional

import finnhub
import requests
from finnhub.exceptions import FinnhubAPIException, FinnhubRequestException

from app.config import get_settings

logger = logging.getLogger(__name__)


class QuoteError(Exception):
    """Quote lookup failed: network, non-2xx from Finnhub, or unparseable body."""

    def __init__(self, symbol: str, message: str, detail: Any = None) -> None:
        super().__init__(f"Finnhub quote failed for {symbol}: {message}")
        self.symbol = symbol
        self.detail = detail if detail is not None else message


class FinnhubClient:
    def __init__(self, api_key: Optional[str] = None) -> None:
        if api_key is None:
            api_key = get_settings().finnhub_api_key
        self._client = finnhub.Client(api_key=api_key)

    # ── Quote ──────────────────────────────────────────────────────────────

    def get_quote(self, symbol: str) -> dict:
        """Raw Finnhub quote payload: {c, h, l, o, pc, t}."""
        try:
            return self._client.quote(symbol)
        except FinnhubAPIException as e:
            # e.message is Finnhub's own "error" field when the body was JSON
            logger.error(f"Finnhub returned {e.status_code} for {symbol}: {e.message}")
            raise QuoteError(symbol, f"HTTP {e.status_code}", detail=e.message) from e
        except FinnhubRequestException as e:
            logger.error(f"Finnhub sent an unreadable body for {symbol}: {e.message}")
            raise QuoteError(symbol, e.message) from e
        except requests.RequestException as e:
            logger.error(f"Finnhub request failed for {symbol}: {e}")
            raise QuoteError(symbol, str(e)) from e

    async def fetch_quote(self, symbol: str) -> dict:
        """Async wrapper — the SDK blocks, so each call gets its own worker thread."""
        return await asyncio.to_thread(self.get_quote, symbol)

    # ── Connectivity check ─────────────────────────────────────────────────

    def ping(self) -> dict:
        try:
            quote = self.get_quote("AAPL")
        except QuoteError as e:
            return {"ok": False, "error": str(e)}
        if (quote.get("c") or 0) > 0:
            return {"ok": True, "aapl_price": quote["c"]}
        return {"ok": False, "error": "Could not fetch AAPL quote"}


@lru_cache
def get_quote_client() -> FinnhubClient:
    """FastAPI dependency — one SDK client (and HTTP session) per process."""
    return FinnhubClient()
