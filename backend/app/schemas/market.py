"""
Market data schemas — Quote and the /quote response shape.
Built from Finnhub's terse quote payload: {c, h, l, o, pc, t}.
"""

from typing import Any, Optional

from pydantic import BaseModel, ValidationError


class InvalidQuoteError(ValueError):
    """Finnhub answered, but without a numeric current price."""

    def __init__(self, symbol: str, raw: Any) -> None:
        super().__init__(f"Invalid quote for {symbol}: {raw!r}")
        self.symbol = symbol
        self.raw = raw


def is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


class Quote(BaseModel):
    symbol: str
    current: float
    high: Optional[float] = None
    low: Optional[float] = None
    open: Optional[float] = None
    previous_close: Optional[float] = None
    timestamp: Optional[int] = None  # Unix timestamp from Finnhub

    @classmethod
    def from_finnhub(cls, symbol: str, raw: Any) -> "Quote":
        if not isinstance(raw, dict) or not is_number(raw.get("c")):
            raise InvalidQuoteError(symbol, raw)
        try:
            return cls(
                symbol=symbol,
                current=raw["c"],
                high=raw.get("h"),
                low=raw.get("l"),
                open=raw.get("o"),
                previous_close=raw.get("pc"),
                timestamp=raw.get("t"),
            )
        except ValidationError as e:
            # A usable c but garbage in the session fields is still a bad quote
            raise InvalidQuoteError(symbol, raw) from e


class QuoteResponse(BaseModel):
    symbol: str
    current_price: float
    high: Optional[float] = None
    low: Optional[float] = None
    open: Optional[float] = None
    previous_close: Optional[float] = None
    raw: dict[str, Any]  # Untouched Finnhub payload, handy when debugging

    @classmethod
    def from_quote(cls, quote: Quote, raw: dict[str, Any]) -> "QuoteResponse":
        return cls(
            symbol=quote.symbol,
            current_price=quote.current,
            high=quote.high,
            low=quote.low,
            open=quote.open,
            previous_close=quote.previous_close,
            raw=raw,
        )
