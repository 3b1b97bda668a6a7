# Import all models here so SQLAlchemy Base sees them for create_all
from app.models.watchlist import Watchlist, WatchlistItem

__all__ = [
    "Watchlist",
    "WatchlistItem",
]
