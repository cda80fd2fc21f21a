# Export-specific data adapters
# Each module reads one source system's export into stock_count models

from .stock_feed import LoadedFeed, StockFeedLoader

__all__ = ["LoadedFeed", "StockFeedLoader"]
