"""
Loader for exported sales-rep stock data.

Reads the JSON exports of the inventory query service:
- the sales-rep stock-detail feed (one block per item, one row per rep)
- the sales-rep master list (optional; used for filter labels)

To point at a different export:
1. Set TOUR_UNLOAD_DATA_DIR (or pass data_dir)
2. Override the file names if the export uses other names
3. Field aliases are handled by stock_count.schemas
"""

import json
import logging
from dataclasses import dataclass
from pathlib import Path

from stock_count.schemas import SalesRepRef, StockDetailBlock, parse_sales_reps, parse_stock_details

logger = logging.getLogger(__name__)


@dataclass
class LoadedFeed:
    """Container for the loaded stock feed and sales-rep master list."""

    stock_details: list[StockDetailBlock]
    sales_reps: list[SalesRepRef]

    @property
    def row_count(self) -> int:
        return sum(len(block.rows) for block in self.stock_details)


class StockFeedLoader:
    """
    Loads the tour unload report inputs from a data directory.

    Export quirks handled:
    - the feed may be a bare list or wrapped as {"data": [...]}
    - ids arrive as `_id` or `id`, codes as `itemCode` / `repCode`
    - inactive sales reps are dropped from the master list
    """

    DEFAULT_STOCK_FILE = "sales_rep_stock.json"
    DEFAULT_SALES_REPS_FILE = "sales_reps.json"

    def __init__(
        self,
        data_dir: Path | str,
        stock_file: str | None = None,
        sales_reps_file: str | None = None,
    ):
        self.data_dir = Path(data_dir)
        self.stock_file = stock_file or self.DEFAULT_STOCK_FILE
        self.sales_reps_file = sales_reps_file or self.DEFAULT_SALES_REPS_FILE

    @classmethod
    def from_settings(cls, settings) -> "StockFeedLoader":
        return cls(settings.data_dir, settings.stock_feed_file, settings.sales_reps_file)

    def load_all(self) -> LoadedFeed:
        """Load the stock feed and the sales-rep master list."""
        feed = LoadedFeed(
            stock_details=self.load_stock_details(),
            sales_reps=self.load_sales_reps(),
        )
        logger.info(
            "Loaded %d stock rows across %d items, %d active sales reps",
            feed.row_count,
            len(feed.stock_details),
            len(feed.sales_reps),
        )
        return feed

    def load_stock_details(self) -> list[StockDetailBlock]:
        """
        Load the stock-detail feed.

        A missing or malformed file raises; the report cannot run without it.
        """
        path = self.data_dir / self.stock_file
        with open(path, encoding="utf-8") as f:
            payload = json.load(f)

        blocks = parse_stock_details(payload)
        if not blocks and payload:
            logger.warning("Stock feed %s had no usable blocks", path)
        return blocks

    def load_sales_reps(self) -> list[SalesRepRef]:
        """Load active sales reps; the master list is optional."""
        path = self.data_dir / self.sales_reps_file
        if not path.exists():
            logger.info("No sales-rep master list at %s; using reps from the feed", path)
            return []

        with open(path, encoding="utf-8") as f:
            payload = json.load(f)
        return parse_sales_reps(payload)
