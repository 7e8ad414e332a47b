"""Per-pair counters of buys, sells and unique buyers fed by swap events."""

from __future__ import annotations

import asyncio
import logging
import threading
from dataclasses import dataclass, field

from jimmyb.swaps import SwapEvent

logger = logging.getLogger(__name__)


@dataclass
class PairSwapStats:
    """Swap counts collected for one pair."""

    buy_count: int = 0
    sell_count: int = 0
    unique_buyers: set[str] = field(default_factory=set)


class SwapAggregator:
    """Collects swap events and keeps running counts per pair."""

    def __init__(self) -> None:
        self._stats: dict[str, PairSwapStats] = {}
        self._lock = threading.Lock()

    @staticmethod
    def _key(pair: str) -> str:
        return pair.lower()

    def get_stats(self, pair: str) -> tuple[int, int, int]:
        """Return (buys, sells, unique buyers) for a pair; zeros if unseen."""
        with self._lock:
            stats = self._stats.get(self._key(pair))
            if stats is None:
                return 0, 0, 0
            return stats.buy_count, stats.sell_count, len(stats.unique_buyers)

    def process_event(self, event: SwapEvent) -> None:
        """Count one swap event."""
        key = self._key(event.pair)
        with self._lock:
            stats = self._stats.setdefault(key, PairSwapStats())
            if event.is_buy:
                stats.buy_count += 1
                stats.unique_buyers.add(event.trader.lower())
            else:
                stats.sell_count += 1
            buys, sells = stats.buy_count, stats.sell_count
        logger.info(
            "[swap-agg] %s on %s… | B:%d S:%d | trader:%s…",
            "BUY" if event.is_buy else "SELL",
            key[:8],
            buys,
            sells,
            event.trader.lower()[:8],
        )

    async def run(self, queue: asyncio.Queue) -> None:
        """Consume events from ``queue`` until a ``None`` marks its end."""
        while True:
            event = await queue.get()
            if event is None:
                break
            self.process_event(event)
        logger.info("[swap-agg] Processor channel closed")

    def cleanup_pair(self, pair: str) -> None:
        """Forget all counts for a pair."""
        with self._lock:
            self._stats.pop(self._key(pair), None)