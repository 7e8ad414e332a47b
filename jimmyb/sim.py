"""Paper-trading engine that tracks simulated positions with TP/SL and max-hold rules."""

from __future__ import annotations

import copy
import enum
import time
from dataclasses import dataclass, field

LOW_LIQUIDITY_USD = 5.0
MAX_HOLD_PNL_THRESHOLD_PCT = 50.0
_ZERO_EPSILON = 1e-12


class DexType(enum.Enum):
    """Venue a simulated trade happens on."""

    V2 = "v2"
    V3 = "v3"
    FOUR_MEME = "fm"


class PositionStatus(enum.Enum):
    """Lifecycle state of a simulated position."""

    OPEN = "open"
    CLOSED_TP = "closed_tp"
    CLOSED_SL = "closed_sl"
    CLOSED_MANUAL = "closed_manual"


@dataclass
class SimPosition:
    """A simulated trading position."""

    pair_address: str
    dex_type: DexType
    base_token: str
    quote_token: str
    entry_price: float
    buy_amount_wbnb: float
    tp_pct: float | None = None
    sl_pct: float | None = None
    current_price: float = field(init=False)
    remaining_amount_wbnb: float = field(init=False)
    opened_at: float = field(default_factory=time.monotonic)
    closed_at: float | None = None
    status: PositionStatus = PositionStatus.OPEN
    liquidity_usd: float | None = None
    out_of_liq: bool = False
    needs_liq_ack: bool = False
    pnl_pct: float = 0.0
    pnl_wbnb: float = 0.0
    realized_pnl_wbnb: float = 0.0
    frozen: bool = False

    def __post_init__(self) -> None:
        self.current_price = self.entry_price
        self.remaining_amount_wbnb = self.buy_amount_wbnb

    def update_liquidity(self, liquidity: float | None) -> None:
        """Record liquidity and raise a one-shot alert when it drops below the guard."""
        self.liquidity_usd = liquidity
        if self.dex_type is DexType.FOUR_MEME:
            self.out_of_liq = False
            self.needs_liq_ack = False
            return
        if liquidity is None:
            return
        if liquidity < LOW_LIQUIDITY_USD:
            if not self.out_of_liq:
                self.needs_liq_ack = True
            self.out_of_liq = True
        else:
            # An unacknowledged alert stays raised even if liquidity recovers.
            if self.out_of_liq and self.needs_liq_ack:
                return
            self.out_of_liq = False
            self.needs_liq_ack = False

    def update_price(self, new_price: float) -> bool:
        """Apply a new price; return True if TP or SL closed the position."""
        self.current_price = new_price
        if self.entry_price <= 0.0:
            return False

        self.pnl_pct = (new_price / self.entry_price - 1.0) * 100.0
        self.pnl_wbnb = self.remaining_amount_wbnb * (self.pnl_pct / 100.0)

        if self.frozen or self.remaining_amount_wbnb <= 0.0:
            return False

        if self.tp_pct is not None and self.pnl_pct >= self.tp_pct:
            self.close(PositionStatus.CLOSED_TP)
            return True
        if self.sl_pct is not None and self.pnl_pct <= -self.sl_pct:
            self.close(PositionStatus.CLOSED_SL)
            return True
        return False

    def partial_sell_fraction(self, fraction: float) -> float:
        """Sell a fraction (0 < fraction <= 1) of the remaining amount; return realized PnL."""
        if not 0.0 < fraction <= 1.0 or self.remaining_amount_wbnb <= 0.0:
            return 0.0
        sell_amount = self.remaining_amount_wbnb * fraction
        realized = sell_amount * (self.pnl_pct / 100.0)
        self.remaining_amount_wbnb -= sell_amount
        if abs(self.remaining_amount_wbnb) < _ZERO_EPSILON:
            self.remaining_amount_wbnb = 0.0
        self.realized_pnl_wbnb += realized
        self.pnl_wbnb = self.remaining_amount_wbnb * (self.pnl_pct / 100.0)
        return realized

    def close(self, status: PositionStatus) -> None:
        self.status = status
        self.closed_at = time.monotonic()

    def is_open(self) -> bool:
        return self.status is PositionStatus.OPEN

    def duration_secs(self) -> int:
        """Whole seconds held, up to closing time or now."""
        end = self.closed_at if self.closed_at is not None else time.monotonic()
        return max(0, int(end - self.opened_at))

    def total_pnl_wbnb(self) -> float:
        """Realized PnL from partial sells plus current open PnL."""
        return self.realized_pnl_wbnb + self.pnl_wbnb


@dataclass(frozen=True)
class SimStats:
    """Summary statistics over the engine's positions."""

    total_trades: int
    winning_trades: int
    losing_trades: int
    win_rate: float
    total_pnl_closed: float
    total_pnl_open: float
    avg_pnl_per_trade: float
    open_positions: int
    realized_pnl_partial: float
    total_pnl_realized: float


@dataclass(frozen=True)
class _PendingBuy:
    dex_type: DexType
    base_token: str
    quote_token: str
    buy_amount: float
    tp_pct: float | None
    sl_pct: float | None


class SimEngine:
    """Tracks simulated positions, pending buys and closed trades."""

    def __init__(self, max_positions: int) -> None:
        self._positions: dict[str, SimPosition] = {}
        self._closed: list[SimPosition] = []
        self._max_positions = max_positions
        self._pending: dict[str, _PendingBuy] = {}
        self._do_not_rebuy: set[str] = set()
        self._max_hold_secs = 0
        self._max_hold_pnl_enabled = True

    def set_max_hold_secs(self, secs: int) -> None:
        """Set the max hold duration in seconds (0 disables)."""
        self._max_hold_secs = secs

    def set_max_hold_pnl_enabled(self, enabled: bool) -> None:
        """Enable or disable the PnL gate on max-hold closing."""
        self._max_hold_pnl_enabled = enabled

    def _finalize(self, pos: SimPosition, status: PositionStatus) -> None:
        pos.close(status)
        self._do_not_rebuy.add(pos.pair_address)
        self._closed.append(pos)

    def take_position(self, pair_address: str) -> SimPosition | None:
        """Close one open position manually and return a copy of it."""
        pos = self._positions.pop(pair_address, None)
        if pos is None:
            return None
        pos.pnl_wbnb = pos.realized_pnl_wbnb + pos.pnl_wbnb
        self._finalize(pos, PositionStatus.CLOSED_MANUAL)
        return copy.copy(pos)

    def partial_take(self, pair_address: str, fraction: float) -> tuple[float, bool] | None:
        """Sell part of an open, unfrozen position; return (realized, fully_sold)."""
        pos = self._positions.get(pair_address)
        if pos is None or pos.frozen:
            return None
        realized = pos.partial_sell_fraction(fraction)
        # The position stays managed until an explicit take, even when fully sold.
        return realized, pos.remaining_amount_wbnb == 0.0

    def remove_position(self, pair_address: str) -> bool:
        """Drop a position or pending buy without recording it; it is never re-bought."""
        removed = self._positions.pop(pair_address, None) is not None
        removed = (self._pending.pop(pair_address, None) is not None) or removed
        if removed:
            self._do_not_rebuy.add(pair_address)
        return removed

    def take_all(self) -> list[SimPosition]:
        """Close every unfrozen open position and return copies of them."""
        keys = [k for k, p in self._positions.items() if not p.frozen]
        closed: list[SimPosition] = []
        for key in keys:
            pos = self._positions.pop(key)
            pos.pnl_wbnb = pos.realized_pnl_wbnb + pos.pnl_wbnb
            self._finalize(pos, PositionStatus.CLOSED_MANUAL)
            closed.append(copy.copy(pos))
        return closed

    def submit_buy(
        self,
        pair_address: str,
        dex_type: DexType,
        base_token: str,
        quote_token: str,
        buy_amount: float,
        tp_pct: float | None,
        sl_pct: float | None,
    ) -> bool:
        """Queue a buy that executes on the next price update; return whether accepted."""
        if (
            pair_address in self._positions
            or pair_address in self._pending
            or pair_address in self._do_not_rebuy
        ):
            return False
        if len(self._positions) + len(self._pending) >= self._max_positions:
            return False
        self._pending[pair_address] = _PendingBuy(
            dex_type, base_token, quote_token, buy_amount, tp_pct, sl_pct
        )
        return True

    def update_or_execute(
        self,
        pair_address: str,
        new_price: float,
        liquidity: float | None,
        allow_close: bool,
    ) -> str | None:
        """Execute a pending buy or update an open position; return an event message if any.

        ``allow_close`` controls whether TP/SL and max-hold closes are applied.
        """
        pending = self._pending.pop(pair_address, None)
        if pending is not None:
            position = SimPosition(
                pair_address=pair_address,
                dex_type=pending.dex_type,
                base_token=pending.base_token,
                quote_token=pending.quote_token,
                entry_price=new_price,
                buy_amount_wbnb=pending.buy_amount,
                tp_pct=pending.tp_pct,
                sl_pct=pending.sl_pct,
            )
            position.update_liquidity(liquidity)
            self._positions[pair_address] = position
            return (
                f"EXECUTED buy for {pending.base_token} at {new_price:.8f} "
                "(simulated 1-block delay)"
            )

        pos = self._positions.get(pair_address)
        if pos is not None:
            pos.update_liquidity(liquidity)
            if pos.update_price(new_price) and allow_close:
                closed = self._positions.pop(pair_address)
                self._do_not_rebuy.add(closed.pair_address)
                self._closed.append(closed)

        if self._max_hold_secs > 0 and allow_close:
            pos = self._positions.get(pair_address)
            if pos is not None and self._max_hold_due(pos):
                del self._positions[pair_address]
                self._finalize(pos, PositionStatus.CLOSED_MANUAL)
                return (
                    f"⏰ MAX HOLD TAKE closed {pos.base_token} ({pos.pair_address}) "
                    f"PnL: {pos.pnl_wbnb:+.6f} WBNB"
                )
        return None

    def _max_hold_due(self, pos: SimPosition) -> bool:
        if pos.frozen or pos.remaining_amount_wbnb <= 0.0:
            return False
        if pos.duration_secs() < self._max_hold_secs:
            return False
        if self._max_hold_pnl_enabled:
            return pos.pnl_pct <= MAX_HOLD_PNL_THRESHOLD_PCT
        return True

    def open_positions(self) -> list[SimPosition]:
        """Open positions, oldest first."""
        return sorted(self._positions.values(), key=lambda p: p.opened_at)

    def open_position(self, pair_address: str) -> SimPosition | None:
        """A copy of one open position, if present."""
        pos = self._positions.get(pair_address)
        return copy.copy(pos) if pos is not None else None

    def has_position_or_pending(self, pair_address: str) -> bool:
        """True if the pair is open, pending, or barred from re-buying."""
        return (
            pair_address in self._positions
            or pair_address in self._pending
            or pair_address in self._do_not_rebuy
        )

    def closed_positions(self) -> list[SimPosition]:
        return list(self._closed)

    def stats(self) -> SimStats:
        total_trades = len(self._closed)
        winning = sum(1 for p in self._closed if p.pnl_wbnb > 0.0)
        losing = sum(1 for p in self._closed if p.pnl_wbnb < 0.0)
        total_pnl = sum(p.pnl_wbnb for p in self._closed)
        total_open = sum(p.pnl_wbnb for p in self._positions.values())
        realized_partial = sum(p.realized_pnl_wbnb for p in self._positions.values())
        return SimStats(
            total_trades=total_trades,
            winning_trades=winning,
            losing_trades=losing,
            win_rate=winning / total_trades * 100.0 if total_trades else 0.0,
            total_pnl_closed=total_pnl,
            total_pnl_open=total_open,
            avg_pnl_per_trade=total_pnl / total_trades if total_trades else 0.0,
            open_positions=len(self._positions),
            realized_pnl_partial=realized_partial,
            total_pnl_realized=total_pnl + realized_partial,
        )

    def reset(self) -> None:
        """Clear open, closed and pending positions."""
        self._positions.clear()
        self._closed.clear()
        self._pending.clear()

    def update_max_positions(self, new_max: int) -> None:
        self._max_positions = new_max

    def set_freeze(self, pair_address: str, frozen: bool) -> bool:
        pos = self._positions.get(pair_address)
        if pos is None:
            return False
        pos.frozen = frozen
        return True

    def toggle_freeze(self, pair_address: str) -> bool | None:
        """Flip the frozen flag; return the new state, or None if not open."""
        pos = self._positions.get(pair_address)
        if pos is None:
            return None
        pos.frozen = not pos.frozen
        return pos.frozen

    def position_needs_liq_ack(self, pair_address: str) -> bool:
        pos = self._positions.get(pair_address)
        return pos is not None and pos.needs_liq_ack

    def ack_all_liq_alerts(self) -> int:
        """Acknowledge all low-liquidity alerts; return how many were cleared."""
        cleared = 0
        for pos in self._positions.values():
            if pos.needs_liq_ack:
                pos.needs_liq_ack = False
                cleared += 1
        return cleared

    def has_pending_liq_alert(self) -> bool:
        return any(p.needs_liq_ack for p in self._positions.values())

    def add_real_position(
        self,
        pair_address: str,
        dex_type: DexType,
        base_token: str,
        quote_token: str,
        entry_price: float,
        buy_amount_wbnb: float,
        tp_pct: float | None,
        sl_pct: float | None,
        liquidity_usd: float | None,
    ) -> None:
        """Mirror a real buy directly as an open position; existing pairs are left alone."""
        if pair_address in self._positions:
            return
        pos = SimPosition(
            pair_address=pair_address,
            dex_type=dex_type,
            base_token=base_token,
            quote_token=quote_token,
            entry_price=entry_price,
            buy_amount_wbnb=buy_amount_wbnb,
            tp_pct=tp_pct,
            sl_pct=sl_pct,
        )
        pos.update_liquidity(liquidity_usd)
        self._positions[pair_address] = pos