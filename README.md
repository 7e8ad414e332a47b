# jimmyb

A library of building blocks for paper-trading newly created DEX pairs:

- **`jimmyb.sim`**: a simulated trading engine with take-profit, stop-loss,
  max-hold closing, partial sells, freezing and low-liquidity alerts.
- **`jimmyb.swaps`**: decodes V2 and V3 `Swap` event logs into buy/sell
  `SwapEvent` records.
- **`jimmyb.aggregator`**: `SwapAggregator` counts buys, sells and unique
  buyers per pair.
- **`jimmyb.writing`**: ANSI-coloured console output.
- **`jimmyb.tui`**: layout and content helpers for a terminal interface that
  do not depend on any widget toolkit (`theme`, `layout`, `modal`, `config`).

## Installation

```
pip install .
```

With the test dependencies:

```
pip install ".[test]"
```

## Simulated trading

```python
from jimmyb.sim import DexType, SimEngine

engine = SimEngine(max_positions=3)
engine.set_max_hold_secs(300)

# Queue a buy with a 10 % take-profit and a 5 % stop-loss.
engine.submit_buy("0xpair", DexType.V2, "TOKEN", "WBNB", 0.01, 10.0, 5.0)

# The next price update fills the buy at that price (a simulated one-block delay).
print(engine.update_or_execute("0xpair", 0.0001, 2500.0, True))
# EXECUTED buy for TOKEN at 0.00010000 (simulated 1-block delay)

# A later price 20 % higher reaches take-profit and closes the position.
engine.update_or_execute("0xpair", 0.00012, 2500.0, True)

stats = engine.stats()
print(stats.total_trades, stats.win_rate, stats.total_pnl_closed)
```

Behaviour worth knowing:

- `submit_buy` refuses a pair that is already open, pending, or was closed or
  removed earlier in the session, and refuses when open plus pending
  positions reach `max_positions` (changeable with `update_max_positions`).
- `update_or_execute(pair, price, liquidity, allow_close)` applies TP/SL and
  max-hold closes only when `allow_close` is true. With
  `set_max_hold_pnl_enabled(True)` (the default), max hold closes a position
  only when its PnL is at most 50 %.
- `partial_take(pair, fraction)` sells part of the remaining amount and
  returns `(realized_pnl, fully_sold)`. The position stays open until
  `take_position(pair)` or `take_all()`.
- Frozen positions (`set_freeze`, `toggle_freeze`) are never closed
  automatically and are skipped by `take_all` and `partial_take`.
- A V2/V3 position whose liquidity drops below $5 raises an alert that stays
  raised until `ack_all_liq_alerts()`; see also `position_needs_liq_ack` and
  `has_pending_liq_alert`. `DexType.FOUR_MEME` positions never alert.
- `add_real_position(...)` opens a position immediately at a given entry
  price, without the pending step.
- `reset()` clears open, pending and closed positions.

## Swap logs

```python
from jimmyb.swaps import RawLog, parse_v2_swap, v2_swap_topic

event = parse_v2_swap(RawLog(address="0xPair", topics=[...], data=b"..."), is_token0=True)
```

`parse_v2_swap` and `parse_v3_swap` return `None` when a log has fewer than
three topics or too little data. `v2_swap_topic()`, `v3_swap_topic()` and
`keccak256()` give the event topic hashes.

`SwapAggregator.process_event(event)` counts one event, and
`get_stats(pair)` returns `(buys, sells, unique_buyers)`. Pair addresses are
compared case-insensitively. `await aggregator.run(queue)` consumes events
from an `asyncio.Queue` until it receives `None`. `cleanup_pair` forgets a
pair's counts.

## Console output

`jimmyb.writing.log(message, color, stream)` writes a UTC-timestamped
coloured line, and `warn(message, stream)` writes an orange one. Both write to
stderr by default. `Colors` offers `cprint`, `err_print` and `cinput`, which
prints a prompt and reads a line from stdin. The module also defines ANSI
colour constants such as `RED`, `GREEN` and `RESET`.

## Terminal helpers

- `jimmyb.tui.theme.Theme.bsc_dark()`: a set of named colours.
- `jimmyb.tui.layout`: `Rect`, `BoxProps`, `box_rect`, `centered_rect`
  (raises `ValueError` for percentages outside 0–100), `tab_rects`, and the
  wrapping list selection functions `list_next` and `list_prev`:

  ```python
  from jimmyb.tui.layout import list_next, list_prev

  list_next(None, 5)   # 0
  list_prev(0, 5)      # 4
  ```

- `jimmyb.tui.modal`: rows of styled `Segment`s for modal panels
  (`modal_rows`, `pair_rows`, `line_rows`), plus `pad_line`,
  `scroll_position` and `split_pnl`. In `pair_rows`, a PnL value is green
  when it starts with `+` and red when it starts with `-`.
- `jimmyb.tui.config`: the auto-trade settings store.
  `new_store_with_defaults(cached)` returns a copy of `cached` when it is
  non-empty, and otherwise the built-in defaults. Read settings with
  `config_value`, `config_flag`, `selected_dexes` and `quote_selected`.
  `advanced_rows(store, focused_field, scroll_offset, viewport)` describes the
  visible `ConfigRow`s of the advanced settings section. `ConfigAreas` holds
  the clickable rectangles of the settings panel.

## What this package does not do

- It does not connect to a blockchain node. It neither subscribes to
  pair-creation or swap logs nor queries prices or liquidity. You fetch the
  logs and prices and pass them in.
- It does not draw anything on screen. The `tui` modules compute geometry
  and row content only.
- It does not read or write a settings cache. Pass cached values to
  `new_store_with_defaults` yourself.
- It has no command-line program.

## Running the tests

```
pytest
```