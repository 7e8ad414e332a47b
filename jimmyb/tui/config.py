"""Auto-trade configuration store and the row model of its configuration panel."""

from __future__ import annotations

import enum
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field

from jimmyb.tui.layout import Rect

ConfigStore = dict[str, str]

DEFAULT_ACCEPTED_QUOTES = "BNB,CAKE,USDT,USD1,ASTER,WBNB"
DEFAULT_QUOTE_LIST: tuple[str, ...] = tuple(DEFAULT_ACCEPTED_QUOTES.split(","))
DEFAULT_DEXES = "v2,v3,fm"
DEX_KEYS: tuple[str, ...] = ("v2", "v3", "fm")
DEFAULT_BUY_AMOUNT = "0.00001"
ADVANCED_TOTAL_ROWS = 18
QUOTE_GRID_COLUMNS = 3

_DEFAULTS: dict[str, str] = {
    "enabled": "true",
    "dexes": DEFAULT_DEXES,
    "buy_amount_wbnb": DEFAULT_BUY_AMOUNT,
    "slippage_pct": "0.5",
    "max_gwei": "1.0",
    "max_positions": "3",
    "tp_enabled": "false",
    "tp_pct": "10",
    "sl_enabled": "false",
    "sl_pct": "5",
    "min_liquidity": "1000",
    "min_buys": "3",
    "max_hold_secs": "0",
    "max_hold_pnl": "true",
    "accepted_quotes": DEFAULT_ACCEPTED_QUOTES,
    "wrap_ratio_pct": "80",
    "avoid_chinese": "false",
    "freshness_secs": "30",
    "min_pnl_pct": "100",
}


class RowKind(enum.Enum):
    """What a panel row shows."""

    INPUT = "input"
    CHECKBOX = "checkbox"
    LABEL = "label"
    QUOTES = "quotes"


@dataclass
class ConfigAreas:
    """Clickable rectangles of the configuration panel, filled in while drawing."""

    enabled_btn: Rect | None = None
    dexes: list[Rect] | None = None
    buy_amount_input: Rect | None = None
    slippage_input: Rect | None = None
    max_gwei_input: Rect | None = None
    max_positions_input: Rect | None = None
    tp_toggle: Rect | None = None
    tp_pct_input: Rect | None = None
    sl_toggle: Rect | None = None
    sl_pct_input: Rect | None = None
    min_liq_input: Rect | None = None
    min_buys_input: Rect | None = None
    max_hold_pnl_toggle: Rect | None = None
    max_hold_input: Rect | None = None
    accepted_quotes: list[Rect] | None = None
    wrap_ratio_input: Rect | None = None
    avoid_chinese_toggle: Rect | None = None
    freshness_input: Rect | None = None
    min_pnl_input: Rect | None = None


@dataclass(frozen=True)
class ConfigRow:
    """One visible row of the advanced section.

    ``offset`` is the row's line within the viewport; ``area_field`` names the
    ``ConfigAreas`` attribute its rectangle belongs to.
    """

    index: int
    offset: int
    kind: RowKind
    label: str = ""
    key: str | None = None
    value: str = ""
    suffix: str = ""
    focused: bool = False
    checked: bool = False
    quotes: tuple[tuple[str, bool], ...] = field(default_factory=tuple)
    area_field: str | None = None


def new_store_with_defaults(cached: Mapping[str, str] | None = None) -> ConfigStore:
    """A store from a non-empty cache, or else filled with the default settings."""
    if cached:
        return dict(cached)
    return dict(_DEFAULTS)


def config_value(store: Mapping[str, str], key: str, default: str) -> str:
    """The stored value for ``key``, or ``default``."""
    return store.get(key, default)


def config_flag(store: Mapping[str, str], key: str, default: bool) -> bool:
    """True when the stored value is exactly ``"true"``; ``default`` if missing."""
    value = store.get(key)
    if value is None:
        return default
    return value == "true"


def _csv_contains(csv: str, item: str) -> bool:
    return any(part.strip() == item for part in csv.split(","))


def selected_dexes(store: Mapping[str, str]) -> dict[str, bool]:
    """Which of v2, v3 and fm are selected."""
    csv = config_value(store, "dexes", DEFAULT_DEXES)
    return {dex: _csv_contains(csv, dex) for dex in DEX_KEYS}


def quote_selected(store: Mapping[str, str], quote: str) -> bool:
    """Whether ``quote`` is among the accepted quote tokens."""
    return _csv_contains(config_value(store, "accepted_quotes", DEFAULT_ACCEPTED_QUOTES), quote)


# (label, key, default, suffix, area field)
_INPUT_ROWS: dict[int, tuple[str, str, str, str, str]] = {
    0: ("Slippage: ", "slippage_pct", "0.5", "%", "slippage_input"),
    1: ("Max gas: ", "max_gwei", "1.0", " gwei", "max_gwei_input"),
    2: ("Max positions: ", "max_positions", "3", "", "max_positions_input"),
    3: ("Min liquidity: $", "min_liquidity", "1000", "", "min_liq_input"),
    4: ("Min buys: ", "min_buys", "3", "", "min_buys_input"),
    5: ("Max hold: ", "max_hold_secs", "0", " s", "max_hold_input"),
    8: ("  Target: ", "tp_pct", "10", "%", "tp_pct_input"),
    10: ("  Trigger: ", "sl_pct", "5", "%", "sl_pct_input"),
    14: ("Wrap ratio: ", "wrap_ratio_pct", "80", "%", "wrap_ratio_input"),
    16: ("Freshness: ", "freshness_secs", "30", " s", "freshness_input"),
    17: ("Min PnL: ", "min_pnl_pct", "100", " %", "min_pnl_input"),
}

# (label, key, default, area field)
_CHECKBOX_ROWS: dict[int, tuple[str, str, bool, str]] = {
    6: ("Max Hold PnL", "max_hold_pnl", True, "max_hold_pnl_toggle"),
    7: ("Take profit", "tp_enabled", False, "tp_toggle"),
    9: ("Stop loss", "sl_enabled", False, "sl_toggle"),
    15: ("Avoid Chinese", "avoid_chinese", False, "avoid_chinese_toggle"),
}

_QUOTES_LABEL_ROW = 11
_QUOTE_GRID_FIRST_ROW = 12


def _build_row(
    index: int,
    offset: int,
    store: Mapping[str, str],
    focused_field: str | None,
    all_quotes: Sequence[str],
) -> ConfigRow:
    if index in _INPUT_ROWS:
        label, key, default, suffix, area = _INPUT_ROWS[index]
        return ConfigRow(
            index=index,
            offset=offset,
            kind=RowKind.INPUT,
            label=label,
            key=key,
            value=config_value(store, key, default),
            suffix=suffix,
            focused=focused_field == key,
            area_field=area,
        )
    if index in _CHECKBOX_ROWS:
        label, key, default, area = _CHECKBOX_ROWS[index]
        return ConfigRow(
            index=index,
            offset=offset,
            kind=RowKind.CHECKBOX,
            label=label,
            key=key,
            checked=config_flag(store, key, default),
            area_field=area,
        )
    if index == _QUOTES_LABEL_ROW:
        return ConfigRow(
            index=index,
            offset=offset,
            kind=RowKind.LABEL,
            label="Accepted Quotes (click to toggle)",
        )
    base = (index - _QUOTE_GRID_FIRST_ROW) * QUOTE_GRID_COLUMNS
    cells = tuple(
        (quote, quote_selected(store, quote))
        for quote in all_quotes[base : base + QUOTE_GRID_COLUMNS]
    )
    return ConfigRow(
        index=index,
        offset=offset,
        kind=RowKind.QUOTES,
        key="accepted_quotes",
        quotes=cells,
        area_field="accepted_quotes",
    )


def advanced_rows(
    store: Mapping[str, str],
    focused_field: str | None,
    scroll_offset: int,
    viewport: int,
    all_quotes: Sequence[str] = DEFAULT_QUOTE_LIST,
) -> list[ConfigRow]:
    """The rows of the advanced section visible in a viewport of ``viewport`` lines."""
    viewport = max(viewport, 1)
    start = min(max(scroll_offset, 0), ADVANCED_TOTAL_ROWS - 1)
    end = min(start + viewport, ADVANCED_TOTAL_ROWS)
    return [
        _build_row(index, index - start, store, focused_field, all_quotes)
        for index in range(start, end)
    ]