"""Row content for modal panels: padding, zebra striping, PnL colouring and scrolling."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from jimmyb.tui.theme import Theme

PNL_MARKER = "| PnL:"
PRICE_MARKER = " | Price:"
PAIRS_PLACEHOLDER = "Hermes is live. Waiting for incoming v2/v3/fm pairs…"
LINES_PLACEHOLDER = "…"


@dataclass(frozen=True)
class Segment:
    """A run of styled text within a row."""

    text: str
    fg: str
    bg: str | None = None
    bold: bool = False


def pad_line(text: str, width: int) -> str:
    """Right-pad ``text`` with spaces to ``width`` characters."""
    return text + " " * max(0, width - len(text))


def scroll_position(vertical_scroll: int, content_len: int, height: int) -> int:
    """Clamp a scroll offset so the last page fills a bordered viewport of ``height``."""
    viewport = max(0, height - 2)
    return min(vertical_scroll, max(0, content_len - viewport))


def split_pnl(text: str) -> tuple[str, str, str] | None:
    """Split around the PnL value: (head ending with the marker, value, tail)."""
    start = text.find(PNL_MARKER)
    if start < 0:
        return None
    after = start + len(PNL_MARKER)
    price = text.find(PRICE_MARKER, after)
    end = price if price >= 0 else len(text)
    return text[:after], text[after:end], text[end:]


def _pnl_color(value: str) -> str:
    theme = Theme.bsc_dark()
    stripped = value.lstrip()
    if stripped.startswith("+"):
        return theme.good
    if stripped.startswith("-"):
        return theme.bad
    return "gray"


def modal_rows(lines: Sequence[str], width: int) -> list[list[Segment]]:
    """Rows of a plain modal: padded to the inner width with alternating backgrounds."""
    inner = max(0, width - 2)
    return [
        [Segment(pad_line(line, inner), "white", "black" if i % 2 == 0 else "dark_gray")]
        for i, line in enumerate(lines)
    ]


def pair_rows(
    pairs: Sequence[tuple[str, str, str]], width: int, vertical_scroll: int
) -> list[list[Segment]]:
    """Rows of the pairs panel: three lines per pair, the scrolled-to row highlighted."""
    raw: list[tuple[str, bool]] = []
    if not pairs:
        raw.append((PAIRS_PLACEHOLDER, True))
    else:
        for idx, (first, second, third) in enumerate(pairs, start=1):
            raw.append((f"{idx:>2}. {first}", True))
            raw.append((f"  {second}", False))
            raw.append((f"  {third}", False))

    max_len = max(len(text) for text, _ in raw)
    inner = max(0, min(max_len + 4, width) - 2)

    rows: list[list[Segment]] = []
    for i, (text, is_first) in enumerate(raw):
        padded = pad_line(text, inner)
        selected = i == vertical_scroll
        fg = "white" if is_first else "gray"
        bg = "dark_gray" if selected else None
        parts = split_pnl(padded)
        if parts is None:
            rows.append([Segment(padded, fg, bg, selected)])
            continue
        head, value, tail = parts
        row = [Segment(head, fg, bg, selected), Segment(value, _pnl_color(value), bg, selected)]
        if tail:
            row.append(Segment(tail, fg, bg, selected))
        rows.append(row)
    return rows


def line_rows(lines: Sequence[str], width: int) -> list[list[Segment]]:
    """Rows of a scrollable line list; placeholders when empty."""
    inner = max(0, width - 2)
    source = list(lines) if lines else [LINES_PLACEHOLDER, LINES_PLACEHOLDER]
    return [
        [Segment(pad_line(text, inner), "white" if i % 2 == 0 else "gray")]
        for i, text in enumerate(source)
    ]