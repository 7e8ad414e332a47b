"""Rectangle geometry for boxes, centred modals, tab strips and list selection."""

from __future__ import annotations

import math
from collections.abc import Sequence
from dataclasses import dataclass


@dataclass(frozen=True)
class Rect:
    """A cell rectangle on the terminal."""

    x: int = 0
    y: int = 0
    width: int = 0
    height: int = 0

    def inner(self, horizontal: int, vertical: int) -> Rect:
        """Shrink by a margin on each side; an empty rect if the margin does not fit."""
        doubled_h = horizontal * 2
        doubled_v = vertical * 2
        if self.width < doubled_h or self.height < doubled_v:
            return Rect()
        return Rect(
            self.x + horizontal,
            self.y + vertical,
            self.width - doubled_h,
            self.height - doubled_v,
        )


@dataclass(frozen=True)
class BoxProps:
    """Placement and decoration of a titled box."""

    offset: tuple[int, int] = (0, 0)
    size: tuple[int, int] = (30, 4)
    border_color: str = "light_blue"
    title: str = "Box"


def box_rect(area: Rect, line_count: int, props: BoxProps | None = None) -> Rect:
    """Outer rectangle of a box holding ``line_count`` lines inside ``area``."""
    props = props if props is not None else BoxProps()
    off_x, off_y = props.offset
    needed_h = max(line_count + 2, 3)
    max_w = max(0, area.width - off_x)
    max_h = max(0, area.height - off_y)
    width = max_w
    height = min(needed_h, max_h)
    if props.size[0] > 0:
        width = min(props.size[0], max_w)
    if props.size[1] > 0:
        height = max(min(props.size[1], max_h), needed_h)
    return Rect(area.x + off_x, area.y + off_y, width, height)


def _round(value: float) -> int:
    return math.floor(value + 0.5)


def _split_percentages(start: int, total: int, percents: Sequence[int]) -> list[tuple[int, int]]:
    """Split a span by percentages; any excess goes to the last part."""
    sizes = [min(total, _round(total * p / 100)) for p in percents]
    spans: list[tuple[int, int]] = []
    pos = start
    remaining = total
    for index, size in enumerate(sizes):
        size = remaining if index == len(sizes) - 1 else min(size, remaining)
        spans.append((pos, size))
        pos += size
        remaining -= size
    return spans


def centered_rect(percent_x: int, percent_y: int, area: Rect) -> Rect:
    """A rectangle taking the given percentages of ``area``, centred in it."""
    for percent in (percent_x, percent_y):
        if not 0 <= percent <= 100:
            raise ValueError(f"percentage out of range: {percent}")
    side_y = (100 - percent_y) // 2
    side_x = (100 - percent_x) // 2
    y, height = _split_percentages(area.y, area.height, (side_y, percent_y, side_y))[1]
    x, width = _split_percentages(area.x, area.width, (side_x, percent_x, side_x))[1]
    return Rect(x, y, width, height)


def tab_rects(area: Rect, labels: Sequence[str]) -> list[Rect]:
    """Hit rectangles of a one-row tab strip; each tab is its label plus four cells."""
    rects: list[Rect] = []
    x = area.x
    remaining = area.width
    for label in labels:
        width = min(len(label) + 4, remaining)
        rects.append(Rect(x, area.y, width, area.height))
        x += width
        remaining -= width
    if rects and remaining > 0:
        last = rects[-1]
        rects[-1] = Rect(last.x, last.y, last.width + remaining, last.height)
    return rects


def list_next(selected: int | None, length: int) -> int:
    """Selection after moving down, wrapping to the top."""
    if selected is None or selected + 1 >= length:
        return 0
    return selected + 1


def list_prev(selected: int | None, length: int) -> int:
    """Selection after moving up, wrapping to the bottom."""
    if selected is None:
        return 0
    if selected == 0:
        return max(0, length - 1)
    return selected - 1