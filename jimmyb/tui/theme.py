"""Colour theme used by the terminal panels."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Theme:
    """Named colours for backgrounds, accents, PnL signs and DEX tags."""

    bg: str
    fg: str
    accent: str
    accent_soft: str
    good: str
    bad: str
    v2: str
    v3: str
    fm: str

    @classmethod
    def bsc_dark(cls) -> Theme:
        """The dark theme used throughout the interface."""
        return cls(
            bg="black",
            fg="white",
            accent="light_cyan",
            accent_soft="dark_gray",
            good="green",
            bad="red",
            v2="yellow",
            v3="light_magenta",
            fm="light_green",
        )