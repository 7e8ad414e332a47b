"""Toolkit-independent theme, layout, modal row and configuration helpers for a terminal UI."""