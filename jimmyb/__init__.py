"""Paper-trading engine, swap log decoding, console output and terminal helpers for DEX pairs."""

__version__ = "0.1.0"