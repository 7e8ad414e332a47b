"""ANSI-coloured console output helpers and timestamped log lines."""

from __future__ import annotations

import sys
from datetime import datetime, timezone
from typing import TextIO

RED = "\x1b[31m"
GREEN = "\x1b[32m"
YELLOW = "\x1b[33m"
BLUE = "\x1b[34m"
MAGENTA = "\x1b[35m"
CYAN = "\x1b[36m"
WHITE = "\x1b[37m"
BOLD = "\x1b[1m"
RESET = "\x1b[0m"
BLINK = "\x1b[5m"
BLACK = "\x1b[30m"
ORANGE = "\x1b[38;5;208m"
PURPLE = "\x1b[38;5;93m"
DARK_GRAY = "\x1b[38;5;238m"
LIGHT_GRAY = "\x1b[38;5;245m"
PINK = "\x1b[38;5;213m"
BROWN = "\x1b[38;5;130m"
LIGHT_GREEN = "\x1b[92m"
LIGHT_BLUE = "\x1b[94m"
LIGHT_CYAN = "\x1b[96m"
LIGHT_RED = "\x1b[91m"
LIGHT_MAGENTA = "\x1b[95m"
LIGHT_YELLOW = "\x1b[93m"
LIGHT_WHITE = "\x1b[97m"


def _utc_clock() -> str:
    now = datetime.now(timezone.utc)
    return now.strftime("%H:%M:%S.") + f"{now.microsecond // 1000:03d}"


def log(message: str, color: str = LIGHT_GRAY, stream: TextIO | None = None) -> None:
    """Write a UTC-timestamped, coloured line to ``stream`` (stderr by default)."""
    out = stream if stream is not None else sys.stderr
    out.write(f"{LIGHT_GRAY}{_utc_clock()} | {RESET}{color}{message}{RESET}\n")


def warn(message: str, stream: TextIO | None = None) -> None:
    """Write an orange warning line to ``stream`` (stderr by default)."""
    out = stream if stream is not None else sys.stderr
    out.write(f"{ORANGE}{message}{RESET}\n")


class Colors:
    """Coloured printing to an output stream (stdout by default)."""

    def __init__(self, stream: TextIO | None = None) -> None:
        self._stream = stream if stream is not None else sys.stdout

    def cprint(self, text: str, color: str) -> None:
        self._stream.write(f"{color}{text}{RESET}\n")

    def cinput(self, text: str, color: str) -> str:
        """Print a coloured prompt and return the next stdin line, trimmed."""
        self.cprint(text, color)
        self._stream.flush()
        return sys.stdin.readline().strip()

    def err_print(self, text: str) -> None:
        self.cprint(text, RED)