"""ANSI escape sequences for coloured terminal output."""

from __future__ import annotations

import sys
from enum import Enum
from typing import TextIO


class Color(Enum):
    RED = "\x1b[31m"
    GREEN = "\x1b[32m"
    YELLOW = "\x1b[33m"
    BLUE = "\x1b[34m"
    MAGENTA = "\x1b[35m"
    CYAN = "\x1b[36m"
    WHITE = "\x1b[37m"
    RESET = "\x1b[0m"


def color_code(color: Color) -> str:
    """The escape sequence that switches the terminal to the given colour."""
    return color.value


def set_terminal_color(color: Color, stream: TextIO | None = None) -> None:
    """Write the colour's escape sequence to the stream (stdout by default)."""
    (stream if stream is not None else sys.stdout).write(color_code(color))


def reset_terminal_color(stream: TextIO | None = None) -> None:
    """Restore the terminal's default colour."""
    set_terminal_color(Color.RESET, stream)