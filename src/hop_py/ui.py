"""Token-based printer for interactive output on stderr."""

from __future__ import annotations

import os
import re
import shutil
import sys
from typing import ClassVar, TextIO

TOKEN_RE = re.compile(r"\{[a-z_/0-9]+\}")

TOKEN_MAP = {
    "{b}": "\033[1;33m",  # Bold + Yellow (fuzzy match chars)
    "{/b}": "\033[22m\033[39m",
    "{dim}": "\033[90m",  # Gray - scores, parent paths
    "{reset}": "\033[0m\033[39m\033[49m",
    "{/fg}": "\033[39m",
    "{h1}": "\033[1;38;5;208m",  # Bold + Orange
    "{h2}": "\033[1;34m",  # Bold + Blue
    "{section}": "\033[1m\033[48;5;236m",  # Selected row
    "{/section}": "\033[0m",
    "{cursor}": "\033[7m \033[27m",  # Reverse video block
}


class UI:
    """Double-buffered terminal UI with token-based formatting."""

    _buffer: ClassVar[list[str]] = []
    _last_buffer: ClassVar[list[str]] = []
    _current_line: ClassVar[str] = ""
    _height: ClassVar[int | None] = None
    _width: ClassVar[int | None] = None
    _expand_tokens: ClassVar[bool] = True

    @classmethod
    def print(cls, text: str) -> None:
        """Add text to current line buffer."""
        cls._current_line += text

    @classmethod
    def puts(cls, text: str = "") -> None:
        """Add text and newline to buffer."""
        cls._current_line += text
        cls._buffer.append(cls._current_line)
        cls._current_line = ""

    @classmethod
    def flush(cls, io: TextIO | None = None) -> None:
        """Write the buffer, redrawing only lines changed since the last frame."""
        io = io or sys.stderr
        if cls._current_line:
            cls._buffer.append(cls._current_line)
            cls._current_line = ""

        # Non-TTY: plain text without control codes
        if not (hasattr(io, "isatty") and io.isatty()):
            plain = cls.strip_tokens("\n".join(cls._buffer))
            io.write(plain if plain.endswith("\n") else plain + "\n")
            cls._last_buffer = []
            cls._buffer.clear()
            io.flush()
            return

        io.write("\033[H")
        reset = TOKEN_MAP["{reset}"]
        for i in range(max(len(cls._buffer), len(cls._last_buffer))):
            current_line = cls._buffer[i] if i < len(cls._buffer) else ""
            last_line = cls._last_buffer[i] if i < len(cls._last_buffer) else ""
            if current_line == last_line:
                continue
            io.write(f"\033[{i + 1};1H\033[2K")
            if current_line:
                io.write(cls.expand_tokens(current_line))
                if cls._expand_tokens:
                    io.write(reset)

        cls._last_buffer = cls._buffer.copy()
        cls._buffer.clear()
        io.flush()

    @classmethod
    def cls(cls, io: TextIO | None = None) -> None:
        """Clear screen and buffers."""
        io = io or sys.stderr
        cls._current_line = ""
        cls._buffer.clear()
        cls._last_buffer.clear()
        if hasattr(io, "isatty") and io.isatty():
            io.write("\033[2J\033[H")
            io.flush()

    @classmethod
    def hide_cursor(cls) -> None:
        if sys.stderr.isatty():
            sys.stderr.write("\033[?25l")
            sys.stderr.flush()

    @classmethod
    def show_cursor(cls) -> None:
        if sys.stderr.isatty():
            sys.stderr.write("\033[?25h")
            sys.stderr.flush()

    @classmethod
    def height(cls) -> int:
        """Terminal height, overridable with HOP_HEIGHT."""
        if cls._height is None:
            env_h = os.environ.get("HOP_HEIGHT", "")
            if env_h.isdigit() and int(env_h) > 0:
                cls._height = int(env_h)
            else:
                cls._height = shutil.get_terminal_size((80, 24)).lines
        return cls._height

    @classmethod
    def width(cls) -> int:
        """Terminal width, overridable with HOP_WIDTH."""
        if cls._width is None:
            env_w = os.environ.get("HOP_WIDTH", "")
            if env_w.isdigit() and int(env_w) > 0:
                cls._width = int(env_w)
            else:
                cls._width = shutil.get_terminal_size((80, 24)).columns
        return cls._width

    @classmethod
    def refresh_size(cls) -> None:
        cls._height = None
        cls._width = None

    @classmethod
    def disable_colors(cls) -> None:
        cls._expand_tokens = False

    @classmethod
    def strip_tokens(cls, text: str) -> str:
        return TOKEN_RE.sub("", text)

    @classmethod
    def expand_tokens(cls, text: str) -> str:
        """Expand tokens in text to ANSI sequences, or drop them without colors."""
        if not cls._expand_tokens:
            return cls.strip_tokens(text)
        return TOKEN_RE.sub(lambda m: TOKEN_MAP.get(m.group(0), m.group(0)), text)
