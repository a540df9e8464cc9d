"""Selectors resolving an ambiguous candidate list to one directory."""

from __future__ import annotations

import os
import re
import select
import shutil
import signal
import subprocess
import sys
import termios
import tty
from collections.abc import Sequence
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from .fuzzy import highlight_matches
from .fuzzy import match as fuzzy_match
from .scanner import Candidate
from .ui import UI

FZF_DELIMITER = "\t"


def format_label(candidate: Candidate) -> str:
    """Display label shown to the user for a candidate."""
    return f"{candidate.path} (score: {candidate.score:.1f})"


@dataclass
class FzfSelector:
    """Pick a candidate with an external fzf process.

    Each line is prefixed with its index and a hidden TAB-delimited field,
    so the choice maps back to a candidate without parsing the label.
    """

    command: str = "fzf"
    prompt: str = "hop> "

    def build_input(self, candidates: Sequence[Candidate]) -> str:
        return "".join(
            f"{i}{FZF_DELIMITER}{format_label(c)}\n" for i, c in enumerate(candidates)
        )

    def select(self, candidates: Sequence[Candidate]) -> Path | None:
        args = [
            self.command,
            f"--delimiter={FZF_DELIMITER}",
            "--with-nth=2..",
            "--no-sort",
            "--height=40%",
            "--reverse",
            f"--prompt={self.prompt}",
        ]
        try:
            proc = subprocess.run(
                args,
                input=self.build_input(candidates),
                stdout=subprocess.PIPE,
                text=True,
                check=False,
            )
        except FileNotFoundError:
            UI.puts(f"Error: {self.command} not found")
            UI.flush()
            return None

        if proc.returncode != 0:
            return None

        index, _, _ = proc.stdout.strip().partition(FZF_DELIMITER)
        if not index.isdigit() or int(index) >= len(candidates):
            return None
        return candidates[int(index)].path


@dataclass
class MenuSelector:
    """Built-in interactive picker over ranked candidates."""

    test_keys: list[str] | None = None
    test_no_cls: bool = False

    # Internal state
    cursor_pos: int = field(default=0, init=False)
    scroll_offset: int = field(default=0, init=False)
    input_buffer: str = field(default="", init=False)
    selected: Path | None = field(default=None, init=False)
    needs_redraw: bool = field(default=False, init=False)
    _candidates: list[Candidate] = field(default_factory=list, init=False)
    _old_winch_handler: Any = field(default=None, init=False)

    def select(self, candidates: Sequence[Candidate]) -> Path | None:
        """Run the picker; None when cancelled."""
        self._candidates = list(candidates)
        self.selected = None
        self._setup_terminal()

        try:
            if self.test_keys is not None:
                self._main_loop()
            elif not sys.stdin.isatty() or not sys.stderr.isatty():
                UI.puts("Error: selecting between matches requires an interactive terminal")
                UI.flush()
                return None
            else:
                fd = sys.stdin.fileno()
                old_settings = termios.tcgetattr(fd)
                try:
                    tty.setraw(fd)
                    self._main_loop()
                finally:
                    termios.tcsetattr(fd, termios.TCSADRAIN, old_settings)
        finally:
            self._restore_terminal()

        return self.selected

    def _setup_terminal(self) -> None:
        if not self.test_no_cls:
            UI.cls()
            UI.hide_cursor()

        def handle_winch(signum: int, frame: object) -> None:
            self.needs_redraw = True

        self._old_winch_handler = signal.signal(signal.SIGWINCH, handle_winch)

    def _restore_terminal(self) -> None:
        if not self.test_no_cls:
            UI.cls()
            UI.show_cursor()

        if self._old_winch_handler is not None:
            signal.signal(signal.SIGWINCH, self._old_winch_handler)

    def visible(self) -> list[Candidate]:
        """Candidates whose name matches the typed filter, rank order kept."""
        if not self.input_buffer:
            return self._candidates
        return [c for c in self._candidates if fuzzy_match(c.name, self.input_buffer).matched]

    def _main_loop(self) -> None:
        while True:
            shown = self.visible()
            self.cursor_pos = max(0, min(self.cursor_pos, len(shown) - 1))
            self._render(shown)

            key = self._read_key()
            if key is None:
                continue

            match key:
                case "\r" | "\n":  # Enter
                    if shown:
                        self.selected = shown[self.cursor_pos].path
                        break

                case "\033[A" | "\x10":  # Up / Ctrl-P
                    self.cursor_pos = max(0, self.cursor_pos - 1)

                case "\033[B" | "\x0e":  # Down / Ctrl-N
                    self.cursor_pos = min(len(shown) - 1, self.cursor_pos + 1)

                case "\x7f" | "\b":  # Backspace
                    self.input_buffer = self.input_buffer[:-1]
                    self.cursor_pos = 0

                case "\x15":  # Ctrl-U
                    self.input_buffer = ""
                    self.cursor_pos = 0

                case "\x03" | "\033":  # Ctrl-C / ESC
                    self.selected = None
                    break

                case char if len(char) == 1 and re.match(r"[a-zA-Z0-9\-_. ]", char):
                    self.input_buffer += char
                    self.cursor_pos = 0

    def _read_key(self) -> str | None:
        if self.test_keys is not None:
            # Scripted input runs out as Esc
            return self.test_keys.pop(0) if self.test_keys else "\033"

        while True:
            if self.needs_redraw:
                self.needs_redraw = False
                UI.refresh_size()
                UI.cls()
                return None

            fd = sys.stdin.fileno()
            ready, _, _ = select.select([fd], [], [], 0.1)
            if not ready:
                continue
            data = os.read(fd, 1)
            if not data:
                continue
            ch = data.decode("utf-8", errors="replace")

            # Arrow keys arrive as escape sequences
            if ch == "\033":
                while select.select([fd], [], [], 0.05)[0]:
                    more = os.read(fd, 1)
                    if not more:
                        break
                    ch += more.decode("utf-8", errors="replace")

            return ch

    def _render(self, shown: list[Candidate]) -> None:
        term_width = UI.width()
        separator = "─" * (term_width - 1)

        UI.puts("{h1}hop: pick a directory{reset}")
        UI.puts(f"{{dim}}{separator}{{/fg}}")
        UI.puts(f"{{dim}}Filter:{{/fg}} {{b}}{self.input_buffer}{{/b}}{{cursor}}")
        UI.puts(f"{{dim}}{separator}{{/fg}}")

        max_visible = max(3, UI.height() - 8)
        if self.cursor_pos < self.scroll_offset:
            self.scroll_offset = self.cursor_pos
        elif self.cursor_pos >= self.scroll_offset + max_visible:
            self.scroll_offset = self.cursor_pos - max_visible + 1
        visible_end = min(self.scroll_offset + max_visible, len(shown))

        for idx in range(self.scroll_offset, visible_end):
            candidate = shown[idx]
            is_selected = idx == self.cursor_pos
            UI.print("{b}→ {/b}" if is_selected else "  ")
            if is_selected:
                UI.print("{section}")

            parent = str(candidate.path.parent).rstrip(os.sep) + os.sep
            UI.print(f"{{dim}}{parent}{{/fg}}")
            UI.print(highlight_matches(candidate.name, self.input_buffer))

            if is_selected:
                UI.print("{/section}")

            label_width = len(str(candidate.path)) + 2
            meta = f"{candidate.score:.1f}"
            padding = term_width - label_width - len(meta) - 1
            if padding > 0:
                UI.print(" " * padding + f"{{dim}}{meta}{{/fg}}")
            UI.puts()

        if not shown:
            UI.puts("{dim}  no matches{/fg}")

        if len(shown) > max_visible:
            UI.puts(f"{{dim}}{separator}{{/fg}}")
            UI.puts(f"{{dim}}[{self.scroll_offset + 1}-{visible_end}/{len(shown)}]{{/fg}}")

        UI.puts(f"{{dim}}{separator}{{/fg}}")
        UI.puts("{dim}↑↓: Navigate  Enter: Select  Esc: Cancel{/fg}")
        UI.flush()


def default_selector() -> FzfSelector | MenuSelector:
    """Selector named by HOP_SELECTOR, else fzf when installed."""
    choice = os.environ.get("HOP_SELECTOR", "").strip().lower()
    if choice == "menu":
        return MenuSelector()
    if choice == "fzf" or shutil.which("fzf"):
        return FzfSelector()
    return MenuSelector()
