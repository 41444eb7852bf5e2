"""
Terminal implementations for the picker.

CursesTerminal drives the user's controlling tty. ScriptedTerminal replays a
fixed key sequence and records what would have been drawn, so the picker can
be exercised without a real terminal.

Copyright (c) 2026 Andrew Hundt
Licensed under the Apache License, Version 2.0
"""

import curses
import os
import sys
from typing import Dict, Iterable, List, Optional, Tuple

from .errors import TerminalInitError
from .models import Key, KeyEvent

_KEYMAP: Dict[int, Key] = {
    curses.KEY_UP: Key.UP,
    curses.KEY_DOWN: Key.DOWN,
    curses.KEY_PPAGE: Key.PAGE_UP,
    curses.KEY_NPAGE: Key.PAGE_DOWN,
    curses.KEY_DC: Key.DELETE,
    curses.KEY_ENTER: Key.ENTER,
    curses.KEY_RESIZE: Key.RESIZE,
    10: Key.ENTER,
    13: Key.ENTER,
    3: Key.INTERRUPT,  # Ctrl-C arrives as a byte in raw mode
}


def decode_key(code: int) -> KeyEvent:
    """Map a curses key code to a logical Key or a one-character string."""
    if code in _KEYMAP:
        return _KEYMAP[code]
    if 0 <= code < 256:
        return chr(code)
    return Key.UNKNOWN


class CursesTerminal:
    """Full-screen terminal on the controlling tty, using curses.

    stdout belongs to the shell wrapper (``cd "$(qcd-helper ...)"``), so the
    screen cannot be drawn there. open() binds descriptors 0 and 1 to
    ``/dev/tty`` while curses owns the screen; close() puts the original
    descriptors back, so the final answer still reaches the wrapper.
    """

    def __init__(self, tty_path: str = "/dev/tty"):
        self.tty_path = tty_path
        self._screen = None
        self._tty_fd: Optional[int] = None
        self._saved_fds: List[Tuple[int, int]] = []
        self._attr = curses.A_NORMAL

    def open(self) -> None:
        sys.stdout.flush()
        try:
            self._tty_fd = os.open(self.tty_path, os.O_RDWR)
            for fd in (0, 1):
                self._saved_fds.append((fd, os.dup(fd)))
                os.dup2(self._tty_fd, fd)
            self._screen = curses.initscr()
            curses.noecho()
            self._screen.keypad(True)
        except (OSError, curses.error) as exc:
            self.close()
            raise TerminalInitError(f"Can't initialise terminal {self.tty_path}: {exc}") from exc

    def close(self) -> None:
        if self._screen is not None:
            try:
                self._screen.keypad(False)
                curses.noraw()
                curses.echo()
            finally:
                curses.endwin()
                self._screen = None
        while self._saved_fds:
            fd, saved = self._saved_fds.pop()
            os.dup2(saved, fd)
            os.close(saved)
        if self._tty_fd is not None:
            os.close(self._tty_fd)
            self._tty_fd = None

    def set_raw_mode(self, enabled: bool) -> None:
        if enabled:
            curses.raw()
        else:
            curses.noraw()

    def read_key(self) -> KeyEvent:
        return decode_key(self._screen.getch())

    def get_size(self) -> Tuple[int, int]:
        rows, cols = self._screen.getmaxyx()
        return rows, cols

    def write_at(self, row: int, col: int, text: str, clear_to_eol: bool = True) -> None:
        rows, cols = self._screen.getmaxyx()
        if row < 0 or row >= rows or col >= cols:
            return
        try:
            self._screen.addnstr(row, col, text, cols - col, self._attr)
            if clear_to_eol:
                self._screen.clrtoeol()
        except curses.error:
            # addnstr reports an error after filling the bottom-right cell
            pass

    def set_highlight(self, enabled: bool) -> None:
        self._attr = curses.A_REVERSE if enabled else curses.A_NORMAL

    def set_cursor(self, row: int, col: int) -> None:
        rows, cols = self._screen.getmaxyx()
        try:
            self._screen.move(min(row, rows - 1), min(col, cols - 1))
        except curses.error:
            pass

    def clear(self) -> None:
        self._screen.erase()

    def erase_line(self, row: int) -> None:
        try:
            self._screen.move(row, 0)
            self._screen.clrtoeol()
        except curses.error:
            pass


class ScriptedTerminal:
    """Terminal double: replays keys, records frames.

    Each clear() starts a new frame; a frame maps row -> (text, highlighted).

    Example::

        term = ScriptedTerminal([Key.DOWN, Key.ENTER], rows=10)
        InteractiveSelector(["/a", "/b"], term).run().selected   # "/b"
        term.highlighted_row()                                  # (1, "/b")
    """

    def __init__(self, keys: Iterable[KeyEvent] = (), rows: int = 25, cols: int = 80, fail_on_open: bool = False):
        self.rows = rows
        self.cols = cols
        self.fail_on_open = fail_on_open
        self.frames: List[Dict[int, Tuple[str, bool]]] = []
        self.raw_mode = False
        self.raw_mode_changes: List[bool] = []
        self.cursor: Optional[Tuple[int, int]] = None
        self.opened = False
        self.closed = False
        self._keys = list(keys)
        self._highlight = False

    def open(self) -> None:
        if self.fail_on_open:
            raise TerminalInitError("scripted terminal refused to open")
        self.opened = True

    def close(self) -> None:
        self.closed = True

    def set_raw_mode(self, enabled: bool) -> None:
        self.raw_mode = enabled
        self.raw_mode_changes.append(enabled)

    def read_key(self) -> KeyEvent:
        if not self._keys:
            raise RuntimeError("key script exhausted")
        return self._keys.pop(0)

    @property
    def keys_left(self) -> int:
        return len(self._keys)

    def get_size(self) -> Tuple[int, int]:
        return self.rows, self.cols

    def write_at(self, row: int, col: int, text: str, clear_to_eol: bool = True) -> None:
        if not self.frames:
            self.frames.append({})
        self.frames[-1][row] = (text, self._highlight)

    def set_highlight(self, enabled: bool) -> None:
        self._highlight = enabled

    def set_cursor(self, row: int, col: int) -> None:
        self.cursor = (row, col)

    def clear(self) -> None:
        self.frames.append({})

    def erase_line(self, row: int) -> None:
        if self.frames:
            self.frames[-1].pop(row, None)

    @property
    def screen(self) -> Dict[int, Tuple[str, bool]]:
        """The most recent frame."""
        return self.frames[-1] if self.frames else {}

    def highlighted_row(self) -> Optional[Tuple[int, str]]:
        """(row, text) of the highlighted line in the most recent frame."""
        for row, (text, highlighted) in sorted(self.screen.items()):
            if highlighted:
                return row, text
        return None
