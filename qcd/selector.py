"""
Interactive picker over a ranked list of directories.

The picker is a blocking state machine driven by key events::

    Browsing --Enter--> Done(selected)
    Browsing --q/Q----> Done(cancelled)
    Browsing --Del----> Confirm-Delete --y/Y--> remove, Done(cancelled)
                                       --other-> Done(cancelled)

Arrow and page keys move the cursor and scroll the viewport without leaving
Browsing. Raw mode is held for the whole loop and released on every exit,
including exceptions raised by the terminal.

Copyright (c) 2026 Andrew Hundt
Licensed under the Apache License, Version 2.0
"""

import logging
from typing import Optional, Sequence

from . import ops
from .models import MIN_ROWS, Key, KeyEvent, SelectionOutcome, SelectionState
from .types import Terminal, VisitStore

logger = logging.getLogger(__name__)

HELP_LINE = "Select(Enter)/Quit(Q)/Up/Down/PgUp/PgDn"

_CANCELLED = SelectionOutcome()


class InteractiveSelector:
    """Scrolling list picker bound to a terminal.

    The candidate list is never modified; a confirmed delete goes to the store
    and ends the session.
    """

    def __init__(self, candidates: Sequence[str], terminal: Terminal, store: Optional[VisitStore] = None):
        """Initialize picker.

        Args:
            candidates: Directories to choose from, best match first.
            terminal: Opened terminal to draw on and read keys from.
            store: Receives removals confirmed in the picker. Without a store
                   the delete key only ends the session.
        """
        self.candidates = tuple(candidates)
        self.terminal = terminal
        self.store = store
        self.state = SelectionState()

    @property
    def current(self) -> str:
        return self.candidates[self.state.cursor]

    def run(self) -> SelectionOutcome:
        """Browse until the user selects, quits, or deletes."""
        self.state = SelectionState()
        if not self.candidates:
            return _CANCELLED
        self.refresh_display()
        self.terminal.set_raw_mode(True)
        try:
            while True:
                key = self.terminal.read_key()
                # size after the key, so a resize is laid out at its new height
                rows, _ = self.terminal.get_size()
                outcome = self.handle_key(key, rows)
                if outcome is not None:
                    return outcome
        finally:
            self.terminal.set_raw_mode(False)

    def handle_key(self, key: KeyEvent, rows: int) -> Optional[SelectionOutcome]:
        """Apply one key while browsing.

        Returns:
            The final outcome, or None to keep browsing.
        """
        count = len(self.candidates)
        state = self.state
        state.clamp(count, rows)

        if key is Key.ENTER:
            return SelectionOutcome(selected=self.current)
        if key in ("q", "Q") or key is Key.INTERRUPT:
            return _CANCELLED
        if key is Key.DELETE:
            return self.confirm_delete(rows)

        if key is Key.UP:
            moved = state.move_up(rows)
        elif key is Key.DOWN:
            moved = state.move_down(count, rows)
        elif key is Key.PAGE_UP:
            moved = state.page_up(rows)
        elif key is Key.PAGE_DOWN:
            moved = state.page_down(count, rows)
        else:
            moved = key is Key.RESIZE

        if moved:
            self.refresh_display()
        return None

    def confirm_delete(self, rows: int) -> SelectionOutcome:
        """Ask on the last row whether to forget the highlighted directory.

        The session ends either way.
        """
        target = self.current
        prompt_row = max(rows, MIN_ROWS) - 1
        self.terminal.erase_line(prompt_row)
        self.terminal.write_at(prompt_row, 0, f"Remove {target}? (y/n)", True)
        key = self.terminal.read_key()
        if key not in ("y", "Y"):
            return _CANCELLED
        if self.store is None:
            logger.debug("No store attached; %s not removed", target)
            return _CANCELLED
        if ops.forget_directory(self.store, target):
            return SelectionOutcome(deleted=target)
        return _CANCELLED

    def refresh_display(self) -> None:
        """Redraw the visible slice of candidates and the help line."""
        rows, _ = self.terminal.get_size()
        rows = max(rows, MIN_ROWS)
        top = self.state.viewport_top
        self.terminal.clear()
        for row, index in enumerate(range(top, min(top + rows - 1, len(self.candidates)))):
            if index == self.state.cursor:
                self.terminal.set_highlight(True)
                self.terminal.write_at(row, 0, self.candidates[index], True)
                self.terminal.set_highlight(False)
            else:
                self.terminal.write_at(row, 0, self.candidates[index], True)
        self.terminal.write_at(rows - 1, 0, HELP_LINE, True)
        self.terminal.set_cursor(rows - 1, len(HELP_LINE))
