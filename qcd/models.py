"""
Data models for the directory store, the picker, and term resolution.

Copyright (c) 2026 Andrew Hundt
Licensed under the Apache License, Version 2.0
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Union

#: Smallest terminal height the picker lays out for: one candidate row,
#: one spare row for scrolling, one help row.
MIN_ROWS = 3


class Key(str, Enum):
    """Logical key events decoded from raw terminal input."""

    UP = "up"
    DOWN = "down"
    PAGE_UP = "page_up"
    PAGE_DOWN = "page_down"
    DELETE = "delete"
    ENTER = "enter"
    RESIZE = "resize"
    INTERRUPT = "interrupt"
    UNKNOWN = "unknown"


#: A decoded key: a logical Key, or a single printable character.
KeyEvent = Union[Key, str]


@dataclass(frozen=True)
class DirectoryRecord:
    """One stored directory and the number of times it was visited."""

    path: str
    visit_count: int = 0

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization."""
        return {"path": self.path, "visit_count": self.visit_count}


@dataclass
class SelectionState:
    """Cursor and viewport of the picker over a candidate list.

    Invariant (for a non-empty list and ``rows >= MIN_ROWS``)::

        0 <= viewport_top <= cursor <= count - 1
        cursor < viewport_top + rows - 1

    Every movement method takes the current terminal row count and returns
    True when the state changed (the caller redraws).
    """

    viewport_top: int = 0
    cursor: int = 0

    @staticmethod
    def page_size(rows: int) -> int:
        """Rows scrolled by one page: the screen minus the help row and one spare."""
        return max(rows, MIN_ROWS) - 2

    def move_up(self, rows: int) -> bool:
        if self.cursor <= 0:
            return False
        self.cursor -= 1
        if self.cursor < self.viewport_top:
            self.viewport_top = self.cursor
        return True

    def move_down(self, count: int, rows: int) -> bool:
        if self.cursor >= count - 1:
            return False
        page = self.page_size(rows)
        self.cursor += 1
        if self.cursor - self.viewport_top >= page:
            self.viewport_top = self.cursor - page
        return True

    def page_up(self, rows: int) -> bool:
        if self.cursor <= 0:
            return False
        page = self.page_size(rows)
        self.cursor = max(self.cursor - page, 0)
        self.viewport_top = min(max(self.viewport_top - page, 0), self.cursor)
        return True

    def page_down(self, count: int, rows: int) -> bool:
        """Jump one page forward.

        Only moves while the cursor is more than a full screen away from the
        end of the list; the tail is reached with single steps.
        """
        if self.cursor >= count - max(rows, MIN_ROWS):
            return False
        page = self.page_size(rows)
        self.cursor = min(self.cursor + page, count - 1)
        self.viewport_top += page
        return True

    def clamp(self, count: int, rows: int) -> None:
        """Restore the invariant after the list or the terminal changed size."""
        if count <= 0:
            self.cursor = self.viewport_top = 0
            return
        self.cursor = min(max(self.cursor, 0), count - 1)
        page = self.page_size(rows)
        if self.cursor - self.viewport_top > page:
            self.viewport_top = self.cursor - page
        self.viewport_top = min(max(self.viewport_top, 0), self.cursor)


@dataclass(frozen=True)
class SelectionOutcome:
    """Terminal state of a picking session."""

    selected: Optional[str] = None
    deleted: Optional[str] = None

    @property
    def cancelled(self) -> bool:
        """True when the user left without choosing a directory."""
        return self.selected is None


class ResolutionKind(str, Enum):
    """How a search term was turned into a destination."""

    COMPLETE = "complete"
    MATCHED = "matched"
    SELECTED = "selected"
    NO_MATCH = "no_match"


@dataclass(frozen=True)
class Resolution:
    """Answer for one search term."""

    kind: ResolutionKind
    path: Optional[str] = None

    @property
    def found(self) -> bool:
        return self.kind is not ResolutionKind.NO_MATCH

    def output_for(self, term: str) -> str:
        """Line the shell wrapper hands to ``cd``: the answer, or the term unchanged."""
        if self.path is not None:
            return self.path
        return term
