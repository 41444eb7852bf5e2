"""
Type protocols for the collaborators the picker and resolver depend on.

Protocols allow dependency injection: the picker runs against the real
terminal in production and against a scripted double in tests.

Copyright (c) 2026 Andrew Hundt
Licensed under the Apache License, Version 2.0
"""

from typing import List, Protocol, Tuple, runtime_checkable

from .models import KeyEvent


@runtime_checkable
class Terminal(Protocol):
    """Protocol for a full-screen terminal the picker draws on."""

    def open(self) -> None:
        """Take over the screen. Raises TerminalInitError on failure."""
        ...

    def close(self) -> None:
        """Give the screen back in the state it was found."""
        ...

    def set_raw_mode(self, enabled: bool) -> None:
        """Switch unbuffered, unechoed key input on or off."""
        ...

    def read_key(self) -> KeyEvent:
        """Block until the next key and return it decoded."""
        ...

    def get_size(self) -> Tuple[int, int]:
        """Return (rows, cols)."""
        ...

    def write_at(self, row: int, col: int, text: str, clear_to_eol: bool = True) -> None:
        """Write text at a screen position using the current highlight."""
        ...

    def set_highlight(self, enabled: bool) -> None:
        """Toggle reverse video for subsequent writes."""
        ...

    def set_cursor(self, row: int, col: int) -> None:
        """Park the cursor."""
        ...

    def clear(self) -> None:
        """Blank the whole screen."""
        ...

    def erase_line(self, row: int) -> None:
        """Blank one row."""
        ...


@runtime_checkable
class VisitStore(Protocol):
    """Protocol for the directory store surface used outside the store module."""

    def get_count(self, path: str) -> int:
        """Visit count of a path, 0 when absent."""
        ...

    def add_visit(self, path: str) -> None:
        """Record one visit of a path."""
        ...

    def remove_directory(self, path: str) -> None:
        """Forget a path. Absent paths are not an error."""
        ...

    def match_directories(self, term: str) -> List[str]:
        """Stored paths containing term, most visited first."""
        ...
