"""
Turn a search term into a directory to change to.

Copyright (c) 2026 Andrew Hundt
Licensed under the Apache License, Version 2.0
"""

import logging
import os
from typing import Callable, List, Optional

from . import ops
from .errors import StoreError, TerminalInitError
from .models import Resolution, ResolutionKind
from .selector import InteractiveSelector
from .terminal import CursesTerminal
from .types import Terminal, VisitStore

logger = logging.getLogger(__name__)

_NO_MATCH = Resolution(ResolutionKind.NO_MATCH)


def is_complete(term: str) -> bool:
    """Return True if term is already a usable ``cd`` argument.

    Absolute paths, ``.``, ``..`` and existing relative directories are
    passed through instead of being looked up.
    """
    if os.path.isabs(term) or term in (".", ".."):
        return True
    return os.path.isdir(term)


class CandidateResolver:
    """Decides between literal path, single match, interactive pick, or no match."""

    def __init__(self, store: VisitStore, terminal_factory: Callable[[], Terminal] = CursesTerminal):
        """Initialize resolver.

        Args:
            store: Open directory store to match against and record visits in.
            terminal_factory: Builds the terminal the picker runs on; only
                              called when more than one directory matches.
        """
        self.store = store
        self.terminal_factory = terminal_factory

    def resolve(self, term: str) -> Resolution:
        """Resolve a term typed after ``qcd``."""
        if is_complete(term):
            # Only absolute paths are recorded; relative hops would fill the
            # store with every directory the user ever passed through.
            if os.path.isabs(term):
                ops.register_visit(self.store, term)
            return Resolution(ResolutionKind.COMPLETE, term)
        return self.browse(term)

    def browse(self, term: str = "") -> Resolution:
        """Match term against the store and settle on one directory.

        One match is taken directly; several are offered in the picker.
        An empty term offers every stored directory.
        """
        matches = self._matches(term)
        if not matches:
            return _NO_MATCH
        if len(matches) == 1:
            ops.register_visit(self.store, matches[0])
            return Resolution(ResolutionKind.MATCHED, matches[0])

        selected = self._pick(matches)
        if selected is None:
            return _NO_MATCH
        ops.register_visit(self.store, selected)
        return Resolution(ResolutionKind.SELECTED, selected)

    def _matches(self, term: str) -> List[str]:
        try:
            return self.store.match_directories(term)
        except StoreError as exc:
            logger.error("Can't query database: %s", exc)
            return []

    def _pick(self, matches: List[str]) -> Optional[str]:
        terminal = self.terminal_factory()
        try:
            terminal.open()
        except TerminalInitError as exc:
            logger.error("%s", exc)
            return None
        try:
            outcome = InteractiveSelector(matches, terminal, self.store).run()
        finally:
            terminal.close()
        return outcome.selected
