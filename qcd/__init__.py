"""
qcd - jump to frequently visited directories by typing part of their name.

A small library with a thin CLI layer: a SQLite store of visit counts, a
resolver that turns a partial name into a directory, and a full-screen picker
for when several stored directories match.

Copyright (c) 2026 Andrew Hundt
Licensed under the Apache License, Version 2.0

Shell integration (bash/zsh)::

    qcd() { cd "$(qcd-helper "$@")"; }

Example usage as library:
    from qcd import CandidateResolver, DirectoryStore

    with DirectoryStore(Path.home() / ".qcd.db") as store:
        store.add_visit("/home/alice/proj")
        CandidateResolver(store).resolve("proj").path   # "/home/alice/proj"
"""

try:
    from importlib.metadata import version
    __version__ = version("qcd")
except Exception:
    __version__ = "1.0.0"

__author__ = "Andrew Hundt"

from .errors import QcdError, QueryError, StoreError, StoreOpenError, TerminalInitError
from .formatters import CsvFormatter, JsonFormatter, PlainFormatter, ResultFormatter, TableFormatter
from .models import (
    DirectoryRecord,
    Key,
    Resolution,
    ResolutionKind,
    SelectionOutcome,
    SelectionState,
)
from .resolver import CandidateResolver, is_complete
from .selector import InteractiveSelector
from .store import DirectoryStore, purge_store
from .terminal import CursesTerminal, ScriptedTerminal
from .types import Terminal, VisitStore

__all__ = [
    "CandidateResolver",
    "CsvFormatter",
    "CursesTerminal",
    "DirectoryRecord",
    "DirectoryStore",
    "InteractiveSelector",
    "JsonFormatter",
    "Key",
    "PlainFormatter",
    "QcdError",
    "QueryError",
    "Resolution",
    "ResolutionKind",
    "ResultFormatter",
    "ScriptedTerminal",
    "SelectionOutcome",
    "SelectionState",
    "StoreError",
    "StoreOpenError",
    "TableFormatter",
    "Terminal",
    "TerminalInitError",
    "VisitStore",
    "is_complete",
    "purge_store",
]
