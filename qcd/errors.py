"""
Exception hierarchy for store and terminal failures.

Copyright (c) 2026 Andrew Hundt
Licensed under the Apache License, Version 2.0
"""


class QcdError(Exception):
    """Base class for all qcd errors."""


class StoreError(QcdError):
    """Directory store failure."""


class StoreOpenError(StoreError):
    """The backing database file cannot be opened or created."""


class QueryError(StoreError):
    """A statement against the directory store failed."""


class TerminalInitError(QcdError):
    """The interactive terminal could not be initialised."""
