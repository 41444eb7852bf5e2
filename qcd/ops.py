"""
Visit bookkeeping on top of the directory store.

These helpers are the boundary where store failures stop: they log and
report False instead of raising, so the caller can still print its answer.

Copyright (c) 2026 Andrew Hundt
Licensed under the Apache License, Version 2.0
"""

import logging
import os

from .errors import StoreError
from .types import VisitStore

logger = logging.getLogger(__name__)


def normalize_directory(path: str) -> str:
    """Strip trailing slashes so ``/srv/www/`` and ``/srv/www`` share one record.

    The root directory stays ``/``.
    """
    stripped = path.rstrip("/")
    if not stripped and path.startswith("/"):
        return "/"
    return stripped


def is_enterable(path: str) -> bool:
    """Return True if path is a directory this process may ``cd`` into."""
    return os.path.isdir(path) and os.access(path, os.X_OK)


def register_visit(store: VisitStore, path: str) -> bool:
    """Count a visit to path, if it is a directory that can be entered.

    Stale or inaccessible paths are skipped so they never reach the store.

    Returns:
        True if the visit was recorded.
    """
    if not is_enterable(path):
        logger.debug("Not recording %s: not an enterable directory", path)
        return False
    directory = normalize_directory(path)
    try:
        store.add_visit(directory)
    except StoreError as exc:
        logger.error("Can't add directory to database: %s", exc)
        return False
    return True


def forget_directory(store: VisitStore, path: str) -> bool:
    """Remove path from the store, exactly as given.

    Returns:
        True unless the store reported a failure.
    """
    try:
        store.remove_directory(path)
    except StoreError as exc:
        logger.error("Can't remove directory from database: %s", exc)
        return False
    return True
