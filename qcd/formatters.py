"""
Output formatters for non-interactive listings of the directory store.

Copyright (c) 2026 Andrew Hundt
Licensed under the Apache License, Version 2.0
"""

import csv
import io
import json
from abc import ABC, abstractmethod
from typing import List

from rich.console import Console
from rich.table import Table

from .models import DirectoryRecord


class ResultFormatter(ABC):
    """Base formatter protocol."""

    @abstractmethod
    def format_many(self, items: List[DirectoryRecord]) -> str:
        """Format a listing of records."""
        pass


class TableFormatter(ResultFormatter):
    """Format records as a table using Rich."""

    def __init__(self, title: str = "Directories"):
        """Initialize with title."""
        self.title = title

    def format_many(self, items: List[DirectoryRecord]) -> str:
        """Format multiple records as table, most visited first."""
        table = Table(title=f"{self.title} ({len(items)} stored)")
        table.add_column("Visits", justify="right", style="magenta")
        table.add_column("Directory", style="cyan")
        for item in items:
            table.add_row(str(item.visit_count), item.path)

        console = Console()
        with console.capture() as capture:
            console.print(table)
        return capture.get()


class JsonFormatter(ResultFormatter):
    """Format records as JSON."""

    def format_many(self, items: List[DirectoryRecord]) -> str:
        """Format multiple records as JSON array."""
        return json.dumps([item.to_dict() for item in items], indent=2)


_CSV_HEADER = ["path", "visit_count"]


class CsvFormatter(ResultFormatter):
    """Format records as RFC 4180-compliant CSV (fields properly quoted)."""

    def format_many(self, items: List[DirectoryRecord]) -> str:
        """Format multiple records as CSV with header."""
        buf = io.StringIO()
        writer = csv.writer(buf)
        writer.writerow(_CSV_HEADER)
        for item in items:
            writer.writerow([item.path, item.visit_count])
        return buf.getvalue()


class PlainFormatter(ResultFormatter):
    """Simple plain text formatter: count, tab, path."""

    def format_many(self, items: List[DirectoryRecord]) -> str:
        """One ``count<TAB>path`` line per record."""
        return "\n".join(f"{item.visit_count}\t{item.path}" for item in items)


def get_formatter(format_type: str, title: str = "Directories") -> ResultFormatter:
    """Factory function to get formatter by type."""
    formatters = {
        "table": TableFormatter,
        "json": JsonFormatter,
        "csv": CsvFormatter,
        "plain": PlainFormatter,
    }

    formatter_class = formatters.get(format_type.lower())
    if not formatter_class:
        raise ValueError(f"Unknown format: {format_type}")

    if formatter_class is TableFormatter:
        return formatter_class(title)
    return formatter_class()
