"""
Thin CLI layer - orchestrates library components without business logic.

The shell wrapper runs ``cd "$(qcd-helper "$@")"``, so this command must
always print exactly one line to stdout: the directory to change to, or
``.`` when the directory should not change. Everything else (usage, errors,
listings) goes to stderr.

Copyright (c) 2026 Andrew Hundt
Licensed under the Apache License, Version 2.0
"""

import json
import logging
import os
from pathlib import Path
from typing import List, Optional, Union

import click
import typer
from rich.console import Console
from rich.logging import RichHandler

from . import __version__
from .errors import StoreError, StoreOpenError
from .formatters import get_formatter
from .ops import forget_directory, register_visit
from .resolver import CandidateResolver
from .store import DirectoryStore, purge_store
from .terminal import CursesTerminal

NAME = "qcd"
DB_FILENAME = ".qcd.db"
DEFAULT_LOG_LEVEL = "ERROR"

#: Printed when the working directory should stay as it is.
NO_CHANGE = "."

app = typer.Typer(
    help=(
        "Jump to a previously visited directory by typing part of its name.\n\n"
        "Install the shell function:\n\n"
        '  qcd() { cd "$(qcd-helper "$@")"; }\n\n'
        "Override default paths with environment variables:\n\n"
        "  QCD_DB         Path to the directory database (default: ~/.qcd.db)\n\n"
        "  QCD_CONFIG     Path to the config file (default: OS config dir / qcd / config.json)\n\n"
        "  QCD_LOG_LEVEL  Logging threshold (default: ERROR)"
    ),
    add_completion=False,
    rich_markup_mode=None,  # rich help rendering prints straight to stdout
)

err_console = Console(stderr=True)

logger = logging.getLogger(__name__)


# ── Configuration ────────────────────────────────────────────────────────────

def get_config_file_path(config_path: Optional[str] = None) -> Path:
    """Return the config file path: --config / QCD_CONFIG, else the OS app dir."""
    if config_path:
        return Path(config_path).expanduser()
    return Path(typer.get_app_dir(NAME)) / "config.json"


def load_config(config_path: Optional[str] = None) -> dict:
    """Load app config from JSON file. Returns empty dict if not found or unreadable.

    Config file location priority:
      1. ``--config`` CLI flag
      2. ``QCD_CONFIG`` environment variable
      3. OS-appropriate default via ``typer.get_app_dir("qcd")``:
           - macOS: ``~/Library/Application Support/qcd/config.json``
           - Linux: ``~/.config/qcd/config.json``

    Supported keys (all optional):

    - ``db_path`` (string): location of the directory database; ``~`` is expanded.
    - ``log_level`` (string): logging threshold, e.g. ``"DEBUG"``.

    Example ``config.json``::

        {
            "db_path": "~/.local/share/qcd/dirs.db",
            "log_level": "WARNING"
        }
    """
    config_file = get_config_file_path(config_path)
    if not config_file.exists():
        return {}
    try:
        with open(config_file, encoding="utf-8") as f:
            data = json.load(f)
    except (json.JSONDecodeError, OSError) as exc:
        err_console.print(f"[yellow]Warning: could not load config {config_file}: {exc}[/yellow]")
        return {}
    if not isinstance(data, dict):
        err_console.print(f"[yellow]Warning: config {config_file} is not a JSON object[/yellow]")
        return {}
    return data


def get_db_path(db: Optional[str], cfg: dict) -> Path:
    """Store location. Priority: --db / QCD_DB > config ``db_path`` > ~/.qcd.db"""
    if db:
        return Path(db).expanduser()
    if cfg.get("db_path"):
        return Path(str(cfg["db_path"])).expanduser()
    return Path.home() / DB_FILENAME


def setup_logging(level_name: Optional[Union[str, int]]) -> int:
    """Send ``qcd.*`` log records to stderr through Rich at the given level.

    Accepts level names (``debug``, ``ERROR``) or numbers. Unknown names fall
    back to ERROR with a warning.
    """
    name = str(level_name or DEFAULT_LOG_LEVEL).strip()
    if name.isdigit():
        level = int(name)
    else:
        level = logging.getLevelName(name.upper())
        if not isinstance(level, int):
            err_console.print(f"[yellow]Warning: unknown log level {name!r}, using {DEFAULT_LOG_LEVEL}[/yellow]")
            level = logging.ERROR

    handler = RichHandler(console=err_console, show_time=False, show_path=False, markup=False)
    handler.setFormatter(logging.Formatter("%(name)s: %(message)s"))
    pkg_logger = logging.getLogger(NAME)
    for old in list(pkg_logger.handlers):
        pkg_logger.removeHandler(old)
    pkg_logger.addHandler(handler)
    pkg_logger.setLevel(level)
    return level


# ── Shared helper functions ──────────────────────────────────────────────────

def _answer(line: str) -> None:
    """Write the one line the shell wrapper passes to ``cd``."""
    typer.echo(line)


def _open_store(db_path: Path) -> Optional[DirectoryStore]:
    try:
        return DirectoryStore(db_path).open()
    except StoreOpenError as exc:
        logger.error("%s", exc)
        return None


def _current_directory(action: str) -> Optional[str]:
    try:
        return os.getcwd()
    except OSError as exc:
        err_console.print(f"[red]Can't {action} current directory:[/red] {exc.strerror or exc}")
        return None


def _show_version() -> None:
    err_console.print(f"{NAME} version {__version__}", highlight=False)
    err_console.print("Copyright (c) 2026 Andrew Hundt", highlight=False)
    err_console.print("Distributed according to the terms of the Apache License, Version 2.0", highlight=False)


def _do_purge(db_path: Path) -> None:
    try:
        removed = purge_store(db_path)
    except OSError as exc:
        logger.error("Can't remove database %s: %s", db_path, exc)
        return
    if not removed:
        logger.info("No database at %s", db_path)


def _do_add_cwd(db_path: Path) -> None:
    cwd = _current_directory("add")
    if cwd is None:
        return
    store = _open_store(db_path)
    if store is None:
        return
    try:
        register_visit(store, cwd)
    finally:
        store.close()


def _do_del_cwd(db_path: Path) -> None:
    cwd = _current_directory("delete")
    if cwd is None:
        return
    store = _open_store(db_path)
    if store is None:
        return
    try:
        forget_directory(store, cwd)
    finally:
        store.close()


def _do_show(db_path: Path, term: str, fmt: str) -> None:
    """List stored directories on stderr; stdout stays reserved for ``cd``."""
    try:
        formatter = get_formatter(fmt)
    except ValueError as exc:
        err_console.print(f"[red]{exc}[/red] (choose table, json, csv, plain)")
        return
    store = _open_store(db_path)
    if store is None:
        return
    try:
        records = store.list_records(term)
    except StoreError as exc:
        logger.error("Can't query database: %s", exc)
        return
    finally:
        store.close()
    if not records:
        err_console.print("[yellow]No directories stored[/yellow]")
        return
    typer.echo(formatter.format_many(records), err=True)


def _do_list(db_path: Path) -> str:
    """Offer every stored directory in the picker."""
    store = _open_store(db_path)
    if store is None:
        return NO_CHANGE
    try:
        resolution = CandidateResolver(store, CursesTerminal).browse("")
    finally:
        store.close()
    return resolution.path if resolution.found else NO_CHANGE


def _do_jump(db_path: Path, term: str) -> str:
    """Resolve one search term; unresolved terms are echoed for ``cd`` to try."""
    store = _open_store(db_path)
    if store is None:
        return term
    try:
        resolution = CandidateResolver(store, CursesTerminal).resolve(term)
    finally:
        store.close()
    return resolution.output_for(term)


# ── Command ──────────────────────────────────────────────────────────────────

@app.command(context_settings={"help_option_names": []})
def main(
    ctx: typer.Context,
    terms: Optional[List[str]] = typer.Argument(
        None, metavar="[DIRECTORY]",
        help="Full path, or part of a previously visited directory name. Omit to go home.",
    ),
    show_help: bool = typer.Option(False, "--help", "-h", help="Show this message (on stderr) and exit."),
    version: bool = typer.Option(False, "--version", "-v", help="Show version (on stderr) and exit."),
    add: bool = typer.Option(False, "--add", "-a", help="Add the current directory to the list."),
    delete: bool = typer.Option(False, "--del", "--delete", "-d", help="Delete the current directory from the list."),
    show_list: bool = typer.Option(False, "--list", "-l", help="Show/edit the complete directory list in the picker."),
    purge: bool = typer.Option(False, "--purge", help="Remove all stored directories."),
    show: bool = typer.Option(
        False, "--show",
        help="Print stored directories and visit counts to stderr. Combine with a DIRECTORY to filter.",
    ),
    fmt: str = typer.Option("table", "--format", "-f", help="Output format for --show: table, json, csv, plain."),
    db: Optional[str] = typer.Option(
        None, "--db",
        help="Path to the directory database. Default: config db_path, otherwise ~/.qcd.db",
        envvar="QCD_DB",
    ),
    config: Optional[str] = typer.Option(
        None, "--config",
        help=(
            "Path to the qcd config JSON file. "
            "Default: OS config dir / qcd / config.json (Linux: ~/.config/qcd/config.json)."
        ),
        envvar="QCD_CONFIG",
    ),
    log_level: Optional[str] = typer.Option(
        None, "--log-level",
        help="Logging threshold for messages on stderr (DEBUG, INFO, WARNING, ERROR). Default: ERROR",
        envvar="QCD_LOG_LEVEL",
    ),
) -> None:
    """Print the directory to change to for a partial DIRECTORY name.

    Examples:
        qcd-helper proj          # best match for "proj", or a picker if several match
        qcd-helper /etc          # literal path, recorded as a visit
        qcd-helper --list        # pick from every stored directory
        qcd-helper --show -f json
    """
    if version:
        _show_version()
        _answer(NO_CHANGE)
        return

    if show_help:
        typer.echo(ctx.get_help(), err=True)
        _answer(NO_CHANGE)
        return

    cfg = load_config(config)
    setup_logging(log_level or cfg.get("log_level"))
    db_path = get_db_path(db, cfg)
    terms = terms or []

    if purge:
        _do_purge(db_path)
        _answer(NO_CHANGE)
        return

    if add:
        _do_add_cwd(db_path)
        _answer(NO_CHANGE)
        return

    if delete:
        _do_del_cwd(db_path)
        _answer(NO_CHANGE)
        return

    if show:
        _do_show(db_path, terms[0] if terms else "", fmt)
        _answer(NO_CHANGE)
        return

    if show_list:
        _answer(_do_list(db_path))
        return

    if not terms:
        _answer(os.environ.get("HOME") or NO_CHANGE)
        return

    if len(terms) > 1:
        err_console.print("cd: too many arguments", highlight=False)
        _answer(NO_CHANGE)
        return

    _answer(_do_jump(db_path, terms[0]))


# ── Entry point ───────────────────────────────────────────────────────────────

def cli_main():
    """CLI entry point.

    Parser errors, interrupts and unexpected failures still produce the ``.``
    answer, so the wrapper's ``cd`` never receives an empty argument.
    """
    try:
        app(standalone_mode=False)
    except click.ClickException as exc:
        exc.show()
        _answer(NO_CHANGE)
    except click.exceptions.Abort:
        _answer(NO_CHANGE)
    except Exception:
        logger.exception("Unexpected failure")
        _answer(NO_CHANGE)
