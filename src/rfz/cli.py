"""Command line interface for rfz."""

from __future__ import annotations

import logging
import os
import sys
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import List, Optional

import typer
from rich.console import Console
from rich.markup import escape

from rfz.config import DEFAULT_REMOTE, AppConfig
from rfz.errors import Diagnostics, NotFound, ParseError, RootDirectoryError, SyncError
from rfz.formatting import format_block, format_line
from rfz.index.collection import DuplicatePolicy, Index
from rfz.index.indexer import build_index
from rfz.ingestion.parsers import parse_path
from rfz.models import DOCUMENT_SUFFIXES, Metadata
from rfz.sync import sync_mirror

EXIT_FATAL = 1
EXIT_NOT_FOUND = 3

LOGGER = logging.getLogger(__name__)

console = Console(stderr=True)
app = typer.Typer(
    help="rfz - index and summarise a local mirror of IETF documents",
    no_args_is_help=True,
)


class DocType(str, Enum):
    DRAFT = "draft"
    RFC = "rfc"
    BCP = "bcp"
    STD = "std"
    FYI = "fyi"
    OTHER = "other"


@dataclass(slots=True)
class _State:
    config: AppConfig
    verbosity: int = 0


def _setup_logging(verbosity: int) -> None:
    if verbosity >= 2:
        level = logging.DEBUG
    elif verbosity == 1:
        level = logging.INFO
    else:
        level = logging.WARNING
    logging.basicConfig(level=level, format="[%(levelname)s] %(message)s")


def _fail(message: str, code: int) -> typer.Exit:
    console.print(f"[red]{escape(message)}[/red]")
    return typer.Exit(code=code)


def _load_index(state: _State, diagnostics: Diagnostics, *, only: str | None = None) -> Index:
    config = state.config
    root = config.resolve_data_dir(Path.cwd())
    try:
        return build_index(
            root,
            jobs=config.jobs,
            max_bytes=config.header_bytes,
            max_depth=config.max_depth,
            policy=config.duplicate_policy,
            only=only,
            diagnostics=diagnostics,
        )
    except RootDirectoryError as exc:
        console.print("Run [bold]rfz sync[/bold] to create the local mirror.")
        raise _fail(str(exc), EXIT_FATAL) from exc


def _validate_delimiter(value: Optional[str]) -> Optional[str]:
    if value is not None and ("\n" in value or "\r" in value):
        raise typer.BadParameter("the delimiter must not contain line breaks")
    return value


def _document_path(argument: str) -> Path | None:
    """Return ``argument`` as a file path when it names an existing document file."""
    path = Path(argument)
    if (os.sep in argument or path.suffix.lower() in DOCUMENT_SUFFIXES) and path.is_file():
        return path
    return None


def _strip_document_suffix(identifier: str) -> str:
    suffix = Path(identifier).suffix
    if suffix.lower() in DOCUMENT_SUFFIXES and len(identifier) > len(suffix):
        return identifier[: -len(suffix)]
    return identifier


def _silence_stdout() -> None:
    # The reader went away; point stdout at devnull so the interpreter's
    # final flush does not raise a second BrokenPipeError.
    devnull = os.open(os.devnull, os.O_WRONLY)
    os.dup2(devnull, sys.stdout.fileno())


@app.callback()
def main(
    ctx: typer.Context,
    directory: Optional[Path] = typer.Option(
        None,
        "--dir",
        "-d",
        envvar="RFZ_DIR",
        help="Directory containing the IETF document mirror",
    ),
    jobs: int = typer.Option(0, "--jobs", "-j", help="Concurrent parse jobs (0: one per CPU)"),
    duplicates: DuplicatePolicy = typer.Option(
        DuplicatePolicy.FIRST_WINS,
        "--duplicates",
        case_sensitive=False,
        help="Which file wins when two map to the same identifier",
    ),
    verbose: int = typer.Option(0, "--verbose", "-v", count=True, help="Increase output verbosity"),
) -> None:
    """Index and summarise a local mirror of IETF documents."""
    _setup_logging(verbose)
    config = AppConfig(data_dir=directory, jobs=jobs, duplicate_policy=duplicates)
    ctx.obj = _State(config=config, verbosity=verbose)


@app.command()
def index(
    ctx: typer.Context,
    types: Optional[List[DocType]] = typer.Option(
        None, "--type", "-t", case_sensitive=False, help="Limit output by document type"
    ),
    versions: int = typer.Option(
        1, "--versions", help="Versions to list per draft series (0: all)"
    ),
    delimiter: Optional[str] = typer.Option(
        None, "--delimiter", callback=_validate_delimiter, help="Column delimiter (default: tab)"
    ),
) -> None:
    """List every document with its metadata, one line each."""
    state: _State = ctx.obj
    diagnostics = Diagnostics()
    collection = _load_index(state, diagnostics)
    collection = collection.filter_kinds([t.value for t in types or []]).newest(versions)
    separator = delimiter or state.config.delimiter

    if not collection:
        console.print("[yellow]No documents found.[/yellow]")
        return

    try:
        for record in collection:
            typer.echo(format_line(record, delimiter=separator))
        sys.stdout.flush()
    except BrokenPipeError:
        _silence_stdout()
        return
    if diagnostics.has_problems:
        LOGGER.warning(diagnostics.summary())
    else:
        LOGGER.info(diagnostics.summary())


@app.command()
def summary(
    ctx: typer.Context,
    identifier: str = typer.Argument(..., help="Document identifier (e.g. rfc2119) or path"),
) -> None:
    """Print every known metadata field of one document."""
    state: _State = ctx.obj
    record: Metadata
    path = _document_path(identifier)
    if path is not None:
        try:
            record = parse_path(path, max_bytes=state.config.header_bytes)
        except ParseError as exc:
            raise _fail(str(exc), EXIT_FATAL) from exc
    else:
        key = _strip_document_suffix(identifier)
        collection = _load_index(state, Diagnostics(), only=key)
        try:
            record = collection.lookup(key)
        except NotFound as exc:
            raise _fail(str(exc), EXIT_NOT_FOUND) from exc
    typer.echo(format_block(record))


@app.command()
def sync(
    ctx: typer.Context,
    remote: Optional[str] = typer.Option(
        None, "--remote", "-r", help=f"Remote rsync target to sync from (default: {DEFAULT_REMOTE})"
    ),
    command: Optional[str] = typer.Option(None, "--command", help="Rsync command (default: rsync)"),
) -> None:
    """Synchronise the local document mirror."""
    state: _State = ctx.obj
    remote = remote or state.config.rsync_remote
    command = command or state.config.rsync_command
    target = state.config.resolve_data_dir(Path.cwd())
    console.print(f"Synchronising [bold]{escape(str(target))}[/bold] from {escape(remote)}...")
    try:
        sync_mirror(target, command=command, remote=remote, verbosity=state.verbosity)
    except SyncError as exc:
        raise _fail(str(exc), EXIT_FATAL) from exc
