"""Discovery of candidate documents in a mirrored tree."""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Iterator

from rfz.errors import Diagnostics, RootDirectoryError, ScanError
from rfz.models import DocumentHandle, is_numeric_alias
from rfz.utils.files import is_hidden

LOGGER = logging.getLogger(__name__)


def scan_documents(
    root: Path,
    *,
    max_depth: int = 3,
    diagnostics: Diagnostics | None = None,
) -> Iterator[DocumentHandle]:
    """Yield a handle for every visible file below ``root``.

    The root is listed eagerly so that a missing or unreadable mirror fails
    here with :class:`RootDirectoryError`; everything below it is walked
    lazily in sorted name order. Per-entry failures are reported to
    ``diagnostics`` and skipped.
    """
    root = Path(root)
    try:
        entries = _list_dir(root)
        stat = root.stat()
    except OSError as exc:
        raise RootDirectoryError(root, exc.strerror or str(exc)) from exc

    visited = {(stat.st_dev, stat.st_ino)}
    return _walk(entries, 0, max_depth, visited, diagnostics)


def _list_dir(path: Path) -> list[os.DirEntry]:
    # Bare-number aliases sort after every canonical name in the directory.
    with os.scandir(path) as it:
        return sorted(it, key=lambda entry: (is_numeric_alias(Path(entry.path)), entry.name))


def _walk(
    entries: list[os.DirEntry],
    depth: int,
    max_depth: int,
    visited: set[tuple[int, int]],
    diagnostics: Diagnostics | None,
) -> Iterator[DocumentHandle]:
    for entry in entries:
        if is_hidden(entry.name):
            continue
        path = Path(entry.path)
        children: list[os.DirEntry] | None = None
        try:
            if entry.is_dir():
                if depth >= max_depth:
                    LOGGER.debug("Not descending into %s: depth limit reached", path)
                    continue
                stat = entry.stat()
                key = (stat.st_dev, stat.st_ino)
                if key in visited:
                    LOGGER.debug("Already visited %s", path)
                    continue
                visited.add(key)
                children = _list_dir(path)
            elif entry.is_file():
                yield DocumentHandle.from_path(path)
                continue
            elif entry.is_symlink():
                _report(diagnostics, ScanError(path, "broken symbolic link"))
                continue
            else:
                LOGGER.debug("Ignoring special file %s", path)
                continue
        except OSError as exc:
            _report(diagnostics, ScanError(path, exc.strerror or str(exc)))
            continue

        yield from _walk(children, depth + 1, max_depth, visited, diagnostics)


def _report(diagnostics: Diagnostics | None, error: ScanError) -> None:
    if diagnostics is None:
        LOGGER.warning("%s", error)
    else:
        diagnostics.record(error)
