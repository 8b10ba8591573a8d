"""Text helpers for header extraction and line rendering."""

from __future__ import annotations

import re
from typing import Iterable, Iterator

_WHITESPACE_RE = re.compile(r"\s+")
_COLUMN_GAP_RE = re.compile(r"\s{2,}")


def collapse_whitespace(value: str) -> str:
    """Fold every run of whitespace, newlines included, into one space."""
    return _WHITESPACE_RE.sub(" ", value).strip()


def split_columns(line: str) -> tuple[str, str]:
    """Split a two-column page header line into its left and right parts.

    Columns are separated by a gap of at least two spaces. A line with a
    single column is treated as left-aligned when it starts at column zero,
    right-aligned otherwise.
    """
    stripped = line.strip()
    if not stripped:
        return "", ""
    parts = _COLUMN_GAP_RE.split(stripped, maxsplit=1)
    if len(parts) == 2:
        return parts[0], parts[1]
    if line[:1].isspace():
        return "", stripped
    return stripped, ""


def iter_blocks(lines: Iterable[str]) -> Iterator[list[str]]:
    """Yield runs of consecutive non-blank lines."""
    block: list[str] = []
    for line in lines:
        if line.strip():
            block.append(line.rstrip())
        elif block:
            yield block
            block = []
    if block:
        yield block


def escape_field(value: str, delimiter: str) -> str:
    """Render ``value`` as a single-line field that cannot contain ``delimiter``.

    Whitespace runs are folded to one space, then backslashes and delimiter
    occurrences are escaped with a backslash.
    """
    field = collapse_whitespace(value)
    field = field.replace("\\", "\\\\")
    if delimiter and delimiter != "\\":
        field = field.replace(delimiter, "\\" + delimiter)
    return field
