"""Plain-text renderings of metadata records."""

from __future__ import annotations

from rfz.models import Metadata
from rfz.utils.text import collapse_whitespace, escape_field

AUTHOR_SEPARATOR = "; "


def format_line(record: Metadata, *, delimiter: str = "\t") -> str:
    """Render ``record`` as exactly one line with a fixed column order.

    Absent fields become empty columns so that column positions stay stable
    for downstream selectors such as ``fzf --with-nth``.
    """
    values = (
        str(record.path),
        record.identifier,
        record.title or "",
        str(record.date) if record.date else "",
        AUTHOR_SEPARATOR.join(record.authors),
        record.status or "",
    )
    return delimiter.join(escape_field(value, delimiter) for value in values)


def format_block(record: Metadata) -> str:
    """Render every populated field of ``record`` as a labeled line."""
    lines = [f"Identifier: {record.identifier}", f"Path: {record.path}"]
    if record.title:
        lines.append(f"Title: {collapse_whitespace(record.title)}")
    if record.version is not None:
        lines.append(f"Version: {record.version}")
    if record.date:
        lines.append(f"Date: {record.date}")
    lines.extend(f"Author: {author}" for author in record.authors)
    if record.status:
        lines.append(f"Status: {collapse_whitespace(record.status)}")
    if record.abstract:
        lines.append(f"Abstract: {collapse_whitespace(record.abstract)}")
    return "\n".join(lines)
