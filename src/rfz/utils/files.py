"""Utility helpers for working with files."""

from __future__ import annotations

from pathlib import Path


def is_hidden(name: str) -> bool:
    return name.startswith(".")


def read_prefix(path: Path, max_bytes: int) -> str:
    """Read at most ``max_bytes`` from the start of ``path`` as text.

    Undecodable bytes are replaced rather than raising, so only I/O failures
    propagate.
    """
    with path.open("rb") as handle:
        data = handle.read(max_bytes)
    return data.decode("utf-8", errors="replace")
