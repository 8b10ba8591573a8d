"""Exceptions and diagnostic records raised while indexing a mirror."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path

LOGGER = logging.getLogger(__name__)


class RfzError(Exception):
    """Base class for rfz errors."""


class RootDirectoryError(RfzError):
    """The mirror root is missing or cannot be listed."""

    def __init__(self, root: Path, reason: str) -> None:
        super().__init__(f"Cannot read document directory {root}: {reason}")
        self.root = root
        self.reason = reason


class ScanError(RfzError):
    """A single directory entry could not be inspected."""

    def __init__(self, path: Path, reason: str) -> None:
        super().__init__(f"Skipping {path}: {reason}")
        self.path = path
        self.reason = reason


class ParseError(RfzError):
    """A document could not be read."""

    def __init__(self, path: Path, reason: str) -> None:
        super().__init__(f"Failed to read {path}: {reason}")
        self.path = path
        self.reason = reason


class NotFound(RfzError):
    """No document with the requested identifier is indexed."""

    def __init__(self, identifier: str) -> None:
        super().__init__(f"No document found with identifier '{identifier}'")
        self.identifier = identifier


class SyncError(RfzError):
    """The external mirror synchronisation failed."""


@dataclass(slots=True, frozen=True)
class DuplicateIdentifier:
    """Two files mapped to the same identifier; one of them was dropped."""

    identifier: str
    kept: Path
    dropped: Path

    def __str__(self) -> str:
        return f"Duplicate identifier '{self.identifier}': keeping {self.kept}, dropping {self.dropped}"


@dataclass(slots=True)
class Diagnostics:
    """Per-invocation collector for recoverable failures."""

    parsed: int = 0
    scan_errors: list[ScanError] = field(default_factory=list)
    parse_errors: list[ParseError] = field(default_factory=list)
    duplicates: list[DuplicateIdentifier] = field(default_factory=list)

    def record(self, problem: ScanError | ParseError | DuplicateIdentifier) -> None:
        LOGGER.warning("%s", problem)
        if isinstance(problem, ScanError):
            self.scan_errors.append(problem)
        elif isinstance(problem, ParseError):
            self.parse_errors.append(problem)
        else:
            self.duplicates.append(problem)

    @property
    def has_problems(self) -> bool:
        return bool(self.scan_errors or self.parse_errors or self.duplicates)

    def summary(self) -> str:
        return (
            f"Indexed: {self.parsed}, scan errors: {len(self.scan_errors)}, "
            f"unreadable: {len(self.parse_errors)}, duplicates: {len(self.duplicates)}"
        )
