"""Core rfz data models."""

from __future__ import annotations

import calendar
import re
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

_SERIES_RE = re.compile(r"^(?:rfc|bcp|std|fyi)\d+$")
_NUMERIC_RE = re.compile(r"^\d+$")
_DRAFT_RE = re.compile(r"^(draft-.+?)(?:-(\d{2}))?$")

HTML_SUFFIXES = frozenset({".html", ".htm"})
DOCUMENT_SUFFIXES = HTML_SUFFIXES | {".txt"}
RFC_DIRECTORIES = frozenset({"rfc", "rfcs"})


class DocumentKind(str, Enum):
    """Closed set of header grammars."""

    RFC = "rfc"
    DRAFT = "draft"
    OTHER = "other"


class DocumentFormat(str, Enum):
    TEXT = "text"
    HTML = "html"


def classify(path: Path) -> tuple[DocumentKind, str]:
    """Return the document kind and canonical identifier for a file name."""
    stem = _strip_suffix(path).lower()
    if _SERIES_RE.match(stem):
        return DocumentKind.RFC, stem
    if is_numeric_alias(path):
        return DocumentKind.RFC, f"rfc{stem}"
    if stem.startswith("draft-"):
        return DocumentKind.DRAFT, stem
    return DocumentKind.OTHER, stem


def is_numeric_alias(path: Path) -> bool:
    """True for bare RFC numbers such as ``rfc/2119.txt``."""
    return bool(_NUMERIC_RE.match(_strip_suffix(path))) and path.parent.name.lower() in RFC_DIRECTORIES


def _strip_suffix(path: Path) -> str:
    name = path.name
    suffix = path.suffix
    if suffix and len(name) > len(suffix):
        return name[: -len(suffix)]
    return name


@dataclass(slots=True, frozen=True)
class DocumentHandle:
    """Reference to one file of the mirrored tree."""

    path: Path
    kind: DocumentKind
    format: DocumentFormat
    identifier: str

    @classmethod
    def from_path(cls, path: Path) -> "DocumentHandle":
        kind, identifier = classify(path)
        fmt = DocumentFormat.HTML if path.suffix.lower() in HTML_SUFFIXES else DocumentFormat.TEXT
        return cls(path=path, kind=kind, format=fmt, identifier=identifier)

    @property
    def version(self) -> int | None:
        if self.kind is not DocumentKind.DRAFT:
            return None
        return split_version(self.identifier)[1]


def split_version(identifier: str) -> tuple[str, int | None]:
    """Split ``draft-foo-bar-03`` into ``("draft-foo-bar", 3)``."""
    match = _DRAFT_RE.match(identifier)
    if not match:
        return identifier, None
    name, version = match.groups()
    return name, int(version) if version is not None else None


@dataclass(slots=True, frozen=True)
class DocumentDate:
    """Publication date with optional month and day precision."""

    year: int
    month: int | None = None
    day: int | None = None

    def __str__(self) -> str:
        if self.month is None:
            return str(self.year)
        month = calendar.month_name[self.month]
        if self.day is None:
            return f"{month} {self.year}"
        return f"{self.day} {month} {self.year}"


@dataclass(slots=True, frozen=True)
class Metadata:
    """Normalized metadata record for a single document.

    Only ``identifier`` and ``path`` are guaranteed; every other field is
    extracted independently and may be absent.
    """

    identifier: str
    path: Path
    kind: DocumentKind = DocumentKind.OTHER
    version: int | None = None
    title: str | None = None
    date: DocumentDate | None = None
    authors: tuple[str, ...] = field(default_factory=tuple)
    status: str | None = None
    abstract: str | None = None

    def __post_init__(self) -> None:
        if not self.identifier:
            raise ValueError(f"Metadata for {self.path} has an empty identifier")

    @classmethod
    def minimal(cls, handle: DocumentHandle) -> "Metadata":
        return cls(
            identifier=handle.identifier,
            path=handle.path,
            kind=handle.kind,
            version=handle.version,
        )

    @property
    def name(self) -> str:
        """Series name, without the draft version suffix."""
        if self.kind is DocumentKind.DRAFT:
            return split_version(self.identifier)[0]
        return self.identifier
