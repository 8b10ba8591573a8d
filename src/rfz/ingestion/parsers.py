"""Header grammars for the document kinds found in an IETF mirror.

Each grammar implements ``parse(handle, text) -> Metadata`` over the bounded
header prefix of a file. Fields are extracted independently: a field that
cannot be found is left absent and never causes the document to be dropped.
"""

from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Iterable

from bs4 import BeautifulSoup

from rfz.errors import ParseError
from rfz.models import DocumentFormat, DocumentHandle, DocumentKind, Metadata
from rfz.utils.dates import find_date, parse_date
from rfz.utils.files import read_prefix
from rfz.utils.text import collapse_whitespace, iter_blocks, split_columns

LOGGER = logging.getLogger(__name__)

DEFAULT_MAX_BYTES = 16 * 1024
HEADER_LINES = 60

_LABEL_RE = re.compile(r"^(?P<label>[A-Za-z][A-Za-z -]{0,30}?)\s*:\s*(?P<value>\S.*)$")
_AUTHOR_RE = re.compile(
    r"^[A-Z][a-z]?(?:-[A-Z][a-z]?)?\."
    r"(?:\s?[A-Z][a-z]?(?:-[A-Z][a-z]?)?\.)*"
    r"\s+[A-Z][^\s,]*(?:\s+[^\s,]+)*?"
    r"(?:,\s*Ed(?:\.|itor))?$"
)
_AUTHOR_SPLIT_RE = re.compile(r";|\s+and\s+")
_AUTHOR_COMMA_RE = re.compile(r",(?!\s*Ed(?:\.|itor))")
# Wrapped reference lists such as "Obsoletes: 2818, 7230,\n           7538"
_CONTINUATION_RE = re.compile(r"^\d+(?:,\s*\d+)*,?$")
_DRAFT_NAME_RE = re.compile(r"^<?draft-[\w.-]+>?$", re.IGNORECASE)
_TITLE_TAG_RE = re.compile(r"^(?:RFC|BCP|STD|FYI)\s*\d+\s*[-:]\s*", re.IGNORECASE)


class HeaderParser:
    """Base grammar; subclasses implement :meth:`parse`."""

    def parse(self, handle: DocumentHandle, text: str) -> Metadata:
        raise NotImplementedError

    @staticmethod
    def record(handle: DocumentHandle, **fields) -> Metadata:
        cleaned = {key: value for key, value in fields.items() if value not in (None, "", ())}
        return Metadata(
            identifier=handle.identifier,
            path=handle.path,
            kind=handle.kind,
            version=handle.version,
            **cleaned,
        )


class GenericHeaderParser(HeaderParser):
    """First non-blank line as title, first recognisable date anywhere."""

    def parse(self, handle: DocumentHandle, text: str) -> Metadata:
        if "\x00" in text:
            LOGGER.debug("Binary content in %s, keeping identifier only", handle.path)
            return Metadata.minimal(handle)
        title = next((collapse_whitespace(line) for line in text.splitlines() if line.strip()), None)
        return self.record(handle, title=title, date=find_date(text))


class TextHeaderParser(HeaderParser):
    """Plain-text page header shared by RFCs and Internet-Drafts.

    Two layouts are recognised. Labeled lines (``Title: ...``) are matched by
    label token wherever they occur in the first ``HEADER_LINES`` lines. The
    classic layout is a two-column block before the first blank line: label
    annotations on the left, authors, affiliations and the date on the
    right, followed by a centred title block.
    """

    TITLE_LABELS: frozenset[str] = frozenset({"title"})
    AUTHOR_LABELS: frozenset[str] = frozenset({"author", "authors", "editor", "editors"})
    DATE_LABELS: frozenset[str] = frozenset({"date", "published"})
    STATUS_LABELS: frozenset[str] = frozenset()

    def parse(self, handle: DocumentHandle, text: str) -> Metadata:
        lines = text.expandtabs().splitlines()[:HEADER_LINES]
        labeled = self._labeled_fields(lines)

        first_block, title_block = _leading_blocks(lines)
        columns = [split_columns(line) for line in first_block]
        classic = any(right for _, right in columns) or any(
            self._status_label(left) for left, _ in columns
        )

        title = labeled["title"]
        if title is None and classic:
            title = _title_from_block(title_block)

        date = labeled["date"]
        authors = list(labeled["authors"])
        if classic:
            for _, right in columns:
                if not right:
                    continue
                parsed = parse_date(right)
                if parsed is not None:
                    date = date or parsed
                elif _AUTHOR_RE.match(right) and right not in authors:
                    authors.append(right)

        status = "; ".join(labeled["status"]) or None
        return self.record(
            handle,
            title=title,
            date=date,
            authors=tuple(authors),
            status=status,
            abstract=_abstract(text.expandtabs().splitlines()),
        )

    def _status_label(self, candidate: str) -> str | None:
        match = _LABEL_RE.match(candidate)
        if match and match.group("label").strip().lower() in self.STATUS_LABELS:
            return match.group("label").strip()
        return None

    def _labeled_fields(self, lines: Iterable[str]) -> dict:
        fields: dict = {"title": None, "date": None, "authors": [], "status": []}
        continues_status = False
        for line in lines:
            left, right = split_columns(line)
            candidate = left or right
            if continues_status and line[:1].isspace() and _CONTINUATION_RE.match(left):
                fields["status"][-1] += f" {left}"
                continue
            continues_status = False
            match = _LABEL_RE.match(candidate)
            if not match:
                continue
            label = match.group("label").strip()
            key = label.lower()
            value = collapse_whitespace(match.group("value"))
            if key in self.TITLE_LABELS and fields["title"] is None:
                fields["title"] = value
            elif key in self.AUTHOR_LABELS:
                for name in _split_authors(value):
                    if name not in fields["authors"]:
                        fields["authors"].append(name)
            elif key in self.DATE_LABELS and fields["date"] is None:
                fields["date"] = parse_date(value) or find_date(value)
            elif key in self.STATUS_LABELS:
                fields["status"].append(f"{label}: {value}")
                continues_status = value.endswith(",")
        return fields


class RfcHeaderParser(TextHeaderParser):
    STATUS_LABELS = frozenset(
        {
            "category",
            "status",
            "stream",
            "obsoletes",
            "obsoleted by",
            "updates",
            "updated by",
            "bcp",
            "std",
            "fyi",
        }
    )


class DraftHeaderParser(TextHeaderParser):
    STATUS_LABELS = frozenset(
        {
            "intended status",
            "expires",
            "category",
            "status",
            "obsoletes",
            "updates",
        }
    )


class HtmlMetaParser(HeaderParser):
    """Dublin Core ``<meta name="DC.*">`` tags of the tools HTML renderings."""

    PREFIX = "DC."

    def parse(self, handle: DocumentHandle, text: str) -> Metadata:
        soup = BeautifulSoup(text, "html.parser")
        meta: dict[str, list[str]] = {}
        for node in soup.select("meta[name]"):
            name = node.get("name", "")
            content = node.get("content")
            if not name.startswith(self.PREFIX) or content is None:
                continue
            value = collapse_whitespace(content)
            if value:
                meta.setdefault(name[len(self.PREFIX):], []).append(value)

        title = _first(meta.get("Title"))
        if title is None and soup.title is not None and soup.title.string:
            title = _TITLE_TAG_RE.sub("", collapse_whitespace(soup.title.string)) or None

        issued = _first(meta.get("Date.Issued"))
        date = (parse_date(issued) or find_date(issued)) if issued else None

        replaces = meta.get("Relation.Replaces")
        status = f"Replaces: {', '.join(replaces)}" if replaces else None

        abstract = meta.get("Description.Abstract")
        return self.record(
            handle,
            title=title,
            date=date,
            authors=tuple(dict.fromkeys(meta.get("Creator", []))),
            status=status,
            abstract=" ".join(abstract) if abstract else None,
        )


TEXT_PARSERS: dict[DocumentKind, HeaderParser] = {
    DocumentKind.RFC: RfcHeaderParser(),
    DocumentKind.DRAFT: DraftHeaderParser(),
    DocumentKind.OTHER: GenericHeaderParser(),
}
HTML_PARSER = HtmlMetaParser()


def select_parser(handle: DocumentHandle) -> HeaderParser:
    if handle.format is DocumentFormat.HTML:
        return HTML_PARSER
    return TEXT_PARSERS[handle.kind]


def parse_document(handle: DocumentHandle, *, max_bytes: int = DEFAULT_MAX_BYTES) -> Metadata:
    """Extract metadata from the header prefix of ``handle``.

    Raises :class:`ParseError` only when the file cannot be read. A readable
    file without a recognisable header yields :meth:`Metadata.minimal`.
    """
    try:
        text = read_prefix(handle.path, max_bytes)
    except OSError as exc:
        raise ParseError(handle.path, exc.strerror or str(exc)) from exc

    if not text.strip():
        LOGGER.debug("Empty document %s", handle.path)
        return Metadata.minimal(handle)
    return select_parser(handle).parse(handle, text)


def parse_path(path: Path, *, max_bytes: int = DEFAULT_MAX_BYTES) -> Metadata:
    return parse_document(DocumentHandle.from_path(Path(path)), max_bytes=max_bytes)


def _first(values: list[str] | None) -> str | None:
    return values[0] if values else None


def _leading_blocks(lines: list[str]) -> tuple[list[str], list[str]]:
    blocks = iter_blocks(lines)
    return next(blocks, []), next(blocks, [])


def _split_authors(value: str) -> list[str]:
    """Split an author list without breaking ``Last, First`` names apart.

    Commas separate authors only when every piece is a complete
    ``initials surname`` name on its own.
    """
    names = []
    for chunk in _AUTHOR_SPLIT_RE.split(value):
        chunk = chunk.strip()
        if not chunk:
            continue
        pieces = [piece.strip() for piece in _AUTHOR_COMMA_RE.split(chunk) if piece.strip()]
        if len(pieces) > 1 and all(_AUTHOR_RE.match(piece) for piece in pieces):
            names.extend(pieces)
        else:
            names.append(chunk)
    return names


def _title_from_block(block: list[str]) -> str | None:
    """Join a centred title block, stopping at the draft file name line."""
    if not block or not block[0][:1].isspace():
        return None
    parts = []
    for line in block:
        stripped = line.strip()
        if _DRAFT_NAME_RE.match(stripped):
            break
        parts.append(stripped)
    return collapse_whitespace(" ".join(parts)) or None


def _abstract(lines: list[str]) -> str | None:
    for index, line in enumerate(lines):
        if line.strip().lower() == "abstract" and not line[:1].isspace():
            body = []
            for following in lines[index + 1 :]:
                if following.strip() and not following[:1].isspace():
                    break
                body.append(following)
            return collapse_whitespace(" ".join(body)) or None
    return None
