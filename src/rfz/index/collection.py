"""In-memory index of parsed document metadata."""

from __future__ import annotations

import logging
from collections import defaultdict
from enum import Enum
from typing import Iterable, Iterator

from rfz.errors import Diagnostics, DuplicateIdentifier, NotFound
from rfz.models import DocumentKind, Metadata

LOGGER = logging.getLogger(__name__)

OTHER_TYPE = "other"


class DuplicatePolicy(str, Enum):
    """Which record survives when two files share an identifier."""

    FIRST_WINS = "first"
    LAST_WINS = "last"


def normalize_identifier(identifier: str) -> str:
    return identifier.strip().lower()


class Index:
    """Ordered mapping from document identifier to :class:`Metadata`."""

    def __init__(self, records: dict[str, Metadata] | None = None) -> None:
        self._records: dict[str, Metadata] = dict(records or {})

    @classmethod
    def build(
        cls,
        records: Iterable[Metadata],
        *,
        policy: DuplicatePolicy = DuplicatePolicy.FIRST_WINS,
        diagnostics: Diagnostics | None = None,
    ) -> "Index":
        """Insert ``records`` in order, resolving duplicates by ``policy``.

        Under ``LAST_WINS`` the replacing record takes over the position of
        the first occurrence, so ordering never depends on the policy.
        """
        entries: dict[str, Metadata] = {}
        for record in records:
            existing = entries.get(record.identifier)
            if existing is None:
                entries[record.identifier] = record
                continue

            if policy is DuplicatePolicy.LAST_WINS:
                entries[record.identifier] = record
                duplicate = DuplicateIdentifier(record.identifier, kept=record.path, dropped=existing.path)
            else:
                duplicate = DuplicateIdentifier(record.identifier, kept=existing.path, dropped=record.path)

            if diagnostics is None:
                LOGGER.warning("%s", duplicate)
            else:
                diagnostics.record(duplicate)
        return cls(entries)

    def __len__(self) -> int:
        return len(self._records)

    def __iter__(self) -> Iterator[Metadata]:
        return iter(self._records.values())

    def __contains__(self, identifier: object) -> bool:
        return isinstance(identifier, str) and normalize_identifier(identifier) in self._records

    def enumerate(self) -> list[tuple[str, Metadata]]:
        return list(self._records.items())

    def lookup(self, identifier: str) -> Metadata:
        """Return the record for ``identifier`` or raise :class:`NotFound`."""
        try:
            return self._records[normalize_identifier(identifier)]
        except KeyError:
            raise NotFound(identifier) from None

    def filter_kinds(self, types: Iterable[str] | None) -> "Index":
        """Keep records whose identifier starts with one of ``types``.

        ``other`` selects the documents that matched no known grammar.
        """
        wanted = [normalize_identifier(t) for t in types or ()]
        if not wanted:
            return self

        def keep(record: Metadata) -> bool:
            for prefix in wanted:
                if prefix == OTHER_TYPE:
                    if record.kind is DocumentKind.OTHER:
                        return True
                elif record.kind is not DocumentKind.OTHER and record.identifier.startswith(prefix):
                    return True
            return False

        return Index({key: record for key, record in self._records.items() if keep(record)})

    def newest(self, count: int = 1) -> "Index":
        """Keep the ``count`` most recent versions of every draft series."""
        if count <= 0:
            return self

        series: dict[str, list[Metadata]] = defaultdict(list)
        for record in self._records.values():
            if record.kind is DocumentKind.DRAFT:
                series[record.name].append(record)

        keep: set[str] = set()
        for versions in series.values():
            versions.sort(key=lambda record: record.version if record.version is not None else -1, reverse=True)
            keep.update(record.identifier for record in versions[:count])

        return Index(
            {
                key: record
                for key, record in self._records.items()
                if record.kind is not DocumentKind.DRAFT or key in keep
            }
        )
