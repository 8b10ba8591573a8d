"""Document indexing pipeline."""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import Iterable

from rfz.errors import Diagnostics, ParseError
from rfz.index.collection import DuplicatePolicy, Index, normalize_identifier
from rfz.ingestion.parsers import DEFAULT_MAX_BYTES, parse_document
from rfz.ingestion.scanner import scan_documents
from rfz.models import DocumentHandle, Metadata

LOGGER = logging.getLogger(__name__)


class Indexer:
    """Coordinates scanning, parsing and index construction."""

    def __init__(
        self,
        *,
        jobs: int = 1,
        max_bytes: int = DEFAULT_MAX_BYTES,
        max_depth: int = 3,
        policy: DuplicatePolicy = DuplicatePolicy.FIRST_WINS,
    ) -> None:
        self.jobs = max(jobs, 1)
        self.max_bytes = max_bytes
        self.max_depth = max_depth
        self.policy = policy

    def index(
        self,
        root: Path,
        *,
        only: str | None = None,
        diagnostics: Diagnostics | None = None,
    ) -> Index:
        """Build an :class:`Index` of every document below ``root``.

        With ``only``, files whose name-derived identifier differs are not
        parsed at all. Raises :class:`~rfz.errors.RootDirectoryError` when
        the root cannot be listed; all other failures go to ``diagnostics``.
        """
        if diagnostics is None:
            diagnostics = Diagnostics()

        handles: Iterable[DocumentHandle] = scan_documents(
            root, max_depth=self.max_depth, diagnostics=diagnostics
        )
        if only is not None:
            wanted = normalize_identifier(only)
            handles = (handle for handle in handles if handle.identifier == wanted)

        records: list[Metadata] = []
        for result in self._parse_all(handles):
            if isinstance(result, ParseError):
                diagnostics.record(result)
            else:
                records.append(result)

        diagnostics.parsed += len(records)
        return Index.build(records, policy=self.policy, diagnostics=diagnostics)

    def _parse_all(self, handles: Iterable[DocumentHandle]) -> list[Metadata | ParseError]:
        if self.jobs == 1:
            return [self._parse_single(handle) for handle in handles]
        # map() yields in submission order, which is scan order.
        with ThreadPoolExecutor(max_workers=self.jobs) as executor:
            return list(executor.map(self._parse_single, handles))

    def _parse_single(self, handle: DocumentHandle) -> Metadata | ParseError:
        LOGGER.debug("Processing: %s", handle.path)
        try:
            return parse_document(handle, max_bytes=self.max_bytes)
        except ParseError as exc:
            return exc


def build_index(
    root: Path,
    *,
    jobs: int = 1,
    max_bytes: int = DEFAULT_MAX_BYTES,
    max_depth: int = 3,
    policy: DuplicatePolicy = DuplicatePolicy.FIRST_WINS,
    only: str | None = None,
    diagnostics: Diagnostics | None = None,
) -> Index:
    indexer = Indexer(jobs=jobs, max_bytes=max_bytes, max_depth=max_depth, policy=policy)
    return indexer.index(root, only=only, diagnostics=diagnostics)
