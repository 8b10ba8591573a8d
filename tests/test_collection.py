"""Tests for the in-memory document index."""

from __future__ import annotations

from pathlib import Path

import pytest

from rfz.errors import Diagnostics, NotFound
from rfz.index.collection import DuplicatePolicy, Index
from rfz.models import DocumentHandle, Metadata


def _record(name: str, title: str | None = None) -> Metadata:
    handle = DocumentHandle.from_path(Path("/mirror") / name)
    return Metadata(
        identifier=handle.identifier,
        path=handle.path,
        kind=handle.kind,
        version=handle.version,
        title=title,
    )


@pytest.fixture
def sample_index() -> Index:
    return Index.build(
        [
            _record("rfc2119.txt", "Key words"),
            _record("draft-ietf-foo-bar-01.txt"),
            _record("draft-ietf-foo-bar-03.txt"),
            _record("draft-ietf-foo-bar-02.txt"),
            _record("draft-other-00.txt"),
            _record("bcp14.txt"),
            _record("README"),
        ]
    )


class TestBuild:
    """Test Index.build."""

    def test_preserves_insertion_order(self, sample_index: Index) -> None:
        """Should enumerate records in the order they were inserted."""
        assert [key for key, _ in sample_index.enumerate()] == [
            "rfc2119",
            "draft-ietf-foo-bar-01",
            "draft-ietf-foo-bar-03",
            "draft-ietf-foo-bar-02",
            "draft-other-00",
            "bcp14",
            "readme",
        ]

    def test_empty(self) -> None:
        index = Index.build([])

        assert len(index) == 0
        assert index.enumerate() == []

    def test_first_wins_by_default(self) -> None:
        """Should keep the earlier record and report the later one."""
        diagnostics = Diagnostics()
        index = Index.build(
            [_record("rfc1.html", "html"), _record("rfc2.txt"), _record("rfc1.txt", "text")],
            diagnostics=diagnostics,
        )

        assert len(index) == 2
        assert index.lookup("rfc1").title == "html"
        assert len(diagnostics.duplicates) == 1
        duplicate = diagnostics.duplicates[0]
        assert duplicate.kept == Path("/mirror/rfc1.html")
        assert duplicate.dropped == Path("/mirror/rfc1.txt")

    def test_last_wins_keeps_position(self) -> None:
        """Should replace the record without moving it."""
        diagnostics = Diagnostics()
        index = Index.build(
            [_record("rfc1.html", "html"), _record("rfc2.txt"), _record("rfc1.txt", "text")],
            policy=DuplicatePolicy.LAST_WINS,
            diagnostics=diagnostics,
        )

        assert [key for key, _ in index.enumerate()] == ["rfc1", "rfc2"]
        assert index.lookup("rfc1").title == "text"
        assert diagnostics.duplicates[0].dropped == Path("/mirror/rfc1.html")

    def test_duplicate_without_diagnostics(self, caplog: pytest.LogCaptureFixture) -> None:
        """Should still log the dropped duplicate."""
        with caplog.at_level("WARNING"):
            Index.build([_record("rfc1.txt"), _record("rfc1.html")])

        assert "Duplicate identifier 'rfc1'" in caplog.text


class TestLookup:
    """Test lookup and membership."""

    def test_lookup(self, sample_index: Index) -> None:
        assert sample_index.lookup("rfc2119").title == "Key words"

    def test_lookup_is_case_insensitive(self, sample_index: Index) -> None:
        """Should normalize the requested identifier."""
        assert sample_index.lookup(" RFC2119 ").identifier == "rfc2119"
        assert "RFC2119" in sample_index

    def test_lookup_missing(self, sample_index: Index) -> None:
        """Should raise NotFound for an unknown identifier."""
        with pytest.raises(NotFound) as excinfo:
            sample_index.lookup("rfc9999")

        assert excinfo.value.identifier == "rfc9999"
        assert "rfc9999" not in sample_index

    def test_contains_rejects_non_strings(self, sample_index: Index) -> None:
        assert 2119 not in sample_index

    def test_iter_yields_records(self, sample_index: Index) -> None:
        assert all(isinstance(record, Metadata) for record in sample_index)


class TestFilterKinds:
    """Test Index.filter_kinds."""

    def test_no_types_keeps_everything(self, sample_index: Index) -> None:
        assert sample_index.filter_kinds(None) is sample_index
        assert sample_index.filter_kinds([]) is sample_index

    def test_single_type(self, sample_index: Index) -> None:
        filtered = sample_index.filter_kinds(["draft"])

        assert [key for key, _ in filtered.enumerate()] == [
            "draft-ietf-foo-bar-01",
            "draft-ietf-foo-bar-03",
            "draft-ietf-foo-bar-02",
            "draft-other-00",
        ]

    def test_several_types(self, sample_index: Index) -> None:
        """Should keep the original order across types."""
        filtered = sample_index.filter_kinds(["bcp", "RFC"])

        assert [key for key, _ in filtered.enumerate()] == ["rfc2119", "bcp14"]

    def test_other(self, sample_index: Index) -> None:
        """Should select documents outside the known series."""
        assert [key for key, _ in sample_index.filter_kinds(["other"]).enumerate()] == ["readme"]


class TestNewest:
    """Test Index.newest."""

    def test_latest_version_only(self, sample_index: Index) -> None:
        """Should keep the highest draft version of every series."""
        keys = [key for key, _ in sample_index.newest(1).enumerate()]

        assert keys == ["rfc2119", "draft-ietf-foo-bar-03", "draft-other-00", "bcp14", "readme"]

    def test_two_versions(self, sample_index: Index) -> None:
        keys = [key for key, _ in sample_index.newest(2).enumerate()]

        assert "draft-ietf-foo-bar-03" in keys
        assert "draft-ietf-foo-bar-02" in keys
        assert "draft-ietf-foo-bar-01" not in keys

    def test_zero_keeps_all(self, sample_index: Index) -> None:
        """Should disable version filtering for counts below one."""
        assert sample_index.newest(0) is sample_index
